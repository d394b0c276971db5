"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the
notification dispatch service using Pydantic BaseSettings with
domain-based organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    DatabaseSettings: Database settings class (for testing)
    DispatchSettings: Dispatch feature settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    # Access settings
    database_url = settings.database.DATABASE_URL
    categories = settings.dispatch.DISPATCH_CATEGORIES

    # Check environment
    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.infrastructure.database import DatabaseSettings
from infrastructure.configuration.features.dispatch import DispatchSettings

__all__ = ["Settings", "DatabaseSettings", "DispatchSettings"]
