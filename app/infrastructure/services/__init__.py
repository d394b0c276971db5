"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    CatalogDep,
    DatabaseDep,
    FeedDep,
    NotificationServiceDep,
    SettingsDep,
    UserServiceDep,
)
from infrastructure.services.providers import (
    get_catalog,
    get_database,
    get_feed,
    get_notification_service,
    get_settings,
    get_user_service,
)

__all__ = [
    "CatalogDep",
    "DatabaseDep",
    "FeedDep",
    "NotificationServiceDep",
    "SettingsDep",
    "UserServiceDep",
    "get_catalog",
    "get_database",
    "get_feed",
    "get_notification_service",
    "get_settings",
    "get_user_service",
]
