"""Notification dispatch feature settings."""

from typing import List

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


class DispatchSettings(FeatureSettings):
    """Notification dispatch configuration.

    Environment Variables:
        DISPATCH_CATEGORIES: JSON list of categories seeded at startup
            (default: ["Sports", "Finance", "Movies"])
        SEED_DEMO_DATA: Seed demo users with subscriptions at startup (default: False)
        LOGS_DEFAULT_LIMIT: Page size for log queries when none is given (default: 50)
        LOGS_MAX_LIMIT: Upper bound for a requested page size (default: 500)

    Example:
        ```python
        from infrastructure.services import get_settings

        categories = get_settings().dispatch.DISPATCH_CATEGORIES
        ```
    """

    DISPATCH_CATEGORIES: List[str] = Field(
        default_factory=lambda: ["Sports", "Finance", "Movies"],
        alias="DISPATCH_CATEGORIES",
    )
    SEED_DEMO_DATA: bool = Field(default=False, alias="SEED_DEMO_DATA")
    LOGS_DEFAULT_LIMIT: int = Field(default=50, alias="LOGS_DEFAULT_LIMIT")
    LOGS_MAX_LIMIT: int = Field(default=500, alias="LOGS_MAX_LIMIT")

    @field_validator("DISPATCH_CATEGORIES")
    @classmethod
    def validate_categories(cls, v: List[str]) -> List[str]:
        """Strip names and drop blanks and duplicates, keeping order."""
        cleaned: List[str] = []
        for name in v:
            name = name.strip()
            if name and name not in cleaned:
                cleaned.append(name)
        return cleaned
