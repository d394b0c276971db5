"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated

from fastapi import Depends

from infrastructure.configuration import Settings
from infrastructure.notifications import NotificationService
from infrastructure.notifications.feed import FeedBroadcaster
from infrastructure.persistence import CatalogRepository, Database
from infrastructure.services.providers import (
    get_catalog,
    get_database,
    get_feed,
    get_notification_service,
    get_settings,
    get_user_service,
)
from modules.users import UserService

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Database handle owned by the application lifespan
DatabaseDep = Annotated[Database, Depends(get_database)]

# Catalog of categories and channels
CatalogDep = Annotated[CatalogRepository, Depends(get_catalog)]

# Dispatch and delivery log facade
NotificationServiceDep = Annotated[
    NotificationService, Depends(get_notification_service)
]

# User management
UserServiceDep = Annotated[UserService, Depends(get_user_service)]

# Live feed broadcaster
FeedDep = Annotated[FeedBroadcaster, Depends(get_feed)]

__all__ = [
    "SettingsDep",
    "DatabaseDep",
    "CatalogDep",
    "NotificationServiceDep",
    "UserServiceDep",
    "FeedDep",
]
