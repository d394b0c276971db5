"""User management module.

Users, their category subscriptions and their channel preferences.
"""

from modules.users.errors import DuplicateUserError, UserNotFoundError
from modules.users.schemas import (
    ChannelToggle,
    PreferencesUpdate,
    UserCreate,
    UserProfile,
    UserResponse,
)
from modules.users.service import UserService

__all__ = [
    "ChannelToggle",
    "DuplicateUserError",
    "PreferencesUpdate",
    "UserCreate",
    "UserNotFoundError",
    "UserProfile",
    "UserResponse",
    "UserService",
]
