"""User management errors."""

from infrastructure.notifications.errors import NotificationError


class DuplicateUserError(NotificationError):
    """Raised when a user with the same email already exists."""

    error_type = "duplicate_user"


class UserNotFoundError(NotificationError):
    """Raised when a user id or email does not match any user."""

    error_type = "user_not_found"
