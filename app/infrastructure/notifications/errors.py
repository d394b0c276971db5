"""Exceptions raised by the notification dispatch system.

Only truly exceptional conditions are raised. Per-attempt delivery
failures are never raised; they are returned as DeliveryOutcome values
with status FAILED.
"""

from typing import Any


class NotificationError(Exception):
    """Base class for notification dispatch errors.

    Attributes:
        message: Human-readable description, safe to return to API clients.
        error_type: Machine-readable discriminator used in error results.
        context: Extra structured details (e.g. valid_categories).
    """

    error_type = "notification_error"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context


class ValidationError(NotificationError):
    """Raised when caller input is malformed (bad category, empty content)."""

    error_type = "validation_error"


class InvalidChannelError(NotificationError):
    """Raised when an unknown channel name is requested.

    This is a configuration or programming error, not a delivery outcome.
    """

    error_type = "invalid_channel"


class StorageError(NotificationError):
    """Raised when the persistence layer cannot complete an operation."""

    error_type = "storage_error"
