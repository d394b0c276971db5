"""Notification dispatch system.

Public API:
    - NotificationDispatcher: fan-out delivery with audit logging
    - NotificationService: DI facade for sends and log queries
    - Channels: SMSChannel, EmailChannel, PushChannel and create_channel
    - Models: Message, Recipient, DeliveryOutcome, DispatchResult, ...
    - Errors: NotificationError, ValidationError, InvalidChannelError, StorageError
"""

from infrastructure.notifications.channels import (
    CHANNEL_CATALOG,
    EmailChannel,
    NotificationChannel,
    PushChannel,
    SMSChannel,
    create_channel,
    get_available_channels,
    select_channels_for_user,
)
from infrastructure.notifications.dispatcher import (
    NotificationDispatcher,
    build_log_entry,
)
from infrastructure.notifications.errors import (
    InvalidChannelError,
    NotificationError,
    StorageError,
    ValidationError,
)
from infrastructure.notifications.models import (
    DeliveryLogEntry,
    DeliveryLogView,
    DeliveryOutcome,
    DeliveryStatus,
    DispatchResult,
    DispatchSummary,
    LogPage,
    LogStatistics,
    Message,
    Recipient,
    format_timestamp,
)
from infrastructure.notifications.service import NotificationService
from infrastructure.notifications.validation import (
    validate_category,
    validate_content,
    validate_message,
)

__all__ = [
    # Dispatch
    "NotificationDispatcher",
    "NotificationService",
    "build_log_entry",
    # Channels
    "CHANNEL_CATALOG",
    "NotificationChannel",
    "SMSChannel",
    "EmailChannel",
    "PushChannel",
    "create_channel",
    "get_available_channels",
    "select_channels_for_user",
    # Models
    "DeliveryLogEntry",
    "DeliveryLogView",
    "DeliveryOutcome",
    "DeliveryStatus",
    "DispatchResult",
    "DispatchSummary",
    "LogPage",
    "LogStatistics",
    "Message",
    "Recipient",
    "format_timestamp",
    # Errors
    "NotificationError",
    "ValidationError",
    "InvalidChannelError",
    "StorageError",
    # Validation
    "validate_category",
    "validate_content",
    "validate_message",
]
