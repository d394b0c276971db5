"""Notification channel implementations."""

from infrastructure.notifications.channels.base import (
    DELIVERY_ERROR,
    INVALID_MESSAGE,
    MISSING_EMAIL,
    MISSING_PHONE,
    NotificationChannel,
)
from infrastructure.notifications.channels.email import EmailChannel
from infrastructure.notifications.channels.factory import (
    CHANNEL_CATALOG,
    create_channel,
    get_available_channels,
    select_channels_for_user,
)
from infrastructure.notifications.channels.push import PushChannel
from infrastructure.notifications.channels.sms import SMSChannel

__all__ = [
    "CHANNEL_CATALOG",
    "DELIVERY_ERROR",
    "INVALID_MESSAGE",
    "MISSING_EMAIL",
    "MISSING_PHONE",
    "NotificationChannel",
    "SMSChannel",
    "EmailChannel",
    "PushChannel",
    "create_channel",
    "get_available_channels",
    "select_channels_for_user",
]
