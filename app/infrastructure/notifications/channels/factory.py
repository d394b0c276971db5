"""Channel lookup and selection."""

from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Type

from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.email import EmailChannel
from infrastructure.notifications.channels.push import PushChannel
from infrastructure.notifications.channels.sms import SMSChannel
from infrastructure.notifications.errors import InvalidChannelError
from infrastructure.notifications.models import Recipient

# Order in which the dispatcher walks channels.
CHANNEL_CATALOG = ("SMS", "Email", "Push")

_CHANNEL_CLASSES: Dict[str, Type[NotificationChannel]] = {
    "sms": SMSChannel,
    "email": EmailChannel,
    "push": PushChannel,
}


def create_channel(
    name: str, clock: Optional[Callable[[], datetime]] = None
) -> NotificationChannel:
    """Build a channel from its name (case-insensitive).

    Args:
        name: Channel name, e.g. "SMS", "email"
        clock: Optional time source for outcome timestamps

    Returns:
        NotificationChannel instance

    Raises:
        InvalidChannelError: If no channel is registered under the name

    Example:
        channel = create_channel("email")
        assert channel.channel_name == "Email"
    """
    channel_class = _CHANNEL_CLASSES.get((name or "").strip().lower())
    if channel_class is None:
        raise InvalidChannelError(
            f"Invalid notification channel: {name}",
            available_channels=list(CHANNEL_CATALOG),
        )
    return channel_class(clock=clock)


def get_available_channels() -> List[str]:
    """Channel names in dispatch order."""
    return list(CHANNEL_CATALOG)


def select_channels_for_user(
    recipient: Recipient, preferred: Iterable[str]
) -> List[NotificationChannel]:
    """Channels from the preferred names that can reach the recipient.

    Unknown names raise InvalidChannelError.
    """
    selected = []
    for name in preferred:
        channel = create_channel(name)
        if channel.validate_recipient(recipient).is_success:
            selected.append(channel)
    return selected
