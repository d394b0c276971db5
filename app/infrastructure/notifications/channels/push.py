"""Push channel implementation (simulated push service)."""

from typing import Optional

import structlog
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import Message, Recipient
from infrastructure.operations import OperationResult

logger = structlog.get_logger()


class PushChannel(NotificationChannel):
    """Push notification channel.

    Every user with an enabled preference is eligible; device
    registration is not modelled.
    """

    @property
    def channel_name(self) -> str:
        """Channel identifier."""
        return "Push"

    def validate_recipient(self, recipient: Recipient) -> OperationResult:
        return OperationResult.success(message="Push recipient accepted")

    def _deliver(
        self, recipient: Recipient, destination: Optional[str], message: Message
    ) -> None:
        logger.info(
            "push_sent",
            user_id=recipient.id,
            title=f"{message.category} Update",
        )
