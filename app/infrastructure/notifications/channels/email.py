"""Email channel implementation (simulated mail transport)."""

from typing import Optional

import structlog
from infrastructure.notifications.channels.base import MISSING_EMAIL, NotificationChannel
from infrastructure.notifications.models import Message, Recipient
from infrastructure.operations import OperationResult

logger = structlog.get_logger()


class EmailChannel(NotificationChannel):
    """Email notification channel.

    Subject line is derived from the message category.
    """

    @property
    def channel_name(self) -> str:
        """Channel identifier."""
        return "Email"

    def validate_recipient(self, recipient: Recipient) -> OperationResult:
        """Validate recipient email address.

        Args:
            recipient: Recipient to check.

        Returns:
            OperationResult with destination in data field.
        """
        email = (recipient.email or "").strip()
        if not email:
            return OperationResult.permanent_error(
                message="User has no email address for Email delivery",
                error_code=MISSING_EMAIL,
            )
        return OperationResult.success(
            message="Email address validated",
            data={"destination": email},
        )

    def _deliver(
        self, recipient: Recipient, destination: Optional[str], message: Message
    ) -> None:
        logger.info(
            "email_sent",
            user_id=recipient.id,
            email=destination,
            subject=f"{message.category} Notification",
        )
