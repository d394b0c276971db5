"""SMS channel implementation (simulated gateway)."""

from typing import Optional

import structlog
from infrastructure.notifications.channels.base import MISSING_PHONE, NotificationChannel
from infrastructure.notifications.models import Message, Recipient
from infrastructure.operations import OperationResult

logger = structlog.get_logger()

# Longest message a single send accepts before the gateway splits it
SMS_MAX_LENGTH = 1600


class SMSChannel(NotificationChannel):
    """SMS notification channel.

    Requires a phone number on the recipient. The number is used as-is;
    format is validated when the user is created, not at send time.
    """

    @property
    def channel_name(self) -> str:
        """Channel identifier."""
        return "SMS"

    def validate_recipient(self, recipient: Recipient) -> OperationResult:
        """Validate recipient phone number.

        Args:
            recipient: Recipient to check.

        Returns:
            OperationResult with destination in data field.
        """
        phone = (recipient.phone or "").strip()
        if not phone:
            return OperationResult.permanent_error(
                message="User has no phone number for SMS delivery",
                error_code=MISSING_PHONE,
            )
        return OperationResult.success(
            message="Phone number validated",
            data={"destination": phone},
        )

    def _deliver(
        self, recipient: Recipient, destination: Optional[str], message: Message
    ) -> None:
        content = message.content or ""
        if len(content) > SMS_MAX_LENGTH:
            logger.warning(
                "sms_message_segmented",
                length=len(content),
                max_length=SMS_MAX_LENGTH,
            )
        logger.info(
            "sms_sent",
            user_id=recipient.id,
            phone=destination,
            category=message.category,
        )
