"""Notification channel abstract base class.

All channel implementations (SMS, Email, Push) must implement this interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional

import structlog
from infrastructure.notifications.models import (
    DeliveryOutcome,
    DeliveryStatus,
    Message,
    Recipient,
    utc_now,
)
from infrastructure.operations import OperationResult

logger = structlog.get_logger()

INVALID_MESSAGE = "INVALID_MESSAGE"
MISSING_PHONE = "MISSING_PHONE"
MISSING_EMAIL = "MISSING_EMAIL"
DELIVERY_ERROR = "DELIVERY_ERROR"


class NotificationChannel(ABC):
    """Abstract base class for notification channels.

    Each channel handles delivery through a specific medium:
    - SMSChannel: text message to the user's phone number
    - EmailChannel: email to the user's address
    - PushChannel: push notification to the user's devices

    Delivery is simulated; no external gateway is contacted. Channels are
    stateless apart from the injected clock, so one instance may be used
    for any number of recipients.

    Example Implementation:
        class FaxChannel(NotificationChannel):

            @property
            def channel_name(self) -> str:
                return "Fax"

            def validate_recipient(self, recipient: Recipient) -> OperationResult:
                if not recipient.fax:
                    return OperationResult.permanent_error(
                        message="Fax number required", error_code="MISSING_FAX"
                    )
                return OperationResult.success(data={"destination": recipient.fax})

            def _deliver(self, recipient, destination, message) -> None:
                logger.info("fax_sent", destination=destination)
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utc_now

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Channel identifier (SMS, Email, Push).

        Returns:
            Channel name string for routing and logging
        """
        pass

    @abstractmethod
    def validate_recipient(self, recipient: Recipient) -> OperationResult:
        """Check that the recipient can be reached through this channel.

        Args:
            recipient: Resolved user

        Returns:
            OperationResult with the destination in the data field
            - Success: OperationResult(status=SUCCESS, data={"destination": "+15551234"})
            - Ineligible: OperationResult(status=PERMANENT_ERROR, error_code="MISSING_PHONE")
        """
        pass

    @abstractmethod
    def _deliver(
        self, recipient: Recipient, destination: Optional[str], message: Message
    ) -> None:
        """Perform the (simulated) delivery.

        Raising here is turned into a DELIVERY_ERROR outcome by send().
        """
        pass

    def validate_message(self, message: Message) -> OperationResult:
        """Check the message carries content and a category."""
        if message.content is None or not message.content.strip():
            return OperationResult.validation_error(
                message="Message content cannot be empty",
                error_code=INVALID_MESSAGE,
            )
        if not message.category:
            return OperationResult.validation_error(
                message="Message category is required",
                error_code=INVALID_MESSAGE,
            )
        return OperationResult.success(message="Message is valid")

    def send(self, recipient: Recipient, message: Message) -> DeliveryOutcome:
        """Deliver a message to one recipient.

        Never raises. Invalid messages, ineligible recipients and delivery
        errors are all returned as outcomes with FAILED status.

        Args:
            recipient: Resolved user
            message: Message to deliver

        Returns:
            DeliveryOutcome with SENT or FAILED status

        Example:
            outcome = SMSChannel().send(recipient, message)
            if not outcome.is_success:
                logger.warning("delivery_failed", error_code=outcome.error_code)
        """
        check = self.validate_message(message)
        if not check.is_success:
            return self._failed(recipient, message, check.message, check.error_code)

        resolved = self.validate_recipient(recipient)
        if not resolved.is_success:
            return self._failed(
                recipient, message, resolved.message, resolved.error_code
            )

        destination = (resolved.data or {}).get("destination")
        try:
            self._deliver(recipient, destination, message)
        except Exception as e:
            logger.error(
                "channel_delivery_error",
                channel=self.channel_name,
                user_id=recipient.id,
                error=str(e),
            )
            return self._failed(recipient, message, str(e), DELIVERY_ERROR)

        return DeliveryOutcome(
            channel=self.channel_name,
            user_id=recipient.id,
            category=message.category,
            status=DeliveryStatus.SENT,
            destination=destination,
            content=message.content,
            timestamp=self._clock(),
        )

    def _failed(
        self,
        recipient: Recipient,
        message: Message,
        error: str,
        error_code: Optional[str],
    ) -> DeliveryOutcome:
        logger.warning(
            "delivery_rejected",
            channel=self.channel_name,
            user_id=recipient.id,
            error_code=error_code,
        )
        return DeliveryOutcome(
            channel=self.channel_name,
            user_id=recipient.id,
            category=message.category,
            status=DeliveryStatus.FAILED,
            error=error,
            error_code=error_code,
            timestamp=self._clock(),
        )
