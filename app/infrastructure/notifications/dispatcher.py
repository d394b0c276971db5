"""Notification dispatcher with per-channel fan-out and audit logging.

For one operator message the dispatcher:
- Validates the category against the active catalog and the content
- Walks the channels in catalog order (SMS, Email, Push)
- Resolves subscribed users with the channel enabled
- Delivers to each user independently and records one audit entry per attempt

A failure for one user never stops delivery to the others, and a failed
audit write is reported on the outcome rather than aborting the batch.

Usage Example:
    from infrastructure.notifications import Message, NotificationDispatcher

    dispatcher = NotificationDispatcher(
        resolver=UserResolver(database),
        log_store=DeliveryLogStore(database),
        catalog=CatalogRepository(database),
    )

    result = dispatcher.dispatch(Message(category="Finance", content="Rates up"))
    logger.info("dispatched", successful=result.summary.successful)
"""

from datetime import datetime
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

import structlog
from infrastructure.logging import bind_dispatch_context
from infrastructure.notifications.channels import CHANNEL_CATALOG, create_channel
from infrastructure.notifications.errors import (
    NotificationError,
    StorageError,
    ValidationError,
)
from infrastructure.notifications.models import (
    DeliveryLogEntry,
    DeliveryOutcome,
    DeliveryStatus,
    DispatchResult,
    Message,
    Recipient,
    utc_now,
)
from infrastructure.notifications.validation import validate_message

if TYPE_CHECKING:
    from infrastructure.persistence.catalog import CatalogRepository
    from infrastructure.persistence.delivery_log import DeliveryLogStore
    from infrastructure.persistence.users import UserResolver

logger = structlog.get_logger()


def build_log_entry(
    outcome: DeliveryOutcome, recipient: Recipient, message: Message
) -> DeliveryLogEntry:
    """Build the audit record for one delivery attempt.

    Args:
        outcome: Result returned by the channel
        recipient: User the attempt targeted
        message: Message that was dispatched

    Returns:
        DeliveryLogEntry with a content snapshot and contact metadata
    """
    metadata = {
        "delivery_method": outcome.channel,
        "notification_type": message.category,
        "user_name": recipient.name,
        "user_email": recipient.email,
        "user_phone": recipient.phone,
    }
    if outcome.status == DeliveryStatus.FAILED:
        metadata["error_details"] = outcome.error
        metadata["error_code"] = outcome.error_code

    return DeliveryLogEntry(
        user_id=recipient.id,
        category=message.category or "",
        channel=outcome.channel,
        status=outcome.status,
        content=message.content or "",
        metadata=metadata,
        created_at=outcome.timestamp,
        sent_at=outcome.timestamp if outcome.is_success else None,
        error_message=outcome.error,
    )


class NotificationDispatcher:
    """Fan a message out to every subscribed user on every enabled channel.

    Attributes:
        resolver: Finds the users to notify for a category and channel
        log_store: Persists one DeliveryLogEntry per attempt
        catalog: Source of active category names
        channel_order: Channel names to walk, in order
        clock: Time source for outcome timestamps

    Example:
        dispatcher = NotificationDispatcher(resolver, log_store, catalog)
        result = dispatcher.dispatch(Message(category="Sports", content="Goal!"))
        if result.status == "error":
            logger.warning("dispatch_rejected", error_type=result.error_type)
    """

    def __init__(
        self,
        resolver: "UserResolver",
        log_store: "DeliveryLogStore",
        catalog: "CatalogRepository",
        channel_order: Optional[Sequence[str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the dispatcher.

        Raises:
            InvalidChannelError: If channel_order names an unknown channel.
        """
        self.resolver = resolver
        self.log_store = log_store
        self.catalog = catalog
        self.clock = clock or utc_now
        self.channel_order = list(channel_order or CHANNEL_CATALOG)
        for name in self.channel_order:
            create_channel(name)

    def dispatch(self, message: Message) -> DispatchResult:
        """Deliver a message to all eligible users.

        Never raises. Validation problems, storage outages and unexpected
        errors are returned as a DispatchResult with status "error".

        Args:
            message: Operator message with category and content

        Returns:
            DispatchResult with per-attempt outcomes and a summary
        """
        with bind_dispatch_context(message.category or ""):
            try:
                return self._dispatch(message)
            except ValidationError as e:
                logger.warning("dispatch_rejected", error=e.message)
                return DispatchResult.error(
                    message=e.message,
                    error_type=e.error_type,
                    valid_categories=e.context.get("valid_categories"),
                    timestamp=self.clock(),
                )
            except NotificationError as e:
                logger.error(
                    "dispatch_failed", error=e.message, error_type=e.error_type
                )
                return DispatchResult.error(
                    message=e.message,
                    error_type=e.error_type,
                    timestamp=self.clock(),
                )
            except Exception as e:
                logger.exception("dispatch_failed_unexpectedly", error=str(e))
                return DispatchResult.error(
                    message=f"Failed to process notification: {e}",
                    error_type="unknown_error",
                    timestamp=self.clock(),
                )

    def _dispatch(self, message: Message) -> DispatchResult:
        validate_message(message, self.catalog.active_category_names())

        logger.info("dispatch_started", channels=self.channel_order)
        outcomes: List[DeliveryOutcome] = []
        for channel_name in self.channel_order:
            recipients = self.resolver.resolve(message.category, channel_name)
            if not recipients:
                continue
            logger.info(
                "delivering_via_channel",
                channel=channel_name,
                recipient_count=len(recipients),
            )
            for recipient in recipients:
                outcomes.append(self._deliver_one(channel_name, recipient, message))

        result = DispatchResult.completed(outcomes, timestamp=self.clock())
        logger.info(
            "dispatch_completed",
            total_attempts=result.summary.total_attempts,
            successful=result.summary.successful,
            failed=result.summary.failed,
            unlogged=result.summary.unlogged,
        )
        return result

    def _deliver_one(
        self, channel_name: str, recipient: Recipient, message: Message
    ) -> DeliveryOutcome:
        channel = create_channel(channel_name, clock=self.clock)
        outcome = channel.send(recipient, message)
        try:
            self.log_store.save(build_log_entry(outcome, recipient, message))
        except StorageError as e:
            logger.error(
                "delivery_log_write_failed",
                channel=channel_name,
                user_id=recipient.id,
                error=e.message,
            )
            outcome = outcome.model_copy(update={"logged": False})
        return outcome
