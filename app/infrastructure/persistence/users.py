"""Recipient resolution for dispatch."""

from typing import List

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from infrastructure.notifications.errors import StorageError
from infrastructure.notifications.models import Recipient
from infrastructure.persistence.database import Database
from infrastructure.persistence.tables import (
    Category,
    CategorySubscription,
    Channel,
    ChannelPreference,
    User,
)

logger = structlog.get_logger()


def to_recipient(user: User) -> Recipient:
    return Recipient(id=str(user.id), name=user.name, email=user.email, phone=user.phone)


class UserResolver:
    """Find the users a message should reach on one channel."""

    def __init__(self, database: Database):
        self.database = database

    def resolve(self, category: str, channel: str) -> List[Recipient]:
        """Users subscribed to the category with the channel enabled.

        Both the category and the channel must be active. Each user
        appears once; results are ordered by name.

        Args:
            category: Category name
            channel: Channel name

        Returns:
            List of Recipient, possibly empty

        Raises:
            StorageError: If the database cannot be queried
        """
        stmt = (
            select(User)
            .join(CategorySubscription, CategorySubscription.user_id == User.id)
            .join(Category, CategorySubscription.category_id == Category.id)
            .join(ChannelPreference, ChannelPreference.user_id == User.id)
            .join(Channel, ChannelPreference.channel_id == Channel.id)
            .where(
                Category.name == category,
                Category.active.is_(True),
                Channel.name == channel,
                Channel.active.is_(True),
                ChannelPreference.enabled.is_(True),
            )
            .distinct()
            .order_by(User.name, User.email)
        )
        try:
            with self.database.session_scope() as session:
                users = session.scalars(stmt).all()
                recipients = [to_recipient(user) for user in users]
        except SQLAlchemyError as e:
            logger.error(
                "recipient_resolution_failed",
                category=category,
                channel=channel,
                error=str(e),
            )
            raise StorageError(f"Failed to resolve recipients: {e}") from e

        logger.debug(
            "recipients_resolved",
            category=category,
            channel=channel,
            count=len(recipients),
        )
        return recipients
