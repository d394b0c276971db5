"""SQLAlchemy table definitions.

Users subscribe to categories and enable channels; every delivery
attempt is recorded in ``notifications``. Identifiers are UUIDs stored
with the generic ``Uuid`` type so SQLite and PostgreSQL both work.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, declared_attr, relationship


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class UUIDModel:
    """Mixin for adding UUID primary key"""

    @declared_attr
    def id(cls):
        return Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)


class TimestampedModel:
    """Mixin for adding created_at and updated_at timestamps"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), nullable=False, default=_utc_now)

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            nullable=False,
            default=_utc_now,
            onupdate=_utc_now,
        )


class User(Base, UUIDModel, TimestampedModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)

    subscriptions = relationship(
        "CategorySubscription", back_populates="user", cascade="all, delete-orphan"
    )
    channel_preferences = relationship(
        "ChannelPreference", back_populates="user", cascade="all, delete-orphan"
    )


class Category(Base, UUIDModel):
    __tablename__ = "categories"

    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)


class Channel(Base, UUIDModel):
    __tablename__ = "notification_channels"

    name = Column(String(50), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)


class CategorySubscription(Base, UUIDModel):
    __tablename__ = "user_category_subscriptions"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(
        Uuid, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )
    subscribed_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)

    user = relationship("User", back_populates="subscriptions")
    category = relationship("Category")

    __table_args__ = (
        UniqueConstraint("user_id", "category_id", name="uq_user_category"),
    )


class ChannelPreference(Base, UUIDModel, TimestampedModel):
    __tablename__ = "user_channel_preferences"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    channel_id = Column(
        Uuid, ForeignKey("notification_channels.id", ondelete="CASCADE"), nullable=False
    )
    enabled = Column(Boolean, nullable=False, default=True)

    user = relationship("User", back_populates="channel_preferences")
    channel = relationship("Channel")

    __table_args__ = (
        UniqueConstraint("user_id", "channel_id", name="uq_user_channel"),
    )


class NotificationLog(Base, UUIDModel):
    """One row per delivery attempt. Rows are never updated."""

    __tablename__ = "notifications"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(
        Uuid, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False
    )
    channel = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    content = Column(Text, nullable=False)
    # JSON text; decoded leniently on read
    details = Column("metadata", Text, nullable=False, default="{}")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utc_now)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    read_at = Column(DateTime(timezone=True), nullable=True)
    error_message = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_notifications_user_id", "user_id"),
        Index("idx_notifications_status", "status"),
        Index("idx_notifications_channel", "channel"),
        Index("idx_notifications_created_at", "created_at"),
        Index("idx_notifications_category_id", "category_id"),
    )
