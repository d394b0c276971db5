"""Delivery log store.

Append-only audit trail of delivery attempts backed by the
``notifications`` table. Reads join users and categories and are
normalized into DeliveryLogView records by ``normalize_log_row``.

Every write runs in its own transaction, so concurrent dispatches can
share one store without application-level locking.
"""

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import structlog
from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select

from infrastructure.notifications.errors import StorageError
from infrastructure.notifications.models import (
    CategoryCount,
    ChannelCount,
    DeliveryLogEntry,
    DeliveryLogView,
    DeliveryStatus,
    LogStatistics,
    LogUser,
    format_timestamp,
)
from infrastructure.persistence.database import Database
from infrastructure.persistence.tables import Category, NotificationLog, User

logger = structlog.get_logger()

# Alternative spellings a joined row may use for each field, in lookup order.
_ROW_KEYS = {
    "id": ("id", "notifications.id", "notifications_id"),
    "user_id": ("user_id", "notifications.user_id", "users.id"),
    "user_name": ("user_name", "users.user_name", "users.name"),
    "user_email": ("user_email", "users.user_email", "users.email"),
    "user_phone": ("user_phone", "users.user_phone", "users.phone"),
    "category": (
        "category_name",
        "categories.category_name",
        "categories.name",
        "category",
    ),
    "channel": ("channel", "notifications.channel"),
    "status": ("status", "notifications.status"),
    "content": ("content", "notifications.content"),
    "metadata": ("metadata", "notifications.metadata", "details"),
    "created_at": ("created_at", "notifications.created_at"),
    "sent_at": ("sent_at", "notifications.sent_at"),
    "delivered_at": ("delivered_at", "notifications.delivered_at"),
    "read_at": ("read_at", "notifications.read_at"),
    "error_message": ("error_message", "notifications.error_message"),
}


def _pick(row: Mapping[str, Any], field: str) -> Any:
    for key in _ROW_KEYS[field]:
        if key in row:
            return row[key]
    return None


def parse_metadata(raw: Any) -> Dict[str, Any]:
    """Decode stored metadata, falling back to {} for anything unusable."""
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str):
        return {}
    try:
        value = json.loads(raw)
    except ValueError:
        return {}
    return value if isinstance(value, dict) else {}


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert to UTC before writing; some backends drop the offset."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _as_timestamp(value: Any) -> Optional[str]:
    if isinstance(value, datetime):
        return format_timestamp(value)
    return _as_text(value)


def normalize_log_row(row: Mapping[str, Any]) -> DeliveryLogView:
    """Map a joined storage row to a DeliveryLogView.

    Accepts plain aliased keys (``user_name``) as well as table-qualified
    ones (``users.name``). Missing, malformed or non-object metadata
    becomes an empty dict; timestamps are rendered as ISO-8601 UTC.

    Args:
        row: Mapping of column keys to values

    Returns:
        DeliveryLogView

    Example:
        view = normalize_log_row({"id": "n1", "users.name": "Alice", "metadata": "{bad"})
        assert view.user.name == "Alice" and view.metadata == {}
    """
    return DeliveryLogView(
        id=_as_text(_pick(row, "id")),
        user=LogUser(
            id=_as_text(_pick(row, "user_id")),
            name=_pick(row, "user_name"),
            email=_pick(row, "user_email"),
            phone=_pick(row, "user_phone"),
        ),
        category=_pick(row, "category"),
        channel=_pick(row, "channel"),
        status=_pick(row, "status"),
        content=_pick(row, "content"),
        metadata=parse_metadata(_pick(row, "metadata")),
        timestamp=_as_timestamp(_pick(row, "created_at")),
        sent_at=_as_timestamp(_pick(row, "sent_at")),
        delivered_at=_as_timestamp(_pick(row, "delivered_at")),
        read_at=_as_timestamp(_pick(row, "read_at")),
        error_message=_pick(row, "error_message"),
    )


def _parse_user_id(user_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(user_id))
    except ValueError as e:
        raise StorageError(f"Invalid user id: {user_id}") from e


class DeliveryLogStore:
    """Persist and query delivery log entries.

    Attributes:
        database: Database the store reads and writes

    Example:
        store = DeliveryLogStore(database)
        store.save(entry)
        newest = store.list_paginated(offset=0, limit=20)
    """

    def __init__(self, database: Database):
        self.database = database

    def save(self, entry: DeliveryLogEntry) -> DeliveryLogView:
        """Write one entry in its own transaction.

        Raises:
            StorageError: If the category is unknown or the write fails.
                Nothing is written in that case.
        """
        user_id = _parse_user_id(entry.user_id)
        try:
            with self.database.session_scope() as session:
                category_id = session.scalar(
                    select(Category.id).where(Category.name == entry.category)
                )
                if category_id is None:
                    raise StorageError(f"Unknown category: {entry.category}")
                record = NotificationLog(
                    user_id=user_id,
                    category_id=category_id,
                    channel=entry.channel,
                    status=entry.status.value,
                    content=entry.content,
                    details=json.dumps(entry.metadata, default=str),
                    created_at=_to_utc(entry.created_at),
                    sent_at=_to_utc(entry.sent_at),
                    delivered_at=_to_utc(entry.delivered_at),
                    read_at=_to_utc(entry.read_at),
                    error_message=entry.error_message,
                )
                session.add(record)
                session.flush()
                row = (
                    session.execute(self._base_query().where(NotificationLog.id == record.id))
                    .mappings()
                    .one()
                )
                view = normalize_log_row(row)
        except SQLAlchemyError as e:
            logger.error("delivery_log_save_failed", error=str(e))
            raise StorageError(f"Failed to save delivery log entry: {e}") from e

        logger.debug("delivery_log_saved", log_id=view.id, status=entry.status.value)
        return view

    def get(self, log_id: str) -> DeliveryLogView:
        """Fetch a single entry by id.

        Raises:
            StorageError: If the entry does not exist or cannot be read.
        """
        try:
            key = uuid.UUID(str(log_id))
        except ValueError as e:
            raise StorageError(f"Invalid log id: {log_id}") from e
        rows = self._fetch(self._base_query().where(NotificationLog.id == key))
        if not rows:
            raise StorageError(f"Delivery log entry not found: {log_id}")
        return rows[0]

    def list(self) -> List[DeliveryLogView]:
        """All entries, newest first."""
        return self._fetch(self._base_query())

    def list_paginated(
        self, offset: int = 0, limit: Optional[int] = None
    ) -> List[DeliveryLogView]:
        return self._fetch(self._base_query(), offset=offset, limit=limit)

    def list_by_user(
        self, user_id: str, offset: int = 0, limit: Optional[int] = None
    ) -> List[DeliveryLogView]:
        stmt = self._base_query().where(
            NotificationLog.user_id == _parse_user_id(user_id)
        )
        return self._fetch(stmt, offset=offset, limit=limit)

    def list_by_category(
        self, name: str, offset: int = 0, limit: Optional[int] = None
    ) -> List[DeliveryLogView]:
        stmt = self._base_query().where(Category.name == name)
        return self._fetch(stmt, offset=offset, limit=limit)

    def list_by_status(
        self, status: str, offset: int = 0, limit: Optional[int] = None
    ) -> List[DeliveryLogView]:
        stmt = self._base_query().where(NotificationLog.status == status)
        return self._fetch(stmt, offset=offset, limit=limit)

    def count(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> int:
        """Number of entries matching every given filter."""
        stmt = select(func.count(NotificationLog.id)).join(
            Category, NotificationLog.category_id == Category.id
        )
        if status:
            stmt = stmt.where(NotificationLog.status == status)
        if category:
            stmt = stmt.where(Category.name == category)
        if user_id:
            stmt = stmt.where(NotificationLog.user_id == _parse_user_id(user_id))
        try:
            with self.database.session_scope() as session:
                return session.scalar(stmt) or 0
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count delivery log entries: {e}") from e

    def statistics(self) -> LogStatistics:
        """Aggregate counts over the whole log.

        ``successful`` counts both sent and delivered entries.
        """
        successful_statuses = (DeliveryStatus.SENT.value, DeliveryStatus.DELIVERED.value)
        totals_stmt = select(
            func.count(NotificationLog.id),
            func.sum(case((NotificationLog.status.in_(successful_statuses), 1), else_=0)),
            func.sum(
                case((NotificationLog.status == DeliveryStatus.FAILED.value, 1), else_=0)
            ),
            func.sum(
                case((NotificationLog.status == DeliveryStatus.PENDING.value, 1), else_=0)
            ),
            func.count(func.distinct(NotificationLog.channel)),
            func.count(func.distinct(NotificationLog.category_id)),
        )
        channel_count = func.count(NotificationLog.id).label("count")
        by_channel_stmt = (
            select(NotificationLog.channel, channel_count)
            .group_by(NotificationLog.channel)
            .order_by(channel_count.desc(), NotificationLog.channel)
        )
        category_count = func.count(NotificationLog.id).label("count")
        by_category_stmt = (
            select(Category.name, category_count)
            .join(NotificationLog, NotificationLog.category_id == Category.id)
            .group_by(Category.name)
            .order_by(category_count.desc(), Category.name)
        )
        try:
            with self.database.session_scope() as session:
                total, successful, failed, pending, channels, categories = (
                    session.execute(totals_stmt).one()
                )
                by_channel = session.execute(by_channel_stmt).all()
                by_category = session.execute(by_category_stmt).all()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to compute log statistics: {e}") from e

        return LogStatistics(
            total_notifications=total or 0,
            successful=successful or 0,
            failed=failed or 0,
            pending=pending or 0,
            channels_used=channels or 0,
            categories_used=categories or 0,
            by_channel=[ChannelCount(channel=c, count=n) for c, n in by_channel],
            by_category=[CategoryCount(category=c, count=n) for c, n in by_category],
        )

    @staticmethod
    def _base_query() -> Select:
        return (
            select(
                NotificationLog.id.label("id"),
                NotificationLog.user_id.label("user_id"),
                User.name.label("user_name"),
                User.email.label("user_email"),
                User.phone.label("user_phone"),
                Category.name.label("category_name"),
                NotificationLog.channel.label("channel"),
                NotificationLog.status.label("status"),
                NotificationLog.content.label("content"),
                NotificationLog.details.label("metadata"),
                NotificationLog.created_at.label("created_at"),
                NotificationLog.sent_at.label("sent_at"),
                NotificationLog.delivered_at.label("delivered_at"),
                NotificationLog.read_at.label("read_at"),
                NotificationLog.error_message.label("error_message"),
            )
            .join(User, NotificationLog.user_id == User.id)
            .join(Category, NotificationLog.category_id == Category.id)
            .order_by(NotificationLog.created_at.desc(), NotificationLog.id.desc())
        )

    def _fetch(
        self, stmt: Select, offset: int = 0, limit: Optional[int] = None
    ) -> List[DeliveryLogView]:
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            with self.database.session_scope() as session:
                rows = session.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            logger.error("delivery_log_read_failed", error=str(e))
            raise StorageError(f"Failed to read delivery log: {e}") from e
        return [normalize_log_row(row) for row in rows]
