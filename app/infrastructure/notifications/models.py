"""Notification system core models.

Pydantic models shared by channels, the dispatcher, the audit log store
and the API layer.

Timestamps are kept as datetime objects internally and rendered as
ISO-8601 UTC strings whenever a model is serialized
(``model_dump(mode="json")``), so nothing opaque leaves the service.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_serializer


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime as an ISO-8601 UTC string.

    Naive datetimes (as returned by SQLite) are assumed to be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class DeliveryStatus(Enum):
    """Delivery log status.

    Only SENT and FAILED are produced by the dispatcher. PENDING and
    DELIVERED exist in the schema but no code path transitions an entry
    after it is written.
    """

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"


class Message(BaseModel):
    """Transient operator message.

    Deliberately unvalidated: channels and the validation layer decide
    what is acceptable so malformed messages can still be reported as
    outcomes.
    """

    category: Optional[str] = None
    content: Optional[str] = None


class Recipient(BaseModel):
    """A user resolved as a delivery target.

    Attributes:
        id: Opaque user identifier (UUID string)
        name: Display name
        email: Email address, required by the Email channel
        phone: Phone number, required by the SMS channel
    """

    id: str
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None


class DeliveryOutcome(BaseModel):
    """Result of one delivery attempt for one user through one channel.

    Attributes:
        channel: Channel name ("SMS", "Email", "Push")
        user_id: Recipient identifier
        category: Message category
        status: SENT or FAILED
        destination: Phone number or email address used, when applicable
        content: Content delivered (success only)
        error: Human-readable failure reason (failure only)
        error_code: Machine-readable failure code (failure only)
        timestamp: When the attempt completed
        logged: False when the audit entry for this attempt could not be written
    """

    channel: str
    user_id: str
    category: Optional[str] = None
    status: DeliveryStatus
    destination: Optional[str] = None
    content: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)
    logged: bool = True

    @property
    def is_success(self) -> bool:
        """Check if delivery was successful."""
        return self.status == DeliveryStatus.SENT

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> Optional[str]:
        return format_timestamp(value)


class DispatchSummary(BaseModel):
    """Aggregate counts for one dispatch batch."""

    total_attempts: int = 0
    successful: int = 0
    failed: int = 0
    unlogged: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: List[DeliveryOutcome]) -> "DispatchSummary":
        return cls(
            total_attempts=len(outcomes),
            successful=sum(1 for o in outcomes if o.status == DeliveryStatus.SENT),
            failed=sum(1 for o in outcomes if o.status == DeliveryStatus.FAILED),
            unlogged=sum(1 for o in outcomes if not o.logged),
        )


class DispatchResult(BaseModel):
    """Structured result of a dispatch call.

    ``status`` is the discriminator: "completed" carries results and a
    summary, "error" carries error_type and a message.
    """

    status: str
    message: str
    results: List[DeliveryOutcome] = Field(default_factory=list)
    summary: Optional[DispatchSummary] = None
    error_type: Optional[str] = None
    valid_categories: Optional[List[str]] = None
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def is_success(self) -> bool:
        return self.status == "completed"

    @classmethod
    def completed(
        cls, outcomes: List[DeliveryOutcome], timestamp: Optional[datetime] = None
    ) -> "DispatchResult":
        return cls(
            status="completed",
            message="Notification processing completed",
            results=outcomes,
            summary=DispatchSummary.from_outcomes(outcomes),
            timestamp=timestamp or utc_now(),
        )

    @classmethod
    def error(
        cls,
        message: str,
        error_type: str,
        valid_categories: Optional[List[str]] = None,
        timestamp: Optional[datetime] = None,
    ) -> "DispatchResult":
        return cls(
            status="error",
            message=message,
            error_type=error_type,
            valid_categories=valid_categories,
            timestamp=timestamp or utc_now(),
        )

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict for API responses and WebSocket broadcasts."""
        return self.model_dump(mode="json", exclude_none=True)

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> Optional[str]:
        return format_timestamp(value)


class DeliveryLogEntry(BaseModel):
    """Audit record written once per delivery attempt.

    Entries are immutable once written.
    """

    user_id: str
    category: str
    channel: str
    status: DeliveryStatus
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    sent_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    error_message: Optional[str] = None


class LogUser(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class DeliveryLogView(BaseModel):
    """Read model of a stored delivery log entry, joined with user and category.

    All timestamps are already rendered as ISO-8601 strings.
    """

    id: Optional[str] = None
    user: LogUser = Field(default_factory=LogUser)
    category: Optional[str] = None
    channel: Optional[str] = None
    status: Optional[str] = None
    content: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[str] = None
    sent_at: Optional[str] = None
    delivered_at: Optional[str] = None
    read_at: Optional[str] = None
    error_message: Optional[str] = None


class ChannelCount(BaseModel):
    channel: str
    count: int


class CategoryCount(BaseModel):
    category: str
    count: int


class LogStatistics(BaseModel):
    """Aggregate statistics over the whole delivery log.

    successful + failed + pending == total_notifications.
    """

    total_notifications: int = 0
    successful: int = 0
    failed: int = 0
    pending: int = 0
    channels_used: int = 0
    categories_used: int = 0
    by_channel: List[ChannelCount] = Field(default_factory=list)
    by_category: List[CategoryCount] = Field(default_factory=list)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int


class LogPage(BaseModel):
    logs: List[DeliveryLogView] = Field(default_factory=list)
    pagination: Pagination
