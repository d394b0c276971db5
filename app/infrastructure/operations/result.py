"""OperationResult dataclass."""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Outcome of a check or operation that may fail without raising.

    Attributes:
        status: OperationStatus of the outcome
        message: Text suitable for delivery logs and API responses
        data: Optional payload, e.g. ``{"destination": "+15551234"}``
        error_code: Optional machine code such as ``MISSING_PHONE``
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Failed result with an explicit status."""
        return cls(status=status, message=message, error_code=error_code, data=data)

    @classmethod
    def validation_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """The input itself is unusable (blank content, missing category)."""
        return cls.error(OperationStatus.VALIDATION_ERROR, message, error_code)

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """The operation cannot succeed for this input, e.g. a recipient
        without the contact detail a channel needs.
        """
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)
