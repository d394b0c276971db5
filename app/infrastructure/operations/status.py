"""Operation status enumeration.

Status codes for operation results, used to classify outcomes of
recipient checks and storage calls so callers can branch on data
instead of catching exceptions.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Operation completed successfully
        VALIDATION_ERROR: Input rejected (bad message, ineligible recipient)
        PERMANENT_ERROR: Non-retryable failure of the operation itself
    """

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    PERMANENT_ERROR = "permanent_error"
