"""Result values for checks whose failure is an expected outcome.

Channels return these from recipient and message checks so a missing
phone number or email address is handled as data rather than raised.
"""

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = ["OperationResult", "OperationStatus"]
