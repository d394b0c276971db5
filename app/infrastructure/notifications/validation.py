"""Validation functions for dispatch input.

Pure checks with no side effects. Each raises ValidationError with a
message suitable for returning to API clients, or returns None.
"""

from typing import Iterable, Optional

from infrastructure.notifications.errors import ValidationError
from infrastructure.notifications.models import Message


def validate_category(name: Optional[str], valid_categories: Iterable[str]) -> None:
    """Validate that the category is one of the active categories.

    Raises:
        ValidationError: If the name is missing or not an active category.
            ``context["valid_categories"]`` lists the accepted names.
    """
    valid = sorted(set(valid_categories))
    if not name or name not in valid:
        raise ValidationError(
            f"Invalid category: {name}",
            valid_categories=valid,
        )


def validate_content(text: Optional[str]) -> None:
    """Validate that message content is not null, empty or whitespace-only.

    Raises:
        ValidationError: If the content is blank.
    """
    if text is None or not str(text).strip():
        raise ValidationError("Message content cannot be empty")


def validate_message(message: Message, valid_categories: Iterable[str]) -> None:
    """Run the category and content checks for a message."""
    validate_category(message.category, valid_categories)
    validate_content(message.content)
