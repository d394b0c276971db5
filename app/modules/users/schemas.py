from typing import Annotated, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

# Optional leading +, then digits, spaces, dashes and parentheses
PHONE_PATTERN = r"^\+?[0-9\s()-]+$"


class UserCreate(BaseModel):
    """Schema for creating a user, optionally with initial preferences."""

    email: Annotated[
        EmailStr,
        Field(
            ...,
            description="Unique email address",
            json_schema_extra={"example": "alice@example.com"},
        ),
    ]
    name: Annotated[
        str,
        Field(
            ...,
            min_length=1,
            max_length=255,
            description="Display name",
            json_schema_extra={"example": "Alice Martin"},
        ),
    ]
    phone: Annotated[
        Optional[str],
        Field(
            default=None,
            max_length=32,
            pattern=PHONE_PATTERN,
            description="Phone number used for SMS",
            json_schema_extra={"example": "+1 (555) 010-0000"},
        ),
    ] = None
    categories: List[str] = Field(default_factory=list)
    channels: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name cannot be blank")
        return value

    @field_validator("phone", mode="before")
    @classmethod
    def _blank_phone_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value


class PreferencesUpdate(BaseModel):
    """Replacement sets of category subscriptions and enabled channels."""

    categories: List[str] = Field(default_factory=list)
    channels: List[str] = Field(default_factory=list)


class ChannelToggle(BaseModel):
    enabled: bool = True


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    phone: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class UserProfile(UserResponse):
    """User with subscribed categories and enabled channels."""

    categories: List[str] = Field(default_factory=list)
    channels: List[str] = Field(default_factory=list)
