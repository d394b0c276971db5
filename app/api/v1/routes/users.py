from typing import List, Optional

from fastapi import APIRouter, status

from infrastructure.services import UserServiceDep
from modules.users import (
    ChannelToggle,
    PreferencesUpdate,
    UserCreate,
    UserProfile,
    UserResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, service: UserServiceDep):
    """
    Register a user with optional initial categories and channels.

    Returns 409 when the email is taken and 400 for unknown category or
    channel names.
    """
    return service.register_user(body)


@router.get("", response_model=List[UserResponse])
def list_users(service: UserServiceDep, search: Optional[str] = None):
    """List users by name, or search name and email (max 50 results)."""
    if search:
        return service.search_users(search)
    return service.list_users()


@router.get("/{user_id}", response_model=UserProfile)
def get_user(user_id: str, service: UserServiceDep):
    return service.get_profile(user_id)


@router.put("/{user_id}/preferences", response_model=UserProfile)
def update_preferences(user_id: str, body: PreferencesUpdate, service: UserServiceDep):
    """Replace the user's category subscriptions and enabled channels."""
    return service.update_preferences(user_id, body.categories, body.channels)


@router.put("/{user_id}/channels/{channel}", response_model=UserProfile)
def set_channel(
    user_id: str, channel: str, body: ChannelToggle, service: UserServiceDep
):
    """Enable or disable a single channel for the user."""
    return service.set_channel_enabled(user_id, channel, body.enabled)
