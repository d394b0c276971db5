"""User management service.

Creates users and manages their category subscriptions and channel
preferences. These are the rows the dispatcher's UserResolver reads.
"""

import uuid
from contextlib import contextmanager
from typing import Dict, Generator, Iterable, List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import StorageError, ValidationError
from infrastructure.notifications.models import format_timestamp
from infrastructure.persistence.database import Database
from infrastructure.persistence.tables import (
    Category,
    CategorySubscription,
    Channel,
    ChannelPreference,
    User,
)
from modules.users.errors import DuplicateUserError, UserNotFoundError
from modules.users.schemas import UserCreate, UserProfile, UserResponse

logger = get_module_logger()

SEARCH_LIMIT = 50


@contextmanager
def _guarded_session(database: Database) -> Generator[Session, None, None]:
    """Session scope that converts SQLAlchemy errors to service errors."""
    try:
        with database.session_scope() as session:
            yield session
    except IntegrityError as e:
        raise DuplicateUserError("User with this email already exists") from e
    except SQLAlchemyError as e:
        logger.error("user_store_error", error=str(e))
        raise StorageError(f"User store error: {e}") from e


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        name=user.name,
        phone=user.phone,
        created_at=format_timestamp(user.created_at),
        updated_at=format_timestamp(user.updated_at),
    )


def _parse_id(user_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


def _resolve_names(session: Session, table, names: Iterable[str], kind: str) -> Dict[str, object]:
    """Map requested names to rows, matching case-insensitively.

    Raises:
        ValidationError: If any name is unknown or inactive.
    """
    rows = session.scalars(select(table).where(table.active.is_(True))).all()
    by_name = {row.name.lower(): row for row in rows}
    resolved = {}
    unknown = []
    for name in names:
        row = by_name.get((name or "").strip().lower())
        if row is None:
            unknown.append(name)
        else:
            resolved[row.name] = row
    if unknown:
        raise ValidationError(
            f"Invalid {kind}: {', '.join(str(n) for n in unknown)}",
            **{f"valid_{kind}": sorted(row.name for row in rows)},
        )
    return resolved


class UserService:
    """Class-based user management service.

    Usage:
        service = UserService(database)
        user = service.create_user(UserCreate(email="a@example.com", name="Alice"))
        service.update_preferences(user.id, ["Finance"], ["Email", "Push"])
    """

    def __init__(self, database: Database):
        self.database = database

    def create_user(self, data: UserCreate) -> UserResponse:
        """Create a user without preferences.

        Raises:
            DuplicateUserError: If the email is already registered
            StorageError: If the database write fails
        """
        with self._session() as session:
            user = self._insert_user(session, data)
            response = _to_response(user)
        logger.info("user_created", user_id=response.id)
        return response

    def register_user(self, data: UserCreate) -> UserProfile:
        """Create a user and set categories and channels in one transaction.

        Raises:
            DuplicateUserError: If the email is already registered
            ValidationError: If a category or channel name is unknown
        """
        with self._session() as session:
            user = self._insert_user(session, data)
            self._replace_preferences(session, user.id, data.categories, data.channels)
            profile = self._profile(session, user)
        logger.info(
            "user_registered",
            user_id=profile.id,
            categories=profile.categories,
            channels=profile.channels,
        )
        return profile

    def get_user(self, user_id: str) -> UserResponse:
        """Fetch a user by id.

        Raises:
            UserNotFoundError: If no user has the id
        """
        with self._session() as session:
            return _to_response(self._load(session, user_id))

    def get_user_by_email(self, email: str) -> Optional[UserResponse]:
        with self._session() as session:
            user = session.scalar(
                select(User).where(func.lower(User.email) == email.strip().lower())
            )
            return _to_response(user) if user else None

    def find_user(self, identifier: str) -> Optional[UserResponse]:
        """Look a user up by email (when the identifier contains @) or id."""
        if "@" in identifier:
            return self.get_user_by_email(identifier)
        key = _parse_id(identifier)
        if key is None:
            return None
        with self._session() as session:
            user = session.get(User, key)
            return _to_response(user) if user else None

    def list_users(self) -> List[UserResponse]:
        """All users ordered by name."""
        with self._session() as session:
            users = session.scalars(select(User).order_by(User.name, User.email)).all()
            return [_to_response(u) for u in users]

    def search_users(self, term: str, limit: int = SEARCH_LIMIT) -> List[UserResponse]:
        """Case-insensitive substring match on name or email.

        Args:
            term: Text to look for; blank returns every user up to the limit
            limit: Maximum number of results, capped at 50

        Returns:
            Matching users ordered by name
        """
        pattern = f"%{(term or '').strip().lower()}%"
        stmt = (
            select(User)
            .where(or_(func.lower(User.name).like(pattern), func.lower(User.email).like(pattern)))
            .order_by(User.name, User.email)
            .limit(min(limit, SEARCH_LIMIT))
        )
        with self._session() as session:
            return [_to_response(u) for u in session.scalars(stmt).all()]

    def update_preferences(
        self, user_id: str, categories: List[str], channels: List[str]
    ) -> UserProfile:
        """Replace a user's subscriptions and enabled channels.

        Both sets are replaced in one transaction; on any error neither
        changes.

        Raises:
            UserNotFoundError: If no user has the id
            ValidationError: If a category or channel name is unknown
        """
        with self._session() as session:
            user = self._load(session, user_id)
            self._replace_preferences(session, user.id, categories, channels)
            profile = self._profile(session, user)
        logger.info(
            "user_preferences_updated",
            user_id=profile.id,
            categories=profile.categories,
            channels=profile.channels,
        )
        return profile

    def set_channel_enabled(self, user_id: str, channel: str, enabled: bool) -> UserProfile:
        """Enable or disable one channel for a user, keeping the others.

        Raises:
            UserNotFoundError: If no user has the id
            ValidationError: If the channel name is unknown
        """
        with self._session() as session:
            user = self._load(session, user_id)
            row = next(iter(_resolve_names(session, Channel, [channel], "channels").values()))
            preference = session.scalar(
                select(ChannelPreference).where(
                    ChannelPreference.user_id == user.id,
                    ChannelPreference.channel_id == row.id,
                )
            )
            if preference is None:
                session.add(ChannelPreference(user_id=user.id, channel_id=row.id, enabled=enabled))
            else:
                preference.enabled = enabled
            session.flush()
            profile = self._profile(session, user)
        logger.info("user_channel_toggled", user_id=profile.id, channel=row.name, enabled=enabled)
        return profile

    def get_profile(self, user_id: str) -> UserProfile:
        """User with subscribed categories and enabled channels.

        Raises:
            UserNotFoundError: If no user has the id
        """
        with self._session() as session:
            return self._profile(session, self._load(session, user_id))

    def _session(self):
        return _guarded_session(self.database)

    def _load(self, session: Session, user_id: str) -> User:
        key = _parse_id(user_id)
        user = session.get(User, key) if key else None
        if user is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return user

    def _insert_user(self, session: Session, data: UserCreate) -> User:
        email = str(data.email)
        exists = session.scalar(
            select(User.id).where(func.lower(User.email) == email.lower())
        )
        if exists is not None:
            raise DuplicateUserError(f"User with email {email} already exists")
        user = User(email=email, name=data.name, phone=data.phone)
        session.add(user)
        session.flush()
        return user

    def _replace_preferences(
        self, session: Session, user_id: uuid.UUID, categories: List[str], channels: List[str]
    ) -> None:
        category_rows = _resolve_names(session, Category, categories, "categories")
        channel_rows = _resolve_names(session, Channel, channels, "channels")

        session.execute(delete(CategorySubscription).where(CategorySubscription.user_id == user_id))
        session.execute(delete(ChannelPreference).where(ChannelPreference.user_id == user_id))
        session.add_all(
            CategorySubscription(user_id=user_id, category_id=row.id)
            for row in category_rows.values()
        )
        session.add_all(
            ChannelPreference(user_id=user_id, channel_id=row.id, enabled=True)
            for row in channel_rows.values()
        )
        session.flush()

    def _profile(self, session: Session, user: User) -> UserProfile:
        categories = session.scalars(
            select(Category.name)
            .join(CategorySubscription, CategorySubscription.category_id == Category.id)
            .where(CategorySubscription.user_id == user.id)
            .order_by(Category.name)
        ).all()
        channels = session.scalars(
            select(Channel.name)
            .join(ChannelPreference, ChannelPreference.channel_id == Channel.id)
            .where(ChannelPreference.user_id == user.id, ChannelPreference.enabled.is_(True))
            .order_by(Channel.name)
        ).all()
        return UserProfile(
            **_to_response(user).model_dump(),
            categories=list(categories),
            channels=list(channels),
        )

