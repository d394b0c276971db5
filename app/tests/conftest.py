"""Shared fixtures: in-memory database, user factories and a fixed clock."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import pytest

from api.dependencies.rate_limits import get_limiter
from infrastructure.logging import configure_logging
from infrastructure.notifications.models import Message, Recipient
from infrastructure.persistence import Database, seed_categories, seed_channels
from infrastructure.persistence.tables import (
    Category,
    CategorySubscription,
    Channel,
    ChannelPreference,
    User,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    configure_logging(log_level="CRITICAL", is_production=False)


@pytest.fixture(autouse=True)
def _rate_limiter_disabled():
    """Rate limiting is exercised explicitly; keep it out of other tests."""
    limiter = get_limiter()
    limiter.enabled = False
    yield limiter
    limiter.enabled = True
    limiter.reset()


@pytest.fixture
def fixed_clock():
    """Clock returning FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def ticking_clock():
    """Clock advancing one second per call, starting at FIXED_NOW."""
    state = {"now": FIXED_NOW}

    def _clock():
        state["now"] = state["now"] + timedelta(seconds=1)
        return state["now"]

    return _clock


@pytest.fixture
def empty_database():
    """In-memory database with the schema but no rows."""
    database = Database.in_memory()
    yield database
    database.dispose()


@pytest.fixture
def database(empty_database):
    """In-memory database seeded with Sports/Finance/Movies and SMS/Email/Push."""
    seed_categories(empty_database)
    seed_channels(empty_database)
    return empty_database


@pytest.fixture
def user_factory(database):
    """Factory inserting a user with subscriptions and channel preferences.

    Example:
        alice = user_factory("Alice", categories=["Finance"], channels=["Email"])
        bob = user_factory("Bob", phone=None, channels=["SMS"], disabled=["Push"])
    """

    def _factory(
        name: str = "Test User",
        email: Optional[str] = None,
        phone: Optional[str] = "+15550000000",
        categories: Iterable[str] = ("Finance",),
        channels: Iterable[str] = ("Email",),
        disabled: Iterable[str] = (),
    ) -> Recipient:
        email = email or f"{name.lower().replace(' ', '.')}@example.com"
        with database.session_scope() as session:
            user = User(email=email, name=name, phone=phone)
            session.add(user)
            session.flush()
            for category_name in categories:
                category = session.query(Category).filter_by(name=category_name).one()
                session.add(CategorySubscription(user_id=user.id, category_id=category.id))
            for channel_name, enabled in [(c, True) for c in channels] + [
                (c, False) for c in disabled
            ]:
                channel = session.query(Channel).filter_by(name=channel_name).one()
                session.add(
                    ChannelPreference(user_id=user.id, channel_id=channel.id, enabled=enabled)
                )
            recipient = Recipient(id=str(user.id), name=name, email=email, phone=phone)
        return recipient

    return _factory


@pytest.fixture
def recipient_factory():
    """Factory for Recipient instances that are not persisted."""

    def _factory(
        id: str = "00000000-0000-0000-0000-000000000001",
        name: str = "Test User",
        email: Optional[str] = "test@example.com",
        phone: Optional[str] = "+15550000000",
    ) -> Recipient:
        return Recipient(id=id, name=name, email=email, phone=phone)

    return _factory


@pytest.fixture
def message_factory():
    def _factory(category: Optional[str] = "Finance", content: Optional[str] = "Rates are up") -> Message:
        return Message(category=category, content=content)

    return _factory
