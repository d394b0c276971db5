"""Idempotent seeding of the catalog and demo users.

Each function inserts what is missing and leaves existing rows alone, so
running them on every startup is safe.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from infrastructure.notifications.channels import CHANNEL_CATALOG
from infrastructure.persistence.database import Database
from infrastructure.persistence.tables import (
    Category,
    CategorySubscription,
    Channel,
    ChannelPreference,
    User,
)

logger = structlog.get_logger()

DEFAULT_CATEGORIES = ("Sports", "Finance", "Movies")

CHANNEL_DESCRIPTIONS = {
    "SMS": "Short Message Service notifications",
    "Email": "Email notifications",
    "Push": "Push notifications",
}

# (email, name, phone, categories, channels)
DEMO_USERS: Sequence[Tuple[str, str, Optional[str], Tuple[str, ...], Tuple[str, ...]]] = (
    ("john.doe@example.com", "John Doe", "+1234567890", ("Sports", "Finance"), ("SMS", "Email")),
    ("jane.smith@example.com", "Jane Smith", "+1234567891", ("Movies", "Finance"), ("Email", "Push")),
    ("bob.wilson@example.com", "Bob Wilson", "+1234567892", ("Sports", "Movies"), ("SMS", "Push")),
)


def _existing_names(session: Session, table) -> set:
    return set(session.scalars(select(table.name)).all())


def seed_categories(database: Database, names: Iterable[str] = DEFAULT_CATEGORIES) -> int:
    """Insert missing categories. Returns how many were added."""
    added = 0
    with database.session_scope() as session:
        existing = _existing_names(session, Category)
        for name in names:
            if name in existing:
                continue
            session.add(Category(name=name, description=f"Notifications related to {name}"))
            existing.add(name)
            added += 1
    logger.info("categories_seeded", added=added)
    return added


def seed_channels(database: Database) -> int:
    """Insert missing channels from the channel catalog."""
    added = 0
    with database.session_scope() as session:
        existing = _existing_names(session, Channel)
        for name in CHANNEL_CATALOG:
            if name in existing:
                continue
            session.add(Channel(name=name, description=CHANNEL_DESCRIPTIONS.get(name)))
            added += 1
    logger.info("channels_seeded", added=added)
    return added


def seed_users(database: Database, users=DEMO_USERS) -> int:
    """Insert missing demo users with their subscriptions and channels.

    Users already present (matched by email) are left untouched. Unknown
    category or channel names are skipped.
    """
    added = 0
    with database.session_scope() as session:
        categories = {c.name: c for c in session.scalars(select(Category)).all()}
        channels = {c.name: c for c in session.scalars(select(Channel)).all()}
        known_emails = set(session.scalars(select(User.email)).all())

        for email, name, phone, category_names, channel_names in users:
            if email in known_emails:
                continue
            user = User(email=email, name=name, phone=phone)
            user.subscriptions = [
                CategorySubscription(category=categories[n])
                for n in category_names
                if n in categories
            ]
            user.channel_preferences = [
                ChannelPreference(channel=channels[n], enabled=True)
                for n in channel_names
                if n in channels
            ]
            session.add(user)
            known_emails.add(email)
            added += 1
    logger.info("users_seeded", added=added)
    return added


def seed_all(
    database: Database,
    categories: Iterable[str] = DEFAULT_CATEGORIES,
    include_demo_users: bool = True,
) -> List[int]:
    """Seed categories, channels and (optionally) demo users."""
    counts = [seed_categories(database, categories), seed_channels(database)]
    if include_demo_users:
        counts.append(seed_users(database))
    return counts
