"""
Conftest for integration tests.

Integration tests wire the real dispatcher, stores and resolver over an
in-memory SQLite database. Nothing below the service layer is mocked.
"""

import pytest

from infrastructure.notifications import NotificationDispatcher, NotificationService
from infrastructure.persistence import CatalogRepository, DeliveryLogStore, UserResolver


@pytest.fixture
def log_store(database):
    return DeliveryLogStore(database)


@pytest.fixture
def notification_service(database, log_store, ticking_clock):
    """NotificationService over the seeded database with a ticking clock."""
    dispatcher = NotificationDispatcher(
        resolver=UserResolver(database),
        log_store=log_store,
        catalog=CatalogRepository(database),
        clock=ticking_clock,
    )
    return NotificationService(dispatcher, log_store)
