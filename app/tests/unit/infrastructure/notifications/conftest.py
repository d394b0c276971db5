"""Fixtures for notification dispatcher tests."""

from unittest.mock import MagicMock

import pytest

from infrastructure.notifications.dispatcher import NotificationDispatcher


@pytest.fixture
def mock_resolver():
    """Resolver returning no recipients unless configured per channel.

    Example:
        mock_resolver.by_channel["Email"] = [recipient]
    """
    resolver = MagicMock()
    resolver.by_channel = {}
    resolver.resolve.side_effect = lambda category, channel: list(
        resolver.by_channel.get(channel, [])
    )
    return resolver


@pytest.fixture
def mock_log_store():
    return MagicMock()


@pytest.fixture
def mock_catalog():
    catalog = MagicMock()
    catalog.active_category_names.return_value = ["Finance", "Movies", "Sports"]
    return catalog


@pytest.fixture
def dispatcher(mock_resolver, mock_log_store, mock_catalog, fixed_clock):
    return NotificationDispatcher(
        resolver=mock_resolver,
        log_store=mock_log_store,
        catalog=mock_catalog,
        clock=fixed_clock,
    )
