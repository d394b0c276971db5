"""Fixtures for API tests: a test app over an in-memory database."""

import pytest
from fastapi.testclient import TestClient

from api.router import api_router
from utils.tests import create_test_app


@pytest.fixture
def test_app(database):
    """App with every route, the error handlers and the seeded catalog."""
    return create_test_app(api_router, database=database)


@pytest.fixture
def client(test_app):
    with TestClient(test_app) as test_client:
        yield test_client
