"""Unit tests for the Database handle."""

import pytest
from sqlalchemy import inspect

from infrastructure.configuration.infrastructure import DatabaseSettings
from infrastructure.persistence import Database
from infrastructure.persistence.tables import Category


@pytest.mark.unit
class TestDatabase:
    def test_in_memory_creates_schema(self, empty_database):
        tables = set(inspect(empty_database.engine).get_table_names())

        assert {
            "users",
            "categories",
            "notification_channels",
            "user_category_subscriptions",
            "user_channel_preferences",
            "notifications",
        } <= tables

    def test_ping(self, empty_database):
        assert empty_database.ping() is True

    def test_session_scope_commits(self, empty_database):
        with empty_database.session_scope() as session:
            session.add(Category(name="Weather"))

        with empty_database.session_scope() as session:
            assert session.query(Category).count() == 1

    def test_session_scope_rolls_back_on_error(self, empty_database):
        with pytest.raises(RuntimeError):
            with empty_database.session_scope() as session:
                session.add(Category(name="Weather"))
                session.flush()
                raise RuntimeError("abort")

        with empty_database.session_scope() as session:
            assert session.query(Category).count() == 0

    def test_from_settings(self, tmp_path):
        settings = DatabaseSettings(DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}")

        database = Database.from_settings(settings)
        database.create_all()

        assert database.ping() is True
        database.dispose()
