"""Unit tests for mapping raw storage rows to DeliveryLogView."""

import uuid
from datetime import datetime, timezone

import pytest

from infrastructure.persistence.delivery_log import normalize_log_row, parse_metadata


@pytest.mark.unit
class TestNormalizeLogRow:
    def test_aliased_keys(self):
        row = {
            "id": "n1",
            "user_id": "u1",
            "user_name": "Alice",
            "user_email": "alice@example.com",
            "user_phone": "+1555",
            "category_name": "Finance",
            "channel": "Email",
            "status": "sent",
            "content": "Rates",
            "metadata": '{"delivery_method": "Email"}',
            "created_at": datetime(2026, 1, 1, 9, 30),
            "sent_at": datetime(2026, 1, 1, 9, 30, tzinfo=timezone.utc),
            "delivered_at": None,
            "read_at": None,
            "error_message": None,
        }

        view = normalize_log_row(row)

        assert view.id == "n1"
        assert view.user.model_dump() == {
            "id": "u1",
            "name": "Alice",
            "email": "alice@example.com",
            "phone": "+1555",
        }
        assert view.category == "Finance"
        assert view.metadata == {"delivery_method": "Email"}
        assert view.timestamp == "2026-01-01T09:30:00+00:00"
        assert view.sent_at == "2026-01-01T09:30:00+00:00"
        assert view.delivered_at is None

    def test_table_qualified_keys(self):
        """Rows keyed by table and column name are mapped the same way."""
        row = {
            "notifications.id": "n2",
            "notifications.user_id": "u2",
            "users.name": "Bob",
            "users.email": "bob@example.com",
            "users.phone": None,
            "categories.name": "Sports",
            "notifications.channel": "SMS",
            "notifications.status": "failed",
            "notifications.content": "Goal",
            "notifications.metadata": "{}",
            "notifications.created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
            "notifications.error_message": "User has no phone number for SMS delivery",
        }

        view = normalize_log_row(row)

        assert view.id == "n2"
        assert view.user.name == "Bob"
        assert view.category == "Sports"
        assert view.status == "failed"
        assert view.error_message.startswith("User has no phone")

    def test_prefixed_user_columns(self):
        row = {"users.user_name": "Carol", "categories.category_name": "Movies"}

        view = normalize_log_row(row)

        assert view.user.name == "Carol"
        assert view.category == "Movies"

    def test_uuid_and_string_timestamp_values(self):
        key = uuid.UUID("12345678-1234-5678-1234-567812345678")
        view = normalize_log_row({"id": key, "created_at": "2026-01-01T00:00:00Z"})

        assert view.id == "12345678-1234-5678-1234-567812345678"
        assert view.timestamp == "2026-01-01T00:00:00Z"

    def test_empty_row(self):
        view = normalize_log_row({})

        assert view.id is None
        assert view.metadata == {}
        assert view.user.name is None


@pytest.mark.unit
class TestParseMetadata:
    @pytest.mark.parametrize(
        "raw",
        [None, "", "{not json", "[1, 2]", "42", '"text"', "null", 7, b"\xff\xfe"],
    )
    def test_unusable_values_become_empty(self, raw):
        assert parse_metadata(raw) == {}

    def test_json_object(self):
        assert parse_metadata('{"a": 1}') == {"a": 1}

    def test_bytes_json_object(self):
        assert parse_metadata(b'{"a": 1}') == {"a": 1}

    def test_dict_passes_through(self):
        assert parse_metadata({"a": 1}) == {"a": 1}
