from unittest.mock import AsyncMock, patch

import pytest

from infrastructure.notifications.errors import StorageError

ENDPOINT = "/api/v1/notifications"


@pytest.mark.unit
class TestSendNotification:
    def test_send_success(self, client, user_factory):
        """A subscribed user gets one sent attempt per enabled channel."""
        alice = user_factory("Alice", categories=["Finance"], channels=["Email", "Push"])

        response = client.post(ENDPOINT, json={"category": "Finance", "message": "Rates are up"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["message"] == "Notification processing completed"
        assert body["summary"] == {
            "total_attempts": 2,
            "successful": 2,
            "failed": 0,
            "unlogged": 0,
        }
        assert [r["channel"] for r in body["results"]] == ["Email", "Push"]
        assert {r["user_id"] for r in body["results"]} == {alice.id}
        assert all(r["status"] == "sent" for r in body["results"])

    def test_send_without_subscribers(self, client):
        response = client.post(ENDPOINT, json={"category": "Movies", "message": "Premiere"})

        assert response.status_code == 200
        assert response.json()["results"] == []
        assert response.json()["summary"]["total_attempts"] == 0

    def test_unknown_category(self, client):
        response = client.post(ENDPOINT, json={"category": "Weather", "message": "Rain"})

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == "error"
        assert body["error_type"] == "validation_error"
        assert body["message"] == "Invalid category: Weather"
        assert body["valid_categories"] == ["Finance", "Movies", "Sports"]

    def test_empty_message(self, client):
        response = client.post(ENDPOINT, json={"category": "Finance", "message": "   "})

        assert response.status_code == 400
        assert response.json()["message"] == "Message content cannot be empty"

    def test_missing_fields(self, client):
        """Missing fields are reported by the dispatcher, not the schema."""
        response = client.post(ENDPOINT, json={})

        assert response.status_code == 400
        assert response.json()["error_type"] == "validation_error"

    def test_malformed_body(self, client):
        response = client.post(ENDPOINT, json={"category": ["Finance"], "message": "x"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request"
        assert response.json()["errors"]

    def test_storage_unavailable(self, client):
        with patch(
            "infrastructure.persistence.users.UserResolver.resolve",
            side_effect=StorageError("Failed to resolve recipients"),
        ):
            response = client.post(ENDPOINT, json={"category": "Finance", "message": "x"})

        assert response.status_code == 503
        assert response.json()["error_type"] == "storage_error"

    def test_result_broadcast_to_feed(self, client, test_app):
        """Both completed and error results are pushed to the live feed."""
        test_app.state.feed.broadcast = AsyncMock(return_value=0)

        client.post(ENDPOINT, json={"category": "Finance", "message": "Rates"})
        client.post(ENDPOINT, json={"category": "Weather", "message": "Rain"})

        events = [call.args[0] for call in test_app.state.feed.broadcast.await_args_list]
        assert [e["type"] for e in events] == ["notification-sent", "notification-sent"]
        assert events[0]["data"]["status"] == "completed"
        assert events[1]["data"]["error_type"] == "validation_error"
