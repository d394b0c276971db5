import pytest
from unittest.mock import patch

from infrastructure.notifications.errors import StorageError
from infrastructure.notifications.models import DeliveryLogEntry, DeliveryStatus
from infrastructure.persistence import DeliveryLogStore


@pytest.mark.unit
class TestLiveFeed:
    def test_connected_greeting(self, client, test_app):
        with client.websocket_connect("/ws") as websocket:
            greeting = websocket.receive_json()

            assert greeting["type"] == "connected"
            assert "timestamp" in greeting
            assert test_app.state.feed.connection_count == 1

    def test_ping_pong(self, client):
        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "ping"})

            assert websocket.receive_json()["type"] == "pong"

    def test_get_logs(self, client, user_factory):
        user_factory("Alice", categories=["Finance"], channels=["Email"])
        client.post("/api/v1/notifications", json={"category": "Finance", "message": "Rates"})

        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "get-logs"})
            event = websocket.receive_json()

        assert event["type"] == "logs-update"
        assert len(event["data"]) == 1
        assert event["data"][0]["user"]["name"] == "Alice"

    def test_get_logs_sends_whole_log(self, client, database, user_factory):
        """The refresh is not cut to the REST page size."""
        alice = user_factory("Alice")
        store = DeliveryLogStore(database)
        for i in range(55):
            store.save(
                DeliveryLogEntry(
                    user_id=alice.id,
                    category="Finance",
                    channel="Email",
                    status=DeliveryStatus.SENT,
                    content=f"Update {i}",
                )
            )

        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "get-logs"})
            event = websocket.receive_json()

        assert len(event["data"]) == 55

    def test_get_logs_storage_error(self, client):
        with patch(
            "infrastructure.notifications.service.NotificationService.get_all_logs",
            side_effect=StorageError("Failed to read delivery log"),
        ):
            with client.websocket_connect("/ws") as websocket:
                websocket.receive_json()
                websocket.send_json({"type": "get-logs"})
                event = websocket.receive_json()

        assert event["type"] == "error"
        assert event["data"]["error_type"] == "storage_error"

    def test_malformed_and_unknown_messages_ignored(self, client):
        """The connection stays usable after messages it cannot handle."""
        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()
            websocket.send_text("{not json")
            websocket.send_json({"type": "subscribe"})
            websocket.send_json(["ping"])
            websocket.send_json({"type": "ping"})

            assert websocket.receive_json()["type"] == "pong"

    def test_disconnect_removes_client(self, client, test_app):
        with client.websocket_connect("/ws") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "ping"})
            websocket.receive_json()

        websocket_count = test_app.state.feed.connection_count
        assert websocket_count == 0
