"""Unit tests for the live feed broadcaster."""

from unittest.mock import AsyncMock

import pytest

from infrastructure.notifications.feed import FeedBroadcaster, feed_event


def _socket():
    return AsyncMock()


@pytest.mark.unit
class TestFeedEvent:
    def test_envelope_with_data(self):
        event = feed_event("notification-sent", {"status": "completed"})

        assert event["type"] == "notification-sent"
        assert event["data"] == {"status": "completed"}
        assert isinstance(event["timestamp"], str)

    def test_envelope_without_data(self):
        assert "data" not in feed_event("pong")


@pytest.mark.unit
class TestFeedBroadcaster:
    @pytest.mark.asyncio
    async def test_connect_accepts_and_greets(self):
        feed = FeedBroadcaster()
        socket = _socket()

        await feed.connect(socket)

        socket.accept.assert_awaited_once()
        greeting = socket.send_json.await_args.args[0]
        assert greeting["type"] == "connected"
        assert feed.connection_count == 1

    @pytest.mark.asyncio
    async def test_broadcast_reaches_all_clients(self):
        feed = FeedBroadcaster()
        first, second = _socket(), _socket()
        await feed.connect(first)
        await feed.connect(second)

        delivered = await feed.broadcast({"type": "notification-sent"})

        assert delivered == 2
        first.send_json.assert_awaited_with({"type": "notification-sent"})
        second.send_json.assert_awaited_with({"type": "notification-sent"})

    @pytest.mark.asyncio
    async def test_broadcast_drops_failing_clients(self):
        feed = FeedBroadcaster()
        healthy, broken = _socket(), _socket()
        await feed.connect(healthy)
        await feed.connect(broken)
        broken.send_json.side_effect = RuntimeError("socket closed")

        delivered = await feed.broadcast({"type": "notification-sent"})

        assert delivered == 1
        assert feed.connection_count == 1

    def test_disconnect_unknown_socket_is_noop(self):
        feed = FeedBroadcaster()

        feed.disconnect(_socket())

        assert feed.connection_count == 0
