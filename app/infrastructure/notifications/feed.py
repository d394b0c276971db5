"""Live feed of dispatch events for WebSocket clients.

Every dispatch result is pushed to all connected operator consoles as a
``notification-sent`` event.
"""

from typing import Any, Dict, List, Optional

import structlog
from fastapi import WebSocket

from infrastructure.notifications.models import format_timestamp, utc_now

logger = structlog.get_logger()


def feed_event(event_type: str, data: Optional[Any] = None) -> Dict[str, Any]:
    """Build a feed envelope: ``{"type", "data", "timestamp"}``."""
    event: Dict[str, Any] = {"type": event_type, "timestamp": format_timestamp(utc_now())}
    if data is not None:
        event["data"] = data
    return event


class FeedBroadcaster:
    """Tracks open WebSocket connections and fans events out to them.

    Example:
        feed = FeedBroadcaster()
        await feed.connect(websocket)
        await feed.broadcast(feed_event("notification-sent", result.to_payload()))
    """

    def __init__(self):
        self._connections: List[WebSocket] = []

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a connection and greet it with a ``connected`` event."""
        await websocket.accept()
        self._connections.append(websocket)
        logger.info("feed_client_connected", connections=self.connection_count)
        await websocket.send_json(feed_event("connected"))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self._connections:
            self._connections.remove(websocket)
        logger.info("feed_client_disconnected", connections=self.connection_count)

    async def broadcast(self, event: Dict[str, Any]) -> int:
        """Send an event to every client; drop clients that fail.

        Returns:
            Number of clients the event reached.
        """
        delivered = 0
        stale = []
        for connection in list(self._connections):
            try:
                await connection.send_json(event)
                delivered += 1
            except Exception as e:
                logger.warning("feed_send_failed", error=str(e))
                stale.append(connection)
        for connection in stale:
            self.disconnect(connection)
        return delivered
