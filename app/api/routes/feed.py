import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from infrastructure.notifications.errors import NotificationError
from infrastructure.notifications.feed import feed_event
from infrastructure.services import FeedDep, NotificationServiceDep

logger = structlog.get_logger()

router = APIRouter(tags=["Live feed"])


@router.websocket("/ws")
async def live_feed(
    websocket: WebSocket, feed: FeedDep, service: NotificationServiceDep
):
    """
    Live feed of dispatch results.

    Client messages:
        {"type": "ping"}      -> {"type": "pong"}
        {"type": "get-logs"}  -> {"type": "logs-update", "data": [...]}
    Anything else is logged and ignored.
    """
    await feed.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                logger.warning("feed_message_malformed")
                continue
            message_type = message.get("type") if isinstance(message, dict) else None

            if message_type == "ping":
                await websocket.send_json(feed_event("pong"))
            elif message_type == "get-logs":
                try:
                    logs = await run_in_threadpool(service.get_all_logs)
                except NotificationError as e:
                    await websocket.send_json(
                        feed_event("error", {"message": e.message, "error_type": e.error_type})
                    )
                    continue
                await websocket.send_json(
                    feed_event("logs-update", [log.model_dump(mode="json") for log in logs])
                )
            else:
                logger.info("feed_message_ignored", message_type=message_type)
    except WebSocketDisconnect:
        feed.disconnect(websocket)
