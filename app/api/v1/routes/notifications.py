from typing import Optional

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from api.dependencies.errors import status_code_for
from api.dependencies.rate_limits import DISPATCH_RATE_LIMIT, get_limiter
from infrastructure.notifications.feed import feed_event
from infrastructure.services import FeedDep, NotificationServiceDep

logger = structlog.get_logger()

router = APIRouter(tags=["Notifications"])
limiter = get_limiter()


class SendNotificationRequest(BaseModel):
    """Operator message. Both fields are checked by the dispatcher."""

    category: Optional[str] = Field(
        default=None, json_schema_extra={"example": "Finance"}
    )
    message: Optional[str] = Field(
        default=None, json_schema_extra={"example": "Interest rates went up"}
    )


@router.post("/notifications")
@limiter.limit(DISPATCH_RATE_LIMIT)
async def send_notification(
    request: Request,
    body: SendNotificationRequest,
    service: NotificationServiceDep,
    feed: FeedDep,
):
    """
    Dispatch a message to every subscribed user on every enabled channel.

    Returns the dispatch result: per-attempt outcomes plus a summary on
    success, or an error with ``error_type`` (400 for validation errors,
    503 when storage is unavailable). Every result is also pushed to the
    live feed.
    """
    result = await run_in_threadpool(
        service.send_notification, body.category, body.message
    )
    payload = result.to_payload()
    await feed.broadcast(feed_event("notification-sent", payload))

    status_code = 200 if result.is_success else status_code_for(result.error_type)
    return JSONResponse(status_code=status_code, content=payload)
