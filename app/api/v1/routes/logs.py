import uuid
from typing import Optional

from fastapi import APIRouter, Query

from api.dependencies.errors import error_response
from infrastructure.notifications.models import DeliveryStatus, LogPage, LogStatistics
from infrastructure.services import NotificationServiceDep

router = APIRouter(prefix="/logs", tags=["Delivery log"])

_STATUSES = sorted(s.value for s in DeliveryStatus)


@router.get("", response_model=LogPage)
def list_logs(
    service: NotificationServiceDep,
    page: int = Query(default=0, ge=0),
    limit: Optional[int] = Query(default=None, ge=1),
    status: Optional[str] = None,
    category: Optional[str] = None,
    user_id: Optional[str] = None,
):
    """
    Page through the delivery log, newest first.

    At most one filter is applied: status, then category, then user_id.
    """
    if status and status not in _STATUSES:
        return error_response(
            400, f"Invalid status: {status}", "validation_error", valid_statuses=_STATUSES
        )
    if user_id:
        try:
            uuid.UUID(user_id)
        except ValueError:
            return error_response(400, f"Invalid user id: {user_id}", "validation_error")
    return service.get_delivery_log(
        page=page, limit=limit, status=status, category=category, user_id=user_id
    )


@router.get("/statistics", response_model=LogStatistics)
def log_statistics(service: NotificationServiceDep):
    """Aggregate counts by status, channel and category."""
    return service.get_statistics()
