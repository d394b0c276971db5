"""Map service errors to structured JSON responses."""

from typing import Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from infrastructure.notifications.errors import NotificationError

logger = structlog.get_logger()

STATUS_CODES = {
    "validation_error": 400,
    "invalid_channel": 400,
    "user_not_found": 404,
    "duplicate_user": 409,
    "storage_error": 503,
}


def status_code_for(error_type: Optional[str]) -> int:
    return STATUS_CODES.get(error_type or "", 500)


def error_response(
    status_code: int, message: str, error_type: str, **extra: Any
) -> JSONResponse:
    """Build the error body shared by every endpoint."""
    content = {"status": "error", "error_type": error_type, "message": message}
    content.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status_code, content=content)


async def notification_error_handler(request: Request, exc: Exception):
    if not isinstance(exc, NotificationError):
        raise exc
    status_code = status_code_for(exc.error_type)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_failed",
        path=request.url.path,
        error_type=exc.error_type,
        error=exc.message,
    )
    return error_response(status_code, exc.message, exc.error_type, **exc.context)


async def request_validation_handler(request: Request, exc: Exception):
    """Return malformed request bodies as 400 with the field errors listed."""
    if not isinstance(exc, RequestValidationError):
        raise exc
    errors = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    ]
    logger.warning("request_validation_failed", path=request.url.path, errors=errors)
    return error_response(400, "Invalid request", "validation_error", errors=errors)


def setup_error_handlers(app: FastAPI):
    """
    Register handlers that turn service errors into structured JSON errors.
    """
    app.add_exception_handler(NotificationError, notification_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
