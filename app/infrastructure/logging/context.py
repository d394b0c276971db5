"""Request and dispatch context binding for structured logging.

Binds identifiers to structlog's context variables so that every log
entry emitted while handling one HTTP request or one dispatch batch can
be correlated.

Usage:
    from infrastructure.logging import bind_request_context

    with bind_request_context(request_path="/api/v1/notifications"):
        logger.info("processing_request")
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_request_context(
    correlation_id: Optional[str] = None,
    request_path: Optional[str] = None,
    request_method: Optional[str] = None,
    client_host: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind request-scoped context to all logs within the block.

    Args:
        correlation_id: Unique request identifier. Auto-generated if not provided.
        request_path: HTTP request path (e.g., "/api/v1/logs").
        request_method: HTTP method (e.g., "GET", "POST").
        client_host: Remote address of the caller.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The correlation ID bound for the block.
    """
    context: dict[str, Any] = {"correlation_id": correlation_id or str(uuid.uuid4())}

    if request_path is not None:
        context["request_path"] = request_path
    if request_method is not None:
        context["request_method"] = request_method
    if client_host is not None:
        context["client_host"] = client_host

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["correlation_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


@contextmanager
def bind_dispatch_context(
    category: str, dispatch_id: Optional[str] = None
) -> Generator[str, None, None]:
    """Bind a dispatch batch identifier and its category.

    Nested inside a request context, the request's correlation_id stays
    bound alongside the dispatch_id.

    Yields:
        The dispatch ID bound for the block.
    """
    dispatch_id = dispatch_id or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(
        dispatch_id=dispatch_id, dispatch_category=category
    )
    try:
        yield dispatch_id
    finally:
        structlog.contextvars.unbind_contextvars("dispatch_id", "dispatch_category")


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_request_context() -> None:
    """Clear all request-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
