"""Structured logging for the notification dispatch service.

Call configure_logging() once at startup (the server lifespan does).
Modules then log through structlog; request and dispatch identifiers
bound with the context managers below are merged into every entry.

Example:
    from infrastructure.logging import bind_dispatch_context, get_module_logger

    logger = get_module_logger()

    with bind_dispatch_context("Finance"):
        logger.info("dispatch_started")
"""

from infrastructure.logging.context import (
    bind_dispatch_context,
    bind_request_context,
    clear_request_context,
    get_correlation_id,
)
from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)
from infrastructure.logging.setup import configure_logging, get_module_logger

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_request_context",
    "bind_dispatch_context",
    "get_correlation_id",
    "clear_request_context",
    "add_app_info",
    "mask_sensitive_data",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
]
