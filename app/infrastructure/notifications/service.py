"""Notification service for dependency injection.

Provides a class-based interface to dispatching and the delivery log for
easier DI and testing.
"""

from typing import TYPE_CHECKING, List, Optional

from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.models import (
    DeliveryLogView,
    DispatchResult,
    LogPage,
    LogStatistics,
    Message,
    Pagination,
)

if TYPE_CHECKING:
    from infrastructure.configuration.features import DispatchSettings
    from infrastructure.persistence.delivery_log import DeliveryLogStore


class NotificationService:
    """Class-based notification service.

    Thin facade over the NotificationDispatcher and the DeliveryLogStore.

    Usage:
        # Via dependency injection
        from infrastructure.services import NotificationServiceDep

        @router.post("/notifications")
        def send(notification_service: NotificationServiceDep, body: SendRequest):
            return notification_service.send_notification(body.category, body.message)

        # Direct instantiation
        service = NotificationService(dispatcher, log_store)
        result = service.send_notification("Finance", "Rates are up")
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        log_store: "DeliveryLogStore",
        settings: Optional["DispatchSettings"] = None,
    ):
        """Initialize notification service.

        Args:
            dispatcher: Dispatcher used for sends.
            log_store: Store used for delivery log queries.
            settings: Optional dispatch settings for page size limits.
        """
        self._dispatcher = dispatcher
        self._log_store = log_store
        self._default_limit = settings.LOGS_DEFAULT_LIMIT if settings else 50
        self._max_limit = settings.LOGS_MAX_LIMIT if settings else 500

    @property
    def dispatcher(self) -> NotificationDispatcher:
        """Access underlying dispatcher instance."""
        return self._dispatcher

    def send_notification(
        self, category: Optional[str], content: Optional[str]
    ) -> DispatchResult:
        """Dispatch an operator message. Never raises."""
        return self._dispatcher.dispatch(Message(category=category, content=content))

    def get_delivery_log(
        self,
        page: int = 0,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> LogPage:
        """Return one page of the delivery log, newest first.

        Only one filter applies; status wins over category, which wins
        over user_id.

        Args:
            page: Zero-based page number
            limit: Page size, clamped to the configured maximum
            status: Filter by delivery status
            category: Filter by category name
            user_id: Filter by user

        Returns:
            LogPage with the entries and pagination totals

        Raises:
            StorageError: If the store cannot be read
        """
        page = max(page, 0)
        if limit is None or limit <= 0:
            limit = self._default_limit
        limit = min(limit, self._max_limit)
        offset = page * limit

        if status:
            logs = self._log_store.list_by_status(status, offset=offset, limit=limit)
            total = self._log_store.count(status=status)
        elif category:
            logs = self._log_store.list_by_category(
                category, offset=offset, limit=limit
            )
            total = self._log_store.count(category=category)
        elif user_id:
            logs = self._log_store.list_by_user(user_id, offset=offset, limit=limit)
            total = self._log_store.count(user_id=user_id)
        else:
            logs = self._log_store.list_paginated(offset=offset, limit=limit)
            total = self._log_store.count()

        return LogPage(
            logs=logs, pagination=Pagination(page=page, limit=limit, total=total)
        )

    def get_all_logs(self) -> List[DeliveryLogView]:
        """Every entry, newest first. Sent whole to live feed clients on request."""
        return self._log_store.list()

    def get_statistics(self) -> LogStatistics:
        """Aggregate delivery statistics.

        Raises:
            StorageError: If the store cannot be read
        """
        return self._log_store.statistics()
