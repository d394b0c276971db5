"""Infrastructure modules for the notification dispatch service.

Centralized infrastructure components:
- configuration: Settings management (Settings, DispatchSettings, DatabaseSettings)
- logging: Structured logging setup and context binding
- notifications: Channels, dispatcher, dispatch service and live feed
- operations: Operation results for expected failures
- persistence: Relational storage, delivery log and seeding
- services: Dependency injection providers (SettingsDep, NotificationServiceDep)
"""

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
]
