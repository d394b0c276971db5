"""
Factory functions for dependency injection.

Settings are an application-scoped singleton. The Database handle and the
live feed broadcaster are created by the server lifespan and stored on
``app.state``; services built on them are cheap and created per request.
"""

from functools import lru_cache

from starlette.requests import HTTPConnection

from infrastructure.configuration import Settings
from infrastructure.notifications import NotificationDispatcher, NotificationService
from infrastructure.notifications.feed import FeedBroadcaster
from infrastructure.persistence import (
    CatalogRepository,
    Database,
    DeliveryLogStore,
    UserResolver,
)
from modules.users import UserService


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    Infrastructure packages should use this directly:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.model_dump()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


def get_database(connection: HTTPConnection) -> Database:
    """
    Get the Database wired into the running application.

    Works for both HTTP requests and WebSocket connections.

    Returns:
        Database: Handle created by the lifespan (or by the test app).
    """
    return connection.app.state.database


def get_feed(connection: HTTPConnection) -> FeedBroadcaster:
    """Get the WebSocket feed broadcaster of the running application."""
    return connection.app.state.feed


def get_catalog(connection: HTTPConnection) -> CatalogRepository:
    return CatalogRepository(get_database(connection))


def get_notification_service(connection: HTTPConnection) -> NotificationService:
    """
    Build a NotificationService over the application database.

    Usage:
        @router.post("/notifications")
        def send(service: NotificationServiceDep, body: SendRequest):
            return service.send_notification(body.category, body.message)
    """
    database = get_database(connection)
    log_store = DeliveryLogStore(database)
    dispatcher = NotificationDispatcher(
        resolver=UserResolver(database),
        log_store=log_store,
        catalog=CatalogRepository(database),
    )
    return NotificationService(dispatcher, log_store, settings=get_settings().dispatch)


def get_user_service(connection: HTTPConnection) -> UserService:
    return UserService(get_database(connection))
