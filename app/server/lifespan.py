from contextlib import asynccontextmanager
from typing import AsyncIterator, TYPE_CHECKING

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError
from structlog.stdlib import BoundLogger

from infrastructure.logging.setup import configure_logging
from infrastructure.notifications.feed import FeedBroadcaster
from infrastructure.persistence import Database, seed_all
from infrastructure.services import get_settings

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(settings=settings)


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def _prepare_database(
    database: Database, settings: "Settings", logger: BoundLogger
) -> None:
    """Create the schema and seed the catalog (and demo users when enabled)."""
    try:
        database.create_all()
        counts = seed_all(
            database,
            categories=settings.dispatch.DISPATCH_CATEGORIES,
            include_demo_users=settings.dispatch.SEED_DEMO_DATA,
        )
    except SQLAlchemyError as exc:
        logger.error("database_initialization_failed", error=str(exc))
        raise
    logger.info("database_initialized", seeded=counts)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _list_configs(settings, logger)

    # A database may already be attached (tests); only dispose what we create
    database = getattr(app.state, "database", None)
    owns_database = database is None
    if owns_database:
        database = Database.from_settings(settings.database)
        app.state.database = database
    _prepare_database(database, settings, logger)

    if getattr(app.state, "feed", None) is None:
        app.state.feed = FeedBroadcaster()

    try:
        yield
    finally:
        logger.info("application_shutdown")
        if owns_database:
            database.dispose()
