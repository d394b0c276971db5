"""Relational database handle.

Wraps one SQLAlchemy engine and its session factory. Stores receive a
Database instance explicitly; the application builds one in its
lifespan and tests build an in-memory one per test.
"""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Generator

import structlog
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from infrastructure.persistence.tables import Base

if TYPE_CHECKING:
    from infrastructure.configuration.infrastructure import DatabaseSettings

logger = structlog.get_logger()

IN_MEMORY_URL = "sqlite://"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine plus session factory.

    Attributes:
        url: SQLAlchemy URL the engine connects to

    Example:
        database = Database.from_settings(settings.database)
        database.create_all()

        with database.session_scope() as session:
            session.add(Category(name="Sports"))
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_timeout: int = 30,
    ):
        self.url = url
        if url.startswith("sqlite"):
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            # In-memory databases only live as long as their connection
            if url in (IN_MEMORY_URL, "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
            self._engine = create_engine(url, echo=echo, **engine_kwargs)
            event.listen(self._engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self._engine = create_engine(
                url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_pre_ping=True,
            )
        self._session_factory = sessionmaker(
            self._engine, autoflush=False, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: "DatabaseSettings") -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        )

    @classmethod
    def in_memory(cls) -> "Database":
        """Private in-memory SQLite database with the schema created."""
        database = cls(IN_MEMORY_URL)
        database.create_all()
        return database

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Session wrapped in one transaction.

        Commits on normal exit, rolls back and re-raises on error.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(bind=self._engine)
        logger.info("database_schema_ready", url=self._engine.url.render_as_string())

    def ping(self) -> bool:
        """Check the database answers a trivial query."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("database_ping_failed", error=str(e))
            return False

    def dispose(self) -> None:
        self._engine.dispose()
