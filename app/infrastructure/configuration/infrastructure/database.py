"""Relational database settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class DatabaseSettings(InfrastructureSettings):
    """Database connection configuration.

    Environment Variables:
        DATABASE_URL: SQLAlchemy URL (default: sqlite:///./notify_dispatch.db)
        DATABASE_ECHO: Echo emitted SQL to the log (default: False)
        DATABASE_POOL_SIZE: Connection pool size, ignored for SQLite (default: 10)
        DATABASE_MAX_OVERFLOW: Extra connections above the pool size (default: 5)
        DATABASE_POOL_TIMEOUT: Seconds to wait for a pooled connection (default: 30)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        url = settings.database.DATABASE_URL
        ```
    """

    DATABASE_URL: str = Field(
        default="sqlite:///./notify_dispatch.db", alias="DATABASE_URL"
    )
    DATABASE_ECHO: bool = Field(default=False, alias="DATABASE_ECHO")
    DATABASE_POOL_SIZE: int = Field(default=10, alias="DATABASE_POOL_SIZE")
    DATABASE_MAX_OVERFLOW: int = Field(default=5, alias="DATABASE_MAX_OVERFLOW")
    DATABASE_POOL_TIMEOUT: int = Field(default=30, alias="DATABASE_POOL_TIMEOUT")

    @property
    def is_sqlite(self) -> bool:
        """Check whether the configured URL targets SQLite."""
        return self.DATABASE_URL.startswith("sqlite")
