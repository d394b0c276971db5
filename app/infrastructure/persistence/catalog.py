"""Category and channel catalog queries."""

from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from infrastructure.notifications.errors import StorageError
from infrastructure.persistence.database import Database
from infrastructure.persistence.tables import Category, Channel


class CatalogItem(BaseModel):
    """A category or channel as exposed to API clients."""

    id: str
    name: str
    description: Optional[str] = None
    active: bool = True


class CatalogRepository:
    """Read access to the category and channel tables.

    Example:
        catalog = CatalogRepository(database)
        if "Sports" in catalog.active_category_names():
            ...
    """

    def __init__(self, database: Database):
        self.database = database

    def active_category_names(self) -> List[str]:
        """Names of active categories, sorted.

        Raises:
            StorageError: If the database cannot be queried
        """
        stmt = select(Category.name).where(Category.active.is_(True)).order_by(Category.name)
        return self._scalars(stmt)

    def active_channel_names(self) -> List[str]:
        stmt = select(Channel.name).where(Channel.active.is_(True)).order_by(Channel.name)
        return self._scalars(stmt)

    def list_categories(self) -> List[CatalogItem]:
        """Active categories ordered by name."""
        return self._items(Category)

    def list_channels(self) -> List[CatalogItem]:
        """Active channels ordered by name."""
        return self._items(Channel)

    def _scalars(self, stmt) -> List[str]:
        try:
            with self.database.session_scope() as session:
                return list(session.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read catalog: {e}") from e

    def _items(self, table) -> List[CatalogItem]:
        stmt = select(table).where(table.active.is_(True)).order_by(table.name)
        try:
            with self.database.session_scope() as session:
                return [
                    CatalogItem(
                        id=str(row.id),
                        name=row.name,
                        description=row.description,
                        active=row.active,
                    )
                    for row in session.scalars(stmt).all()
                ]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read catalog: {e}") from e
