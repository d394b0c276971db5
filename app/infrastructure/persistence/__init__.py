"""Persistence layer for users, catalog and the delivery log.

Relational storage through SQLAlchemy. All stores take an explicit
Database handle; SQLAlchemy errors surface as StorageError.
"""

from infrastructure.persistence.catalog import CatalogItem, CatalogRepository
from infrastructure.persistence.database import Database
from infrastructure.persistence.delivery_log import (
    DeliveryLogStore,
    normalize_log_row,
    parse_metadata,
)
from infrastructure.persistence.seed import (
    seed_all,
    seed_categories,
    seed_channels,
    seed_users,
)
from infrastructure.persistence.users import UserResolver

__all__ = [
    "CatalogItem",
    "CatalogRepository",
    "Database",
    "DeliveryLogStore",
    "UserResolver",
    "normalize_log_row",
    "parse_metadata",
    "seed_all",
    "seed_categories",
    "seed_channels",
    "seed_users",
]
