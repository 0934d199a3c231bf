"""Storage layer for famfin application."""

from famfin.database.base import Storage
from famfin.database.factories import (
    create_memory_storage,
    create_sqlalchemy_storage,
    create_sqlite_storage,
    create_storage,
)

__all__ = [
    "Storage",
    "create_memory_storage",
    "create_sqlalchemy_storage",
    "create_sqlite_storage",
    "create_storage",
]
