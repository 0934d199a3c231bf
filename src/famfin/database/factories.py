"""Storage factory functions for creating storage instances."""

import os
from typing import Optional

from famfin.config import FamfinSettings, default_database_url, get_settings
from famfin.database.base import Storage
from famfin.database.memory import MemoryStorage
from famfin.database.sqlalchemy_db import SQLAlchemyStorage


def create_sqlalchemy_storage(database_url: Optional[str] = None) -> SQLAlchemyStorage:
    """Create a SQLAlchemy storage instance with its schema ready.

    Args:
        database_url: SQLAlchemy URL. If None, checks FAMFIN_DATABASE_URL
            environment variable, then defaults to ~/.famfin/famfin.db

    Returns:
        SQLAlchemyStorage instance with default categories seeded
    """
    if database_url is None:
        database_url = os.environ.get("FAMFIN_DATABASE_URL")

    if database_url is None:
        database_url = default_database_url()

    storage = SQLAlchemyStorage(database_url)
    storage.initialize_schema()
    return storage


def create_sqlite_storage(database_path: str) -> SQLAlchemyStorage:
    """Create a SQLAlchemy storage backed by a SQLite file."""
    return create_sqlalchemy_storage(f"sqlite:///{database_path}")


def create_memory_storage(seed_defaults: bool = True) -> MemoryStorage:
    """Create an in-memory storage instance."""
    return MemoryStorage(seed_defaults=seed_defaults)


def create_storage(settings: Optional[FamfinSettings] = None) -> Storage:
    """Create the storage backend selected by the settings."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return create_memory_storage()
    return create_sqlalchemy_storage(settings.database_url)
