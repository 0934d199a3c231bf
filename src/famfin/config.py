"""Runtime configuration for famfin.

Settings come from ``FAMFIN_*`` environment variables or a ``.env`` file in
the working directory. ``get_settings`` caches the validated result so every
module in a process sees the same configuration.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_database_url() -> str:
    """Return the SQLite URL under ~/.famfin, creating the directory."""
    db_dir = Path.home() / ".famfin"
    db_dir.mkdir(exist_ok=True)
    return f"sqlite:///{db_dir / 'famfin.db'}"


class FamfinSettings(BaseSettings):
    """Runtime configuration for the CLI and the REST API."""

    model_config = SettingsConfigDict(
        env_prefix="FAMFIN_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: Optional[str] = Field(
        None,
        description="SQLAlchemy database URL. Defaults to ~/.famfin/famfin.db.",
    )
    storage_backend: Literal["sqlalchemy", "memory"] = Field(
        "sqlalchemy",
        description="Which storage implementation backs the services.",
    )
    default_user_id: Optional[str] = Field(
        None,
        description="Owner used when a request does not carry an X-User-Id header.",
    )
    api_host: str = Field("127.0.0.1", description="Interface the API server binds to.")
    api_port: int = Field(8000, ge=1, le=65535, description="Port the API server exposes.")
    log_level: str = Field("WARNING", description="Root logging level.")

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    def resolved_database_url(self) -> str:
        return self.database_url or default_database_url()


@lru_cache()
def get_settings() -> FamfinSettings:
    """Return cached settings."""
    return FamfinSettings()
