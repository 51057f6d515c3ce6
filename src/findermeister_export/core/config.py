"""
Export Configuration

Centralized settings management using Pydantic BaseSettings.
All values are loaded from environment variables or .env file.
"""

from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from findermeister_export.core.exceptions import ConfigurationError

ASYNC_DRIVER = "postgresql+asyncpg"

# Schemes accepted in DATABASE_URL and rewritten to the asyncpg dialect
_POSTGRES_SCHEMES = frozenset({"postgres", "postgresql", "postgresql+asyncpg"})


class Settings(BaseSettings):
    """
    Export job settings with environment variable binding.

    Required at run time (validated by ``require_database_url``):
        DATABASE_URL

    Optional env vars:
        EXPORT_DIR (exports), DATABASE_SCHEMA (public),
        DATABASE_LABEL (FinderMeister Service Marketplace),
        EXPORT_SQL_DUMP (True), EXPORT_SUMMARY (True), LOG_LEVEL (INFO)
    """

    PROJECT_NAME: str = "FinderMeister Export"

    # Database
    DATABASE_URL: str | None = None
    DATABASE_SCHEMA: str = "public"
    DATABASE_LABEL: str = "FinderMeister Service Marketplace"

    # Output
    EXPORT_DIR: str = "exports"
    EXPORT_SQL_DUMP: bool = True
    EXPORT_SUMMARY: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",  # Silently ignore unknown env vars
    )

    def require_database_url(self) -> URL:
        """
        Return DATABASE_URL rewritten for the asyncpg driver.

        Raises:
            ConfigurationError: If DATABASE_URL is unset or not a Postgres URL.
        """
        if not self.DATABASE_URL:
            raise ConfigurationError("DATABASE_URL environment variable is required")

        try:
            url = make_url(self.DATABASE_URL)
        except ArgumentError as exc:
            raise ConfigurationError(f"DATABASE_URL is not a valid URL: {exc}") from exc

        if url.drivername not in _POSTGRES_SCHEMES:
            raise ConfigurationError(
                f"Unsupported database scheme '{url.drivername}'. "
                f"Expected one of: {', '.join(sorted(_POSTGRES_SCHEMES))}"
            )

        # libpq-only parameter; asyncpg takes it as the ``ssl`` connect arg
        return url.set(drivername=ASYNC_DRIVER).difference_update_query(["sslmode"])

    @property
    def connect_args(self) -> dict[str, Any]:
        """asyncpg connect arguments derived from DATABASE_URL query params."""
        if not self.DATABASE_URL:
            return {}
        sslmode = make_url(self.DATABASE_URL).query.get("sslmode")
        if isinstance(sslmode, tuple):
            sslmode = sslmode[-1]
        return {"ssl": sslmode} if sslmode else {}
