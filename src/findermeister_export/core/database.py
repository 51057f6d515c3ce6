"""
Database Layer

Async SQLAlchemy engine setup for the export job.
Uses asyncpg as the PostgreSQL driver for non-blocking I/O.

Design:
    - The engine is built from an explicit Settings object, never from
      ambient process state, so the exporter stays testable.
    - AUTOCOMMIT: every catalog and table query is its own transaction.
      A failed SELECT on one table does not abort the queries that follow.
    - json/jsonb are decoded by the driver. Raw ``text()`` queries never
      run the JSON type's result processor, so without these codecs the
      values would arrive as unparsed strings.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from findermeister_export.core.config import Settings

logger = logging.getLogger(__name__)

JSON_TYPES = ("json", "jsonb")


async def set_json_codecs(driver_connection: Any) -> None:
    """Decode json/jsonb columns into Python objects on an asyncpg connection."""
    for type_name in JSON_TYPES:
        await driver_connection.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog",
            format="text",
        )


def register_json_codecs(dbapi_connection: Any, connection_record: Any) -> None:
    """Pool ``connect`` hook; runs after the dialect's own codec setup."""
    dbapi_connection.run_async(set_json_codecs)


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for one export run.

    Raises:
        ConfigurationError: If DATABASE_URL is missing or invalid.
    """
    url = settings.require_database_url()

    # Single shared connection per run; no pool growth needed
    engine = create_async_engine(
        url,
        echo=False,
        pool_size=1,
        max_overflow=0,
        isolation_level="AUTOCOMMIT",
        connect_args=settings.connect_args,
    )
    event.listen(engine.sync_engine, "connect", register_json_codecs)

    logger.info(
        "Database engine created: %s@%s/%s",
        url.username or "?",
        url.host or "?",
        url.database or "?",
    )
    return engine
