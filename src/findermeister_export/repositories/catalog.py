"""
Catalog Repository

Data access layer for the export job.
Lists the tables of a schema from information_schema and reads
each table's rows over a single shared connection.
"""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from findermeister_export.core.exceptions import DiscoveryError, ExtractionError
from findermeister_export.models.schemas import TableSnapshot

logger = logging.getLogger(__name__)

LIST_TABLES_SQL = text(
    """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = :schema
      AND table_type = 'BASE TABLE'
    ORDER BY table_name
    """
)


def quote_identifier(name: str) -> str:
    """Double-quote a Postgres identifier, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


class CatalogRepository:
    """
    Repository for schema discovery and full-table reads.

    All methods expect an externally managed ``AsyncConnection``.
    Driver errors never escape raw:
        - ``list_tables`` raises ``DiscoveryError`` (fatal for the run).
        - ``fetch_rows`` raises ``ExtractionError`` (caller skips the table).
    """

    async def list_tables(self, conn: AsyncConnection, schema: str) -> list[str]:
        """Return table names in ``schema``, ordered alphabetically."""
        try:
            result = await conn.execute(LIST_TABLES_SQL, {"schema": schema})
        except SQLAlchemyError as exc:
            raise DiscoveryError(schema, exc) from exc

        tables = [row[0] for row in result.fetchall()]
        logger.debug("Schema '%s' has %d tables", schema, len(tables))
        return tables

    async def fetch_rows(
        self,
        conn: AsyncConnection,
        table: str,
        schema: str,
    ) -> TableSnapshot:
        """
        Read every row of ``table``.

        Column order comes from the result cursor, which for ``SELECT *``
        is the table's declared column order.
        """
        stmt = text(f"SELECT * FROM {quote_identifier(schema)}.{quote_identifier(table)}")
        try:
            result = await conn.execute(stmt)
            columns = list(result.keys())
            rows = [dict(mapping) for mapping in result.mappings().all()]
        except SQLAlchemyError as exc:
            raise ExtractionError(table, exc) from exc

        return TableSnapshot(name=table, columns=columns, rows=rows)
