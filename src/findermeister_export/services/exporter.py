"""
Database Exporter

Orchestrates one export run end to end:

    1. Discovery   - list tables in the configured schema (fatal on failure)
    2. Extraction  - SELECT * per table, sequentially (skip-and-continue)
    3. CSV         - one file per non-empty table, written as it is read
    4. Aggregate   - one JSON document built from the same snapshots
    5. Extras      - optional summary JSON and SQL dump

Every output is derived from the snapshots fetched in this run;
nothing is queried twice.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from findermeister_export.core.config import Settings
from findermeister_export.core.exceptions import DiscoveryError, ExtractionError
from findermeister_export.models.schemas import (
    ExportDocument,
    ExportResult,
    ExportSummary,
    TableSnapshot,
)
from findermeister_export.repositories.catalog import CatalogRepository
from findermeister_export.services.csv_encoding import encode_table
from findermeister_export.services.sql_dump import encode_sql_dump
from findermeister_export.services.writer import ExportWriter, format_timestamp

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


class DatabaseExporter:
    """
    Sequential exporter over a single shared connection.

    Tables are processed one at a time: extraction of table N+1 never
    starts before table N has been read, encoded and written. There is
    no wrapping transaction, so rows of different tables may come from
    different points in time if the database is written to meanwhile.

    Usage::

        exporter = DatabaseExporter(settings, engine)
        result = await exporter.run()
        print(result.json_path)
    """

    def __init__(
        self,
        settings: Settings,
        engine: AsyncEngine | None = None,
        *,
        repository: CatalogRepository | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.settings = settings
        self.engine = engine
        self.repository = repository or CatalogRepository()
        self.clock = clock

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self) -> ExportResult:
        """
        Connect, export every table, and close the connection.

        Raises:
            DiscoveryError: Connection or schema catalog query failed.
            PersistenceError: An output file could not be written.
        """
        if self.engine is None:
            raise RuntimeError("DatabaseExporter.run() needs an engine")

        try:
            conn = await self.engine.connect()
        except (SQLAlchemyError, OSError) as exc:
            raise DiscoveryError(self.settings.DATABASE_SCHEMA, exc) from exc

        try:
            return await self.export(conn)
        finally:
            await conn.close()

    async def export(self, conn: AsyncConnection) -> ExportResult:
        """Run the export over an already open connection."""
        schema = self.settings.DATABASE_SCHEMA
        started = self.clock()
        timestamp = format_timestamp(started)

        logger.info("Starting database export (schema=%s, timestamp=%s)", schema, timestamp)

        # Fatal: nothing is created on disk before discovery succeeds
        tables = await self.repository.list_tables(conn, schema)
        logger.info("Found %d tables to export", len(tables))

        writer = ExportWriter(Path(self.settings.EXPORT_DIR), timestamp)
        await writer.prepare()

        snapshots: list[TableSnapshot] = []
        csv_files: list[Path] = []

        for index, table in enumerate(tables, start=1):
            logger.info("[%d/%d] Exporting %s...", index, len(tables), table)
            snapshot = await self._extract(conn, table, schema)
            snapshots.append(snapshot)
            if snapshot.failed:
                continue

            csv_text = encode_table(snapshot)
            if csv_text is None:
                logger.info("  %s is empty, no CSV written", table)
                continue

            csv_files.append(await writer.write_csv(table, csv_text))
            logger.info("  %s: %d records exported", table, snapshot.record_count)

        document = ExportDocument.from_snapshots(
            snapshots,
            exported_at=started,
            database=self.settings.DATABASE_LABEL,
        )
        result = ExportResult(
            document=document,
            json_path=await writer.write_json(document.to_json()),
            csv_dir=writer.csv_dir,
            csv_files=csv_files,
        )

        if self.settings.EXPORT_SUMMARY:
            summary = ExportSummary.from_document(document)
            result.summary_path = await writer.write_summary(summary.to_json())

        if self.settings.EXPORT_SQL_DUMP:
            result.sql_path = await writer.write_sql(
                encode_sql_dump(snapshots, document.metadata)
            )

        meta = document.metadata
        logger.info(
            "Export completed: %d tables, %d records -> %s, %s/",
            meta.total_tables,
            meta.total_records,
            result.json_path,
            result.csv_dir,
        )
        if meta.failed_tables:
            logger.warning("Tables skipped due to errors: %s", ", ".join(meta.failed_tables))
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _extract(self, conn: AsyncConnection, table: str, schema: str) -> TableSnapshot:
        """Read one table; a failure yields an empty, flagged snapshot."""
        try:
            return await self.repository.fetch_rows(conn, table, schema)
        except ExtractionError as exc:
            cause = exc.cause if exc.cause is not None else exc
            logger.warning("Could not export table %s: %s", table, cause)
            return TableSnapshot(name=table, error=str(cause))
