"""
Export Schemas

Pydantic models for the export pipeline.
Defines the table snapshots read from the database and the
documents written to disk. JSON field names are camelCase to
keep the on-disk format stable for existing consumers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EXPORT_FORMAT_VERSION = "1.0"
EXPORT_DESCRIPTION = "Complete database export including all tables and data"

Row = dict[str, Any]


class TableSnapshot(BaseModel):
    """
    Rows of one table, read once per run.

    Every output format is encoded from the same snapshot, so the
    JSON document, CSV files and SQL dump always agree.

    Attributes:
        name: Table name as listed in the schema catalog.
        columns: Column names in result-cursor order.
        rows: One mapping per row, keyed by column name.
        error: Extraction failure message, None on success.
    """

    name: str = Field(min_length=1)
    columns: list[str] = Field(default_factory=list)
    rows: list[Row] = Field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def record_count(self) -> int:
        return len(self.rows)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        ser_json_bytes="base64",
    )


class ExportMetadata(_CamelModel):
    """Run-level metadata stored alongside the exported rows."""

    exported_at: datetime
    database: str
    version: str = EXPORT_FORMAT_VERSION
    description: str = EXPORT_DESCRIPTION
    total_tables: int = Field(ge=0)
    tables_with_data: int = Field(ge=0)
    total_records: int = Field(ge=0)
    table_record_counts: dict[str, int] = Field(default_factory=dict)
    failed_tables: list[str] = Field(default_factory=list)


class ExportDocument(_CamelModel):
    """
    Aggregate document: ``{metadata: {...}, data: {table: [row, ...]}}``.

    Tables that failed extraction are absent from ``data`` and
    listed in ``metadata.failedTables``.
    """

    metadata: ExportMetadata
    data: dict[str, list[Row]] = Field(default_factory=dict)

    @classmethod
    def from_snapshots(
        cls,
        snapshots: list[TableSnapshot],
        *,
        exported_at: datetime,
        database: str,
    ) -> ExportDocument:
        """Assemble the document from the snapshots of one run."""
        data = {s.name: s.rows for s in snapshots if not s.failed}
        counts = {s.name: s.record_count for s in snapshots}

        metadata = ExportMetadata(
            exported_at=exported_at,
            database=database,
            total_tables=len(snapshots),
            tables_with_data=sum(1 for count in counts.values() if count > 0),
            total_records=sum(counts.values()),
            table_record_counts=counts,
            failed_tables=[s.name for s in snapshots if s.failed],
        )
        return cls(metadata=metadata, data=data)

    def to_json(self) -> str:
        """Serialize; driver types with no JSON form (Range, BitString) use str()."""
        return self.model_dump_json(by_alias=True, indent=2, fallback=str)


class TablePreview(_CamelModel):
    record_count: int = Field(ge=0)
    sample_record: Row | None = None


class SummaryHeader(_CamelModel):
    exported_at: datetime
    database: str
    total_tables: int
    tables_with_data: int
    total_records: int
    table_record_counts: dict[str, int]
    failed_tables: list[str]


class ExportSummary(_CamelModel):
    """Readable companion file: counts plus the first row of each table."""

    export_summary: SummaryHeader
    table_preview: dict[str, TablePreview]

    @classmethod
    def from_document(cls, document: ExportDocument) -> ExportSummary:
        meta = document.metadata
        header = SummaryHeader(
            exported_at=meta.exported_at,
            database=meta.database,
            total_tables=meta.total_tables,
            tables_with_data=meta.tables_with_data,
            total_records=meta.total_records,
            table_record_counts=meta.table_record_counts,
            failed_tables=meta.failed_tables,
        )
        preview = {
            name: TablePreview(
                record_count=len(rows),
                sample_record=rows[0] if rows else None,
            )
            for name, rows in document.data.items()
        }
        return cls(export_summary=header, table_preview=preview)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2, fallback=str)


@dataclass
class ExportResult:
    """Outcome of one export run, consumed by the CLI report."""

    document: ExportDocument
    json_path: Path
    csv_dir: Path
    csv_files: list[Path] = field(default_factory=list)
    summary_path: Path | None = None
    sql_path: Path | None = None

    @property
    def failed_tables(self) -> list[str]:
        return self.document.metadata.failed_tables
