"""Models package - re-exports export schemas for convenient imports."""

from findermeister_export.models.schemas import (
    ExportDocument,
    ExportMetadata,
    ExportResult,
    ExportSummary,
    Row,
    TablePreview,
    TableSnapshot,
)

__all__ = [
    "ExportDocument",
    "ExportMetadata",
    "ExportResult",
    "ExportSummary",
    "Row",
    "TablePreview",
    "TableSnapshot",
]
