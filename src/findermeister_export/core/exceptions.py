"""
Export Exceptions

Error taxonomy for the export job. Fatal errors (configuration,
discovery, persistence) propagate to the entry point, which maps
them to a non-zero exit status. ``ExtractionError`` is recovered
per table by the exporter.
"""

from __future__ import annotations


class ExportError(Exception):
    """Base class for all export failures."""


class ConfigurationError(ExportError):
    """Required configuration (DATABASE_URL) is missing or invalid."""


class DiscoveryError(ExportError):
    """The schema catalog query failed. No table is processed."""

    def __init__(self, schema: str, cause: BaseException | None = None):
        self.schema = schema
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not list tables in schema '{schema}'{detail}")


class ExtractionError(ExportError):
    """Reading one table's rows failed. The table is skipped."""

    def __init__(self, table: str, cause: BaseException | None = None):
        self.table = table
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not export table '{table}'{detail}")


class PersistenceError(ExportError):
    """Writing an output file failed. Files already written are kept."""

    def __init__(self, path: str, cause: BaseException | None = None):
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not write '{path}'{detail}")
