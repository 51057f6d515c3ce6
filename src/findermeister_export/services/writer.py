"""
Export Writer

Owns the on-disk layout of one export run::

    <export_dir>/findermeister_<ts>.json
    <export_dir>/findermeister_<ts>_summary.json
    <export_dir>/findermeister_<ts>.sql
    <export_dir>/csv_<ts>/<table>.csv

Blocking file I/O is offloaded to a thread via asyncio.to_thread,
one awaited write at a time. Nothing is rolled back on failure:
files written before a failing write stay on disk.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Final

from findermeister_export.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d_%H-%M-%S"
FILE_PREFIX: Final[str] = "findermeister"


def format_timestamp(moment: datetime) -> str:
    """Filesystem-safe timestamp (no colons), e.g. ``2026-10-16_09-30-00``."""
    return moment.strftime(TIMESTAMP_FORMAT)


# Injective: distinct table names always map to distinct files
_FILENAME_ESCAPES: Final[dict[str, str]] = {"%": "%25", "/": "%2F", "\\": "%5C"}


def safe_filename(name: str) -> str:
    """
    Make a table name usable as a single path component.

    Path separators are escaped and the special names ``.`` / ``..``
    are fully escaped, so the result never leaves its directory.
    """
    escaped = "".join(_FILENAME_ESCAPES.get(ch, ch) for ch in name)
    if escaped in {".", ".."}:
        escaped = escaped.replace(".", "%2E")
    return escaped


class ExportWriter:
    """
    Writes the artifacts of a single run under ``export_dir``.

    Usage::

        writer = ExportWriter(Path("exports"), format_timestamp(now))
        await writer.prepare()
        await writer.write_csv("users", csv_text)
        await writer.write_json(document.to_json())
    """

    def __init__(self, export_dir: Path, timestamp: str):
        self.export_dir = export_dir
        self.timestamp = timestamp

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    @property
    def csv_dir(self) -> Path:
        return self.export_dir / f"csv_{self.timestamp}"

    @property
    def json_path(self) -> Path:
        return self.export_dir / f"{FILE_PREFIX}_{self.timestamp}.json"

    @property
    def summary_path(self) -> Path:
        return self.export_dir / f"{FILE_PREFIX}_{self.timestamp}_summary.json"

    @property
    def sql_path(self) -> Path:
        return self.export_dir / f"{FILE_PREFIX}_{self.timestamp}.sql"

    def csv_path(self, table: str) -> Path:
        return self.csv_dir / f"{safe_filename(table)}.csv"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def prepare(self) -> None:
        """Create the output and CSV directories (idempotent)."""
        for directory in (self.export_dir, self.csv_dir):
            try:
                await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)
            except OSError as exc:
                raise PersistenceError(str(directory), exc) from exc

    async def write_csv(self, table: str, content: str) -> Path:
        return await self._write(self.csv_path(table), content)

    async def write_json(self, content: str) -> Path:
        return await self._write(self.json_path, content)

    async def write_summary(self, content: str) -> Path:
        return await self._write(self.summary_path, content)

    async def write_sql(self, content: str) -> Path:
        return await self._write(self.sql_path, content)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _write(self, path: Path, content: str) -> Path:
        try:
            await asyncio.to_thread(path.write_text, content, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(str(path), exc) from exc
        logger.debug("Wrote %s (%d chars)", path, len(content))
        return path
