"""
FinderMeister Database Export - Entry Point

Batch job that backs up every table of the FinderMeister Postgres
database to JSON, CSV and SQL files. Takes no command-line arguments;
configuration comes from the environment (see core.config.Settings).

Run:
    DATABASE_URL=postgresql://... python -m findermeister_export

Exit status:
    0 on success (even if individual tables were skipped),
    1 on configuration, discovery or persistence failure.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from findermeister_export.core.config import Settings
from findermeister_export.core.database import build_engine
from findermeister_export.core.exceptions import (
    ConfigurationError,
    DiscoveryError,
    PersistenceError,
)
from findermeister_export.core.logging import setup_logging
from findermeister_export.models.schemas import ExportResult
from findermeister_export.services.exporter import DatabaseExporter

logger = logging.getLogger(__name__)


async def run_export(settings: Settings) -> ExportResult:
    """Build the engine, run one export, and always dispose the engine."""
    engine = build_engine(settings)
    try:
        return await DatabaseExporter(settings, engine).run()
    finally:
        await engine.dispose()


def print_report(result: ExportResult, console: Console | None = None) -> None:
    """Render the end-of-run statistics."""
    console = console or Console()
    meta = result.document.metadata

    lines = [
        f"[bold]JSON:[/bold]    {result.json_path}",
        f"[bold]CSV:[/bold]     {result.csv_dir}/ ({len(result.csv_files)} files)",
    ]
    if result.summary_path is not None:
        lines.append(f"[bold]Summary:[/bold] {result.summary_path}")
    if result.sql_path is not None:
        lines.append(f"[bold]SQL:[/bold]     {result.sql_path}")
    lines.append("")
    lines.append(
        f"Total tables: {meta.total_tables}  |  "
        f"Tables with data: {meta.tables_with_data}  |  "
        f"Total records: {meta.total_records}"
    )
    console.print(Panel("\n".join(lines), title="Database export completed", border_style="green"))

    table = Table(box=box.SIMPLE, show_header=True)
    table.add_column("Table")
    table.add_column("Records", justify="right")
    table.add_column("Status")
    for name, count in meta.table_record_counts.items():
        if name in meta.failed_tables:
            table.add_row(name, "-", "[red]failed[/red]")
        elif count == 0:
            table.add_row(name, "0", "[dim]empty[/dim]")
        else:
            table.add_row(name, str(count), "[green]ok[/green]")
    console.print(table)


def main() -> int:
    """Run the export job and return the process exit status."""
    try:
        settings = Settings()
    except ValidationError as exc:
        setup_logging()
        logger.error("Invalid configuration: %s", exc)
        return 1

    setup_logging(settings.LOG_LEVEL)

    try:
        result = asyncio.run(run_export(settings))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 1
    except DiscoveryError as exc:
        logger.error("Export aborted, schema discovery failed: %s", exc)
        return 1
    except PersistenceError as exc:
        logger.error("Export aborted, output could not be written: %s", exc)
        return 1

    print_report(result)
    return 0
