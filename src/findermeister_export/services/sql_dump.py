"""
SQL Dump Service

Renders table snapshots as a re-importable script of INSERT statements.
Foreign key triggers are disabled for the duration of the import via
``session_replication_role`` so tables can be loaded in name order.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Any

from findermeister_export.models.schemas import ExportMetadata, TableSnapshot
from findermeister_export.repositories.catalog import quote_identifier
from findermeister_export.services.csv_encoding import to_json_text


def _string_literal(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def _float_literal(value: float) -> str:
    if math.isnan(value):
        return "'NaN'::float8"
    if math.isinf(value):
        return "'Infinity'::float8" if value > 0 else "'-Infinity'::float8"
    return repr(value)


def sql_literal(value: Any) -> str:
    """Render a Python value as a Postgres literal."""
    if value is None:
        return "NULL"
    if isinstance(value, str):
        return _string_literal(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "ARRAY[" + ",".join(_string_literal(str(v)) for v in value) + "]"
    if isinstance(value, dict):
        return _string_literal(to_json_text(value))
    if isinstance(value, (datetime, date, time)):
        return _string_literal(value.isoformat())
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "'\\x" + bytes(value).hex() + "'"
    if isinstance(value, float):
        return _float_literal(value)
    if isinstance(value, int):
        return str(value)
    # Decimal, UUID, intervals and other driver types
    return _string_literal(str(value))


def insert_statement(table: str, columns: list[str], row: dict[str, Any]) -> str:
    column_list = ", ".join(quote_identifier(col) for col in columns)
    values = ", ".join(sql_literal(row.get(col)) for col in columns)
    return f"INSERT INTO {quote_identifier(table)} ({column_list}) VALUES ({values});"


def encode_sql_dump(snapshots: list[TableSnapshot], metadata: ExportMetadata) -> str:
    """Build the full dump script for one run."""
    lines = [
        "-- FinderMeister Database Export",
        f"-- Generated on: {metadata.exported_at.isoformat()}",
        f"-- Database: {metadata.database}",
        f"-- Total Tables: {metadata.total_tables}",
        f"-- Total Records: {metadata.total_records}",
        "",
        "-- Disable foreign key checks for clean import",
        "SET session_replication_role = replica;",
        "",
    ]

    for snapshot in snapshots:
        if snapshot.failed or not snapshot.rows:
            continue
        columns = snapshot.columns or list(snapshot.rows[0].keys())
        lines.append(f"-- Table: {snapshot.name} ({snapshot.record_count} records)")
        lines.extend(insert_statement(snapshot.name, columns, row) for row in snapshot.rows)
        lines.append("")

    lines.append("-- Re-enable foreign key checks")
    lines.append("SET session_replication_role = DEFAULT;")
    return "\n".join(lines) + "\n"
