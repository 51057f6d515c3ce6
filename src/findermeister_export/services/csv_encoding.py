"""
CSV Encoding Service

Turns a TableSnapshot into comma-separated text.

Cell rules:
    - None: empty field
    - str: quoted (inner quotes doubled) only when it contains a
      comma, a quote or a line break
    - list / tuple / dict: compact JSON, always quoted
    - bool: ``true`` / ``false``
    - date / time / datetime: ISO-8601
    - bytes: ``\\x``-prefixed hex, as Postgres prints bytea
    - anything else: ``str(value)``, quoted like a string if needed
"""

from __future__ import annotations

import json
from datetime import date, datetime, time
from typing import Any, Final

from findermeister_export.models.schemas import TableSnapshot

DELIMITER: Final[str] = ","
QUOTE: Final[str] = '"'
LINE_END: Final[str] = "\n"

_NEEDS_QUOTING: Final[frozenset[str]] = frozenset({DELIMITER, QUOTE, "\n", "\r"})


def _quote(text: str) -> str:
    return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE


def _quote_if_needed(text: str) -> str:
    if any(ch in _NEEDS_QUOTING for ch in text):
        return _quote(text)
    return text


def to_json_text(value: Any) -> str:
    """Compact JSON, matching what JSON.stringify-based consumers expect."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def encode_cell(value: Any) -> str:
    """Encode a single value as one CSV field."""
    if value is None:
        return ""
    if isinstance(value, str):
        return _quote_if_needed(value)
    if isinstance(value, (list, tuple, dict)):
        return _quote(to_json_text(value))
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(value).hex()
    return _quote_if_needed(str(value))


def encode_row(row: dict[str, Any], columns: list[str]) -> str:
    return DELIMITER.join(encode_cell(row.get(col)) for col in columns)


def encode_table(snapshot: TableSnapshot) -> str | None:
    """
    Encode a snapshot as CSV text: header line, then one line per row.

    Returns:
        The CSV text, or None when the table has no rows (no file is
        written for empty tables).
    """
    if not snapshot.rows:
        return None

    # Fall back to the first row's keys if the cursor reported no columns
    columns = snapshot.columns or list(snapshot.rows[0].keys())

    lines = [DELIMITER.join(columns)]
    lines.extend(encode_row(row, columns) for row in snapshot.rows)
    return LINE_END.join(lines) + LINE_END
