"""
SQL Dump Unit Tests

Verifies literal rendering and the overall dump script layout.
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID

from findermeister_export.models.schemas import ExportDocument, TableSnapshot
from findermeister_export.services.sql_dump import encode_sql_dump, insert_statement, sql_literal

NOW = datetime(2026, 10, 16, 9, 30, 5, tzinfo=UTC)


class TestSqlLiteral:
    def test_null(self) -> None:
        assert sql_literal(None) == "NULL"

    def test_string_doubles_single_quotes(self) -> None:
        assert sql_literal("O'Brien") == "'O''Brien'"

    def test_array(self) -> None:
        assert sql_literal(["a", "it's"]) == "ARRAY['a','it''s']"

    def test_bool_and_numbers(self) -> None:
        assert sql_literal(True) == "true"
        assert sql_literal(7) == "7"
        assert sql_literal(1.5) == "1.5"

    def test_datetime_quoted_iso(self) -> None:
        assert sql_literal(NOW) == "'2026-10-16T09:30:05+00:00'"

    def test_json_object(self) -> None:
        assert sql_literal({"theme": "dark"}) == "'{\"theme\":\"dark\"}'"

    def test_uuid_quoted(self) -> None:
        value = UUID("12345678-1234-5678-1234-567812345678")
        assert sql_literal(value) == "'12345678-1234-5678-1234-567812345678'"


def test_insert_statement_quotes_identifiers() -> None:
    stmt = insert_statement("users", ["id", "email"], {"id": 1, "email": "a@b.c"})

    assert stmt == "INSERT INTO \"users\" (\"id\", \"email\") VALUES (1, 'a@b.c');"


def test_dump_layout_skips_empty_and_failed_tables() -> None:
    snapshots = [
        TableSnapshot(name="blog_posts", columns=["id"]),
        TableSnapshot(name="orders", error="permission denied"),
        TableSnapshot(name="users", columns=["id"], rows=[{"id": 1}, {"id": 2}]),
    ]
    document = ExportDocument.from_snapshots(snapshots, exported_at=NOW, database="FM")

    dump = encode_sql_dump(snapshots, document.metadata)

    assert dump.startswith("-- FinderMeister Database Export\n")
    assert "-- Total Records: 2" in dump
    assert "SET session_replication_role = replica;" in dump
    assert dump.rstrip().endswith("SET session_replication_role = DEFAULT;")
    assert '-- Table: users (2 records)' in dump
    assert dump.count("INSERT INTO") == 2
    assert "blog_posts" not in dump
    assert "orders" not in dump


def test_special_floats_are_valid_sql() -> None:
    assert sql_literal(float("nan")) == "'NaN'::float8"
    assert sql_literal(float("inf")) == "'Infinity'::float8"
    assert sql_literal(float("-inf")) == "'-Infinity'::float8"
