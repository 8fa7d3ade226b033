from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from userdesk.database import Database, resolve_database_path


def _insert(database: Database, username: str, email: str) -> None:
    database.query(
        "INSERT INTO users (username, email, password_hash, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
        [username, email, "hash", "2024-01-01T00:00:00+00:00", "2024-01-01T00:00:00+00:00"],
    )


def test_initialize_is_idempotent(tmp_path: Path) -> None:
    database = Database(tmp_path / "nested" / "userdesk.sqlite3")
    database.initialize()
    database.initialize()

    assert (tmp_path / "nested" / "userdesk.sqlite3").exists()
    assert database.query("SELECT * FROM users").row_count == 0


def test_query_accepts_mapping_and_positional_forms(database: Database) -> None:
    _insert(database, "alice", "alice@example.com")

    by_mapping = database.query(
        {"text": "SELECT username FROM users WHERE email = ?", "values": ["alice@example.com"]}
    )
    by_position = database.query("SELECT username FROM users WHERE email = ?", ["alice@example.com"])

    assert by_mapping.row_count == by_position.row_count == 1
    assert by_mapping.rows[0]["username"] == by_position.rows[0]["username"] == "alice"


def test_row_count_reports_affected_rows_for_writes(database: Database) -> None:
    _insert(database, "alice", "alice@example.com")
    _insert(database, "bob", "bob@example.com")

    updated = database.query("UPDATE users SET email = LOWER(email)")
    assert updated.row_count == 2
    assert updated.rows == []

    missing = database.query("DELETE FROM users WHERE id = ?", [999])
    assert missing.row_count == 0


def test_unique_indexes_ignore_case(database: Database) -> None:
    _insert(database, "alice", "alice@example.com")

    with pytest.raises(sqlite3.IntegrityError):
        _insert(database, "ALICE", "other@example.com")

    with pytest.raises(sqlite3.IntegrityError):
        _insert(database, "other", "Alice@Example.com")


def test_driver_errors_propagate_unchanged(database: Database) -> None:
    with pytest.raises(sqlite3.OperationalError):
        database.query("SELECT * FROM missing_table")


def test_resolve_database_path_prefers_explicit_value(tmp_path: Path) -> None:
    explicit = resolve_database_path(str(tmp_path / "custom.sqlite3"))
    assert explicit == (tmp_path / "custom.sqlite3").resolve()

    default = resolve_database_path(None)
    assert default.name == "userdesk.sqlite3"
    assert default.parent.name == "data"
