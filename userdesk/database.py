"""SQLite-backed query execution for the user directory."""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Union

logger = logging.getLogger("userdesk.database")

USERNAME_INDEX = "ux_users_username_lower"
EMAIL_INDEX = "ux_users_email_lower"

QueryText = Union[str, Mapping[str, Any]]


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_database_path(env_value: Optional[str]) -> Path:
    """Resolve the on-disk path for the application database."""

    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "userdesk.sqlite3").resolve(strict=False)


@dataclass(frozen=True)
class QueryResult:
    """Rows produced by a statement together with its row count."""

    rows: List[sqlite3.Row] = field(default_factory=list)
    row_count: int = 0
    last_row_id: Optional[int] = None


class Database:
    """Simple wrapper around SQLite that executes parameterised statements."""

    def __init__(self, path: Path) -> None:
        _ensure_directory(path)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> None:
        """Create the required tables if they do not already exist."""

        with self._connect() as conn:
            conn.executescript(
                f"""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL,
                    email TEXT NOT NULL,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE UNIQUE INDEX IF NOT EXISTS {USERNAME_INDEX} ON users(LOWER(username));
                CREATE UNIQUE INDEX IF NOT EXISTS {EMAIL_INDEX} ON users(LOWER(email));
                """
            )
        logger.debug("Schema ensured for %s", self._path)

    def query(self, query: QueryText, values: Optional[Sequence[Any]] = None) -> QueryResult:
        """Execute a single statement and return its rows and row count.

        ``query`` is either the SQL text, with ``values`` passed alongside, or
        a mapping holding ``text`` and optional ``values`` keys.
        """

        if isinstance(query, Mapping):
            text = query["text"]
            if values is None:
                values = query.get("values")
        else:
            text = query
        params = tuple(values or ())

        conn = self._connect()
        try:
            with conn:
                cursor = conn.execute(text, params)
                rows = cursor.fetchall() if cursor.description is not None else []
                row_count = len(rows) if cursor.description is not None else cursor.rowcount
                last_row_id = cursor.lastrowid
        finally:
            conn.close()
        return QueryResult(rows=list(rows), row_count=max(row_count, 0), last_row_id=last_row_id)


__all__ = [
    "Database",
    "EMAIL_INDEX",
    "QueryResult",
    "USERNAME_INDEX",
    "resolve_database_path",
]
