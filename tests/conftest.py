from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userdesk.database import Database
from userdesk.users import UserRepository


@pytest.fixture()
def database(tmp_path: Path) -> Database:
    db = Database(tmp_path / "userdesk.sqlite3")
    db.initialize()
    return db


@pytest.fixture()
def repository(database: Database) -> UserRepository:
    return UserRepository(database)
