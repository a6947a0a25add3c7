from __future__ import annotations

import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

from datepoll.db.gateway import StorageGateway
from datepoll.db.sqlite_client import get_connection, init_schema


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Generator[sqlite3.Connection, None, None]:
    db_path = str(tmp_path / "test.db")
    conn = get_connection(db_path)
    init_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def gateway(tmp_path: Path) -> StorageGateway:
    store = StorageGateway(db_path=str(tmp_path / "gateway.db"))
    store.ensure_schema()
    return store


@pytest.fixture
def sample_dates() -> list[str]:
    return [
        "2026-03-10T19:00:00Z",
        "2026-03-11T19:00:00Z",
        "2026-03-12T19:00:00Z",
    ]
