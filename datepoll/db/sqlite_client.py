from __future__ import annotations

import sqlite3
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from datepoll.events.dates import format_date, parse_date
from datepoll.events.models import Event, Vote

SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL CHECK(trim(name) <> '')
);

CREATE TABLE IF NOT EXISTS dates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER NOT NULL REFERENCES events(id) ON DELETE CASCADE,
    date TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_dates_event ON dates(event_id);

CREATE TABLE IF NOT EXISTS votes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER NOT NULL REFERENCES events(id) ON DELETE CASCADE,
    date TEXT NOT NULL,
    voter_name TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_votes_event ON votes(event_id);
"""

POSTGRES_SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS events (
        id BIGSERIAL PRIMARY KEY,
        name TEXT NOT NULL CHECK(btrim(name) <> '')
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS dates (
        id BIGSERIAL PRIMARY KEY,
        event_id BIGINT NOT NULL REFERENCES events(id) ON DELETE CASCADE,
        date TIMESTAMPTZ NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_dates_event ON dates(event_id)",
    """
    CREATE TABLE IF NOT EXISTS votes (
        id BIGSERIAL PRIMARY KEY,
        event_id BIGINT NOT NULL REFERENCES events(id) ON DELETE CASCADE,
        date TIMESTAMPTZ NOT NULL,
        voter_name TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_votes_event ON votes(event_id)",
]


def _is_postgres(conn: Any) -> bool:
    return conn.__class__.__module__.startswith("psycopg")


def _adapt_sql(conn: Any, sql: str) -> str:
    return sql.replace("?", "%s") if _is_postgres(conn) else sql


def _execute(conn: Any, sql: str, params: tuple[Any, ...] | list[Any] = ()) -> Any:
    if _is_postgres(conn):
        cur = conn.cursor()
        cur.execute(_adapt_sql(conn, sql), tuple(params))
        return cur
    return conn.execute(_adapt_sql(conn, sql), tuple(params))


def _executemany(conn: Any, sql: str, params_seq: list[tuple[Any, ...]]) -> Any:
    if _is_postgres(conn):
        cur = conn.cursor()
        cur.executemany(_adapt_sql(conn, sql), params_seq)
        return cur
    return conn.executemany(_adapt_sql(conn, sql), params_seq)


def _to_dict(row: Any) -> dict[str, Any]:
    return row if isinstance(row, dict) else dict(row)


def _to_db_date(conn: Any, value: Any) -> Any:
    # SQLite keeps the canonical text form so equal instants group together.
    if value is None:
        return None
    return parse_date(value) if _is_postgres(conn) else format_date(value)


def get_connection(db_path: str, database_url: str = "") -> Any:
    if database_url.strip():
        from psycopg import connect
        from psycopg.rows import dict_row

        return connect(database_url.strip(), row_factory=dict_row, autocommit=False)

    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


def init_schema(conn: Any) -> None:
    if _is_postgres(conn):
        cur = conn.cursor()
        for statement in POSTGRES_SCHEMA_STATEMENTS:
            cur.execute(statement)
    else:
        conn.executescript(SQLITE_SCHEMA)
    conn.commit()


def create_event(conn: Any, name: str, dates: Sequence[datetime]) -> Event:
    """Insert an event and its candidate dates. The caller owns the transaction."""
    if _is_postgres(conn):
        row = _execute(conn, "INSERT INTO events (name) VALUES (?) RETURNING id", [name]).fetchone()
        event_id = int(_to_dict(row)["id"])
    else:
        event_id = int(_execute(conn, "INSERT INTO events (name) VALUES (?)", [name]).lastrowid)
    _executemany(
        conn,
        "INSERT INTO dates (event_id, date) VALUES (?, ?)",
        [(event_id, _to_db_date(conn, d)) for d in dates],
    )
    return Event(id=event_id, name=name, dates=list(dates))


def _get_dates(conn: Any, event_id: int) -> list[datetime]:
    rows = _execute(
        conn,
        "SELECT date FROM dates WHERE event_id = ? ORDER BY id ASC",
        [event_id],
    ).fetchall()
    return [parse_date(_to_dict(row)["date"]) for row in rows]


def get_votes(conn: Any, event_id: int) -> list[Vote]:
    rows = _execute(
        conn,
        "SELECT date, voter_name FROM votes WHERE event_id = ? ORDER BY id ASC",
        [event_id],
    ).fetchall()
    grouped: dict[datetime, list[str]] = defaultdict(list)
    for row in rows:
        data = _to_dict(row)
        grouped[parse_date(data["date"])].append(data["voter_name"])
    return [Vote(date=date, people=people) for date, people in grouped.items()]


def get_event(conn: Any, event_id: int) -> Event | None:
    row = _execute(conn, "SELECT id, name FROM events WHERE id = ?", [event_id]).fetchone()
    if not row:
        return None
    data = _to_dict(row)
    return Event(
        id=int(data["id"]),
        name=data["name"],
        dates=_get_dates(conn, event_id),
        votes=get_votes(conn, event_id),
    )


def list_events(conn: Any) -> list[Event]:
    events = [
        _to_dict(row)
        for row in _execute(conn, "SELECT id, name FROM events ORDER BY id ASC").fetchall()
    ]
    date_rows = _execute(
        conn, "SELECT event_id, date FROM dates ORDER BY event_id ASC, id ASC"
    ).fetchall()
    dates_by_event: dict[int, list[datetime]] = defaultdict(list)
    for row in date_rows:
        data = _to_dict(row)
        dates_by_event[int(data["event_id"])].append(parse_date(data["date"]))
    return [
        Event(
            id=int(event["id"]),
            name=event["name"],
            dates=dates_by_event.get(int(event["id"]), []),
        )
        for event in events
    ]


def save_votes(conn: Any, dates: Sequence[datetime], voter_name: str, event_id: int) -> None:
    """Insert one vote row per date. Membership in the event's dates is not checked here."""
    _executemany(
        conn,
        "INSERT INTO votes (event_id, date, voter_name) VALUES (?, ?, ?)",
        [(event_id, _to_db_date(conn, d), voter_name) for d in dates],
    )


def delete_event(conn: Any, event_id: int) -> bool:
    cur = _execute(conn, "DELETE FROM events WHERE id = ?", [event_id])
    return cur.rowcount > 0


def ping(conn: Any) -> bool:
    row = _execute(conn, "SELECT 1 AS ok").fetchone()
    return row is not None
