"""Storage gateway handle.

Built once at process start and passed into the event service. Each
operation runs inside :meth:`StorageGateway.connection`, which commits on
success, rolls back on any error and always closes the connection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from datepoll.config.settings import Settings
from datepoll.db import sqlite_client
from datepoll.db.sqlite_client import get_connection
from datepoll.events.models import Event

logger = logging.getLogger(__name__)


def _safe_rollback(conn: Any) -> None:
    try:
        conn.rollback()
    except Exception:
        logger.exception("Rollback failed")


class StorageGateway:
    def __init__(self, db_path: str, database_url: str = "") -> None:
        self.db_path = db_path
        self.database_url = database_url

    @classmethod
    def from_settings(cls, settings: Settings) -> StorageGateway:
        return cls(db_path=settings.sqlite_db_path, database_url=settings.database_url)

    @contextmanager
    def connection(self) -> Iterator[Any]:
        conn = get_connection(self.db_path, self.database_url)
        try:
            yield conn
            conn.commit()
        except Exception:
            logger.exception("Transaction rolled back")
            _safe_rollback(conn)
            raise
        finally:
            conn.close()

    def ensure_schema(self) -> None:
        with self.connection() as conn:
            sqlite_client.init_schema(conn)
        logger.info("Schema ensured")

    def create_event(self, name: str, dates: Sequence[datetime]) -> Event:
        with self.connection() as conn:
            event = sqlite_client.create_event(conn, name, dates)
        logger.info("Created event id=%s with %d dates", event.id, len(event.dates))
        return event

    def get_event(self, event_id: int) -> Event | None:
        with self.connection() as conn:
            return sqlite_client.get_event(conn, event_id)

    def list_events(self) -> list[Event]:
        with self.connection() as conn:
            return sqlite_client.list_events(conn)

    def save_votes(self, dates: Sequence[datetime], voter_name: str, event_id: int) -> None:
        with self.connection() as conn:
            sqlite_client.save_votes(conn, dates, voter_name, event_id)
        logger.info("Saved %d votes for event id=%s", len(dates), event_id)

    def delete_event(self, event_id: int) -> bool:
        with self.connection() as conn:
            return sqlite_client.delete_event(conn, event_id)

    def ping(self) -> bool:
        with self.connection() as conn:
            return sqlite_client.ping(conn)
