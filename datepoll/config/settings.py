from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
    database_url: str
    sqlite_db_path: str
    log_level: str


def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL", "").strip(),
        sqlite_db_path=os.getenv("SQLITE_DB_PATH", "data/datepoll.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    )


def validate_settings(settings: Settings) -> list[str]:
    errors: list[str] = []
    if settings.database_url and not settings.database_url.startswith(
        ("postgres://", "postgresql://")
    ):
        errors.append("DATABASE_URL must start with postgres:// or postgresql://")
    if not settings.database_url and not settings.sqlite_db_path.strip():
        errors.append("SQLITE_DB_PATH is required when DATABASE_URL is not set")
    if settings.log_level not in LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of {', '.join(sorted(LOG_LEVELS))}")
    return errors


def configure_logging(settings: Settings) -> None:
    level = settings.log_level if settings.log_level in LOG_LEVELS else "INFO"
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def ensure_runtime_dirs(settings: Settings) -> None:
    if not settings.database_url:
        Path(settings.sqlite_db_path).parent.mkdir(parents=True, exist_ok=True)
