from __future__ import annotations

from typing import Any, cast

from datepoll.config.settings import Settings, ensure_runtime_dirs, load_settings, validate_settings


def _valid_settings(**overrides: object) -> Settings:
    defaults = {
        "database_url": "",
        "sqlite_db_path": "data/datepoll.db",
        "log_level": "INFO",
    }
    defaults.update(overrides)
    return Settings(**cast(dict[str, Any], defaults))


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "  postgresql://localhost/polls  ")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.delenv("SQLITE_DB_PATH", raising=False)
    settings = load_settings()
    assert settings.database_url == "postgresql://localhost/polls"
    assert settings.log_level == "DEBUG"
    assert settings.sqlite_db_path == "data/datepoll.db"


def test_validate_settings_accepts_defaults():
    assert validate_settings(_valid_settings()) == []


def test_validate_settings_rejects_non_postgres_database_url():
    errors = validate_settings(_valid_settings(database_url="mysql://localhost/db"))
    assert any("DATABASE_URL" in e for e in errors)


def test_validate_settings_requires_sqlite_path_without_database_url():
    errors = validate_settings(_valid_settings(sqlite_db_path="   "))
    assert any("SQLITE_DB_PATH" in e for e in errors)


def test_validate_settings_ignores_sqlite_path_with_database_url():
    settings = _valid_settings(database_url="postgres://localhost/db", sqlite_db_path="")
    assert validate_settings(settings) == []


def test_validate_settings_rejects_unknown_log_level():
    errors = validate_settings(_valid_settings(log_level="LOUD"))
    assert any("LOG_LEVEL" in e for e in errors)


def test_ensure_runtime_dirs_creates_sqlite_parent(tmp_path):
    db_path = tmp_path / "nested" / "dir" / "polls.db"
    ensure_runtime_dirs(_valid_settings(sqlite_db_path=str(db_path)))
    assert db_path.parent.is_dir()
