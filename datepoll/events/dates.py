"""Canonical timestamp handling.

Candidate dates and vote dates arrive as ISO 8601 strings with or without
offsets, as ``datetime`` objects, or as values read back from either database
backend. Everything is reduced to a UTC-aware ``datetime`` before comparison,
and to a single ISO string before it is stored in SQLite or returned to a caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any, cast

from dateutil import parser as date_parser


def parse_date(value: Any) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = cast(datetime, date_parser.isoparse(value.strip()))
        except (ValueError, OverflowError) as exc:
            raise ValueError(f"Unrecognized date: {value!r}") from exc
    else:
        raise ValueError(f"Unrecognized date: {value!r}")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    try:
        return dt.astimezone(UTC)
    except OverflowError as exc:
        raise ValueError(f"Unrecognized date: {value!r}") from exc


def format_date(value: Any) -> str:
    dt = parse_date(value)
    text = dt.strftime("%Y-%m-%dT%H:%M:%S")
    if dt.microsecond:
        text += f".{dt.microsecond:06d}"
    return text + "Z"


def normalize_dates(values: Iterable[Any]) -> tuple[list[datetime], list[str]]:
    """Return (valid unique dates in input order, raw values that failed to parse)."""
    valid: list[datetime] = []
    invalid: list[str] = []
    seen: set[datetime] = set()
    for value in values:
        try:
            dt = parse_date(value)
        except ValueError:
            invalid.append(str(value))
            continue
        if dt not in seen:
            seen.add(dt)
            valid.append(dt)
    return valid, invalid
