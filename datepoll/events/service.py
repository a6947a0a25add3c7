"""Event creation, retrieval and vote submission.

Every function takes the :class:`~datepoll.db.gateway.StorageGateway` as its
first argument. Input is validated before any storage call; storage failures
are re-raised once as :class:`InternalError`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any, TypeVar

from datepoll.db.gateway import StorageGateway
from datepoll.events.dates import format_date, normalize_dates
from datepoll.events.errors import EventError, InternalError, NotFoundError, ValidationError
from datepoll.events.models import Event

logger = logging.getLogger(__name__)

EVENT_ID_PATTERN = re.compile(r"^\d+$")

T = TypeVar("T")


def _storage_call(action: str, func: Callable[..., T], *args: Any) -> T:
    try:
        return func(*args)
    except EventError:
        raise
    except Exception as exc:
        logger.error("Storage failure while %s: %s", action, exc)
        raise InternalError(f"Storage failure while {action}.") from exc


def _clean_name(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _require_date_list(value: Any, field_name: str) -> list[Any]:
    if not isinstance(value, (list, tuple)) or not value:
        raise ValidationError(f"{field_name} must be a non-empty list of dates.")
    return list(value)


def parse_event_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid event id: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValidationError(f"Invalid event id: {value!r}")
        return value
    if isinstance(value, str) and EVENT_ID_PATTERN.match(value.strip()):
        return int(value.strip())
    raise ValidationError(f"Invalid event id: {value!r}")


def create_event(gateway: StorageGateway, name: Any, dates: Any) -> Event:
    cleaned = _clean_name(name)
    if not cleaned:
        raise ValidationError("Event name is required.")
    valid, invalid = normalize_dates(_require_date_list(dates, "dates"))
    if invalid:
        raise ValidationError("Unrecognized dates.", invalid_dates=invalid)
    return _storage_call("creating event", gateway.create_event, cleaned, valid)


def get_event(gateway: StorageGateway, event_id: Any) -> Event:
    parsed_id = parse_event_id(event_id)
    event = _storage_call("reading event", gateway.get_event, parsed_id)
    if event is None:
        raise NotFoundError(f"Event {parsed_id} not found.")
    return event


def list_events(gateway: StorageGateway) -> list[Event]:
    return _storage_call("listing events", gateway.list_events)


def delete_event(gateway: StorageGateway, event_id: Any) -> None:
    parsed_id = parse_event_id(event_id)
    if not _storage_call("deleting event", gateway.delete_event, parsed_id):
        raise NotFoundError(f"Event {parsed_id} not found.")
    logger.info("Deleted event id=%s", parsed_id)


def submit_votes(
    gateway: StorageGateway,
    event_id: Any,
    voter_name: Any,
    vote_dates: Any,
) -> Event:
    parsed_id = parse_event_id(event_id)
    voter = _clean_name(voter_name)
    if not voter:
        raise ValidationError("Voter name is required.")
    submitted = _require_date_list(vote_dates, "votes")

    event = get_event(gateway, parsed_id)
    candidates = set(event.dates)
    valid, unparseable = normalize_dates(submitted)
    invalid = unparseable + [format_date(d) for d in valid if d not in candidates]
    if invalid:
        logger.warning(
            "Rejected votes from %r for event id=%s, invalid dates: %s",
            voter,
            parsed_id,
            ", ".join(invalid),
        )
        raise ValidationError(
            f"Dates not offered by event {parsed_id}: {', '.join(invalid)}",
            invalid_dates=invalid,
        )

    _storage_call("saving votes", gateway.save_votes, valid, voter, parsed_id)
    return get_event(gateway, parsed_id)
