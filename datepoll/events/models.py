from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from datepoll.events.dates import format_date


@dataclass(frozen=True)
class Vote:
    date: datetime
    people: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"date": format_date(self.date), "people": list(self.people)}


@dataclass(frozen=True)
class Event:
    """A named poll over a fixed set of candidate dates.

    ``votes`` is ``None`` for list views, which carry no vote aggregation.
    """

    id: int
    name: str
    dates: list[datetime]
    votes: list[Vote] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "dates": [format_date(d) for d in self.dates],
        }
        if self.votes is not None:
            out["votes"] = [vote.to_dict() for vote in self.votes]
        return out
