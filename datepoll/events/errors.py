from __future__ import annotations

from typing import Any


class EventError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(EventError, ValueError):
    """Bad or missing input. Lists every offending date, not just the first."""

    status_code = 400

    def __init__(self, message: str, invalid_dates: list[str] | None = None) -> None:
        super().__init__(message)
        self.invalid_dates = list(invalid_dates or [])

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.invalid_dates:
            out["invalid_dates"] = self.invalid_dates
        return out


class NotFoundError(EventError, LookupError):
    status_code = 404


class InternalError(EventError, RuntimeError):
    status_code = 500
