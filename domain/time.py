"""
Domain time utilities (pure).

Centralized timestamp and calendar-date validation helpers.

Behavior and error messages must remain consistent across the domain model.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any


class InvalidActivationDate(ValueError):
    """Raised when a sale's activation date cannot be read as a calendar date."""

    kind = "InvalidActivationDate"


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces the requirement that stored timestamps are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def to_calendar_date(value: Any) -> date:
    """
    Normalize a date-like value to a calendar date (midnight, no time zone).

    Accepts:
    - date: returned as-is
    - datetime: its calendar date (time of day dropped)
    - str: ISO 'YYYY-MM-DD', optionally followed by a 'T' or space separated
      time part ('2024-01-01T10:00:00Z' reads as 2024-01-01)

    Raises:
        InvalidActivationDate: for anything else, or an unparseable string
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if "T" in text or " " in text:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            return date.fromisoformat(text)
        except ValueError:
            raise InvalidActivationDate(f"not a calendar date: {value!r}") from None
    raise InvalidActivationDate(f"unsupported date type: {type(value)!r}")


def local_date(moment: datetime) -> date:
    """Calendar date of a timestamp on the host clock's time zone."""

    return moment.astimezone().date()


def today_local() -> date:
    """Current calendar date on the host clock."""

    return date.today()
