"""
Domain: Bounty check schedule.

Each sale has six bounty checkpoints. Checkpoint `m` becomes eligible for
verification a fixed number of 35-day intervals after activation:

  check_date = activation_date + 35 * m days
  days_until_check = ceil((check_date - today) / 1 day)

Both dates are calendar dates (no time of day, no time zone), so the ceiling
is the exact day difference:
  - positive: the check is in the future
  - 0: the check is due today
  - negative: the check date has passed
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional

from .sale import BOUNTY_MONTHS, require_month_number
from .time import to_calendar_date, today_local

CHECK_INTERVAL_DAYS: int = 35


def check_date(activation_date: Any, month_number: int) -> date:
    """
    Expected check date for month `month_number` of a sale.

    Raises:
        InvalidActivationDate: if activation_date is not a calendar date
        ValueError: if month_number is not in 1..6
    """

    require_month_number(month_number)
    activated = to_calendar_date(activation_date)
    return activated + timedelta(days=CHECK_INTERVAL_DAYS * month_number)


def days_until_check(check_on: Any, today: Optional[Any] = None) -> int:
    """Whole days from `today` (default: current date) until `check_on`."""

    target = to_calendar_date(check_on)
    as_of = today_local() if today is None else to_calendar_date(today)
    return (target - as_of).days


@dataclass(frozen=True, slots=True)
class BountyCheckpoint:
    """Schedule position of one month of one sale, evaluated as of a given day."""

    month_number: int
    check_date: date
    days_until_check: int

    @property
    def is_overdue(self) -> bool:
        return self.days_until_check < 0


def checkpoint(activation_date: Any, month_number: int, today: Optional[Any] = None) -> BountyCheckpoint:
    checked_on = check_date(activation_date, month_number)
    return BountyCheckpoint(
        month_number=month_number,
        check_date=checked_on,
        days_until_check=days_until_check(checked_on, today),
    )


def schedule_for(activation_date: Any, today: Optional[Any] = None) -> tuple[BountyCheckpoint, ...]:
    """
    All six checkpoints for an activation date.

    The activation date is validated once up front so a bad value fails
    before any checkpoint is produced.
    """

    activated = to_calendar_date(activation_date)
    as_of = today_local() if today is None else to_calendar_date(today)
    return tuple(checkpoint(activated, month, as_of) for month in BOUNTY_MONTHS)


__all__ = [
    "CHECK_INTERVAL_DAYS",
    "BountyCheckpoint",
    "check_date",
    "checkpoint",
    "days_until_check",
    "schedule_for",
]
