"""
Tests for `domain/bounty_schedule.py`.

Covers:
- check_date = activation + 35 * month days, calendar-day arithmetic.
- Consecutive months are exactly 35 days apart.
- days_until_check decreases by exactly one per day and is 0 on the check date.
- Invalid activation dates and month numbers raise.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from domain.bounty_schedule import (
    CHECK_INTERVAL_DAYS,
    check_date,
    checkpoint,
    days_until_check,
    schedule_for,
)
from domain.time import InvalidActivationDate


@pytest.mark.parametrize(
    "month_number, expected",
    [
        (1, date(2024, 2, 5)),
        (2, date(2024, 3, 11)),
        (3, date(2024, 4, 15)),
        (6, date(2024, 7, 29)),
    ],
)
def test_check_date_adds_35_days_per_month(month_number: int, expected: date) -> None:
    """Verify check dates for an activation on 2024-01-01 (leap year February included)."""

    assert check_date(date(2024, 1, 1), month_number) == expected


def test_check_date_consecutive_months_are_35_days_apart() -> None:
    activated = date(2023, 11, 17)
    for month in range(1, 6):
        assert check_date(activated, month + 1) - check_date(activated, month) == timedelta(days=35)
    assert CHECK_INTERVAL_DAYS == 35


def test_check_date_accepts_iso_strings_and_datetimes() -> None:
    """Strings and datetimes are normalized to their calendar date first."""

    assert check_date("2024-01-01", 3) == date(2024, 4, 15)
    assert check_date("2024-01-01T23:30:00Z", 3) == date(2024, 4, 15)
    assert check_date("2024-01-01 08:15:00", 3) == date(2024, 4, 15)
    assert check_date(datetime(2024, 1, 1, 18, 45, tzinfo=timezone.utc), 3) == date(2024, 4, 15)


@pytest.mark.parametrize(
    "bad",
    ["", "not-a-date", "2024-13-01", "01/01/2024", "2024-01-01garbage", "2024-01-01Tnoon", None, 20240101],
)
def test_check_date_invalid_activation_raises(bad) -> None:
    with pytest.raises(InvalidActivationDate):
        check_date(bad, 1)


@pytest.mark.parametrize("month_number", [0, 7, -1])
def test_check_date_month_out_of_range_raises(month_number: int) -> None:
    with pytest.raises(ValueError):
        check_date(date(2024, 1, 1), month_number)


def test_days_until_check_is_zero_on_check_date() -> None:
    due = check_date(date(2024, 1, 1), 2)
    cp = checkpoint(date(2024, 1, 1), 2, today=due)

    assert days_until_check(due, today=due) == 0
    assert cp.days_until_check == 0
    assert cp.is_overdue is False


def test_days_until_check_decreases_by_one_per_day() -> None:
    due = date(2024, 3, 11)
    start = date(2024, 2, 20)
    previous = days_until_check(due, today=start)

    for offset in range(1, 40):
        current = days_until_check(due, today=start + timedelta(days=offset))
        assert current == previous - 1
        previous = current


def test_days_until_check_ignores_time_of_day() -> None:
    """A check due tomorrow reads as 1 day away at any time today."""

    due = date(2024, 3, 11)
    late_evening = datetime(2024, 3, 10, 23, 59, tzinfo=timezone.utc)
    assert days_until_check(due, today=late_evening) == 1


def test_schedule_for_returns_six_checkpoints() -> None:
    schedule = schedule_for(date(2024, 1, 1), today=date(2024, 3, 1))

    assert [cp.month_number for cp in schedule] == [1, 2, 3, 4, 5, 6]
    assert schedule[0].is_overdue
    assert schedule[1].days_until_check == 10


def test_schedule_for_invalid_activation_raises_before_any_checkpoint() -> None:
    with pytest.raises(InvalidActivationDate):
        schedule_for("someday", today=date(2024, 3, 1))
