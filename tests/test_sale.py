"""
Tests for `domain/sale.py`.

Covers:
- SaleRecord.created_at must be a UTC timestamp when given.
- SaleRecord is immutable (frozen); with_bounty_month returns a new record.
- Month numbers are restricted to 1..6.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from domain.sale import BountyMonth, Payment, default_bounty_tracking


def test_sale_record_created_at_must_be_utc(make_sale) -> None:
    with pytest.raises(ValueError):
        make_sale(created_at=datetime(2025, 1, 1, 0, 0, 0))

    with pytest.raises(ValueError):
        make_sale(created_at=datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone(timedelta(hours=-6))))

    assert make_sale(created_at=datetime(2025, 1, 1, tzinfo=timezone.utc)).created_at is not None


def test_sale_record_is_immutable(make_sale) -> None:
    sale = make_sale()

    with pytest.raises(FrozenInstanceError):
        sale.imei = "000"  # type: ignore[misc]


@pytest.mark.parametrize("month_number", [0, 7, True])
def test_bounty_month_number_must_be_1_to_6(month_number) -> None:
    with pytest.raises(ValueError):
        BountyMonth(month_number=month_number)


def test_default_tracking_has_six_unpaid_months() -> None:
    tracking = default_bounty_tracking()

    assert [m.month_number for m in tracking] == [1, 2, 3, 4, 5, 6]
    assert not any(m.paid for m in tracking)


def test_bounty_month_lookup_and_replacement(make_sale) -> None:
    sale = make_sale(bounty_tracking=(BountyMonth(month_number=2), BountyMonth(month_number=5)))

    assert sale.bounty_month(3) is None
    updated = sale.with_bounty_month(BountyMonth(month_number=3, paid=True))

    assert [m.month_number for m in updated.bounty_tracking] == [2, 3, 5]
    assert updated.paid_month_count == 1
    assert sale.bounty_month(3) is None


def test_payments_total() -> None:
    month = BountyMonth(
        month_number=1,
        payments=(Payment(type="A", amount=Decimal("19.99")), Payment(type="B", amount=Decimal("0.01"))),
    )
    assert month.payments_total == Decimal("20.00")
