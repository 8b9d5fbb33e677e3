"""
Tests for `services/sale_service.py` against the in-memory repository.

Covers the write boundary rules:
- IMEI uniqueness (DuplicateIdentifier) is checked before anything is stored.
- Negative or non-numeric payment amounts are rejected, never coerced.
- New sales always carry months 1..6; blank-type and zero payments are dropped.
- Toggling a month flips `paid` and stamps date_paid with the local date of
  the injected clock.
"""

from __future__ import annotations

import time
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from domain.sale import BountyMonth, LineStatus, Payment, SaleCategory, StoreLocation
from repositories.memory_sale_repository import InMemorySaleRepository
from services.sale_service import (
    DuplicateIdentifier,
    SaleInput,
    SaleNotFound,
    SaleUpdate,
    SaleValidationError,
    create_sale,
    delete_sale,
    toggle_bounty_paid,
    update_sale,
)

FIXED_NOW = datetime(2024, 3, 1, 15, 30, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


def _input(**overrides) -> SaleInput:
    fields = {
        "imei": "356938035643809",
        "store_location": StoreLocation.BUSINESS_LOOP,
        "category": SaleCategory.UPGRADE,
        "email": "buyer@example.com",
        "activation_date": date(2024, 1, 1),
    }
    fields.update(overrides)
    return SaleInput(**fields)


@pytest.fixture
def repo() -> InMemorySaleRepository:
    return InMemorySaleRepository()


def test_create_sale_fills_six_months_and_stamps_created_at(repo) -> None:
    sale = create_sale(repo, _input(), clock=fixed_clock)

    assert [m.month_number for m in sale.bounty_tracking] == [1, 2, 3, 4, 5, 6]
    assert sale.created_at == FIXED_NOW
    assert sale.status == LineStatus.ACTIVE
    assert repo.get_sale(sale.sale_id) == sale


def test_create_sale_drops_blank_and_zero_payments(repo) -> None:
    month = BountyMonth(
        month_number=2,
        payments=(
            Payment(type="Q1 Promo Upgrade", amount=Decimal("50")),
            Payment(type="   ", amount=Decimal("25")),
            Payment(type="Tablet SPIFF", amount=Decimal("0")),
        ),
    )
    sale = create_sale(repo, _input(bounty_tracking=[month]), clock=fixed_clock)

    assert sale.bounty_month(2).payments == (Payment(type="Q1 Promo Upgrade", amount=Decimal("50")),)


def test_create_sale_accepts_iso_activation_string(repo) -> None:
    sale = create_sale(repo, _input(activation_date="2024-02-10"), clock=fixed_clock)
    assert sale.activation_date == date(2024, 2, 10)


def test_duplicate_imei_is_rejected_before_persisting(repo) -> None:
    first = create_sale(repo, _input(), clock=fixed_clock)

    with pytest.raises(DuplicateIdentifier) as exc_info:
        create_sale(repo, _input(email="other@example.com"), clock=fixed_clock)

    assert exc_info.value.existing_sale_id == first.sale_id
    assert len(repo.list_sales()) == 1


@pytest.mark.parametrize("amount", [Decimal("-1"), "abc", 12.5, Decimal("NaN"), None])
def test_invalid_payment_amounts_are_rejected(repo, amount) -> None:
    month = BountyMonth(month_number=1, payments=(Payment(type="Promo", amount=amount),))

    with pytest.raises(SaleValidationError):
        create_sale(repo, _input(bounty_tracking=[month]), clock=fixed_clock)
    assert repo.list_sales() == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"imei": "  "},
        {"email": ""},
        {"activation_date": "01/02/2024"},
        {"activation_date": "2024-01-01garbage"},
        {"bounty_tracking": [BountyMonth(month_number=1), BountyMonth(month_number=1)]},
    ],
)
def test_invalid_sale_input_is_rejected(repo, overrides) -> None:
    with pytest.raises(SaleValidationError):
        create_sale(repo, _input(**overrides), clock=fixed_clock)


def test_update_sale_changes_only_given_fields(repo) -> None:
    sale = create_sale(repo, _input(notes="first"), clock=fixed_clock)

    updated = update_sale(repo, sale.sale_id, SaleUpdate(status=LineStatus.DEACTIVATED))

    assert updated.status == LineStatus.DEACTIVATED
    assert updated.notes == "first"
    assert updated.imei == sale.imei


def test_update_sale_keeps_own_imei_but_rejects_anothers(repo) -> None:
    a = create_sale(repo, _input(imei="111"), clock=fixed_clock)
    create_sale(repo, _input(imei="222"), clock=fixed_clock)

    assert update_sale(repo, a.sale_id, SaleUpdate(imei="111")).imei == "111"
    with pytest.raises(DuplicateIdentifier):
        update_sale(repo, a.sale_id, SaleUpdate(imei="222"))


def test_update_sale_replacing_tracking_still_yields_six_months(repo) -> None:
    sale = create_sale(repo, _input(), clock=fixed_clock)
    month = BountyMonth(month_number=4, paid=True, payments=(Payment(type="Promo", amount=Decimal("40")),))

    updated = update_sale(repo, sale.sale_id, SaleUpdate(bounty_tracking=[month]))

    assert len(updated.bounty_tracking) == 6
    assert updated.bounty_month(4).paid is True


def test_update_unknown_sale_raises(repo) -> None:
    with pytest.raises(SaleNotFound):
        update_sale(repo, uuid4(), SaleUpdate(notes="x"))


def test_delete_sale(repo) -> None:
    sale = create_sale(repo, _input(), clock=fixed_clock)

    delete_sale(repo, sale.sale_id)
    assert repo.get_sale(sale.sale_id) is None
    with pytest.raises(SaleNotFound):
        delete_sale(repo, sale.sale_id)


def test_toggle_bounty_paid_flips_and_stamps_date(repo) -> None:
    sale = create_sale(repo, _input(), clock=fixed_clock)

    paid = toggle_bounty_paid(repo, sale.sale_id, 3, clock=fixed_clock)
    assert paid.bounty_month(3).paid is True
    assert paid.bounty_month(3).date_paid == FIXED_NOW.astimezone().date()
    assert repo.get_sale(sale.sale_id).bounty_month(3).paid is True

    unpaid = toggle_bounty_paid(repo, sale.sale_id, 3, clock=fixed_clock)
    assert unpaid.bounty_month(3).paid is False


@pytest.fixture
def central_time_host(monkeypatch):
    """Run with the host clock at a fixed UTC-6 offset."""

    monkeypatch.setenv("TZ", "CST6")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_toggle_stamps_local_date_near_midnight(repo, central_time_host) -> None:
    """02:30 UTC on March 2 is still the evening of March 1 at UTC-6."""

    sale = create_sale(repo, _input(), clock=fixed_clock)
    late_evening = datetime(2024, 3, 2, 2, 30, tzinfo=timezone.utc)

    paid = toggle_bounty_paid(repo, sale.sale_id, 1, clock=lambda: late_evening)

    assert paid.bounty_month(1).date_paid == date(2024, 3, 1)


def test_toggle_creates_missing_month(repo, make_sale) -> None:
    sale = repo.insert_sale(make_sale(bounty_tracking=(BountyMonth(month_number=1),)))

    updated = toggle_bounty_paid(repo, sale.sale_id, 4, clock=fixed_clock)

    assert [m.month_number for m in updated.bounty_tracking] == [1, 4]
    assert updated.bounty_month(4).paid is True


def test_toggle_rejects_bad_month_and_unknown_sale(repo) -> None:
    sale = create_sale(repo, _input(), clock=fixed_clock)

    with pytest.raises(SaleValidationError):
        toggle_bounty_paid(repo, sale.sale_id, 7, clock=fixed_clock)
    with pytest.raises(SaleNotFound):
        toggle_bounty_paid(repo, uuid4(), 1, clock=fixed_clock)
