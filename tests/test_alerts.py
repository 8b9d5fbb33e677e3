"""
Tests for `domain/alerts.py`.

Covers:
- Alerts include every overdue checkpoint and those within the window.
- Unpaid overdue first, then ascending days until check; stable ties.
- Deactivated sales produce no alerts.
- Missing month entries read as unpaid.
- Invalid activation dates are reported per sale without aborting the batch.
- Filters combine with logical AND and filtering twice equals one combined filter.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from itertools import product
from uuid import UUID

import pytest

from domain.alerts import (
    AlertFilters,
    AlertStatus,
    BountyAlert,
    PaymentFilter,
    build_alerts,
    filter_alerts,
)
from domain.sale import BountyMonth, LineStatus, Payment, StoreLocation

TODAY = date(2024, 3, 1)


def _month(month_number: int, paid: bool) -> BountyMonth:
    return BountyMonth(
        month_number=month_number,
        paid=paid,
        payments=(Payment(type="Promo", amount=Decimal("40")),) if paid else (),
    )


def test_alerts_sorted_unpaid_overdue_first(make_sale) -> None:
    """
    Sale A (activated 2024-01-01): month 1 due Feb 5 (paid), month 2 due Mar 11.
    Sale B (activated 2024-01-20): month 1 due Feb 24 (unpaid), month 2 due Mar 30 (outside window).
    """

    sale_a = make_sale(
        imei="111",
        activation_date=date(2024, 1, 1),
        bounty_tracking=tuple(_month(n, paid=(n == 1)) for n in range(1, 7)),
    )
    sale_b = make_sale(imei="222", activation_date=date(2024, 1, 20))

    report = build_alerts([sale_a, sale_b], today=TODAY)

    assert [(a.imei, a.month_number, a.days_until_check) for a in report.alerts] == [
        ("222", 1, -6),
        ("111", 1, -25),
        ("111", 2, 10),
    ]
    assert report.alerts[1].is_paid is True
    assert report.alerts[1].is_overdue is True
    assert report.overdue_count == 1
    assert report.due_soon_count == 0
    assert report.diagnostics == ()


def test_alert_fields_are_carried_from_sale(make_sale) -> None:
    sale = make_sale(email="owner@example.com", store_location=StoreLocation.SEDALIA)
    alert = build_alerts([sale], today=TODAY).alerts[0]

    assert alert.sale_id == sale.sale_id
    assert alert.imei == sale.imei
    assert alert.email == "owner@example.com"
    assert alert.store_location == StoreLocation.SEDALIA
    assert alert.check_date == date(2024, 2, 5)


def test_alert_on_check_date_is_not_overdue(make_sale) -> None:
    sale = make_sale(activation_date=date(2024, 1, 1))
    report = build_alerts([sale], today=date(2024, 2, 5))

    month_one = [a for a in report.alerts if a.month_number == 1][0]
    assert month_one.days_until_check == 0
    assert month_one.is_overdue is False
    assert month_one.status == AlertStatus.DUE_SOON


@pytest.mark.parametrize("today, included", [(date(2024, 1, 22), True), (date(2024, 1, 21), False)])
def test_window_boundary_is_inclusive(make_sale, today: date, included: bool) -> None:
    """Month 1 of a 2024-01-01 activation is due Feb 5: 14 days from Jan 22, 15 from Jan 21."""

    report = build_alerts([make_sale()], today=today, window_days=14)
    assert (len(report.alerts) == 1) is included


def test_overdue_alerts_included_regardless_of_age(make_sale) -> None:
    sale = make_sale(activation_date=date(2020, 1, 1))
    report = build_alerts([sale], today=TODAY, window_days=0)

    assert [a.month_number for a in report.alerts] == [1, 2, 3, 4, 5, 6]
    assert all(a.is_overdue for a in report.alerts)


def test_deactivated_sale_produces_no_alerts(make_sale) -> None:
    sale = make_sale(status=LineStatus.DEACTIVATED, activation_date=date(2020, 1, 1))
    assert build_alerts([sale], today=TODAY).alerts == ()


def test_missing_month_reads_as_unpaid(make_sale) -> None:
    """Month 4 of a 2024-01-01 activation is due May 20; it has no tracking entry."""

    tracking = tuple(_month(n, paid=True) for n in (1, 2, 3, 5, 6))
    sale = make_sale(bounty_tracking=tracking)

    report = build_alerts([sale], today=date(2024, 5, 15))
    month_four = [a for a in report.alerts if a.month_number == 4]

    assert len(month_four) == 1
    assert month_four[0].is_paid is False
    assert month_four[0].days_until_check == 5


def test_invalid_activation_date_is_reported_not_raised(make_sale) -> None:
    bad = make_sale(imei="999", activation_date="not-a-date")
    good = make_sale(imei="111")

    report = build_alerts([bad, good], today=TODAY)

    assert {a.imei for a in report.alerts} == {"111"}
    assert len(report.diagnostics) == 1
    assert report.diagnostics[0].sale_id == bad.sale_id
    assert report.diagnostics[0].kind == "InvalidActivationDate"


def test_build_alerts_is_idempotent(make_sale) -> None:
    sales = [make_sale(activation_date=date(2024, 1, d)) for d in (1, 5, 9, 20)]
    assert build_alerts(sales, today=TODAY) == build_alerts(sales, today=TODAY)


def test_ties_keep_sale_then_month_order(make_sale) -> None:
    first = make_sale(imei="first")
    second = make_sale(imei="second")

    report = build_alerts([first, second], today=date(2024, 2, 1))
    assert [a.imei for a in report.alerts] == ["first", "second"]


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def _alert(imei: str, days: int, paid: bool = False, month: int = 1,
           store: StoreLocation = StoreLocation.PARIS_RD, email: str = "a@example.com") -> BountyAlert:
    return BountyAlert(
        sale_id=UUID(int=int(imei)),
        imei=imei,
        email=email,
        store_location=store,
        month_number=month,
        check_date=date(2024, 3, 1),
        days_until_check=days,
        is_overdue=days < 0,
        is_paid=paid,
    )


ALERTS = [
    _alert("100", -3),
    _alert("101", -3, paid=True),
    _alert("102", 0, month=2, store=StoreLocation.SEDALIA),
    _alert("103", 7, paid=True, month=2, email="Sam@Shop.com"),
    _alert("104", 8, month=3, store=StoreLocation.SEDALIA),
    _alert("105", 14, month=3),
]


@pytest.mark.parametrize(
    "status, expected",
    [
        (AlertStatus.OVERDUE, ["100"]),
        (AlertStatus.DUE_SOON, ["102", "103"]),
        (AlertStatus.UPCOMING, ["104", "105"]),
    ],
)
def test_status_buckets(status: AlertStatus, expected: list) -> None:
    assert [a.imei for a in filter_alerts(ALERTS, AlertFilters(status=status))] == expected


def test_search_is_case_insensitive_on_imei_and_email() -> None:
    assert [a.imei for a in filter_alerts(ALERTS, AlertFilters(search="shop.COM"))] == ["103"]
    assert [a.imei for a in filter_alerts(ALERTS, AlertFilters(search="10"))] == [a.imei for a in ALERTS]


def test_payment_month_and_store_filters() -> None:
    assert [a.imei for a in filter_alerts(ALERTS, AlertFilters(payment=PaymentFilter.PAID))] == ["101", "103"]
    assert [a.imei for a in filter_alerts(ALERTS, AlertFilters(month_number=3))] == ["104", "105"]
    assert [
        a.imei for a in filter_alerts(ALERTS, AlertFilters(store_location=StoreLocation.SEDALIA))
    ] == ["102", "104"]


def test_empty_filters_keep_everything_in_order() -> None:
    assert filter_alerts(ALERTS, AlertFilters()) == ALERTS


_SINGLE_FILTERS = [
    AlertFilters(search="sam"),
    AlertFilters(status=AlertStatus.DUE_SOON),
    AlertFilters(status=AlertStatus.UPCOMING),
    AlertFilters(month_number=2),
    AlertFilters(store_location=StoreLocation.SEDALIA),
    AlertFilters(payment=PaymentFilter.UNPAID),
]


def _combine(f1: AlertFilters, f2: AlertFilters) -> AlertFilters:
    return AlertFilters(
        search=f1.search or f2.search,
        status=f1.status or f2.status,
        month_number=f1.month_number or f2.month_number,
        store_location=f1.store_location or f2.store_location,
        payment=f1.payment or f2.payment,
    )


@pytest.mark.parametrize("f1, f2", [
    (a, b) for a, b in product(_SINGLE_FILTERS, repeat=2)
    if not (a.status and b.status)
])
def test_filtering_twice_equals_combined_filter(f1: AlertFilters, f2: AlertFilters) -> None:
    sequential = filter_alerts(filter_alerts(ALERTS, f1), f2)
    combined = filter_alerts(ALERTS, _combine(f1, f2))
    assert sequential == combined
