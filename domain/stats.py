"""
Domain: Dashboard statistics.

Folds all sale records into dashboard totals. Money is summed as Decimal;
rounding to cents is a presentation concern (see `format_currency`).

Month amount:
  month_amount = sum(payments.amount)
  For rows still carrying a legacy scalar amountPaid the amount is
  max(sum(payments.amount), legacy_amount_paid).

Totals:
  monthly_bounty_total    = sum of month_amount over every month of every sale
  paid_bounties           = sum of month_amount where paid and amount > 0
  unpaid_bounties         = sum of month_amount where not paid and amount > 0
  total_commission_earned = paid_bounties
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from .alerts import UPCOMING_MAX_DAYS
from .bounty_schedule import checkpoint
from .sale import BOUNTY_MONTHS, BountyMonth, LineStatus, SaleCategory, SaleRecord
from .time import InvalidActivationDate, to_calendar_date, today_local

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_CENTS = Decimal("0.01")


def month_amount(month: Optional[BountyMonth]) -> Decimal:
    """Effective bounty amount for a month; a missing month counts as zero."""

    if month is None:
        return _ZERO
    amount = month.payments_total
    if month.legacy_amount_paid is not None:
        amount = max(amount, month.legacy_amount_paid)
    return amount


@dataclass(frozen=True, slots=True)
class DashboardStats:
    total_active_lines: int
    total_deactivated_lines: int
    total_commission_earned: Decimal
    monthly_bounty_total: Decimal
    paid_bounties: Decimal
    unpaid_bounties: Decimal


@dataclass(frozen=True, slots=True)
class MonthlyBountyTotals:
    """Paid and unpaid amounts for one checkpoint month across all sales."""

    month_number: int
    paid: Decimal
    unpaid: Decimal


@dataclass(frozen=True, slots=True)
class DueSummary:
    """Unpaid bounty amounts that are coming due or already overdue."""

    soon_due_count: int
    soon_due_total: Decimal
    overdue_count: int
    overdue_total: Decimal


def compute_dashboard_stats(sales: Iterable[SaleRecord]) -> DashboardStats:
    active = 0
    deactivated = 0
    total = _ZERO
    paid = _ZERO
    unpaid = _ZERO

    for sale in sales:
        if sale.status == LineStatus.ACTIVE:
            active += 1
        elif sale.status == LineStatus.DEACTIVATED:
            deactivated += 1

        for month in sale.bounty_tracking:
            amount = month_amount(month)
            total += amount
            if amount > 0:
                if month.paid:
                    paid += amount
                else:
                    unpaid += amount

    return DashboardStats(
        total_active_lines=active,
        total_deactivated_lines=deactivated,
        total_commission_earned=paid,
        monthly_bounty_total=total,
        paid_bounties=paid,
        unpaid_bounties=unpaid,
    )


def monthly_breakdown(sales: Iterable[SaleRecord]) -> Tuple[MonthlyBountyTotals, ...]:
    """Paid/unpaid totals per month number 1..6 (months with no data report zero)."""

    paid: Dict[int, Decimal] = {n: _ZERO for n in BOUNTY_MONTHS}
    unpaid: Dict[int, Decimal] = {n: _ZERO for n in BOUNTY_MONTHS}

    for sale in sales:
        for month in sale.bounty_tracking:
            amount = month_amount(month)
            if month.paid:
                paid[month.month_number] += amount
            else:
                unpaid[month.month_number] += amount

    return tuple(
        MonthlyBountyTotals(month_number=n, paid=paid[n], unpaid=unpaid[n]) for n in BOUNTY_MONTHS
    )


def sales_by_category(sales: Iterable[SaleRecord]) -> Dict[SaleCategory, int]:
    counts: Dict[SaleCategory, int] = {category: 0 for category in SaleCategory}
    for sale in sales:
        counts[sale.category] += 1
    return counts


def due_summary(sales: Iterable[SaleRecord], today: Optional[Any] = None) -> DueSummary:
    """
    Count and total the unpaid months that carry an amount.

    Overdue: check date has passed. Soon due: check date within the next
    14 days (today included).
    """

    as_of = today_local() if today is None else to_calendar_date(today)
    soon_count = 0
    soon_total = _ZERO
    overdue_count = 0
    overdue_total = _ZERO

    for sale in sales:
        for month in sale.bounty_tracking:
            amount = month_amount(month)
            if month.paid or amount <= 0:
                continue
            try:
                cp = checkpoint(sale.activation_date, month.month_number, as_of)
            except InvalidActivationDate:
                logger.warning(
                    f"Skipping due summary for sale {sale.sale_id}: invalid activation date",
                    extra={"sale_id": str(sale.sale_id), "imei": sale.imei},
                )
                break
            if cp.days_until_check < 0:
                overdue_count += 1
                overdue_total += amount
            elif cp.days_until_check <= UPCOMING_MAX_DAYS:
                soon_count += 1
                soon_total += amount

    return DueSummary(
        soon_due_count=soon_count,
        soon_due_total=soon_total,
        overdue_count=overdue_count,
        overdue_total=overdue_total,
    )


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents (half up) for presentation."""

    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal) -> str:
    """USD presentation, e.g. Decimal('1234.5') -> '$1,234.50'."""

    rounded = quantize_money(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.2f}"


__all__ = [
    "DashboardStats",
    "DueSummary",
    "MonthlyBountyTotals",
    "compute_dashboard_stats",
    "due_summary",
    "format_currency",
    "month_amount",
    "monthly_breakdown",
    "quantize_money",
    "sales_by_category",
]
