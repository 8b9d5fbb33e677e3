"""
Domain: Bounty check alerts.

Alerts tell the store which bounty checkpoints need attention now:
- every checkpoint whose check date has passed (however long ago)
- every checkpoint due within the visibility window (default 14 days)

Deactivated sales never produce alerts. A sale whose activation date cannot
be read is skipped and reported as a diagnostic; the rest of the batch is
still evaluated.

Ordering: unpaid overdue checkpoints first, then ascending days until check.
The sort is stable, so ties keep sale order and then month order.

Status buckets used for filtering:
- overdue:  unpaid and days_until_check < 0
- due-soon: not overdue and days_until_check in [0, 7]
- upcoming: not overdue and days_until_check in [8, 14]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from .bounty_schedule import schedule_for
from .sale import LineStatus, SaleRecord, StoreLocation
from .time import InvalidActivationDate, to_calendar_date, today_local

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS: int = 14
DUE_SOON_MAX_DAYS: int = 7
UPCOMING_MAX_DAYS: int = 14


class AlertStatus(str, Enum):
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    UPCOMING = "upcoming"


class PaymentFilter(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"


@dataclass(frozen=True, slots=True)
class BountyAlert:
    sale_id: UUID
    imei: str
    email: str
    store_location: StoreLocation
    month_number: int
    check_date: date
    days_until_check: int
    is_overdue: bool
    is_paid: bool

    @property
    def status(self) -> Optional[AlertStatus]:
        """Status bucket, or None for paid overdue or out-of-range checkpoints."""

        if self.is_overdue:
            return None if self.is_paid else AlertStatus.OVERDUE
        if self.days_until_check <= DUE_SOON_MAX_DAYS:
            return AlertStatus.DUE_SOON
        if self.days_until_check <= UPCOMING_MAX_DAYS:
            return AlertStatus.UPCOMING
        return None


@dataclass(frozen=True, slots=True)
class AlertDiagnostic:
    """A sale that was left out of the alert list, and why."""

    sale_id: UUID
    imei: str
    kind: str
    message: str


@dataclass(frozen=True, slots=True)
class AlertReport:
    alerts: Tuple[BountyAlert, ...]
    diagnostics: Tuple[AlertDiagnostic, ...] = ()

    @property
    def overdue_count(self) -> int:
        return sum(1 for a in self.alerts if a.is_overdue and not a.is_paid)

    @property
    def due_soon_count(self) -> int:
        return sum(
            1
            for a in self.alerts
            if not a.is_overdue and not a.is_paid and a.days_until_check <= DUE_SOON_MAX_DAYS
        )


@dataclass(frozen=True, slots=True)
class AlertFilters:
    """
    Optional alert filters; every filter that is set must match (logical AND).

    search matches IMEI or email, case-insensitively, as a substring.
    """

    search: Optional[str] = None
    status: Optional[AlertStatus] = None
    month_number: Optional[int] = None
    store_location: Optional[StoreLocation] = None
    payment: Optional[PaymentFilter] = None

    def matches(self, alert: BountyAlert) -> bool:
        if self.search:
            needle = self.search.strip().lower()
            if needle not in alert.imei.lower() and needle not in alert.email.lower():
                return False
        if self.status is not None and alert.status != self.status:
            return False
        if self.month_number is not None and alert.month_number != self.month_number:
            return False
        if self.store_location is not None and alert.store_location != self.store_location:
            return False
        if self.payment is not None and alert.is_paid != (self.payment == PaymentFilter.PAID):
            return False
        return True


def _urgency_key(alert: BountyAlert) -> Tuple[int, int]:
    return (0 if alert.is_overdue and not alert.is_paid else 1, alert.days_until_check)


def build_alerts(
    sales: Iterable[SaleRecord],
    today: Optional[Any] = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> AlertReport:
    """
    Evaluate every active sale's checkpoints as of `today` (default: current date).

    Returns the urgency-sorted alerts plus a diagnostic for each skipped sale.
    """

    as_of = today_local() if today is None else to_calendar_date(today)
    alerts: List[BountyAlert] = []
    diagnostics: List[AlertDiagnostic] = []

    for sale in sales:
        if sale.status == LineStatus.DEACTIVATED:
            continue

        try:
            checkpoints = schedule_for(sale.activation_date, as_of)
        except InvalidActivationDate as e:
            logger.warning(
                f"Skipping alerts for sale {sale.sale_id}: invalid activation date",
                extra={
                    "sale_id": str(sale.sale_id),
                    "imei": sale.imei,
                    "activation_date": str(sale.activation_date)[:50],
                    "diagnostic_kind": InvalidActivationDate.kind,
                },
            )
            diagnostics.append(
                AlertDiagnostic(
                    sale_id=sale.sale_id,
                    imei=sale.imei,
                    kind=InvalidActivationDate.kind,
                    message=str(e),
                )
            )
            continue

        for cp in checkpoints:
            if cp.days_until_check > window_days:
                continue
            month = sale.bounty_month(cp.month_number)
            alerts.append(
                BountyAlert(
                    sale_id=sale.sale_id,
                    imei=sale.imei,
                    email=sale.email,
                    store_location=sale.store_location,
                    month_number=cp.month_number,
                    check_date=cp.check_date,
                    days_until_check=cp.days_until_check,
                    is_overdue=cp.is_overdue,
                    is_paid=month.paid if month is not None else False,
                )
            )

    alerts.sort(key=_urgency_key)
    return AlertReport(alerts=tuple(alerts), diagnostics=tuple(diagnostics))


def filter_alerts(alerts: Sequence[BountyAlert], filters: AlertFilters) -> List[BountyAlert]:
    """Alerts matching every set filter, in their original order."""

    return [alert for alert in alerts if filters.matches(alert)]


__all__ = [
    "DEFAULT_WINDOW_DAYS",
    "DUE_SOON_MAX_DAYS",
    "UPCOMING_MAX_DAYS",
    "AlertDiagnostic",
    "AlertFilters",
    "AlertReport",
    "AlertStatus",
    "BountyAlert",
    "PaymentFilter",
    "build_alerts",
    "filter_alerts",
]
