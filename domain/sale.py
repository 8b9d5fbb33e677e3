"""
Domain: Sale records and their bounty schedule entries.

A SaleRecord is one tracked device-line sale. Its bounty_tracking holds one
BountyMonth per 35-day checkpoint (month numbers 1..6). Each month collects
zero or more payments; the month's effective amount is the sum of them.

Rules captured here:
- Month numbers are 1..6 and unique per sale.
- A missing month entry is read as unpaid with a zero amount.
- Records are immutable; updates produce new instances.

This module is pure: no I/O, no database, no frameworks.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union
from uuid import UUID

from .time import require_utc_timestamp

BOUNTY_MONTHS: Tuple[int, ...] = (1, 2, 3, 4, 5, 6)


class LineStatus(str, Enum):
    ACTIVE = "active"
    DEACTIVATED = "deactivated"


class StoreLocation(str, Enum):
    PARIS_RD = "paris-rd"
    BUSINESS_LOOP = "business-loop"
    JEFFERSON_CITY = "jefferson-city"
    SEDALIA = "sedalia"


class SaleCategory(str, Enum):
    NEW_LINE = "new-line"
    PORT_IN = "port-in"
    UPGRADE = "upgrade"
    FINANCE_POSTPAID = "finance-postpaid"
    ADD_A_LINE = "add-a-line"
    PORT_IN_ADD_A_LINE = "port-in-add-a-line"
    BYOD = "byod"


def require_month_number(month_number: int) -> None:
    """Month numbers identify one of the six 35-day checkpoints."""

    if isinstance(month_number, bool) or not isinstance(month_number, int):
        raise ValueError(f"month_number must be an integer, got {month_number!r}")
    if month_number not in BOUNTY_MONTHS:
        raise ValueError(f"month_number must be between 1 and 6, got {month_number}")


@dataclass(frozen=True, slots=True)
class Payment:
    """A single bounty payment line (e.g. a promo credit) for a month."""

    type: str
    amount: Decimal


@dataclass(frozen=True, slots=True)
class BountyMonth:
    """
    Bounty checkpoint for one month of a sale.

    legacy_amount_paid is only set when the record was read from rows written
    before payments were itemized (scalar `amountPaid`).
    """

    month_number: int
    paid: bool = False
    payments: Tuple[Payment, ...] = ()
    date_paid: Optional[date] = None
    notes: Optional[str] = None
    legacy_amount_paid: Optional[Decimal] = None

    def __post_init__(self) -> None:
        require_month_number(self.month_number)

    @property
    def payments_total(self) -> Decimal:
        return sum((p.amount for p in self.payments), Decimal("0"))

    @staticmethod
    def empty(month_number: int) -> "BountyMonth":
        return BountyMonth(month_number=month_number)


@dataclass(frozen=True, slots=True)
class SaleRecord:
    """
    Immutable record of a device-line sale and its bounty tracking.

    activation_date keeps the value as it was stored. Stored values that are
    not calendar dates are surfaced as InvalidActivationDate by the
    schedule calculator, per sale.
    """

    sale_id: UUID
    imei: str
    store_location: StoreLocation
    category: SaleCategory
    email: str
    activation_date: Union[date, str]
    status: LineStatus = LineStatus.ACTIVE
    bounty_tracking: Tuple[BountyMonth, ...] = field(default_factory=tuple)
    customer_name: Optional[str] = None
    customer_pin: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)

    @property
    def is_active(self) -> bool:
        return self.status == LineStatus.ACTIVE

    @property
    def paid_month_count(self) -> int:
        return sum(1 for month in self.bounty_tracking if month.paid)

    def bounty_month(self, month_number: int) -> Optional[BountyMonth]:
        """Return the tracking entry for month_number, or None if it is missing."""

        for month in self.bounty_tracking:
            if month.month_number == month_number:
                return month
        return None

    def with_bounty_month(self, updated: BountyMonth) -> "SaleRecord":
        """
        Return a new SaleRecord with `updated` replacing the entry for its month.

        A missing month is inserted; entries stay ordered by month number.
        """

        others = [m for m in self.bounty_tracking if m.month_number != updated.month_number]
        tracking = tuple(sorted([*others, updated], key=lambda m: m.month_number))
        return replace(self, bounty_tracking=tracking)


def default_bounty_tracking() -> Tuple[BountyMonth, ...]:
    """Six empty, unpaid checkpoints for a newly entered sale."""

    return tuple(BountyMonth.empty(n) for n in BOUNTY_MONTHS)


__all__ = [
    "BOUNTY_MONTHS",
    "BountyMonth",
    "LineStatus",
    "Payment",
    "SaleCategory",
    "SaleRecord",
    "StoreLocation",
    "default_bounty_tracking",
    "require_month_number",
]
