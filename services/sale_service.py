"""
Sale service: create, update, delete and bounty-payment toggling.

This is the write boundary for sale records. It owns the rules the pure
domain trusts its inputs to satisfy:
- IMEI is unique across sales (DuplicateIdentifier, checked before any write)
- payment amounts are non-negative, finite numbers (SaleValidationError)
- month numbers are 1..6 and unique per sale
- the activation date is a calendar date
- every sale carries months 1..6; payments with a blank type or a zero
  amount are dropped before persisting
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import UUID, uuid4

from domain.sale import (
    BOUNTY_MONTHS,
    BountyMonth,
    LineStatus,
    Payment,
    SaleCategory,
    SaleRecord,
    StoreLocation,
)
from domain.time import InvalidActivationDate, local_date, to_calendar_date
from repositories.base import SaleRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SaleValidationError(ValueError):
    """Raised when sale input is rejected at the write boundary."""


class DuplicateIdentifier(Exception):
    """Raised when an IMEI is already used by another sale."""

    def __init__(self, imei: str, existing_sale_id: UUID) -> None:
        super().__init__(f"A sale with IMEI {imei} already exists ({existing_sale_id})")
        self.imei = imei
        self.existing_sale_id = existing_sale_id


class SaleNotFound(LookupError):
    """Raised when a sale_id does not exist."""

    def __init__(self, sale_id: UUID) -> None:
        super().__init__(f"Sale not found: {sale_id}")
        self.sale_id = sale_id


@dataclass(frozen=True, slots=True)
class SaleInput:
    """Fields for entering a new sale."""

    imei: str
    store_location: StoreLocation
    category: SaleCategory
    email: str
    activation_date: Any
    customer_name: Optional[str] = None
    customer_pin: Optional[str] = None
    notes: Optional[str] = None
    status: LineStatus = LineStatus.ACTIVE
    bounty_tracking: Sequence[BountyMonth] = ()


@dataclass(frozen=True, slots=True)
class SaleUpdate:
    """Partial update; None means 'leave unchanged'."""

    imei: Optional[str] = None
    store_location: Optional[StoreLocation] = None
    category: Optional[SaleCategory] = None
    email: Optional[str] = None
    activation_date: Optional[Any] = None
    customer_name: Optional[str] = None
    customer_pin: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[LineStatus] = None
    bounty_tracking: Optional[Sequence[BountyMonth]] = None


def _require_text(name: str, value: Optional[str]) -> str:
    text = (value or "").strip()
    if not text:
        raise SaleValidationError(f"{name} is required")
    return text


def _require_activation_date(value: Any) -> date:
    try:
        return to_calendar_date(value)
    except InvalidActivationDate as e:
        raise SaleValidationError(f"activation_date: {e}") from None


def _require_amount(month_number: int, amount: Any) -> Decimal:
    if isinstance(amount, bool) or not isinstance(amount, (Decimal, int)):
        raise SaleValidationError(
            f"month {month_number}: payment amount must be a number, got {amount!r}"
        )
    value = Decimal(amount)
    if not value.is_finite():
        raise SaleValidationError(f"month {month_number}: payment amount must be finite")
    if value < 0:
        raise SaleValidationError(f"month {month_number}: payment amount must be >= 0, got {value}")
    return value


def _clean_payments(month_number: int, payments: Sequence[Payment]) -> tuple:
    cleaned: List[Payment] = []
    for payment in payments:
        amount = _require_amount(month_number, payment.amount)
        kind = (payment.type or "").strip()
        if not kind or amount == 0:
            continue
        cleaned.append(Payment(type=kind, amount=amount))
    return tuple(cleaned)


def normalize_bounty_tracking(months: Sequence[BountyMonth]) -> tuple:
    """
    Validate and complete a bounty tracking list.

    Returns exactly six entries ordered by month number; months not supplied
    are filled in as unpaid with no payments.
    """

    by_month: Dict[int, BountyMonth] = {}
    for month in months:
        if month.month_number in by_month:
            raise SaleValidationError(f"month {month.month_number} appears more than once")
        if month.legacy_amount_paid is not None:
            _require_amount(month.month_number, month.legacy_amount_paid)
        by_month[month.month_number] = replace(
            month, payments=_clean_payments(month.month_number, month.payments)
        )

    return tuple(by_month.get(n, BountyMonth.empty(n)) for n in BOUNTY_MONTHS)


def _ensure_unique_imei(repo: SaleRepository, imei: str, sale_id: Optional[UUID] = None) -> None:
    existing = repo.find_by_imei(imei)
    if existing is not None and existing.sale_id != sale_id:
        raise DuplicateIdentifier(imei, existing.sale_id)


def _require_sale(repo: SaleRepository, sale_id: UUID) -> SaleRecord:
    sale = repo.get_sale(sale_id)
    if sale is None:
        raise SaleNotFound(sale_id)
    return sale


def create_sale(repo: SaleRepository, data: SaleInput, clock: Clock = utc_now) -> SaleRecord:
    """
    Validate and persist a new sale.

    Raises:
        SaleValidationError: invalid input
        DuplicateIdentifier: IMEI already recorded
    """

    imei = _require_text("imei", data.imei)
    email = _require_text("email", data.email)
    activation = _require_activation_date(data.activation_date)
    tracking = normalize_bounty_tracking(data.bounty_tracking)

    _ensure_unique_imei(repo, imei)

    sale = SaleRecord(
        sale_id=uuid4(),
        imei=imei,
        store_location=data.store_location,
        category=data.category,
        email=email,
        activation_date=activation,
        status=data.status,
        bounty_tracking=tracking,
        customer_name=data.customer_name or None,
        customer_pin=data.customer_pin or None,
        notes=data.notes or None,
        created_at=clock().astimezone(timezone.utc),
    )

    stored = repo.insert_sale(sale)
    logger.info(
        f"Recorded sale {stored.sale_id}",
        extra={"sale_id": str(stored.sale_id), "imei": stored.imei},
    )
    return stored


def update_sale(repo: SaleRepository, sale_id: UUID, changes: SaleUpdate) -> SaleRecord:
    """
    Apply a partial update to an existing sale.

    Raises:
        SaleNotFound: unknown sale_id
        SaleValidationError: invalid input
        DuplicateIdentifier: new IMEI belongs to another sale
    """

    sale = _require_sale(repo, sale_id)
    fields: Dict[str, Any] = {}

    if changes.imei is not None:
        fields["imei"] = _require_text("imei", changes.imei)
        _ensure_unique_imei(repo, fields["imei"], sale_id)
    if changes.email is not None:
        fields["email"] = _require_text("email", changes.email)
    if changes.activation_date is not None:
        fields["activation_date"] = _require_activation_date(changes.activation_date)
    if changes.bounty_tracking is not None:
        fields["bounty_tracking"] = normalize_bounty_tracking(changes.bounty_tracking)

    for name in ("store_location", "category", "status", "customer_name", "customer_pin", "notes"):
        value = getattr(changes, name)
        if value is not None:
            fields[name] = value

    updated = repo.update_sale(replace(sale, **fields))
    logger.info(
        f"Updated sale {sale_id}",
        extra={"sale_id": str(sale_id), "updated_fields": sorted(fields)},
    )
    return updated


def delete_sale(repo: SaleRepository, sale_id: UUID) -> None:
    if not repo.delete_sale(sale_id):
        raise SaleNotFound(sale_id)
    logger.info(f"Deleted sale {sale_id}", extra={"sale_id": str(sale_id)})


def toggle_bounty_paid(
    repo: SaleRepository,
    sale_id: UUID,
    month_number: int,
    clock: Clock = utc_now,
) -> SaleRecord:
    """
    Flip a month's paid flag and stamp date_paid with the local date of the clock.

    A month missing from the record is created (unpaid) before toggling.

    Raises:
        SaleNotFound: unknown sale_id
        SaleValidationError: month_number outside 1..6
    """

    if month_number not in BOUNTY_MONTHS:
        raise SaleValidationError(f"month_number must be between 1 and 6, got {month_number}")

    sale = _require_sale(repo, sale_id)
    month = sale.bounty_month(month_number) or BountyMonth.empty(month_number)
    toggled = replace(month, paid=not month.paid, date_paid=local_date(clock()))

    updated = repo.update_sale(sale.with_bounty_month(toggled))
    logger.info(
        f"Marked month {month_number} of sale {sale_id} as {'paid' if toggled.paid else 'unpaid'}",
        extra={"sale_id": str(sale_id), "month_number": month_number, "paid": toggled.paid},
    )
    return updated


__all__ = [
    "Clock",
    "DuplicateIdentifier",
    "SaleInput",
    "SaleNotFound",
    "SaleUpdate",
    "SaleValidationError",
    "create_sale",
    "delete_sale",
    "normalize_bounty_tracking",
    "toggle_bounty_paid",
    "update_sale",
    "utc_now",
]
