"""
Row mapping for sale records.

Converts between SaleRecord and the row shape stored in the `sales` table:

  sale_id, imei, store_location, category, customer_name, customer_pin,
  email, activation_date, status, notes, created_at_utc, bounty_tracking

bounty_tracking is a JSON array of month objects:

  {"monthNumber": 1, "paid": false, "payments": [{"type": "...", "amount": 50}],
   "datePaid": "2024-02-05", "notes": "..."}

Older rows may carry a scalar "amountPaid" and a "dateChecked" timestamp
instead of "payments" / "datePaid". Both are still read; they are written back
only until scripts/migrate_legacy_amounts.py has converted the row.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional
from uuid import UUID

from domain.sale import (
    BountyMonth,
    LineStatus,
    Payment,
    SaleCategory,
    SaleRecord,
    StoreLocation,
)
from domain.time import require_utc_timestamp

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


def _to_decimal(value: Any, *, name: str) -> Decimal:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{name} is not a number: {value!r}") from None
    if not number.is_finite():
        raise ValueError(f"{name} is not a finite number: {value!r}")
    return number


def _read_amount(value: Any, *, name: str, month_number: Any) -> Optional[Decimal]:
    """Read a stored amount; blank or unreadable values come back as None."""

    if value is None or value == "":
        return None
    try:
        return _to_decimal(value, name=name)
    except ValueError as e:
        logger.warning(
            f"Ignoring unreadable {name} in bounty month {month_number}: {e}",
            extra={"month_number": month_number, "field": name, "value": repr(value)[:100]},
        )
        return None


def _parse_optional_date(value: Any, *, name: str = "datePaid", month_number: Any = None) -> Optional[date]:
    """Parse a stored date or timestamp string; empty or unreadable values read as None."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        logger.warning(
            f"Ignoring unreadable {name} in bounty month {month_number}: {value!r}",
            extra={"month_number": month_number, "field": name, "value": repr(value)[:100]},
        )
        return None


def _parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a stored timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.
    """

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value)!r}")

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def bounty_month_from_json(data: Mapping[str, Any]) -> BountyMonth:
    month_number = int(data["monthNumber"])
    payments = tuple(
        Payment(
            type=str(p.get("type") or ""),
            amount=_read_amount(p.get("amount"), name="amount", month_number=month_number) or _ZERO,
        )
        for p in (data.get("payments") or [])
    )

    if data.get("datePaid"):
        date_paid = _parse_optional_date(data.get("datePaid"), month_number=month_number)
    else:
        date_paid = _parse_optional_date(data.get("dateChecked"), name="dateChecked", month_number=month_number)

    return BountyMonth(
        month_number=month_number,
        paid=bool(data.get("paid", False)),
        payments=payments,
        date_paid=date_paid,
        notes=data.get("notes") or None,
        legacy_amount_paid=_read_amount(data.get("amountPaid"), name="amountPaid", month_number=month_number),
    )


def bounty_month_to_json(month: BountyMonth) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "monthNumber": month.month_number,
        "paid": month.paid,
        "payments": [{"type": p.type, "amount": str(p.amount)} for p in month.payments],
        "datePaid": month.date_paid.isoformat() if month.date_paid else None,
        "notes": month.notes,
    }
    if month.legacy_amount_paid is not None:
        data["amountPaid"] = str(month.legacy_amount_paid)
    return data


def row_to_sale(row: Mapping[str, Any]) -> SaleRecord:
    """Convert a stored row into a SaleRecord."""

    raw_activation = row.get("activation_date")
    activation: Any = raw_activation if raw_activation is not None else ""

    tracking: List[BountyMonth] = [bounty_month_from_json(m) for m in (row.get("bounty_tracking") or [])]
    tracking.sort(key=lambda m: m.month_number)

    return SaleRecord(
        sale_id=UUID(str(row["sale_id"])),
        imei=str(row["imei"]),
        store_location=StoreLocation(str(row["store_location"])),
        category=SaleCategory(str(row["category"])),
        email=str(row.get("email") or ""),
        activation_date=activation,
        status=LineStatus(str(row.get("status") or LineStatus.ACTIVE.value)),
        bounty_tracking=tuple(tracking),
        customer_name=row.get("customer_name"),
        customer_pin=row.get("customer_pin"),
        notes=row.get("notes"),
        created_at=_parse_utc_datetime(row["created_at_utc"]) if row.get("created_at_utc") else None,
    )


def rows_to_sales(rows: Iterable[Mapping[str, Any]]) -> List[SaleRecord]:
    """
    Convert stored rows into SaleRecords, skipping rows that cannot be read.

    Each skipped row is logged with its sale_id so it can be repaired.
    """

    sales: List[SaleRecord] = []
    for row in rows:
        try:
            sales.append(row_to_sale(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Skipping unreadable sale row {row.get('sale_id')}: {e}",
                extra={
                    "sale_id": str(row.get("sale_id")),
                    "imei": row.get("imei"),
                    "error": str(e),
                },
            )
    return sales


def sale_to_row(sale: SaleRecord) -> Dict[str, Any]:
    """Convert a SaleRecord into the stored row shape."""

    if isinstance(sale.activation_date, date):
        activation = sale.activation_date.isoformat()
    else:
        activation = str(sale.activation_date)

    created_at = None
    if sale.created_at is not None:
        require_utc_timestamp("created_at", sale.created_at)
        created_at = sale.created_at.astimezone(timezone.utc).isoformat()

    return {
        "sale_id": str(sale.sale_id),
        "imei": sale.imei,
        "store_location": sale.store_location.value,
        "category": sale.category.value,
        "customer_name": sale.customer_name,
        "customer_pin": sale.customer_pin,
        "email": sale.email,
        "activation_date": activation,
        "status": sale.status.value,
        "notes": sale.notes,
        "created_at_utc": created_at,
        "bounty_tracking": [bounty_month_to_json(m) for m in sale.bounty_tracking],
    }


__all__ = [
    "bounty_month_from_json",
    "bounty_month_to_json",
    "row_to_sale",
    "rows_to_sales",
    "sale_to_row",
]
