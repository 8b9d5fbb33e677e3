"""
One-shot migration of legacy bounty amounts.

Rows written before payments were itemized store a scalar `amountPaid` per
month (read into BountyMonth.legacy_amount_paid). Until migrated, the
statistics engine takes max(payments total, legacy amount) for such months.

Migration turns the part of the legacy amount not already covered by
payments into a payment of type LEGACY_PAYMENT_TYPE and clears the scalar,
so the month amount is unchanged and only the payments model remains.
`dateChecked` was already read into date_paid by the row mapper and is
written back as datePaid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal

from domain.sale import BountyMonth, Payment, SaleRecord
from repositories.base import SaleRepository

logger = logging.getLogger(__name__)

LEGACY_PAYMENT_TYPE: str = "Legacy Amount"


@dataclass(frozen=True, slots=True)
class MigrationResult:
    sales_scanned: int
    sales_migrated: int
    months_migrated: int


def migrate_bounty_month(month: BountyMonth) -> BountyMonth:
    if month.legacy_amount_paid is None:
        return month

    remainder = month.legacy_amount_paid - month.payments_total
    payments = month.payments
    if remainder > Decimal("0"):
        payments = (*payments, Payment(type=LEGACY_PAYMENT_TYPE, amount=remainder))
    return replace(month, payments=payments, legacy_amount_paid=None)


def migrate_sale(sale: SaleRecord) -> SaleRecord:
    return replace(sale, bounty_tracking=tuple(migrate_bounty_month(m) for m in sale.bounty_tracking))


def needs_migration(sale: SaleRecord) -> bool:
    return any(m.legacy_amount_paid is not None for m in sale.bounty_tracking)


def migrate_legacy_amounts(repo: SaleRepository, dry_run: bool = False) -> MigrationResult:
    """
    Migrate every stored sale that still carries legacy amounts.

    With dry_run the counts are computed but nothing is written.
    """

    scanned = 0
    migrated = 0
    months = 0

    for sale in repo.list_sales():
        scanned += 1
        if not needs_migration(sale):
            continue

        legacy_months = sum(1 for m in sale.bounty_tracking if m.legacy_amount_paid is not None)
        if not dry_run:
            repo.update_sale(migrate_sale(sale))
        migrated += 1
        months += legacy_months
        logger.info(
            f"{'Would migrate' if dry_run else 'Migrated'} legacy amounts for sale {sale.sale_id}",
            extra={"sale_id": str(sale.sale_id), "months": legacy_months, "dry_run": dry_run},
        )

    return MigrationResult(sales_scanned=scanned, sales_migrated=migrated, months_migrated=months)


__all__ = [
    "LEGACY_PAYMENT_TYPE",
    "MigrationResult",
    "migrate_bounty_month",
    "migrate_legacy_amounts",
    "migrate_sale",
    "needs_migration",
]
