"""
Sale repository (persistence, process memory).

Keeps sales in a dict keyed by sale_id, in insertion order. Used when
SALES_BACKEND=memory and in tests. Data does not survive a restart.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from domain.sale import LineStatus, SaleRecord


class InMemorySaleRepository:
    def __init__(self, sales: Iterable[SaleRecord] = ()) -> None:
        self._lock = threading.Lock()
        self._sales: Dict[UUID, SaleRecord] = {}
        for sale in sales:
            self._sales[sale.sale_id] = sale

    def list_sales(self, status: Optional[LineStatus] = None) -> List[SaleRecord]:
        with self._lock:
            sales = list(self._sales.values())
        if status is None:
            return sales
        return [s for s in sales if s.status == status]

    def get_sale(self, sale_id: UUID) -> Optional[SaleRecord]:
        with self._lock:
            return self._sales.get(sale_id)

    def find_by_imei(self, imei: str) -> Optional[SaleRecord]:
        with self._lock:
            for sale in self._sales.values():
                if sale.imei == imei:
                    return sale
        return None

    def insert_sale(self, sale: SaleRecord) -> SaleRecord:
        with self._lock:
            if sale.sale_id in self._sales:
                raise RuntimeError(f"Failed to record sale: {sale.sale_id} already exists")
            self._sales[sale.sale_id] = sale
        return sale

    def update_sale(self, sale: SaleRecord) -> SaleRecord:
        with self._lock:
            if sale.sale_id not in self._sales:
                raise RuntimeError(f"Failed to update sale: {sale.sale_id} not found")
            self._sales[sale.sale_id] = sale
        return sale

    def delete_sale(self, sale_id: UUID) -> bool:
        with self._lock:
            return self._sales.pop(sale_id, None) is not None


__all__ = ["InMemorySaleRepository"]
