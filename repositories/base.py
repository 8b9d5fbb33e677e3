"""
Sale store interface.

Services depend on this protocol, not on a concrete back end. Implementations:
- repositories.sale_repository.SupabaseSaleRepository (Supabase table)
- repositories.memory_sale_repository.InMemorySaleRepository (process memory)

Repositories only persist and fetch. Business rules (IMEI uniqueness,
payment validation) live in services.sale_service.
"""

from __future__ import annotations

from typing import List, Optional, Protocol
from uuid import UUID

from domain.sale import LineStatus, SaleRecord


class SaleRepository(Protocol):
    def list_sales(self, status: Optional[LineStatus] = None) -> List[SaleRecord]:
        """All sales (optionally only those with `status`), oldest first."""
        ...

    def get_sale(self, sale_id: UUID) -> Optional[SaleRecord]:
        ...

    def find_by_imei(self, imei: str) -> Optional[SaleRecord]:
        ...

    def insert_sale(self, sale: SaleRecord) -> SaleRecord:
        ...

    def update_sale(self, sale: SaleRecord) -> SaleRecord:
        """Replace the stored sale with the same sale_id. Returns the stored value."""
        ...

    def delete_sale(self, sale_id: UUID) -> bool:
        """Delete a sale. Returns False if it did not exist."""
        ...


__all__ = ["SaleRepository"]
