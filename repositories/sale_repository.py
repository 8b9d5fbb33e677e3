"""
Sale repository (persistence, Supabase).

This module provides *only* persistence operations for the SaleRecord domain
entity. It does not enforce business rules (e.g., IMEI uniqueness); it only
inserts, updates, deletes and fetches sale records.
"""

from __future__ import annotations

from typing import Any, List, Optional
from uuid import UUID

from domain.sale import LineStatus, SaleRecord
from repositories.client import get_supabase
from repositories.sale_rows import row_to_sale, rows_to_sales, sale_to_row

# Supabase table name for sale records.
# Keep this aligned with your database schema.
_SALES_TABLE: str = "sales"


def _raise_on_error(response: Any, action: str) -> None:
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")


class SupabaseSaleRepository:
    """SaleRepository backed by the Supabase `sales` table."""

    def __init__(self, client: Any = None) -> None:
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def list_sales(self, status: Optional[LineStatus] = None) -> List[SaleRecord]:
        """
        Retrieve all sale records, oldest first.
        Rows that cannot be read are logged and left out.

        Args:
            status: Only return sales with this status (default: all)

        Returns:
            List[SaleRecord] (possibly empty)
        """

        query = self.client.table(_SALES_TABLE).select("*")
        if status is not None:
            query = query.eq("status", status.value)
        response = query.order("created_at_utc").execute()
        _raise_on_error(response, "list sales")

        rows = getattr(response, "data", None) or []
        return rows_to_sales(rows)

    def get_sale(self, sale_id: UUID) -> Optional[SaleRecord]:
        response = (
            self.client.table(_SALES_TABLE)
            .select("*")
            .eq("sale_id", str(sale_id))
            .limit(1)
            .execute()
        )
        _raise_on_error(response, "get sale")

        rows = getattr(response, "data", None) or []
        if not rows:
            return None
        return row_to_sale(rows[0])

    def find_by_imei(self, imei: str) -> Optional[SaleRecord]:
        response = (
            self.client.table(_SALES_TABLE)
            .select("*")
            .eq("imei", imei)
            .limit(1)
            .execute()
        )
        _raise_on_error(response, "look up sale by IMEI")

        rows = getattr(response, "data", None) or []
        if not rows:
            return None
        return row_to_sale(rows[0])

    def insert_sale(self, sale: SaleRecord) -> SaleRecord:
        response = self.client.table(_SALES_TABLE).insert(sale_to_row(sale)).execute()
        _raise_on_error(response, "record sale")
        return sale

    def update_sale(self, sale: SaleRecord) -> SaleRecord:
        payload = sale_to_row(sale)
        payload.pop("sale_id")
        payload.pop("created_at_utc")

        response = (
            self.client.table(_SALES_TABLE)
            .update(payload)
            .eq("sale_id", str(sale.sale_id))
            .execute()
        )
        _raise_on_error(response, "update sale")

        rows = getattr(response, "data", None) or []
        if not rows:
            raise RuntimeError(f"Failed to update sale: {sale.sale_id} not found")
        return row_to_sale(rows[0])

    def delete_sale(self, sale_id: UUID) -> bool:
        response = (
            self.client.table(_SALES_TABLE)
            .delete()
            .eq("sale_id", str(sale_id))
            .execute()
        )
        _raise_on_error(response, "delete sale")

        rows = getattr(response, "data", None) or []
        return bool(rows)


__all__ = ["SupabaseSaleRepository"]
