"""
CSV export service for sale and bounty payment data.

One row per payment per bounty month. Months (and sales) without payments
produce no rows.

Security:
- CSV Injection Prevention: sanitizes text fields to prevent formula execution
- Security Logging: logs when dangerous characters are stripped
"""

from __future__ import annotations

import csv
import logging
from datetime import date
from io import StringIO
from typing import Iterable, Iterator, List

from domain.sale import SaleRecord

logger = logging.getLogger(__name__)

CSV_COLUMNS: List[str] = [
    "IMEI",
    "Store",
    "Category",
    "Customer Name",
    "Email",
    "Activation Date",
    "Status",
    "Notes",
    "Month",
    "Paid",
    "Amount",
    "Date Paid",
    "Payment Type",
]


def sanitize_csv_field(value: object, field_name: str = "unknown") -> str:
    """
    Sanitize field to prevent CSV injection attacks with security logging.

    Strips leading characters that can trigger formula execution in Excel/Sheets:
    =, +, -, @, tab, carriage return

    If dangerous characters are found and stripped, a warning is logged for
    security monitoring.

    Example:
        sanitize_csv_field("=1+1", "notes")
        # Returns "1+1" and logs warning about stripped "=" character

        sanitize_csv_field("Normal Name", "customer_name")
        # Returns "Normal Name" (unchanged, no logging)
    """
    if value is None or value == "":
        return ""

    text = str(value).strip()
    original_text = text
    dangerous_chars = {'=', '+', '-', '@', '\t', '\r'}

    stripped_chars = []
    while text and text[0] in dangerous_chars:
        stripped_chars.append(text[0])
        text = text[1:]

    if stripped_chars:
        logger.warning(
            f"CSV injection character(s) stripped from field '{field_name}'",
            extra={
                "field_name": field_name,
                "stripped_characters": "".join(stripped_chars),
                "original_value": original_text[:100],
                "sanitized_value": text[:100],
                "modification_type": "csv_injection_prevention"
            }
        )

    return text


def _activation_text(sale: SaleRecord) -> str:
    if isinstance(sale.activation_date, date):
        return sale.activation_date.isoformat()
    return sanitize_csv_field(sale.activation_date, "activation_date")


def iter_export_rows(sales: Iterable[SaleRecord]) -> Iterator[List[str]]:
    """Yield data rows (without header) in sale, month, payment order."""

    for sale in sales:
        for month in sale.bounty_tracking:
            for payment in month.payments:
                yield [
                    sanitize_csv_field(sale.imei, "imei"),
                    sale.store_location.value,
                    sale.category.value,
                    sanitize_csv_field(sale.customer_name, "customer_name"),
                    sanitize_csv_field(sale.email, "email"),
                    _activation_text(sale),
                    sale.status.value,
                    sanitize_csv_field(sale.notes, "notes"),
                    str(month.month_number),
                    "Yes" if month.paid else "No",
                    str(payment.amount),
                    month.date_paid.isoformat() if month.date_paid else "",
                    sanitize_csv_field(payment.type, "payment_type"),
                ]


def generate_sales_csv(sales: Iterable[SaleRecord]) -> str:
    """
    Generate the sales/bounty payment export as CSV text.

    Example:
        csv_content = generate_sales_csv(repo.list_sales())

        # Or return in API response
        return Response(content=csv_content, media_type="text/csv")
    """
    output = StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL)
    writer.writerow(CSV_COLUMNS)
    for row in iter_export_rows(sales):
        writer.writerow(row)
    return output.getvalue()


def export_filename(today: date) -> str:
    return f"commission_tracker_export_{today.isoformat()}.csv"


__all__ = [
    "CSV_COLUMNS",
    "export_filename",
    "generate_sales_csv",
    "iter_export_rows",
    "sanitize_csv_field",
]
