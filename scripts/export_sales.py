#!/usr/bin/env python3
"""
Sales Export Script

Exports sale records and their bounty payments to CSV, one row per payment
per bounty month (the same format as GET /api/v1/export/sales.csv).

Usage:
    python export_sales.py --output sales_export.csv
    python export_sales.py --status active --output active_lines.csv
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.deps import build_sale_repository
from config import load_settings
from domain.sale import LineStatus, SaleRecord
from services.csv_export_service import generate_sales_csv, iter_export_rows


def export_sales_to_csv(sales: List[SaleRecord], output_path: str) -> int:
    """
    Write the export for `sales` to output_path.

    Returns:
        Number of payment rows written (header excluded)
    """
    row_count = sum(1 for _ in iter_export_rows(sales))

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        f.write(generate_sales_csv(sales))

    return row_count


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Export sales and bounty payments to CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export all sales
  python export_sales.py --output all_sales.csv

  # Export only active lines
  python export_sales.py --status active --output active.csv
        """
    )

    parser.add_argument(
        "--output",
        "-o",
        required=True,
        help="Path to output CSV file"
    )

    parser.add_argument(
        "--status",
        "-s",
        choices=[s.value for s in LineStatus],
        help="Filter by line status"
    )

    args = parser.parse_args(argv)

    try:
        repo = build_sale_repository(load_settings())
        status = LineStatus(args.status) if args.status else None

        print("Fetching sales...")
        print(f"  Status filter: {args.status or 'None (all)'}")

        sales = repo.list_sales(status=status)
        if not sales:
            print("No sales found matching the specified filters")
            return 1

        rows = export_sales_to_csv(sales, args.output)

        print()
        print("=" * 60)
        print("EXPORT SUMMARY")
        print("=" * 60)
        print(f"Sales exported:        {len(sales)}")
        print(f"Payment rows written:  {rows}")
        print(f"Output file: {args.output}")
        print("=" * 60)

        return 0

    except KeyboardInterrupt:
        print("\n\nExport interrupted by user")
        return 130

    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
