#!/usr/bin/env python3
"""
Legacy Bounty Amount Migration

Converts scalar `amountPaid` values on old bounty months into itemized
payments (type "Legacy Amount") and rewrites `dateChecked` as `datePaid`.
Month amounts are unchanged by the migration. Safe to re-run: migrated rows
no longer carry `amountPaid` and are skipped.

Usage:
    python migrate_legacy_amounts.py --dry-run
    python migrate_legacy_amounts.py
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.deps import build_sale_repository
from config import load_settings
from services.legacy_migration_service import migrate_legacy_amounts


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Migrate legacy scalar bounty amounts to payments")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing"
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        result = migrate_legacy_amounts(build_sale_repository(settings), dry_run=args.dry_run)
    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        return 1

    print("=" * 60)
    print("MIGRATION SUMMARY" + (" (dry run)" if args.dry_run else ""))
    print("=" * 60)
    print(f"Sales scanned:   {result.sales_scanned}")
    print(f"Sales migrated:  {result.sales_migrated}")
    print(f"Months migrated: {result.months_migrated}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
