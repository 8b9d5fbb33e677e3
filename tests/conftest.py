"""
Pytest configuration for the bounty tracker tests.

This file adds the project root to the Python path so that tests can import
domain, repositories, services and api, and provides a sale factory.
"""

import sys
from datetime import date
from pathlib import Path
from uuid import uuid4

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.sale import (  # noqa: E402
    LineStatus,
    SaleCategory,
    SaleRecord,
    StoreLocation,
    default_bounty_tracking,
)


@pytest.fixture
def make_sale():
    """Build a SaleRecord with sensible defaults; override any field by keyword."""

    def _make(**overrides) -> SaleRecord:
        fields = {
            "sale_id": uuid4(),
            "imei": f"35693803{uuid4().int % 10**7:07d}",
            "store_location": StoreLocation.PARIS_RD,
            "category": SaleCategory.NEW_LINE,
            "email": "customer@example.com",
            "activation_date": date(2024, 1, 1),
            "status": LineStatus.ACTIVE,
            "bounty_tracking": default_bounty_tracking(),
        }
        fields.update(overrides)
        return SaleRecord(**fields)

    return _make
