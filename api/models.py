"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Money is serialized as decimal strings rounded to cents.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from domain.sale import LineStatus, SaleCategory, StoreLocation


# ============================================================================
# Sale Models
# ============================================================================

class PaymentModel(BaseModel):
    """Single payment line within a bounty month."""
    type: str = ""
    amount: Decimal = Field(..., ge=0, description="Payment amount (must be >= 0)")


class BountyMonthModel(BaseModel):
    """Bounty tracking entry for one month (1-6) of a sale."""
    month_number: int = Field(..., ge=1, le=6)
    paid: bool = False
    payments: List[PaymentModel] = Field(default_factory=list)
    date_paid: Optional[date] = None
    notes: Optional[str] = None


class SaleCreateRequest(BaseModel):
    """Request to record a new sale."""
    imei: str = Field(..., min_length=1, description="Device IMEI (unique across sales)")
    store_location: StoreLocation
    category: SaleCategory
    email: str = Field(..., min_length=1)
    activation_date: date
    customer_name: Optional[str] = None
    customer_pin: Optional[str] = None
    notes: Optional[str] = None
    status: LineStatus = LineStatus.ACTIVE
    bounty_tracking: List[BountyMonthModel] = Field(
        default_factory=list,
        description="Months not supplied are created unpaid with no payments"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "imei": "356938035643809",
                "store_location": "paris-rd",
                "category": "new-line",
                "email": "customer@example.com",
                "activation_date": "2024-01-01",
                "customer_name": "Jane Doe",
                "bounty_tracking": [
                    {
                        "month_number": 1,
                        "paid": True,
                        "payments": [{"type": "Q1 Promo Upgrade", "amount": "50.00"}],
                        "date_paid": "2024-02-06"
                    }
                ]
            }
        }


class SaleUpdateRequest(BaseModel):
    """Partial update of a sale; omitted fields are left unchanged."""
    imei: Optional[str] = Field(None, min_length=1)
    store_location: Optional[StoreLocation] = None
    category: Optional[SaleCategory] = None
    email: Optional[str] = Field(None, min_length=1)
    activation_date: Optional[date] = None
    customer_name: Optional[str] = None
    customer_pin: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[LineStatus] = None
    bounty_tracking: Optional[List[BountyMonthModel]] = None


class BountyMonthResponse(BaseModel):
    month_number: int
    paid: bool
    payments: List[PaymentModel]
    amount: Decimal
    date_paid: Optional[date] = None
    notes: Optional[str] = None


class SaleResponse(BaseModel):
    sale_id: UUID
    imei: str
    store_location: StoreLocation
    category: SaleCategory
    email: str
    activation_date: str
    status: LineStatus
    customer_name: Optional[str] = None
    customer_pin: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    paid_month_count: int
    bounty_tracking: List[BountyMonthResponse]


class SaleListResponse(BaseModel):
    items: List[SaleResponse]
    total_count: int


# ============================================================================
# Alert Models
# ============================================================================

class AlertResponse(BaseModel):
    sale_id: UUID
    imei: str
    email: str
    store_location: StoreLocation
    month_number: int
    check_date: date
    days_until_check: int
    is_overdue: bool
    is_paid: bool
    status: Optional[str] = None


class AlertDiagnosticResponse(BaseModel):
    sale_id: UUID
    imei: str
    kind: str
    message: str


class AlertListResponse(BaseModel):
    alerts: List[AlertResponse]
    diagnostics: List[AlertDiagnosticResponse]
    total_count: int
    overdue_count: int
    due_soon_count: int
    window_days: int
    filters_applied: dict

    class Config:
        json_schema_extra = {
            "example": {
                "alerts": [],
                "diagnostics": [],
                "total_count": 4,
                "overdue_count": 1,
                "due_soon_count": 2,
                "window_days": 14,
                "filters_applied": {"status": "overdue"}
            }
        }


# ============================================================================
# Dashboard Models
# ============================================================================

class DashboardStatsResponse(BaseModel):
    total_active_lines: int
    total_deactivated_lines: int
    total_commission_earned: Decimal
    monthly_bounty_total: Decimal
    paid_bounties: Decimal
    unpaid_bounties: Decimal


class MonthlyTotalsResponse(BaseModel):
    month_number: int
    paid: Decimal
    unpaid: Decimal


class DueSummaryResponse(BaseModel):
    soon_due_count: int
    soon_due_total: Decimal
    overdue_count: int
    overdue_total: Decimal


class DashboardResponse(BaseModel):
    stats: DashboardStatsResponse
    monthly: List[MonthlyTotalsResponse]
    sales_by_category: Dict[str, int]
    due: DueSummaryResponse

    class Config:
        json_schema_extra = {
            "example": {
                "stats": {
                    "total_active_lines": 12,
                    "total_deactivated_lines": 1,
                    "total_commission_earned": "575.00",
                    "monthly_bounty_total": "900.00",
                    "paid_bounties": "575.00",
                    "unpaid_bounties": "325.00"
                },
                "monthly": [],
                "sales_by_category": {"new-line": 5, "upgrade": 8},
                "due": {
                    "soon_due_count": 2,
                    "soon_due_total": "100.00",
                    "overdue_count": 1,
                    "overdue_total": "50.00"
                }
            }
        }
