"""
Alerts API Endpoints.

Bounty check alerts: overdue checkpoints and those coming due.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_sale_repository, get_settings, get_today
from api.models import AlertDiagnosticResponse, AlertListResponse, AlertResponse
from config import Settings
from domain.alerts import AlertFilters, AlertStatus, PaymentFilter
from domain.sale import StoreLocation
from repositories.base import SaleRepository
from services.report_service import alert_report

router = APIRouter()


@router.get(
    "/alerts",
    response_model=AlertListResponse,
    summary="Bounty Check Alerts",
    description="Overdue bounty checks and checks due within the window, most urgent first."
)
def get_alerts(
    window_days: Optional[int] = Query(None, ge=0, le=365, description="Visibility window in days (default from settings)"),
    search: Optional[str] = Query(None, description="Case-insensitive match on IMEI or email"),
    status: Optional[AlertStatus] = Query(None, description="'overdue', 'due-soon' or 'upcoming'"),
    month_number: Optional[int] = Query(None, ge=1, le=6),
    store_location: Optional[StoreLocation] = Query(None),
    payment: Optional[PaymentFilter] = Query(None, description="'paid' or 'unpaid'"),
    repo: SaleRepository = Depends(get_sale_repository),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
):
    """
    **Example usage:**
    - All alerts: `GET /api/v1/alerts`
    - Unpaid overdue only: `GET /api/v1/alerts?status=overdue`
    - Combine filters: `GET /api/v1/alerts?store_location=sedalia&month_number=2&payment=unpaid`
    """
    window = settings.alert_window_days if window_days is None else window_days
    filters = AlertFilters(
        search=search,
        status=status,
        month_number=month_number,
        store_location=store_location,
        payment=payment,
    )
    report = alert_report(repo, today=today, window_days=window, filters=filters)

    filters_applied = {}
    if search:
        filters_applied["search"] = search
    if status:
        filters_applied["status"] = status.value
    if month_number is not None:
        filters_applied["month_number"] = month_number
    if store_location:
        filters_applied["store_location"] = store_location.value
    if payment:
        filters_applied["payment"] = payment.value

    return AlertListResponse(
        alerts=[
            AlertResponse(
                sale_id=a.sale_id,
                imei=a.imei,
                email=a.email,
                store_location=a.store_location,
                month_number=a.month_number,
                check_date=a.check_date,
                days_until_check=a.days_until_check,
                is_overdue=a.is_overdue,
                is_paid=a.is_paid,
                status=a.status.value if a.status else None,
            )
            for a in report.alerts
        ],
        diagnostics=[
            AlertDiagnosticResponse(sale_id=d.sale_id, imei=d.imei, kind=d.kind, message=d.message)
            for d in report.diagnostics
        ],
        total_count=len(report.alerts),
        overdue_count=report.overdue_count,
        due_soon_count=report.due_soon_count,
        window_days=window,
        filters_applied=filters_applied,
    )
