"""
Dashboard API Endpoints.

Aggregate bounty figures and the CSV export.
"""

from datetime import date

from fastapi import APIRouter, Depends, Response

from api.deps import get_sale_repository, get_today
from api.models import (
    DashboardResponse,
    DashboardStatsResponse,
    DueSummaryResponse,
    MonthlyTotalsResponse,
)
from domain.stats import quantize_money
from repositories.base import SaleRepository
from services.csv_export_service import export_filename, generate_sales_csv
from services.report_service import dashboard_report

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard Totals",
    description="Line counts, bounty totals, per-month paid/unpaid amounts, sales by category and due summary."
)
def get_dashboard(
    repo: SaleRepository = Depends(get_sale_repository),
    today: date = Depends(get_today),
):
    report = dashboard_report(repo, today=today)
    stats = report.stats

    return DashboardResponse(
        stats=DashboardStatsResponse(
            total_active_lines=stats.total_active_lines,
            total_deactivated_lines=stats.total_deactivated_lines,
            total_commission_earned=quantize_money(stats.total_commission_earned),
            monthly_bounty_total=quantize_money(stats.monthly_bounty_total),
            paid_bounties=quantize_money(stats.paid_bounties),
            unpaid_bounties=quantize_money(stats.unpaid_bounties),
        ),
        monthly=[
            MonthlyTotalsResponse(
                month_number=m.month_number,
                paid=quantize_money(m.paid),
                unpaid=quantize_money(m.unpaid),
            )
            for m in report.monthly
        ],
        sales_by_category={category.value: count for category, count in report.by_category.items()},
        due=DueSummaryResponse(
            soon_due_count=report.due.soon_due_count,
            soon_due_total=quantize_money(report.due.soon_due_total),
            overdue_count=report.due.overdue_count,
            overdue_total=quantize_money(report.due.overdue_total),
        ),
    )


@router.get(
    "/export/sales.csv",
    summary="Export Sales CSV",
    description="One row per payment per bounty month."
)
def export_sales_csv(
    repo: SaleRepository = Depends(get_sale_repository),
    today: date = Depends(get_today),
):
    csv_content = generate_sales_csv(repo.list_sales())
    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={export_filename(today)}"
        }
    )
