"""
Report service: alerts and dashboard figures for the stored sales.

Loads a snapshot of sales from the repository once per call and hands it to
the pure domain functions. Nothing here writes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional, Tuple

from domain.alerts import DEFAULT_WINDOW_DAYS, AlertFilters, AlertReport, build_alerts, filter_alerts
from domain.sale import SaleCategory
from domain.stats import (
    DashboardStats,
    DueSummary,
    MonthlyBountyTotals,
    compute_dashboard_stats,
    due_summary,
    monthly_breakdown,
    sales_by_category,
)
from repositories.base import SaleRepository


@dataclass(frozen=True, slots=True)
class DashboardReport:
    stats: DashboardStats
    monthly: Tuple[MonthlyBountyTotals, ...]
    by_category: Dict[SaleCategory, int]
    due: DueSummary


def alert_report(
    repo: SaleRepository,
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
    filters: Optional[AlertFilters] = None,
) -> AlertReport:
    """
    Alerts for all stored sales as of `today`, optionally filtered.

    Counts on the returned report reflect the filtered alerts; diagnostics
    are never filtered.
    """

    report = build_alerts(repo.list_sales(), today=today, window_days=window_days)
    if filters is None:
        return report
    return AlertReport(
        alerts=tuple(filter_alerts(report.alerts, filters)),
        diagnostics=report.diagnostics,
    )


def dashboard_report(repo: SaleRepository, today: date) -> DashboardReport:
    sales = repo.list_sales()
    return DashboardReport(
        stats=compute_dashboard_stats(sales),
        monthly=monthly_breakdown(sales),
        by_category=sales_by_category(sales),
        due=due_summary(sales, today=today),
    )


__all__ = ["DashboardReport", "alert_report", "dashboard_report"]
