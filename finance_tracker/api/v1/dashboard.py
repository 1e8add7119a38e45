"""GET /v1/dashboard and GET /v1/compensation - income and spending overviews"""

from dataclasses import asdict
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from finance_tracker.api.dependencies import get_store, get_today
from finance_tracker.api.v1.schemas import (
    CompanyIncomesOut,
    CompensationResponse,
    DashboardResponse,
    TrendPointOut,
)
from finance_tracker.config import settings
from finance_tracker.domain.aggregation import build_dashboard, incomes_for_month, month_totals
from finance_tracker.domain.membership import weeks_overlapping
from finance_tracker.domain.models import Company, Income
from finance_tracker.domain.period import (
    format_amount,
    format_amount_short,
    format_period_display,
    month_period_of,
    navigate_month,
)
from finance_tracker.infrastructure.database.store import RecordStore

router = APIRouter()


def _amount(value: int) -> str:
    return format_amount(value, settings.currency_suffix, settings.thousands_separator)


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    today: date = Depends(get_today),
    store: RecordStore = Depends(get_store),
):
    """
    Current month overview.

    Returns:
        Expected vs received income, spending, net savings, comparison with the
        previous month, income trend, per-company and per-category breakdowns,
        and subscriptions billing in the coming week
    """
    stats = build_dashboard(
        store.load_all(),
        today,
        trend_months=settings.trend_months,
        upcoming_window_days=settings.upcoming_window_days,
        upcoming_limit=settings.upcoming_limit,
    )

    return DashboardResponse.model_validate(
        {
            **asdict(stats),
            "month_label": format_period_display(stats.month),
            "trend": [
                TrendPointOut(**asdict(point), amount_label=format_amount_short(point.amount))
                for point in stats.trend
            ],
            "formatted": {
                "expected": _amount(stats.expected),
                "received": _amount(stats.received),
                "spending": _amount(stats.spending),
                "netSavings": _amount(stats.net_savings),
                "subscriptionTotal": _amount(stats.subscription_total),
            },
        }
    )


def _with_incomes(companies: List[Company], incomes: List[Income], by_payment_date: bool) -> List[CompanyIncomesOut]:
    grouped = []
    for company in companies:
        own = [i for i in incomes if i.company_id == company.id]
        if by_payment_date:
            # Undated entries first
            own.sort(key=lambda i: (i.payment_date is not None, i.payment_date))
        grouped.append(CompanyIncomesOut.model_validate({"company": company, "incomes": own}))
    return grouped


@router.get("/compensation", response_model=CompensationResponse)
def get_compensation(
    month: Optional[str] = Query(None, description="Month period YYYY-MM, defaults to the current month"),
    today: date = Depends(get_today),
    store: RecordStore = Depends(get_store),
):
    """Income tracking for one month, split into weekly and monthly companies"""
    month = month or month_period_of(today)
    snapshot = store.load_all()

    totals = month_totals(snapshot.companies, snapshot.incomes, month)
    in_month = incomes_for_month(snapshot.incomes, month)
    weekly = [c for c in snapshot.companies if c.payment_type == "weekly"]
    monthly = [c for c in snapshot.companies if c.payment_type == "monthly"]

    return CompensationResponse(
        month=month,
        month_label=format_period_display(month),
        prev_month=navigate_month(month, "prev"),
        next_month=navigate_month(month, "next"),
        weeks=sorted(weeks_overlapping(month)),
        expected=totals.expected,
        received=totals.received,
        progress=totals.progress,
        weekly_companies=_with_incomes(weekly, in_month, by_payment_date=True),
        monthly_companies=_with_incomes(monthly, in_month, by_payment_date=False),
    )
