"""Aggregation engine - derived income/spending figures for a display period

All functions are pure: they read snapshot collections and return new values.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from finance_tracker.domain.membership import weeks_overlapping
from finance_tracker.domain.models import (
    CategoryShare,
    CategorySummary,
    Company,
    CompanyBreakdown,
    DashboardStats,
    Expense,
    ExpenseDay,
    Income,
    MonthComparison,
    MonthTotals,
    Snapshot,
    Subscription,
    SubscriptionSummary,
    TrendPoint,
)
from finance_tracker.domain.period import (
    format_month_short,
    is_week_period,
    month_period_of,
    month_range,
    navigate_month,
)
from finance_tracker.utils.date_utils import (
    add_months,
    days_in_month,
    generate_date_range,
    month_bounds,
    week_bounds,
)

SPENDING_VIEWS = ("day", "week", "month")


def income_in_month(income: Income, month: str, weeks: Optional[Iterable[str]] = None) -> bool:
    """
    Whether an income belongs to a month.

    An explicit payment date wins; otherwise a week period matches when that
    week overlaps the month, and a month period must match exactly.
    """
    if income.payment_date is not None:
        start, end = month_range(month)
        return start <= income.payment_date <= end

    if is_week_period(income.period):
        if weeks is None:
            weeks = weeks_overlapping(month)
        return income.period in weeks

    return income.period == month


def incomes_for_month(incomes: Sequence[Income], month: str) -> List[Income]:
    weeks = weeks_overlapping(month)
    return [i for i in incomes if income_in_month(i, month, weeks)]


def expected_total(companies: Sequence[Company], month: str) -> int:
    """Projected income: weekly companies scale by the weeks overlapping the month"""
    week_count = len(weeks_overlapping(month))
    total = 0
    for company in companies:
        amount = company.expected_amount or 0
        total += amount * week_count if company.payment_type == "weekly" else amount
    return total


def received_total(incomes: Sequence[Income], month: str) -> int:
    return sum(i.amount for i in incomes_for_month(incomes, month) if i.status == "received")


def recorded_total(incomes: Sequence[Income], month: str) -> int:
    """All incomes in the month regardless of status"""
    return sum(i.amount for i in incomes_for_month(incomes, month))


def progress_percentage(received: float, expected: float) -> float:
    return (received / expected) * 100 if expected > 0 else 0.0


def month_totals(companies: Sequence[Company], incomes: Sequence[Income], month: str) -> MonthTotals:
    expected = expected_total(companies, month)
    received = received_total(incomes, month)
    return MonthTotals(expected=expected, received=received, progress=progress_percentage(received, expected))


def compare_with_previous_month(
    companies: Sequence[Company],
    incomes: Sequence[Income],
    month: str,
) -> Optional[MonthComparison]:
    """
    Current month's expected income against the previous month's recorded
    income. None when the previous month recorded nothing.
    """
    previous_total = recorded_total(incomes, navigate_month(month, "prev"))
    if previous_total == 0:
        return None

    diff = expected_total(companies, month) - previous_total
    return MonthComparison(
        diff=diff,
        percentage=round(diff / previous_total * 100, 1),
        is_positive=diff >= 0,
    )


def income_trend(incomes: Sequence[Income], month: str, months: int = 6) -> List[TrendPoint]:
    """Recorded income for the given month and the months before it, oldest first"""
    anchor = month_range(month)[0]
    points = []
    for offset in range(months - 1, -1, -1):
        period = month_period_of(add_months(anchor, -offset))
        points.append(
            TrendPoint(
                month=period,
                label=format_month_short(period),
                amount=recorded_total(incomes, period),
                is_current=period == month,
            )
        )
    return points


def company_breakdown(
    companies: Sequence[Company],
    incomes: Sequence[Income],
    month: str,
) -> List[CompanyBreakdown]:
    """Per-company totals for the month, skipping companies with nothing recorded"""
    in_month = incomes_for_month(incomes, month)

    breakdown = []
    for company in companies:
        own = [i for i in in_month if i.company_id == company.id]
        total = sum(i.amount for i in own)
        if total == 0:
            continue
        received = sum(i.amount for i in own if i.status == "received")
        breakdown.append(CompanyBreakdown(company=company, total=total, received=received, pending=total - received))

    return breakdown


def expenses_in_range(expenses: Sequence[Expense], start: date, end: date) -> List[Expense]:
    return [e for e in expenses if start <= e.date <= end]


def spending_total(expenses: Sequence[Expense], start: date, end: date) -> int:
    return sum(e.amount for e in expenses_in_range(expenses, start, end))


def summarize_categories(expenses: Sequence[Expense]) -> CategorySummary:
    """Totals per category with share of the overall total, largest first"""
    totals: Dict[str, int] = defaultdict(int)
    for expense in expenses:
        totals[expense.category] += expense.amount

    total = sum(totals.values())
    categories = [
        CategoryShare(category=category, amount=amount, percentage=progress_percentage(amount, total))
        for category, amount in totals.items()
    ]
    categories.sort(key=lambda c: c.amount, reverse=True)

    return CategorySummary(categories=categories, total=total)


def spend_by_category(expenses: Sequence[Expense], start: date, end: date) -> CategorySummary:
    return summarize_categories(expenses_in_range(expenses, start, end))


def net_savings(incomes: Sequence[Income], expenses: Sequence[Expense], month: str) -> int:
    start, end = month_range(month)
    return received_total(incomes, month) - spending_total(expenses, start, end)


def upcoming_charges(
    subscriptions: Sequence[Subscription],
    today: date,
    window_days: int = 7,
    limit: int = 5,
) -> List[Subscription]:
    """
    Active subscriptions billing within the next window_days, today included.

    Only billing days in the current month count: the window is walked as
    real calendar dates, so days spilling into next month never match a
    small billing day of this month.
    """
    month_length = days_in_month(today.year, today.month)
    window = generate_date_range(today, today + timedelta(days=window_days - 1))
    window_days_of_month = {d.day for d in window if d.month == today.month}

    upcoming = []
    for subscription in subscriptions:
        if not subscription.is_active:
            continue
        effective_day = min(subscription.billing_day, month_length)
        if effective_day in window_days_of_month and effective_day >= today.day:
            upcoming.append((effective_day, subscription))

    upcoming.sort(key=lambda pair: (pair[0], pair[1].billing_day))
    return [subscription for _, subscription in upcoming[:limit]]


def summarize_subscriptions(subscriptions: Sequence[Subscription]) -> SubscriptionSummary:
    """Group by category and total the active monthly cost"""
    groups: Dict[str, List[Subscription]] = {}
    for subscription in subscriptions:
        groups.setdefault(subscription.category, []).append(subscription)

    active = [s for s in subscriptions if s.is_active]
    return SubscriptionSummary(
        groups=groups,
        total_monthly=sum(s.amount for s in active),
        active_count=len(active),
    )


def view_range(view: str, day: date) -> Tuple[date, date]:
    """Inclusive date range shown by the spending view around day"""
    if view == "day":
        return day, day
    if view == "week":
        return week_bounds(day)
    if view == "month":
        return month_bounds(day)
    raise ValueError(f"Unknown spending view: {view!r}")


def group_expenses_by_day(expenses: Sequence[Expense]) -> List[ExpenseDay]:
    """Newest day first; within a day, most recently created first"""
    by_day: Dict[date, List[Expense]] = defaultdict(list)
    for expense in expenses:
        by_day[expense.date].append(expense)

    return [
        ExpenseDay(
            date=day,
            expenses=sorted(by_day[day], key=lambda e: (e.created_at is not None, e.created_at), reverse=True),
        )
        for day in sorted(by_day, reverse=True)
    ]


def build_dashboard(
    snapshot: Snapshot,
    today: date,
    trend_months: int = 6,
    upcoming_window_days: int = 7,
    upcoming_limit: int = 5,
) -> DashboardStats:
    """
    Compute every dashboard figure for the month containing today.

    Figures:
    - expected/received/progress for the month
    - spending and net savings over the month's calendar range
    - expected-vs-previous-recorded comparison
    - recorded income trend
    - company breakdown and category split
    - active subscription cost and upcoming charges
    """
    month = month_period_of(today)
    start, end = month_range(month)

    totals = month_totals(snapshot.companies, snapshot.incomes, month)
    spending = spending_total(snapshot.expenses, start, end)
    subscriptions = summarize_subscriptions(snapshot.subscriptions)

    return DashboardStats(
        month=month,
        expected=totals.expected,
        received=totals.received,
        spending=spending,
        progress=totals.progress,
        net_savings=totals.received - spending,
        comparison=compare_with_previous_month(snapshot.companies, snapshot.incomes, month),
        trend=income_trend(snapshot.incomes, month, trend_months),
        companies=company_breakdown(snapshot.companies, snapshot.incomes, month),
        categories=spend_by_category(snapshot.expenses, start, end),
        subscription_total=subscriptions.total_monthly,
        subscription_count=subscriptions.active_count,
        upcoming=upcoming_charges(snapshot.subscriptions, today, upcoming_window_days, upcoming_limit),
    )
