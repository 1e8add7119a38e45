"""Recurring-charge materializer - one expense per active subscription per month"""

from datetime import date
from typing import List, Optional, Sequence

from finance_tracker.domain.models import Expense, ExpenseDraft, Subscription
from finance_tracker.domain.period import month_period_of
from finance_tracker.utils.date_utils import clamp_day

AUTO_MARKER_PREFIX = "[Auto] "


def auto_marker(subscription_name: str) -> str:
    """Reserved raw_input value identifying a materialized charge"""
    return f"{AUTO_MARKER_PREFIX}{subscription_name}"


def effective_billing_day(subscription: Subscription, today: date) -> int:
    """Billing day clamped to the length of today's month (31 -> 28 in February)"""
    return clamp_day(today.year, today.month, subscription.billing_day)


def already_materialized(subscription: Subscription, expenses: Sequence[Expense], month: str) -> bool:
    marker = auto_marker(subscription.name)
    return any(e.raw_input == marker and month_period_of(e.date) == month for e in expenses)


def plan_recurring_charges(
    subscriptions: Sequence[Subscription],
    expenses: Sequence[Expense],
    today: date,
) -> List[ExpenseDraft]:
    """
    Expenses that must be created so each active subscription whose billing
    day has arrived has exactly one charge in today's month.

    The check is against the given snapshot only. Concurrent runs can plan the
    same charge twice; the store rejects the second insert through the unique
    (raw_input, billing_month) constraint.
    """
    month = month_period_of(today)

    drafts = []
    for subscription in subscriptions:
        if not subscription.is_active:
            continue

        billing_day = effective_billing_day(subscription, today)
        if today.day < billing_day:
            continue

        if already_materialized(subscription, expenses, month):
            continue

        drafts.append(
            ExpenseDraft(
                category=subscription.category,
                amount=subscription.amount,
                description=subscription.name,
                raw_input=auto_marker(subscription.name),
                date=date(today.year, today.month, billing_day),
                billing_month=month,
                subscription_id=subscription.id,
            )
        )

    return drafts


def billing_month_for(raw_input: str, day: date) -> Optional[str]:
    """Month a charge counts toward; None for expenses that are not materialized charges"""
    if raw_input.startswith(AUTO_MARKER_PREFIX):
        return month_period_of(day)
    return None
