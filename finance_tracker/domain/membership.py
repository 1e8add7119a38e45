"""Which week periods overlap a month period"""

from datetime import timedelta
from typing import FrozenSet

from finance_tracker.domain.period import month_range, week_period_of
from finance_tracker.utils.date_utils import week_bounds


def weeks_overlapping(month: str) -> FrozenSet[str]:
    """
    Week ids whose Monday-Sunday span intersects the month, even partially.

    Walks week by week from the Monday on or before the 1st until a week
    starts after the last day of the month.
    """
    month_start, month_end = month_range(month)

    weeks = set()
    current, _ = week_bounds(month_start)
    while current <= month_end:
        week_end = current + timedelta(days=6)
        if week_end >= month_start:
            weeks.add(week_period_of(current))
        current += timedelta(weeks=1)

    return frozenset(weeks)
