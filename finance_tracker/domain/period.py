"""Period codec - month ("YYYY-MM") and week ("YYYY-Www") identifiers

Period strings are the persisted value of ``Income.period`` and must stay
byte-for-byte stable. Week ids use ISO week numbering (weeks start Monday,
year component is the ISO week-year).
"""

import calendar
import re
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple, Union

from finance_tracker.domain.exceptions import InvalidPeriod
from finance_tracker.utils.date_utils import add_months, month_bounds

WEEK_MARKER = "-W"

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")
_WEEK_RE = re.compile(r"^(\d{4})-W(\d{2})$")


def month_period_of(day: date) -> str:
    """Month id of the calendar month containing day"""
    return f"{day.year:04d}-{day.month:02d}"


def week_period_of(day: date) -> str:
    """ISO week id of the week containing day"""
    iso_year, iso_week, _ = day.isocalendar()
    return f"{iso_year:04d}-W{iso_week:02d}"


def is_week_period(period: str) -> bool:
    return WEEK_MARKER in period


def parse_month_period(period: str) -> date:
    """
    Return the first day of a month period.

    Raises:
        InvalidPeriod: If period is not "YYYY-MM" with a month in 1..12
    """
    match = _MONTH_RE.match(period or "")
    if not match:
        raise InvalidPeriod(period, "month")

    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidPeriod(period, "month")

    return date(year, month, 1)


def parse_week_period(period: str) -> date:
    """
    Return the Monday that begins week N of the given year.

    Computed as the Monday on or before January 1st plus (N - 1) weeks. This
    agrees with ISO-8601 whenever January 1st falls Monday-Thursday; in other
    years week 1 here starts one week before the ISO week 1.

    Raises:
        InvalidPeriod: If period is not "YYYY-Www" with a week in 1..53
    """
    match = _WEEK_RE.match(period or "")
    if not match:
        raise InvalidPeriod(period, "week")

    year, week = int(match.group(1)), int(match.group(2))
    if not 1 <= week <= 53:
        raise InvalidPeriod(period, "week")

    jan_first = date(year, 1, 1)
    first_monday = jan_first - timedelta(days=jan_first.weekday())
    return first_monday + timedelta(weeks=week - 1)


def month_range(period: str) -> Tuple[date, date]:
    """Inclusive [first day, last day] of a month period"""
    return month_bounds(parse_month_period(period))


def format_period_display(period: str) -> str:
    """"Week 03" for week ids, "January 2025" for month ids"""
    if is_week_period(period):
        parse_week_period(period)
        return f"Week {period.split(WEEK_MARKER)[1]}"

    start = parse_month_period(period)
    return f"{calendar.month_name[start.month]} {start.year}"


def format_month_short(period: str) -> str:
    """Three-letter month label used on trend charts"""
    return calendar.month_abbr[parse_month_period(period).month]


def navigate_month(period: str, direction: Union[str, int]) -> str:
    """
    Adjacent month id, rolling over year boundaries.

    direction is "next"/"prev" or +1/-1.
    """
    if direction in ("next", 1):
        step = 1
    elif direction in ("prev", -1):
        step = -1
    else:
        raise ValueError(f"Unknown direction: {direction!r}")

    return month_period_of(add_months(parse_month_period(period), step))


def _round_half_up(value: float, step: str = "1") -> Decimal:
    return Decimal(str(value)).quantize(Decimal(step), rounding=ROUND_HALF_UP)


def format_amount(amount: float, suffix: str = "đ", separator: str = ".") -> str:
    """Whole amount with thousands grouping and trailing currency marker; halves round away from zero"""
    grouped = f"{int(_round_half_up(amount)):,}".replace(",", separator)
    return f"{grouped}{suffix}"


def format_amount_short(amount: float) -> str:
    """Compact label: 1.5M, 250K, or the plain number below one thousand"""
    if amount >= 1_000_000:
        millions = str(_round_half_up(amount / 1_000_000, "0.1"))
        if millions.endswith(".0"):
            millions = millions[:-2]
        return f"{millions}M"
    if amount >= 1_000:
        return f"{_round_half_up(amount / 1_000)}K"
    return str(amount)
