"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List, Tuple


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(day: date) -> Tuple[date, date]:
    """First and last calendar day of the month containing day"""
    start = day.replace(day=1)
    return start, start.replace(day=days_in_month(day.year, day.month))


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday and Sunday of the week containing day"""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length"""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, days_in_month(year, month)))


def clamp_day(year: int, month: int, day: int) -> int:
    """Clamp a configured day-of-month to the actual month length"""
    return min(day, days_in_month(year, month))
