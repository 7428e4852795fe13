"""Date manipulation utilities"""

from datetime import date
from typing import List
from dateutil.relativedelta import relativedelta
from wealth_gateway.domain.models import MonthKey


def month_range(start: MonthKey, end: MonthKey) -> List[MonthKey]:
    """Generate list of months from start to end (inclusive)"""
    months = []
    current = start
    while current <= end:
        months.append(current)
        current = current.next()
    return months


def elapsed_months(start: date, target: date) -> int:
    """
    Whole months from start's month to target's month, by calendar subtraction.

    Day of month is ignored: 2024-01-31 -> 2024-02-01 counts as one month.
    Returns 0 when target precedes start.
    """
    months = (target.year - start.year) * 12 + (target.month - start.month)
    return max(months, 0)


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of shorter months"""
    return from_date + relativedelta(months=months)


def add_years(from_date: date, years: int) -> date:
    """Add calendar years (Feb 29 lands on Feb 28 in non-leap years)"""
    return from_date + relativedelta(years=years)


def month_end(day: date) -> date:
    """Last day of day's month"""
    return day + relativedelta(day=31)
