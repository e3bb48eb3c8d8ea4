"""Date manipulation utilities"""

from datetime import date
from typing import List
from dateutil.relativedelta import relativedelta


def add_months(from_date: date, months: int) -> date:
    """Calendar-month arithmetic; day clamps to month end (Jan 31 + 1 -> Feb 28/29)"""
    return from_date + relativedelta(months=months)


def monthly_due_dates(start: date, count: int) -> List[date]:
    """Due dates for periods 1..count, each offset from start (no cumulative drift)"""
    return [add_months(start, i) for i in range(1, count + 1)]
