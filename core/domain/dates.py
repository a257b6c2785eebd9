"""
Calendar arithmetic shared by the lifecycle engine and renewal operations.
"""
import calendar
from datetime import datetime, timedelta
from typing import Callable

Clock = Callable[[], datetime]


def add_years(moment: datetime, years: int) -> datetime:
    """
    Move an instant forward by whole calendar years.

    Month, day and time of day are kept. 29 February landing in a
    non-leap year rolls over to 1 March.

    Args:
        moment: Starting instant
        years: Number of years to add

    Returns:
        The shifted instant
    """
    target_year = moment.year + years
    if moment.month == 2 and moment.day == 29 and not calendar.isleap(target_year):
        return moment.replace(year=target_year, day=28) + timedelta(days=1)
    return moment.replace(year=target_year)


def add_months(moment: datetime, months: int) -> datetime:
    """
    Move an instant forward by calendar months, clamping to the last day.

    Args:
        moment: Starting instant
        months: Number of months to add

    Returns:
        The shifted instant
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def end_of_year(moment: datetime) -> datetime:
    """
    Return 23:59:59.999 on 31 December of the instant's year.

    Args:
        moment: Reference instant (its timezone is kept)

    Returns:
        Last millisecond of the year
    """
    return moment.replace(month=12, day=31, hour=23, minute=59, second=59, microsecond=999000)
