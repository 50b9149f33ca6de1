from __future__ import annotations

import calendar


def format_year_month(year: int, month: int) -> str:
    """
    Render a (year, month) pair the way the matrix tooltip shows it,
    zero-padding the month, e.g. '2017-06'.
    """
    return f"{int(year):04d}-{int(month):02d}"


def month_name(month: int) -> str:
    """
    Full English month name for 1-12. Raises ValueError outside that range
    instead of returning calendar's empty placeholder for 0.
    """
    if not 1 <= int(month) <= 12:
        raise ValueError(f"Month out of range: {month}")
    return calendar.month_name[int(month)]
