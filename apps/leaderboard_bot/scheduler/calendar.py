"""
Calendar arithmetic for schedule policies.

Weekdays use ISO numbering: 1 = Monday ... 7 = Sunday.
"""

from __future__ import annotations

import calendar

from datetime import date

from apps.leaderboard_bot.common.constants import LAST_WEEK_OF_MONTH


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_nth_weekday(day: date, week: int, weekday: int) -> bool:
    """
    Whether `day` is the `week`-th occurrence of `weekday` in its month.

    Args:
        day: Date to test
        week: 1-4 for the first to fourth occurrence, 5 for the last one
        weekday: ISO weekday (1 = Monday, 7 = Sunday)
    """
    if day.isoweekday() != weekday:
        return False
    if week == LAST_WEEK_OF_MONTH:
        return days_in_month(day.year, day.month) - day.day < 7
    if 1 <= week <= 4:
        return (day.day - 1) // 7 + 1 == week
    return False


def is_in_hour_window(hour: int, start: int, end: int) -> bool:
    """Whether hour is in [start, end). start > end wraps past midnight; start == end is an empty window."""
    if start < end:
        return start <= hour < end
    if start > end:
        return hour >= start or hour < end
    return False
