"""
Leaderboard look-back periods.
"""

from __future__ import annotations

import calendar

from datetime import datetime, timedelta, timezone
from enum import Enum

ALL_TIME_START = datetime(2010, 1, 1, tzinfo=timezone.utc)


def subtract_months(end: datetime, months: int) -> datetime:
    """Same time of day, `months` calendar months earlier; the day is clamped to the target month."""
    month_index = end.year * 12 + (end.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(end.day, calendar.monthrange(year, month)[1])
    return end.replace(year=year, month=month, day=day)


class Duration(Enum):
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"
    ALL_TIME = "All Time"

    @property
    def label(self) -> str:
        return self.value

    def start_date(self, end: datetime) -> datetime:
        if self is Duration.DAY:
            return end - timedelta(days=1)
        if self is Duration.WEEK:
            return end - timedelta(weeks=1)
        if self is Duration.MONTH:
            return subtract_months(end, 1)
        if self is Duration.YEAR:
            return subtract_months(end, 12)
        return ALL_TIME_START
