"""
Trigger policies: decide from the clock and the last recorded event whether an action is due.

Policies are pure. The last event time comes from the event ledger and is
the only state they depend on, so re-evaluating a policy after it fired for
a period does not fire it again.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from apps.leaderboard_bot.bot_config import SchedulerConfig
from apps.leaderboard_bot.common.constants import (
    MONTHLY_MIN_ELAPSED_SECONDS,
    WEEKLY_MIN_ELAPSED_SECONDS,
)
from apps.leaderboard_bot.scheduler.calendar import is_in_hour_window, is_nth_weekday
from libs.db.schedule_events import EventType
from libs.db.servers import Server


@dataclass(frozen=True)
class EntitySchedule:
    """A server's effective schedule: its own overrides over the process defaults."""

    reload_start_hour: int
    reload_end_hour: int
    reload_interval_minutes: int
    weekly_day: Optional[int]
    weekly_hour: Optional[int]
    monthly_week: Optional[int]
    monthly_weekday: Optional[int]
    monthly_hour: Optional[int]

    @classmethod
    def resolve(cls, server: Server, config: SchedulerConfig) -> "EntitySchedule":
        def pick(override: Optional[int], default: Optional[int]) -> Optional[int]:
            return override if override is not None else default

        return cls(
            reload_start_hour=config.reload_start_hour,
            reload_end_hour=config.reload_end_hour,
            reload_interval_minutes=config.reload_interval_minutes,
            weekly_day=pick(server.weekly_day, config.weekly_day),
            weekly_hour=pick(server.weekly_hour, config.weekly_hour),
            monthly_week=pick(server.monthly_week, config.monthly_week),
            monthly_weekday=pick(server.monthly_weekday, config.monthly_weekday),
            monthly_hour=pick(server.monthly_hour, config.monthly_hour),
        )


def _elapsed_at_least(now: datetime, last_event_time: Optional[int], seconds: int) -> bool:
    if last_event_time is None:
        return True
    return int(now.timestamp()) - last_event_time >= seconds


class ReloadPolicy:
    event_type = EventType.RELOAD

    def is_enabled(self, server: Server) -> bool:
        return server.is_sub_reload

    def is_due(self, schedule: EntitySchedule, now: datetime, last_event_time: Optional[int]) -> bool:
        if not is_in_hour_window(now.hour, schedule.reload_start_hour, schedule.reload_end_hour):
            return False
        return _elapsed_at_least(now, last_event_time, schedule.reload_interval_minutes * 60)


class WeeklyPolicy:
    event_type = EventType.LEADERBOARD_WEEK

    def is_enabled(self, server: Server) -> bool:
        return server.is_sub_week

    def is_due(self, schedule: EntitySchedule, now: datetime, last_event_time: Optional[int]) -> bool:
        if schedule.weekly_day is None or schedule.weekly_hour is None:
            return False
        if now.isoweekday() != schedule.weekly_day or now.hour != schedule.weekly_hour:
            return False
        return _elapsed_at_least(now, last_event_time, WEEKLY_MIN_ELAPSED_SECONDS)


class MonthlyPolicy:
    event_type = EventType.LEADERBOARD_MONTH

    def is_enabled(self, server: Server) -> bool:
        return server.is_sub_month

    def is_due(self, schedule: EntitySchedule, now: datetime, last_event_time: Optional[int]) -> bool:
        if None in (schedule.monthly_week, schedule.monthly_weekday, schedule.monthly_hour):
            return False
        if now.hour != schedule.monthly_hour:
            return False
        if not is_nth_weekday(now.date(), schedule.monthly_week, schedule.monthly_weekday):
            return False
        return _elapsed_at_least(now, last_event_time, MONTHLY_MIN_ELAPSED_SECONDS)


POLICIES = (ReloadPolicy(), WeeklyPolicy(), MonthlyPolicy())
