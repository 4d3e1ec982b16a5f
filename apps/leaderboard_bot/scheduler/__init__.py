"""
Scheduler module for the leaderboard bot.

Decides per server when a reload or a weekly/monthly leaderboard is due,
using the schedule_events ledger as its only state.
"""

from apps.leaderboard_bot.scheduler.calendar import (
    days_in_month,
    is_in_hour_window,
    is_nth_weekday,
)
from apps.leaderboard_bot.scheduler.clock import SchedulerClock, SchedulerContext
from apps.leaderboard_bot.scheduler.delivery import DeliveryError, DiscordDelivery
from apps.leaderboard_bot.scheduler.policies import (
    EntitySchedule,
    MonthlyPolicy,
    ReloadPolicy,
    WeeklyPolicy,
)

__all__ = [
    'days_in_month',
    'is_in_hour_window',
    'is_nth_weekday',
    'SchedulerClock',
    'SchedulerContext',
    'DeliveryError',
    'DiscordDelivery',
    'EntitySchedule',
    'MonthlyPolicy',
    'ReloadPolicy',
    'WeeklyPolicy',
]
