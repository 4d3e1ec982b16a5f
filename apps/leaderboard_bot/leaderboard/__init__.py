"""
Leaderboard engine: aggregation, category composition and table rendering.
"""

from apps.leaderboard_bot.leaderboard.composer import compose
from apps.leaderboard_bot.leaderboard.duration import Duration
from apps.leaderboard_bot.leaderboard.models import (
    EmptyInputError,
    HeroPickStat,
    PlayerStats,
    Section,
    SingleMatchStat,
    WinStats,
)
from apps.leaderboard_bot.leaderboard.pipeline import LeaderboardPublisher
from apps.leaderboard_bot.leaderboard.stats_aggregator import aggregate
from apps.leaderboard_bot.leaderboard.table_renderer import (
    TableBuilder,
    batch_messages,
    render_section,
    section_to_message,
)

__all__ = [
    'compose',
    'Duration',
    'EmptyInputError',
    'HeroPickStat',
    'PlayerStats',
    'Section',
    'SingleMatchStat',
    'WinStats',
    'LeaderboardPublisher',
    'aggregate',
    'TableBuilder',
    'batch_messages',
    'render_section',
    'section_to_message',
]
