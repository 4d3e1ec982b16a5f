"""
Aggregated per-player statistics and rendered leaderboard sections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


class EmptyInputError(ValueError):
    """Aggregation was asked to summarise a player with no matches."""


@dataclass(frozen=True)
class WinStats:
    total_matches: int = 0
    wins: int = 0

    @property
    def win_rate(self) -> float:
        """Win percentage in [0, 100]; 0 when no matches were played."""
        if self.total_matches == 0:
            return 0.0
        return self.wins / self.total_matches * 100


@dataclass(frozen=True)
class HeroPickStat:
    hero_id: int
    matches: int = 0
    wins: int = 0


@dataclass(frozen=True)
class SingleMatchStat:
    """
    The best single match for one stat, plus that stat's totals.

    value/match_id/date/hero_id/is_victory describe the leading match;
    total and average cover every considered match.
    """

    total: int
    value: int
    average: float
    match_id: int
    date: int  # unix seconds
    hero_id: int
    is_victory: bool


@dataclass(frozen=True)
class PlayerStats:
    player_id: int
    player_name: str
    overall: WinStats
    ranked: WinStats
    hero_pick: HeroPickStat
    most_kills: SingleMatchStat
    most_assists: SingleMatchStat
    most_deaths: SingleMatchStat
    longest_match: SingleMatchStat
    most_recent_match_time: int
    # one entry per hero played, in order of first appearance
    hero_picks: Tuple[HeroPickStat, ...] = field(default=(), compare=False)

    @property
    def hero_pick_rate(self) -> float:
        if self.overall.total_matches == 0:
            return 0.0
        return self.hero_pick.matches / self.overall.total_matches * 100


@dataclass(frozen=True)
class Section:
    """One leaderboard category: a title line and pre-formatted table lines."""

    title: str
    lines: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.lines


SectionSlot = Optional[Section]
