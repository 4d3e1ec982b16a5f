"""
Single-pass aggregation of a player's matches into PlayerStats.

Input order matters: when two matches share the best value for a stat,
the later one in the sequence wins. Match sources return matches in
chronological order, so ties resolve to the most recent match.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Sequence

from apps.leaderboard_bot.leaderboard.models import (
    EmptyInputError,
    HeroPickStat,
    PlayerStats,
    SingleMatchStat,
    WinStats,
)
from libs.dota_data import MatchRecord


@dataclass
class _Tracker:
    """Running total of one stat and the match currently holding the best value."""

    selector: Callable[[MatchRecord], int]
    total: int = 0
    best: MatchRecord | None = field(default=None)

    def update(self, match: MatchRecord) -> None:
        value = self.selector(match)
        self.total += value
        if self.best is None or value >= self.selector(self.best):
            self.best = match

    def result(self, match_count: int) -> SingleMatchStat:
        best = self.best
        return SingleMatchStat(
            total=self.total,
            value=self.selector(best),
            average=self.total / match_count,
            match_id=best.match_id,
            date=best.start_time,
            hero_id=best.hero_id,
            is_victory=best.is_victory,
        )


def aggregate(matches: Sequence[MatchRecord], player_id: int, player_name: str) -> PlayerStats:
    """
    Summarise one player's matches.

    Args:
        matches: The player's matches in chronological order
        player_id: OpenDota account id
        player_name: Display name shown on the leaderboard

    Returns:
        PlayerStats for the given matches

    Raises:
        EmptyInputError: If matches is empty
    """
    if not matches:
        raise EmptyInputError(f"No matches to aggregate for player {player_id}")

    total = wins = ranked_total = ranked_wins = 0
    hero_counts: Dict[int, list[int]] = {}  # hero_id -> [matches, wins]
    kills = _Tracker(lambda m: m.kills)
    assists = _Tracker(lambda m: m.assists)
    deaths = _Tracker(lambda m: m.deaths)
    duration = _Tracker(lambda m: m.duration)
    most_recent = matches[0].start_time

    for match in matches:
        total += 1
        if match.is_victory:
            wins += 1
        if match.is_ranked:
            ranked_total += 1
            if match.is_victory:
                ranked_wins += 1

        counts = hero_counts.setdefault(match.hero_id, [0, 0])
        counts[0] += 1
        if match.is_victory:
            counts[1] += 1

        kills.update(match)
        assists.update(match)
        deaths.update(match)
        duration.update(match)

        most_recent = max(most_recent, match.start_time)

    hero_picks = tuple(
        HeroPickStat(hero_id=hero_id, matches=c[0], wins=c[1])
        for hero_id, c in hero_counts.items()
    )
    # max() keeps the first maximal element, so ties go to the first hero seen
    hero_pick = max(hero_picks, key=lambda h: h.matches)

    return PlayerStats(
        player_id=player_id,
        player_name=player_name,
        overall=WinStats(total_matches=total, wins=wins),
        ranked=WinStats(total_matches=ranked_total, wins=ranked_wins),
        hero_pick=hero_pick,
        most_kills=kills.result(total),
        most_assists=assists.result(total),
        most_deaths=deaths.result(total),
        longest_match=duration.result(total),
        most_recent_match_time=most_recent,
        hero_picks=hero_picks,
    )
