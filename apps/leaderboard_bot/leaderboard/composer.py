"""
Turns aggregated PlayerStats into ranked leaderboard sections.

There is one slot per award category, always in the same order. A slot is
None when no player qualifies for that category.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Mapping, Optional, Sequence

from apps.leaderboard_bot.common.constants import (
    CATEGORY_EMOJIS,
    DEFEAT_LABEL,
    SECTION_DATE_FORMAT,
    VICTORY_LABEL,
)
from apps.leaderboard_bot.leaderboard.models import (
    PlayerStats,
    Section,
    SectionSlot,
    SingleMatchStat,
    WinStats,
)
from apps.leaderboard_bot.leaderboard.table_renderer import (
    LinkColumn,
    TableBuilder,
    TextColumn,
    match_url,
    player_url,
)
from libs.dota_data import get_hero_name, get_hero_names


class WinRateCategory(Enum):
    """Win rate awards: (emoji key, title, metric label, selector)."""

    OVERALL = ("overall_win_rate", "Gamer of the {label}", "Overall Win Rate", lambda s: s.overall)
    RANKED = ("ranked_win_rate", "Ranked Overlord", "Ranked Win Rate", lambda s: s.ranked)

    def __init__(self, key: str, title_text: str, metric_label: str, selector: Callable[[PlayerStats], WinStats]):
        self.key = key
        self.title_text = title_text
        self.metric_label = metric_label
        self.selector = selector


class SingleMatchCategory(Enum):
    """Best-single-match awards: (emoji key, title, stat name, selector)."""

    MOST_KILLS = ("most_kills", "1v9 Miracle Child", "Kills", lambda s: s.most_kills)
    MOST_ASSISTS = ("most_assists", "Support Award", "Assists", lambda s: s.most_assists)
    MOST_DEATHS = ("most_deaths", "Head Chef", "Deaths", lambda s: s.most_deaths)
    LONGEST_MATCH = ("longest_match", "Most Traumatised", "Longest Match Duration", lambda s: s.longest_match)

    def __init__(self, key: str, title_text: str, stat_name: str, selector: Callable[[PlayerStats], SingleMatchStat]):
        self.key = key
        self.title_text = title_text
        self.stat_name = stat_name
        self.selector = selector

    @property
    def is_duration(self) -> bool:
        return self is SingleMatchCategory.LONGEST_MATCH


def format_duration(seconds: int) -> str:
    """``1h 05m`` for an hour or more, otherwise ``42m``."""
    hours, remainder = divmod(int(seconds), 3600)
    minutes = remainder // 60
    if hours > 0:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def format_section_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(SECTION_DATE_FORMAT)


def format_percentage(value: float) -> str:
    return f"{value:>3.0f}%"


def _title(duration_label: str, key: str, title_text: str, winner_summary: str) -> str:
    left, right = CATEGORY_EMOJIS[key]
    return f"[{duration_label}] - {left} {title_text} {right} - {winner_summary}"


def build_win_rate_section(
    duration_label: str,
    stats: Sequence[PlayerStats],
    category: WinRateCategory,
) -> Optional[Section]:
    qualifying = [s for s in stats if category.selector(s).total_matches > 0]
    if not qualifying:
        return None

    ranked = sorted(
        qualifying,
        key=lambda s: (category.selector(s).win_rate, s.most_recent_match_time),
        reverse=True,
    )
    winner = ranked[0]
    title_text = category.title_text.format(label=duration_label)
    title = _title(
        duration_label,
        category.key,
        title_text,
        f"__*{winner.player_name}*__ - {category.selector(winner).win_rate:.0f}% {category.metric_label}",
    )

    return (
        TableBuilder(title)
        .add_column(LinkColumn([player_url(s.player_id) for s in ranked]))
        .add_column(TextColumn("Player", [s.player_name for s in ranked]))
        .add_column(TextColumn("Win%", [format_percentage(category.selector(s).win_rate) for s in ranked]))
        .add_column(TextColumn("Wins", [str(category.selector(s).wins) for s in ranked]))
        .add_column(TextColumn("Total", [str(category.selector(s).total_matches) for s in ranked]))
        .build()
    )


def build_hero_spam_section(
    duration_label: str,
    stats: Sequence[PlayerStats],
    hero_names: Mapping[int, str],
) -> Optional[Section]:
    qualifying = [s for s in stats if s.hero_pick.matches > 0 and s.overall.total_matches > 0]
    if not qualifying:
        return None

    ranked = sorted(
        qualifying,
        key=lambda s: (s.hero_pick_rate, s.most_recent_match_time),
        reverse=True,
    )
    winner = ranked[0]
    title = _title(
        duration_label,
        "hero_spam",
        "Filthiest Hero Spammer",
        f"__*{winner.player_name}*__ - {winner.hero_pick_rate:.0f}% Hero Pick Rate "
        f"({get_hero_name(winner.hero_pick.hero_id, hero_names)})",
    )

    return (
        TableBuilder(title)
        .add_column(LinkColumn([player_url(s.player_id) for s in ranked]))
        .add_column(TextColumn("Player", [s.player_name for s in ranked]))
        .add_column(TextColumn("Hero", [get_hero_name(s.hero_pick.hero_id, hero_names) for s in ranked]))
        .add_column(TextColumn("Count", [str(s.hero_pick.matches) for s in ranked]))
        .add_column(TextColumn("Matches", [str(s.overall.total_matches) for s in ranked]))
        .add_column(TextColumn("Pick%", [format_percentage(s.hero_pick_rate) for s in ranked]))
        .build()
    )


def build_single_match_section(
    duration_label: str,
    stats: Sequence[PlayerStats],
    category: SingleMatchCategory,
    hero_names: Mapping[int, str],
) -> Optional[Section]:
    select = category.selector
    qualifying = [s for s in stats if select(s).value > 0]
    if not qualifying:
        return None

    ranked = sorted(
        qualifying,
        key=lambda s: (select(s).value, select(s).date),
        reverse=True,
    )
    winner = ranked[0]
    winner_stat = select(winner)

    if category.is_duration:
        summary = f"__*{winner.player_name}*__ - {category.stat_name} - {format_duration(winner_stat.value)}"
        value_header = "Duration"
        value_of = lambda stat: format_duration(stat.value)
        average_of = lambda stat: format_duration(int(stat.average))
        total_of = lambda stat: format_duration(stat.total)
    else:
        summary = (
            f"__*{winner.player_name}*__ - {winner_stat.value} {category.stat_name} "
            f"({get_hero_name(winner_stat.hero_id, hero_names)})"
        )
        value_header = category.stat_name
        value_of = lambda stat: str(stat.value)
        average_of = lambda stat: f"{stat.average:.2f}"
        total_of = lambda stat: str(stat.total)

    title = _title(duration_label, category.key, category.title_text, summary)
    rows = [select(s) for s in ranked]

    return (
        TableBuilder(title)
        .add_column(LinkColumn([match_url(stat.match_id) for stat in rows]))
        .add_column(TextColumn("Player", [s.player_name for s in ranked]))
        .add_column(TextColumn(value_header, [value_of(stat) for stat in rows]))
        .add_column(TextColumn("Hero", [get_hero_name(stat.hero_id, hero_names) for stat in rows]))
        .add_column(TextColumn("Outcome", [VICTORY_LABEL if stat.is_victory else DEFEAT_LABEL for stat in rows]))
        .add_column(TextColumn("Average", [average_of(stat) for stat in rows]))
        .add_column(TextColumn("Total", [total_of(stat) for stat in rows]))
        .add_column(TextColumn("Date", [format_section_date(stat.date) for stat in rows]))
        .build()
    )


def compose(
    duration_label: str,
    stats: Sequence[PlayerStats],
    hero_names: Optional[Mapping[int, str]] = None,
) -> List[SectionSlot]:
    """
    Build every leaderboard category for one run.

    Args:
        duration_label: Period label shown in titles, e.g. "Week"
        stats: One PlayerStats per player with at least one match
        hero_names: Hero id to name mapping; defaults to the bundled hero list

    Returns:
        Seven slots in fixed order (overall win rate, ranked win rate, hero spam,
        kills, assists, deaths, longest match), None where nobody qualifies
    """
    hero_names = hero_names if hero_names is not None else get_hero_names()
    return [
        build_win_rate_section(duration_label, stats, WinRateCategory.OVERALL),
        build_win_rate_section(duration_label, stats, WinRateCategory.RANKED),
        build_hero_spam_section(duration_label, stats, hero_names),
        *(
            build_single_match_section(duration_label, stats, category, hero_names)
            for category in SingleMatchCategory
        ),
    ]
