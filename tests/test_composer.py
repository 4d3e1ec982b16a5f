"""Tests for apps.leaderboard_bot.leaderboard.composer."""

from __future__ import annotations

import pytest

from apps.leaderboard_bot.leaderboard.composer import (
    SingleMatchCategory,
    WinRateCategory,
    build_single_match_section,
    build_win_rate_section,
    compose,
    format_duration,
    format_percentage,
    format_section_date,
)
from apps.leaderboard_bot.leaderboard.stats_aggregator import aggregate
from libs.dota_data import LobbyType
from tests.fakes import make_match


def player_stats(player_id, name, results, start_time=1_000, **match_kwargs):
    """Aggregate one match per entry of results (True = victory)."""
    matches = [
        make_match(
            match_id=player_id * 100 + i,
            player_id=player_id,
            is_victory=won,
            start_time=start_time + i,
            **match_kwargs,
        )
        for i, won in enumerate(results)
    ]
    return aggregate(matches, player_id, name)


class TestFormatting:
    def test_duration_under_an_hour(self) -> None:
        assert format_duration(42 * 60 + 59) == "42m"

    def test_duration_with_hours(self) -> None:
        assert format_duration(3600 + 5 * 60) == "1h 05m"

    def test_percentage_is_right_aligned(self) -> None:
        assert format_percentage(5.0) == "  5%"
        assert format_percentage(100.0) == "100%"

    def test_section_date_is_utc(self) -> None:
        # 2024-03-29 00:30 UTC
        assert format_section_date(1_711_672_200) == "Fri, 29-Mar-24"


class TestWinRateSection:
    def test_ranked_by_win_rate(self) -> None:
        stats = [
            player_stats(1, "Alice", [True, False, True]),
            player_stats(2, "Bob", [True]),
        ]

        section = build_win_rate_section("Week", stats, WinRateCategory.OVERALL)

        assert section.title == "[Week] - 🏆 Gamer of the Week 🧙 - __*Bob*__ - 100% Overall Win Rate"
        rows = section.lines[1:]
        assert "Bob" in rows[0]
        assert "Alice" in rows[1]

    def test_ties_prefer_most_recent_player(self) -> None:
        stats = [
            player_stats(1, "Early", [True, False], start_time=1_000),
            player_stats(2, "Late", [False, True], start_time=5_000),
        ]

        section = build_win_rate_section("Week", stats, WinRateCategory.OVERALL)

        assert "Late" in section.lines[1]
        assert "Early" in section.lines[2]

    def test_ranked_needs_ranked_matches(self) -> None:
        stats = [
            player_stats(1, "Alice", [True], lobby_type=LobbyType.UNRANKED),
            player_stats(2, "Bob", [False], lobby_type=LobbyType.RANKED),
        ]

        section = build_win_rate_section("Week", stats, WinRateCategory.RANKED)

        assert len(section.lines) == 2
        assert "Bob" in section.lines[1]
        assert "Ranked Overlord" in section.title

    def test_no_ranked_players_gives_no_section(self) -> None:
        stats = [player_stats(1, "Alice", [True])]

        assert build_win_rate_section("Week", stats, WinRateCategory.RANKED) is None


class TestSingleMatchSection:
    def test_zero_values_excluded(self, hero_names) -> None:
        stats = [
            player_stats(1, "Alice", [True], kills=7),
            player_stats(2, "Bob", [True], kills=0),
        ]

        section = build_single_match_section("Week", stats, SingleMatchCategory.MOST_KILLS, hero_names)

        assert len(section.lines) == 2
        assert "Alice" in section.lines[1]
        assert section.title == "[Week] - 😈 1v9 Miracle Child ⚔️ - __*Alice*__ - 7 Kills (Anti-Mage)"

    def test_nobody_qualifies(self, hero_names) -> None:
        stats = [player_stats(1, "Alice", [True], deaths=0)]

        assert build_single_match_section("Week", stats, SingleMatchCategory.MOST_DEATHS, hero_names) is None

    def test_links_point_to_matches(self, hero_names) -> None:
        stats = [player_stats(3, "Carol", [False], assists=11)]

        section = build_single_match_section("Week", stats, SingleMatchCategory.MOST_ASSISTS, hero_names)

        assert "https://www.opendota.com/matches/300" in section.lines[1]
        assert "`Loss   `" in section.lines[1]

    def test_longest_match_formats_durations(self, hero_names) -> None:
        stats = [player_stats(1, "Alice", [True], duration=3900)]

        section = build_single_match_section("Month", stats, SingleMatchCategory.LONGEST_MATCH, hero_names)

        assert section.title.endswith("__*Alice*__ - Longest Match Duration - 1h 05m")
        assert "`Duration`" in section.lines[0]
        assert "1h 05m" in section.lines[1]


class TestCompose:
    def test_seven_slots_in_fixed_order(self, hero_names) -> None:
        stats = [
            player_stats(1, "Alice", [True, False], kills=3, deaths=2, assists=4, lobby_type=LobbyType.RANKED),
        ]

        slots = compose("Week", stats, hero_names)

        assert len(slots) == 7
        assert all(slot is not None for slot in slots)
        keywords = [
            "Gamer of the Week",
            "Ranked Overlord",
            "Filthiest Hero Spammer",
            "1v9 Miracle Child",
            "Support Award",
            "Head Chef",
            "Most Traumatised",
        ]
        for slot, keyword in zip(slots, keywords):
            assert keyword in slot.title

    def test_empty_stats_give_empty_slots(self, hero_names) -> None:
        assert compose("Week", [], hero_names) == [None] * 7

    def test_slots_vanish_independently(self, hero_names) -> None:
        stats = [player_stats(1, "Alice", [True], kills=1)]

        slots = compose("Day", stats, hero_names)

        assert slots[0] is not None
        assert slots[1] is None  # no ranked matches
        assert slots[3] is not None
        assert slots[4] is None  # no assists
        assert slots[5] is None  # no deaths

    def test_hero_spam_title(self, hero_names) -> None:
        stats = [player_stats(1, "Alice", [True, True], hero_id=2)]

        slots = compose("Week", stats, hero_names)

        assert slots[2].title == "[Week] - 🐸 Filthiest Hero Spammer 🤢 - __*Alice*__ - 100% Hero Pick Rate (Axe)"

    @pytest.mark.parametrize("label", ["Day", "Week", "Month", "Year", "All Time"])
    def test_titles_carry_duration_label(self, hero_names, label) -> None:
        stats = [player_stats(1, "Alice", [True])]

        for slot in compose(label, stats, hero_names):
            if slot is not None:
                assert slot.title.startswith(f"[{label}] - ")
