"""Tests for apps.leaderboard_bot.leaderboard.stats_aggregator."""

from __future__ import annotations

import pytest

from apps.leaderboard_bot.leaderboard.models import EmptyInputError, WinStats
from apps.leaderboard_bot.leaderboard.stats_aggregator import aggregate
from libs.dota_data import LobbyType
from tests.fakes import make_match


class TestAggregate:
    def test_empty_input_raises(self) -> None:
        with pytest.raises(EmptyInputError):
            aggregate([], 42, "Alice")

    def test_empty_input_error_is_value_error(self) -> None:
        assert issubclass(EmptyInputError, ValueError)

    def test_most_kills_tie_goes_to_later_match(self) -> None:
        matches = [
            make_match(match_id=1, kills=5, start_time=100),
            make_match(match_id=2, kills=5, start_time=200),
            make_match(match_id=3, kills=3, start_time=300),
        ]

        stats = aggregate(matches, 42, "Alice")

        assert stats.most_kills.match_id == 2
        assert stats.most_kills.value == 5
        assert stats.most_kills.total == 13
        assert stats.most_kills.average == pytest.approx(13 / 3)
        assert stats.most_kills.date == 200

    def test_leading_match_carries_hero_and_outcome(self) -> None:
        matches = [
            make_match(match_id=1, assists=4, hero_id=1, is_victory=False),
            make_match(match_id=2, assists=20, hero_id=3, is_victory=True),
        ]

        stats = aggregate(matches, 42, "Alice")

        assert stats.most_assists.hero_id == 3
        assert stats.most_assists.is_victory is True

    def test_longest_match_uses_duration(self) -> None:
        matches = [
            make_match(match_id=1, duration=1500),
            make_match(match_id=2, duration=4000),
        ]

        stats = aggregate(matches, 42, "Alice")

        assert stats.longest_match.match_id == 2
        assert stats.longest_match.value == 4000
        assert stats.longest_match.total == 5500

    def test_win_counts(self) -> None:
        matches = [
            make_match(match_id=1, is_victory=True, lobby_type=LobbyType.RANKED),
            make_match(match_id=2, is_victory=False, lobby_type=LobbyType.RANKED_SOLO),
            make_match(match_id=3, is_victory=True, lobby_type=LobbyType.UNRANKED),
        ]

        stats = aggregate(matches, 42, "Alice")

        assert stats.overall == WinStats(total_matches=3, wins=2)
        assert stats.ranked == WinStats(total_matches=2, wins=1)
        assert stats.ranked.win_rate == pytest.approx(50.0)

    def test_no_ranked_matches(self) -> None:
        stats = aggregate([make_match(is_victory=True)], 42, "Alice")

        assert stats.ranked.total_matches == 0
        assert stats.ranked.win_rate == 0.0

    def test_hero_pick_counts_sum_to_total(self) -> None:
        matches = [
            make_match(match_id=i, hero_id=hero)
            for i, hero in enumerate([1, 2, 2, 3, 2, 1], start=1)
        ]

        stats = aggregate(matches, 42, "Alice")

        assert sum(h.matches for h in stats.hero_picks) == stats.overall.total_matches
        assert stats.hero_pick.hero_id == 2
        assert stats.hero_pick.matches == 3
        assert stats.hero_pick_rate == pytest.approx(50.0)
        assert [h.hero_id for h in stats.hero_picks] == [1, 2, 3]
        assert isinstance(stats.hero_picks, tuple)

    def test_hero_pick_tie_goes_to_first_hero_seen(self) -> None:
        matches = [
            make_match(match_id=1, hero_id=3),
            make_match(match_id=2, hero_id=1),
            make_match(match_id=3, hero_id=1),
            make_match(match_id=4, hero_id=3),
        ]

        stats = aggregate(matches, 42, "Alice")

        assert stats.hero_pick.hero_id == 3

    def test_hero_pick_wins(self) -> None:
        matches = [
            make_match(match_id=1, hero_id=2, is_victory=True),
            make_match(match_id=2, hero_id=2, is_victory=False),
        ]

        stats = aggregate(matches, 42, "Alice")

        assert stats.hero_pick.wins == 1

    def test_most_recent_match_time(self) -> None:
        matches = [
            make_match(match_id=1, start_time=500),
            make_match(match_id=2, start_time=900),
            make_match(match_id=3, start_time=700),
        ]

        assert aggregate(matches, 42, "Alice").most_recent_match_time == 900

    def test_identity_passed_through(self) -> None:
        stats = aggregate([make_match()], 77, "Carol")

        assert stats.player_id == 77
        assert stats.player_name == "Carol"

    def test_all_zero_stat_still_has_leader(self) -> None:
        stats = aggregate([make_match(match_id=1), make_match(match_id=2)], 42, "Alice")

        assert stats.most_deaths.value == 0
        assert stats.most_deaths.match_id == 2
