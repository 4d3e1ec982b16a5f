"""Tests for the leaderboard pipeline and Discord delivery."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from apps.leaderboard_bot.leaderboard.duration import Duration
from apps.leaderboard_bot.leaderboard.pipeline import LeaderboardPublisher
from apps.leaderboard_bot.scheduler.delivery import DeliveryError, DiscordDelivery
from libs.db.servers import Server, ServerPlayer
from tests.fakes import at, make_match

NOW = at(2024, 3, 29, 18, 0)
IN_RANGE = int(at(2024, 3, 27, 12).timestamp())


class FakeSource:
    def __init__(self, matches_by_player, failing=()) -> None:
        self.matches_by_player = matches_by_player
        self.failing = set(failing)
        self.ranges = []

    async def fetch(self, player_id, start_time, end_time):
        self.ranges.append((player_id, start_time, end_time))
        if player_id in self.failing:
            raise ConnectionError("database down")
        return list(self.matches_by_player.get(player_id, []))


class FakePlayers:
    def __init__(self, players) -> None:
        self.players = players

    async def list_server_players(self, server_id):
        return list(self.players)


class TestLeaderboardPublisher:
    @pytest.mark.asyncio
    async def test_builds_batches_for_players(self, players, hero_names) -> None:
        source = FakeSource({
            42: [make_match(match_id=1, player_id=42, kills=9, is_victory=True, start_time=IN_RANGE)],
            43: [make_match(match_id=2, player_id=43, kills=4, start_time=IN_RANGE)],
        })
        publisher = LeaderboardPublisher(source, FakePlayers(players), hero_names=hero_names)

        batches = await publisher.build_messages(Server(1, "Alpha"), Duration.WEEK, NOW)

        text = "".join(batches)
        assert batches
        assert all(len(batch) <= 2000 for batch in batches)
        assert "### [Week] - 🏆 Gamer of the Week 🧙 - __*Alice*__" in text
        assert "bob#1" in text

    @pytest.mark.asyncio
    async def test_queries_the_duration_range(self, players, hero_names) -> None:
        source = FakeSource({})
        publisher = LeaderboardPublisher(source, FakePlayers(players), hero_names=hero_names)

        await publisher.build_messages(Server(1, "Alpha"), Duration.WEEK, NOW)

        expected = (int(at(2024, 3, 22, 18, 0).timestamp()), int(NOW.timestamp()))
        assert [r[1:] for r in source.ranges] == [expected, expected]

    @pytest.mark.asyncio
    async def test_nobody_played(self, players, hero_names) -> None:
        publisher = LeaderboardPublisher(FakeSource({}), FakePlayers(players), hero_names=hero_names)

        assert await publisher.build_messages(Server(1, "Alpha"), Duration.DAY, NOW) == []

    @pytest.mark.asyncio
    async def test_no_registered_players(self, hero_names) -> None:
        source = FakeSource({})
        publisher = LeaderboardPublisher(source, FakePlayers([]), hero_names=hero_names)

        assert await publisher.build_messages(Server(1, "Alpha"), Duration.WEEK, NOW) == []
        assert source.ranges == []

    @pytest.mark.asyncio
    async def test_fetch_failure_skips_only_that_player(self, players, hero_names) -> None:
        source = FakeSource(
            {43: [make_match(match_id=2, player_id=43, kills=4, start_time=IN_RANGE)]},
            failing=[42],
        )
        publisher = LeaderboardPublisher(source, FakePlayers(players), hero_names=hero_names)

        batches = await publisher.build_messages(Server(1, "Alpha"), Duration.WEEK, NOW)

        text = "".join(batches)
        assert "bob#1" in text
        assert "Alice" not in text

    @pytest.mark.asyncio
    async def test_respects_message_limit(self, hero_names) -> None:
        many = [ServerPlayer(1, 1000 + i, f"Player{i:02d}") for i in range(30)]
        source = FakeSource({
            p.player_id: [make_match(match_id=p.player_id, player_id=p.player_id, kills=3, deaths=1,
                                     assists=2, start_time=IN_RANGE)]
            for p in many
        })
        publisher = LeaderboardPublisher(source, FakePlayers(many), max_message_length=2000, hero_names=hero_names)

        batches = await publisher.build_messages(Server(1, "Alpha"), Duration.MONTH, NOW)

        assert len(batches) > 1
        assert all(batch.startswith("### ") for batch in batches)


class TestDiscordDelivery:
    @pytest.mark.asyncio
    async def test_sends_batches_in_order_without_embeds(self) -> None:
        channel = MagicMock(spec=discord.TextChannel)
        channel.send = AsyncMock()
        client = MagicMock()
        client.get_channel.return_value = channel

        await DiscordDelivery(client).deliver(Server(1, "Alpha", channel_id=100), ["one", "two"])

        client.get_channel.assert_called_once_with(100)
        assert [c.args[0] for c in channel.send.await_args_list] == ["one", "two"]
        assert all(c.kwargs == {"suppress_embeds": True} for c in channel.send.await_args_list)

    @pytest.mark.asyncio
    async def test_fetches_uncached_channel(self) -> None:
        channel = MagicMock(spec=discord.TextChannel)
        channel.send = AsyncMock()
        client = MagicMock()
        client.get_channel.return_value = None
        client.fetch_channel = AsyncMock(return_value=channel)

        await DiscordDelivery(client).deliver(Server(1, "Alpha", channel_id=100), ["one"])

        client.fetch_channel.assert_awaited_once_with(100)
        channel.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_channel_configuration(self) -> None:
        with pytest.raises(DeliveryError):
            await DiscordDelivery(MagicMock()).deliver(Server(1, "Alpha"), ["one"])

    @pytest.mark.asyncio
    async def test_non_messageable_channel(self) -> None:
        client = MagicMock()
        client.get_channel.return_value = MagicMock(spec=discord.CategoryChannel)

        with pytest.raises(DeliveryError):
            await DiscordDelivery(client).deliver(Server(1, "Alpha", channel_id=100), ["one"])
