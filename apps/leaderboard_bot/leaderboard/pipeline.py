"""
Leaderboard pipeline for one server: fetch -> aggregate -> compose -> render -> batch.
"""

from __future__ import annotations

import logging

from datetime import datetime
from typing import List, Mapping, Optional, Protocol, Sequence

from apps.leaderboard_bot.common.constants import DISCORD_MESSAGE_MAX_LENGTH
from apps.leaderboard_bot.leaderboard.composer import compose
from apps.leaderboard_bot.leaderboard.duration import Duration
from apps.leaderboard_bot.leaderboard.models import EmptyInputError, PlayerStats
from apps.leaderboard_bot.leaderboard.stats_aggregator import aggregate
from apps.leaderboard_bot.leaderboard.table_renderer import batch_messages, section_to_message
from libs.db.servers import Server, ServerPlayer
from libs.dota_data import MatchRecord

logger = logging.getLogger(__name__)


class MatchRecordSource(Protocol):
    async def fetch(self, player_id: int, start_time: int, end_time: int) -> List[MatchRecord]:
        ...


class PlayerDirectory(Protocol):
    async def list_server_players(self, server_id: int) -> List[ServerPlayer]:
        ...


class LeaderboardPublisher:
    """Builds the message batches of a server's leaderboard for a period."""

    def __init__(
        self,
        source: MatchRecordSource,
        players: PlayerDirectory,
        max_message_length: int = DISCORD_MESSAGE_MAX_LENGTH,
        hero_names: Optional[Mapping[int, str]] = None,
    ) -> None:
        self.source = source
        self.players = players
        self.max_message_length = max_message_length
        self.hero_names = hero_names

    async def collect_stats(
        self,
        players: Sequence[ServerPlayer],
        start: datetime,
        end: datetime,
    ) -> List[PlayerStats]:
        """
        Aggregate every player's matches in [start, end].

        A player whose matches cannot be fetched is logged and left out; other
        players are unaffected. Players without matches contribute nothing.
        """
        start_ts, end_ts = int(start.timestamp()), int(end.timestamp())
        all_stats: List[PlayerStats] = []

        for player in players:
            try:
                matches = await self.source.fetch(player.player_id, start_ts, end_ts)
            except Exception as e:
                logger.error(f"Failed to fetch matches for player {player.player_id}: {e}", exc_info=True)
                continue

            try:
                all_stats.append(aggregate(matches, player.player_id, player.display_name))
            except EmptyInputError:
                logger.info(f"No matches found for player {player.player_id} between {start_ts} and {end_ts}")

        return all_stats

    def render(self, duration_label: str, all_stats: Sequence[PlayerStats]) -> List[str]:
        sections = compose(duration_label, all_stats, self.hero_names)
        contents = [section_to_message(section) for section in sections if section is not None]
        return batch_messages(contents, self.max_message_length)

    async def build_messages(self, server: Server, duration: Duration, now: datetime) -> List[str]:
        """
        Args:
            server: Server whose registered players are ranked
            duration: Look-back period ending at now
            now: End of the period (timezone aware)

        Returns:
            Message batches ready for delivery; empty when nobody played
        """
        players = await self.players.list_server_players(server.server_id)
        if not players:
            logger.info(f"No players registered on server {server.server_id}")
            return []

        all_stats = await self.collect_stats(players, duration.start_date(now), now)
        logger.info(
            f"Aggregated {len(all_stats)}/{len(players)} players for server {server.server_id} "
            f"({duration.label})"
        )
        return self.render(duration.label, all_stats)
