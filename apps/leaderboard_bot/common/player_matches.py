"""
Stored player matches as the leaderboard's match source.
"""

from __future__ import annotations

from typing import List

import asyncpg

from libs.dota_data import Faction, GameMode, LobbyType, MatchRecord


def row_to_record(row: asyncpg.Record) -> MatchRecord:
    return MatchRecord(
        match_id=row["match_id"],
        player_id=row["player_id"],
        hero_id=row["hero_id"],
        kills=row["kills"],
        deaths=row["deaths"],
        assists=row["assists"],
        duration=row["duration"],
        start_time=row["start_time"],
        lobby_type=LobbyType(row["lobby_type"]),
        is_victory=row["is_victory"],
        game_mode=GameMode(row["game_mode"]),
        faction=Faction(row["faction"]),
        party_size=row["party_size"],
        rank=row["rank"],
    )


class DatabaseMatchSource:
    """Reads a player's matches in a time range, oldest first."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def fetch(self, player_id: int, start_time: int, end_time: int) -> List[MatchRecord]:
        rows = await self.pool.fetch(
            """
            SELECT match_id, player_id, hero_id, kills, deaths, assists, rank, party_size,
                   faction, is_victory, start_time, duration, game_mode, lobby_type
            FROM dotaboard.player_matches
            WHERE player_id = $1 AND start_time >= $2 AND start_time <= $3
            ORDER BY start_time, match_id
            """,
            player_id,
            start_time,
            end_time,
        )
        return [row_to_record(row) for row in rows]
