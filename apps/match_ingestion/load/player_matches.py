"""Player match insertion operations."""

from __future__ import annotations

import logging

from typing import List, Sequence

import asyncpg

from libs.dota_data import MatchRecord

logger = logging.getLogger(__name__)

PLAYER_MATCH_COLUMNS = [
    "match_id", "player_id", "hero_id", "kills", "deaths", "assists",
    "rank", "party_size", "faction", "is_victory", "start_time",
    "duration", "game_mode", "lobby_type",
]


async def query_existing_match_ids(conn: asyncpg.Connection, player_id: int) -> set[int]:
    """Match ids already stored for a player."""
    rows = await conn.fetch(
        "SELECT match_id FROM dotaboard.player_matches WHERE player_id = $1",
        player_id,
    )
    return {row["match_id"] for row in rows}


def record_to_row(record: MatchRecord) -> tuple:
    return (
        record.match_id,
        record.player_id,
        record.hero_id,
        record.kills,
        record.deaths,
        record.assists,
        record.rank,
        record.party_size,
        record.faction.value,
        record.is_victory,
        record.start_time,
        record.duration,
        int(record.game_mode),
        int(record.lobby_type),
    )


async def insert_player_matches(
    conn: asyncpg.Connection,
    records: Sequence[MatchRecord],
    batch_size: int,
) -> int:
    """
    Insert match records, ignoring (match_id, player_id) pairs that already exist.

    All batches run inside one transaction so a failed reload leaves no partial history.

    Returns:
        Number of records sent for insertion
    """
    if not records:
        return 0

    columns_str = ", ".join(PLAYER_MATCH_COLUMNS)
    placeholders = ", ".join([f"${i+1}" for i in range(len(PLAYER_MATCH_COLUMNS))])
    insert_query = f"""
        INSERT INTO dotaboard.player_matches ({columns_str})
        VALUES ({placeholders})
        ON CONFLICT (match_id, player_id) DO NOTHING
    """

    inserted_count = 0
    async with conn.transaction():
        for i in range(0, len(records), batch_size):
            batch: List[MatchRecord] = list(records[i : i + batch_size])
            await conn.executemany(insert_query, [record_to_row(record) for record in batch])
            inserted_count += len(batch)
            logger.debug(f"Inserted batch {i//batch_size + 1} ({len(batch)} records)")

    return inserted_count
