"""
Refresh registered players' match history from OpenDota into PostgreSQL.

Players are reloaded one after another; a failure for one player is
recorded in its ReloadPlayerStat and never stops the others.
"""

from __future__ import annotations

import logging

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

import aiohttp
import asyncpg

from apps.match_ingestion.config import get_ingestion_config
from apps.match_ingestion.fetch.player_matches import fetch_player_matches
from apps.match_ingestion.load.player_matches import (
    insert_player_matches,
    query_existing_match_ids,
)
from apps.match_ingestion.transform.match_transformer import transform_player_matches
from libs.db.servers import Server, ServerPlayer, list_server_players
from libs.dota_data import get_hero_names

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReloadPlayerStat:
    """
    Outcome of reloading one player.

    inserted is None when OpenDota returned no matches at all (private or
    unknown profile); error is set when the reload failed.
    """

    player_id: int
    display_name: str
    inserted: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.inserted is not None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def is_empty(self) -> bool:
        return self.error is None and self.inserted is None


@dataclass(frozen=True)
class ReloadSummary:
    success_count: int
    failure_count: int
    removed_count: int

    @classmethod
    def from_stats(cls, stats: Iterable[ReloadPlayerStat]) -> "ReloadSummary":
        stats = list(stats)
        return cls(
            success_count=sum(1 for s in stats if s.succeeded),
            failure_count=sum(1 for s in stats if s.failed),
            removed_count=sum(1 for s in stats if s.is_empty),
        )


async def reload_player(
    pool: asyncpg.Pool,
    session: aiohttp.ClientSession,
    player: ServerPlayer,
    hero_names: Optional[Mapping[int, str]] = None,
) -> ReloadPlayerStat:
    """Fetch a player's history and insert matches not stored yet. Never raises."""
    hero_names = hero_names if hero_names is not None else get_hero_names()
    batch_size = get_ingestion_config().player_matches_batch_size
    logger.info(f"Reloading matches for player {player.player_id} ({player.display_name})")

    try:
        api_matches = await fetch_player_matches(session, player.player_id)
        if not api_matches:
            logger.info(
                f"No matches found on OpenDota for player {player.player_id} "
                f"(server {player.server_id}). Player may need to be removed."
            )
            return ReloadPlayerStat(player.player_id, player.display_name)

        async with pool.acquire() as conn:
            existing_ids = await query_existing_match_ids(conn, player.player_id)
            new_matches = [m for m in api_matches if m.get("match_id") not in existing_ids]
            transformed = transform_player_matches(new_matches, player.player_id, hero_names)
            inserted = await insert_player_matches(conn, transformed.records, batch_size)

        logger.info(
            f"Player {player.player_id}: {len(api_matches)} API matches, "
            f"{len(existing_ids)} already stored, {inserted} inserted, "
            f"{transformed.skipped_count} skipped, {transformed.error_count} malformed"
        )
        return ReloadPlayerStat(player.player_id, player.display_name, inserted=inserted)

    except Exception as e:
        logger.error(f"Failed to reload player {player.player_id}: {e}", exc_info=True)
        return ReloadPlayerStat(player.player_id, player.display_name, error=str(e) or type(e).__name__)


async def reload_all_players(
    pool: asyncpg.Pool,
    session: aiohttp.ClientSession,
    players: Iterable[ServerPlayer],
    hero_names: Optional[Mapping[int, str]] = None,
) -> List[ReloadPlayerStat]:
    stats = []
    for player in players:
        stats.append(await reload_player(pool, session, player, hero_names))
    return stats


async def reload_server(
    pool: asyncpg.Pool,
    server: Server,
    session: Optional[aiohttp.ClientSession] = None,
    hero_names: Optional[Mapping[int, str]] = None,
) -> List[ReloadPlayerStat]:
    """
    Reload every player registered on a server.

    Args:
        pool: Database pool
        server: Server whose players are reloaded
        session: Optional aiohttp session to reuse; one is created otherwise
        hero_names: Optional hero mapping; defaults to the bundled hero list

    Returns:
        One ReloadPlayerStat per registered player
    """
    logger.info(f"Reloading players for server {server.server_id} ({server.server_name})")
    players = await list_server_players(pool, server.server_id)
    if not players:
        logger.info(f"No players registered on server {server.server_id}, skipping reload")
        return []

    if session is None:
        async with aiohttp.ClientSession() as own_session:
            stats = await reload_all_players(pool, own_session, players, hero_names)
    else:
        stats = await reload_all_players(pool, session, players, hero_names)

    summary = ReloadSummary.from_stats(stats)
    logger.info(
        f"Completed reload for server {server.server_name}: "
        f"{summary.success_count} succeeded, {summary.failure_count} failed, "
        f"{summary.removed_count} without matches"
    )
    return stats


class ServerReloader:
    """Callable reload action for the scheduler, bound to a pool."""

    def __init__(self, pool: asyncpg.Pool, hero_names: Optional[Mapping[int, str]] = None) -> None:
        self.pool = pool
        self.hero_names = hero_names

    async def __call__(self, server: Server) -> List[ReloadPlayerStat]:
        return await reload_server(self.pool, server, hero_names=self.hero_names)
