"""
Registered servers and their players.
"""

from __future__ import annotations

import logging

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import asyncpg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Server:
    """A Discord server with its subscriptions and schedule overrides."""

    server_id: int
    server_name: str
    channel_id: Optional[int] = None
    is_sub_week: bool = False
    is_sub_month: bool = False
    is_sub_reload: bool = False
    weekly_day: Optional[int] = None
    weekly_hour: Optional[int] = None
    monthly_week: Optional[int] = None
    monthly_weekday: Optional[int] = None
    monthly_hour: Optional[int] = None


@dataclass(frozen=True)
class ServerPlayer:
    """A Dota player registered on a server."""

    server_id: int
    player_id: int
    player_name: Optional[str] = None
    discord_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.player_name or self.discord_name or str(self.player_id)


SERVER_COLUMNS = (
    "server_id, server_name, channel_id, is_sub_week, is_sub_month, is_sub_reload, "
    "weekly_day, weekly_hour, monthly_week, monthly_weekday, monthly_hour"
)


def _row_to_server(row: asyncpg.Record) -> Server:
    return Server(**dict(row))


async def list_servers(conn: asyncpg.Connection | asyncpg.Pool) -> List[Server]:
    """All registered servers, ordered by id."""
    rows = await conn.fetch(
        f"SELECT {SERVER_COLUMNS} FROM dotaboard.servers ORDER BY server_id"
    )
    return [_row_to_server(row) for row in rows]


async def get_server(conn: asyncpg.Connection | asyncpg.Pool, server_id: int) -> Optional[Server]:
    row = await conn.fetchrow(
        f"SELECT {SERVER_COLUMNS} FROM dotaboard.servers WHERE server_id = $1",
        server_id,
    )
    return _row_to_server(row) if row else None


async def list_server_players(
    conn: asyncpg.Connection | asyncpg.Pool,
    server_id: int,
) -> List[ServerPlayer]:
    """Players registered on a server, ordered by player id."""
    rows = await conn.fetch(
        """
        SELECT server_id, player_id, player_name, discord_name
        FROM dotaboard.player_servers
        WHERE server_id = $1
        ORDER BY player_id
        """,
        server_id,
    )
    return [ServerPlayer(**dict(row)) for row in rows]


class Subscription(Enum):
    """Per-server scheduler switches; the value is the servers column."""

    WEEK = "is_sub_week"
    MONTH = "is_sub_month"
    RELOAD = "is_sub_reload"

    def is_enabled(self, server: Server) -> bool:
        return getattr(server, self.value)


def _affected_one(status: str) -> bool:
    # asyncpg returns the command tag, e.g. "UPDATE 1" or "INSERT 0 1"
    return status.rsplit(" ", 1)[-1] == "1"


async def upsert_server(conn: asyncpg.Connection | asyncpg.Pool, server_id: int, server_name: str) -> bool:
    """
    Register a server, or refresh its name if it is already registered.

    Returns:
        True when the server was newly created
    """
    created = await conn.fetchval(
        """
        INSERT INTO dotaboard.servers (server_id, server_name)
        VALUES ($1, $2)
        ON CONFLICT (server_id) DO UPDATE SET server_name = EXCLUDED.server_name
        RETURNING (xmax = 0)
        """,
        server_id,
        server_name,
    )
    logger.info(f"{'Registered' if created else 'Refreshed'} server {server_id} ({server_name})")
    return bool(created)


async def set_channel(conn: asyncpg.Connection | asyncpg.Pool, server_id: int, channel_id: Optional[int]) -> bool:
    """Set the channel scheduled leaderboards are posted to. False if the server is unknown."""
    status = await conn.execute(
        "UPDATE dotaboard.servers SET channel_id = $2 WHERE server_id = $1",
        server_id,
        channel_id,
    )
    return _affected_one(status)


async def set_subscription(
    conn: asyncpg.Connection | asyncpg.Pool,
    server_id: int,
    subscription: Subscription,
    enabled: bool,
) -> bool:
    status = await conn.execute(
        f"UPDATE dotaboard.servers SET {subscription.value} = $2 WHERE server_id = $1",
        server_id,
        enabled,
    )
    return _affected_one(status)


async def add_player(
    conn: asyncpg.Connection | asyncpg.Pool,
    server_id: int,
    player_id: int,
    player_name: Optional[str] = None,
    discord_user_id: Optional[int] = None,
    discord_name: Optional[str] = None,
) -> bool:
    """Register a player on a server. False if the player is already registered there."""
    status = await conn.execute(
        """
        INSERT INTO dotaboard.player_servers (server_id, player_id, player_name, discord_user_id, discord_name)
        VALUES ($1, $2, $3, $4, $5)
        ON CONFLICT (server_id, player_id) DO NOTHING
        """,
        server_id,
        player_id,
        player_name,
        discord_user_id,
        discord_name,
    )
    return _affected_one(status)


async def remove_player(conn: asyncpg.Connection | asyncpg.Pool, server_id: int, player_id: int) -> bool:
    status = await conn.execute(
        "DELETE FROM dotaboard.player_servers WHERE server_id = $1 AND player_id = $2",
        server_id,
        player_id,
    )
    return _affected_one(status)


async def rename_player(
    conn: asyncpg.Connection | asyncpg.Pool,
    server_id: int,
    player_id: int,
    player_name: str,
) -> bool:
    status = await conn.execute(
        "UPDATE dotaboard.player_servers SET player_name = $3 WHERE server_id = $1 AND player_id = $2",
        server_id,
        player_id,
        player_name,
    )
    return _affected_one(status)


class ServerRepository:
    """Pool-backed access to servers and their players."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def list_servers(self) -> List[Server]:
        return await list_servers(self.pool)

    async def get_server(self, server_id: int) -> Optional[Server]:
        return await get_server(self.pool, server_id)

    async def list_server_players(self, server_id: int) -> List[ServerPlayer]:
        return await list_server_players(self.pool, server_id)

    async def upsert_server(self, server_id: int, server_name: str) -> bool:
        return await upsert_server(self.pool, server_id, server_name)

    async def set_channel(self, server_id: int, channel_id: Optional[int]) -> bool:
        return await set_channel(self.pool, server_id, channel_id)

    async def set_subscription(self, server_id: int, subscription: Subscription, enabled: bool) -> bool:
        return await set_subscription(self.pool, server_id, subscription, enabled)

    async def add_player(
        self,
        server_id: int,
        player_id: int,
        player_name: Optional[str] = None,
        discord_user_id: Optional[int] = None,
        discord_name: Optional[str] = None,
    ) -> bool:
        return await add_player(self.pool, server_id, player_id, player_name, discord_user_id, discord_name)

    async def remove_player(self, server_id: int, player_id: int) -> bool:
        return await remove_player(self.pool, server_id, player_id)

    async def rename_player(self, server_id: int, player_id: int, player_name: str) -> bool:
        return await rename_player(self.pool, server_id, player_id, player_name)
