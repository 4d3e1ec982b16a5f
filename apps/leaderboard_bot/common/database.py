"""
Database connection pool management for the leaderboard bot.
"""

import logging

import asyncpg

from typing import Optional

from libs.db.database import create_db_pool

logger = logging.getLogger(__name__)

STATEMENT_TIMEOUT = "60s"

_db_pool: Optional[asyncpg.Pool] = None


async def _setup_connection(conn: asyncpg.Connection) -> None:
    await conn.execute(f"SET statement_timeout = '{STATEMENT_TIMEOUT}'")


async def get_db_pool() -> asyncpg.Pool:
    """
    Get or create the bot's shared pool.

    The bot both reads leaderboards and writes schedule events and reloaded
    matches, so one read-write pool serves every command and the scheduler.
    """
    global _db_pool

    if _db_pool is None:
        _db_pool = await create_db_pool(
            verbose=False,
            command_timeout=60,
            max_inactive_connection_lifetime=300,
            setup=_setup_connection,
        )
        logger.info("Created async database connection pool")

    return _db_pool


async def close_db_pool() -> None:
    """Close the database connection pool if open."""
    global _db_pool
    if _db_pool is not None:
        await _db_pool.close()
        _db_pool = None
        logger.info("Closed database connection pool")
