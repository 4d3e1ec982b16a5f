"""
Container health check for the leaderboard bot.

Healthy means the bot finished on_ready (it marks itself ready by creating
READINESS_FILE and clears the mark on disconnect or shutdown) and PostgreSQL
answers a trivial query. Exits 0 if healthy, 1 otherwise.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from pathlib import Path

import asyncpg

from libs.db.database import get_db_connection

logger = logging.getLogger(__name__)

READINESS_FILE = Path(os.getenv("READINESS_FILE", "/tmp/leaderboard-bot-ready"))
PROBE_TIMEOUT_SECONDS = 5


def mark_ready(path: Path = READINESS_FILE) -> None:
    try:
        path.touch()
    except OSError as e:
        logger.warning(f"Could not create readiness file {path}: {e}")
        return
    logger.info("Bot is fully ready - healthcheck file created")


def mark_not_ready(path: Path = READINESS_FILE) -> None:
    path.unlink(missing_ok=True)


async def check_database() -> bool:
    try:
        conn = await get_db_connection(timeout=PROBE_TIMEOUT_SECONDS, verbose=False)
    except (ConnectionError, ValueError, asyncio.TimeoutError):
        return False

    try:
        return await conn.fetchval("SELECT 1") == 1
    except asyncpg.PostgresError:
        return False
    finally:
        await conn.close()


async def is_healthy(path: Path = READINESS_FILE) -> bool:
    if not path.is_file():
        return False
    return await check_database()


def main() -> int:
    return 0 if asyncio.run(is_healthy()) else 1


if __name__ == "__main__":
    sys.exit(main())
