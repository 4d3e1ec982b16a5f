"""
Wiring of the bot's long-lived collaborators.
"""

from __future__ import annotations

import logging

from dataclasses import dataclass

import asyncpg
import discord

from apps.leaderboard_bot.bot_config import SchedulerConfig, get_scheduler_config
from apps.leaderboard_bot.common.database import get_db_pool
from apps.leaderboard_bot.common.player_matches import DatabaseMatchSource
from apps.leaderboard_bot.leaderboard.pipeline import LeaderboardPublisher
from apps.leaderboard_bot.scheduler.clock import SchedulerClock, SchedulerContext
from apps.leaderboard_bot.scheduler.delivery import DiscordDelivery
from apps.match_ingestion.reload import ServerReloader
from libs.db.schedule_events import EventLedger
from libs.db.servers import ServerRepository
from libs.dota_data import get_hero_names

logger = logging.getLogger(__name__)


@dataclass
class BotRuntime:
    pool: asyncpg.Pool
    config: SchedulerConfig
    servers: ServerRepository
    ledger: EventLedger
    publisher: LeaderboardPublisher
    reloader: ServerReloader
    clock: SchedulerClock


async def build_runtime(bot: discord.Client) -> BotRuntime:
    """
    Create the pool-backed collaborators and the scheduler clock and attach
    them to the bot as bot.runtime. on_ready can fire again after a reconnect;
    an existing runtime is reused then.
    """
    existing = getattr(bot, "runtime", None)
    if existing is not None:
        return existing

    config = get_scheduler_config()
    pool = await get_db_pool()
    hero_names = get_hero_names()

    servers = ServerRepository(pool)
    ledger = EventLedger(pool)
    publisher = LeaderboardPublisher(
        DatabaseMatchSource(pool),
        servers,
        max_message_length=config.max_message_length,
        hero_names=hero_names,
    )
    reloader = ServerReloader(pool, hero_names)
    clock = SchedulerClock(
        SchedulerContext(
            config=config,
            servers=servers,
            ledger=ledger,
            publisher=publisher,
            delivery=DiscordDelivery(bot),
            reloader=reloader,
        )
    )

    runtime = BotRuntime(pool, config, servers, ledger, publisher, reloader, clock)
    bot.runtime = runtime
    logger.info(f"Bot runtime ready with {config!r}")
    return runtime


def get_runtime(client: discord.Client) -> BotRuntime:
    """The runtime attached by build_runtime, e.g. from interaction.client."""
    runtime = getattr(client, "runtime", None)
    if runtime is None:
        raise RuntimeError("Bot runtime is not initialized yet")
    return runtime


def clear_runtime(client: discord.Client) -> None:
    runtime = getattr(client, "runtime", None)
    if runtime is not None:
        runtime.clock.stop()
    client.runtime = None
