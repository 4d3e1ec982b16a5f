"""
Periodic scheduler loop.

Each tick evaluates every registered server against the reload, weekly and
monthly policies, one server after another. When a policy is due its action
runs, and only after the action succeeded is a Schedule event appended to
the ledger, so a failure is retried on the next qualifying tick
(at-least-once delivery).
"""

from __future__ import annotations

import logging

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Protocol, Sequence, Tuple

import discord

from discord.ext import tasks

from apps.leaderboard_bot.bot_config import SchedulerConfig
from apps.leaderboard_bot.leaderboard.duration import Duration
from apps.leaderboard_bot.scheduler.policies import POLICIES, EntitySchedule
from libs.db.schedule_events import EventSource, EventType
from libs.db.servers import Server

logger = logging.getLogger(__name__)

LEADERBOARD_DURATIONS = {
    EventType.LEADERBOARD_WEEK: Duration.WEEK,
    EventType.LEADERBOARD_MONTH: Duration.MONTH,
}


class ServerSource(Protocol):
    async def list_servers(self) -> List[Server]:
        ...


class Ledger(Protocol):
    async def last(self, server_id: int, event_type: EventType) -> Optional[int]:
        ...

    async def append(self, server_id: int, event_type: EventType, event_source: EventSource, event_time: int) -> None:
        ...


class LeaderboardBuilder(Protocol):
    async def build_messages(self, server: Server, duration: Duration, now: datetime) -> List[str]:
        ...


class Delivery(Protocol):
    async def deliver(self, server: Server, batches: Sequence[str]) -> None:
        ...


@dataclass
class SchedulerContext:
    """Everything a tick needs, passed in explicitly."""

    config: SchedulerConfig
    servers: ServerSource
    ledger: Ledger
    publisher: LeaderboardBuilder
    delivery: Delivery
    reloader: Callable[[Server], Awaitable[Any]]


class SchedulerClock:
    def __init__(self, context: SchedulerContext, policies: Sequence = POLICIES) -> None:
        self.context = context
        self.policies = tuple(policies)
        self._bot: Optional[discord.Client] = None
        self._loop: Optional[tasks.Loop] = None

    def local_now(self, now: Optional[datetime] = None) -> datetime:
        """Current (or given) time in the configured zone; naive values are taken as host local time."""
        tz = self.context.config.tzinfo
        if now is None:
            now = datetime.now(tz)
        return now.astimezone(tz)

    async def tick(self, now: Optional[datetime] = None) -> List[Tuple[int, EventType]]:
        """
        Evaluate every server once.

        Args:
            now: Evaluation time; defaults to the current time

        Returns:
            (server_id, event_type) for every action that fired and was recorded
        """
        now = self.local_now(now)
        try:
            servers = await self.context.servers.list_servers()
        except Exception as e:
            logger.error(f"Scheduler tick could not load servers: {e}", exc_info=True)
            return []

        fired: List[Tuple[int, EventType]] = []
        for server in servers:
            for event_type in await self.evaluate_server(server, now):
                fired.append((server.server_id, event_type))

        if fired:
            logger.info(f"Scheduler tick at {now.isoformat()} fired {len(fired)} action(s)")
        return fired

    async def evaluate_server(self, server: Server, now: datetime) -> List[EventType]:
        """Run every due policy for one server. Errors are logged per policy and never raised."""
        schedule = EntitySchedule.resolve(server, self.context.config)
        fired: List[EventType] = []

        for policy in self.policies:
            if not policy.is_enabled(server):
                continue
            try:
                last_event_time = await self.context.ledger.last(server.server_id, policy.event_type)
                if not policy.is_due(schedule, now, last_event_time):
                    continue

                logger.info(f"{policy.event_type.value} due for server {server.server_id} ({server.server_name})")
                if await self.fire(server, policy.event_type, now):
                    await self.context.ledger.append(
                        server.server_id, policy.event_type, EventSource.SCHEDULE, int(now.timestamp())
                    )
                    fired.append(policy.event_type)
            except Exception as e:
                logger.error(
                    f"Scheduled {policy.event_type.value} failed for server {server.server_id} "
                    f"({server.server_name}): {e}",
                    exc_info=True,
                )

        return fired

    async def fire(self, server: Server, event_type: EventType, now: datetime) -> bool:
        """
        Run the action behind an event type.

        Returns:
            False when the action was skipped and must not be recorded
        """
        if event_type is EventType.RELOAD:
            await self.context.reloader(server)
            return True

        if server.channel_id is None:
            logger.warning(f"Server {server.server_id} ({server.server_name}) has no channel configured, skipping")
            return False

        duration = LEADERBOARD_DURATIONS[event_type]
        batches = await self.context.publisher.build_messages(server, duration, now)
        if not batches:
            logger.info(f"No matches for the {duration.label} leaderboard of server {server.server_id}")
            return True

        await self.context.delivery.deliver(server, batches)
        logger.info(
            f"Published {duration.label} leaderboard to server {server.server_id} "
            f"channel {server.channel_id} ({len(batches)} message(s))"
        )
        return True

    async def trigger(self, server: Server, event_type: EventType, now: Optional[datetime] = None) -> bool:
        """Fire an action on demand and record it as Manual. Errors propagate to the caller."""
        now = self.local_now(now)
        if not await self.fire(server, event_type, now):
            return False
        await self.context.ledger.append(server.server_id, event_type, EventSource.MANUAL, int(now.timestamp()))
        return True

    async def _run_tick(self) -> None:
        await self.tick()

    async def _wait_until_ready(self) -> None:
        if self._bot is not None:
            await self._bot.wait_until_ready()

    def start(self, bot: Optional[discord.Client] = None) -> None:
        """Start the tick loop every tick_interval_minutes (no-op when disabled or already running)."""
        config = self.context.config
        if not config.enabled:
            logger.info("Scheduler is disabled in configuration")
            return

        self._bot = bot
        if self._loop is None:
            self._loop = tasks.loop(minutes=config.tick_interval_minutes)(self._run_tick)
            self._loop.before_loop(self._wait_until_ready)

        if not self._loop.is_running():
            self._loop.start()
            logger.info(f"Started scheduler loop (every {config.tick_interval_minutes} min)")
        else:
            logger.warning("Scheduler loop already running")

    def stop(self) -> None:
        """Stop after the current tick; a running tick is not cancelled."""
        if self._loop is not None and self._loop.is_running():
            self._loop.stop()
            logger.info("Stopped scheduler loop")
