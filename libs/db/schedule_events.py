"""
Append-only log of scheduled and manual actions per server.

The most recent row per (server, event type) is the only scheduling state;
nothing else is kept between ticks or across restarts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import asyncpg


class EventType(Enum):
    RELOAD = "Reload"
    LEADERBOARD_WEEK = "LeaderboardWeek"
    LEADERBOARD_MONTH = "LeaderboardMonth"


class EventSource(Enum):
    MANUAL = "Manual"
    SCHEDULE = "Schedule"


@dataclass(frozen=True)
class ScheduleEvent:
    event_id: int
    server_id: int
    event_type: EventType
    event_source: EventSource
    event_time: int  # unix seconds


async def query_last_event(
    conn: asyncpg.Connection | asyncpg.Pool,
    server_id: int,
    event_type: EventType,
) -> Optional[ScheduleEvent]:
    """Most recent event of a type for a server, regardless of its source."""
    row = await conn.fetchrow(
        """
        SELECT event_id, server_id, event_type, event_source, event_time
        FROM dotaboard.schedule_events
        WHERE server_id = $1 AND event_type = $2
        ORDER BY event_time DESC, event_id DESC
        LIMIT 1
        """,
        server_id,
        event_type.value,
    )
    if row is None:
        return None
    return ScheduleEvent(
        event_id=row["event_id"],
        server_id=row["server_id"],
        event_type=EventType(row["event_type"]),
        event_source=EventSource(row["event_source"]),
        event_time=row["event_time"],
    )


async def insert_event(
    conn: asyncpg.Connection | asyncpg.Pool,
    server_id: int,
    event_type: EventType,
    event_source: EventSource,
    event_time: int,
) -> int:
    """Append an event and return its id."""
    return await conn.fetchval(
        """
        INSERT INTO dotaboard.schedule_events (server_id, event_type, event_source, event_time)
        VALUES ($1, $2, $3, $4)
        RETURNING event_id
        """,
        server_id,
        event_type.value,
        event_source.value,
        event_time,
    )


class EventLedger:
    """Pool-backed EventLedger used by the scheduler."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def last(self, server_id: int, event_type: EventType) -> Optional[int]:
        """Time of the latest event of this type for the server, or None."""
        event = await query_last_event(self.pool, server_id, event_type)
        return event.event_time if event else None

    async def append(
        self,
        server_id: int,
        event_type: EventType,
        event_source: EventSource,
        event_time: int,
    ) -> None:
        await insert_event(self.pool, server_id, event_type, event_source, event_time)
