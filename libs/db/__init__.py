"""
Shared database configuration and utilities for the dotaboard project.

This package provides reusable database connection functions and the
queries shared by the match ingestion service and the leaderboard bot.
"""

from libs.db.config import get_db_config, DatabaseConfig
from libs.db.database import apply_schema, connection_params, create_db_pool, get_db_connection
from libs.db.schedule_events import (
    EventLedger,
    EventSource,
    EventType,
    ScheduleEvent,
    insert_event,
    query_last_event,
)
from libs.db.servers import (
    Server,
    ServerPlayer,
    ServerRepository,
    Subscription,
    add_player,
    get_server,
    list_server_players,
    list_servers,
    remove_player,
    rename_player,
    set_channel,
    set_subscription,
    upsert_server,
)

__all__ = [
    'get_db_config',
    'DatabaseConfig',
    'apply_schema',
    'connection_params',
    'create_db_pool',
    'get_db_connection',
    'EventLedger',
    'EventSource',
    'EventType',
    'ScheduleEvent',
    'insert_event',
    'query_last_event',
    'Server',
    'ServerPlayer',
    'ServerRepository',
    'Subscription',
    'add_player',
    'get_server',
    'list_server_players',
    'list_servers',
    'remove_player',
    'rename_player',
    'set_channel',
    'set_subscription',
    'upsert_server',
]
