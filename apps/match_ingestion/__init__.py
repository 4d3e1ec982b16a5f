"""
Match ingestion package for the dotaboard project.

This package handles the reload pipeline:
1. Fetches each registered player's match history from OpenDota
2. Filters and maps matches into MatchRecord rows
3. Inserts new rows into PostgreSQL
"""

from apps.match_ingestion.reload import (
    ReloadPlayerStat,
    ReloadSummary,
    ServerReloader,
    reload_player,
    reload_server,
)

__all__ = [
    'ReloadPlayerStat',
    'ReloadSummary',
    'ServerReloader',
    'reload_player',
    'reload_server',
]
