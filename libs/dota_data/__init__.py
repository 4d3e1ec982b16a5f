"""
Shared Dota 2 data for the dotaboard project.

This package contains the hero name data file and the match record types
used by both the ingestion pipeline and the leaderboard bot.
"""

from libs.dota_data.heroes import (
    HEROES_PATH,
    UNKNOWN_HERO_NAME,
    get_hero_name,
    get_hero_names,
    load_hero_names,
)
from libs.dota_data.match_record import (
    Faction,
    GameMode,
    LobbyType,
    MatchRecord,
    RANKED_LOBBY_TYPES,
)

__all__ = [
    'HEROES_PATH',
    'UNKNOWN_HERO_NAME',
    'Faction',
    'GameMode',
    'LobbyType',
    'MatchRecord',
    'RANKED_LOBBY_TYPES',
    'get_hero_name',
    'get_hero_names',
    'load_hero_names',
]
