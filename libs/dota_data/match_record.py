"""
Match record types shared by the ingestion pipeline and the leaderboard bot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class LobbyType(IntEnum):
    """OpenDota lobby type codes."""

    UNRANKED = 0
    PRACTICE = 1
    TOURNAMENT = 2
    TUTORIAL = 3
    COOP_BOTS = 4
    RANKED_TEAM = 5
    RANKED_SOLO = 6
    RANKED = 7
    SOLO_MID_1V1 = 8
    BATTLE_CUP = 9

    @property
    def is_ranked(self) -> bool:
        return self in RANKED_LOBBY_TYPES


RANKED_LOBBY_TYPES = frozenset({LobbyType.RANKED, LobbyType.RANKED_SOLO})


class GameMode(IntEnum):
    """OpenDota game mode codes we know about."""

    UNKNOWN = 0
    ALL_PICK = 1
    CAPTAINS_MODE = 2
    RANDOM_DRAFT = 3
    SINGLE_DRAFT = 4
    ALL_RANDOM = 5
    INTRO = 6
    DIRETIDE = 7
    REVERSE_CAPTAINS_MODE = 8
    GREEVILING = 9
    TUTORIAL = 10
    MID_ONLY = 11
    LEAST_PLAYED = 12
    LIMITED_HEROES = 13
    COMPENDIUM_MATCHMAKING = 14
    CUSTOM = 15
    CAPTAINS_DRAFT = 16
    BALANCED_DRAFT = 17
    ABILITY_DRAFT = 18
    EVENT = 19
    ALL_RANDOM_DEATH_MATCH = 20
    SOLO_MID_1V1 = 21
    RANKED = 22
    TURBO = 23


class Faction(Enum):
    RADIANT = "Radiant"
    DIRE = "Dire"


@dataclass(frozen=True)
class MatchRecord:
    """One player's participation in one finished match."""

    match_id: int
    player_id: int
    hero_id: int
    kills: int
    deaths: int
    assists: int
    duration: int  # seconds
    start_time: int  # unix seconds
    lobby_type: LobbyType
    is_victory: bool
    game_mode: GameMode = GameMode.ALL_PICK
    faction: Faction = Faction.RADIANT
    party_size: int | None = None
    rank: int | None = None

    @property
    def is_ranked(self) -> bool:
        return self.lobby_type in RANKED_LOBBY_TYPES
