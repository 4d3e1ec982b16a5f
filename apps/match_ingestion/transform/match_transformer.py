"""
Transform OpenDota player match objects into MatchRecord rows.

A raw match is either kept, skipped (not relevant for leaderboards), or
rejected with MatchMappingError (malformed or unexpected data).

Skipped:
- hero id missing or 0
- leaver status 1 or 2 (abandoned)
- game modes other than All Pick and Ranked
- lobby types other than Unranked, Ranked and Ranked Solo
- known corrupt match ids

Rejected:
- a required field is missing or not numeric
- game mode or lobby type code is unknown
- hero id is not in the hero list
- negative duration
"""

from __future__ import annotations

import logging

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from libs.dota_data import Faction, GameMode, LobbyType, MatchRecord

logger = logging.getLogger(__name__)

# OpenDota returns this match with broken player data
CORRUPT_MATCH_IDS = frozenset({1439386853})

ABANDONED_LEAVER_STATUSES = frozenset({1, 2})
RELEVANT_GAME_MODES = frozenset({GameMode.RANKED, GameMode.ALL_PICK})
RELEVANT_LOBBY_TYPES = frozenset({LobbyType.UNRANKED, LobbyType.RANKED, LobbyType.RANKED_SOLO})

# Slots below this value are on the Radiant side
RADIANT_SLOT_LIMIT = 128


class MatchMappingError(ValueError):
    """A raw API match could not be turned into a MatchRecord."""

    def __init__(self, match_id: Optional[int], reason: str) -> None:
        self.match_id = match_id
        self.reason = reason
        super().__init__(f"Match {match_id}: {reason}")


@dataclass
class TransformResult:
    records: List[MatchRecord]
    skipped_count: int = 0
    error_count: int = 0


def _required(api_match: Mapping[str, Any], field: str, match_id: Optional[int]) -> Any:
    value = api_match.get(field)
    if value is None:
        raise MatchMappingError(match_id, f"missing field {field!r}")
    return value


def _required_int(api_match: Mapping[str, Any], field: str, match_id: Optional[int]) -> int:
    value = _required(api_match, field, match_id)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise MatchMappingError(match_id, f"non-numeric {field} {value!r}") from None


def faction_for_slot(player_slot: int) -> Faction:
    return Faction.RADIANT if player_slot < RADIANT_SLOT_LIMIT else Faction.DIRE


def map_api_match(
    api_match: Mapping[str, Any],
    player_id: int,
    hero_names: Mapping[int, str],
) -> Optional[MatchRecord]:
    """
    Map one OpenDota match object to a MatchRecord.

    Args:
        api_match: One element of the players/{id}/matches response
        player_id: The player the history belongs to
        hero_names: Known hero ids

    Returns:
        The record, or None when the match is not relevant for leaderboards

    Raises:
        MatchMappingError: If the match is malformed
    """
    match_id = _required_int(api_match, "match_id", None)
    if match_id in CORRUPT_MATCH_IDS:
        return None

    if not api_match.get("hero_id"):
        return None
    hero_id = _required_int(api_match, "hero_id", match_id)
    if hero_id not in hero_names:
        raise MatchMappingError(match_id, f"unknown hero id {hero_id}")

    if api_match.get("leaver_status") in ABANDONED_LEAVER_STATUSES:
        return None

    game_mode_value = _required(api_match, "game_mode", match_id)
    lobby_type_value = _required(api_match, "lobby_type", match_id)
    try:
        game_mode = GameMode(game_mode_value)
    except ValueError:
        raise MatchMappingError(match_id, f"invalid game mode {game_mode_value}") from None
    try:
        lobby_type = LobbyType(lobby_type_value)
    except ValueError:
        raise MatchMappingError(match_id, f"invalid lobby type {lobby_type_value}") from None

    if game_mode not in RELEVANT_GAME_MODES or lobby_type not in RELEVANT_LOBBY_TYPES:
        return None

    start_time = _required_int(api_match, "start_time", match_id)
    duration = _required_int(api_match, "duration", match_id)
    if duration < 0:
        raise MatchMappingError(match_id, f"invalid duration {duration}")

    kills = _required_int(api_match, "kills", match_id)
    deaths = _required_int(api_match, "deaths", match_id)
    assists = _required_int(api_match, "assists", match_id)
    player_slot = _required_int(api_match, "player_slot", match_id)
    radiant_win = _required(api_match, "radiant_win", match_id)

    faction = faction_for_slot(player_slot)
    is_victory = (faction is Faction.RADIANT) == bool(radiant_win)

    return MatchRecord(
        match_id=match_id,
        player_id=player_id,
        hero_id=hero_id,
        kills=kills,
        deaths=deaths,
        assists=assists,
        duration=duration,
        start_time=start_time,
        lobby_type=lobby_type,
        is_victory=is_victory,
        game_mode=game_mode,
        faction=faction,
        party_size=api_match.get("party_size"),
        rank=api_match.get("average_rank"),
    )


def transform_player_matches(
    api_matches: List[Dict[str, Any]],
    player_id: int,
    hero_names: Mapping[int, str],
) -> TransformResult:
    """Map a player's whole API payload, skipping malformed matches instead of failing the player."""
    result = TransformResult(records=[])

    for api_match in api_matches:
        try:
            record = map_api_match(api_match, player_id, hero_names)
        except MatchMappingError as e:
            logger.warning(f"Skipping match for player {player_id}: {e}")
            result.error_count += 1
            continue

        if record is None:
            result.skipped_count += 1
        else:
            result.records.append(record)

    return result
