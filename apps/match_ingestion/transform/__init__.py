"""
Transform module for match ingestion.

Turns raw OpenDota API payloads into MatchRecord rows.
"""

from apps.match_ingestion.transform.match_transformer import (
    MatchMappingError,
    TransformResult,
    map_api_match,
    transform_player_matches,
)

__all__ = [
    'MatchMappingError',
    'TransformResult',
    'map_api_match',
    'transform_player_matches',
]
