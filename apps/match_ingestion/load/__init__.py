"""
Load module for match ingestion.

Writes transformed match records into PostgreSQL.
"""

from apps.match_ingestion.load.player_matches import (
    insert_player_matches,
    query_existing_match_ids,
)

__all__ = ['insert_player_matches', 'query_existing_match_ids']
