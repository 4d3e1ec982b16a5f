"""
Fetch module for match ingestion.

Contains functions for fetching data from the OpenDota API.
"""

from apps.match_ingestion.fetch.player_matches import fetch_player_matches

__all__ = ['fetch_player_matches']
