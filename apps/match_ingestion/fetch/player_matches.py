"""
Fetch a player's match history from the OpenDota players/{id}/matches endpoint.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

import aiohttp

from typing import Any, Dict, List

from apps.match_ingestion.config import get_api_config

logger = logging.getLogger(__name__)


async def fetch_player_matches(session: aiohttp.ClientSession, player_id: int) -> List[Dict[str, Any]]:
    """
    Fetch every match OpenDota has for a player.

    Args:
        session: Open aiohttp session
        player_id: OpenDota account id

    Returns:
        The raw match objects as returned by the API

    Raises:
        aiohttp.ClientResponseError: On a non-2xx response
        ValueError: If the payload is not a JSON array
    """
    api_config = get_api_config()
    url = api_config.player_matches_url(player_id)
    logger.info(f"Fetching OpenDota matches for player {player_id} from {url}")

    timeout = aiohttp.ClientTimeout(total=api_config.timeout_seconds)
    async with session.get(url, timeout=timeout) as response:
        response.raise_for_status()
        payload = await response.json()

    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of matches for player {player_id}, got {type(payload).__name__}")

    logger.info(f"Fetched {len(payload)} matches for player {player_id}")
    return payload


async def main(player_id: int) -> None:
    async with aiohttp.ClientSession() as session:
        matches = await fetch_player_matches(session, player_id)
    print(json.dumps(matches[:5], indent=2))
    print(f"Fetched {len(matches)} matches for player {player_id}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fetch a player's match history from OpenDota")
    parser.add_argument("player_id", type=int, help="OpenDota account id")
    args = parser.parse_args()
    asyncio.run(main(args.player_id))
