"""
Hero id -> localized name lookup backed by heroes.json.
"""

from __future__ import annotations

import json
import logging
import os

from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

HEROES_PATH = Path(__file__).parent / "heroes.json"
UNKNOWN_HERO_NAME = "Unknown Hero"

_hero_names: Optional[Dict[int, str]] = None


def load_hero_names(path: Optional[Path] = None) -> Dict[int, str]:
    """
    Read a heroes file (a JSON array of objects with ``id`` and ``localized_name``).

    Entries missing either key are ignored.

    Args:
        path: File to read; defaults to HEROES_PATH from the environment or the bundled file

    Returns:
        Mapping of hero id to display name
    """
    if path is None:
        path = Path(os.getenv("HEROES_PATH", str(HEROES_PATH)))

    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of heroes in {path}")

    hero_names: Dict[int, str] = {}
    for hero in data:
        hero_id = hero.get("id")
        name = hero.get("localized_name")
        if hero_id is None or not name:
            continue
        hero_names[int(hero_id)] = name

    logger.info(f"Loaded {len(hero_names)} heroes from {path}")
    return hero_names


def get_hero_names() -> Dict[int, str]:
    """Get or load the process-wide hero name mapping."""
    global _hero_names
    if _hero_names is None:
        _hero_names = load_hero_names()
    return _hero_names


def get_hero_name(hero_id: int, hero_names: Optional[Dict[int, str]] = None) -> str:
    """Display name for a hero id, falling back to a placeholder for unknown ids."""
    names = hero_names if hero_names is not None else get_hero_names()
    return names.get(hero_id, UNKNOWN_HERO_NAME)
