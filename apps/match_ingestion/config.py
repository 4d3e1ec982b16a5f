"""
Match ingestion configuration from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

APPS_DIR = Path(__file__).parent.parent
ROOT_DIR = APPS_DIR.parent
ENV_FILE = ROOT_DIR / ".env"

if ENV_FILE.exists():
    load_dotenv(dotenv_path=ENV_FILE, override=False)

DEFAULT_OPENDOTA_BASE_URL = "https://api.opendota.com/api"


class IngestionConfig:
    """Batch size settings for database inserts."""

    def __init__(self) -> None:
        self.player_matches_batch_size: int = int(os.getenv("PLAYER_MATCHES_BATCH_SIZE", "50"))
        if self.player_matches_batch_size <= 0:
            raise ValueError("PLAYER_MATCHES_BATCH_SIZE must be a positive integer")

    def __repr__(self) -> str:
        return f"IngestionConfig(player_matches_batch_size={self.player_matches_batch_size})"


class APIConfig:
    """OpenDota API endpoint configuration."""

    def __init__(self) -> None:
        self.base_url: str = os.getenv("OPENDOTA_BASE_URL", DEFAULT_OPENDOTA_BASE_URL).rstrip("/")
        self.timeout_seconds: float = float(os.getenv("OPENDOTA_TIMEOUT_SECONDS", "30"))

        # API endpoints
        self.player_matches_endpoint: str = "/players/{player_id}/matches"

    def player_matches_url(self, player_id: int) -> str:
        return f"{self.base_url}{self.player_matches_endpoint.format(player_id=player_id)}"

    def __repr__(self) -> str:
        return (
            f"APIConfig(base_url={self.base_url!r}, "
            f"timeout_seconds={self.timeout_seconds}, "
            f"player_matches_endpoint={self.player_matches_endpoint!r})"
        )


_ingestion_config: Optional[IngestionConfig] = None
_api_config: Optional[APIConfig] = None


def get_ingestion_config() -> IngestionConfig:
    """Get or create the singleton config instance."""
    global _ingestion_config
    if _ingestion_config is None:
        _ingestion_config = IngestionConfig()
    return _ingestion_config


def get_api_config() -> APIConfig:
    """Get or create the singleton config instance."""
    global _api_config
    if _api_config is None:
        _api_config = APIConfig()
    return _api_config
