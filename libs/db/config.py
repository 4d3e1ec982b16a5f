"""
Database configuration from environment variables.
"""

from __future__ import annotations

import os

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

LIBS_DIR = Path(__file__).parent.parent
ROOT_DIR = LIBS_DIR.parent
ENV_FILE = ROOT_DIR / ".env"

if ENV_FILE.exists():
    load_dotenv(dotenv_path=ENV_FILE, override=False)

DEFAULT_POSTGRES_PORT = 5432


@dataclass(frozen=True)
class DatabaseConfig:
    """PostgreSQL connection settings shared by the bot and the reload CLI."""

    host: Optional[str] = None
    port: int = DEFAULT_POSTGRES_PORT
    database: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        return cls(
            host=os.getenv("POSTGRES_HOST") or None,
            port=int(os.getenv("POSTGRES_PORT") or DEFAULT_POSTGRES_PORT),
            database=os.getenv("POSTGRES_DB") or None,
            user=os.getenv("POSTGRES_USER") or None,
            password=os.getenv("POSTGRES_PASSWORD") or None,
        )

    def to_dict(self) -> dict[str, str | int | None]:
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"DatabaseConfig(host={self.host!r}, port={self.port}, "
            f"database={self.database!r}, user={self.user!r}, password=***)"
        )


_db_config: Optional[DatabaseConfig] = None


def get_db_config() -> DatabaseConfig:
    """Get or create the singleton config instance."""
    global _db_config
    if _db_config is None:
        _db_config = DatabaseConfig.from_env()
    return _db_config
