"""
Discord bot and scheduler configuration from environment variables.
"""

from __future__ import annotations

import logging
import os

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Set
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from apps.leaderboard_bot.common.constants import (
    DEFAULT_MAX_PLAYERS_PER_SERVER,
    DEFAULT_RELOAD_INTERVAL_MINUTES,
    DEFAULT_TICK_INTERVAL_MINUTES,
    DISCORD_MESSAGE_MAX_LENGTH,
    LAST_WEEK_OF_MONTH,
)

logger = logging.getLogger(__name__)

APPS_DIR = Path(__file__).parent.parent
ROOT_DIR = APPS_DIR.parent
ENV_FILE = ROOT_DIR / ".env"

if ENV_FILE.exists():
    load_dotenv(dotenv_path=ENV_FILE, override=False)
    logger.info(f"Loaded .env from {ENV_FILE}")


def _parse_id_set(value: str) -> Set[int]:
    return {int(item.strip()) for item in value.split(",") if item.strip()}


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else None


def _bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class DiscordBotConfig:
    """Discord bot settings loaded from environment variables."""

    def __init__(self) -> None:
        self.token: Optional[str] = os.getenv("DISCORD_BOT_TOKEN")

        if not self.token:
            raise ValueError("DISCORD_BOT_TOKEN environment variable is required")

        self.allowed_channel_ids: Set[int] = _parse_id_set(os.getenv("DISCORD_ALLOWED_CHANNEL_IDS", ""))
        self.dev_guild_id: Optional[int] = _optional_int("DISCORD_DEV_GUILD_ID")
        self.max_players_per_server: int = int(
            os.getenv("MAX_PLAYERS_PER_SERVER") or DEFAULT_MAX_PLAYERS_PER_SERVER
        )
        if self.max_players_per_server <= 0:
            raise ValueError("MAX_PLAYERS_PER_SERVER must be a positive integer")

    def __repr__(self) -> str:
        return (
            f"DiscordBotConfig("
            f"token=***, "
            f"allowed_channel_ids={self.allowed_channel_ids}, "
            f"dev_guild_id={self.dev_guild_id}, "
            f"max_players_per_server={self.max_players_per_server})"
        )


@dataclass(frozen=True)
class SchedulerConfig:
    """
    Process-wide schedule defaults.

    Weekly and monthly settings apply to servers that do not override them.
    Weekdays are ISO (1 = Monday, 7 = Sunday); monthly_week 5 means the last
    occurrence in the month.
    """

    enabled: bool = True
    timezone: Optional[str] = None
    tick_interval_minutes: int = DEFAULT_TICK_INTERVAL_MINUTES
    reload_start_hour: int = 0
    reload_end_hour: int = 24
    reload_interval_minutes: int = DEFAULT_RELOAD_INTERVAL_MINUTES
    weekly_day: Optional[int] = None
    weekly_hour: Optional[int] = None
    monthly_week: Optional[int] = None
    monthly_weekday: Optional[int] = None
    monthly_hour: Optional[int] = None
    max_message_length: int = DISCORD_MESSAGE_MAX_LENGTH

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ValueError for out-of-range settings."""
        if self.tick_interval_minutes <= 0:
            raise ValueError("TICK_INTERVAL_MINUTES must be positive")
        if self.reload_interval_minutes <= 0:
            raise ValueError("RELOAD_INTERVAL_MINUTES must be positive")
        if self.max_message_length <= 0:
            raise ValueError("MAX_MESSAGE_LENGTH must be positive")
        for name, value in (("RELOAD_START_HOUR", self.reload_start_hour), ("RELOAD_END_HOUR", self.reload_end_hour)):
            if not 0 <= value <= 24:
                raise ValueError(f"{name} must be between 0 and 24, got {value}")
        for name, value in (("WEEKLY_HOUR", self.weekly_hour), ("MONTHLY_HOUR", self.monthly_hour)):
            if value is not None and not 0 <= value <= 23:
                raise ValueError(f"{name} must be between 0 and 23, got {value}")
        for name, value in (("WEEKLY_DAY", self.weekly_day), ("MONTHLY_WEEKDAY", self.monthly_weekday)):
            if value is not None and not 1 <= value <= 7:
                raise ValueError(f"{name} must be between 1 (Monday) and 7 (Sunday), got {value}")
        if self.monthly_week is not None and not 1 <= self.monthly_week <= LAST_WEEK_OF_MONTH:
            raise ValueError(f"MONTHLY_WEEK must be between 1 and {LAST_WEEK_OF_MONTH}, got {self.monthly_week}")
        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"SCHEDULER_TIMEZONE {self.timezone!r} is not a known time zone") from None

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        """Configured zone, or None for the host's local time."""
        return ZoneInfo(self.timezone) if self.timezone else None

    @classmethod
    def from_env(cls) -> "SchedulerConfig":
        return cls(
            enabled=_bool("SCHEDULER_ENABLED", True),
            timezone=os.getenv("SCHEDULER_TIMEZONE") or None,
            tick_interval_minutes=int(os.getenv("TICK_INTERVAL_MINUTES", str(DEFAULT_TICK_INTERVAL_MINUTES))),
            reload_start_hour=int(os.getenv("RELOAD_START_HOUR", "0")),
            reload_end_hour=int(os.getenv("RELOAD_END_HOUR", "24")),
            reload_interval_minutes=int(os.getenv("RELOAD_INTERVAL_MINUTES", str(DEFAULT_RELOAD_INTERVAL_MINUTES))),
            weekly_day=_optional_int("WEEKLY_DAY"),
            weekly_hour=_optional_int("WEEKLY_HOUR"),
            monthly_week=_optional_int("MONTHLY_WEEK"),
            monthly_weekday=_optional_int("MONTHLY_WEEKDAY"),
            monthly_hour=_optional_int("MONTHLY_HOUR"),
            max_message_length=int(os.getenv("MAX_MESSAGE_LENGTH", str(DISCORD_MESSAGE_MAX_LENGTH))),
        )


_bot_config: Optional[DiscordBotConfig] = None
_scheduler_config: Optional[SchedulerConfig] = None


def get_bot_config() -> DiscordBotConfig:
    """Get or create the singleton config instance."""
    global _bot_config
    if _bot_config is None:
        _bot_config = DiscordBotConfig()
    return _bot_config


def get_scheduler_config() -> SchedulerConfig:
    """Get or create the singleton config instance."""
    global _scheduler_config
    if _scheduler_config is None:
        _scheduler_config = SchedulerConfig.from_env()
    return _scheduler_config
