"""
Command logging utilities for the leaderboard bot.

Every slash command produces two INFO lines: one when it is invoked and one
when it finishes, the latter carrying SUCCESS/FAILED and the latency.
"""

import logging
import time
from typing import Optional

import discord

logger = logging.getLogger(__name__)


def describe_interaction(interaction: discord.Interaction) -> str:
    user = interaction.user
    if interaction.guild is not None:
        guild = f"{interaction.guild.name} ({interaction.guild_id})"
    else:
        guild = "DM"
    channel_name = getattr(interaction.channel, "name", None) or "DM"
    return f"User: {user.name} ({user.id}) | Guild: {guild} | Channel: #{channel_name} ({interaction.channel_id})"


def describe_params(params: Optional[dict]) -> str:
    """Render the non-None command options, or an empty string."""
    shown = [f"{name}={value}" for name, value in (params or {}).items() if value is not None]
    return f" | Params: {', '.join(shown)}" if shown else ""


def get_command_latency_ms(start_time: float) -> float:
    return (time.time() - start_time) * 1000


def log_command_data(interaction: discord.Interaction, command_name: str, **kwargs) -> None:
    logger.info(f"Command: {command_name} | {describe_interaction(interaction)}{describe_params(kwargs)}")


def log_command_completion(
    command_name: str,
    start_time: float,
    success: bool = True,
    interaction: Optional[discord.Interaction] = None,
    kwargs: Optional[dict] = None,
) -> None:
    parts = [
        f"Command: {command_name}",
        f"Status: {'SUCCESS' if success else 'FAILED'}",
        f"Latency: {get_command_latency_ms(start_time):.2f}ms",
    ]
    if interaction is not None:
        parts.append(describe_interaction(interaction))
    logger.info(" | ".join(parts) + describe_params(kwargs))
