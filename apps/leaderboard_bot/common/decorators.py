"""
Command decorators for the leaderboard bot.
"""

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Optional

import aiohttp
import asyncpg
import discord

from apps.leaderboard_bot.common.logging import (
    log_command_completion,
    log_command_data,
)

logger = logging.getLogger(__name__)

ChannelCheck = Callable[[discord.Interaction], bool]

GUILD_ONLY_MESSAGE = "❌ This command can only be used in a server."
WRONG_CHANNEL_MESSAGE = "❌ This bot can only be used in the designated channel."


def error_message_for(error: Exception) -> str:
    """User-facing message for an error raised inside a command."""
    if isinstance(error, ConnectionError):
        return "❌ Failed to connect to the database. Please try again later."
    if isinstance(error, asyncpg.PostgresError):
        return "❌ Database error. Please try again later."
    if isinstance(error, aiohttp.ClientError):
        return "❌ OpenDota could not be reached. Please try again later."
    if isinstance(error, discord.HTTPException):
        return "❌ Discord rejected the message. Check the bot's channel permissions."
    if isinstance(error, ValueError):
        return "❌ Configuration error. Please check the bot settings."
    return "❌ An unexpected error occurred."


def rejection_reason(interaction: discord.Interaction, channel_check: Optional[ChannelCheck]) -> Optional[str]:
    """Why the command may not run here, or None if it may."""
    if interaction.guild_id is None:
        return GUILD_ONLY_MESSAGE
    if channel_check is not None and not channel_check(interaction):
        return WRONG_CHANNEL_MESSAGE
    return None


async def reply_ephemeral(interaction: discord.Interaction, message: str) -> None:
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def handle_command_errors(
    interaction: discord.Interaction,
    command_name: str,
    start_time: float,
    error: Exception,
    kwargs: Optional[dict] = None,
) -> None:
    """Log the error and tell the user what went wrong."""
    logger.error(
        f"{type(error).__name__} in {command_name}: {error}",
        exc_info=(type(error), error, error.__traceback__),
    )
    log_command_completion(command_name, start_time, success=False, interaction=interaction, kwargs=kwargs)
    await reply_ephemeral(interaction, error_message_for(error))


def command_wrapper(
    command_name: str,
    channel_check: Optional[ChannelCheck] = None,
    ephemeral: bool = False,
):
    """
    Wrap a slash command callback.

    The callback only runs inside a guild and, when channel_check is given,
    in an allowed channel. The response is deferred before the callback
    runs, so callbacks reply through interaction.followup; with ephemeral=True
    the deferred reply is only visible to the invoking user. Every invocation
    is logged with its outcome and latency; errors are reported back to the
    user as an ephemeral message.
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(interaction: discord.Interaction, *args, **kwargs):
            started = time.time()
            log_command_data(interaction, command_name, **kwargs)

            try:
                reason = rejection_reason(interaction, channel_check)
                if reason is not None:
                    await reply_ephemeral(interaction, reason)
                    log_command_completion(
                        command_name, started, success=False, interaction=interaction, kwargs=kwargs
                    )
                    return None

                await interaction.response.defer(ephemeral=ephemeral)
                result = await func(interaction, *args, **kwargs)
            except Exception as e:
                await handle_command_errors(interaction, command_name, started, e, kwargs=kwargs)
                return None

            log_command_completion(command_name, started, success=True, interaction=interaction, kwargs=kwargs)
            return result

        # discord.py reads the callback signature to build the slash command options
        wrapper.__signature__ = inspect.signature(func)
        return wrapper
    return decorator
