"""
Discord bot entry point: leaderboard slash commands and the schedule loop.
"""

import asyncio
import logging
import signal

import discord

from discord.ext import commands

from apps.leaderboard_bot.bot_config import get_bot_config
from apps.leaderboard_bot.commands import setup_leaderboard_command, setup_server_commands
from apps.leaderboard_bot.common import close_db_pool
from apps.leaderboard_bot.health_check import mark_not_ready, mark_ready
from apps.leaderboard_bot.runtime import build_runtime, clear_runtime

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

bot_config = get_bot_config()

# Slash commands only; an empty prefix list disables text commands
bot = commands.Bot(
    command_prefix=lambda bot, message: [],
    intents=discord.Intents.default(),
    description="dotaboard leaderboard bot",
)


def check_channel_permission(interaction: discord.Interaction) -> bool:
    """Commands run anywhere unless DISCORD_ALLOWED_CHANNEL_IDS narrows them."""
    allowed = bot_config.allowed_channel_ids
    return not allowed or interaction.channel_id in allowed


setup_leaderboard_command(bot.tree, check_channel_permission)
setup_server_commands(bot.tree, check_channel_permission, bot_config.max_players_per_server)


async def sync_commands() -> None:
    """Sync to DISCORD_DEV_GUILD_ID when set (instant), otherwise globally."""
    if bot_config.dev_guild_id:
        guild = discord.Object(id=bot_config.dev_guild_id)
        logger.info(f"Syncing commands to development guild {guild.id}...")
        bot.tree.clear_commands(guild=guild)
        bot.tree.copy_global_to(guild=guild)
        synced = await bot.tree.sync(guild=guild)
    else:
        logger.info("Syncing commands globally...")
        synced = await bot.tree.sync()

    logger.info(f"Synced {len(synced)} commands: {', '.join(cmd.name for cmd in synced)}")


@bot.event
async def on_ready():
    logger.info(f"{bot.user} has connected to Discord ({len(bot.guilds)} guild(s))")

    try:
        runtime = await build_runtime(bot)
        try:
            await sync_commands()
        except discord.HTTPException as e:
            logger.warning(f"HTTP error while syncing commands: {e}", exc_info=True)
        await bot.change_presence(activity=discord.Game(name="/leaderboard"))
        runtime.clock.start(bot)
    except Exception as e:
        logger.error(f"Error during bot initialization: {e}", exc_info=True)
        mark_not_ready()
        raise

    mark_ready()


@bot.event
async def on_disconnect():
    # discord.py reconnects by itself; stay unhealthy until on_ready runs again
    logger.info("Bot disconnected from Discord")
    mark_not_ready()


async def shutdown() -> None:
    """Stop the schedule loop and release the database pool."""
    clear_runtime(bot)
    await close_db_pool()


def _exit_on_signal(signum: int, frame) -> None:
    logger.info("Received signal %s, removing readiness file and exiting.", signum)
    mark_not_ready()
    raise SystemExit(0)


async def run_bot() -> None:
    async with bot:
        try:
            await bot.start(bot_config.token)
        finally:
            await shutdown()


def main():
    """Main entry point for the Discord bot."""
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            signal.signal(sig, _exit_on_signal)
        except (ValueError, OSError) as e:
            logger.warning(f"Cannot install handler for signal {sig}: {e}")

    logger.info("Starting Discord bot...")
    try:
        asyncio.run(run_bot())
    except Exception as e:
        logger.error(f"Failed to start bot: {e}", exc_info=True)
        mark_not_ready()
        raise


if __name__ == "__main__":
    main()
