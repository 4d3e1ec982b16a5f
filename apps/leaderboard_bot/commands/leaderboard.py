"""
Leaderboard slash commands: on-demand leaderboards, manual publishing and reloads.
"""

import logging
import time

from datetime import datetime, timezone

import discord
from discord import app_commands

from apps.leaderboard_bot.common.constants import DISCORD_MESSAGE_MAX_LENGTH, NOT_REGISTERED_MESSAGE
from apps.leaderboard_bot.common.decorators import command_wrapper
from apps.leaderboard_bot.leaderboard.duration import Duration
from apps.leaderboard_bot.runtime import get_runtime
from apps.match_ingestion.reload import ReloadSummary
from libs.db.schedule_events import EventSource, EventType

logger = logging.getLogger(__name__)

DURATION_CHOICES = [app_commands.Choice(name=d.label, value=d.name) for d in Duration]

PUBLISH_CHOICES = [
    app_commands.Choice(name="Week", value=EventType.LEADERBOARD_WEEK.value),
    app_commands.Choice(name="Month", value=EventType.LEADERBOARD_MONTH.value),
]


def setup_leaderboard_command(tree: app_commands.CommandTree, channel_check=None) -> None:
    """Register /leaderboard, /publish and /reload."""

    @tree.command(name="leaderboard", description="Show the server leaderboard for a period")
    @app_commands.describe(duration="Period to rank (default: Week)")
    @app_commands.choices(duration=DURATION_CHOICES)
    @command_wrapper("leaderboard", channel_check=channel_check)
    async def leaderboard(interaction: discord.Interaction, duration: str = Duration.WEEK.name):
        runtime = get_runtime(interaction.client)
        server = await runtime.servers.get_server(interaction.guild_id)
        if server is None:
            await interaction.followup.send(NOT_REGISTERED_MESSAGE)
            return

        period = Duration[duration]
        batches = await runtime.publisher.build_messages(server, period, datetime.now(timezone.utc))
        if not batches:
            await interaction.followup.send(f"No matches played in the last {period.label.lower()}.")
            return

        for batch in batches:
            await interaction.followup.send(batch, suppress_embeds=True)

    @tree.command(name="publish", description="Publish the scheduled leaderboard to the server channel now")
    @app_commands.describe(period="Which scheduled leaderboard to publish")
    @app_commands.choices(period=PUBLISH_CHOICES)
    @app_commands.default_permissions(manage_guild=True)
    @command_wrapper("publish", channel_check=channel_check)
    async def publish(interaction: discord.Interaction, period: str):
        runtime = get_runtime(interaction.client)
        server = await runtime.servers.get_server(interaction.guild_id)
        if server is None:
            await interaction.followup.send(NOT_REGISTERED_MESSAGE)
            return

        published = await runtime.clock.trigger(server, EventType(period))
        if published:
            await interaction.followup.send(f"✅ Published the {period} leaderboard.")
        else:
            await interaction.followup.send("❌ No leaderboard channel is configured for this server.")

    @tree.command(name="reload", description="Reload every registered player's matches from OpenDota")
    @app_commands.default_permissions(manage_guild=True)
    @command_wrapper("reload", channel_check=channel_check)
    async def reload(interaction: discord.Interaction):
        runtime = get_runtime(interaction.client)
        server = await runtime.servers.get_server(interaction.guild_id)
        if server is None:
            await interaction.followup.send(NOT_REGISTERED_MESSAGE)
            return

        stats = await runtime.reloader(server)
        await runtime.ledger.append(server.server_id, EventType.RELOAD, EventSource.MANUAL, int(time.time()))

        summary = ReloadSummary.from_stats(stats)
        lines = [
            f"**Reloaded {len(stats)} player(s)**: {summary.success_count} updated, "
            f"{summary.failure_count} failed, {summary.removed_count} without matches"
        ]
        lines.extend(
            f"- {stat.display_name}: {stat.error}" for stat in stats if stat.failed
        )
        await interaction.followup.send("\n".join(lines)[:DISCORD_MESSAGE_MAX_LENGTH])
