"""
Server administration slash commands: /register, /player and /subscribe.

Each command is a thin shell over a reply builder below that takes the
ServerRepository and returns the text to send, so the rules can be
exercised without Discord.
"""

import logging

from typing import List

import discord
from discord import app_commands

from apps.leaderboard_bot.common.constants import (
    DEFAULT_MAX_PLAYERS_PER_SERVER,
    DISCORD_MESSAGE_MAX_LENGTH,
    NOT_REGISTERED_MESSAGE,
)
from apps.leaderboard_bot.common.decorators import command_wrapper
from apps.leaderboard_bot.leaderboard.table_renderer import (
    LinkColumn,
    TableBuilder,
    TextColumn,
    batch_messages,
    player_url,
)
from apps.leaderboard_bot.runtime import get_runtime
from libs.db.servers import ServerRepository, Subscription

logger = logging.getLogger(__name__)

SUBSCRIPTION_LABELS = {
    Subscription.WEEK: "Weekly Leaderboard Updates",
    Subscription.MONTH: "Monthly Leaderboard Updates",
    Subscription.RELOAD: "Automatic Match Reloads",
}

NO_CHANNEL_MESSAGE = "❌ No subscription channel configured. Set one with `/subscribe channel`."


# =============================================================================
# Reply builders
# =============================================================================

async def register_server(servers: ServerRepository, server_id: int, server_name: str) -> str:
    if await servers.upsert_server(server_id, server_name):
        return "✅ Server has been registered. Add players with `/player add`."
    return "Server is already registered."


async def add_server_player(
    servers: ServerRepository,
    server_id: int,
    player_id: int,
    name: str,
    max_players: int = DEFAULT_MAX_PLAYERS_PER_SERVER,
) -> str:
    if await servers.get_server(server_id) is None:
        return NOT_REGISTERED_MESSAGE

    name = name.strip()
    if not name:
        return "❌ Player name cannot be empty."
    if player_id <= 0:
        return "❌ Dota player ids are positive numbers (see the OpenDota or Dotabuff profile URL)."

    players = await servers.list_server_players(server_id)
    if any(p.player_id == player_id for p in players):
        return f"Dota player {name} ({player_id}) is already on this server."
    if len(players) >= max_players:
        return f"❌ Maximum number of players ({max_players}) reached for this server."

    if not await servers.add_player(server_id, player_id, player_name=name):
        return f"Dota player {name} ({player_id}) is already on this server."
    logger.info(f"Added player {player_id} ({name}) to server {server_id}")
    return f"✅ Player {name} ({player_id}) has been added to this server."


async def remove_server_player(servers: ServerRepository, server_id: int, player_id: int) -> str:
    if await servers.remove_player(server_id, player_id):
        logger.info(f"Removed player {player_id} from server {server_id}")
        return f"✅ Removed player {player_id} from this server."
    return f"Player {player_id} does not exist on this server."


async def rename_server_player(servers: ServerRepository, server_id: int, player_id: int, new_name: str) -> str:
    new_name = new_name.strip()
    if not new_name:
        return "❌ Player name cannot be empty."
    if await servers.rename_player(server_id, player_id, new_name):
        return f"✅ Renamed player {player_id} to {new_name} on this server."
    return f"Player {player_id} does not exist on this server."


async def list_players_messages(
    servers: ServerRepository,
    server_id: int,
    max_length: int = DISCORD_MESSAGE_MAX_LENGTH,
) -> List[str]:
    """Registered players as a table, sorted by name and split into Discord-sized messages."""
    players = await servers.list_server_players(server_id)
    if not players:
        return ["No players are registered for this server. Add one with `/player add`."]

    players = sorted(players, key=lambda p: p.display_name.lower())
    section = (
        TableBuilder(f"{len(players)} player(s) registered to this server:")
        .add_column(TextColumn("Player Name", [p.display_name for p in players]))
        .add_column(TextColumn("Player ID", [str(p.player_id) for p in players]))
        .add_column(LinkColumn([player_url(p.player_id) for p in players]))
        .build()
    )
    return batch_messages([f"{line}\n" for line in (section.title, *section.lines)], max_length)


async def set_publish_channel(servers: ServerRepository, server_id: int, channel_id: int) -> str:
    if not await servers.set_channel(server_id, channel_id):
        return NOT_REGISTERED_MESSAGE
    logger.info(f"Subscription channel of server {server_id} set to {channel_id}")
    return f"✅ Subscription channel set to <#{channel_id}>"


async def toggle_subscription(servers: ServerRepository, server_id: int, subscription: Subscription) -> str:
    """Flip one subscription; subscribing requires a channel to publish to."""
    server = await servers.get_server(server_id)
    if server is None:
        return NOT_REGISTERED_MESSAGE
    if server.channel_id is None:
        return NO_CHANNEL_MESSAGE

    enabled = not subscription.is_enabled(server)
    await servers.set_subscription(server_id, subscription, enabled)
    label = SUBSCRIPTION_LABELS[subscription]
    logger.info(f"Server {server_id} {'subscribed to' if enabled else 'unsubscribed from'} {subscription.name}")
    if enabled:
        return f"Subscribed to `{label}` 👍"
    return f"Unsubscribed from `{label}` 💤"


async def subscription_info(servers: ServerRepository, server_id: int) -> str:
    server = await servers.get_server(server_id)
    if server is None:
        return NOT_REGISTERED_MESSAGE

    if server.channel_id is None:
        lines = ["No subscription channel configured. (/subscribe channel)"]
    else:
        lines = [f"This server's updates will be posted in: <#{server.channel_id}> (/subscribe channel)"]
    for subscription, label in SUBSCRIPTION_LABELS.items():
        mark = "✅" if subscription.is_enabled(server) else "❌"
        lines.append(f"{mark} - {label} (/subscribe {subscription.name.lower()})")
    return "\n".join(lines)


# =============================================================================
# Slash commands
# =============================================================================

def setup_server_commands(
    tree: app_commands.CommandTree,
    channel_check=None,
    max_players_per_server: int = DEFAULT_MAX_PLAYERS_PER_SERVER,
) -> None:
    """Register /register and the /player and /subscribe groups."""

    @tree.command(name="register", description="Register this server for leaderboards")
    @app_commands.default_permissions(manage_guild=True)
    @command_wrapper("register", channel_check=channel_check, ephemeral=True)
    async def register(interaction: discord.Interaction):
        servers = get_runtime(interaction.client).servers
        message = await register_server(servers, interaction.guild_id, interaction.guild.name)
        await interaction.followup.send(message, ephemeral=True)

    player_group = app_commands.Group(name="player", description="Manage the players on this server's leaderboard")

    @player_group.command(name="add", description="Add a Dota player to this server")
    @app_commands.describe(name="Name shown on the leaderboard", player_id="Dota player id (from OpenDota/Dotabuff)")
    @command_wrapper("player add", channel_check=channel_check, ephemeral=True)
    async def player_add(interaction: discord.Interaction, name: str, player_id: int):
        servers = get_runtime(interaction.client).servers
        message = await add_server_player(servers, interaction.guild_id, player_id, name, max_players_per_server)
        await interaction.followup.send(message, ephemeral=True)

    @player_group.command(name="remove", description="Remove a Dota player from this server")
    @app_commands.describe(player_id="Dota player id")
    @command_wrapper("player remove", channel_check=channel_check, ephemeral=True)
    async def player_remove(interaction: discord.Interaction, player_id: int):
        servers = get_runtime(interaction.client).servers
        await interaction.followup.send(
            await remove_server_player(servers, interaction.guild_id, player_id), ephemeral=True
        )

    @player_group.command(name="rename", description="Change the name a player is shown with")
    @app_commands.describe(player_id="Dota player id", new_name="New name for the player on this server")
    @command_wrapper("player rename", channel_check=channel_check, ephemeral=True)
    async def player_rename(interaction: discord.Interaction, player_id: int, new_name: str):
        servers = get_runtime(interaction.client).servers
        await interaction.followup.send(
            await rename_server_player(servers, interaction.guild_id, player_id, new_name), ephemeral=True
        )

    @player_group.command(name="list", description="List the players registered on this server")
    @command_wrapper("player list", channel_check=channel_check, ephemeral=True)
    async def player_list(interaction: discord.Interaction):
        servers = get_runtime(interaction.client).servers
        for message in await list_players_messages(servers, interaction.guild_id):
            await interaction.followup.send(message, ephemeral=True, suppress_embeds=True)

    subscribe_group = app_commands.Group(
        name="subscribe",
        description="Scheduled leaderboards and match reloads for this server",
        default_permissions=discord.Permissions(manage_guild=True),
    )

    @subscribe_group.command(name="info", description="Show this server's subscriptions")
    @command_wrapper("subscribe info", channel_check=channel_check, ephemeral=True)
    async def subscribe_info(interaction: discord.Interaction):
        servers = get_runtime(interaction.client).servers
        await interaction.followup.send(await subscription_info(servers, interaction.guild_id), ephemeral=True)

    @subscribe_group.command(name="channel", description="Set the channel scheduled leaderboards are posted to")
    @app_commands.describe(channel="Text channel for scheduled leaderboards")
    @command_wrapper("subscribe channel", channel_check=channel_check, ephemeral=True)
    async def subscribe_channel(interaction: discord.Interaction, channel: discord.TextChannel):
        servers = get_runtime(interaction.client).servers
        await interaction.followup.send(
            await set_publish_channel(servers, interaction.guild_id, channel.id), ephemeral=True
        )

    def add_toggle(subscription: Subscription) -> None:
        name = subscription.name.lower()

        @subscribe_group.command(name=name, description=f"Toggle {SUBSCRIPTION_LABELS[subscription]}")
        @command_wrapper(f"subscribe {name}", channel_check=channel_check, ephemeral=True)
        async def toggle(interaction: discord.Interaction):
            servers = get_runtime(interaction.client).servers
            await interaction.followup.send(
                await toggle_subscription(servers, interaction.guild_id, subscription), ephemeral=True
            )

    for subscription in Subscription:
        add_toggle(subscription)

    tree.add_command(player_group)
    tree.add_command(subscribe_group)
