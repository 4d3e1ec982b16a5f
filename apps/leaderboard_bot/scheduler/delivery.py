"""
Delivery of leaderboard batches to a server's Discord channel.
"""

from __future__ import annotations

import logging

from typing import Sequence

import discord

from libs.db.servers import Server

logger = logging.getLogger(__name__)


class DeliveryError(RuntimeError):
    """The leaderboard could not be posted."""


class DiscordDelivery:
    """Posts batches in order, with link previews suppressed."""

    def __init__(self, client: discord.Client) -> None:
        self.client = client

    async def get_channel(self, channel_id: int) -> discord.abc.Messageable:
        channel = self.client.get_channel(channel_id)
        if channel is None:
            channel = await self.client.fetch_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            raise DeliveryError(f"Channel {channel_id} cannot receive messages")
        return channel

    async def deliver(self, server: Server, batches: Sequence[str]) -> None:
        """
        Send every batch to the server's channel.

        Raises:
            DeliveryError: If the server has no channel or the channel is not messageable
            discord.HTTPException: If Discord rejects a message
        """
        if server.channel_id is None:
            raise DeliveryError(f"Server {server.server_id} has no channel configured")

        channel = await self.get_channel(server.channel_id)
        for index, batch in enumerate(batches, 1):
            await channel.send(batch, suppress_embeds=True)
            logger.debug(f"Sent leaderboard batch {index}/{len(batches)} to channel {server.channel_id}")
