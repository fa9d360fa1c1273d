"""
Ticket Channel Gateway
======================

The narrow set of Discord calls the ticket lifecycle depends on.

DESIGN:
    TicketService talks to ChannelGateway, never to discord.py directly,
    so every lifecycle rule can be tested against an in-memory fake.
    All identifiers cross this boundary as strings.

    DiscordGateway is the real implementation. Any discord.py failure
    is logged and re-raised as GatewayError carrying the operation name.
"""

import io
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Union

import discord

from ticketeer.core.errors import GatewayError
from ticketeer.core.logger import logger
from .transcript import TranscriptArchive


PRINCIPAL_ROLE = "role"
PRINCIPAL_MEMBER = "member"


@dataclass(frozen=True)
class Overwrite:
    """
    A channel permission overwrite for one role or member.

    None leaves the permission inherited.
    """
    principal_id: str
    kind: str = PRINCIPAL_MEMBER
    view: Optional[bool] = None
    send: Optional[bool] = None


class ChannelGateway(Protocol):
    async def find_text_channel(self, guild_id: str, name: str) -> Optional[str]:
        ...

    async def create_channel(self, guild_id: str, name: str, overwrites: List[Overwrite]) -> str:
        ...

    async def set_channel_parent(self, channel_id: str, category_id: str) -> None:
        ...

    async def delete_channel(self, channel_id: str, reason: str) -> None:
        ...

    async def grant_access(
        self, channel_id: str, user_id: str, view: bool = True, send: bool = True
    ) -> None:
        ...

    async def revoke_access(self, channel_id: str, user_id: str) -> None:
        ...

    async def send_message(
        self,
        channel_id: str,
        content: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None,
        view: Optional[discord.ui.View] = None,
        archive: Optional[TranscriptArchive] = None,
    ) -> None:
        ...

    async def channel_name(self, channel_id: str) -> str:
        ...


# =============================================================================
# Discord Implementation
# =============================================================================

class DiscordGateway:
    """ChannelGateway backed by a discord.py client."""

    def __init__(self, bot: discord.Client) -> None:
        self.bot = bot

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def _guild(self, guild_id: str) -> discord.Guild:
        guild = self.bot.get_guild(int(guild_id))
        if guild is None:
            guild = await self.bot.fetch_guild(int(guild_id))
        return guild

    async def _channel(self, channel_id: str) -> discord.abc.GuildChannel:
        channel = self.bot.get_channel(int(channel_id))
        if channel is None:
            channel = await self.bot.fetch_channel(int(channel_id))
        return channel

    async def _user(
        self, guild: discord.Guild, user_id: str
    ) -> Union[discord.Member, discord.User]:
        """Resolve a user for an overwrite, including users who left the guild."""
        member = guild.get_member(int(user_id))
        if member is not None:
            return member
        user = self.bot.get_user(int(user_id))
        if user is not None:
            return user
        return await self.bot.fetch_user(int(user_id))

    def _fail(self, operation: str, target: str, error: discord.DiscordException) -> GatewayError:
        logger.warning("Gateway Call Failed", [
            ("Operation", operation),
            ("Target", target),
            ("Error", f"{type(error).__name__}: {error}"),
        ])
        return GatewayError(operation, error)

    # -------------------------------------------------------------------------
    # Channels
    # -------------------------------------------------------------------------

    async def find_text_channel(self, guild_id: str, name: str) -> Optional[str]:
        """Find a text channel by name, case-insensitively."""
        try:
            guild = await self._guild(guild_id)
        except discord.DiscordException as e:
            raise self._fail("find_text_channel", guild_id, e) from e

        wanted = name.lower()
        for channel in guild.text_channels:
            if channel.name.lower() == wanted:
                return str(channel.id)
        return None

    async def create_channel(self, guild_id: str, name: str, overwrites: List[Overwrite]) -> str:
        try:
            guild = await self._guild(guild_id)
            resolved: Dict[Union[discord.Role, discord.Member, discord.Object], discord.PermissionOverwrite] = {}
            for ow in overwrites:
                if ow.kind == PRINCIPAL_ROLE:
                    target = guild.get_role(int(ow.principal_id)) or discord.Object(id=int(ow.principal_id), type=discord.Role)
                else:
                    target = guild.get_member(int(ow.principal_id)) or discord.Object(id=int(ow.principal_id), type=discord.Member)
                resolved[target] = discord.PermissionOverwrite(
                    view_channel=ow.view,
                    send_messages=ow.send,
                )
            channel = await guild.create_text_channel(name, overwrites=resolved)
        except discord.DiscordException as e:
            raise self._fail("create_channel", f"{guild_id}/{name}", e) from e
        return str(channel.id)

    async def set_channel_parent(self, channel_id: str, category_id: str) -> None:
        try:
            channel = await self._channel(channel_id)
            category = await self._channel(category_id)
            if not isinstance(category, discord.CategoryChannel):
                raise discord.InvalidData(f"Channel {category_id} is not a category")
            # sync_permissions=False keeps the ticket's member overwrites
            await channel.edit(category=category, sync_permissions=False)
        except discord.DiscordException as e:
            raise self._fail("set_channel_parent", channel_id, e) from e

    async def delete_channel(self, channel_id: str, reason: str) -> None:
        """Delete a channel. A channel that is already gone counts as deleted."""
        try:
            channel = await self._channel(channel_id)
            await channel.delete(reason=reason)
        except discord.NotFound:
            logger.debug("Channel Already Deleted", [("Channel", channel_id)])
        except discord.DiscordException as e:
            raise self._fail("delete_channel", channel_id, e) from e

    async def channel_name(self, channel_id: str) -> str:
        try:
            channel = await self._channel(channel_id)
        except discord.DiscordException as e:
            raise self._fail("channel_name", channel_id, e) from e
        return channel.name

    # -------------------------------------------------------------------------
    # Permissions
    # -------------------------------------------------------------------------

    async def grant_access(
        self, channel_id: str, user_id: str, view: bool = True, send: bool = True
    ) -> None:
        try:
            channel = await self._channel(channel_id)
            user = await self._user(channel.guild, user_id)
            await channel.set_permissions(user, view_channel=view, send_messages=send)
        except discord.DiscordException as e:
            raise self._fail("grant_access", f"{channel_id}/{user_id}", e) from e

    async def revoke_access(self, channel_id: str, user_id: str) -> None:
        try:
            channel = await self._channel(channel_id)
            user = await self._user(channel.guild, user_id)
            await channel.set_permissions(user, overwrite=None)
        except discord.DiscordException as e:
            raise self._fail("revoke_access", f"{channel_id}/{user_id}", e) from e

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    async def send_message(
        self,
        channel_id: str,
        content: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None,
        view: Optional[discord.ui.View] = None,
        archive: Optional[TranscriptArchive] = None,
    ) -> None:
        kwargs = {}
        if embed is not None:
            kwargs["embed"] = embed
        if view is not None:
            kwargs["view"] = view
        if archive is not None:
            kwargs["file"] = discord.File(io.BytesIO(archive.data), filename=archive.filename)

        try:
            channel = await self._channel(channel_id)
            if not isinstance(channel, discord.abc.Messageable):
                raise discord.InvalidData(f"Channel {channel_id} cannot receive messages")
            await channel.send(
                content,
                allowed_mentions=discord.AllowedMentions(users=True, roles=True, everyone=False),
                **kwargs,
            )
        except discord.DiscordException as e:
            raise self._fail("send_message", channel_id, e) from e


__all__ = [
    "PRINCIPAL_ROLE",
    "PRINCIPAL_MEMBER",
    "Overwrite",
    "ChannelGateway",
    "DiscordGateway",
]
