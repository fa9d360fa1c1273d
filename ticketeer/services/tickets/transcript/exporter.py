"""
Ticket Transcript Exporter
==========================

Turns a ticket channel's full history into an HTML archive.

DESIGN:
    The lifecycle service only sees the TranscriptExporter protocol and
    the TranscriptArchive it returns. Every failure to read the channel
    or render the page surfaces as ExportError.

    Image attachments are downloaded and inlined as data URIs so the
    archive keeps working after Discord's CDN links expire. A failed or
    oversized download leaves that one image as a plain link.
"""

import asyncio
import base64
from typing import List, Optional, Protocol

import aiohttp
import discord

from ticketeer.core.constants import TRANSCRIPT_IMAGE_MAX_BYTES, TRANSCRIPT_DOWNLOAD_TIMEOUT
from ticketeer.core.errors import ExportError
from ticketeer.core.logger import logger
from .collectors import collect_transcript_messages
from .html_generator import generate_html_transcript, transcript_filename
from .models import TranscriptArchive, TranscriptAttachment, TranscriptMessage


class TranscriptExporter(Protocol):
    async def export(self, channel_id: str) -> TranscriptArchive:
        """Render the channel's full history. Raises ExportError."""
        ...


class HtmlTranscriptExporter:
    """
    Exporter backed by discord.py channel history.

    Attributes:
        bot: Client used to look up channels.
        session: Shared HTTP session for image downloads.
        embed_images: Inline image attachments as data URIs.
    """

    def __init__(
        self,
        bot: discord.Client,
        session: Optional[aiohttp.ClientSession] = None,
        embed_images: bool = True,
    ) -> None:
        self.bot = bot
        self.session = session
        self.embed_images = embed_images

    async def export(self, channel_id: str) -> TranscriptArchive:
        channel = await self._resolve_channel(channel_id)

        try:
            messages, mention_map = await collect_transcript_messages(channel)
        except discord.DiscordException as e:
            logger.error("Transcript Collection Failed", [
                ("Channel", f"{channel.name} ({channel.id})"),
                ("Error", str(e)),
            ])
            raise ExportError(e) from e

        inlined = 0
        if self.embed_images and self.session is not None:
            inlined = await self._inline_images(messages)

        html_content = generate_html_transcript(
            channel_name=channel.name,
            guild_name=channel.guild.name,
            messages=messages,
            mention_map=mention_map,
        )
        archive = TranscriptArchive(
            data=html_content.encode("utf-8"),
            filename=transcript_filename(channel.name),
        )

        logger.tree("Transcript Exported", [
            ("Channel", f"{channel.name} ({channel.id})"),
            ("Messages", str(len(messages))),
            ("Images Inlined", str(inlined)),
            ("Size", f"{archive.size / 1024:.1f} KB"),
        ], emoji="📝")

        return archive

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _resolve_channel(self, channel_id: str) -> discord.TextChannel:
        channel = self.bot.get_channel(int(channel_id))
        if channel is None:
            try:
                channel = await self.bot.fetch_channel(int(channel_id))
            except discord.DiscordException as e:
                raise ExportError(e) from e

        if not isinstance(channel, discord.TextChannel):
            raise ExportError(TypeError(f"Channel {channel_id} is not a text channel"))
        return channel

    async def _inline_images(self, messages: List[TranscriptMessage]) -> int:
        """Replace image links with data URIs. Returns how many were inlined."""
        inlined = 0
        for msg in messages:
            for att in msg.attachments:
                if not att.is_image or att.size > TRANSCRIPT_IMAGE_MAX_BYTES:
                    continue
                data_uri = await self._download_data_uri(att)
                if data_uri:
                    att.data_uri = data_uri
                    inlined += 1
        return inlined

    async def _download_data_uri(self, att: TranscriptAttachment) -> Optional[str]:
        try:
            async with self.session.get(
                att.url,
                timeout=aiohttp.ClientTimeout(total=TRANSCRIPT_DOWNLOAD_TIMEOUT),
            ) as resp:
                if resp.status != 200:
                    logger.debug("Transcript Image Skipped", [
                        ("File", att.filename),
                        ("Status", str(resp.status)),
                    ])
                    return None
                data = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Transcript Image Download Failed", [
                ("File", att.filename),
                ("Error", str(e) or type(e).__name__),
            ])
            return None

        if len(data) > TRANSCRIPT_IMAGE_MAX_BYTES:
            return None

        content_type = att.content_type or "image/png"
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{content_type};base64,{encoded}"


__all__ = ["TranscriptExporter", "HtmlTranscriptExporter"]
