"""
Ticketeer - Main Bot Class
==========================

Discord client that wires the ticket system together.

DESIGN:
    The bot is the composition root. It receives the config and the
    database from main.py and builds everything else in setup_hook:

    1. aiohttp session for transcript image downloads
    2. DiscordGateway + HtmlTranscriptExporter
    3. PanelRegistry + TicketService
    4. Command cogs, persistent panel buttons, command tree sync
"""

from datetime import datetime
from typing import Optional

import aiohttp
import discord
from discord.ext import commands

from ticketeer.core.config import Config
from ticketeer.core.database import DatabaseManager
from ticketeer.core.logger import logger
from ticketeer.services.tickets import (
    DiscordGateway,
    HtmlTranscriptExporter,
    PanelRegistry,
    TicketPanelButton,
    TicketService,
)


# =============================================================================
# TicketeerBot Class
# =============================================================================

class TicketeerBot(commands.Bot):
    """Support ticket bot."""

    def __init__(self, config: Config, db: DatabaseManager) -> None:
        self.config = config
        self.db = db

        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.start_time: datetime = datetime.now()
        self.http_session: Optional[aiohttp.ClientSession] = None
        self.ticket_service: Optional[TicketService] = None

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Build services, load cogs and sync commands before on_ready."""
        self.http_session = aiohttp.ClientSession()

        gateway = DiscordGateway(self)
        exporter = HtmlTranscriptExporter(
            self,
            session=self.http_session,
            embed_images=self.config.transcript_embed_images,
        )
        panels = PanelRegistry(self.db, gateway, self.config.default_panel_color)
        self.ticket_service = TicketService(
            self.db,
            gateway,
            exporter,
            panels,
            admins_are_staff=self.config.admins_are_staff,
            abort_on_transcript_failure=self.config.abort_on_transcript_failure,
            default_panel_color=self.config.default_panel_color,
        )

        from ticketeer.commands import COMMAND_COGS
        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
                logger.info(f"Cog Loaded: {cog.split('.')[-1]}")
            except commands.ExtensionError as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        # Panel buttons posted before a restart
        self.add_dynamic_items(TicketPanelButton)

        await self._sync_commands()

    async def _sync_commands(self) -> None:
        try:
            if self.config.sync_guild_id:
                guild = discord.Object(id=self.config.sync_guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                scope = f"Guild {self.config.sync_guild_id}"
            else:
                synced = await self.tree.sync()
                scope = "Global"
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [("Error", str(e))])
            return

        logger.tree("Commands Synced", [
            ("Count", str(len(synced))),
            ("Scope", scope),
        ], emoji="✅")

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        if not self.user:
            return

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
        ], emoji="🚀")

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def close(self) -> None:
        """Graceful shutdown with proper cleanup."""
        logger.info("Initiating Graceful Shutdown")

        if self.http_session and not self.http_session.closed:
            await self.http_session.close()

        self.db.close()
        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
        ], emoji="🛑")


__all__ = ["TicketeerBot"]
