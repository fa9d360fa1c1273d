"""
Ticketeer - Ticket Command Cog
==============================

The /ticket slash command group.

DESIGN:
    Each subcommand builds a typed TicketAction and hands it to
    TicketService.dispatch(). The cog owns nothing but Discord
    plumbing: option parsing, deferral and reply visibility.

Features:
    - /ticket setup <role> <category> [log-channel] [color]  (admin)
    - /ticket panel <name> <channel> [title] [description] [image-url]  (admin)
    - /ticket add <user>, /ticket remove <user>
    - /ticket close, /ticket open, /ticket delete
    - /ticket transcript
"""

import io
from typing import Any, List, Optional, Tuple, TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from ticketeer.core.errors import TicketError
from ticketeer.core.logger import logger
from ticketeer.services.tickets import (
    ActionContext,
    Actor,
    AddMember,
    CloseTicket,
    DefinePanel,
    DeleteTicket,
    RemoveMember,
    ReopenTicket,
    RequestTranscript,
    SetupCommunity,
    TicketAction,
)
from ticketeer.services.tickets.constants import ERROR_EMOJI, SUCCESS_EMOJI
from ticketeer.services.tickets.results import StepFailure

if TYPE_CHECKING:
    from ticketeer.bot import TicketeerBot


GENERIC_ERROR = "Something went wrong. Please try again."
MAX_FAILURES_SHOWN = 5


def _format_failures(failures: List[StepFailure]) -> str:
    """Suffix listing steps that did not apply, empty when all succeeded."""
    if not failures:
        return ""
    lines = [f"\n⚠️ {len(failures)} step(s) did not complete:"]
    lines.extend(f"• {f.describe()}" for f in failures[:MAX_FAILURES_SHOWN])
    if len(failures) > MAX_FAILURES_SHOWN:
        lines.append(f"• ...and {len(failures) - MAX_FAILURES_SHOWN} more")
    return "\n".join(lines)


# =============================================================================
# Ticket Cog
# =============================================================================

class TicketCog(commands.Cog):
    """Cog for the ticket command group."""

    def __init__(self, bot: "TicketeerBot") -> None:
        self.bot = bot

        logger.tree("Ticket Cog Loaded", [
            ("Commands", "/ticket setup, panel, add, remove, close, open, delete, transcript"),
        ], emoji="🎫")

    ticket_group = app_commands.Group(
        name="ticket",
        description="Support ticket management",
        guild_only=True,
    )

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _context(interaction: discord.Interaction) -> ActionContext:
        return ActionContext(
            guild_id=str(interaction.guild_id),
            channel_id=str(interaction.channel_id),
            actor=Actor.from_member(interaction.user),
        )

    async def _send(
        self,
        interaction: discord.Interaction,
        content: str,
        ephemeral: bool,
        **kwargs: Any,
    ) -> None:
        """Reply, or follow up if the interaction was already answered."""
        try:
            if interaction.response.is_done():
                await interaction.followup.send(content, ephemeral=ephemeral, **kwargs)
            else:
                await interaction.response.send_message(content, ephemeral=ephemeral, **kwargs)
        except discord.NotFound:
            # The ticket channel may already be gone after /ticket delete
            logger.debug("Interaction Reply Target Gone", [
                ("User", str(interaction.user.id)),
                ("Channel", str(interaction.channel_id)),
            ])

    async def _dispatch(
        self,
        interaction: discord.Interaction,
        action: TicketAction,
    ) -> Tuple[bool, Any]:
        """
        Run an action and report failures to the user.

        Returns:
            Tuple of (succeeded, operation result).
        """
        try:
            result = await self.bot.ticket_service.dispatch(self._context(interaction), action)
        except TicketError as e:
            logger.debug("Ticket Action Rejected", [
                ("Action", action.kind.value),
                ("User", f"{interaction.user.name} ({interaction.user.id})"),
                ("Reason", e.message),
            ])
            await self._send(interaction, f"{ERROR_EMOJI} Error: {e.message}", ephemeral=True)
            return False, None
        except Exception as e:
            logger.error("Ticket Command Failed", [
                ("Action", action.kind.value),
                ("User", f"{interaction.user.name} ({interaction.user.id})"),
                ("Channel", str(interaction.channel_id)),
                ("Error", f"{type(e).__name__}: {e}"),
            ])
            await self._send(interaction, f"{ERROR_EMOJI} Error: {GENERIC_ERROR}", ephemeral=True)
            return False, None
        return True, result

    # =========================================================================
    # Admin Commands
    # =========================================================================

    @ticket_group.command(name="setup", description="Configure the ticket system")
    @app_commands.rename(log_channel="log-channel")
    @app_commands.describe(
        role="Support staff role",
        category="Category closed tickets are moved to",
        log_channel="Channel that receives transcripts",
        color="Panel color as a hex code, e.g. #FFC0CB",
    )
    async def setup_command(
        self,
        interaction: discord.Interaction,
        role: discord.Role,
        category: discord.CategoryChannel,
        log_channel: Optional[discord.TextChannel] = None,
        color: Optional[str] = None,
    ) -> None:
        ok, record = await self._dispatch(interaction, SetupCommunity(
            support_role_id=str(role.id),
            closed_category_id=str(category.id),
            log_channel_id=str(log_channel.id) if log_channel else None,
            panel_color=color,
        ))
        if not ok:
            return

        await self._send(
            interaction,
            f"{SUCCESS_EMOJI} Ticket system configured!\n"
            f"• Support Role: {role.mention}\n"
            f"• Closed Tickets: {category.mention}\n"
            f"• Log Channel: {log_channel.mention if log_channel else 'Not set'}\n"
            f"• Panel Color: {record['panel_color']}",
            ephemeral=True,
        )

    @ticket_group.command(name="panel", description="Post a ticket creation panel")
    @app_commands.rename(image_url="image-url")
    @app_commands.describe(
        name="Panel name, used in the button ID",
        channel="Channel to post the panel in",
        title="Panel title",
        description="Panel description",
        image_url="Image shown on the panel",
    )
    async def panel_command(
        self,
        interaction: discord.Interaction,
        name: str,
        channel: discord.TextChannel,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> None:
        await interaction.response.defer(ephemeral=True)

        ok, panel = await self._dispatch(interaction, DefinePanel(
            name=name,
            channel_id=str(channel.id),
            title=title,
            description=description,
            image_url=image_url,
        ))
        if not ok:
            return

        await self._send(
            interaction,
            f"{SUCCESS_EMOJI} Created {panel['panel_name']} ticket panel in {channel.mention}!",
            ephemeral=True,
        )

    # =========================================================================
    # Member Commands
    # =========================================================================

    @ticket_group.command(name="add", description="Add a user to this ticket")
    @app_commands.describe(user="User to add")
    async def add_command(self, interaction: discord.Interaction, user: discord.Member) -> None:
        ok, _ = await self._dispatch(interaction, AddMember(user_id=str(user.id)))
        if ok:
            await self._send(interaction, f"{SUCCESS_EMOJI} Added {user.mention} to the ticket!", ephemeral=False)

    @ticket_group.command(name="remove", description="Remove a user from this ticket")
    @app_commands.describe(user="User to remove")
    async def remove_command(self, interaction: discord.Interaction, user: discord.Member) -> None:
        ok, _ = await self._dispatch(interaction, RemoveMember(user_id=str(user.id)))
        if ok:
            await self._send(interaction, f"{SUCCESS_EMOJI} Removed {user.mention} from the ticket!", ephemeral=False)

    # =========================================================================
    # Lifecycle Commands
    # =========================================================================

    @ticket_group.command(name="close", description="Close this ticket")
    async def close_command(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer(thinking=True)

        ok, result = await self._dispatch(interaction, CloseTicket())
        if not ok:
            return

        if result.transcript is not None:
            message = f"{SUCCESS_EMOJI} Ticket closed! The transcript has been saved."
        else:
            message = f"{SUCCESS_EMOJI} Ticket closed! The transcript could not be generated."
        await self._send(interaction, message + _format_failures(result.failures), ephemeral=False)

    @ticket_group.command(name="open", description="Reopen this closed ticket")
    async def open_command(self, interaction: discord.Interaction) -> None:
        # Re-granting every member can outlast the interaction window
        await interaction.response.defer(thinking=True)

        ok, result = await self._dispatch(interaction, ReopenTicket())
        if not ok:
            return

        await self._send(
            interaction,
            f"{SUCCESS_EMOJI} Ticket reopened! All original members have been readded."
            + _format_failures(result.failures),
            ephemeral=False,
        )

    @ticket_group.command(name="delete", description="Delete this ticket permanently")
    async def delete_command(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer(ephemeral=True, thinking=True)

        ok, result = await self._dispatch(interaction, DeleteTicket())
        if not ok:
            return

        if result.transcript is not None:
            message = f"{SUCCESS_EMOJI} Ticket deleted! The transcript has been saved."
        else:
            message = f"{SUCCESS_EMOJI} Ticket deleted! The transcript could not be generated."
        await self._send(interaction, message + _format_failures(result.failures), ephemeral=True)

    @ticket_group.command(name="transcript", description="Generate a transcript of this ticket")
    async def transcript_command(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer(ephemeral=True, thinking=True)

        ok, archive = await self._dispatch(interaction, RequestTranscript())
        if not ok:
            return

        await self._send(
            interaction,
            "Here is the transcript of this ticket:",
            ephemeral=True,
            file=discord.File(io.BytesIO(archive.data), filename=archive.filename),
        )


# =============================================================================
# Setup
# =============================================================================

async def setup(bot: "TicketeerBot") -> None:
    """Load the Ticket cog."""
    await bot.add_cog(TicketCog(bot))
