"""
Ticket System Views
===================

The persistent "Create Ticket" button posted by each panel.
"""

import re
from typing import TYPE_CHECKING

import discord

from ticketeer.core.errors import TicketError
from ticketeer.core.logger import logger

from .actions import Actor
from .constants import (
    ERROR_EMOJI,
    PANEL_BUTTON_LABEL,
    TICKET_EMOJI,
    panel_custom_id,
    panel_name_from_custom_id,
)

if TYPE_CHECKING:
    from ticketeer.bot import TicketeerBot


class TicketPanelButton(discord.ui.DynamicItem[discord.ui.Button], template=r"ticket_(?P<panel_name>.+)"):
    """
    Button that opens a ticket for the clicking member.

    Registered as a dynamic item so buttons posted before a restart keep
    working without their original View.
    """

    def __init__(self, panel_name: str) -> None:
        self.panel_name = panel_name
        super().__init__(
            discord.ui.Button(
                label=PANEL_BUTTON_LABEL,
                style=discord.ButtonStyle.primary,
                custom_id=panel_custom_id(panel_name),
                emoji=TICKET_EMOJI,
            )
        )

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Button,
        match: re.Match[str],
    ) -> "TicketPanelButton":
        return cls(panel_name_from_custom_id(item.custom_id) or match.group("panel_name"))

    async def callback(self, interaction: discord.Interaction) -> None:
        if interaction.guild is None or not isinstance(interaction.user, discord.Member):
            await interaction.response.send_message(
                f"{ERROR_EMOJI} Error: Tickets can only be created in a server!",
                ephemeral=True,
            )
            return

        logger.tree("Ticket Button Clicked", [
            ("User", f"{interaction.user.name} ({interaction.user.id})"),
            ("Guild", str(interaction.guild.id)),
            ("Panel", self.panel_name),
        ], emoji=TICKET_EMOJI)

        await interaction.response.defer(ephemeral=True, thinking=True)

        bot: "TicketeerBot" = interaction.client
        try:
            result = await bot.ticket_service.create_ticket(
                str(interaction.guild.id),
                Actor.from_member(interaction.user),
                self.panel_name,
            )
        except TicketError as e:
            await interaction.followup.send(f"{ERROR_EMOJI} Error: {e.message}", ephemeral=True)
            return
        except Exception as e:
            logger.error("Ticket Button Failed", [
                ("User", f"{interaction.user.name} ({interaction.user.id})"),
                ("Panel", self.panel_name),
                ("Error", f"{type(e).__name__}: {e}"),
            ])
            await interaction.followup.send(
                f"{ERROR_EMOJI} Error: Something went wrong creating your ticket.",
                ephemeral=True,
            )
            return

        await interaction.followup.send(
            f"Your ticket has been created: <#{result.ticket['channel_id']}>",
            ephemeral=True,
        )


def build_panel_view(panel_name: str) -> discord.ui.View:
    """View holding a single panel button, for posting with the panel embed."""
    view = discord.ui.View(timeout=None)
    view.add_item(TicketPanelButton(panel_name))
    return view


__all__ = ["TicketPanelButton", "build_panel_view"]
