"""
Ticket System Embeds
====================

Embed builder functions for panels and ticket welcome messages.
"""

from typing import Optional

import discord

from ticketeer.core.constants import (
    DEFAULT_PANEL_COLOR,
    DEFAULT_TICKET_TITLE,
    EMBED_TITLE_MAX_LENGTH,
    EMBED_DESCRIPTION_MAX_LENGTH,
)
from ticketeer.core.database import PanelRecord


def _color(value: Optional[str]) -> discord.Color:
    return discord.Color.from_str(value or DEFAULT_PANEL_COLOR)


# =============================================================================
# Panel Embed
# =============================================================================

def build_panel_embed(panel: PanelRecord, color: Optional[str] = None) -> discord.Embed:
    """Build the embed posted above a panel's Create Ticket button."""
    embed = discord.Embed(
        title=panel["title"][:EMBED_TITLE_MAX_LENGTH],
        description=panel["description"][:EMBED_DESCRIPTION_MAX_LENGTH],
        color=_color(color),
    )
    if panel.get("image_url"):
        embed.set_image(url=panel["image_url"])
    return embed


# =============================================================================
# Ticket Welcome Embed
# =============================================================================

def build_welcome_embed(
    channel_id: str,
    owner_id: str,
    panel: Optional[PanelRecord] = None,
    color: Optional[str] = None,
) -> discord.Embed:
    """
    Build the first message in a new ticket channel.

    The panel's title and description are reused when the panel still
    exists; otherwise a generic greeting is shown.
    """
    title = panel["title"] if panel else DEFAULT_TICKET_TITLE
    description = (
        panel["description"] if panel
        else f"Hello <@{owner_id}>, support will be with you shortly!"
    )

    embed = discord.Embed(
        title=title[:EMBED_TITLE_MAX_LENGTH],
        description=description[:EMBED_DESCRIPTION_MAX_LENGTH],
        color=_color(color),
    )
    embed.set_footer(text=f"Ticket ID: {channel_id}")
    return embed


def welcome_content(owner_id: str, support_role_id: str) -> str:
    """Ping line sent with the welcome embed."""
    return f"<@{owner_id}> <@&{support_role_id}>"


__all__ = [
    "build_panel_embed",
    "build_welcome_embed",
    "welcome_content",
]
