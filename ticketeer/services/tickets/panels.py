"""
Ticket Panel Registry
=====================

Named "create ticket" panels, one per (guild, name).

DESIGN:
    A panel is a template. Defining one replaces any previous panel of
    the same name and posts a fresh button. Tickets only remember the
    panel name, so a panel that later disappears just falls back to the
    default welcome text.
"""

from typing import Optional

from ticketeer.core.constants import DEFAULT_PANEL_COLOR, DEFAULT_PANEL_DESCRIPTION, DEFAULT_PANEL_TITLE
from ticketeer.core.database import DatabaseManager, PanelRecord
from ticketeer.core.errors import TicketError
from ticketeer.core.logger import logger

from .actions import ActionKind, Actor
from .constants import PANEL_NAME_MAX_LENGTH, panel_name_from_custom_id
from .embeds import build_panel_embed
from .gateway import ChannelGateway
from .policy import can_perform
from .views import build_panel_view


class PanelRegistry:
    """Stores panels and publishes their buttons."""

    def __init__(
        self,
        db: DatabaseManager,
        gateway: ChannelGateway,
        default_panel_color: str = DEFAULT_PANEL_COLOR,
    ) -> None:
        self.db = db
        self.gateway = gateway
        self.default_panel_color = default_panel_color

    async def define_panel(
        self,
        guild_id: str,
        actor: Actor,
        name: str,
        channel_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> PanelRecord:
        """
        Create or replace a panel and post its button.

        Omitted fields take their defaults; nothing is merged with a
        previous definition.

        Raises:
            ForbiddenError: The actor is not an administrator.
            TicketError: The name is empty or too long for a button ID.
            GatewayError: The panel message could not be posted.
        """
        config = self.db.get_community_config(guild_id)
        can_perform(ActionKind.PANEL, actor, config).raise_if_denied()

        name = name.strip()
        if not name or len(name) > PANEL_NAME_MAX_LENGTH:
            raise TicketError(f"Panel name must be 1-{PANEL_NAME_MAX_LENGTH} characters!")

        panel = self.db.upsert_panel(
            guild_id=guild_id,
            panel_name=name,
            channel_id=channel_id,
            title=title or DEFAULT_PANEL_TITLE,
            description=description or DEFAULT_PANEL_DESCRIPTION,
            image_url=image_url,
        )

        color = (config or {}).get("panel_color") or self.default_panel_color
        await self.gateway.send_message(
            channel_id,
            embed=build_panel_embed(panel, color),
            view=build_panel_view(name),
        )

        logger.tree("Ticket Panel Published", [
            ("Guild", guild_id),
            ("Panel", name),
            ("Channel", channel_id),
            ("By", f"{actor.handle} ({actor.user_id})"),
        ], emoji="📋")

        return panel

    def get_panel(self, guild_id: str, name: str) -> Optional[PanelRecord]:
        return self.db.get_panel(guild_id, name)

    @staticmethod
    def resolve_on_create(custom_id: str) -> Optional[str]:
        """Map a panel button's custom ID back to the panel name."""
        return panel_name_from_custom_id(custom_id)


__all__ = ["PanelRegistry"]
