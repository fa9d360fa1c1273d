"""
Ticket Service
==============

Entry point for every ticket action.

DESIGN:
    The service owns no state about tickets. It is handed the database,
    the channel gateway, the transcript exporter and the panel registry
    at construction, and every call reads what it needs fresh from the
    database.

    dispatch() maps the closed set of TicketAction variants onto the
    individual operations. Slash commands and buttons call the same
    methods.
"""

import asyncio
import weakref
from typing import Any, Optional, Tuple

from ticketeer.core.config import is_hex_color
from ticketeer.core.constants import DEFAULT_PANEL_COLOR
from ticketeer.core.database import CommunityConfigRecord, DatabaseManager
from ticketeer.core.errors import InvalidColorError, UnknownActionError
from ticketeer.core.logger import logger

from .actions import (
    ActionContext,
    ActionKind,
    Actor,
    AddMember,
    CloseTicket,
    CreateTicket,
    DefinePanel,
    DeleteTicket,
    ReopenTicket,
    RemoveMember,
    RequestTranscript,
    SetupCommunity,
    TicketAction,
)
from .gateway import ChannelGateway
from .operations import OperationsMixin
from .panels import PanelRegistry
from .policy import can_perform
from .transcript import TranscriptExporter


class TicketService(OperationsMixin):
    """
    Service for the ticket lifecycle.

    Attributes:
        db: The ticket store.
        gateway: Channel, permission and messaging calls.
        exporter: Transcript renderer.
        panels: Panel registry sharing the same store and gateway.
        admins_are_staff: Treat administrators as holders of the support role.
        abort_on_transcript_failure: Close and delete stop when export fails.
        default_panel_color: Color used when setup is given none.
    """

    def __init__(
        self,
        db: DatabaseManager,
        gateway: ChannelGateway,
        exporter: TranscriptExporter,
        panels: PanelRegistry,
        *,
        admins_are_staff: bool = False,
        abort_on_transcript_failure: bool = False,
        default_panel_color: str = DEFAULT_PANEL_COLOR,
    ) -> None:
        self.db = db
        self.gateway = gateway
        self.exporter = exporter
        self.panels = panels
        self.admins_are_staff = admins_are_staff
        self.abort_on_transcript_failure = abort_on_transcript_failure
        self.default_panel_color = default_panel_color
        self._creation_locks: "weakref.WeakValueDictionary[Tuple[str, str], asyncio.Lock]" = weakref.WeakValueDictionary()

        logger.tree("Ticket Service Initialized", [
            ("Admins Are Staff", "Yes" if admins_are_staff else "No"),
            ("Transcript Failure", "Abort" if abort_on_transcript_failure else "Continue"),
            ("Default Color", default_panel_color),
        ], emoji="🎫")

    def _creation_lock(self, guild_id: str, channel_name: str) -> asyncio.Lock:
        """
        One lock per prospective ticket channel, so double clicks serialize.

        Entries disappear once no create is holding or waiting on the lock.
        """
        return self._creation_locks.setdefault((guild_id, channel_name), asyncio.Lock())

    # =========================================================================
    # Community Setup
    # =========================================================================

    async def setup_community(
        self,
        guild_id: str,
        actor: Actor,
        support_role_id: str,
        closed_category_id: str,
        log_channel_id: Optional[str] = None,
        panel_color: Optional[str] = None,
    ) -> CommunityConfigRecord:
        """
        Replace the guild's ticket settings.

        Raises:
            ForbiddenError: The actor is not an administrator.
            InvalidColorError: panel_color is not a #RRGGBB hex code.
        """
        current = self.db.get_community_config(guild_id)
        can_perform(ActionKind.SETUP, actor, current).raise_if_denied()

        color = panel_color or self.default_panel_color
        if not is_hex_color(color):
            raise InvalidColorError(color)

        record = self.db.upsert_community_config(
            guild_id=guild_id,
            support_role_id=support_role_id,
            closed_category_id=closed_category_id,
            log_channel_id=log_channel_id,
            panel_color=color,
        )

        logger.tree("Ticket System Configured", [
            ("Guild", guild_id),
            ("Support Role", support_role_id),
            ("Closed Category", closed_category_id),
            ("Log Channel", log_channel_id or "Not set"),
            ("Panel Color", color),
            ("By", f"{actor.handle} ({actor.user_id})"),
        ], emoji="⚙️")

        return record

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def dispatch(self, ctx: ActionContext, action: TicketAction) -> Any:
        """
        Run one action on behalf of ctx.actor.

        Returns whatever the underlying operation returns.

        Raises:
            UnknownActionError: action is not a TicketAction variant.
        """
        actor = ctx.actor

        if isinstance(action, SetupCommunity):
            return await self.setup_community(
                ctx.guild_id, actor,
                action.support_role_id, action.closed_category_id,
                action.log_channel_id, action.panel_color,
            )
        if isinstance(action, DefinePanel):
            return await self.panels.define_panel(
                ctx.guild_id, actor, action.name, action.channel_id,
                action.title, action.description, action.image_url,
            )
        if isinstance(action, CreateTicket):
            return await self.create_ticket(ctx.guild_id, actor, action.panel_name)
        if isinstance(action, AddMember):
            return await self.add_member(ctx.channel_id, actor, action.user_id)
        if isinstance(action, RemoveMember):
            return await self.remove_member(ctx.channel_id, actor, action.user_id)
        if isinstance(action, CloseTicket):
            return await self.close_ticket(ctx.channel_id, actor)
        if isinstance(action, ReopenTicket):
            return await self.reopen_ticket(ctx.channel_id, actor)
        if isinstance(action, DeleteTicket):
            return await self.delete_ticket(ctx.channel_id, actor)
        if isinstance(action, RequestTranscript):
            return await self.export_transcript(ctx.channel_id, actor)

        raise UnknownActionError()


__all__ = ["TicketService"]
