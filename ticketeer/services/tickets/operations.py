"""
Ticket Operations Mixin
=======================

Lifecycle transitions: create, add/remove member, close, reopen,
delete and on-demand transcript.

DESIGN:
    Every operation re-reads the ticket and community config from the
    database, asks the policy, and only then touches Discord or the
    store. A denial therefore never leaves a partial change behind.

    Close, reopen and delete run their gateway calls one after another
    and keep going past individual failures, collecting them as
    StepFailure entries on the result.
"""

import sqlite3
from typing import TYPE_CHECKING, List, Optional, Tuple

from ticketeer.core.database import (
    TICKET_STATUS_CLOSED,
    CommunityConfigRecord,
    TicketRecord,
)
from ticketeer.core.errors import (
    DuplicateTicketError,
    ExportError,
    GatewayError,
    NotATicketChannelError,
    TicketNotClosedError,
)
from ticketeer.core.logger import logger

from .actions import ActionKind, Actor
from .constants import (
    DELETE_EMOJI,
    DELETE_REASON,
    TICKET_EMOJI,
    TRANSCRIPT_EMOJI,
    ticket_channel_name,
)
from .embeds import build_welcome_embed, welcome_content
from .gateway import PRINCIPAL_MEMBER, PRINCIPAL_ROLE, Overwrite
from .policy import can_perform, is_staff
from .results import CloseResult, CreateResult, DeleteResult, ReopenResult, StepFailure
from .transcript import TranscriptArchive

if TYPE_CHECKING:
    from .service import TicketService


class OperationsMixin:
    """Mixin for ticket lifecycle operations."""

    # =========================================================================
    # Helpers
    # =========================================================================

    def _load(
        self: "TicketService",
        channel_id: str,
    ) -> Tuple[Optional[TicketRecord], Optional[CommunityConfigRecord]]:
        """Fresh ticket row and its guild's config. Both may be None."""
        ticket = self.db.get_ticket(channel_id)
        config = self.db.get_community_config(ticket["guild_id"]) if ticket else None
        return ticket, config

    async def _display_name(self: "TicketService", channel_id: str) -> str:
        try:
            return await self.gateway.channel_name(channel_id)
        except GatewayError:
            return channel_id

    async def _export_for(
        self: "TicketService",
        step: str,
        channel_id: str,
        failures: List[StepFailure],
    ) -> Optional[TranscriptArchive]:
        """
        Export a transcript as part of close or delete.

        Raises ExportError only when the abort policy is active; otherwise
        the failure is recorded and the operation carries on.
        """
        try:
            return await self.exporter.export(channel_id)
        except ExportError as e:
            if self.abort_on_transcript_failure:
                logger.warning("Transcript Export Failed, Aborting", [
                    ("Step", step),
                    ("Channel", channel_id),
                    ("Error", e.message),
                ])
                raise
            logger.warning("Transcript Export Failed, Continuing", [
                ("Step", step),
                ("Channel", channel_id),
                ("Error", e.message),
            ])
            failures.append(StepFailure("export_transcript", channel_id, e))
            return None

    async def _post_log(
        self: "TicketService",
        config: Optional[CommunityConfigRecord],
        content: str,
        transcript: Optional[TranscriptArchive],
        failures: List[StepFailure],
    ) -> bool:
        """Post a transcript message to the guild's log channel, if one is set."""
        if not config or not config.get("log_channel_id"):
            return False

        if transcript is None:
            content = f"{content}\n⚠️ Transcript unavailable."

        try:
            await self.gateway.send_message(
                config["log_channel_id"], content, archive=transcript
            )
        except GatewayError as e:
            failures.append(StepFailure("post_log", config["log_channel_id"], e))
            return False
        return True

    # =========================================================================
    # Create Ticket
    # =========================================================================

    async def create_ticket(
        self: "TicketService",
        guild_id: str,
        actor: Actor,
        panel_name: str,
    ) -> CreateResult:
        """
        Open a private ticket channel for the requester.

        The channel is created first and the row is written only after
        that succeeds. If the row cannot be written the channel is
        removed again.

        Raises:
            NotConfiguredError: The guild has no support role configured.
            DuplicateTicketError: The requester's ticket channel already exists.
            GatewayError: Channel creation failed.
        """
        config = self.db.get_community_config(guild_id)
        can_perform(ActionKind.CREATE, actor, config).raise_if_denied()

        name = ticket_channel_name(actor.handle)

        async with self._creation_lock(guild_id, name):
            existing = await self.gateway.find_text_channel(guild_id, name)
            if existing:
                raise DuplicateTicketError(existing)

            overwrites = [
                Overwrite(guild_id, PRINCIPAL_ROLE, view=False),
                Overwrite(actor.user_id, PRINCIPAL_MEMBER, view=True, send=True),
                Overwrite(config["support_role_id"], PRINCIPAL_ROLE, view=True, send=True),
            ]
            channel_id = await self.gateway.create_channel(guild_id, name, overwrites)

            try:
                ticket = self.db.create_ticket(channel_id, guild_id, actor.user_id, panel_name)
            except sqlite3.Error as e:
                logger.error("Ticket Row Insert Failed", [
                    ("Channel", channel_id),
                    ("Owner", actor.user_id),
                    ("Error", str(e)),
                ])
                try:
                    await self.gateway.delete_channel(channel_id, "Ticket could not be recorded")
                except GatewayError:
                    logger.warning("Orphan Ticket Channel Left Behind", [("Channel", channel_id)])
                raise

        panel = self.panels.get_panel(guild_id, panel_name)
        embed = build_welcome_embed(
            channel_id,
            actor.user_id,
            panel,
            config.get("panel_color") or self.default_panel_color,
        )

        welcome_sent = True
        try:
            await self.gateway.send_message(
                channel_id,
                welcome_content(actor.user_id, config["support_role_id"]),
                embed=embed,
            )
        except GatewayError:
            welcome_sent = False

        logger.tree("Ticket Created", [
            ("Guild", guild_id),
            ("Channel", f"{name} ({channel_id})"),
            ("Owner", f"{actor.handle} ({actor.user_id})"),
            ("Panel", panel_name if panel else f"{panel_name} (unresolved)"),
            ("Welcome Sent", "Yes" if welcome_sent else "No"),
        ], emoji=TICKET_EMOJI)

        return CreateResult(ticket=ticket, welcome_sent=welcome_sent)

    # =========================================================================
    # Members
    # =========================================================================

    async def add_member(
        self: "TicketService",
        channel_id: str,
        actor: Actor,
        user_id: str,
    ) -> bool:
        """
        Give a user access to a ticket.

        Returns:
            True if the user was not already a recorded member.
        """
        ticket, config = self._load(channel_id)
        can_perform(
            ActionKind.ADD_MEMBER, actor, config, ticket,
            admins_are_staff=self.admins_are_staff,
        ).raise_if_denied()

        await self.gateway.grant_access(channel_id, user_id)
        added = self.db.add_ticket_member(channel_id, user_id)

        logger.tree("Ticket Member Added", [
            ("Channel", channel_id),
            ("User", user_id),
            ("By", f"{actor.handle} ({actor.user_id})"),
            ("New", "Yes" if added else "No (already a member)"),
        ], emoji="➕")

        return added

    async def remove_member(
        self: "TicketService",
        channel_id: str,
        actor: Actor,
        user_id: str,
    ) -> bool:
        """
        Take a user's access to a ticket away. The owner cannot be removed.

        Returns:
            True if a member row was deleted.
        """
        ticket, config = self._load(channel_id)
        can_perform(
            ActionKind.REMOVE_MEMBER, actor, config, ticket,
            target_id=user_id,
            admins_are_staff=self.admins_are_staff,
        ).raise_if_denied()

        await self.gateway.revoke_access(channel_id, user_id)
        removed = self.db.remove_ticket_member(channel_id, user_id)

        logger.tree("Ticket Member Removed", [
            ("Channel", channel_id),
            ("User", user_id),
            ("By", f"{actor.handle} ({actor.user_id})"),
        ], emoji="➖")

        return removed

    # =========================================================================
    # Close / Reopen
    # =========================================================================

    async def close_ticket(
        self: "TicketService",
        channel_id: str,
        actor: Actor,
    ) -> CloseResult:
        """
        Close a ticket and archive its transcript.

        The ticket is marked closed even when later steps fail. The owner
        and the closing staff member keep access; every other member is
        stripped. Closing an already closed ticket repeats the work.
        """
        ticket, config = self._load(channel_id)
        can_perform(
            ActionKind.CLOSE, actor, config, ticket,
            admins_are_staff=self.admins_are_staff,
        ).raise_if_denied()

        failures: List[StepFailure] = []
        transcript = await self._export_for("close", channel_id, failures)

        self.db.close_ticket(channel_id)

        if config and config.get("closed_category_id"):
            try:
                await self.gateway.set_channel_parent(channel_id, config["closed_category_id"])
            except GatewayError as e:
                failures.append(StepFailure("set_channel_parent", config["closed_category_id"], e))

        keep_actor = is_staff(actor, config, self.admins_are_staff)
        stripped: List[str] = []
        for member_id in self.db.get_ticket_members(channel_id):
            if member_id == ticket["owner_id"]:
                continue
            if keep_actor and member_id == actor.user_id:
                continue
            try:
                await self.gateway.revoke_access(channel_id, member_id)
                stripped.append(member_id)
            except GatewayError as e:
                failures.append(StepFailure("revoke_access", member_id, e))

        name = await self._display_name(channel_id)
        log_posted = await self._post_log(
            config,
            f"{TRANSCRIPT_EMOJI} Transcript for ticket {name} (Closed by {actor.handle})",
            transcript,
            failures,
        )

        result = CloseResult(
            ticket=self.db.get_ticket(channel_id) or ticket,
            transcript=transcript,
            stripped=stripped,
            log_posted=log_posted,
            failures=failures,
        )

        logger.tree("Ticket Closed", [
            ("Channel", f"{name} ({channel_id})"),
            ("Closed By", f"{actor.handle} ({actor.user_id})"),
            ("Members Stripped", str(len(stripped))),
            ("Transcript", "Saved" if transcript else "Unavailable"),
            ("Log Posted", "Yes" if log_posted else "No"),
            ("Failures", str(len(failures))),
        ], emoji="🔒")
        for failure in failures:
            logger.warning("Ticket Close Step Failed", [
                ("Channel", channel_id),
                ("Step", failure.step),
                ("Target", failure.target or "-"),
                ("Error", failure.error.message),
            ])

        return result

    async def reopen_ticket(
        self: "TicketService",
        channel_id: str,
        actor: Actor,
    ) -> ReopenResult:
        """
        Reopen a closed ticket and re-admit every recorded member.

        The status flip is a single conditional update, so when two staff
        members reopen at once only the first one re-grants access.
        """
        ticket, config = self._load(channel_id)
        if ticket is None:
            raise NotATicketChannelError()
        if ticket["status"] != TICKET_STATUS_CLOSED:
            raise TicketNotClosedError()

        can_perform(
            ActionKind.REOPEN, actor, config, ticket,
            admins_are_staff=self.admins_are_staff,
        ).raise_if_denied()

        if not self.db.reopen_ticket(channel_id):
            raise TicketNotClosedError()

        failures: List[StepFailure] = []
        regranted: List[str] = []
        for member_id in self.db.get_ticket_members(channel_id):
            try:
                await self.gateway.grant_access(channel_id, member_id)
                regranted.append(member_id)
            except GatewayError as e:
                failures.append(StepFailure("grant_access", member_id, e))
                logger.warning("Ticket Reopen Grant Failed", [
                    ("Channel", channel_id),
                    ("User", member_id),
                    ("Error", e.message),
                ])

        logger.tree("Ticket Reopened", [
            ("Channel", channel_id),
            ("Reopened By", f"{actor.handle} ({actor.user_id})"),
            ("Members Re-added", str(len(regranted))),
            ("Failures", str(len(failures))),
        ], emoji="🔓")

        return ReopenResult(
            ticket=self.db.get_ticket(channel_id) or ticket,
            regranted=regranted,
            failures=failures,
        )

    # =========================================================================
    # Delete
    # =========================================================================

    async def delete_ticket(
        self: "TicketService",
        channel_id: str,
        actor: Actor,
    ) -> DeleteResult:
        """
        Archive and permanently remove a ticket with its channel.

        Rows are deleted before the channel. If the channel deletion
        fails the rows are put back and GatewayError is raised, so the
        ticket stays whole.
        """
        ticket, config = self._load(channel_id)
        can_perform(
            ActionKind.DELETE, actor, config, ticket,
            admins_are_staff=self.admins_are_staff,
        ).raise_if_denied()

        failures: List[StepFailure] = []
        transcript = await self._export_for("delete", channel_id, failures)

        name = await self._display_name(channel_id)
        members = self.db.get_ticket_members(channel_id)
        self.db.delete_ticket(channel_id)

        try:
            await self.gateway.delete_channel(channel_id, DELETE_REASON)
        except GatewayError:
            self.db.restore_ticket(ticket, members)
            logger.error("Ticket Delete Failed", [
                ("Channel", f"{name} ({channel_id})"),
                ("Deleted By", f"{actor.handle} ({actor.user_id})"),
                ("Rows", "Restored"),
            ])
            raise

        # Only announced once the channel is really gone
        log_posted = await self._post_log(
            config,
            f"{DELETE_EMOJI} Transcript for DELETED ticket {name} (Deleted by {actor.handle})",
            transcript,
            failures,
        )

        logger.tree("Ticket Deleted", [
            ("Channel", f"{name} ({channel_id})"),
            ("Deleted By", f"{actor.handle} ({actor.user_id})"),
            ("Members", str(len(members))),
            ("Transcript", "Saved" if transcript else "Unavailable"),
            ("Log Posted", "Yes" if log_posted else "No"),
        ], emoji=DELETE_EMOJI)

        return DeleteResult(
            channel_id=channel_id,
            transcript=transcript,
            log_posted=log_posted,
            failures=failures,
        )

    # =========================================================================
    # Transcript
    # =========================================================================

    async def export_transcript(
        self: "TicketService",
        channel_id: str,
        actor: Actor,
    ) -> TranscriptArchive:
        """Render a transcript on demand. Changes nothing."""
        ticket, config = self._load(channel_id)
        can_perform(
            ActionKind.TRANSCRIPT, actor, config, ticket,
            admins_are_staff=self.admins_are_staff,
        ).raise_if_denied()

        archive = await self.exporter.export(channel_id)

        logger.tree("Transcript Requested", [
            ("Channel", channel_id),
            ("By", f"{actor.handle} ({actor.user_id})"),
            ("File", archive.filename),
        ], emoji=TRANSCRIPT_EMOJI)

        return archive


__all__ = ["OperationsMixin"]
