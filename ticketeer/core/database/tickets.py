"""
Ticketeer - Database Ticket Operations Module
=============================================

Tickets and ticket membership.
"""

import time
from typing import Optional, List, TYPE_CHECKING

from ticketeer.core.logger import logger
from ticketeer.core.database.models import (
    TICKET_STATUS_OPEN,
    TICKET_STATUS_CLOSED,
    TicketRecord,
)

if TYPE_CHECKING:
    from ticketeer.core.database.manager import DatabaseManager


class TicketsMixin:
    """Mixin for ticket and ticket member database operations."""

    # =========================================================================
    # Tickets
    # =========================================================================

    def create_ticket(
        self: "DatabaseManager",
        channel_id: str,
        guild_id: str,
        owner_id: str,
        panel_name: str,
        created_at: Optional[int] = None,
    ) -> TicketRecord:
        """
        Insert an open ticket and its owner's membership row together.

        Returns:
            The stored ticket record.
        """
        created_at = int(time.time()) if created_at is None else created_at
        with self.transaction() as tx:
            tx.execute(
                """INSERT INTO tickets
                   (channel_id, guild_id, owner_id, panel_name, status, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (channel_id, guild_id, owner_id, panel_name, TICKET_STATUS_OPEN, created_at)
            )
            tx.execute(
                "INSERT OR IGNORE INTO ticket_members (channel_id, user_id) VALUES (?, ?)",
                (channel_id, owner_id)
            )

        return TicketRecord(
            channel_id=channel_id,
            guild_id=guild_id,
            owner_id=owner_id,
            panel_name=panel_name,
            status=TICKET_STATUS_OPEN,
            created_at=created_at,
            closed_at=None,
        )

    def get_ticket(self: "DatabaseManager", channel_id: str) -> Optional[TicketRecord]:
        """Get a ticket by its channel ID."""
        row = self.fetchone("SELECT * FROM tickets WHERE channel_id = ?", (channel_id,))
        return dict(row) if row else None

    def close_ticket(
        self: "DatabaseManager",
        channel_id: str,
        closed_at: Optional[int] = None,
    ) -> bool:
        """
        Mark a ticket closed.

        Closing an already closed ticket refreshes closed_at, so two
        racing closes both succeed.
        """
        closed_at = int(time.time()) if closed_at is None else closed_at
        cursor = self.execute(
            "UPDATE tickets SET status = ?, closed_at = ? WHERE channel_id = ?",
            (TICKET_STATUS_CLOSED, closed_at, channel_id)
        )
        return cursor.rowcount > 0

    def reopen_ticket(self: "DatabaseManager", channel_id: str) -> bool:
        """
        Reopen a closed ticket.

        The status check and update are one statement, so only one of two
        racing reopens wins. closed_at is kept as history.
        """
        cursor = self.execute(
            "UPDATE tickets SET status = ? WHERE channel_id = ? AND status = ?",
            (TICKET_STATUS_OPEN, channel_id, TICKET_STATUS_CLOSED)
        )
        return cursor.rowcount > 0

    def delete_ticket(self: "DatabaseManager", channel_id: str) -> bool:
        """Delete a ticket and all of its member rows."""
        with self.transaction() as tx:
            tx.execute("DELETE FROM ticket_members WHERE channel_id = ?", (channel_id,))
            cursor = tx.execute("DELETE FROM tickets WHERE channel_id = ?", (channel_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug("Ticket Rows Deleted", [("Channel", channel_id)])
        return deleted

    def restore_ticket(
        self: "DatabaseManager",
        ticket: TicketRecord,
        member_ids: List[str],
    ) -> None:
        """Re-insert a deleted ticket and its members exactly as they were."""
        with self.transaction() as tx:
            tx.execute(
                """INSERT OR REPLACE INTO tickets
                   (channel_id, guild_id, owner_id, panel_name, status, created_at, closed_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    ticket["channel_id"], ticket["guild_id"], ticket["owner_id"],
                    ticket["panel_name"], ticket["status"], ticket["created_at"],
                    ticket["closed_at"],
                )
            )
            for user_id in member_ids:
                tx.execute(
                    "INSERT OR IGNORE INTO ticket_members (channel_id, user_id) VALUES (?, ?)",
                    (ticket["channel_id"], user_id)
                )

        logger.warning("Ticket Rows Restored", [
            ("Channel", ticket["channel_id"]),
            ("Members", str(len(member_ids))),
        ])

    # =========================================================================
    # Ticket Members
    # =========================================================================

    def add_ticket_member(self: "DatabaseManager", channel_id: str, user_id: str) -> bool:
        """
        Record a member. Re-adding an existing member is a no-op.

        Returns:
            True if a new row was inserted.
        """
        cursor = self.execute(
            "INSERT OR IGNORE INTO ticket_members (channel_id, user_id) VALUES (?, ?)",
            (channel_id, user_id)
        )
        return cursor.rowcount > 0

    def remove_ticket_member(self: "DatabaseManager", channel_id: str, user_id: str) -> bool:
        cursor = self.execute(
            "DELETE FROM ticket_members WHERE channel_id = ? AND user_id = ?",
            (channel_id, user_id)
        )
        return cursor.rowcount > 0

    def get_ticket_members(self: "DatabaseManager", channel_id: str) -> List[str]:
        """Get the user IDs of everyone ever granted access, owner included."""
        rows = self.fetchall(
            "SELECT user_id FROM ticket_members WHERE channel_id = ? ORDER BY rowid ASC",
            (channel_id,)
        )
        return [row["user_id"] for row in rows]
