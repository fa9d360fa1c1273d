"""
Ticketeer - Database Schema Module
==================================

Table definitions.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ticketeer.core.database.manager import DatabaseManager


class SchemaMixin:
    """Mixin for database schema initialization."""

    def _init_tables(self: "DatabaseManager") -> None:
        """
        Initialize all database tables.

        Tables are created if they do not exist, allowing safe restarts.
        """
        conn = self._ensure_connection()
        cursor = conn.cursor()

        # -----------------------------------------------------------------
        # Community Config Table
        # One row per guild, replaced wholesale by /ticket setup
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS config (
                guild_id TEXT PRIMARY KEY,
                support_role_id TEXT,
                closed_category_id TEXT,
                log_channel_id TEXT,
                panel_color TEXT NOT NULL DEFAULT '#FFC0CB'
            )
        """)

        # -----------------------------------------------------------------
        # Panels Table
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS panels (
                guild_id TEXT NOT NULL,
                panel_name TEXT NOT NULL,
                channel_id TEXT NOT NULL,
                title TEXT NOT NULL DEFAULT 'Support Tickets',
                description TEXT NOT NULL DEFAULT 'Click the button below to create a new ticket!',
                image_url TEXT,
                PRIMARY KEY (guild_id, panel_name)
            )
        """)

        # -----------------------------------------------------------------
        # Tickets Table
        # panel_name is a weak reference: no foreign key to panels
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS tickets (
                channel_id TEXT PRIMARY KEY,
                guild_id TEXT NOT NULL,
                owner_id TEXT NOT NULL,
                panel_name TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'open' CHECK (status IN ('open', 'closed')),
                created_at INTEGER NOT NULL,
                closed_at INTEGER
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_tickets_owner ON tickets(owner_id, guild_id)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_tickets_status ON tickets(status, guild_id)"
        )

        # -----------------------------------------------------------------
        # Ticket Members Table
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS ticket_members (
                channel_id TEXT NOT NULL
                    REFERENCES tickets(channel_id) ON DELETE CASCADE,
                user_id TEXT NOT NULL,
                PRIMARY KEY (channel_id, user_id)
            )
        """)

        conn.commit()
