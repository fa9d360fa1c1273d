"""
Ticketeer - Database Panel Operations Module
============================================

Named ticket-creation panels, keyed by (guild, panel name).
"""

from typing import Optional, TYPE_CHECKING

from ticketeer.core.logger import logger
from ticketeer.core.database.models import PanelRecord

if TYPE_CHECKING:
    from ticketeer.core.database.manager import DatabaseManager


class PanelsMixin:
    """Mixin for panel database operations."""

    def get_panel(
        self: "DatabaseManager",
        guild_id: str,
        panel_name: str,
    ) -> Optional[PanelRecord]:
        row = self.fetchone(
            "SELECT * FROM panels WHERE guild_id = ? AND panel_name = ?",
            (guild_id, panel_name)
        )
        return dict(row) if row else None

    def upsert_panel(
        self: "DatabaseManager",
        guild_id: str,
        panel_name: str,
        channel_id: str,
        title: str,
        description: str,
        image_url: Optional[str] = None,
    ) -> PanelRecord:
        """Create or fully replace a panel."""
        self.execute(
            """INSERT OR REPLACE INTO panels
               (guild_id, panel_name, channel_id, title, description, image_url)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (guild_id, panel_name, channel_id, title, description, image_url)
        )
        logger.debug("Panel Saved", [
            ("Guild", guild_id),
            ("Panel", panel_name),
            ("Channel", channel_id),
        ])
        return PanelRecord(
            guild_id=guild_id,
            panel_name=panel_name,
            channel_id=channel_id,
            title=title,
            description=description,
            image_url=image_url,
        )

    def delete_panel(self: "DatabaseManager", guild_id: str, panel_name: str) -> bool:
        """
        Delete a panel.

        Tickets created from it keep the panel name; nothing cascades.
        """
        cursor = self.execute(
            "DELETE FROM panels WHERE guild_id = ? AND panel_name = ?",
            (guild_id, panel_name)
        )
        return cursor.rowcount > 0
