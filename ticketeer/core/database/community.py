"""
Ticketeer - Database Community Config Module
============================================

Per-guild ticket settings.
"""

from typing import Optional, TYPE_CHECKING

from ticketeer.core.logger import logger
from ticketeer.core.database.models import CommunityConfigRecord

if TYPE_CHECKING:
    from ticketeer.core.database.manager import DatabaseManager


class CommunityMixin:
    """Mixin for community config operations."""

    def get_community_config(
        self: "DatabaseManager",
        guild_id: str,
    ) -> Optional[CommunityConfigRecord]:
        """Get the ticket settings for a guild, or None if never set up."""
        row = self.fetchone("SELECT * FROM config WHERE guild_id = ?", (guild_id,))
        return dict(row) if row else None

    def upsert_community_config(
        self: "DatabaseManager",
        guild_id: str,
        support_role_id: str,
        closed_category_id: Optional[str],
        log_channel_id: Optional[str],
        panel_color: str,
    ) -> CommunityConfigRecord:
        """
        Replace the guild's settings wholesale.

        Fields not given are cleared, never merged with the previous row.
        """
        self.execute(
            """INSERT OR REPLACE INTO config
               (guild_id, support_role_id, closed_category_id, log_channel_id, panel_color)
               VALUES (?, ?, ?, ?, ?)""",
            (guild_id, support_role_id, closed_category_id, log_channel_id, panel_color)
        )
        logger.debug("Community Config Saved", [
            ("Guild", guild_id),
            ("Support Role", support_role_id),
        ])
        return CommunityConfigRecord(
            guild_id=guild_id,
            support_role_id=support_role_id,
            closed_category_id=closed_category_id,
            log_channel_id=log_channel_id,
            panel_color=panel_color,
        )
