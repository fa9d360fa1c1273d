"""
Ticketeer - Database Package
============================

SQLite persistence for the ticket system.
"""

from ticketeer.core.database.manager import DatabaseManager
from ticketeer.core.database.models import (
    TICKET_STATUS_OPEN,
    TICKET_STATUS_CLOSED,
    CommunityConfigRecord,
    PanelRecord,
    TicketRecord,
    TicketMemberRecord,
)

__all__ = [
    "DatabaseManager",
    "TICKET_STATUS_OPEN",
    "TICKET_STATUS_CLOSED",
    "CommunityConfigRecord",
    "PanelRecord",
    "TicketRecord",
    "TicketMemberRecord",
]
