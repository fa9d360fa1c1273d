"""
Ticketeer - Database Type Definitions
=====================================

TypedDict definitions for database records.

All Discord identifiers are stored as TEXT and handled as opaque strings.
Timestamps are integer seconds since the epoch.
"""

from typing import Optional, TypedDict


TICKET_STATUS_OPEN = "open"
TICKET_STATUS_CLOSED = "closed"


class CommunityConfigRecord(TypedDict):
    """Per-guild ticket settings written by /ticket setup."""
    guild_id: str
    support_role_id: Optional[str]
    closed_category_id: Optional[str]
    log_channel_id: Optional[str]
    panel_color: str


class PanelRecord(TypedDict):
    """A named ticket-creation panel."""
    guild_id: str
    panel_name: str
    channel_id: str
    title: str
    description: str
    image_url: Optional[str]


class TicketRecord(TypedDict):
    """A ticket, keyed by its channel."""
    channel_id: str
    guild_id: str
    owner_id: str
    panel_name: str
    status: str
    created_at: int
    closed_at: Optional[int]


class TicketMemberRecord(TypedDict):
    channel_id: str
    user_id: str


__all__ = [
    "TICKET_STATUS_OPEN",
    "TICKET_STATUS_CLOSED",
    "CommunityConfigRecord",
    "PanelRecord",
    "TicketRecord",
    "TicketMemberRecord",
]
