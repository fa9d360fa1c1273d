"""
Ticket System Constants
=======================

Naming conventions, custom IDs, emojis and reply strings.
"""

from typing import Optional

from ticketeer.core.constants import CHANNEL_NAME_MAX_LENGTH, CUSTOM_ID_MAX_LENGTH


# =============================================================================
# Naming
# =============================================================================

TICKET_CHANNEL_PREFIX = "ticket-"
PANEL_CUSTOM_ID_PREFIX = "ticket_"
PANEL_NAME_MAX_LENGTH = CUSTOM_ID_MAX_LENGTH - len(PANEL_CUSTOM_ID_PREFIX)


def ticket_channel_name(handle: str) -> str:
    """Derive the channel name for a requester's ticket."""
    return f"{TICKET_CHANNEL_PREFIX}{handle.lower()}"[:CHANNEL_NAME_MAX_LENGTH]


def panel_custom_id(panel_name: str) -> str:
    return f"{PANEL_CUSTOM_ID_PREFIX}{panel_name}"


def panel_name_from_custom_id(custom_id: str) -> Optional[str]:
    """Inverse of panel_custom_id(). None if the ID is not a panel button."""
    if not custom_id.startswith(PANEL_CUSTOM_ID_PREFIX):
        return None
    return custom_id[len(PANEL_CUSTOM_ID_PREFIX):] or None


# =============================================================================
# Emojis
# =============================================================================

TICKET_EMOJI = "🎫"
TRANSCRIPT_EMOJI = "📝"
DELETE_EMOJI = "🗑️"
SUCCESS_EMOJI = "✅"
ERROR_EMOJI = "❌"


# =============================================================================
# Reasons & Messages
# =============================================================================

DELETE_REASON = "Ticket deleted by staff"
PANEL_BUTTON_LABEL = "Create Ticket"
