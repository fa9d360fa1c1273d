"""
Ticketeer - Centralized Constants
=================================

Magic numbers and default strings shared across the bot.
Import from this module instead of hardcoding values.
"""

# =============================================================================
# Database Constants
# =============================================================================

DB_CONNECTION_TIMEOUT = 30.0          # sqlite3.connect timeout (seconds)
SQLITE_BUSY_TIMEOUT = 5000            # PRAGMA busy_timeout (milliseconds)

# =============================================================================
# Display Defaults
# =============================================================================

DEFAULT_PANEL_COLOR = "#FFC0CB"
DEFAULT_PANEL_TITLE = "Support Tickets"
DEFAULT_PANEL_DESCRIPTION = "Click the button below to create a new ticket!"
DEFAULT_TICKET_TITLE = "Support Ticket"

# =============================================================================
# Discord Limits
# =============================================================================

CHANNEL_NAME_MAX_LENGTH = 100
CUSTOM_ID_MAX_LENGTH = 100
EMBED_TITLE_MAX_LENGTH = 256
EMBED_DESCRIPTION_MAX_LENGTH = 4096

# =============================================================================
# Transcript Constants
# =============================================================================

TRANSCRIPT_IMAGE_MAX_BYTES = 8 * 1024 * 1024   # Larger images stay as links
TRANSCRIPT_DOWNLOAD_TIMEOUT = 15               # Per-image download timeout (seconds)
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp")
