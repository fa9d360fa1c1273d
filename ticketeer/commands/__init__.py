"""
Ticketeer - Commands Package
============================

Slash command cogs, loaded by the bot with load_extension().

DESIGN:
    Each command file contains a Cog class and an async setup(bot)
    function. Add new cogs to COMMAND_COGS to have them loaded.
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "ticketeer.commands.ticket",
]
"""List of command cog module paths for dynamic loading."""


__all__ = [
    "COMMAND_COGS",
]
