"""
Ticketeer - Error Types
=======================

Exceptions raised by the ticket lifecycle.

DESIGN:
    Every exception carries a human-readable message that is shown to
    the requester verbatim. Raw discord.py exceptions never leave the
    gateway layer; they are wrapped in GatewayError.
"""

from typing import Optional


class TicketError(Exception):
    """Base class for every user-facing ticket failure."""

    default_message = "Something went wrong with this ticket."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotConfiguredError(TicketError):
    default_message = "Ticket system not set up!"


class DuplicateTicketError(TicketError):
    default_message = "You already have an open ticket!"

    def __init__(self, channel_id: Optional[str] = None) -> None:
        self.channel_id = channel_id
        if channel_id:
            super().__init__(f"You already have an open ticket: <#{channel_id}>")
        else:
            super().__init__()


class NotATicketChannelError(TicketError):
    default_message = "This is not a ticket channel!"


class ForbiddenError(TicketError):
    """The policy denied the action; the message is the denial reason."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class CannotRemoveOwnerError(TicketError):
    default_message = "Cannot remove the ticket owner!"


class TicketNotClosedError(TicketError):
    default_message = "This is not a closed ticket!"


class InvalidColorError(TicketError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid color `{value}`. Use a hex code like #FFC0CB.")


class UnknownActionError(TicketError):
    default_message = "Unknown subcommand!"


class GatewayError(TicketError):
    """A channel, permission or messaging call to Discord failed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None) -> None:
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Discord request failed ({operation}){detail}")


class ExportError(TicketError):
    """Rendering a channel transcript failed."""

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to generate transcript{detail}")


__all__ = [
    "TicketError",
    "NotConfiguredError",
    "DuplicateTicketError",
    "NotATicketChannelError",
    "ForbiddenError",
    "CannotRemoveOwnerError",
    "TicketNotClosedError",
    "InvalidColorError",
    "UnknownActionError",
    "GatewayError",
    "ExportError",
]
