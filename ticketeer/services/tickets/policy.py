"""
Ticket Authorization Policy
===========================

Pure decisions about who may do what to a ticket.

DESIGN:
    No I/O and no Discord objects: the caller passes the actor, the
    stored community config and (where relevant) the stored ticket.
    Every denial carries the reason shown to the requester and the
    exception type the service raises for it.

    Administrator alone does not make a member staff. The
    ADMINS_ARE_STAFF setting opts into treating them as staff.
"""

from dataclasses import dataclass
from typing import Optional, Type

from ticketeer.core.database import CommunityConfigRecord, TicketRecord
from ticketeer.core.errors import (
    TicketError,
    ForbiddenError,
    NotConfiguredError,
    NotATicketChannelError,
    CannotRemoveOwnerError,
)

from .actions import ActionKind, Actor


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check."""
    allowed: bool
    reason: Optional[str] = None
    error: Type[TicketError] = ForbiddenError

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str, error: Type[TicketError] = ForbiddenError) -> "Decision":
        return cls(False, reason, error)

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise self.error(self.reason)


# =============================================================================
# Role Checks
# =============================================================================

def is_staff(
    actor: Actor,
    config: Optional[CommunityConfigRecord],
    admins_are_staff: bool = False,
) -> bool:
    """Check whether the actor holds the guild's support role."""
    if admins_are_staff and actor.is_admin:
        return True
    if not config or not config.get("support_role_id"):
        return False
    return config["support_role_id"] in actor.role_ids


def is_owner(actor: Actor, ticket: Optional[TicketRecord]) -> bool:
    return ticket is not None and ticket["owner_id"] == actor.user_id


# =============================================================================
# Decisions
# =============================================================================

_ADMIN_ONLY = "You need administrator permissions!"

_OWNER_OR_STAFF = {
    ActionKind.ADD_MEMBER: "Only ticket owners or staff can add users!",
    ActionKind.REMOVE_MEMBER: "Only ticket owners or staff can remove users!",
    ActionKind.CLOSE: "Only ticket owners or staff can close tickets!",
    ActionKind.TRANSCRIPT: "Only ticket owners or staff can generate transcripts!",
}

_STAFF_ONLY = {
    ActionKind.REOPEN: "Only staff can reopen tickets!",
    ActionKind.DELETE: "Only staff can delete tickets!",
}


def can_perform(
    kind: ActionKind,
    actor: Actor,
    config: Optional[CommunityConfigRecord],
    ticket: Optional[TicketRecord] = None,
    target_id: Optional[str] = None,
    admins_are_staff: bool = False,
) -> Decision:
    """
    Decide whether an actor may perform an action.

    Args:
        kind: The action being attempted.
        actor: Who is attempting it.
        config: The guild's stored ticket settings, if any.
        ticket: The stored ticket the action targets, if any.
        target_id: The member being removed, for REMOVE_MEMBER.
        admins_are_staff: Treat administrators as staff.

    Returns:
        Decision.allow() or a denial with a readable reason.
    """
    if kind in (ActionKind.SETUP, ActionKind.PANEL):
        return Decision.allow() if actor.is_admin else Decision.deny(_ADMIN_ONLY)

    if kind is ActionKind.CREATE:
        if not config or not config.get("support_role_id"):
            return Decision.deny("Ticket system not set up!", NotConfiguredError)
        return Decision.allow()

    if ticket is None:
        return Decision.deny("This is not a ticket channel!", NotATicketChannelError)

    staff = is_staff(actor, config, admins_are_staff)

    if kind in _OWNER_OR_STAFF:
        if not (staff or is_owner(actor, ticket)):
            return Decision.deny(_OWNER_OR_STAFF[kind])
        if kind is ActionKind.REMOVE_MEMBER and target_id == ticket["owner_id"]:
            return Decision.deny("Cannot remove the ticket owner!", CannotRemoveOwnerError)
        return Decision.allow()

    if kind in _STAFF_ONLY:
        return Decision.allow() if staff else Decision.deny(_STAFF_ONLY[kind])

    return Decision.deny("Unknown subcommand!")


__all__ = ["Decision", "is_staff", "is_owner", "can_perform"]
