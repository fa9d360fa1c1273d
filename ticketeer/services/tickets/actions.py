"""
Ticket Actions
==============

The closed set of things a user can ask the ticket system to do.

DESIGN:
    Each action is a frozen dataclass carrying exactly the arguments it
    needs. TicketService.dispatch() branches on the concrete type and
    raises UnknownActionError for anything outside the set.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, FrozenSet, Optional, Union

if TYPE_CHECKING:
    import discord


class ActionKind(Enum):
    SETUP = "setup"
    PANEL = "panel"
    CREATE = "create"
    ADD_MEMBER = "add"
    REMOVE_MEMBER = "remove"
    CLOSE = "close"
    REOPEN = "open"
    DELETE = "delete"
    TRANSCRIPT = "transcript"


# =============================================================================
# Caller Identity
# =============================================================================

@dataclass(frozen=True)
class Actor:
    """
    The member performing an action.

    Attributes:
        user_id: Discord user ID.
        handle: Username, used for the ticket channel name.
        is_admin: Holds the Administrator permission in the guild.
        role_ids: IDs of every role the member holds.
    """
    user_id: str
    handle: str
    is_admin: bool = False
    role_ids: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_member(cls, member: "discord.Member") -> "Actor":
        return cls(
            user_id=str(member.id),
            handle=member.name,
            is_admin=member.guild_permissions.administrator,
            role_ids=frozenset(str(role.id) for role in member.roles),
        )


@dataclass(frozen=True)
class ActionContext:
    """Where an action was invoked and by whom."""
    guild_id: str
    channel_id: str
    actor: Actor


# =============================================================================
# Actions
# =============================================================================

@dataclass(frozen=True)
class SetupCommunity:
    kind: ClassVar[ActionKind] = ActionKind.SETUP
    support_role_id: str
    closed_category_id: str
    log_channel_id: Optional[str] = None
    panel_color: Optional[str] = None


@dataclass(frozen=True)
class DefinePanel:
    kind: ClassVar[ActionKind] = ActionKind.PANEL
    name: str
    channel_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class CreateTicket:
    kind: ClassVar[ActionKind] = ActionKind.CREATE
    panel_name: str


@dataclass(frozen=True)
class AddMember:
    kind: ClassVar[ActionKind] = ActionKind.ADD_MEMBER
    user_id: str


@dataclass(frozen=True)
class RemoveMember:
    kind: ClassVar[ActionKind] = ActionKind.REMOVE_MEMBER
    user_id: str


@dataclass(frozen=True)
class CloseTicket:
    kind: ClassVar[ActionKind] = ActionKind.CLOSE


@dataclass(frozen=True)
class ReopenTicket:
    kind: ClassVar[ActionKind] = ActionKind.REOPEN


@dataclass(frozen=True)
class DeleteTicket:
    kind: ClassVar[ActionKind] = ActionKind.DELETE


@dataclass(frozen=True)
class RequestTranscript:
    kind: ClassVar[ActionKind] = ActionKind.TRANSCRIPT


TicketAction = Union[
    SetupCommunity,
    DefinePanel,
    CreateTicket,
    AddMember,
    RemoveMember,
    CloseTicket,
    ReopenTicket,
    DeleteTicket,
    RequestTranscript,
]


__all__ = [
    "ActionKind",
    "Actor",
    "ActionContext",
    "SetupCommunity",
    "DefinePanel",
    "CreateTicket",
    "AddMember",
    "RemoveMember",
    "CloseTicket",
    "ReopenTicket",
    "DeleteTicket",
    "RequestTranscript",
    "TicketAction",
]
