"""
Ticket System Package
=====================

Ticket lifecycle, authorization policy, panels and transcripts.
"""

from .actions import (
    ActionKind,
    Actor,
    ActionContext,
    SetupCommunity,
    DefinePanel,
    CreateTicket,
    AddMember,
    RemoveMember,
    CloseTicket,
    ReopenTicket,
    DeleteTicket,
    RequestTranscript,
    TicketAction,
)
from .policy import Decision, can_perform, is_staff, is_owner
from .gateway import ChannelGateway, DiscordGateway, Overwrite
from .results import StepFailure, CreateResult, CloseResult, ReopenResult, DeleteResult
from .transcript import TranscriptArchive, TranscriptExporter, HtmlTranscriptExporter
from .panels import PanelRegistry
from .service import TicketService
from .views import TicketPanelButton, build_panel_view

__all__ = [
    # Actions
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
    # Policy
    "Decision",
    "can_perform",
    "is_staff",
    "is_owner",
    # Collaborators
    "ChannelGateway",
    "DiscordGateway",
    "Overwrite",
    "TranscriptArchive",
    "TranscriptExporter",
    "HtmlTranscriptExporter",
    # Results
    "StepFailure",
    "CreateResult",
    "CloseResult",
    "ReopenResult",
    "DeleteResult",
    # Service
    "PanelRegistry",
    "TicketService",
    "TicketPanelButton",
    "build_panel_view",
]
