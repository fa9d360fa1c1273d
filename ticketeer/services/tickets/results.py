"""
Ticket Operation Results
========================

What multi-step operations report back instead of raising.

DESIGN:
    Close, reopen and delete keep going when a single gateway call
    fails. Each such failure becomes a StepFailure so the caller can
    tell the user which parts did not apply.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ticketeer.core.database import TicketRecord
from ticketeer.core.errors import TicketError
from .transcript import TranscriptArchive


@dataclass(frozen=True)
class StepFailure:
    """One gateway call that failed during a multi-step operation."""
    step: str
    target: Optional[str]
    error: TicketError

    def describe(self) -> str:
        where = f" ({self.target})" if self.target else ""
        return f"{self.step}{where}: {self.error.message}"


@dataclass
class CreateResult:
    ticket: TicketRecord
    welcome_sent: bool = True


@dataclass
class CloseResult:
    ticket: TicketRecord
    transcript: Optional[TranscriptArchive] = None
    stripped: List[str] = field(default_factory=list)
    log_posted: bool = False
    failures: List[StepFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failures


@dataclass
class ReopenResult:
    ticket: TicketRecord
    regranted: List[str] = field(default_factory=list)
    failures: List[StepFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failures


@dataclass
class DeleteResult:
    channel_id: str
    transcript: Optional[TranscriptArchive] = None
    log_posted: bool = False
    failures: List[StepFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failures


__all__ = [
    "StepFailure",
    "CreateResult",
    "CloseResult",
    "ReopenResult",
    "DeleteResult",
]
