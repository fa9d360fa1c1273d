"""
Ticket Transcript Models
========================

Data classes for collected messages and the finished archive.
"""

from dataclasses import dataclass, field
from typing import Optional, List

from ticketeer.core.constants import IMAGE_EXTENSIONS


@dataclass
class TranscriptAttachment:
    """An attachment on a transcript message."""
    filename: str
    url: str
    content_type: Optional[str] = None
    size: int = 0
    data_uri: Optional[str] = None  # Set when the image was inlined

    @property
    def is_image(self) -> bool:
        if self.content_type and self.content_type.startswith("image/"):
            return True
        return self.filename.lower().endswith(IMAGE_EXTENSIONS)

    @property
    def src(self) -> str:
        return self.data_uri or self.url


@dataclass
class TranscriptEmbed:
    """The parts of a message embed that the transcript renders."""
    title: Optional[str] = None
    description: Optional[str] = None
    color: Optional[int] = None
    image_url: Optional[str] = None
    footer_text: Optional[str] = None


@dataclass
class TranscriptMessage:
    """A single message in a ticket transcript."""
    author_id: str
    author_name: str
    author_display_name: str
    author_avatar_url: Optional[str]
    content: str
    timestamp: float
    attachments: List[TranscriptAttachment] = field(default_factory=list)
    embeds: List[TranscriptEmbed] = field(default_factory=list)
    is_bot: bool = False
    is_edited: bool = False


@dataclass(frozen=True)
class TranscriptArchive:
    """A rendered transcript ready to attach to a message."""
    data: bytes
    filename: str

    @property
    def size(self) -> int:
        return len(self.data)


__all__ = [
    "TranscriptAttachment",
    "TranscriptEmbed",
    "TranscriptMessage",
    "TranscriptArchive",
]
