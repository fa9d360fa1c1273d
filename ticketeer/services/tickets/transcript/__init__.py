"""
Ticket Transcript Package
=========================

HTML transcript generation for tickets.
"""

from .models import (
    TranscriptAttachment,
    TranscriptEmbed,
    TranscriptMessage,
    TranscriptArchive,
)
from .collectors import (
    collect_transcript_messages,
    resolve_mentions,
)
from .html_generator import (
    generate_html_transcript,
    transcript_filename,
)
from .exporter import (
    TranscriptExporter,
    HtmlTranscriptExporter,
)

__all__ = [
    # Models
    "TranscriptAttachment",
    "TranscriptEmbed",
    "TranscriptMessage",
    "TranscriptArchive",
    # Collectors
    "collect_transcript_messages",
    "resolve_mentions",
    # HTML
    "generate_html_transcript",
    "transcript_filename",
    # Export
    "TranscriptExporter",
    "HtmlTranscriptExporter",
]
