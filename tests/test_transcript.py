"""
Ticketeer - Transcript Tests
============================

Tests for HTML rendering, mention resolution and image inlining.
"""

import base64
from datetime import datetime, timezone

import aiohttp
import discord
import pytest

from ticketeer.core.errors import ExportError
from ticketeer.services.tickets.transcript import (
    HtmlTranscriptExporter,
    TranscriptAttachment,
    TranscriptEmbed,
    TranscriptMessage,
    generate_html_transcript,
    resolve_mentions,
    transcript_filename,
)


def _message(content: str = "hello", **kwargs) -> TranscriptMessage:
    defaults = dict(
        author_id="1",
        author_name="alice",
        author_display_name="Alice",
        author_avatar_url=None,
        content=content,
        timestamp=1700000000.0,
    )
    defaults.update(kwargs)
    return TranscriptMessage(**defaults)


def _image(url: str = "https://cdn.example/a.png", size: int = 10) -> TranscriptAttachment:
    return TranscriptAttachment(filename="a.png", url=url, content_type="image/png", size=size)


# =============================================================================
# Fakes
# =============================================================================

class FakeResponse:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self._body = body

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc) -> bool:
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession.get()."""

    def __init__(self, status: int = 200, body: bytes = b"\x89PNG", error: Exception = None) -> None:
        self.status = status
        self.body = body
        self.error = error
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        if self.error:
            raise self.error
        return FakeResponse(self.status, self.body)


class FakeBot:
    def __init__(self, channel=None, fetch_error: Exception = None) -> None:
        self.channel = channel
        self.fetch_error = fetch_error

    def get_channel(self, channel_id):
        return self.channel

    async def fetch_channel(self, channel_id):
        if self.fetch_error:
            raise self.fetch_error
        return self.channel


# =============================================================================
# Rendering
# =============================================================================

class TestHtmlGenerator:
    """Tests for generate_html_transcript()."""

    def test_filename(self):
        assert transcript_filename("ticket-alice") == "ticket-alice-transcript.html"

    def test_content_is_escaped(self):
        """Message text can never inject markup."""
        html = generate_html_transcript(
            "ticket-alice", "Guild", [_message("<script>alert(1)</script>")], {},
        )
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html

    def test_header_and_count(self):
        html = generate_html_transcript(
            "ticket-alice", "My <Guild>", [_message(), _message("again")], {},
            generated_at=datetime(2024, 1, 2, tzinfo=timezone.utc),
        )
        assert "#ticket-alice" in html
        assert "My &lt;Guild&gt; • 2 messages" in html
        assert "Jan 02, 2024" in html

    def test_empty_bot_and_edited_markers(self):
        html = generate_html_transcript(
            "t", "g", [_message("", is_bot=True, is_edited=True)], {},
        )
        assert "(no text content)" in html
        assert "BOT" in html
        assert "(edited)" in html

    def test_inlined_image_uses_data_uri(self):
        """The img src is the data URI while the link keeps the original URL."""
        att = _image()
        att.data_uri = "data:image/png;base64,AAAA"
        html = generate_html_transcript("t", "g", [_message(attachments=[att])], {})

        assert 'src="data:image/png;base64,AAAA"' in html
        assert 'href="https://cdn.example/a.png"' in html

    def test_non_image_attachment_is_link(self):
        att = TranscriptAttachment(filename="log.txt", url="https://cdn.example/log.txt")
        html = generate_html_transcript("t", "g", [_message(attachments=[att])], {})
        assert "📎 log.txt" in html

    def test_embed_rendered(self):
        embed = TranscriptEmbed(title="Billing", description="Hi <@1>", color=0xFFC0CB, footer_text="Ticket ID: 5")
        html = generate_html_transcript("t", "g", [_message(embeds=[embed])], {1: "Alice"})

        assert "border-left-color: #ffc0cb" in html
        assert "Billing" in html
        assert '<span class="mention">@Alice</span>' in html
        assert "Ticket ID: 5" in html


class TestResolveMentions:
    """Tests for resolve_mentions()."""

    def test_user_channel_and_role(self):
        content = "&lt;@1&gt; &lt;@!1&gt; &lt;#2&gt; &lt;@&amp;3&gt;"
        resolved = resolve_mentions(content, {1: "Alice", 2: "#general", 3: "@Support"})

        assert resolved.count('<span class="mention">@Alice</span>') == 2
        assert '<span class="mention channel">#general</span>' in resolved
        assert '<span class="mention role">@Support</span>' in resolved

    def test_unknown_mention_kept(self):
        resolved = resolve_mentions("&lt;@99&gt;", {})
        assert 'class="mention unknown"' in resolved
        assert "&lt;@99&gt;" in resolved

    def test_names_are_escaped(self):
        resolved = resolve_mentions("&lt;@1&gt;", {1: "<b>"})
        assert "@&lt;b&gt;" in resolved


# =============================================================================
# Exporter
# =============================================================================

class TestExporter:
    """Tests for HtmlTranscriptExporter."""

    @pytest.mark.asyncio
    async def test_inline_image(self):
        session = FakeSession(body=b"png-bytes")
        exporter = HtmlTranscriptExporter(FakeBot(), session=session)
        msg = _message(attachments=[_image()])

        assert await exporter._inline_images([msg]) == 1
        expected = base64.b64encode(b"png-bytes").decode("ascii")
        assert msg.attachments[0].data_uri == f"data:image/png;base64,{expected}"

    @pytest.mark.asyncio
    async def test_download_error_keeps_link(self):
        """A failed download leaves the image as a plain link."""
        session = FakeSession(error=aiohttp.ClientError("boom"))
        exporter = HtmlTranscriptExporter(FakeBot(), session=session)
        msg = _message(attachments=[_image()])

        assert await exporter._inline_images([msg]) == 0
        assert msg.attachments[0].data_uri is None
        assert msg.attachments[0].src == "https://cdn.example/a.png"

    @pytest.mark.asyncio
    async def test_bad_status_keeps_link(self):
        exporter = HtmlTranscriptExporter(FakeBot(), session=FakeSession(status=404))
        msg = _message(attachments=[_image()])

        assert await exporter._inline_images([msg]) == 0

    @pytest.mark.asyncio
    async def test_oversized_and_non_images_skipped(self):
        """Nothing is downloaded for large images or other files."""
        session = FakeSession()
        exporter = HtmlTranscriptExporter(FakeBot(), session=session)
        big = _image(size=50 * 1024 * 1024)
        doc = TranscriptAttachment(filename="notes.pdf", url="https://cdn.example/notes.pdf")

        assert await exporter._inline_images([_message(attachments=[big, doc])]) == 0
        assert session.requested == []

    @pytest.mark.asyncio
    async def test_non_text_channel(self):
        exporter = HtmlTranscriptExporter(FakeBot(channel=object()))
        with pytest.raises(ExportError):
            await exporter.export("123")

    @pytest.mark.asyncio
    async def test_unfetchable_channel(self):
        exporter = HtmlTranscriptExporter(FakeBot(fetch_error=discord.DiscordException("gone")))
        with pytest.raises(ExportError):
            await exporter.export("123")
