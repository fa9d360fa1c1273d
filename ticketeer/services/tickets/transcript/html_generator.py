"""
Ticket HTML Transcript Generator
================================

Renders collected messages into a single self-contained HTML page.
"""

import html as html_lib
from datetime import datetime, timezone
from typing import Optional, List, Dict

from ticketeer.core.logger import logger
from .collectors import resolve_mentions
from .models import TranscriptAttachment, TranscriptEmbed, TranscriptMessage


DEFAULT_AVATAR = "https://cdn.discordapp.com/embed/avatars/0.png"


# =============================================================================
# CSS Styles
# =============================================================================

TRANSCRIPT_CSS = '''
:root {
    --pink: #ffc0cb;
    --bg-dark: #1e1f22;
    --bg-card: #2b2d31;
    --border: #3f4147;
    --text: #dbdee1;
    --text-muted: #949ba4;
    --bot: #a78bfa;
    --radius: 12px;
}

* { margin: 0; padding: 0; box-sizing: border-box; }

body {
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
    background: var(--bg-dark);
    color: var(--text);
    line-height: 1.5;
}

.container { max-width: 860px; margin: 0 auto; padding: 0 16px; }

.header {
    background: var(--bg-card);
    border-bottom: 3px solid var(--pink);
    padding: 20px 0;
}

.header h1 { font-size: 20px; }
.header p { font-size: 13px; color: var(--text-muted); }

.messages { padding: 16px 0; }

.message { display: flex; gap: 12px; padding: 8px 0; }
.avatar { width: 40px; height: 40px; border-radius: 50%; flex-shrink: 0; }
.message-meta { display: flex; gap: 8px; align-items: baseline; }
.author { font-weight: 600; }
.author.bot { color: var(--bot); }
.role-badge { font-size: 10px; background: var(--bot); color: white; padding: 0 4px; border-radius: 4px; }
.timestamp, .edited { font-size: 12px; color: var(--text-muted); }
.content { white-space: pre-wrap; word-wrap: break-word; }
.empty-message { color: var(--text-muted); font-style: italic; }

.mention { background: rgba(88, 101, 242, 0.3); border-radius: 3px; padding: 0 2px; }
.mention.unknown { background: none; color: var(--text-muted); }

.attachments { display: flex; flex-wrap: wrap; gap: 8px; margin-top: 6px; }
.attachment-image { max-width: 400px; max-height: 300px; border-radius: 8px; }
.attachment { color: #00a8fc; }

.embed {
    background: var(--bg-card);
    border-left: 4px solid var(--pink);
    border-radius: 4px;
    padding: 8px 12px;
    margin-top: 6px;
    max-width: 520px;
}
.embed-title { font-weight: 600; }
.embed-image { max-width: 100%; border-radius: 4px; margin-top: 8px; }
.embed-footer { font-size: 12px; color: var(--text-muted); margin-top: 6px; }

.footer { text-align: center; font-size: 12px; color: var(--text-muted); padding: 24px 0; }
'''


# =============================================================================
# Public API
# =============================================================================

def transcript_filename(channel_name: str) -> str:
    return f"{channel_name}-transcript.html"


def _format_timestamp(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%b %d, %Y %I:%M %p UTC")


def generate_html_transcript(
    channel_name: str,
    guild_name: str,
    messages: List[TranscriptMessage],
    mention_map: Dict[int, str],
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Generate an HTML transcript for a ticket channel.

    Args:
        channel_name: Name of the ticket channel.
        guild_name: Name of the server the ticket lives in.
        messages: Collected messages, oldest first.
        mention_map: ID to display name map for mention resolution.
        generated_at: Render time, defaults to now.

    Returns:
        The complete HTML document.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    safe_channel = html_lib.escape(channel_name)
    safe_guild = html_lib.escape(guild_name)

    html_output = f'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>#{safe_channel} - Transcript</title>
    <style>{TRANSCRIPT_CSS}</style>
</head>
<body>
    <header class="header">
        <div class="container">
            <h1>#{safe_channel}</h1>
            <p>{safe_guild} • {len(messages)} messages</p>
        </div>
    </header>
    <main class="container">
        <div class="messages">
{_render_messages(messages, mention_map)}
        </div>
        <footer class="footer">
            <p>Generated {generated_at.strftime("%b %d, %Y at %I:%M %p %Z")}</p>
        </footer>
    </main>
</body>
</html>'''

    logger.debug("HTML Transcript Generated", [
        ("Channel", channel_name),
        ("Messages", str(len(messages))),
    ])

    return html_output


# =============================================================================
# Rendering Helpers
# =============================================================================

def _render_messages(messages: List[TranscriptMessage], mention_map: Dict[int, str]) -> str:
    """Render messages to HTML."""
    html_parts = []

    for msg in messages:
        author_class = "author bot" if msg.is_bot else "author"
        role_badge = '<span class="role-badge">BOT</span>' if msg.is_bot else ""
        edited = '<span class="edited">(edited)</span>' if msg.is_edited else ""

        if msg.content:
            safe_content = resolve_mentions(html_lib.escape(msg.content), mention_map)
        else:
            safe_content = '<span class="empty-message">(no text content)</span>'

        avatar = html_lib.escape(msg.author_avatar_url or DEFAULT_AVATAR, quote=True)

        html_parts.append(f'''            <div class="message">
                <img class="avatar" src="{avatar}" alt="">
                <div class="message-body">
                    <div class="message-meta">
                        <span class="{author_class}" title="{html_lib.escape(msg.author_name)}">{html_lib.escape(msg.author_display_name)}</span>
                        {role_badge}
                        <span class="timestamp">{_format_timestamp(msg.timestamp)}</span>
                        {edited}
                    </div>
                    <div class="content">{safe_content}</div>
{_render_attachments(msg.attachments)}{_render_embeds(msg.embeds, mention_map)}
                </div>
            </div>''')

    return "\n".join(html_parts)


def _render_attachments(attachments: List[TranscriptAttachment]) -> str:
    if not attachments:
        return ""

    parts = ['                    <div class="attachments">']
    for att in attachments:
        url = html_lib.escape(att.url, quote=True)
        name = html_lib.escape(att.filename)
        if att.is_image:
            src = html_lib.escape(att.src, quote=True)
            parts.append(f'                        <a href="{url}" target="_blank"><img class="attachment-image" src="{src}" alt="{name}"></a>')
        else:
            parts.append(f'                        <a class="attachment" href="{url}" target="_blank">📎 {name}</a>')
    parts.append('                    </div>')
    return "\n".join(parts) + "\n"


def _render_embeds(embeds: List[TranscriptEmbed], mention_map: Dict[int, str]) -> str:
    if not embeds:
        return ""

    parts = []
    for embed in embeds:
        style = f' style="border-left-color: #{embed.color:06x}"' if embed.color else ""
        parts.append(f'                    <div class="embed"{style}>')
        if embed.title:
            parts.append(f'                        <div class="embed-title">{html_lib.escape(embed.title)}</div>')
        if embed.description:
            desc = resolve_mentions(html_lib.escape(embed.description), mention_map)
            parts.append(f'                        <div class="embed-description">{desc}</div>')
        if embed.image_url:
            parts.append(f'                        <img class="embed-image" src="{html_lib.escape(embed.image_url, quote=True)}" alt="">')
        if embed.footer_text:
            parts.append(f'                        <div class="embed-footer">{html_lib.escape(embed.footer_text)}</div>')
        parts.append('                    </div>')
    return "\n".join(parts) + "\n"


__all__ = [
    "TRANSCRIPT_CSS",
    "transcript_filename",
    "generate_html_transcript",
]
