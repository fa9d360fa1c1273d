"""
Ticket Transcript Collectors
============================

Message collection and mention resolution for transcripts.
"""

import html as html_lib
import re
from typing import List, Dict, Tuple

import discord

from ticketeer.core.logger import logger
from .models import TranscriptAttachment, TranscriptEmbed, TranscriptMessage


RAW_USER_MENTION = re.compile(r"<@!?(\d+)>")
ESCAPED_MENTION = re.compile(r"&lt;(@!?|#|@&amp;)(\d+)&gt;")


def _convert_message(msg: discord.Message) -> TranscriptMessage:
    attachments = [
        TranscriptAttachment(
            filename=att.filename,
            url=att.url,
            content_type=att.content_type,
            size=att.size,
        )
        for att in msg.attachments
    ]
    embeds = [
        TranscriptEmbed(
            title=embed.title,
            description=embed.description,
            color=embed.color.value if embed.color else None,
            image_url=embed.image.url if embed.image else None,
            footer_text=embed.footer.text if embed.footer else None,
        )
        for embed in msg.embeds
    ]
    return TranscriptMessage(
        author_id=str(msg.author.id),
        author_name=msg.author.name,
        author_display_name=msg.author.display_name,
        author_avatar_url=str(msg.author.display_avatar.url) if msg.author.display_avatar else None,
        content=msg.content,
        timestamp=msg.created_at.timestamp(),
        attachments=attachments,
        embeds=embeds,
        is_bot=msg.author.bot,
        is_edited=msg.edited_at is not None,
    )


async def collect_transcript_messages(
    channel: discord.TextChannel,
) -> Tuple[List[TranscriptMessage], Dict[int, str]]:
    """
    Collect the full history of a ticket channel, oldest first.

    Args:
        channel: The ticket channel.

    Returns:
        Tuple of (messages, mention_map for mention resolution).

    Raises:
        discord.HTTPException: If history cannot be read.
    """
    messages: List[TranscriptMessage] = []
    user_map: Dict[int, str] = {}
    channel_map: Dict[int, str] = {}
    role_map: Dict[int, str] = {}
    raw_mention_ids: set = set()

    for role in channel.guild.roles:
        role_map[role.id] = role.name

    async for msg in channel.history(limit=None, oldest_first=True):
        user_map[msg.author.id] = msg.author.display_name
        for mentioned_user in msg.mentions:
            user_map[mentioned_user.id] = mentioned_user.display_name
        for mentioned_channel in msg.channel_mentions:
            channel_map[mentioned_channel.id] = mentioned_channel.name

        for user_id_str in RAW_USER_MENTION.findall(msg.content or ""):
            raw_mention_ids.add(int(user_id_str))

        messages.append(_convert_message(msg))

    # Members mentioned by raw ID but never seen in the history
    for user_id in raw_mention_ids - user_map.keys():
        member = channel.guild.get_member(user_id)
        if member:
            user_map[user_id] = member.display_name

    mention_map = {**user_map}
    for channel_id, name in channel_map.items():
        mention_map[channel_id] = f"#{name}"
    for role_id, name in role_map.items():
        mention_map[role_id] = f"@{name}"

    logger.debug("Transcript Messages Collected", [
        ("Channel", f"{channel.name} ({channel.id})"),
        ("Messages", str(len(messages))),
        ("Users Mapped", str(len(user_map))),
    ])

    return messages, mention_map


def resolve_mentions(content: str, mention_map: Dict[int, str]) -> str:
    """
    Convert HTML-escaped Discord mention syntax to readable names.

    Converts:
        &lt;@123&gt; or &lt;@!123&gt; -> @username
        &lt;#123&gt; -> #channel-name
        &lt;@&amp;123&gt; -> @role-name

    Channel and role names in mention_map already carry their prefix.
    """
    def replace_mention(match: "re.Match[str]") -> str:
        mention_type = match.group(1).replace("&amp;", "&")
        target_id = int(match.group(2))
        name = mention_map.get(target_id)

        if name is None:
            return f'<span class="mention unknown">&lt;{mention_type}{target_id}&gt;</span>'
        if mention_type in ("@", "@!"):
            return f'<span class="mention">@{html_lib.escape(name)}</span>'
        if mention_type == "#":
            return f'<span class="mention channel">{html_lib.escape(name)}</span>'
        return f'<span class="mention role">{html_lib.escape(name)}</span>'

    return ESCAPED_MENTION.sub(replace_mention, content)


__all__ = [
    "collect_transcript_messages",
    "resolve_mentions",
]
