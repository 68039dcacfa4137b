from __future__ import annotations

from dataclasses import dataclass

MARKDOWN_V2 = "MarkdownV2"
COMMAND_PREFIX = "/"


@dataclass(frozen=True)
class InboundMessage:
    update_id: int
    message_id: int
    chat_id: int
    text: str
    is_command: bool = False
    command: str = ""


@dataclass(frozen=True)
class OutboundReply:
    chat_id: int
    text: str
    reply_to_message_id: int | None = None
    parse_mode: str | None = None


def parse_command(text: str) -> str | None:
    """Return the command name for ``/name@bot args`` text, or None for plain text."""
    if not text.startswith(COMMAND_PREFIX):
        return None
    rest = text[len(COMMAND_PREFIX) :]
    if not rest or rest[0].isspace():
        return ""
    name, _, _ = rest.split(maxsplit=1)[0].partition("@")
    return name.lower()


@dataclass(frozen=True)
class UpdateBatch:
    messages: list[InboundMessage]
    next_offset: int | None
