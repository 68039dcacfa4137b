from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from telegram.models import OutboundReply


class ReplySender(Protocol):
    def send_message(self, reply: OutboundReply) -> None:
        ...

    def send_chat_action(self, chat_id: int, action: str = "typing") -> None:
        ...


class Corrector(Protocol):
    def correct(self, text: str) -> str:
        ...


@dataclass(frozen=True)
class BotContext:
    """Long-lived handles built once at startup and passed to every dispatch."""

    telegram: ReplySender
    corrector: Corrector
