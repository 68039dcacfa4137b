from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Union

import requests

from telegram.client import TelegramAPIError
from telegram.models import MARKDOWN_V2, InboundMessage, OutboundReply

from .context import BotContext

WELCOME_TEXT = (
    "👋 Welcome to Grammar Check Bot\\!\n"
    "\n"
    "Send me any text message and I'll check it for grammar, spelling, and punctuation errors\\.\n"
    "\n"
    "I'll show corrections with:\n"
    "\\- ~strikethrough~ for original mistakes\n"
    "\\- *bold* for corrections\n"
    "\n"
    "Commands:\n"
    "/start \\- Show this welcome message\n"
    "/help \\- Show help information"
)

HELP_TEXT = (
    "🔍 How to use Grammar Check Bot:\n"
    "\n"
    "1\\. Simply send me any text message\n"
    "2\\. I'll analyze it for grammar, spelling, and punctuation errors\n"
    "3\\. You'll receive a corrected version with highlighted changes\n"
    "\n"
    "📝 Example:\n"
    'Your text: "I goes to store yesterday"\n'
    'My response: "I ~goes~ *went* to ~store~ *the store* yesterday"\n'
    "\n"
    "💡 This helps you verify that your message conveys what you intended before sending it elsewhere\\!"
)

UNKNOWN_COMMAND_TEXT = "Unknown command. Use /help to see available commands."
APOLOGY_TEXT = "Sorry, I encountered an error while checking your grammar. Please try again later."
CORRECTION_LABEL = "📝 Grammar check for your message:\n\n"

_LOGGER = logging.getLogger("grammar_bot.handler")


@dataclass(frozen=True)
class StartCommand:
    pass


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class UnrecognizedCommand:
    name: str


BotCommand = Union[StartCommand, HelpCommand, UnrecognizedCommand]


def resolve_command(name: str) -> BotCommand:
    normalized = name.strip().lower()
    if normalized == "start":
        return StartCommand()
    if normalized == "help":
        return HelpCommand()
    return UnrecognizedCommand(name=normalized)


def build_command_reply(message: InboundMessage, command: BotCommand) -> OutboundReply:
    if isinstance(command, StartCommand):
        return OutboundReply(chat_id=message.chat_id, text=WELCOME_TEXT, parse_mode=MARKDOWN_V2)
    if isinstance(command, HelpCommand):
        return OutboundReply(chat_id=message.chat_id, text=HELP_TEXT, parse_mode=MARKDOWN_V2)
    if isinstance(command, UnrecognizedCommand):
        return OutboundReply(chat_id=message.chat_id, text=UNKNOWN_COMMAND_TEXT)
    raise TypeError(f"Unsupported command: {command!r}")


def build_correction_reply(message: InboundMessage, corrected_text: str) -> OutboundReply:
    # Model output is relayed as-is; the prompt asks the model to do the escaping.
    return OutboundReply(
        chat_id=message.chat_id,
        text=CORRECTION_LABEL + corrected_text,
        reply_to_message_id=message.message_id,
        parse_mode=MARKDOWN_V2,
    )


def build_apology_reply(message: InboundMessage) -> OutboundReply:
    return OutboundReply(
        chat_id=message.chat_id,
        text=APOLOGY_TEXT,
        reply_to_message_id=message.message_id,
    )


def _send_typing(context: BotContext, chat_id: int) -> None:
    try:
        context.telegram.send_chat_action(chat_id, "typing")
    except (TelegramAPIError, requests.RequestException):
        _LOGGER.warning("Failed to send typing action", extra={"chat_id": chat_id}, exc_info=True)


def handle_message(message: InboundMessage, context: BotContext) -> OutboundReply | None:
    """Route one inbound message and build its reply, or None when nothing should be sent."""
    if not message.text.strip():
        return None

    if message.is_command:
        return build_command_reply(message, resolve_command(message.command))

    _send_typing(context, message.chat_id)
    try:
        corrected_text = context.corrector.correct(message.text)
    except Exception:
        _LOGGER.exception(
            "Grammar check failed",
            extra={"chat_id": message.chat_id, "message_id": message.message_id},
        )
        return build_apology_reply(message)

    return build_correction_reply(message, corrected_text)


def dispatch(message: InboundMessage, context: BotContext) -> OutboundReply | None:
    reply = handle_message(message, context)
    if reply is None:
        return None

    try:
        context.telegram.send_message(reply)
    except (TelegramAPIError, requests.RequestException):
        _LOGGER.exception(
            "Failed to send reply",
            extra={"chat_id": reply.chat_id, "parse_mode": reply.parse_mode or "plain"},
        )
    return reply
