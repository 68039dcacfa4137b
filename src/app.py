from __future__ import annotations

from collections.abc import Iterable
import logging

import requests

from config import ConfigError, load_settings
from grammar.gemini_client import GeminiCorrector
from logging_config import configure_logging
from orchestration.context import BotContext
from orchestration.handler import dispatch
from telegram.client import TelegramAPIError, TelegramClient
from telegram.models import InboundMessage
from telegram.polling import poll_messages

logger = logging.getLogger("grammar_bot")


def run(context: BotContext, messages: Iterable[InboundMessage]) -> None:
    """Process messages one at a time on the calling thread.

    The correction call blocks this loop, so every chat waits behind the message
    currently being checked. Higher throughput needs a bounded worker pool keyed
    by chat id to keep per-chat ordering, not parallel dispatch from here.
    """
    for message in messages:
        try:
            dispatch(message, context)
        except Exception:
            logger.exception(
                "Message handling failed",
                extra={"chat_id": message.chat_id, "update_id": message.update_id},
            )


def main() -> None:
    try:
        settings = load_settings()
    except ConfigError as exc:
        configure_logging()
        logger.critical("%s", exc)
        raise SystemExit(1) from exc

    configure_logging(
        settings.log_level,
        secrets=(settings.telegram_bot_token, settings.gemini_api_key),
    )

    telegram = TelegramClient(settings.telegram_bot_token)
    try:
        me = telegram.get_me()
    except (TelegramAPIError, requests.RequestException) as exc:
        logger.critical("Failed to create telegram bot: %s", exc)
        raise SystemExit(1) from exc
    logger.info("Bot authorized on account %s", me.get("username"))

    corrector = GeminiCorrector(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_seconds=settings.gemini_timeout_seconds,
    )
    context = BotContext(telegram=telegram, corrector=corrector)

    logger.info("Starting Grammar Check Bot", extra={"model": corrector.model})
    run(
        context,
        poll_messages(
            telegram,
            timeout=settings.telegram_poll_timeout_seconds,
            retry_delay_seconds=settings.poll_interval_seconds,
        ),
    )


if __name__ == "__main__":
    main()
