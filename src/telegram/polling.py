from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from typing import Protocol

import requests

from .client import TelegramAPIError
from .models import InboundMessage, UpdateBatch

_LOGGER = logging.getLogger("grammar_bot.polling")


class UpdateSource(Protocol):
    def get_updates(self, offset: int | None = None, timeout: int = 60) -> UpdateBatch:
        ...


def poll_messages(
    client: UpdateSource,
    *,
    timeout: int = 60,
    retry_delay_seconds: float = 3.0,
    offset: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[InboundMessage]:
    """Yield inbound messages forever, in arrival order.

    Each update is acknowledged by the next ``getUpdates`` call, so a message is
    only confirmed to Telegram once the consumer has asked for the one after it.
    Transport failures are logged and polling resumes after ``retry_delay_seconds``.
    """
    while True:
        try:
            batch = client.get_updates(offset=offset, timeout=timeout)
        except (requests.RequestException, TelegramAPIError):
            _LOGGER.exception("Failed to get updates, retrying", extra={"retry_in": retry_delay_seconds})
            sleep(retry_delay_seconds)
            continue

        for message in batch.messages:
            offset = message.update_id + 1
            yield message

        if batch.next_offset is not None and (offset is None or batch.next_offset > offset):
            offset = batch.next_offset
