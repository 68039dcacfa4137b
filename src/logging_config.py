from __future__ import annotations

from collections.abc import Iterable
import logging
import sys

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

REDACTED = "***REDACTED***"


class ExtraFieldsFormatter(logging.Formatter):
    """Appends fields passed through ``extra=`` as ``key=value`` pairs and masks secrets."""

    def __init__(self, *args, secrets: Iterable[str] = (), **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extras:
            rendered = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
            first_line, sep, rest = base.partition("\n")
            base = f"{first_line} {rendered}{sep}{rest}"

        # Request URLs carry the bot token, and they end up in exception messages.
        for secret in self._secrets:
            base = base.replace(secret, REDACTED)
        return base


def configure_logging(level: str = "INFO", secrets: Iterable[str] = ()) -> None:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ExtraFieldsFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
            secrets=secrets,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)
