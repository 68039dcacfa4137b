from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-05-20"


@dataclass(frozen=True)
class Settings:
    telegram_bot_token: str
    gemini_api_key: str
    gemini_model: str
    gemini_timeout_seconds: float | None
    telegram_poll_timeout_seconds: int
    poll_interval_seconds: float
    log_level: str


class ConfigError(ValueError):
    pass


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(f"{name} environment variable is required")
    return value


def _parse_number(name: str, default: str, cast: type) -> float | int:
    raw = os.getenv(name, "").strip() or default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid {name} value: {raw}") from exc
    if value < 0:
        raise ConfigError(f"{name} must not be negative")
    return value


def _parse_optional_timeout(name: str) -> float | None:
    if not os.getenv(name, "").strip():
        return None
    timeout = float(_parse_number(name, "0", float))
    if timeout == 0:
        raise ConfigError(f"{name} must be greater than zero when set")
    return timeout


def load_settings() -> Settings:
    load_dotenv()

    return Settings(
        telegram_bot_token=_require_env("TELEGRAM_BOT_TOKEN"),
        gemini_api_key=_require_env("GEMINI_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", "").strip() or DEFAULT_GEMINI_MODEL,
        gemini_timeout_seconds=_parse_optional_timeout("GEMINI_TIMEOUT_SECONDS"),
        telegram_poll_timeout_seconds=int(_parse_number("TELEGRAM_POLL_TIMEOUT_SECONDS", "60", int)),
        poll_interval_seconds=float(_parse_number("POLL_INTERVAL_SECONDS", "3", float)),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip() or "INFO",
    )
