from __future__ import annotations

from typing import Any

import requests

from .models import InboundMessage, OutboundReply, UpdateBatch, parse_command


class TelegramAPIError(RuntimeError):
    def __init__(self, *, method: str, status_code: int, message: str) -> None:
        super().__init__(f"{method} failed ({status_code}): {message}")
        self.method = method
        self.status_code = status_code
        self.message = message


class TelegramClient:
    def __init__(self, bot_token: str, timeout_seconds: float = 30.0) -> None:
        self._base_url = f"https://api.telegram.org/bot{bot_token}"
        self._timeout_seconds = timeout_seconds

    def _call(self, method: str, payload: dict[str, Any] | None = None, *, timeout: float | None = None) -> Any:
        response = requests.post(
            f"{self._base_url}/{method}",
            json=payload or {},
            timeout=timeout if timeout is not None else self._timeout_seconds,
        )
        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400 or not data.get("ok"):
            description = data.get("description") or response.text.strip()
            message = description if description else f"Telegram API error ({response.status_code})"
            raise TelegramAPIError(method=method, status_code=response.status_code, message=str(message))
        return data.get("result")

    def get_me(self) -> dict[str, Any]:
        return self._call("getMe")

    def get_updates(self, offset: int | None = None, timeout: int = 60) -> UpdateBatch:
        payload: dict[str, Any] = {"timeout": timeout, "allowed_updates": ["message"]}
        if offset is not None:
            payload["offset"] = offset

        result = self._call("getUpdates", payload, timeout=self._timeout_seconds + timeout)

        parsed: list[InboundMessage] = []
        next_offset = offset
        for item in result or []:
            next_offset = item["update_id"] + 1
            message = item.get("message")
            if not message:
                continue
            chat = message.get("chat")
            if not chat:
                continue

            text = message.get("text") or ""
            command = parse_command(text)
            parsed.append(
                InboundMessage(
                    update_id=item["update_id"],
                    message_id=message["message_id"],
                    chat_id=chat["id"],
                    text=text,
                    is_command=command is not None,
                    command=command or "",
                )
            )
        return UpdateBatch(messages=parsed, next_offset=next_offset)

    def send_message(self, reply: OutboundReply) -> None:
        payload: dict[str, Any] = {"chat_id": reply.chat_id, "text": reply.text}
        if reply.reply_to_message_id is not None:
            payload["reply_parameters"] = {"message_id": reply.reply_to_message_id}
        if reply.parse_mode:
            payload["parse_mode"] = reply.parse_mode
        self._call("sendMessage", payload)

    def send_chat_action(self, chat_id: int, action: str = "typing") -> None:
        self._call("sendChatAction", {"chat_id": chat_id, "action": action})
