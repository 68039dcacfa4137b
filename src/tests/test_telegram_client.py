import pytest

from telegram import client as client_module
from telegram.client import TelegramAPIError, TelegramClient
from telegram.models import MARKDOWN_V2, OutboundReply, parse_command


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, text: str = "") -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class RecordingPost:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls = []

    def __call__(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        return self.response


def _install(monkeypatch: pytest.MonkeyPatch, response: FakeResponse) -> RecordingPost:
    recorder = RecordingPost(response)
    monkeypatch.setattr(client_module.requests, "post", recorder)
    return recorder


def test_parse_command_variants() -> None:
    assert parse_command("hello") is None
    assert parse_command("/start") == "start"
    assert parse_command("/Help extra words") == "help"
    assert parse_command("/start@grammar_check_bot") == "start"
    assert parse_command("/") == ""
    assert parse_command("/ spaced") == ""


def test_get_updates_parses_messages(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _install(
        monkeypatch,
        FakeResponse(
            {
                "ok": True,
                "result": [
                    {
                        "update_id": 10,
                        "message": {"message_id": 1, "chat": {"id": 500}, "text": "I goes home"},
                    },
                    {
                        "update_id": 11,
                        "message": {"message_id": 2, "chat": {"id": 500}, "text": "/help"},
                    },
                    {"update_id": 12, "edited_message": {"message_id": 1, "chat": {"id": 500}}},
                    {
                        "update_id": 13,
                        "message": {"message_id": 3, "chat": {"id": 501}, "sticker": {"file_id": "x"}},
                    },
                ],
            }
        ),
    )
    client = TelegramClient("123:abc", timeout_seconds=5.0)

    batch = client.get_updates(offset=9, timeout=60)

    assert [m.message_id for m in batch.messages] == [1, 2, 3]
    assert batch.messages[0].text == "I goes home"
    assert batch.messages[0].is_command is False
    assert batch.messages[1].is_command is True
    assert batch.messages[1].command == "help"
    assert batch.messages[2].text == ""
    assert batch.next_offset == 14

    call = recorder.calls[0]
    assert call["url"] == "https://api.telegram.org/bot123:abc/getUpdates"
    assert call["json"] == {"timeout": 60, "allowed_updates": ["message"], "offset": 9}
    assert call["timeout"] == 65.0


def test_get_updates_empty_keeps_offset(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, FakeResponse({"ok": True, "result": []}))
    batch = TelegramClient("t").get_updates(offset=7)
    assert batch.messages == []
    assert batch.next_offset == 7


def test_send_message_threaded_markdown(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _install(monkeypatch, FakeResponse({"ok": True, "result": {"message_id": 77}}))
    client = TelegramClient("t", timeout_seconds=9.0)

    client.send_message(
        OutboundReply(chat_id=3, text="*hi*", reply_to_message_id=8, parse_mode=MARKDOWN_V2)
    )

    call = recorder.calls[0]
    assert call["url"].endswith("/sendMessage")
    assert call["json"] == {
        "chat_id": 3,
        "text": "*hi*",
        "reply_parameters": {"message_id": 8},
        "parse_mode": "MarkdownV2",
    }
    assert call["timeout"] == 9.0


def test_send_message_plain_omits_optional_fields(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _install(monkeypatch, FakeResponse({"ok": True, "result": {}}))
    TelegramClient("t").send_message(OutboundReply(chat_id=3, text="plain"))
    assert recorder.calls[0]["json"] == {"chat_id": 3, "text": "plain"}


def test_send_message_raises_on_rejection(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(
        monkeypatch,
        FakeResponse(
            {"ok": False, "error_code": 400, "description": "Bad Request: can't parse entities"},
            status_code=400,
        ),
    )

    with pytest.raises(TelegramAPIError) as exc_info:
        TelegramClient("t").send_message(OutboundReply(chat_id=3, text="*broken", parse_mode=MARKDOWN_V2))

    assert exc_info.value.status_code == 400
    assert exc_info.value.method == "sendMessage"
    assert "can't parse entities" in exc_info.value.message


def test_non_json_error_uses_body_text(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, FakeResponse(None, status_code=502, text="Bad Gateway"))
    with pytest.raises(TelegramAPIError) as exc_info:
        TelegramClient("t").get_me()
    assert exc_info.value.message == "Bad Gateway"


def test_get_me_returns_bot_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, FakeResponse({"ok": True, "result": {"id": 1, "username": "grammar_check_bot"}}))
    assert TelegramClient("t").get_me()["username"] == "grammar_check_bot"


def test_send_chat_action(monkeypatch: pytest.MonkeyPatch) -> None:
    recorder = _install(monkeypatch, FakeResponse({"ok": True, "result": True}))
    TelegramClient("t").send_chat_action(4)
    assert recorder.calls[0]["url"].endswith("/sendChatAction")
    assert recorder.calls[0]["json"] == {"chat_id": 4, "action": "typing"}
