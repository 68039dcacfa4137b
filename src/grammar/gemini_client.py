from __future__ import annotations

from typing import Any

import requests

from .prompt import build_correction_prompt


class GeminiAPIError(RuntimeError):
    pass


class GeminiCorrector:
    def __init__(self, *, api_key: str, model: str, timeout_seconds: float | None = None) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout_seconds = timeout_seconds
        self._url = f"https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    @property
    def model(self) -> str:
        return self._model

    def correct(self, text: str) -> str:
        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": build_correction_prompt(text)}]},
            ],
        }

        response = requests.post(
            self._url,
            headers={
                "x-goog-api-key": self._api_key,
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=self._timeout_seconds,
        )
        if response.status_code >= 400:
            raise GeminiAPIError(f"Gemini request failed ({response.status_code}): {_error_message(response)}")

        try:
            data = response.json()
        except ValueError as exc:
            raise GeminiAPIError("Gemini response was not valid JSON") from exc

        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise GeminiAPIError(f"Gemini blocked the prompt: {block_reason}")

        return _extract_text(data)


def _error_message(response: requests.Response) -> str:
    try:
        message = response.json()["error"]["message"]
    except Exception:
        message = response.text.strip()
    return str(message) if message else "no details"


def _extract_text(data: dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError) as exc:
        finish_reason = _first_finish_reason(data)
        detail = f" (finish reason: {finish_reason})" if finish_reason else ""
        raise GeminiAPIError(f"Gemini response had no content{detail}") from exc

    text = "".join(
        str(part["text"])
        for part in parts
        if isinstance(part, dict) and part.get("text") and not part.get("thought")
    )
    if not text:
        raise GeminiAPIError("Gemini response contained no text")
    return text


def _first_finish_reason(data: dict[str, Any]) -> str | None:
    candidates = data.get("candidates") or []
    if candidates and isinstance(candidates[0], dict):
        return candidates[0].get("finishReason")
    return None
