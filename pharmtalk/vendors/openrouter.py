"""Chat-completions client for OpenRouter (OpenAI-compatible API)."""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()


class OpenRouterError(RuntimeError):
    """Raised when the completion API returns a non-successful response."""


def chat_completion(
    messages: List[Dict[str, Any]],
    *,
    api_key: str,
    model: str,
    base_url: str,
    max_tokens: int,
    temperature: Optional[float] = None,
) -> str:
    """Send a chat completion request and return the first choice's text."""
    payload: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "max_tokens": max_tokens,
    }
    if temperature is not None:
        payload["temperature"] = temperature

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    try:
        response = _SESSION.post(f"{base_url}/chat/completions", json=payload, headers=headers, timeout=60)
    except requests.RequestException as exc:
        logger.error("chat_completion request failed: %s", exc)
        raise OpenRouterError(str(exc)) from exc

    if not response.ok:
        logger.error("chat_completion failed: status=%s body=%s", response.status_code, response.text[:500])
        raise OpenRouterError(f"completion API returned status={response.status_code}")

    try:
        data = response.json()
    except ValueError as exc:
        raise OpenRouterError(f"invalid JSON from completion API: {exc}") from exc

    return _first_choice_text(data)


def _first_choice_text(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""
