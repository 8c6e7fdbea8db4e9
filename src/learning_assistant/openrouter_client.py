from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from learning_assistant.parsing import as_dict, first_non_empty_str

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}
_MAX_ATTEMPTS = 3
_BACKOFF_SECONDS = 0.5
_MAX_DETAIL_CHARS = 240


class ChatReplyError(Exception):
    def __init__(self, user_message: str, *, status_code: int | None = None) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.status_code = status_code


class OpenRouterClient:
    """Chat-completions client for one assistant persona with fixed sampling."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        http_client: httpx.AsyncClient,
        base_url: str,
        timeout_seconds: float,
        max_output_tokens: int,
        temperature: float,
        top_p: float | None = None,
        http_referer: str | None = None,
        app_title: str | None = None,
    ) -> None:
        self._http_client = http_client
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._timeout_seconds = timeout_seconds
        self._model = model
        self._sampling: dict[str, Any] = {
            "max_tokens": max_output_tokens,
            "temperature": temperature,
        }
        if top_p is not None:
            self._sampling["top_p"] = top_p
        self._headers = _build_headers(
            api_key=api_key, http_referer=http_referer, app_title=app_title
        )

    async def generate_reply(self, messages: list[dict[str, str]]) -> str:
        payload = {
            "model": self._model,
            "messages": messages,
            **self._sampling,
            "stream": False,
        }

        for attempt in range(1, _MAX_ATTEMPTS + 1):
            last_attempt = attempt == _MAX_ATTEMPTS
            try:
                response = await self._http_client.post(
                    self._url,
                    json=payload,
                    headers=self._headers,
                    timeout=self._timeout_seconds,
                )
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                if last_attempt:
                    raise ChatReplyError("Chat service timed out. Try again.") from exc
                logger.warning(
                    "openrouter_retry attempt=%d reason=%s",
                    attempt,
                    type(exc).__name__,
                )
                await asyncio.sleep(_BACKOFF_SECONDS * attempt)
                continue

            status = response.status_code
            if status < 400:
                return _extract_reply_text(response)

            if status in _RETRYABLE_STATUS and not last_attempt:
                logger.warning("openrouter_retry attempt=%d status=%d", attempt, status)
                await asyncio.sleep(_BACKOFF_SECONDS * attempt)
                continue

            if status in {401, 403}:
                raise ChatReplyError(
                    "Chat service authorization failed.", status_code=status
                )

            raise ChatReplyError(
                f"Chat reply failed: {_extract_response_detail(response)}",
                status_code=status,
            )

        raise ChatReplyError("Chat service failed unexpectedly.")


def _extract_reply_text(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError as exc:
        raise ChatReplyError("Chat service returned invalid JSON.") from exc

    choices = as_dict(payload).get("choices")
    if not isinstance(choices, list) or not choices:
        raise ChatReplyError("Chat service returned an empty reply.")

    message = as_dict(as_dict(choices[0]).get("message"))
    content = _extract_content_text(message.get("content"))
    if not content:
        raise ChatReplyError("Chat service returned an empty reply.")
    return content


def _extract_content_text(content: Any) -> str:
    # Replies are markdown, so line structure is kept.
    if isinstance(content, str):
        return content.strip()
    if not isinstance(content, list):
        return ""

    parts = (first_non_empty_str(as_dict(part), "text") for part in content)
    return "\n".join(part.strip() for part in parts if part)


def _extract_response_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        detail = response.text
    else:
        body = as_dict(payload)
        detail = str(
            body.get("error") or body.get("message") or body.get("detail") or payload
        )

    detail = " ".join(detail.split())
    if not detail:
        return "No error detail"
    if len(detail) > _MAX_DETAIL_CHARS:
        return f"{detail[:_MAX_DETAIL_CHARS]}..."
    return detail


def _build_headers(
    *, api_key: str, http_referer: str | None, app_title: str | None
) -> dict[str, str]:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    if http_referer:
        headers["HTTP-Referer"] = http_referer
    if app_title:
        headers["X-Title"] = app_title
    return headers
