from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from fastapi import APIRouter, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from learning_assistant.chat_history import ChatHistoryService, HistoryError
from learning_assistant.chat_prompt import LEARNING_GREETING, format_search_content
from learning_assistant.news_service import NewsError
from learning_assistant.parsing import as_dict, first_non_empty_str
from learning_assistant.types import NewsArticle, SearchResult, utc_now_iso

logger = logging.getLogger(__name__)

APOLOGY_TEXT = (
    "Maaf, terjadi kesalahan saat memproses permintaan Anda. Silakan coba lagi."
)


class RequestError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class EnhancedSearchLike(Protocol):
    async def search(self, query: str) -> list[SearchResult]: ...


class NewsServiceLike(Protocol):
    async def fetch_news_for_topic(self, topic: str) -> list[NewsArticle]: ...


class SummarizerLike(Protocol):
    async def generate_learning_response(
        self, query: str, search_content: str
    ) -> str: ...

    async def summarize_news(self, articles: list[NewsArticle]) -> str: ...


class ChatHandler:
    def __init__(
        self,
        *,
        search: EnhancedSearchLike,
        news_service: NewsServiceLike,
        summarizer: SummarizerLike,
        learning_history: ChatHistoryService,
        news_history: ChatHistoryService,
    ) -> None:
        self._search = search
        self._news_service = news_service
        self._summarizer = summarizer
        self._histories = {"learning": learning_history, "news": news_history}

    async def handle_chat(self, payload: dict[str, Any]) -> dict[str, Any]:
        message = first_non_empty_str(payload, "message")
        if message is None:
            raise RequestError(400, "Message is required.")

        message = message.strip()
        logger.info("chat_request message_len=%d", len(message))
        response = await self.process_user_query(message)
        await self._save_turn("learning", payload, message, response)
        return {"response": response}

    async def process_user_query(self, message: str) -> dict[str, Any]:
        try:
            results = await self._search.search(message)
            if not results:
                logger.info("chat_no_results message_len=%d", len(message))
                return {
                    "content": (
                        f'Untuk topik "{message}", saya sarankan untuk memulai dengan '
                        "konsep dasarnya dulu. Apa yang ingin Anda ketahui secara "
                        "spesifik?"
                    ),
                    "references": [],
                    "timestamp": utc_now_iso(),
                }

            summary = await self._summarizer.generate_learning_response(
                message, format_search_content(results)
            )
            return {
                "content": summary,
                "references": [result.to_dict() for result in results],
                "timestamp": utc_now_iso(),
            }
        except Exception:
            logger.exception("chat_processing_error message_len=%d", len(message))
            return {
                "content": APOLOGY_TEXT,
                "references": [],
                "timestamp": utc_now_iso(),
            }

    async def handle_news(self, payload: dict[str, Any]) -> dict[str, Any]:
        topic = first_non_empty_str(payload, "topic", "message")
        if topic is None:
            raise RequestError(400, "Topic is required.")
        topic = topic.strip()

        try:
            articles = await self._news_service.fetch_news_for_topic(topic)
        except NewsError as exc:
            raise RequestError(502, exc.user_message) from exc

        content = await self._summarizer.summarize_news(articles)
        response = {
            "content": content,
            "articles": [article.to_dict() for article in articles],
            "references": [
                {
                    "title": article.title,
                    "url": article.url,
                    "description": article.description,
                }
                for article in articles
            ],
            "timestamp": utc_now_iso(),
        }
        await self._save_turn("news", payload, topic, response)
        return {"response": response}

    async def handle_history(
        self, assistant: str, user_id: str | None, limit: int | None
    ) -> dict[str, Any]:
        history = self._histories.get(assistant)
        if history is None:
            raise RequestError(404, "Unknown assistant.")
        if not user_id:
            raise RequestError(400, "userId is required.")

        result: dict[str, Any] = {
            "history": await history.get_chat_history(user_id, limit)
        }
        if assistant == "learning":
            result["greeting"] = LEARNING_GREETING
        return result

    async def _save_turn(
        self,
        assistant: str,
        payload: dict[str, Any],
        message: str,
        response: dict[str, Any],
    ) -> None:
        user_id = first_non_empty_str(payload, "userId", "user_id")
        session_id = first_non_empty_str(payload, "sessionId", "session_id")
        if user_id is None or session_id is None:
            return

        try:
            await self._histories[assistant].save_chat(
                user_id=user_id,
                session_id=session_id,
                message=message,
                response=response,
                timestamp=response.get("timestamp"),
            )
        except HistoryError as exc:
            logger.warning(
                "chat_history_not_saved assistant=%s code=%s detail=%s",
                assistant,
                exc.code,
                exc.user_message,
            )


def build_router(handler: ChatHandler) -> APIRouter:
    router = APIRouter()

    @router.post("/api/chat")
    async def chat(request: Request) -> JSONResponse:
        return await _respond(_with_payload(request, handler.handle_chat))

    @router.post("/api/news")
    async def news(request: Request) -> JSONResponse:
        return await _respond(_with_payload(request, handler.handle_news))

    @router.get("/api/history/{assistant}")
    async def history(
        assistant: str,
        user_id: str | None = Query(default=None, alias="userId"),
        limit: int | None = None,
    ) -> JSONResponse:
        return await _respond(handler.handle_history(assistant, user_id, limit))

    return router


async def _respond(pending: Awaitable[dict[str, Any]]) -> JSONResponse:
    try:
        body = await pending
    except RequestError as exc:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)
    except Exception:
        logger.exception("unexpected_request_error")
        return JSONResponse({"error": "Internal server error"}, status_code=500)
    return JSONResponse(body)


async def _with_payload(
    request: Request,
    action: Callable[[dict[str, Any]], Awaitable[dict[str, Any]]],
) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise RequestError(400, "Request body must be valid JSON.") from exc
    # Non-object bodies count as empty.
    return await action(as_dict(payload))


async def request_validation_error_handler(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("request_validation_failed error_count=%d", len(exc.errors()))
    return JSONResponse({"error": "Invalid request parameters."}, status_code=400)
