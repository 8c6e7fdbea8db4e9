from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from learning_assistant.chat_prompt import (
    NO_NEWS_FOUND_TEXT,
    build_fallback_news_summary,
    build_learning_messages,
    build_news_messages,
)
from learning_assistant.openrouter_client import ChatReplyError
from learning_assistant.types import NewsArticle

logger = logging.getLogger(__name__)


class SummaryError(Exception):
    def __init__(self, user_message: str) -> None:
        super().__init__(user_message)
        self.user_message = user_message


class OpenRouterClientLike(Protocol):
    async def generate_reply(self, messages: list[dict[str, str]]) -> str: ...


class Summarizer:
    def __init__(
        self,
        *,
        learning_client: OpenRouterClientLike,
        news_client: OpenRouterClientLike,
    ) -> None:
        self._learning_client = learning_client
        self._news_client = news_client

    async def generate_learning_response(self, query: str, search_content: str) -> str:
        messages = build_learning_messages(query=query, search_content=search_content)
        try:
            reply = await self._learning_client.generate_reply(messages)
        except ChatReplyError as exc:
            logger.warning("learning_response_failed detail=%s", exc.user_message)
            raise SummaryError(
                "Maaf, terjadi kesalahan saat memproses permintaan Anda. "
                f"{exc.user_message}"
            ) from exc

        reply = reply.strip()
        if not reply:
            raise SummaryError(
                "Maaf, model tidak memberikan respons yang valid. Silakan coba lagi."
            )
        return reply

    async def summarize_news(self, articles: Sequence[NewsArticle]) -> str:
        if not articles:
            return NO_NEWS_FOUND_TEXT

        try:
            reply = await self._news_client.generate_reply(build_news_messages(articles))
        except ChatReplyError as exc:
            logger.warning(
                "news_summary_fallback article_count=%d detail=%s",
                len(articles),
                exc.user_message,
            )
            return build_fallback_news_summary(articles)

        logger.info("news_summary_generated article_count=%d", len(articles))
        return reply
