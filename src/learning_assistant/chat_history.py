from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

from learning_assistant.types import utc_now_iso

logger = logging.getLogger(__name__)

HistoryErrorCode = Literal["permission-denied", "unavailable", "not-found", "unknown"]

LEARNING_COLLECTION = "chats"
NEWS_COLLECTION = "news_chats"

_ERROR_MESSAGES: dict[str, str] = {
    "permission-denied": "Permission denied. Please check your authentication status.",
    "unavailable": "Service temporarily unavailable. Please try again later.",
    "not-found": "Requested data not found.",
}


class HistoryError(Exception):
    def __init__(self, code: HistoryErrorCode, detail: str = "") -> None:
        super().__init__(detail or code)
        self.code = code
        self.user_message = describe_history_error(code)


def describe_history_error(code: str) -> str:
    return _ERROR_MESSAGES.get(
        code, "An unexpected error occurred. Please try again."
    )


@dataclass(frozen=True)
class ChatRecord:
    user_id: str
    session_id: str
    query: str
    content: str
    references: list[dict[str, Any]]
    articles: list[dict[str, Any]]
    timestamp: str
    query_time: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: float = field(default_factory=time.time)

    def to_message(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "bot",
            "content": self.content,
            "references": self.references,
            "articles": self.articles,
            "timestamp": self.timestamp,
            "metadata": {
                "query": self.query,
                "results_count": len(self.articles) or len(self.references),
                "sources": [
                    article["source"]
                    for article in self.articles
                    if article.get("source")
                ],
                "query_time": self.query_time,
            },
        }


class ChatHistoryBackend(Protocol):
    async def add(self, collection: str, record: ChatRecord) -> None: ...

    async def query(
        self, collection: str, *, user_id: str, limit: int
    ) -> list[ChatRecord]: ...


class InMemoryChatHistoryBackend:
    def __init__(self, *, max_records_per_user: int = 200) -> None:
        self._max_records_per_user = max(1, max_records_per_user)
        self._records: dict[tuple[str, str], list[ChatRecord]] = {}

    async def add(self, collection: str, record: ChatRecord) -> None:
        bucket = self._records.setdefault((collection, record.user_id), [])
        bucket.append(record)
        if len(bucket) > self._max_records_per_user:
            self._records[(collection, record.user_id)] = bucket[
                -self._max_records_per_user :
            ]

    async def query(
        self, collection: str, *, user_id: str, limit: int
    ) -> list[ChatRecord]:
        records = self._records.get((collection, user_id), [])
        # Newest first; list order breaks created_at ties.
        ordered = sorted(
            enumerate(records),
            key=lambda pair: (pair[1].created_at, pair[0]),
            reverse=True,
        )
        return [record for _, record in ordered[: max(0, limit)]]


class ChatHistoryService:
    def __init__(
        self,
        *,
        backend: ChatHistoryBackend,
        collection: str,
        default_limit: int = 20,
        max_attempts: int = 3,
        backoff_seconds: float = 0.5,
    ) -> None:
        self._backend = backend
        self._collection = collection
        self._default_limit = max(1, default_limit)
        self._max_attempts = max(1, max_attempts)
        self._backoff_seconds = backoff_seconds

    async def save_chat(
        self,
        *,
        user_id: str | None,
        session_id: str | None,
        message: str,
        response: dict[str, Any],
        timestamp: str | None = None,
    ) -> ChatRecord | None:
        if not user_id or not session_id:
            logger.error(
                "history_save_skipped collection=%s has_user=%s has_session=%s",
                self._collection,
                bool(user_id),
                bool(session_id),
            )
            return None

        record = ChatRecord(
            user_id=user_id,
            session_id=session_id,
            query=message or "",
            content=str(response.get("content") or ""),
            references=list(response.get("references") or []),
            articles=list(response.get("articles") or []),
            timestamp=timestamp or utc_now_iso(),
            query_time=utc_now_iso(),
        )

        for attempt in range(self._max_attempts):
            try:
                await self._backend.add(self._collection, record)
                return record
            except HistoryError as exc:
                if exc.code != "unavailable" or attempt == self._max_attempts - 1:
                    logger.warning(
                        "history_save_failed collection=%s code=%s attempt=%d",
                        self._collection,
                        exc.code,
                        attempt + 1,
                    )
                    raise
                await asyncio.sleep(self._backoff_seconds * (attempt + 1))

        raise HistoryError("unknown", "history save failed unexpectedly")

    async def get_chat_history(
        self, user_id: str | None, limit: int | None = None
    ) -> list[dict[str, Any]]:
        if not user_id:
            logger.error("history_fetch_skipped collection=%s", self._collection)
            return []

        bounded_limit = self._default_limit if limit is None else max(1, limit)
        try:
            records = await self._backend.query(
                self._collection, user_id=user_id, limit=bounded_limit
            )
        except HistoryError as exc:
            logger.warning(
                "history_fetch_failed collection=%s code=%s detail=%s",
                self._collection,
                exc.code,
                exc.user_message,
            )
            return []

        return [record.to_message() for record in records]
