from __future__ import annotations

import pytest

from learning_assistant.chat_history import (
    LEARNING_COLLECTION,
    NEWS_COLLECTION,
    ChatHistoryService,
    ChatRecord,
    HistoryError,
    InMemoryChatHistoryBackend,
    describe_history_error,
)


class _FlakyBackend(InMemoryChatHistoryBackend):
    def __init__(self, errors: list[HistoryError]) -> None:
        super().__init__()
        self._errors = errors
        self.add_attempts = 0

    async def add(self, collection: str, record: ChatRecord) -> None:
        self.add_attempts += 1
        if self._errors:
            raise self._errors.pop(0)
        await super().add(collection, record)


class _BrokenQueryBackend(InMemoryChatHistoryBackend):
    async def query(
        self, collection: str, *, user_id: str, limit: int
    ) -> list[ChatRecord]:
        raise HistoryError("permission-denied", "rules rejected read")


def _service(backend: InMemoryChatHistoryBackend, **kwargs: object) -> ChatHistoryService:
    return ChatHistoryService(
        backend=backend,
        collection=LEARNING_COLLECTION,
        backoff_seconds=0,
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.mark.anyio
async def test_save_and_fetch_newest_first() -> None:
    service = _service(InMemoryChatHistoryBackend())

    for index in range(3):
        await service.save_chat(
            user_id="u1",
            session_id="s1",
            message=f"pertanyaan {index}",
            response={"content": f"jawaban {index}", "references": []},
        )

    history = await service.get_chat_history("u1")

    assert [item["content"] for item in history] == [
        "jawaban 2",
        "jawaban 1",
        "jawaban 0",
    ]
    assert history[0]["type"] == "bot"
    assert history[0]["metadata"]["query"] == "pertanyaan 2"


@pytest.mark.anyio
async def test_fetch_respects_limit_and_user() -> None:
    service = _service(InMemoryChatHistoryBackend(), default_limit=2)
    for user in ("u1", "u1", "u1", "u2"):
        await service.save_chat(
            user_id=user, session_id="s", message="m", response={"content": "c"}
        )

    assert len(await service.get_chat_history("u1")) == 2
    assert len(await service.get_chat_history("u1", limit=5)) == 3
    assert len(await service.get_chat_history("u2")) == 1
    assert await service.get_chat_history("nobody") == []


@pytest.mark.anyio
async def test_collections_are_isolated() -> None:
    backend = InMemoryChatHistoryBackend()
    learning = _service(backend)
    news = ChatHistoryService(backend=backend, collection=NEWS_COLLECTION)

    await learning.save_chat(
        user_id="u1", session_id="s", message="m", response={"content": "c"}
    )

    assert await news.get_chat_history("u1") == []


@pytest.mark.anyio
async def test_news_metadata_lists_article_sources() -> None:
    service = _service(InMemoryChatHistoryBackend())
    await service.save_chat(
        user_id="u1",
        session_id="s",
        message="ekonomi",
        response={
            "content": "ringkasan",
            "articles": [{"source": "kompas.com"}, {"source": ""}],
        },
    )

    metadata = (await service.get_chat_history("u1"))[0]["metadata"]

    assert metadata["results_count"] == 2
    assert metadata["sources"] == ["kompas.com"]


@pytest.mark.anyio
async def test_save_without_user_or_session_is_skipped() -> None:
    backend = InMemoryChatHistoryBackend()
    service = _service(backend)

    assert (
        await service.save_chat(
            user_id=None, session_id="s", message="m", response={"content": "c"}
        )
        is None
    )
    assert (
        await service.save_chat(
            user_id="u1", session_id="", message="m", response={"content": "c"}
        )
        is None
    )
    assert await service.get_chat_history("u1") == []


@pytest.mark.anyio
async def test_save_retries_when_unavailable() -> None:
    backend = _FlakyBackend(
        [HistoryError("unavailable"), HistoryError("unavailable")]
    )
    service = _service(backend)

    record = await service.save_chat(
        user_id="u1", session_id="s", message="m", response={"content": "c"}
    )

    assert record is not None
    assert backend.add_attempts == 3
    assert len(await service.get_chat_history("u1")) == 1


@pytest.mark.anyio
async def test_save_gives_up_after_max_attempts() -> None:
    backend = _FlakyBackend([HistoryError("unavailable")] * 5)
    service = _service(backend, max_attempts=2)

    with pytest.raises(HistoryError) as exc:
        await service.save_chat(
            user_id="u1", session_id="s", message="m", response={"content": "c"}
        )

    assert exc.value.code == "unavailable"
    assert backend.add_attempts == 2


@pytest.mark.anyio
async def test_save_does_not_retry_permission_errors() -> None:
    backend = _FlakyBackend([HistoryError("permission-denied")])
    service = _service(backend)

    with pytest.raises(HistoryError) as exc:
        await service.save_chat(
            user_id="u1", session_id="s", message="m", response={"content": "c"}
        )

    assert exc.value.user_message == (
        "Permission denied. Please check your authentication status."
    )
    assert backend.add_attempts == 1


@pytest.mark.anyio
async def test_fetch_error_returns_empty_history() -> None:
    service = _service(_BrokenQueryBackend())

    assert await service.get_chat_history("u1") == []


def test_describe_history_error_defaults() -> None:
    assert describe_history_error("not-found") == "Requested data not found."
    assert describe_history_error("weird") == (
        "An unexpected error occurred. Please try again."
    )


@pytest.mark.anyio
async def test_learning_metadata_counts_references() -> None:
    service = _service(InMemoryChatHistoryBackend())
    await service.save_chat(
        user_id="u1",
        session_id="s",
        message="html",
        response={"content": "c", "references": [{"url": "a"}, {"url": "b"}]},
    )

    metadata = (await service.get_chat_history("u1"))[0]["metadata"]

    assert metadata["results_count"] == 2
    assert metadata["sources"] == []
