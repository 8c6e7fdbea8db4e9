from __future__ import annotations

from typing import Any

import pytest

from learning_assistant.dedupe import normalize_url
from learning_assistant.enhanced_search import EnhancedSearch, is_valid_url
from learning_assistant.search_client import SearchError


class _FakeProvider:
    def __init__(
        self,
        items: list[dict[str, Any]] | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self._items = items or []
        self._error = error
        self.queries: list[str] = []

    async def search(self, query: str) -> list[dict[str, Any]]:
        self.queries.append(query)
        if self._error is not None:
            raise self._error
        return list(self._items)

    async def search_news(self, topic: str, *, max_results: int) -> list[dict[str, Any]]:
        del topic, max_results
        return []


def _item(link: str, title: str = "Title", snippet: str = "") -> dict[str, Any]:
    return {"title": title, "link": link, "snippet": snippet}


@pytest.mark.anyio
async def test_search_expands_query_for_learning_terms() -> None:
    provider = _FakeProvider([_item("https://github.com/a")])

    await EnhancedSearch(provider=provider).search("rust")

    assert provider.queries == ["rust tutorial OR guide OR documentation OR course"]


@pytest.mark.anyio
async def test_search_empty_provider_uses_curated_fallback() -> None:
    results = await EnhancedSearch(provider=_FakeProvider([])).search("javascript")

    assert len(results) == 1
    assert results[0].title == "Modern JavaScript Tutorial"
    assert results[0].url == "https://javascript.info"


@pytest.mark.anyio
async def test_search_provider_error_uses_generic_fallback() -> None:
    provider = _FakeProvider(error=SearchError("Search service timed out. Try again."))

    results = await EnhancedSearch(provider=provider).search("rust")

    assert [item.title for item in results] == [
        "Coursera - Online Learning",
        "edX - Free Online Courses",
    ]


@pytest.mark.anyio
async def test_search_unexpected_provider_error_never_escapes() -> None:
    provider = _FakeProvider(error=RuntimeError("boom"))

    results = await EnhancedSearch(provider=provider).search("python basics")

    assert [item.title for item in results] == ["Python Documentation"]


@pytest.mark.anyio
async def test_search_drops_untrusted_and_invalid_links() -> None:
    provider = _FakeProvider(
        [
            _item("https://spam.example/python"),
            _item("github.com/no-scheme"),
            {"title": "No link", "snippet": "x"},
            _item("https://stackoverflow.com/questions/1"),
        ]
    )

    results = await EnhancedSearch(provider=provider).search("python")

    assert [item.url for item in results] == ["https://stackoverflow.com/questions/1"]


@pytest.mark.anyio
async def test_search_dedupes_normalized_urls() -> None:
    provider = _FakeProvider(
        [
            _item("http://github.com/a", title="first"),
            _item("https://www.github.com/a/", title="second"),
        ]
    )

    results = await EnhancedSearch(provider=provider).search("git")

    assert [item.title for item in results] == ["first"]


@pytest.mark.anyio
async def test_search_output_invariants_hold() -> None:
    items = [
        _item(
            f"https://dev.to/post-{index}",
            title=f"Post {index}",
            snippet=" ".join(["word"] * (index * 20)) + ".",
        )
        for index in range(15)
    ]
    items.append(_item("https://dev.to/post-3?utm=1", title="Duplicate"))

    results = await EnhancedSearch(provider=_FakeProvider(items)).search("writing")

    assert len(results) <= 10
    keys = [normalize_url(item.url) for item in results]
    assert len(keys) == len(set(keys))
    for item in results:
        assert item.metadata.readability_score is not None
        assert 1.0 <= item.metadata.readability_score <= 5.0


@pytest.mark.anyio
async def test_search_ranks_interactive_content_first() -> None:
    provider = _FakeProvider(
        [
            _item("https://github.com/alpha", title="Alpha", snippet="Read this."),
            _item(
                "https://github.com/beta",
                title="Beta",
                snippet="An interactive quiz with examples: demo included.",
            ),
        ]
    )

    results = await EnhancedSearch(provider=provider).search("quiz")

    assert [item.title for item in results] == ["Beta", "Alpha"]
    assert results[0].metadata.quality_indicators is not None
    assert results[0].metadata.quality_indicators.is_interactive is True


@pytest.mark.anyio
async def test_search_classifies_and_reads_pagemap() -> None:
    provider = _FakeProvider(
        [
            {
                "title": "Advanced Python Tutorial",
                "link": "https://www.programiz.com/python-programming/tutorial",
                "snippet": "Deep dive.",
                "pagemap": {
                    "metatags": [{"article:published_time": "2024-05-01"}],
                    "person": [{"name": "Ada"}],
                    "organization": [{"name": "Programiz"}],
                },
            }
        ]
    )

    results = await EnhancedSearch(provider=provider).search("python")

    assert len(results) == 1
    result = results[0]
    assert result.type == "tutorial"
    assert result.difficulty == "advanced"
    assert result.metadata.date_published == "2024-05-01"
    assert result.metadata.author == "Ada"
    assert result.metadata.publisher == "Programiz"
    assert result.metadata.timestamp


@pytest.mark.anyio
async def test_search_all_items_filtered_returns_empty_list() -> None:
    provider = _FakeProvider([_item("https://spam.example/a")])

    assert await EnhancedSearch(provider=provider).search("javascript") == []


def test_is_valid_url() -> None:
    assert is_valid_url("https://github.com/a") is True
    assert is_valid_url("ftp://github.com/a") is False
    assert is_valid_url("not a url") is False
