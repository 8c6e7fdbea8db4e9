from __future__ import annotations

from learning_assistant.dedupe import dedupe_results, normalize_url
from learning_assistant.types import SearchResult


def _result(url: str, title: str = "t") -> SearchResult:
    return SearchResult(title=title, url=url, description="")


def test_normalize_url_strips_scheme_www_slash_and_query() -> None:
    assert normalize_url("https://www.example.com/a/") == "example.com/a"
    assert normalize_url("HTTP://Example.com/A") == "example.com/a"
    assert normalize_url("https://example.com/a?ref=x&b=1") == "example.com/a"


def test_dedupe_keeps_first_occurrence() -> None:
    results = [
        _result("http://example.com/a", title="first"),
        _result("https://www.example.com/a/", title="second"),
        _result("https://example.com/b", title="third"),
    ]

    deduped = dedupe_results(results)

    assert [item.title for item in deduped] == ["first", "third"]


def test_dedupe_keeps_distinct_paths() -> None:
    results = [_result("https://github.com/a"), _result("https://github.com/ab")]

    assert len(dedupe_results(results)) == 2
