from __future__ import annotations

import re

from learning_assistant.types import SearchResult

_SCHEME_RE = re.compile(r"^https?://")
_WWW_RE = re.compile(r"^www\.")


def normalize_url(url: str) -> str:
    normalized = _SCHEME_RE.sub("", url.lower(), count=1)
    normalized = _WWW_RE.sub("", normalized, count=1)
    normalized = normalized.removesuffix("/")
    return normalized.split("?", maxsplit=1)[0]


def dedupe_results(results: list[SearchResult]) -> list[SearchResult]:
    deduped: list[SearchResult] = []
    seen_urls: set[str] = set()
    for result in results:
        key = normalize_url(result.url)
        if key in seen_urls:
            continue
        deduped.append(result)
        seen_urls.add(key)
    return deduped
