"""Learning-resource search: fetch, filter, classify, enrich, dedupe and rank."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from learning_assistant.catalog import DEFAULT_CATALOG, SearchCatalog
from learning_assistant.classify import assess_difficulty, categorize_content
from learning_assistant.dedupe import dedupe_results
from learning_assistant.enrich import enrich_results
from learning_assistant.parsing import as_dict, first_item, first_non_empty_str
from learning_assistant.ranking import (
    DEFAULT_WEIGHTS,
    MAX_RANKED_RESULTS,
    RankingWeights,
    rank_results,
)
from learning_assistant.search_client import RawItem, SearchError, SearchProvider
from learning_assistant.types import ResultMetadata, SearchResult

logger = logging.getLogger(__name__)


class EnhancedSearch:
    def __init__(
        self,
        *,
        provider: SearchProvider,
        catalog: SearchCatalog = DEFAULT_CATALOG,
        weights: RankingWeights = DEFAULT_WEIGHTS,
        max_results: int = MAX_RANKED_RESULTS,
        debug_logging: bool = False,
    ) -> None:
        self._provider = provider
        self._catalog = catalog
        self._weights = weights
        self._max_results = max_results
        self._debug_logging = debug_logging

    async def search(self, query: str) -> list[SearchResult]:
        raw_items = await self.fetch(query)
        if raw_items is None:
            fallback = self._catalog.fallback_results(query)
            self._debug_log(
                "fallback_used", query_len=len(query), result_count=len(fallback)
            )
            return fallback

        candidates = [
            build_result(item)
            for item in raw_items
            if is_relevant_item(item, self._catalog)
        ]
        enriched = await enrich_results(candidates)
        unique = dedupe_results(enriched)
        ranked = rank_results(unique, weights=self._weights, limit=self._max_results)
        self._debug_log(
            "pipeline_complete",
            raw_count=len(raw_items),
            relevant_count=len(candidates),
            deduped_count=len(unique),
            returned_count=len(ranked),
        )
        return ranked

    async def fetch(self, query: str) -> list[RawItem] | None:
        """Return raw provider items, or None when the fallback list should be used."""
        expanded = self._catalog.expand_query(query)
        try:
            items = await self._provider.search(expanded)
        except SearchError as exc:
            logger.warning("search_provider_failed detail=%s", exc.user_message)
            return None
        except Exception:
            logger.exception("search_provider_unexpected_error")
            return None

        if not items:
            logger.info("search_provider_empty query_len=%d", len(query))
            return None
        return items

    def _debug_log(self, event: str, **fields: object) -> None:
        if not self._debug_logging:
            return
        logger.info(
            "search_debug event=%s %s",
            event,
            " ".join(f"{key}={value}" for key, value in sorted(fields.items())),
        )


def is_relevant_item(item: RawItem, catalog: SearchCatalog) -> bool:
    url = first_non_empty_str(item, "link", "url")
    if url is None or not is_valid_url(url):
        return False
    return catalog.is_trusted(url)


def is_valid_url(url: str) -> bool:
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme in {"http", "https"} and bool(parts.netloc)


def build_result(item: RawItem) -> SearchResult:
    title = first_non_empty_str(item, "title") or ""
    url = (first_non_empty_str(item, "link", "url") or "").strip()
    description = first_non_empty_str(item, "snippet", "description") or ""

    pagemap = as_dict(item.get("pagemap"))
    metatags = first_item(pagemap, "metatags")
    person = first_item(pagemap, "person")
    organization = first_item(pagemap, "organization")

    return SearchResult(
        title=title,
        url=url,
        description=description,
        type=categorize_content(title, url),
        difficulty=assess_difficulty(title, description),
        metadata=ResultMetadata(
            date_published=first_non_empty_str(metatags, "article:published_time"),
            author=first_non_empty_str(person, "name"),
            publisher=first_non_empty_str(organization, "name"),
        ),
    )
