from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol, cast

import httpx
from ddgs import DDGS
from ddgs.exceptions import DDGSException, RatelimitException, TimeoutException

from learning_assistant.config import Settings
from learning_assistant.parsing import as_dict

logger = logging.getLogger(__name__)

RawItem = dict[str, Any]


class SearchError(Exception):
    def __init__(self, user_message: str, *, status_code: int | None = None) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.status_code = status_code


class SearchProvider(Protocol):
    """Returns raw items shaped like ``{title, link, snippet, displayLink?, pagemap?}``."""

    async def search(self, query: str) -> list[RawItem]: ...

    async def search_news(self, topic: str, *, max_results: int) -> list[RawItem]: ...


class GoogleSearchClient:
    def __init__(
        self,
        *,
        api_key: str,
        cse_id: str,
        http_client: httpx.AsyncClient,
        base_url: str,
        timeout_seconds: float,
    ) -> None:
        self._api_key = api_key
        self._cse_id = cse_id
        self._http_client = http_client
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds

    async def search(self, query: str) -> list[RawItem]:
        return await self._request({"q": query})

    async def search_news(self, topic: str, *, max_results: int) -> list[RawItem]:
        return await self._request(
            {
                "q": f"{topic} berita",
                "num": str(max_results),
                "dateRestrict": "d1",
                "sort": "date",
            }
        )

    async def _request(self, params: dict[str, str]) -> list[RawItem]:
        query_params = {"key": self._api_key, "cx": self._cse_id, **params}
        try:
            response = await self._http_client.get(
                self._base_url,
                params=query_params,
                timeout=self._timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise SearchError("Search service timed out. Try again.") from exc
        except httpx.HTTPError as exc:
            raise SearchError("Search service is unreachable.") from exc

        if response.status_code >= 400:
            raise SearchError(
                f"Search failed with status {response.status_code}.",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchError("Search service returned invalid JSON.") from exc

        return _normalize_raw_items(as_dict(payload).get("items"))


class DdgsSearchClient:
    def __init__(self, *, timeout_seconds: float, max_results: int = 10) -> None:
        self._timeout = max(1, round(timeout_seconds))
        self._max_results = max_results

    async def search(self, query: str) -> list[RawItem]:
        return await self._run(self._text_sync, query, self._max_results)

    async def search_news(self, topic: str, *, max_results: int) -> list[RawItem]:
        return await self._run(self._news_sync, topic, max_results)

    async def _run(self, func: Any, query: str, max_results: int) -> list[RawItem]:
        try:
            return await asyncio.to_thread(func, query, max_results)
        except RatelimitException as exc:
            raise SearchError(
                "Search service is rate-limited. Try again soon."
            ) from exc
        except TimeoutException as exc:
            raise SearchError("Search service timed out. Try again.") from exc
        except DDGSException as exc:
            raise SearchError(f"Search failed: {exc}") from exc

    def _text_sync(self, query: str, max_results: int) -> list[RawItem]:
        with DDGS(timeout=self._timeout) as ddgs:
            raw_results = ddgs.text(query, max_results=max_results)
        return [
            {
                "title": item.get("title"),
                "link": item.get("href") or item.get("url"),
                "snippet": item.get("body") or "",
            }
            for item in _normalize_raw_items(raw_results)
        ]

    def _news_sync(self, topic: str, max_results: int) -> list[RawItem]:
        with DDGS(timeout=self._timeout) as ddgs:
            raw_results = ddgs.news(topic, max_results=max_results, timelimit="d")
        items: list[RawItem] = []
        for item in _normalize_raw_items(raw_results):
            pagemap: dict[str, Any] = {}
            if item.get("date"):
                pagemap["metatags"] = [{"article:published_time": item["date"]}]
            if item.get("image"):
                pagemap["cse_image"] = [{"src": item["image"]}]
            items.append(
                {
                    "title": item.get("title"),
                    "link": item.get("url") or item.get("href"),
                    "snippet": item.get("body") or "",
                    "displayLink": item.get("source"),
                    "pagemap": pagemap,
                }
            )
        return items


def build_search_provider(
    settings: Settings, http_client: httpx.AsyncClient
) -> SearchProvider:
    if settings.search_provider == "ddgs":
        return DdgsSearchClient(
            timeout_seconds=settings.search_timeout_seconds,
            max_results=settings.search_max_results,
        )
    return GoogleSearchClient(
        api_key=settings.google_api_key or "",
        cse_id=settings.google_cse_id or "",
        http_client=http_client,
        base_url=settings.google_search_url,
        timeout_seconds=settings.search_timeout_seconds,
    )


def _normalize_raw_items(raw_items: object) -> list[RawItem]:
    if not isinstance(raw_items, list):
        return []
    cleaned: list[RawItem] = []
    for item in raw_items:
        if isinstance(item, dict):
            cleaned.append(cast(RawItem, item))
    return cleaned
