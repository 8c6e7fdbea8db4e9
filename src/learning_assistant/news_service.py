from __future__ import annotations

import logging

from learning_assistant.parsing import as_dict, first_item, first_non_empty_str
from learning_assistant.search_client import RawItem, SearchError, SearchProvider
from learning_assistant.types import NewsArticle, utc_now_iso

logger = logging.getLogger(__name__)


class NewsError(Exception):
    def __init__(self, user_message: str) -> None:
        super().__init__(user_message)
        self.user_message = user_message


class NewsService:
    def __init__(self, *, provider: SearchProvider, max_results: int = 5) -> None:
        self._provider = provider
        self._max_results = max(1, max_results)

    async def fetch_news_for_topic(self, topic: str) -> list[NewsArticle]:
        normalized_topic = " ".join(topic.split())
        if not normalized_topic:
            raise NewsError("Topik berita tidak boleh kosong.")

        try:
            items = await self._provider.search_news(
                normalized_topic, max_results=self._max_results
            )
        except SearchError as exc:
            logger.warning(
                "news_fetch_failed topic_len=%d detail=%s",
                len(normalized_topic),
                exc.user_message,
            )
            raise NewsError("Gagal mengambil berita. Silakan coba lagi.") from exc

        articles = [article for item in items if (article := to_article(item))]
        logger.info(
            "news_fetched topic_len=%d article_count=%d",
            len(normalized_topic),
            len(articles),
        )
        return articles


def to_article(item: RawItem) -> NewsArticle | None:
    url = first_non_empty_str(item, "link", "url")
    if url is None:
        return None

    pagemap = as_dict(item.get("pagemap"))
    metatags = first_item(pagemap, "metatags")
    cse_image = first_item(pagemap, "cse_image")

    return NewsArticle(
        title=first_non_empty_str(item, "title") or "",
        description=first_non_empty_str(item, "snippet", "description") or "",
        url=url,
        source=first_non_empty_str(item, "displayLink", "source") or "",
        published_at=first_non_empty_str(metatags, "article:published_time")
        or utc_now_iso(),
        image_url=first_non_empty_str(cse_image, "src"),
    )
