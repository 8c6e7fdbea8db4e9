from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from learning_assistant.chat_history import (
    LEARNING_COLLECTION,
    NEWS_COLLECTION,
    ChatHistoryBackend,
    ChatHistoryService,
    InMemoryChatHistoryBackend,
)
from learning_assistant.config import Settings
from learning_assistant.enhanced_search import EnhancedSearch
from learning_assistant.news_service import NewsService
from learning_assistant.openrouter_client import OpenRouterClient
from learning_assistant.routes import (
    ChatHandler,
    build_router,
    request_validation_error_handler,
)
from learning_assistant.search_client import build_search_provider
from learning_assistant.summarizer import Summarizer


def create_app(
    settings: Settings,
    *,
    history_backend: ChatHistoryBackend | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    client = http_client or httpx.AsyncClient()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        await client.aclose()

    app = FastAPI(title="learning-assistant", version="1.0", lifespan=lifespan)

    provider = build_search_provider(settings, client)
    learning_client = OpenRouterClient(
        api_key=settings.openrouter_api_key,
        model=settings.openrouter_model,
        http_client=client,
        base_url=settings.openrouter_base_url,
        timeout_seconds=settings.openrouter_timeout_seconds,
        max_output_tokens=2000,
        temperature=0.8,
        top_p=0.95,
        http_referer=settings.openrouter_http_referer,
        app_title="Learning Assistant",
    )
    news_client = OpenRouterClient(
        api_key=settings.openrouter_api_key,
        model=settings.openrouter_model,
        http_client=client,
        base_url=settings.openrouter_base_url,
        timeout_seconds=settings.openrouter_timeout_seconds,
        max_output_tokens=1000,
        temperature=0.7,
        http_referer=settings.openrouter_http_referer,
        app_title="News AI Chatbot",
    )

    backend = history_backend or InMemoryChatHistoryBackend()
    handler = ChatHandler(
        search=EnhancedSearch(
            provider=provider,
            max_results=settings.search_max_results,
            debug_logging=settings.search_debug_logging,
        ),
        news_service=NewsService(
            provider=provider, max_results=settings.news_max_results
        ),
        summarizer=Summarizer(learning_client=learning_client, news_client=news_client),
        learning_history=ChatHistoryService(
            backend=backend,
            collection=LEARNING_COLLECTION,
            default_limit=settings.history_limit,
        ),
        news_history=ChatHistoryService(
            backend=backend,
            collection=NEWS_COLLECTION,
            default_limit=settings.history_limit,
        ),
    )

    app.include_router(build_router(handler))
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    settings = Settings.from_env()
    app = create_app(settings)

    uvicorn.run(
        app,
        host=settings.app_host,
        port=settings.app_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
