from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

SearchProviderName = Literal["google", "ddgs"]

DEFAULT_OPENROUTER_MODEL = "meta-llama/llama-4-maverick:free"
DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"


@dataclass(frozen=True)
class Settings:
    openrouter_api_key: str
    google_api_key: str | None = None
    google_cse_id: str | None = None
    search_provider: SearchProviderName = "google"
    google_search_url: str = DEFAULT_GOOGLE_SEARCH_URL
    openrouter_model: str = DEFAULT_OPENROUTER_MODEL
    openrouter_base_url: str = DEFAULT_OPENROUTER_BASE_URL
    openrouter_timeout_seconds: float = 60.0
    openrouter_http_referer: str | None = None
    search_timeout_seconds: float = 10.0
    search_max_results: int = 10
    news_max_results: int = 5
    search_debug_logging: bool = False
    history_limit: int = 20
    app_host: str = "127.0.0.1"
    app_port: int = 8000

    @classmethod
    def from_env(cls) -> Settings:
        missing: list[str] = []

        search_provider = _parse_search_provider(os.getenv("SEARCH_PROVIDER"))
        required = {"openrouter_api_key": os.getenv("OPENROUTER_API_KEY")}
        if search_provider == "google":
            required["google_api_key"] = os.getenv("GOOGLE_API_KEY")
            required["google_cse_id"] = os.getenv("GOOGLE_CSE_ID")

        for key, value in required.items():
            if not value:
                missing.append(key.upper())

        if missing:
            details = ", ".join(sorted(missing))
            raise RuntimeError(f"Missing required environment variables: {details}")

        return cls(
            openrouter_api_key=required["openrouter_api_key"] or "",
            google_api_key=os.getenv("GOOGLE_API_KEY"),
            google_cse_id=os.getenv("GOOGLE_CSE_ID"),
            search_provider=search_provider,
            google_search_url=os.getenv(
                "GOOGLE_SEARCH_URL", DEFAULT_GOOGLE_SEARCH_URL
            ),
            openrouter_model=os.getenv("OPENROUTER_MODEL", DEFAULT_OPENROUTER_MODEL),
            openrouter_base_url=os.getenv(
                "OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL
            ),
            openrouter_timeout_seconds=float(
                os.getenv("OPENROUTER_TIMEOUT_SECONDS", "60")
            ),
            openrouter_http_referer=os.getenv("OPENROUTER_HTTP_REFERER"),
            search_timeout_seconds=float(os.getenv("SEARCH_TIMEOUT_SECONDS", "10")),
            search_max_results=_parse_bounded_int(
                os.getenv("SEARCH_MAX_RESULTS"), default=10, maximum=10
            ),
            news_max_results=_parse_bounded_int(
                os.getenv("NEWS_MAX_RESULTS"), default=5, maximum=10
            ),
            search_debug_logging=_parse_bool(os.getenv("SEARCH_DEBUG_LOGGING")),
            history_limit=_parse_bounded_int(
                os.getenv("HISTORY_LIMIT"), default=20, maximum=100
            ),
            app_host=os.getenv("APP_HOST", "127.0.0.1"),
            app_port=int(os.getenv("APP_PORT", "8000")),
        )


def _parse_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_search_provider(value: str | None) -> SearchProviderName:
    if value is None:
        return "google"

    normalized = value.strip().lower()
    if normalized in {"", "google"}:
        return "google"
    if normalized == "ddgs":
        return "ddgs"

    raise RuntimeError("Invalid SEARCH_PROVIDER. Expected 'google' or 'ddgs'.")


def _parse_bounded_int(value: str | None, *, default: int, maximum: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer value: {value!r}") from exc
    return max(1, min(parsed, maximum))
