from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal

ContentType = Literal["documentation", "tutorial", "course", "article", "other"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
Language = Literal["id", "en"]


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


@dataclass
class QualityIndicators:
    has_code: bool = False
    has_examples: bool = False
    is_interactive: bool = False
    is_comprehensive: bool = False


@dataclass
class ResultMetadata:
    language: Language = "en"
    readability_score: float | None = None
    quality_indicators: QualityIndicators | None = None
    timestamp: str | None = None
    date_published: str | None = None
    author: str | None = None
    publisher: str | None = None


@dataclass
class SearchResult:
    title: str
    url: str
    description: str
    type: ContentType = "other"
    difficulty: Difficulty = "beginner"
    relevance_score: float | None = None
    metadata: ResultMetadata = field(default_factory=ResultMetadata)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NewsArticle:
    title: str
    description: str
    url: str
    source: str
    published_at: str
    image_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
