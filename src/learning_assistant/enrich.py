from __future__ import annotations

import asyncio
import logging
import re

from learning_assistant.types import (
    Language,
    QualityIndicators,
    ResultMetadata,
    SearchResult,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

INDONESIAN_MATCH_THRESHOLD = 5
MIN_READABILITY_SCORE = 1.0
MAX_READABILITY_SCORE = 5.0
COMPREHENSIVE_MIN_CHARS = 200

_WORD_FLAGS = re.IGNORECASE | re.ASCII

_INDONESIAN_STOPWORDS_RE = re.compile(
    r"\b(yang|dan|atau|dengan|untuk|di|ke|dari|dalam|ini|itu|juga|sudah|saya|"
    r"anda|bisa|ada|akan|saat|serta|para|pada|sebuah|tersebut)\b",
    _WORD_FLAGS,
)
_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_END_RE = re.compile(r"[.!?]+")
_CODE_RE = re.compile(
    r"\b(code|coding|program|script|function|class|method)\b", _WORD_FLAGS
)
_EXAMPLES_RE = re.compile(r"\b(example|sample|demo|tutorial|guide)\b", _WORD_FLAGS)
_INTERACTIVE_RE = re.compile(
    r"\b(interactive|hands-on|practice|exercise|quiz)\b", _WORD_FLAGS
)


def detect_language(text: str) -> Language:
    matches = len(_INDONESIAN_STOPWORDS_RE.findall(text))
    return "id" if matches > INDONESIAN_MATCH_THRESHOLD else "en"


def calculate_readability_score(text: str) -> float:
    """Average words per sentence over 20, clamped to [1, 5]. Lower reads easier."""
    words = len(_WHITESPACE_RE.split(text))
    sentences = len(_SENTENCE_END_RE.split(text))
    average = words / sentences
    return min(max(average / 20, MIN_READABILITY_SCORE), MAX_READABILITY_SCORE)


def quality_indicators(description: str) -> QualityIndicators:
    return QualityIndicators(
        has_code=_CODE_RE.search(description) is not None,
        has_examples=_EXAMPLES_RE.search(description) is not None,
        is_interactive=_INTERACTIVE_RE.search(description) is not None,
        is_comprehensive=len(description) > COMPREHENSIVE_MIN_CHARS,
    )


def enrich_result(result: SearchResult) -> SearchResult:
    metadata = result.metadata
    if metadata is None:
        metadata = ResultMetadata()
        result.metadata = metadata

    if not metadata.timestamp:
        metadata.timestamp = utc_now_iso()
    metadata.language = detect_language(f"{result.title} {result.description}")
    metadata.readability_score = calculate_readability_score(result.description)
    metadata.quality_indicators = quality_indicators(result.description)
    return result


async def enrich_results(results: list[SearchResult]) -> list[SearchResult]:
    return list(await asyncio.gather(*(_enrich_one(result) for result in results)))


async def _enrich_one(result: SearchResult) -> SearchResult:
    try:
        return enrich_result(result)
    except Exception:
        logger.exception("result_enrichment_failed url=%s", result.url)
        return result
