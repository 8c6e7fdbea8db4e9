from __future__ import annotations

from dataclasses import dataclass

from learning_assistant.types import SearchResult

MAX_RANKED_RESULTS = 10


@dataclass(frozen=True)
class RankingWeights:
    beginner_bonus: float = 0.3
    intermediate_bonus: float = 0.2
    interactive_bonus: float = 0.5
    examples_bonus: float = 0.4
    comprehensive_bonus: float = 0.3
    language_bonus: float = 0.2
    preferred_language: str = "id"
    readability_penalty: float = 0.1
    default_readability: float = 3.0


DEFAULT_WEIGHTS = RankingWeights()


def calculate_quality_score(
    result: SearchResult, weights: RankingWeights = DEFAULT_WEIGHTS
) -> float:
    score = result.relevance_score or 0.0

    if result.difficulty == "beginner":
        score += weights.beginner_bonus
    elif result.difficulty == "intermediate":
        score += weights.intermediate_bonus

    metadata = result.metadata
    indicators = metadata.quality_indicators if metadata is not None else None
    if indicators is not None:
        if indicators.is_interactive:
            score += weights.interactive_bonus
        if indicators.has_examples:
            score += weights.examples_bonus
        if indicators.is_comprehensive:
            score += weights.comprehensive_bonus

    if metadata is not None and metadata.language == weights.preferred_language:
        score += weights.language_bonus

    readability = metadata.readability_score if metadata is not None else None
    score -= (readability or weights.default_readability) * weights.readability_penalty
    return score


def rank_results(
    results: list[SearchResult],
    *,
    weights: RankingWeights = DEFAULT_WEIGHTS,
    limit: int = MAX_RANKED_RESULTS,
) -> list[SearchResult]:
    # sorted() is stable, so equal scores keep encounter order.
    ranked = sorted(
        results,
        key=lambda result: calculate_quality_score(result, weights),
        reverse=True,
    )
    return ranked[: max(0, min(limit, MAX_RANKED_RESULTS))]
