from __future__ import annotations

from dataclasses import dataclass

from learning_assistant.types import (
    ContentType,
    Difficulty,
    Language,
    QualityIndicators,
    ResultMetadata,
    SearchResult,
    utc_now_iso,
)

LEARNING_QUERY_SUFFIX = "tutorial OR guide OR documentation OR course"

DEFAULT_TRUSTED_DOMAINS = (
    "developer.mozilla.org",
    "w3schools.com",
    "github.com",
    "stackoverflow.com",
    "medium.com",
    "dev.to",
    "freecodecamp.org",
    "coursera.org",
    "udemy.com",
    "edx.org",
    "dicoding.com",
    "codepolitan.com",
    "docs.microsoft.com",
    "tutorialspoint.com",
    "geeksforgeeks.org",
    "guru99.com",
    "javatpoint.com",
    "programiz.com",
    "petanikode.com",
    "belajarpython.com",
)


@dataclass(frozen=True)
class CuratedResource:
    """A hand-picked fallback entry.

    ``description`` may contain a ``{query}`` placeholder, filled with the
    user's query when the entry is materialized.
    """

    title: str
    url: str
    description: str
    type: ContentType
    difficulty: Difficulty
    has_code: bool
    has_examples: bool
    is_interactive: bool
    is_comprehensive: bool
    readability_score: float
    language: Language = "en"

    def to_result(self, query: str) -> SearchResult:
        return SearchResult(
            title=self.title,
            url=self.url,
            description=self.description.replace("{query}", query),
            type=self.type,
            difficulty=self.difficulty,
            metadata=ResultMetadata(
                language=self.language,
                readability_score=self.readability_score,
                quality_indicators=QualityIndicators(
                    has_code=self.has_code,
                    has_examples=self.has_examples,
                    is_interactive=self.is_interactive,
                    is_comprehensive=self.is_comprehensive,
                ),
                timestamp=utc_now_iso(),
            ),
        )


DEFAULT_TOPIC_RESOURCES: tuple[tuple[str, tuple[CuratedResource, ...]], ...] = (
    (
        "web development",
        (
            CuratedResource(
                title="MDN Web Docs - Learn web development",
                url="https://developer.mozilla.org/en-US/docs/Learn",
                description="Tutorial lengkap pengembangan web dari Mozilla",
                type="documentation",
                difficulty="beginner",
                has_code=True,
                has_examples=True,
                is_interactive=True,
                is_comprehensive=True,
                readability_score=2,
            ),
            CuratedResource(
                title="W3Schools - Web Tutorials",
                url="https://www.w3schools.com",
                description=(
                    "Tutorial interaktif untuk HTML, CSS, JavaScript, dan lainnya"
                ),
                type="tutorial",
                difficulty="beginner",
                has_code=True,
                has_examples=True,
                is_interactive=True,
                is_comprehensive=True,
                readability_score=1.5,
            ),
        ),
    ),
    (
        "javascript",
        (
            CuratedResource(
                title="Modern JavaScript Tutorial",
                url="https://javascript.info",
                description="Panduan JavaScript modern dengan penjelasan mendalam",
                type="tutorial",
                difficulty="intermediate",
                has_code=True,
                has_examples=True,
                is_interactive=True,
                is_comprehensive=True,
                readability_score=2.5,
            ),
        ),
    ),
    (
        "python",
        (
            CuratedResource(
                title="Python Documentation",
                url="https://docs.python.org/3/",
                description="Dokumentasi resmi Python dengan tutorial lengkap",
                type="documentation",
                difficulty="intermediate",
                has_code=True,
                has_examples=True,
                is_interactive=False,
                is_comprehensive=True,
                readability_score=3,
            ),
        ),
    ),
)

DEFAULT_GENERIC_RESOURCES: tuple[CuratedResource, ...] = (
    CuratedResource(
        title="Coursera - Online Learning",
        url="https://www.coursera.org/search",
        description="Temukan kursus online terbaik tentang {query}",
        type="course",
        difficulty="beginner",
        has_code=False,
        has_examples=True,
        is_interactive=True,
        is_comprehensive=True,
        readability_score=2,
    ),
    CuratedResource(
        title="edX - Free Online Courses",
        url="https://www.edx.org",
        description="Pelajari {query} dari universitas terbaik dunia",
        type="course",
        difficulty="intermediate",
        has_code=False,
        has_examples=True,
        is_interactive=True,
        is_comprehensive=True,
        readability_score=2,
    ),
)


@dataclass(frozen=True)
class SearchCatalog:
    trusted_domains: tuple[str, ...] = DEFAULT_TRUSTED_DOMAINS
    topic_resources: tuple[
        tuple[str, tuple[CuratedResource, ...]], ...
    ] = DEFAULT_TOPIC_RESOURCES
    generic_resources: tuple[CuratedResource, ...] = DEFAULT_GENERIC_RESOURCES
    query_suffix: str = LEARNING_QUERY_SUFFIX

    def is_trusted(self, url: str) -> bool:
        lowered = url.lower()
        return any(domain in lowered for domain in self.trusted_domains)

    def fallback_results(self, query: str) -> list[SearchResult]:
        lowered = query.lower()
        for topic, resources in self.topic_resources:
            if topic in lowered:
                return [resource.to_result(query) for resource in resources]
        return [resource.to_result(query) for resource in self.generic_resources]

    def expand_query(self, query: str) -> str:
        return f"{query} {self.query_suffix}"


DEFAULT_CATALOG = SearchCatalog()
