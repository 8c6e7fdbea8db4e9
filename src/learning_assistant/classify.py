from __future__ import annotations

import re

from learning_assistant.types import ContentType, Difficulty

_DOC_URL_MARKERS = ("docs.", "/docs/", "documentation")
_DOC_TITLE_MARKERS = ("documentation", "reference", "docs")
_TUTORIAL_URL_MARKERS = ("tutorial", "guide", "learn")
_TUTORIAL_TITLE_MARKERS = ("tutorial", "guide", "how to")
_COURSE_URL_MARKERS = ("course", "class", "bootcamp")
_COURSE_PLATFORM_RE = re.compile(r"udemy|coursera|edx|dicoding")
_ARTICLE_URL_MARKERS = ("blog", "article")
_ARTICLE_PLATFORM_RE = re.compile(r"medium\.com|dev\.to|hashnode\.com")

# Word boundaries are ASCII-only, so accented letters count as separators.
_EXPLICIT_DIFFICULTY: tuple[tuple[Difficulty, re.Pattern[str]], ...] = (
    (
        "advanced",
        re.compile(
            r"\b(advanced|expert|lanjut|ahli|kompleks|advanced-level)\b", re.ASCII
        ),
    ),
    (
        "intermediate",
        re.compile(
            r"\b(intermediate|menengah|medium|moderate|intermediate-level)\b",
            re.ASCII,
        ),
    ),
    (
        "beginner",
        re.compile(
            r"\b(beginner|pemula|basic|dasar|start|fundamental|beginner-level)\b",
            re.ASCII,
        ),
    ),
)
# Beginner is the default, so its complexity vocabulary never changes the result.
_COMPLEXITY_DIFFICULTY: tuple[tuple[Difficulty, re.Pattern[str]], ...] = (
    (
        "advanced",
        re.compile(
            r"\b(optimization|architecture|scale|security|advanced|expert|complex)\b",
            re.ASCII,
        ),
    ),
    (
        "intermediate",
        re.compile(
            r"\b(implementation|integration|practice|develop|build|create)\b",
            re.ASCII,
        ),
    ),
)


def categorize_content(title: str, url: str) -> ContentType:
    lower_url = url.lower()
    lower_title = title.lower()

    if _contains_any(lower_url, _DOC_URL_MARKERS) or _contains_any(
        lower_title, _DOC_TITLE_MARKERS
    ):
        return "documentation"

    if _contains_any(lower_url, _TUTORIAL_URL_MARKERS) or _contains_any(
        lower_title, _TUTORIAL_TITLE_MARKERS
    ):
        return "tutorial"

    if _contains_any(lower_url, _COURSE_URL_MARKERS) or _COURSE_PLATFORM_RE.search(
        lower_url
    ):
        return "course"

    if _contains_any(lower_url, _ARTICLE_URL_MARKERS) or _ARTICLE_PLATFORM_RE.search(
        lower_url
    ):
        return "article"

    return "other"


def assess_difficulty(title: str, description: str) -> Difficulty:
    text = f"{title} {description}".lower()

    for level, pattern in _EXPLICIT_DIFFICULTY:
        if pattern.search(text):
            return level

    for level, pattern in _COMPLEXITY_DIFFICULTY:
        if pattern.search(text):
            return level

    return "beginner"


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)
