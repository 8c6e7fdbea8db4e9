from __future__ import annotations

import pytest

from learning_assistant.classify import assess_difficulty, categorize_content


@pytest.mark.parametrize(
    ("title", "url", "expected"),
    [
        (
            "MDN Reference",
            "https://developer.mozilla.org/en-US/docs/Web",
            "documentation",
        ),
        ("Python Tutorial", "https://www.w3schools.com/python/", "tutorial"),
        ("Intro to Django", "https://www.udemy.com/django-intro/", "course"),
        ("Async in JS", "https://dev.to/someone/async-js", "article"),
        ("Some repo", "https://github.com/user/repo", "other"),
    ],
)
def test_categorize_content_rules(title: str, url: str, expected: str) -> None:
    assert categorize_content(title, url) == expected


def test_categorize_content_tutorial_beats_course_platform() -> None:
    result = categorize_content(
        "Machine Learning", "https://www.coursera.org/learn/machine-learning"
    )

    assert result == "tutorial"


def test_categorize_content_documentation_beats_tutorial() -> None:
    result = categorize_content(
        "Tutorial: Python documentation", "https://docs.python.org/3/tutorial/"
    )

    assert result == "documentation"


def test_categorize_content_learn_in_title_is_not_a_tutorial_marker() -> None:
    assert categorize_content("Learn Python", "https://www.programiz.com/python") == (
        "other"
    )


def test_assess_difficulty_explicit_advanced_wins() -> None:
    assert assess_difficulty("Advanced Python", "") == "advanced"
    assert assess_difficulty("Python for everyone", "advanced topics, basic setup") == (
        "advanced"
    )


def test_assess_difficulty_explicit_intermediate_beats_beginner() -> None:
    assert assess_difficulty("Intermediate React", "basic hooks") == "intermediate"


def test_assess_difficulty_indonesian_vocabulary() -> None:
    assert assess_difficulty("Belajar dasar Python", "") == "beginner"
    assert assess_difficulty("Kelas menengah", "") == "intermediate"
    assert assess_difficulty("Materi tingkat lanjut", "") == "advanced"


def test_assess_difficulty_complexity_fallback() -> None:
    assert (
        assess_difficulty("Scaling web apps", "software architecture overview")
        == "advanced"
    )
    assert assess_difficulty("Build a REST API", "step by step") == "intermediate"


def test_assess_difficulty_defaults_to_beginner() -> None:
    assert assess_difficulty("Hello", "world") == "beginner"


def test_assess_difficulty_word_boundaries_are_ascii() -> None:
    assert assess_difficulty("Kursus élanjut", "") == "advanced"
