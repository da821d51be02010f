"""Unit tests for slug normalization and collision handling."""

from __future__ import annotations

import pytest

from myst_pages.structure.slugs import (
    content_basename,
    slug_from_path,
    slugify,
    unique_slug,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("My Page!!", "my-page"),
        ("  Getting   Started  ", "getting-started"),
        ("API_v2.0", "api-v2-0"),
        ("---", ""),
    ],
)
def test_slugify_collapses_non_alphanumeric_runs(text: str, expected: str) -> None:
    assert slugify(text) == expected


def test_slugify_is_idempotent() -> None:
    once = slugify("Release Notes (2024)")
    assert slugify(once) == once


def test_content_basename_handles_both_separators() -> None:
    assert content_basename("user-guide/intro.md") == "intro"
    assert content_basename("user-guide\\intro.md") == "intro"
    assert content_basename("notes.txt") == "notes.txt"


def test_slug_from_path_ignores_directories() -> None:
    assert slug_from_path("a/b/Read Me.md") == "read-me"


def test_unique_slug_appends_numeric_suffixes() -> None:
    used: set[str] = set()
    assert unique_slug("intro", used) == "intro"
    assert unique_slug("intro", used) == "intro-2"
    assert unique_slug("intro", used) == "intro-3"
    assert used == {"intro", "intro-2", "intro-3"}
