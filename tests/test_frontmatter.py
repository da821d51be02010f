"""Tests for frontmatter splitting, metadata mapping, and validation."""

from __future__ import annotations

import datetime as dt
import json

import pytest

from myst_pages.frontmatter import (
    FrontmatterError,
    map_to_metadata,
    metadata_summary,
    split_frontmatter,
    validate_frontmatter,
)


def test_split_frontmatter_returns_body() -> None:
    front, body = split_frontmatter("---\ntitle: Intro\ntags: [a, b]\n---\n# Intro\n")
    assert front == {"title": "Intro", "tags": ["a", "b"]}
    assert body == "# Intro\n"


def test_documents_without_frontmatter_are_untouched() -> None:
    text = "# Title\n\n---\n\nBody\n"
    assert split_frontmatter(text) == ({}, text)


@pytest.mark.parametrize("block", ["title: [unclosed", "- just\n- a list"])
def test_invalid_frontmatter_raises(block: str) -> None:
    with pytest.raises(FrontmatterError):
        split_frontmatter(f"---\n{block}\n---\nbody\n")


def test_map_to_metadata_standard_and_custom_fields() -> None:
    metadata = map_to_metadata(
        {
            "title": "Guide",
            "authors": [{"name": "Ada"}, "Grace"],
            "date": dt.date(2024, 3, 1),
            "description": "How to",
            "keywords": ["x", "y"],
            "status": "draft",
            "version": 2,
            "audience": {"level": "beginner"},
            "owners": ["ops", "docs"],
        }
    )

    assert metadata["Title"] == "Guide"
    assert metadata["Author"] == "Ada; Grace"
    assert metadata["Created"] == "2024-03-01T00:00:00Z"
    assert metadata["Description"] == "How to"
    assert metadata["Keywords"] == "x; y"
    assert metadata["Status"] == "draft"
    assert metadata["Version"] == "2"
    assert json.loads(metadata["audience"]) == {"level": "beginner"}
    assert metadata["owners"] == "ops; docs"


def test_map_to_metadata_defaults_title() -> None:
    assert map_to_metadata({}) == {"Title": "Untitled Document"}


def test_metadata_summary_lists_known_fields() -> None:
    summary = metadata_summary(
        {"title": "Guide", "authors": ["Ada"], "keywords": ["a", "b"]}
    )
    assert summary.splitlines() == ["Title: Guide", "Authors: Ada", "Keywords: a, b"]


def test_validate_frontmatter_reports_problems() -> None:
    warnings = validate_frontmatter(
        {"date": "not a date", "authors": "Ada", "status": "someday"}
    )
    assert warnings == [
        "Title is recommended",
        "Invalid date format",
        "Authors should be a list",
        "Unknown status 'someday'",
    ]
    assert validate_frontmatter({"title": "Fine", "date": "2024-01-02"}) == []


def test_map_to_metadata_stringifies_non_string_keys() -> None:
    metadata = map_to_metadata({"title": "Notes", 2024: "release"})

    assert metadata["2024"] == "release"
    assert all(isinstance(key, str) for key in metadata)
