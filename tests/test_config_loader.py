"""Unit tests for reading ``myst.yml`` into typed table-of-contents entries.

Covers entry classification, rejection of malformed entries, and skipping of
external ``url`` entries.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from myst_pages.config import (
    FileEntry,
    PatternEntry,
    SectionEntry,
    TocConfigError,
    load_project_config,
)


def test_load_project_config_parses_entries(sample_project: Path) -> None:
    config = load_project_config(sample_project)

    assert config.title == "Sample Docs"
    assert config.version == 1
    index, guide, api = config.toc
    assert index == FileEntry(file="index.md")
    assert isinstance(guide, SectionEntry)
    assert guide.title == "User Guide"
    assert [child.file for child in guide.children] == [
        "guide/intro.md",
        "guide/install.md",
        "guide/usage.md",
    ]
    assert isinstance(api, FileEntry)
    assert api.children == (PatternEntry(pattern="reference/api/*.md"),)


def test_missing_config_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Configuration file not found"):
        load_project_config(tmp_path / "myst.yml")


def test_missing_toc_is_fatal(project_factory: typ.Callable[..., Path]) -> None:
    config_path = project_factory("project:\n  title: No TOC\n")
    with pytest.raises(TocConfigError, match="toc"):
        load_project_config(config_path)


def test_invalid_yaml_is_reported(project_factory: typ.Callable[..., Path]) -> None:
    config_path = project_factory("project: [unclosed\n")
    with pytest.raises(TocConfigError):
        load_project_config(config_path)


def test_pattern_combined_with_file_is_rejected(
    project_factory: typ.Callable[..., Path],
) -> None:
    config_path = project_factory(
        "project:\n  toc:\n    - file: a.md\n      pattern: '*.md'\n"
    )
    with pytest.raises(TocConfigError, match="pattern"):
        load_project_config(config_path)


def test_entry_without_content_is_rejected(
    project_factory: typ.Callable[..., Path],
) -> None:
    config_path = project_factory("project:\n  toc:\n    - title: Lonely\n")
    with pytest.raises(TocConfigError, match="needs one of"):
        load_project_config(config_path)


def test_url_entries_are_skipped(project_factory: typ.Callable[..., Path]) -> None:
    config_path = project_factory(
        "project:\n  toc:\n    - url: https://example.com\n    - file: a.md\n"
    )
    config = load_project_config(config_path)
    assert config.toc == [FileEntry(file="a.md")]


def test_site_metadata_is_optional(project_factory: typ.Callable[..., Path]) -> None:
    config_path = project_factory(
        "project:\n  toc:\n    - file: a.md\nsite:\n  title: Site\n  logo: logo.png\n"
    )
    config = load_project_config(config_path)
    assert config.site.title == "Site"
    assert config.site.logo == "logo.png"
    assert config.site.url is None
