"""Typed dataclasses describing MyST project configuration structures."""

from __future__ import annotations

import dataclasses as dc


class TocConfigError(ValueError):
    """Raised when the project table of contents is missing or malformed."""


@dc.dataclass(slots=True, frozen=True)
class FileEntry:
    """A TOC entry backed by a single content file.

    ``children`` is non-empty when the file page also parents nested entries.
    """

    file: str
    title: str | None = None
    slug: str | None = None
    children: tuple[TocEntry, ...] = ()


@dc.dataclass(slots=True, frozen=True)
class PatternEntry:
    """A TOC entry expanding a glob pattern into zero or more file pages."""

    pattern: str
    title: str | None = None
    slug: str | None = None


@dc.dataclass(slots=True, frozen=True)
class SectionEntry:
    """A TOC entry without a content file that groups nested entries."""

    title: str | None = None
    slug: str | None = None
    children: tuple[TocEntry, ...] = ()


TocEntry = FileEntry | PatternEntry | SectionEntry


@dc.dataclass(slots=True)
class SiteMetadata:
    """Optional ``site`` block of ``myst.yml``."""

    title: str | None = None
    description: str | None = None
    url: str | None = None
    logo: str | None = None
    favicon: str | None = None


@dc.dataclass(slots=True)
class ProjectConfig:
    """A fully parsed ``myst.yml`` project definition."""

    toc: list[TocEntry]
    title: str | None = None
    description: str | None = None
    authors: list[str] = dc.field(default_factory=list)
    keywords: list[str] = dc.field(default_factory=list)
    version: int | None = None
    site: SiteMetadata = dc.field(default_factory=SiteMetadata)


__all__ = [
    "FileEntry",
    "PatternEntry",
    "ProjectConfig",
    "SectionEntry",
    "SiteMetadata",
    "TocConfigError",
    "TocEntry",
]
