"""Dataclasses describing the built page structure."""

from __future__ import annotations

import dataclasses as dc
import typing as typ


@dc.dataclass(slots=True)
class Page:
    """A single page (or section header) of the site.

    Attributes
    ----------
    file_path : str
        Absolute path of the content file; empty for section headers.
    title : str
        Explicit or derived page title.
    slug : str
        Identifier unique across the whole structure.
    level : int
        Tree depth, ``0`` for root pages.
    parent : str or None
        Slug of the parent page, ``None`` for roots.
    children : list[str]
        Slugs of the direct children in declaration order.
    order : int
        Global depth-first declaration sequence number.
    """

    file_path: str
    title: str
    slug: str
    level: int
    parent: str | None
    children: list[str]
    order: int

    @property
    def is_section(self) -> bool:
        """Return True when the page has no backing content file."""
        return not self.file_path


@dc.dataclass(slots=True, frozen=True)
class HierarchyRecord:
    """A page together with its resolved parent and child pages."""

    page: Page
    level: int
    parent: Page | None
    children: tuple[Page, ...]


@dc.dataclass(slots=True)
class NavigationIndex:
    """Breadcrumb, sibling, and child lookups keyed by slug."""

    breadcrumbs: dict[str, list[Page]] = dc.field(default_factory=dict)
    siblings: dict[str, list[Page]] = dc.field(default_factory=dict)
    children: dict[str, list[Page]] = dc.field(default_factory=dict)


@dc.dataclass(slots=True)
class PageStructure:
    """Aggregate of pages in traversal order plus derived navigation."""

    pages: dict[str, Page]
    hierarchy: list[HierarchyRecord]
    navigation: NavigationIndex
    title: str | None = None

    def __contains__(self, slug: object) -> bool:
        return slug in self.pages

    def __len__(self) -> int:
        return len(self.pages)

    def __iter__(self) -> typ.Iterator[Page]:
        return iter(self.pages.values())

    def get(self, slug: str) -> Page | None:
        """Return the page registered under ``slug`` if any."""
        return self.pages.get(slug)

    def root_pages(self) -> list[Page]:
        """Return level-0 pages in traversal order."""
        return [page for page in self.pages.values() if page.parent is None]


__all__ = ["HierarchyRecord", "NavigationIndex", "Page", "PageStructure"]
