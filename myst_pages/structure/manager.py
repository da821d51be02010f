"""Own the built page structure, its navigation indices, and reference cache.

:class:`PageStructureManager` drives the TOC builder once per publish run,
derives breadcrumb, sibling, and child indices eagerly, and resolves the
cross-references of each processed document, caching the results per
source page.

Example
-------
>>> from pathlib import Path
>>> from myst_pages.structure import PageStructureManager
>>> manager = PageStructureManager()
>>> structure = manager.build_structure(Path("myst.yml"), Path("."))  # doctest: +SKIP
>>> [page.slug for page in manager.root_pages()]  # doctest: +SKIP
['index', 'guide']
"""

from __future__ import annotations

import logging
import typing as typ

from myst_pages.config import load_project_config

from .models import HierarchyRecord, NavigationIndex, Page, PageStructure
from .toc_builder import TocModelBuilder
from .xref import extract_reference_tokens, resolve_reference

if typ.TYPE_CHECKING:
    from pathlib import Path

    from myst_pages.document import Node

    from .xref import CrossReference

logger = logging.getLogger(__name__)


class StructureNotBuiltError(RuntimeError):
    """Raised when structure accessors are used before ``build_structure``."""


class PageStructureManager:
    """Build and query the hierarchical page model for one publish run."""

    def __init__(self, builder: TocModelBuilder | None = None) -> None:
        self.builder = builder or TocModelBuilder()
        self._structure: PageStructure | None = None
        self._cross_references: dict[str, list[CrossReference]] = {}

    def build_structure(self, config_path: Path, base_dir: Path) -> PageStructure:
        """Load ``config_path`` and build the full page structure.

        Parameters
        ----------
        config_path : Path
            Path to the ``myst.yml`` project file.
        base_dir : Path
            Directory TOC file and pattern entries are resolved against.

        Returns
        -------
        PageStructure
            Pages in traversal order with hierarchy records and navigation
            indices. Any previous structure and reference cache is replaced.

        Raises
        ------
        FileNotFoundError
            If ``config_path`` does not exist.
        TocConfigError
            If the configuration lacks ``project.toc`` or holds malformed
            entries.
        """
        config = load_project_config(config_path)
        pages = self.builder.build(config, base_dir)
        self._structure = PageStructure(
            pages=pages,
            hierarchy=_build_hierarchy(pages),
            navigation=_build_navigation(pages),
            title=config.title,
        )
        self._cross_references = {}
        logger.info("Built structure with %d pages from %s", len(pages), config_path)
        return self._structure

    @property
    def structure(self) -> PageStructure:
        """Return the built structure or raise when none exists yet."""
        if self._structure is None:
            msg = "Page structure has not been built; call build_structure() first."
            raise StructureNotBuiltError(msg)
        return self._structure

    def get_page(self, slug: str) -> Page | None:
        """Return the page registered under ``slug``, or ``None``."""
        return self.structure.get(slug)

    def pages_in_order(self) -> list[Page]:
        """Return every page in depth-first declaration order."""
        return list(self.structure.pages.values())

    def root_pages(self) -> list[Page]:
        """Return the top-level pages in order."""
        return self.structure.root_pages()

    def hierarchy(self) -> list[HierarchyRecord]:
        """Return the flattened hierarchy records."""
        return self.structure.hierarchy

    def children(self, slug: str) -> list[Page]:
        """Return the direct children of ``slug``."""
        return self.structure.navigation.children.get(slug, [])

    def parent(self, slug: str) -> Page | None:
        """Return the parent page of ``slug``, or ``None`` for roots."""
        page = self.structure.get(slug)
        if page is None or page.parent is None:
            return None
        return self.structure.get(page.parent)

    def breadcrumb(self, slug: str) -> list[Page]:
        """Return the ancestor chain of ``slug``, root first."""
        return self.structure.navigation.breadcrumbs.get(slug, [])

    def siblings(self, slug: str) -> list[Page]:
        """Return the other children of the parent of ``slug``; roots have none."""
        return self.structure.navigation.siblings.get(slug, [])

    def process_cross_references(
        self, document: Node, current_page_slug: str, base_dir: Path
    ) -> list[CrossReference]:
        """Resolve every reference role in ``document`` and cache the results.

        ``base_dir`` is accepted for parity with the build call; file tokens
        resolve by basename, so it does not influence the outcome.
        """
        del base_dir
        structure = self.structure
        references = [
            resolve_reference(structure, token, current_page_slug)
            for token in extract_reference_tokens(document)
        ]
        for reference in references:
            if not reference.resolved:
                logger.warning(
                    "Unresolved reference '%s' on page '%s'",
                    reference.token,
                    current_page_slug,
                )
        self._cross_references[current_page_slug] = references
        return references

    def get_cross_references(self, slug: str) -> list[CrossReference]:
        """Return the references cached for ``slug`` by the last processing run."""
        return self._cross_references.get(slug, [])

    def all_cross_references(self) -> dict[str, list[CrossReference]]:
        """Return a copy of every cached reference list, keyed by page slug."""
        return dict(self._cross_references)


def _breadcrumb(pages: dict[str, Page], slug: str) -> list[Page]:
    """Return the ancestor chain root to leaf, including the page itself."""
    trail: list[Page] = []
    current = pages.get(slug)
    while current is not None:
        trail.append(current)
        current = pages.get(current.parent) if current.parent is not None else None
    trail.reverse()
    return trail


def _child_pages(pages: dict[str, Page], slug: str) -> list[Page]:
    page = pages.get(slug)
    if page is None:
        return []
    return [pages[child] for child in page.children if child in pages]


def _build_navigation(pages: dict[str, Page]) -> NavigationIndex:
    navigation = NavigationIndex()
    for slug, page in pages.items():
        navigation.breadcrumbs[slug] = _breadcrumb(pages, slug)
        if page.parent is not None:
            navigation.siblings[slug] = [
                sibling
                for sibling in _child_pages(pages, page.parent)
                if sibling.slug != slug
            ]
        else:
            navigation.siblings[slug] = []
        navigation.children[slug] = _child_pages(pages, slug)
    return navigation


def _build_hierarchy(pages: dict[str, Page]) -> list[HierarchyRecord]:
    return [
        HierarchyRecord(
            page=page,
            level=page.level,
            parent=pages.get(page.parent) if page.parent is not None else None,
            children=tuple(_child_pages(pages, slug)),
        )
        for slug, page in pages.items()
    ]


__all__ = ["PageStructureManager", "StructureNotBuiltError"]
