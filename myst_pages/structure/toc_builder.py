"""Turn a parsed table of contents into an ordered page mapping.

The builder walks the declared entries depth first. A single
:class:`TraversalState` owned by :meth:`TocModelBuilder.build` carries the
order counter, the slug registry, and the page map through the recursion so
the walk has no hidden shared state.

Example
-------
>>> from pathlib import Path
>>> from myst_pages.config import FileEntry, ProjectConfig
>>> from myst_pages.structure.toc_builder import TocModelBuilder
>>> config = ProjectConfig(toc=[FileEntry(file="a/b.md", title="B")])
>>> pages = TocModelBuilder().build(config, Path("/docs"))
>>> pages["b"].file_path
'/docs/a/b.md'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import re
import typing as typ
from pathlib import Path

from myst_pages._constants import DEFAULT_SECTION_SLUG, DEFAULT_SECTION_TITLE
from myst_pages.config import FileEntry, PatternEntry, SectionEntry, TocConfigError
from myst_pages.frontmatter import FRONTMATTER_PATTERN
from myst_pages.markdown_parser import FENCE_PATTERN

from .models import Page
from .slugs import content_basename, slug_from_path, slugify, unique_slug

if typ.TYPE_CHECKING:
    from myst_pages.config import ProjectConfig, TocEntry

logger = logging.getLogger(__name__)

H1_PATTERN = re.compile(r"^#\s+(.+?)\s*$")
FALLBACK_PAGE_SLUG = "page"


@dc.dataclass(slots=True)
class TraversalState:
    """Mutable state for one build, threaded through the recursive walk."""

    base_dir: Path
    pages: dict[str, Page] = dc.field(default_factory=dict)
    used_slugs: set[str] = dc.field(default_factory=set)
    next_order: int = 0

    def claim_order(self) -> int:
        """Return the next order number and advance the counter."""
        order = self.next_order
        self.next_order += 1
        return order

    def claim_slug(self, base: str) -> str:
        """Reserve ``base`` or a numbered variant of it."""
        slug = unique_slug(base, self.used_slugs)
        if slug != base:
            logger.warning("Slug '%s' already in use; registered as '%s'", base, slug)
        return slug


class TocModelBuilder:
    """Build the page mapping from a :class:`~myst_pages.config.ProjectConfig`."""

    def build(self, config: ProjectConfig, base_dir: Path) -> dict[str, Page]:
        """Return pages keyed by slug, in depth-first declaration order.

        Parameters
        ----------
        config : ProjectConfig
            Parsed project configuration with its ``toc`` entries.
        base_dir : Path
            Directory that relative ``file`` and ``pattern`` values are
            resolved against.

        Returns
        -------
        dict[str, Page]
            Insertion-ordered mapping; iteration order equals ``Page.order``.
        """
        state = TraversalState(base_dir=base_dir)
        self._walk(config.toc, state, level=0, parent=None)
        return state.pages

    def _walk(
        self,
        entries: typ.Sequence[TocEntry],
        state: TraversalState,
        *,
        level: int,
        parent: str | None,
    ) -> None:
        for entry in entries:
            match entry:
                case FileEntry():
                    page = self._register_file(
                        entry.file, entry, state, level=level, parent=parent
                    )
                    if entry.children:
                        self._walk(
                            entry.children, state, level=level + 1, parent=page.slug
                        )
                case PatternEntry():
                    for relative in self._expand_pattern(entry.pattern, state.base_dir):
                        self._register_file(
                            relative, entry, state, level=level, parent=parent
                        )
                case SectionEntry():
                    page = self._register_section(entry, state, level=level, parent=parent)
                    self._walk(entry.children, state, level=level + 1, parent=page.slug)

    def _register_file(
        self,
        relative: str,
        entry: FileEntry | PatternEntry,
        state: TraversalState,
        *,
        level: int,
        parent: str | None,
    ) -> Page:
        file_path = os.path.abspath(state.base_dir / relative)
        title = entry.title or extract_title(Path(file_path)) or content_basename(relative)
        base_slug = entry.slug or slug_from_path(relative) or FALLBACK_PAGE_SLUG
        return self._register(
            state,
            file_path=file_path,
            title=title,
            base_slug=base_slug,
            level=level,
            parent=parent,
        )

    def _register_section(
        self,
        entry: SectionEntry,
        state: TraversalState,
        *,
        level: int,
        parent: str | None,
    ) -> Page:
        title = entry.title or DEFAULT_SECTION_TITLE
        base_slug = (
            entry.slug or slugify(entry.title or "") or DEFAULT_SECTION_SLUG
        )
        return self._register(
            state, file_path="", title=title, base_slug=base_slug, level=level, parent=parent
        )

    @staticmethod
    def _register(
        state: TraversalState,
        *,
        file_path: str,
        title: str,
        base_slug: str,
        level: int,
        parent: str | None,
    ) -> Page:
        slug = state.claim_slug(base_slug)
        page = Page(
            file_path=file_path,
            title=title,
            slug=slug,
            level=level,
            parent=parent,
            children=[],
            order=state.claim_order(),
        )
        state.pages[slug] = page
        if parent is not None:
            state.pages[parent].children.append(slug)
        return page

    @staticmethod
    def _expand_pattern(pattern: str, base_dir: Path) -> list[str]:
        """Return sorted POSIX paths, relative to ``base_dir``, matching ``pattern``."""
        if Path(pattern).is_absolute():
            msg = f"Pattern '{pattern}' must be relative to {base_dir}."
            raise TocConfigError(msg)
        matches = sorted(
            path.relative_to(base_dir).as_posix()
            for path in base_dir.glob(pattern)
            if path.is_file()
        )
        if not matches:
            logger.warning("Pattern '%s' matched no files under %s", pattern, base_dir)
        return matches


def extract_title(path: Path) -> str | None:
    """Return the first level-1 heading of ``path``, skipping frontmatter and fenced code.

    Missing or unreadable files yield ``None``.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        logger.debug("No title extracted from %s; file unreadable", path)
        return None
    match = FRONTMATTER_PATTERN.match(text)
    if match:
        text = text[match.end() :]
    fence: str | None = None
    for line in text.splitlines():
        stripped = line.strip()
        if fence is not None:
            if stripped.startswith(fence) and not stripped.strip(fence[0]):
                fence = None
            continue
        opening = FENCE_PATTERN.match(stripped)
        if opening:
            fence = opening.group("fence")
            continue
        heading = H1_PATTERN.match(stripped)
        if heading:
            return heading.group(1)
    return None


__all__ = ["TocModelBuilder", "TraversalState", "extract_title"]
