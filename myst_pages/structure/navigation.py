"""Derive navigation views from a page structure and render them to HTML.

The functions here are pure: they read a :class:`PageStructure` and return
small dataclasses. :class:`NavigationRenderer` feeds those into Jinja
templates to produce the ``<nav>`` fragments prepended to published pages.

Example
-------
>>> from myst_pages.structure.navigation import page_neighbours
>>> neighbours = page_neighbours(structure, "install")  # doctest: +SKIP
>>> neighbours.previous.slug, neighbours.next  # doctest: +SKIP
('overview', None)
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

if typ.TYPE_CHECKING:
    from .models import Page, PageStructure


@dc.dataclass(slots=True, frozen=True)
class NavLink:
    """A link to a page, flagged when it is the page being viewed."""

    slug: str
    title: str
    is_current: bool = False

    @property
    def href(self) -> str:
        return f"#{self.slug}"


@dc.dataclass(slots=True, frozen=True)
class Neighbours:
    """Previous and next pages among the focal page's siblings."""

    previous: NavLink | None
    next: NavLink | None


@dc.dataclass(slots=True, frozen=True)
class MenuItem:
    """A site menu node with its nested children."""

    slug: str
    title: str
    children: tuple[MenuItem, ...] = ()

    @property
    def href(self) -> str:
        return f"#{self.slug}"


@dc.dataclass(slots=True, frozen=True)
class PageNavigation:
    """Everything needed to render the navigation block for one page."""

    slug: str
    breadcrumbs: tuple[NavLink, ...]
    neighbours: Neighbours
    children: tuple[NavLink, ...]

    @property
    def is_empty(self) -> bool:
        return not (
            self.breadcrumbs
            or self.neighbours.previous
            or self.neighbours.next
            or self.children
        )


def _link(page: Page, current: str | None) -> NavLink:
    return NavLink(slug=page.slug, title=page.title, is_current=page.slug == current)


def breadcrumb_items(
    structure: PageStructure, slug: str, current: str | None = None
) -> list[NavLink]:
    """Return the root-to-page trail; empty when the trail has one entry."""
    trail = structure.navigation.breadcrumbs.get(slug, [])
    if len(trail) <= 1:
        return []
    return [_link(page, current) for page in trail]


def page_neighbours(structure: PageStructure, slug: str) -> Neighbours:
    """Return prev/next pages using the parent's full child list.

    The focal page's own position in its parent's ``children`` decides the
    neighbours. Root pages have no parent and therefore no neighbours.
    """
    page = structure.get(slug)
    if page is None or page.parent is None:
        return Neighbours(previous=None, next=None)
    parent = structure.get(page.parent)
    ordered = parent.children if parent is not None else []
    if slug not in ordered:
        return Neighbours(previous=None, next=None)
    index = ordered.index(slug)
    previous = structure.get(ordered[index - 1]) if index > 0 else None
    following = structure.get(ordered[index + 1]) if index + 1 < len(ordered) else None
    return Neighbours(
        previous=_link(previous, None) if previous is not None else None,
        next=_link(following, None) if following is not None else None,
    )


def child_links(
    structure: PageStructure, slug: str, current: str | None = None
) -> list[NavLink]:
    """Return direct children of ``slug``, flagging the one equal to ``current``."""
    return [_link(child, current) for child in structure.navigation.children.get(slug, [])]


def site_menu(structure: PageStructure) -> list[MenuItem]:
    """Return the recursive menu from every root page downward."""

    def build(page: Page) -> MenuItem:
        return MenuItem(
            slug=page.slug,
            title=page.title,
            children=tuple(
                build(child) for child in structure.navigation.children.get(page.slug, [])
            ),
        )

    return [build(page) for page in structure.root_pages()]


def page_navigation(
    structure: PageStructure, slug: str, current: str | None = None
) -> PageNavigation:
    """Bundle breadcrumbs, neighbours, and children for ``slug``."""
    focus = current if current is not None else slug
    return PageNavigation(
        slug=slug,
        breadcrumbs=tuple(breadcrumb_items(structure, slug, focus)),
        neighbours=page_neighbours(structure, slug),
        children=tuple(child_links(structure, slug, focus)),
    )


class NavigationRenderer:
    """Render navigation data to HTML fragments via Jinja templates."""

    def __init__(
        self, structure: PageStructure, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the renderer.

        Parameters
        ----------
        structure : PageStructure
            Built structure to derive navigation from.
        templates_dir : Path, optional
            Directory containing ``page_navigation.jinja`` and
            ``site_navigation.jinja``. Defaults to the package templates.
        """
        self.structure = structure
        self.templates_dir = (
            templates_dir or Path(__file__).resolve().parents[1] / "templates"
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_page_navigation(self, slug: str, current: str | None = None) -> str:
        """Return the navigation block for ``slug``; empty when nothing to show."""
        if slug not in self.structure:
            return ""
        navigation = page_navigation(self.structure, slug, current)
        if navigation.is_empty:
            return ""
        template = self.env.get_template("page_navigation.jinja")
        return template.render(nav=navigation)

    def render_site_navigation(self) -> str:
        """Return the full site menu as nested lists."""
        menu = site_menu(self.structure)
        if not menu:
            return ""
        template = self.env.get_template("site_navigation.jinja")
        return template.render(menu=menu, site_title=self.structure.title)


__all__ = [
    "MenuItem",
    "NavLink",
    "NavigationRenderer",
    "Neighbours",
    "PageNavigation",
    "breadcrumb_items",
    "child_links",
    "page_navigation",
    "page_neighbours",
    "site_menu",
]
