"""Tests for the Jinja-rendered breadcrumb, prev/next, and site menu blocks."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from bs4 import BeautifulSoup

from myst_pages.structure import NavigationRenderer, PageStructureManager
from myst_pages.structure.navigation import (
    breadcrumb_items,
    child_links,
    page_neighbours,
    site_menu,
)


def test_first_and_last_siblings_have_one_neighbour(
    built_manager: PageStructureManager,
) -> None:
    structure = built_manager.structure
    first = page_neighbours(structure, "intro")
    middle = page_neighbours(structure, "install")
    last = page_neighbours(structure, "usage")

    assert first.previous is None and first.next.slug == "install"
    assert middle.previous.slug == "intro" and middle.next.slug == "usage"
    assert last.previous.slug == "install" and last.next is None


def test_root_pages_have_no_neighbours(built_manager: PageStructureManager) -> None:
    neighbours = page_neighbours(built_manager.structure, "user-guide")
    assert neighbours.previous is None
    assert neighbours.next is None


def test_single_child_has_no_neighbours(
    project_factory: typ.Callable[..., Path],
) -> None:
    config = project_factory(
        "project:\n  toc:\n    - title: Only\n      children:\n        - file: solo.md\n"
    )
    manager = PageStructureManager()
    manager.build_structure(config, config.parent)

    neighbours = page_neighbours(manager.structure, "solo")
    assert neighbours.previous is None
    assert neighbours.next is None


def test_breadcrumbs_hidden_for_roots(built_manager: PageStructureManager) -> None:
    structure = built_manager.structure
    assert breadcrumb_items(structure, "index") == []
    crumbs = breadcrumb_items(structure, "usage", "usage")
    assert [(c.slug, c.is_current) for c in crumbs] == [
        ("user-guide", False),
        ("usage", True),
    ]


def test_child_links_flag_current(built_manager: PageStructureManager) -> None:
    links = child_links(built_manager.structure, "user-guide", current="install")
    assert [(link.href, link.is_current) for link in links] == [
        ("#intro", False),
        ("#install", True),
        ("#usage", False),
    ]


def test_site_menu_nests_children(built_manager: PageStructureManager) -> None:
    menu = site_menu(built_manager.structure)
    assert [item.slug for item in menu] == ["index", "user-guide", "api"]
    assert [child.title for child in menu[1].children] == [
        "Introduction",
        "Installation",
        "Usage",
    ]
    assert [child.slug for child in menu[2].children] == ["alpha", "beta"]


def test_rendered_page_navigation(built_manager: PageStructureManager) -> None:
    renderer = NavigationRenderer(built_manager.structure)
    soup = BeautifulSoup(renderer.render_page_navigation("install"), "html.parser")

    nav = soup.select_one("nav.myst-navigation")
    assert nav is not None
    assert nav["data-page"] == "install"
    crumbs = nav.select(".breadcrumbs li")
    assert [crumb.get_text(strip=True) for crumb in crumbs] == [
        "User Guide",
        "Installation",
    ]
    assert crumbs[0].a["href"] == "#user-guide"
    assert nav.select_one("a.prev-page")["href"] == "#intro"
    assert nav.select_one("a.next-page")["href"] == "#usage"
    assert nav.select_one(".page-toc") is None


def test_rendered_section_lists_children(built_manager: PageStructureManager) -> None:
    renderer = NavigationRenderer(built_manager.structure)
    soup = BeautifulSoup(
        renderer.render_page_navigation("user-guide", current="usage"), "html.parser"
    )

    items = soup.select(".page-toc li a")
    assert [a["href"] for a in items] == ["#intro", "#install", "#usage"]
    assert [a.get("class") for a in items] == [None, None, ["current"]]
    assert soup.select_one(".breadcrumbs") is None


def test_page_without_navigation_renders_nothing(
    project_factory: typ.Callable[..., Path],
) -> None:
    config = project_factory("project:\n  toc:\n    - file: lonely.md\n")
    manager = PageStructureManager()
    manager.build_structure(config, config.parent)
    renderer = NavigationRenderer(manager.structure)

    assert renderer.render_page_navigation("lonely") == ""
    assert renderer.render_page_navigation("unknown") == ""


def test_rendered_site_navigation_escapes_titles(
    project_factory: typ.Callable[..., Path],
) -> None:
    config = project_factory(
        "project:\n  title: Docs\n  toc:\n    - file: a.md\n      title: A <b>bold</b> page\n"
    )
    manager = PageStructureManager()
    manager.build_structure(config, config.parent)
    html = NavigationRenderer(manager.structure).render_site_navigation()

    soup = BeautifulSoup(html, "html.parser")
    assert soup.select_one("nav.site-navigation")["aria-label"] == "Docs"
    link = soup.select_one("ul.main-nav a")
    assert link.get_text() == "A <b>bold</b> page"
    assert "<b>" not in html
