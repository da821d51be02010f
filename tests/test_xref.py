"""Tests for cross-reference classification and resolution order."""

from __future__ import annotations

import pytest

from myst_pages.document import Paragraph, Role, Root, Text, document_from_json
from myst_pages.structure import PageStructureManager, ReferenceKind, resolve_reference
from myst_pages.structure.xref import classify_reference, extract_reference_tokens


@pytest.mark.parametrize(
    ("token", "kind"),
    [
        ("#installation", ReferenceKind.INTERNAL_ANCHOR),
        ("https://x.com", ReferenceKind.EXTERNAL_URL),
        ("http://x.com", ReferenceKind.EXTERNAL_URL),
        ("user-guide/intro.md", ReferenceKind.FILE_PATH),
        ("intro.md", ReferenceKind.FILE_PATH),
        ("Installation", ReferenceKind.LOOKUP),
    ],
)
def test_classification_order(token: str, kind: ReferenceKind) -> None:
    assert classify_reference(token) is kind


def test_anchor_resolves_only_for_known_slugs(
    built_manager: PageStructureManager,
) -> None:
    structure = built_manager.structure
    hit = resolve_reference(structure, "#install", "index")
    miss = resolve_reference(structure, "#installation", "index")
    empty = resolve_reference(structure, "#", "index")

    assert hit.resolved and hit.url == "#install"
    assert not miss.resolved and miss.url == "#installation"
    assert not empty.resolved


def test_external_urls_always_resolve(built_manager: PageStructureManager) -> None:
    reference = resolve_reference(built_manager.structure, "https://x.com", "index")
    assert reference.resolved
    assert reference.url == "https://x.com"


def test_file_reference_ignores_directory_prefix(
    built_manager: PageStructureManager,
) -> None:
    reference = resolve_reference(
        built_manager.structure, "somewhere/else/intro.md", "index"
    )
    assert reference.resolved
    assert reference.target == "intro"
    assert reference.url == "#intro"


def test_lookup_matches_title_or_slug_in_order(
    built_manager: PageStructureManager,
) -> None:
    structure = built_manager.structure
    by_title = resolve_reference(structure, "Installation", "index")
    by_slug = resolve_reference(structure, "usage", "index")
    unknown = resolve_reference(structure, "Nope", "index")

    assert by_title.target == "install"
    assert by_slug.url == "#usage"
    assert not unknown.resolved
    assert unknown.url is None
    assert unknown.source == "index"


def test_only_reference_roles_are_extracted() -> None:
    document = Root(
        children=[
            Paragraph(
                children=[
                    Role(name="ref", value="intro"),
                    Role(name="abbr", value="HTML"),
                    Role(name="doc", children=[Text(value=" guide.md ")]),
                    Role(name="cite", value="   "),
                ]
            )
        ]
    )
    assert extract_reference_tokens(document) == ["intro", "guide.md"]


def test_tokens_from_external_json_ast() -> None:
    payload = (
        '{"type": "root", "children": [{"type": "paragraph", "children": ['
        '{"type": "mystRole", "name": "ref", "children": [{"type": "text", "value": "setup"}]}'
        "]}]}"
    )
    assert extract_reference_tokens(document_from_json(payload)) == ["setup"]
