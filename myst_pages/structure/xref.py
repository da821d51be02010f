"""Classify and resolve cross-reference tokens against a page structure.

Resolution never raises: a token that names nothing known comes back as a
:class:`CrossReference` with ``resolved=False`` so one broken link cannot
abort a publish run.

Example
-------
>>> from myst_pages.structure.xref import ReferenceKind, classify_reference
>>> classify_reference("#installation") is ReferenceKind.INTERNAL_ANCHOR
True
>>> classify_reference("user-guide/intro.md") is ReferenceKind.FILE_PATH
True
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from myst_pages._constants import CONTENT_SUFFIX, REFERENCE_ROLES
from myst_pages.document import NodeVisitor, Role, literal_value

from .slugs import slug_from_path

if typ.TYPE_CHECKING:
    from myst_pages.document import Node

    from .models import PageStructure

PATH_SEPARATORS = ("/", "\\")


class ReferenceKind(enum.StrEnum):
    """How a reference token was interpreted."""

    INTERNAL_ANCHOR = "internal-anchor"
    EXTERNAL_URL = "external-url"
    FILE_PATH = "file-path"
    LOOKUP = "lookup"


@dc.dataclass(slots=True, frozen=True)
class CrossReference:
    """Outcome of resolving one reference token found on a page.

    Attributes
    ----------
    source : str
        Slug of the page the token was found on.
    token : str
        Raw token as written in the document.
    kind : ReferenceKind
        Classification applied to the token.
    target : str or None
        Slug (or URL for external references) the token points at, when
        one could be derived.
    resolved : bool
        True when the target exists (external URLs always resolve).
    url : str or None
        Navigable link target; ``None`` for failed title/slug lookups.
    """

    source: str
    token: str
    kind: ReferenceKind
    target: str | None
    resolved: bool
    url: str | None


def classify_reference(token: str) -> ReferenceKind:
    """Return the :class:`ReferenceKind` for ``token``; first matching rule wins."""
    if token.startswith("#"):
        return ReferenceKind.INTERNAL_ANCHOR
    if token.startswith("http"):
        return ReferenceKind.EXTERNAL_URL
    if any(sep in token for sep in PATH_SEPARATORS) or token.endswith(CONTENT_SUFFIX):
        return ReferenceKind.FILE_PATH
    return ReferenceKind.LOOKUP


def resolve_reference(
    structure: PageStructure, token: str, source: str
) -> CrossReference:
    """Resolve ``token`` found on page ``source`` against ``structure``."""
    kind = classify_reference(token)
    match kind:
        case ReferenceKind.INTERNAL_ANCHOR:
            target = token[1:]
            return CrossReference(
                source=source,
                token=token,
                kind=kind,
                target=target,
                resolved=bool(target) and target in structure,
                url=token,
            )
        case ReferenceKind.EXTERNAL_URL:
            return CrossReference(
                source=source, token=token, kind=kind, target=token, resolved=True, url=token
            )
        case ReferenceKind.FILE_PATH:
            slug = slug_from_path(token)
            return CrossReference(
                source=source,
                token=token,
                kind=kind,
                target=slug,
                resolved=bool(slug) and slug in structure,
                url=f"#{slug}",
            )
        case _:
            found = lookup_title_or_slug(structure, token)
            return CrossReference(
                source=source,
                token=token,
                kind=kind,
                target=found,
                resolved=found is not None,
                url=f"#{found}" if found is not None else None,
            )


def lookup_title_or_slug(structure: PageStructure, token: str) -> str | None:
    """Return the slug of the first page whose title or slug equals ``token``."""
    for page in structure:
        if token in (page.title, page.slug):
            return page.slug
    return None


class _ReferenceCollector(NodeVisitor):
    def __init__(self) -> None:
        self.found: list[Role] = []

    def visit_role(self, node: Node) -> None:
        if isinstance(node, Role) and node.name in REFERENCE_ROLES:
            self.found.append(node)
        self.generic_visit(node)


def find_reference_nodes(document: Node) -> list[Role]:
    """Return ``ref``, ``cite`` and ``doc`` role nodes in document order."""
    collector = _ReferenceCollector()
    collector.visit(document)
    return collector.found


def extract_reference_tokens(document: Node) -> list[str]:
    """Return the literal tokens of every reference role in ``document``."""
    tokens: list[str] = []
    for node in find_reference_nodes(document):
        token = (literal_value(node) or "").strip()
        if token:
            tokens.append(token)
    return tokens


__all__ = [
    "CrossReference",
    "ReferenceKind",
    "classify_reference",
    "extract_reference_tokens",
    "find_reference_nodes",
    "lookup_title_or_slug",
    "resolve_reference",
]
