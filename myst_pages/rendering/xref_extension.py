"""Python-Markdown extension turning MyST roles into cross-reference links."""

from __future__ import annotations

import typing as typ
import xml.etree.ElementTree as etree

from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor

from myst_pages._constants import REFERENCE_ROLES
from myst_pages.structure.xref import resolve_reference

if typ.TYPE_CHECKING:
    import re

    from markdown import Markdown

    from myst_pages.structure import CrossReference, PageStructure
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any

ROLE_PATTERN = r"\{(?P<role>[A-Za-z][\w:+-]*)\}`(?P<value>[^`]+)`"
# Must run before the backtick processor (priority 190) claims the value.
ROLE_PRIORITY = 200


def reference_label(structure: PageStructure, reference: CrossReference) -> str:
    """Return the visible text for a reference: the target title when known."""
    if reference.resolved and reference.target:
        page = structure.get(reference.target)
        if page is not None:
            return page.title
    return reference.token


class CrossReferenceExtension(Extension):
    """Rewrite ``{ref}``, ``{doc}`` and ``{cite}`` roles into links.

    Resolved references become ``<a class="xref">`` elements pointing at the
    target slug; unresolved ones keep their raw token inside a
    ``<span class="xref-unresolved">`` so the reader still sees what was
    meant. Other roles render their literal value.
    """

    def __init__(self, structure: PageStructure, source: str) -> None:
        super().__init__()
        self.structure = structure
        self.source = source

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the role processor on the Markdown instance."""
        processor = CrossReferenceInlineProcessor(
            ROLE_PATTERN, md, self.structure, self.source
        )
        md.inlinePatterns.register(processor, "myst_xref_roles", ROLE_PRIORITY)


class CrossReferenceInlineProcessor(InlineProcessor):
    """Replace role markup with link, span, or literal elements."""

    def __init__(
        self, pattern: str, md: Markdown, structure: PageStructure, source: str
    ) -> None:
        super().__init__(pattern, md)
        self.structure = structure
        self.source = source

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element, int, int]:
        """Build the element for one role occurrence."""
        del data
        role = m.group("role")
        token = m.group("value").strip()
        if role not in REFERENCE_ROLES:
            element = etree.Element("span")
            element.set("class", f"myst-role myst-role-{role}")
            element.text = token
            return element, m.start(0), m.end(0)

        reference = resolve_reference(self.structure, token, self.source)
        if reference.resolved and reference.url:
            element = etree.Element("a")
            element.set("href", reference.url)
            element.set("class", "xref")
            element.set("data-kind", str(reference.kind))
        else:
            element = etree.Element("span")
            element.set("class", "xref-unresolved")
            element.set("title", "Unresolved reference")
        element.text = reference_label(self.structure, reference)
        return element, m.start(0), m.end(0)


__all__ = [
    "CrossReferenceExtension",
    "CrossReferenceInlineProcessor",
    "ROLE_PATTERN",
    "reference_label",
]
