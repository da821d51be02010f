"""Typed node model for parsed MyST documents.

Parsed documents are trees of small dataclasses, one per node kind. Every
node exposes ``type`` (the tag), ``children`` and an optional literal
``value``, which is all that tree walkers such as the cross-reference
resolver need. :class:`NodeVisitor` offers ``visit_<type>`` dispatch in the
style of :class:`ast.NodeVisitor`.

External parsers can hand over a JSON AST; :func:`document_from_json` maps
it onto the same node classes.

Example
-------
>>> from myst_pages.document import Paragraph, Role, Root, Text, walk
>>> doc = Root(children=[Paragraph(children=[Text(value="See "), Role(name="ref", value="intro")])])
>>> [node.type for node in walk(doc)]
['root', 'paragraph', 'text', 'role']
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import msgspec
import msgspec.json as msgspec_json


class DocumentParseError(ValueError):
    """Raised when a document or serialized AST cannot be parsed."""


@dc.dataclass(slots=True, kw_only=True)
class Node:
    """Base node; subclasses fix ``type`` and add kind-specific fields."""

    type: typ.ClassVar[str] = "node"
    children: list[Node] = dc.field(default_factory=list)
    value: str | None = None


@dc.dataclass(slots=True, kw_only=True)
class Root(Node):
    type: typ.ClassVar[str] = "root"


@dc.dataclass(slots=True, kw_only=True)
class Heading(Node):
    type: typ.ClassVar[str] = "heading"
    depth: int = 1


@dc.dataclass(slots=True, kw_only=True)
class Paragraph(Node):
    type: typ.ClassVar[str] = "paragraph"


@dc.dataclass(slots=True, kw_only=True)
class Text(Node):
    type: typ.ClassVar[str] = "text"


@dc.dataclass(slots=True, kw_only=True)
class Emphasis(Node):
    type: typ.ClassVar[str] = "emphasis"


@dc.dataclass(slots=True, kw_only=True)
class Strong(Node):
    type: typ.ClassVar[str] = "strong"


@dc.dataclass(slots=True, kw_only=True)
class InlineCode(Node):
    type: typ.ClassVar[str] = "inlineCode"


@dc.dataclass(slots=True, kw_only=True)
class Code(Node):
    type: typ.ClassVar[str] = "code"
    lang: str | None = None


@dc.dataclass(slots=True, kw_only=True)
class ListNode(Node):
    type: typ.ClassVar[str] = "list"
    ordered: bool = False


@dc.dataclass(slots=True, kw_only=True)
class ListItem(Node):
    type: typ.ClassVar[str] = "listItem"


@dc.dataclass(slots=True, kw_only=True)
class BlockQuote(Node):
    type: typ.ClassVar[str] = "blockquote"


@dc.dataclass(slots=True, kw_only=True)
class Table(Node):
    type: typ.ClassVar[str] = "table"


@dc.dataclass(slots=True, kw_only=True)
class TableRow(Node):
    type: typ.ClassVar[str] = "tableRow"


@dc.dataclass(slots=True, kw_only=True)
class TableCell(Node):
    type: typ.ClassVar[str] = "tableCell"
    header: bool = False


@dc.dataclass(slots=True, kw_only=True)
class Link(Node):
    type: typ.ClassVar[str] = "link"
    url: str = ""


@dc.dataclass(slots=True, kw_only=True)
class Role(Node):
    """Inline ``{name}`value``` construct."""

    type: typ.ClassVar[str] = "role"
    name: str = ""


@dc.dataclass(slots=True, kw_only=True)
class Directive(Node):
    """Block ``{name}`` fence with arguments, options, and a body."""

    type: typ.ClassVar[str] = "directive"
    name: str = ""
    args: str | None = None
    options: dict[str, str] = dc.field(default_factory=dict)


@dc.dataclass(slots=True, kw_only=True)
class Math(Node):
    type: typ.ClassVar[str] = "math"


@dc.dataclass(slots=True, kw_only=True)
class InlineMath(Node):
    type: typ.ClassVar[str] = "inlineMath"


@dc.dataclass(slots=True, kw_only=True)
class ThematicBreak(Node):
    type: typ.ClassVar[str] = "thematicBreak"


NODE_TYPES: dict[str, type[Node]] = {
    cls.type: cls
    for cls in (
        Root,
        Heading,
        Paragraph,
        Text,
        Emphasis,
        Strong,
        InlineCode,
        Code,
        ListNode,
        ListItem,
        BlockQuote,
        Table,
        TableRow,
        TableCell,
        Link,
        Role,
        Directive,
        Math,
        InlineMath,
        ThematicBreak,
    )
}
TYPE_ALIASES: dict[str, str] = {
    "mystRole": "role",
    "myst_role": "role",
    "mystDirective": "directive",
    "myst_directive": "directive",
    "block_quote": "blockquote",
    "code_block": "code",
    "math_block": "math",
}


def walk(node: Node) -> typ.Iterator[Node]:
    """Yield ``node`` and its descendants depth first, in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def literal_value(node: Node) -> str | None:
    """Return the node's own value, or its first child's value when absent."""
    if node.value:
        return node.value
    if node.children:
        return node.children[0].value
    return None


class NodeVisitor:
    """Walk a document tree calling ``visit_<type>`` for each node.

    Subclasses override the methods for the node kinds they care about;
    :meth:`generic_visit` descends into children for every other kind.
    """

    def visit(self, node: Node) -> None:
        method = getattr(self, f"visit_{node.type}", self.generic_visit)
        method(node)

    def generic_visit(self, node: Node) -> None:
        for child in node.children:
            self.visit(child)


def document_from_json(payload: bytes | str) -> Root:
    """Decode a JSON AST emitted by an external parser into typed nodes.

    Raises
    ------
    DocumentParseError
        If the payload is not valid JSON or its root is not a ``root`` node.
    """
    try:
        raw = msgspec_json.decode(payload)
    except msgspec.DecodeError as exc:
        msg = f"Invalid document JSON: {exc}"
        raise DocumentParseError(msg) from exc
    if not isinstance(raw, dict) or raw.get("type") != "root":
        msg = "Document JSON must be an object with type 'root'."
        raise DocumentParseError(msg)
    node = _node_from_mapping(raw)
    return typ.cast("Root", node)


def _node_from_mapping(raw: dict[str, typ.Any]) -> Node:
    kind = str(raw.get("type", ""))
    kind = TYPE_ALIASES.get(kind, kind)
    cls = NODE_TYPES.get(kind, Paragraph if raw.get("children") else Text)
    children = [
        _node_from_mapping(child)
        for child in raw.get("children") or []
        if isinstance(child, dict)
    ]
    value = raw.get("value")
    fields: dict[str, typ.Any] = {
        "children": children,
        "value": str(value) if value is not None else None,
    }
    match kind:
        case "heading":
            fields["depth"] = int(raw.get("depth", 1))
        case "code":
            fields["lang"] = raw.get("lang")
        case "list":
            fields["ordered"] = bool(raw.get("ordered", False))
        case "link":
            fields["url"] = str(raw.get("url", ""))
        case "role":
            fields["name"] = str(raw.get("name", ""))
        case "directive":
            fields["name"] = str(raw.get("name", ""))
            fields["args"] = raw.get("args")
            fields["options"] = {
                str(k): str(v) for k, v in (raw.get("options") or {}).items()
            }
    return cls(**fields)


__all__ = [
    "BlockQuote",
    "Code",
    "Directive",
    "DocumentParseError",
    "Emphasis",
    "Heading",
    "InlineCode",
    "InlineMath",
    "Link",
    "ListItem",
    "ListNode",
    "Math",
    "Node",
    "NodeVisitor",
    "Paragraph",
    "Role",
    "Root",
    "Strong",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "ThematicBreak",
    "document_from_json",
    "literal_value",
    "walk",
]
