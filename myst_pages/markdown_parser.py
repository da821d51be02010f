r"""Parse MyST Markdown into the typed document model.

This is a small line-oriented parser covering the constructs the publishing
pipeline inspects: headings, fenced code, fenced directives, ``$$`` math
blocks, block quotes, lists, pipe tables, thematic breaks and paragraphs,
plus inline roles, code, math, links and emphasis. It does not aim to be a
complete CommonMark implementation; rendering goes through python-markdown.

Example
-------
>>> from myst_pages.markdown_parser import parse_document
>>> doc = parse_document("# Intro\nSee {ref}`setup` first.\n")
>>> [child.type for child in doc.children]
['heading', 'paragraph']
>>> doc.children[1].children[1].name
'ref'
"""

from __future__ import annotations

import re
import textwrap

from .document import (
    BlockQuote,
    Code,
    Directive,
    DocumentParseError,
    Emphasis,
    Heading,
    InlineCode,
    InlineMath,
    Link,
    ListItem,
    ListNode,
    Math,
    Node,
    Paragraph,
    Role,
    Root,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
FENCE_PATTERN = re.compile(r"^(?P<fence>`{3,}|~{3,})\s*(?:\{(?P<directive>[^}\s]+)\}\s*)?(?P<info>.*)$")
LANGUAGE_PATTERN = re.compile(r"[A-Za-z0-9_+#.-]+")
MATH_FENCE = "$$"
THEMATIC_BREAK_PATTERN = re.compile(r"^(?:\*[ \t]*){3,}$|^(?:-[ \t]*){3,}$|^(?:_[ \t]*){3,}$")
LIST_ITEM_PATTERN = re.compile(r"^(?P<indent>[ ]{0,3})(?P<marker>[-*+]|\d{1,9}[.)])(?P<gap>[ \t]+)(?P<text>.*)$")
TABLE_SEPARATOR_PATTERN = re.compile(r"^\|?\s*:?-{3,}:?\s*(\|\s*:?-{3,}:?\s*)*\|?\s*$")
OPTION_PATTERN = re.compile(r"^:(?P<key>[\w-]+):\s*(?P<value>.*)$")
INLINE_PATTERN = re.compile(
    r"\{(?P<role>[A-Za-z][\w:+-]*)\}`(?P<role_value>[^`]+)`"
    r"|`(?P<code>[^`]+)`"
    r"|\$(?P<math>[^$\n]+)\$"
    r"|\[(?P<link_text>[^\]]+)\]\((?P<link_url>[^)\s]+)\)"
    r"|\*\*(?P<strong>.+?)\*\*"
    r"|\*(?P<emphasis>[^*\s][^*]*?)\*"
)


def parse_document(text: str) -> Root:
    """Parse MyST Markdown ``text`` into a :class:`~myst_pages.document.Root`.

    Raises
    ------
    DocumentParseError
        If a code, directive, or math fence is opened but never closed.
    """
    lines = text.replace("\r\n", "\n").split("\n")
    return Root(children=_parse_blocks(lines))


def parse_inline(text: str) -> list[Node]:
    """Split inline markup into text, role, code, math, link and emphasis nodes."""
    nodes: list[Node] = []
    position = 0
    for match in INLINE_PATTERN.finditer(text):
        if match.start() > position:
            nodes.append(Text(value=text[position : match.start()]))
        nodes.append(_inline_node(match))
        position = match.end()
    if position < len(text):
        nodes.append(Text(value=text[position:]))
    return nodes


def _inline_node(match: re.Match[str]) -> Node:
    groups = match.groupdict()
    if groups["role"]:
        value = groups["role_value"]
        return Role(name=groups["role"], value=value, children=[Text(value=value)])
    if groups["code"] is not None:
        return InlineCode(value=groups["code"])
    if groups["math"] is not None:
        return InlineMath(value=groups["math"])
    if groups["link_text"] is not None:
        return Link(url=groups["link_url"], children=parse_inline(groups["link_text"]))
    if groups["strong"] is not None:
        return Strong(children=parse_inline(groups["strong"]))
    return Emphasis(children=parse_inline(groups["emphasis"]))


def _parse_blocks(lines: list[str]) -> list[Node]:
    blocks: list[Node] = []
    paragraph: list[str] = []
    index = 0

    def flush_paragraph() -> None:
        if paragraph:
            joined = "\n".join(line.strip() for line in paragraph)
            blocks.append(Paragraph(children=parse_inline(joined)))
            paragraph.clear()

    while index < len(lines):
        line = lines[index]
        stripped = line.strip()

        if not stripped:
            flush_paragraph()
            index += 1
            continue

        fence = FENCE_PATTERN.match(stripped)
        if fence:
            flush_paragraph()
            node, index = _parse_fence(lines, index, fence)
            blocks.append(node)
            continue

        if stripped.startswith(MATH_FENCE):
            flush_paragraph()
            node, index = _parse_math_block(lines, index)
            blocks.append(node)
            continue

        heading = HEADING_PATTERN.match(stripped)
        if heading:
            flush_paragraph()
            blocks.append(
                Heading(
                    depth=len(heading.group(1)),
                    children=parse_inline(heading.group(2)),
                )
            )
            index += 1
            continue

        if THEMATIC_BREAK_PATTERN.match(stripped):
            flush_paragraph()
            blocks.append(ThematicBreak())
            index += 1
            continue

        if stripped.startswith(">"):
            flush_paragraph()
            quoted: list[str] = []
            while index < len(lines) and lines[index].strip().startswith(">"):
                quoted.append(re.sub(r"^\s*>\s?", "", lines[index]))
                index += 1
            blocks.append(BlockQuote(children=_parse_blocks(quoted)))
            continue

        item = LIST_ITEM_PATTERN.match(line)
        if item:
            flush_paragraph()
            node, index = _parse_list(lines, index, item)
            blocks.append(node)
            continue

        if (
            stripped.startswith("|")
            and index + 1 < len(lines)
            and TABLE_SEPARATOR_PATTERN.match(lines[index + 1].strip())
        ):
            flush_paragraph()
            node, index = _parse_table(lines, index)
            blocks.append(node)
            continue

        paragraph.append(line)
        index += 1

    flush_paragraph()
    return blocks


def _parse_fence(
    lines: list[str], start: int, match: re.Match[str]
) -> tuple[Node, int]:
    fence = match.group("fence")
    body: list[str] = []
    index = start + 1
    closing = re.compile(rf"^{re.escape(fence[0])}{{{len(fence)},}}\s*$")
    while index < len(lines):
        if closing.match(lines[index].strip()):
            break
        body.append(lines[index])
        index += 1
    else:
        msg = f"Unterminated code fence opened on line {start + 1}"
        raise DocumentParseError(msg)

    info = match.group("info").strip()
    directive = match.group("directive")
    content = textwrap.dedent("\n".join(body))
    if not directive:
        label = LANGUAGE_PATTERN.match(info)
        lang = label.group(0) if label else None
        return Code(lang=lang, value=content), index + 1

    options: dict[str, str] = {}
    content_lines = content.split("\n")
    while content_lines and (option := OPTION_PATTERN.match(content_lines[0].strip())):
        options[option.group("key")] = option.group("value").strip()
        content_lines.pop(0)
    value = "\n".join(content_lines).strip("\n")
    return (
        Directive(
            name=directive,
            args=info or None,
            options=options,
            value=value or None,
            children=_parse_blocks(content_lines) if value else [],
        ),
        index + 1,
    )


def _parse_math_block(lines: list[str], start: int) -> tuple[Node, int]:
    first = lines[start].strip()[len(MATH_FENCE) :]
    if first.endswith(MATH_FENCE):
        return Math(value=first[: -len(MATH_FENCE)].strip()), start + 1
    body = [first] if first.strip() else []
    index = start + 1
    while index < len(lines):
        current = lines[index].strip()
        if current.endswith(MATH_FENCE):
            tail = current[: -len(MATH_FENCE)]
            if tail:
                body.append(tail)
            return Math(value="\n".join(body).strip()), index + 1
        body.append(lines[index])
        index += 1
    msg = f"Unterminated math block opened on line {start + 1}"
    raise DocumentParseError(msg)


def _parse_list(
    lines: list[str], start: int, first: re.Match[str]
) -> tuple[Node, int]:
    ordered = first.group("marker")[0].isdigit()
    items: list[Node] = []
    index = start
    while index < len(lines):
        match = LIST_ITEM_PATTERN.match(lines[index])
        if not match or match.group("marker")[0].isdigit() != ordered:
            break
        width = len(match.group("indent")) + len(match.group("marker")) + len(match.group("gap"))
        item_lines = [match.group("text")]
        index += 1
        while index < len(lines):
            current = lines[index]
            if current.strip() and not current.startswith(" " * width):
                break
            if not current.strip():
                following = lines[index + 1] if index + 1 < len(lines) else ""
                if not following.startswith(" " * width) or not following.strip():
                    break
            item_lines.append(current[width:])
            index += 1
        items.append(ListItem(children=_parse_blocks(item_lines)))
        while index < len(lines) and not lines[index].strip():
            following = lines[index + 1] if index + 1 < len(lines) else ""
            if not LIST_ITEM_PATTERN.match(following):
                break
            index += 1
    return ListNode(ordered=ordered, children=items), index


def _parse_table(lines: list[str], start: int) -> tuple[Node, int]:
    rows: list[Node] = [_table_row(lines[start], header=True)]
    index = start + 2
    while index < len(lines) and lines[index].strip().startswith("|"):
        rows.append(_table_row(lines[index], header=False))
        index += 1
    return Table(children=rows), index


def _table_row(line: str, *, header: bool) -> Node:
    cells = line.strip().strip("|").split("|")
    return TableRow(
        children=[
            TableCell(header=header, children=parse_inline(cell.strip()))
            for cell in cells
        ]
    )


__all__ = ["parse_document", "parse_inline"]
