"""Render MyST page bodies to HTML or Markdown for publishing."""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from myst_pages._constants import REFERENCE_ROLES
from myst_pages.structure.xref import resolve_reference

from .xref_extension import ROLE_PATTERN, reference_label

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension

    from myst_pages.structure import PageStructure
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

CODE_BLOCK_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
DIRECTIVE_PATTERN = re.compile(
    r"^(?P<fence>[`~]{3,})\{(?P<name>[^}\s]+)\}[ \t]*(?P<args>[^\n]*)\n"
    r"(?P<body>.*?)^(?P=fence)[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
DIRECTIVE_OPTIONS_PATTERN = re.compile(r"\A(?:[ \t]*:[\w-]+:[^\n]*\n)+")
CODE_DIRECTIVES = frozenset({"code", "code-block", "code-cell", "sourcecode"})
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
INLINE_ROLE_PATTERN = re.compile(ROLE_PATTERN)


class HtmlContentRenderer:
    """Render markdown and code snippets with consistent styling."""

    def __init__(
        self,
        pygments_style: str = "default",
        link_extension: Extension | None = None,
    ) -> None:
        """Initialize a renderer with optional pygments style and link extension.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting.
        link_extension : Extension, optional
            Markdown extension used to rewrite cross-reference roles; pass
            ``None`` to leave roles to the literal fallback.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")
        self._link_extension = link_extension

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render markdown into HTML using the configured extensions."""
        normalized = self._normalize_fenced_blocks(text)
        normalized = self._render_directives(normalized)
        if not normalized.strip():
            return ""
        extensions: list[Extension | str] = [
            "fenced_code",
            "codehilite",
            "tables",
            "sane_lists",
        ]
        if self._link_extension:
            extensions.append(self._link_extension)
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        html = md.convert(normalized)
        return self._annotate_codehilite(html, normalized)

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML with an optional language tag."""
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        return self._attach_language_attribute(html, lang)

    def _render_directives(self, text: str) -> str:
        """Replace directive fences with pre-rendered HTML blocks."""

        def _repl(match: re.Match[str]) -> str:
            name = match.group("name")
            args = match.group("args").strip()
            body = DIRECTIVE_OPTIONS_PATTERN.sub("", match.group("body"), count=1)
            if name in CODE_DIRECTIVES:
                html = self.code_block(body.rstrip("\n"), args or None)
            else:
                title = (
                    f'<p class="admonition-title">{escape(args)}</p>' if args else ""
                )
                inner = self.markdown(body)
                html = (
                    f'<div class="myst-directive {escape(name, quote=True)}"'
                    f' data-directive="{escape(name, quote=True)}">'
                    f"{title}{inner}</div>"
                )
            return f"\n{html}\n"

        return DIRECTIVE_PATTERN.sub(_repl, text)

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group(1) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _attach_language_attribute(html: str, language: str) -> str:
        """Add a single language attribute to an already highlighted block."""
        safe_lang = escape(language or "text", quote=True)

        def _repl(match: re.Match[str]) -> str:
            return f'<div class="codehilite" data-language="{safe_lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


class MarkdownContentRenderer:
    """Keep Markdown output, rewriting reference roles into Markdown links."""

    def __init__(self, structure: PageStructure, source: str) -> None:
        self.structure = structure
        self.source = source

    def markdown(self, text: str) -> str:
        """Return ``text`` with roles replaced by links or their raw tokens."""

        def _repl(match: re.Match[str]) -> str:
            role = match.group("role")
            token = match.group("value").strip()
            if role not in REFERENCE_ROLES:
                return token
            reference = resolve_reference(self.structure, token, self.source)
            if reference.resolved and reference.url:
                label = reference_label(self.structure, reference)
                return f"[{label}]({reference.url})"
            return token

        return INLINE_ROLE_PATTERN.sub(_repl, text)


__all__ = [
    "CODE_BLOCK_PATTERN",
    "HtmlContentRenderer",
    "MarkdownContentRenderer",
]
