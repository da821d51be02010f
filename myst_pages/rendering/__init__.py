"""HTML and Markdown renderers for MyST page bodies."""

from .renderer import HtmlContentRenderer, MarkdownContentRenderer
from .xref_extension import CrossReferenceExtension, reference_label

__all__ = [
    "CrossReferenceExtension",
    "HtmlContentRenderer",
    "MarkdownContentRenderer",
    "reference_label",
]
