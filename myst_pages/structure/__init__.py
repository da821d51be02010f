"""Page structure, cross-reference resolution, and navigation for MyST sites."""

from .manager import PageStructureManager, StructureNotBuiltError
from .models import HierarchyRecord, NavigationIndex, Page, PageStructure
from .navigation import NavigationRenderer
from .slugs import slug_from_path, slugify
from .toc_builder import TocModelBuilder
from .xref import CrossReference, ReferenceKind, resolve_reference

__all__ = [
    "CrossReference",
    "HierarchyRecord",
    "NavigationIndex",
    "NavigationRenderer",
    "Page",
    "PageStructure",
    "PageStructureManager",
    "ReferenceKind",
    "StructureNotBuiltError",
    "TocModelBuilder",
    "resolve_reference",
    "slug_from_path",
    "slugify",
]
