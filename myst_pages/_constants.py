"""Common literal values used across myst_pages.

These constants keep file suffixes, role names, and default locations
centralized so the structure builder, the resolver, the renderer, and tests
import the same values without drifting.

Examples
--------
>>> from myst_pages import _constants
>>> _constants.CONTENT_SUFFIX
'.md'
>>> "ref" in _constants.REFERENCE_ROLES
True
"""

CONTENT_SUFFIX = ".md"
REFERENCE_ROLES = frozenset({"ref", "cite", "doc"})
DEFAULT_PROJECT_CONFIG = "myst.yml"
DEFAULT_SECTION_TITLE = "Section"
DEFAULT_SECTION_SLUG = "section"
