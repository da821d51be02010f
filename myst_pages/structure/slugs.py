r"""Slug derivation shared by the TOC builder and the reference resolver.

Example
-------
>>> from myst_pages.structure.slugs import slugify, slug_from_path
>>> slugify("My Page!!")
'my-page'
>>> slug_from_path("user-guide/intro.md")
'intro'
"""

from __future__ import annotations

import re

from myst_pages._constants import CONTENT_SUFFIX

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lower-case ``text`` and collapse non-alphanumeric runs to hyphens."""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def content_basename(path: str) -> str:
    """Return the final path component without the content-file suffix."""
    name = re.split(r"[\\/]", path.rstrip("/\\"))[-1]
    if name.endswith(CONTENT_SUFFIX):
        return name[: -len(CONTENT_SUFFIX)]
    return name


def slug_from_path(path: str) -> str:
    """Derive a page slug from a content-file path."""
    return slugify(content_basename(path))


def unique_slug(base: str, used: set[str]) -> str:
    """Generate a unique slug, appending numeric suffixes when needed."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


__all__ = ["content_basename", "slug_from_path", "slugify", "unique_slug"]
