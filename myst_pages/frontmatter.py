r"""Split YAML frontmatter from MyST documents and map it to page metadata.

Publishing targets expect a flat mapping of capitalised metadata keys
(``Title``, ``Author``, ``Created``...). This module turns the frontmatter
fields MyST documents commonly carry into that mapping and keeps any custom
fields as stringified pass-through values.

Example
-------
>>> from myst_pages.frontmatter import split_frontmatter, map_to_metadata
>>> front, body = split_frontmatter("---\ntitle: Intro\ntags: [a, b]\n---\n# Intro\n")
>>> body
'# Intro\n'
>>> map_to_metadata(front)["Tags"]
'a; b'
"""

from __future__ import annotations

import datetime as dt
import io
import json
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from myst_pages.config.helpers import _parse_timestamp

FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

STANDARD_FIELDS = frozenset(
    {
        "title",
        "authors",
        "date",
        "created",
        "modified",
        "version",
        "description",
        "abstract",
        "keywords",
        "tags",
        "categories",
        "status",
        "license",
        "doi",
        "url",
        "github",
    }
)
KNOWN_STATUSES = frozenset({"draft", "review", "published", "archived"})
DEFAULT_TITLE = "Untitled Document"


class FrontmatterError(ValueError):
    """Raised when a frontmatter block is not valid YAML or not a mapping."""


def split_frontmatter(text: str) -> tuple[dict[str, typ.Any], str]:
    """Return the parsed frontmatter mapping and the remaining document body.

    Documents without a leading ``---`` block return an empty mapping and
    the text unchanged.

    Raises
    ------
    FrontmatterError
        If the block cannot be parsed or does not hold a mapping.
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return {}, text
    loader = YAML(typ="safe")
    try:
        loaded = loader.load(io.StringIO(match.group(1)))
    except YAMLError as exc:
        msg = f"Failed to parse frontmatter: {exc}"
        raise FrontmatterError(msg) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = "Frontmatter must be a mapping."
        raise FrontmatterError(msg)
    return dict(loaded), text[match.end() :]


def map_to_metadata(frontmatter: typ.Mapping[str, typ.Any]) -> dict[str, str]:
    """Map frontmatter fields onto publishing metadata keys.

    Parameters
    ----------
    frontmatter : Mapping[str, Any]
        Parsed frontmatter as returned by :func:`split_frontmatter`.

    Returns
    -------
    dict[str, str]
        Metadata with ``Title`` always present. Lists are joined with
        ``"; "``, dates are rendered as UTC ISO timestamps, and non-standard
        fields are passed through under their original key.
    """
    metadata: dict[str, str] = {
        "Title": _format_value(frontmatter.get("title")) or DEFAULT_TITLE
    }

    authors = _author_names(frontmatter.get("authors"))
    if authors:
        metadata["Author"] = "; ".join(authors)

    created = frontmatter.get("date") or frontmatter.get("created")
    if created:
        metadata["Created"] = _format_date(created)
    if frontmatter.get("modified"):
        metadata["Modified"] = _format_date(frontmatter["modified"])

    description = frontmatter.get("description") or frontmatter.get("abstract")
    if description:
        metadata["Description"] = _format_value(description)

    for source, target in (
        ("keywords", "Keywords"),
        ("tags", "Tags"),
        ("categories", "Category"),
        ("status", "Status"),
        ("version", "Version"),
    ):
        value = frontmatter.get(source)
        if value:
            metadata[target] = _format_value(value)

    for key, value in frontmatter.items():
        if key not in STANDARD_FIELDS:
            metadata[str(key)] = _format_value(value)
    return metadata


def metadata_summary(frontmatter: typ.Mapping[str, typ.Any]) -> str:
    """Return a short multi-line summary used by dry runs."""
    parts: list[str] = []
    if frontmatter.get("title"):
        parts.append(f"Title: {frontmatter['title']}")
    authors = _author_names(frontmatter.get("authors"))
    if authors:
        parts.append(f"Authors: {', '.join(authors)}")
    if frontmatter.get("date"):
        parts.append(f"Date: {frontmatter['date']}")
    if frontmatter.get("description"):
        parts.append(f"Description: {frontmatter['description']}")
    keywords = frontmatter.get("keywords")
    if keywords:
        joined = ", ".join(map(str, keywords)) if isinstance(keywords, list) else str(keywords)
        parts.append(f"Keywords: {joined}")
    return "\n".join(parts)


def validate_frontmatter(frontmatter: typ.Mapping[str, typ.Any]) -> list[str]:
    """Return human-readable warnings; an empty list means no findings."""
    warnings: list[str] = []
    if not frontmatter.get("title"):
        warnings.append("Title is recommended")
    for key in ("date", "created", "modified"):
        value = frontmatter.get(key)
        if value and _parse_timestamp(value) is None:
            warnings.append(f"Invalid {key} format")
    if frontmatter.get("authors") and not isinstance(frontmatter["authors"], list):
        warnings.append("Authors should be a list")
    if frontmatter.get("keywords") and not isinstance(frontmatter["keywords"], list):
        warnings.append("Keywords should be a list")
    status = frontmatter.get("status")
    if status and str(status) not in KNOWN_STATUSES:
        warnings.append(f"Unknown status '{status}'")
    return warnings


def _author_names(value: object) -> list[str]:
    if not value:
        return []
    if not isinstance(value, list):
        return [str(value)]
    names: list[str] = []
    for author in value:
        if isinstance(author, dict):
            name = author.get("name")
            if name:
                names.append(str(name))
        else:
            names.append(str(author))
    return names


def _format_date(value: object) -> str:
    """Render a date as a UTC ISO timestamp, or return the original text."""
    parsed = _parse_timestamp(value) if isinstance(value, (str, dt.date)) else None
    if parsed is None:
        return str(value)
    return parsed.isoformat().replace("+00:00", "Z")


def _format_value(value: object) -> str:
    match value:
        case None:
            return ""
        case list():
            return "; ".join(_format_value(item) for item in value)
        case dict():
            return json.dumps(value, default=str)
        case dt.date():
            return _format_date(value)
        case _:
            return str(value)


__all__ = [
    "FRONTMATTER_PATTERN",
    "FrontmatterError",
    "map_to_metadata",
    "metadata_summary",
    "split_frontmatter",
    "validate_frontmatter",
]
