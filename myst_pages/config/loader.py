"""Load ``myst.yml`` project configuration into typed dataclasses."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .helpers import _as_mapping, _optional_str, _string_list
from .models import (
    FileEntry,
    PatternEntry,
    ProjectConfig,
    SectionEntry,
    SiteMetadata,
    TocConfigError,
    TocEntry,
)

logger = logging.getLogger(__name__)


def load_project_config(path: Path) -> ProjectConfig:
    """Load the YAML configuration describing the project table of contents.

    Parameters
    ----------
    path : Path
        Filesystem path to the MyST project file (usually ``myst.yml``).

    Returns
    -------
    ProjectConfig
        Parsed project metadata, site metadata, and the ordered TOC entries.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TocConfigError
        If the YAML cannot be parsed, the top-level structure is not a
        mapping, ``project.toc`` is missing, or an entry is malformed.

    Examples
    --------
    >>> from pathlib import Path
    >>> from myst_pages.config import load_project_config
    >>> config = load_project_config(Path("myst.yml"))  # doctest: +SKIP
    >>> config.toc[0].file  # doctest: +SKIP
    'index.md'
    """
    if not path.exists():
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Failed to parse {path}: {exc}"
        raise TocConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure in {path} must be a mapping."
        raise TocConfigError(msg)

    project = _as_mapping(loaded.get("project"))
    toc_raw = project.get("toc")
    if not toc_raw:
        msg = f"No table of contents found in {path} (expected 'project.toc')."
        raise TocConfigError(msg)
    if not isinstance(toc_raw, list):
        msg = "'project.toc' must be a list of entries."
        raise TocConfigError(msg)

    site = _as_mapping(loaded.get("site"))
    version = loaded.get("version")
    return ProjectConfig(
        toc=_parse_entries(toc_raw, location="project.toc"),
        title=_optional_str(project.get("title")),
        description=_optional_str(project.get("description")),
        authors=_string_list(project.get("authors")),
        keywords=_string_list(project.get("keywords")),
        version=version if isinstance(version, int) else None,
        site=SiteMetadata(
            title=_optional_str(site.get("title")),
            description=_optional_str(site.get("description")),
            url=_optional_str(site.get("url")),
            logo=_optional_str(site.get("logo")),
            favicon=_optional_str(site.get("favicon")),
        ),
    )


def _parse_entries(raw: list[typ.Any], *, location: str) -> list[TocEntry]:
    """Convert a raw YAML list into typed TOC entries, preserving order."""
    entries: list[TocEntry] = []
    for index, payload in enumerate(raw):
        entry = _parse_entry(payload, location=f"{location}[{index}]")
        if entry is not None:
            entries.append(entry)
    return entries


def _parse_entry(payload: typ.Any, *, location: str) -> TocEntry | None:
    """Build one TOC entry; returns None for external ``url`` entries."""
    if not isinstance(payload, dict):
        msg = f"TOC entry at {location} must be a mapping."
        raise TocConfigError(msg)

    file = _optional_str(payload.get("file"))
    pattern = _optional_str(payload.get("pattern"))
    title = _optional_str(payload.get("title"))
    slug = _optional_str(payload.get("slug"))
    has_children = "children" in payload
    children_raw = payload.get("children") or []
    if not isinstance(children_raw, list):
        msg = f"'children' at {location} must be a list."
        raise TocConfigError(msg)

    if pattern and (file or has_children):
        msg = f"TOC entry at {location} combines 'pattern' with 'file' or 'children'."
        raise TocConfigError(msg)

    children = tuple(_parse_entries(children_raw, location=f"{location}.children"))
    if file:
        return FileEntry(file=file, title=title, slug=slug, children=children)
    if pattern:
        return PatternEntry(pattern=pattern, title=title, slug=slug)
    if has_children:
        return SectionEntry(title=title, slug=slug, children=children)
    if _optional_str(payload.get("url")):
        logger.debug("Skipping external url entry at %s", location)
        return None
    msg = f"TOC entry at {location} needs one of 'file', 'pattern', or 'children'."
    raise TocConfigError(msg)


__all__ = ["load_project_config"]
