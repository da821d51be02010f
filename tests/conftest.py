"""Shared fixtures building small MyST projects on disk."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from myst_pages.structure import PageStructureManager

SAMPLE_CONFIG = """
version: 1
project:
  title: Sample Docs
  toc:
    - file: index.md
    - title: User Guide
      children:
        - file: guide/intro.md
        - file: guide/install.md
          title: Installation
        - file: guide/usage.md
    - file: reference/api.md
      children:
        - pattern: reference/api/*.md
"""

SAMPLE_FILES = {
    "index.md": "---\ntitle: Welcome\n---\n# Welcome\n\nStart with {ref}`intro`.\n",
    "guide/intro.md": "# Introduction\n\nSee {doc}`guide/install.md` and {ref}`#usage`.\n",
    "guide/install.md": "# Install\n\nRead {ref}`https://example.com/setup`.\n",
    "guide/usage.md": "# Usage\n\nBack to {ref}`Installation` or {ref}`missing-page`.\n",
    "reference/api.md": "# API\n\nModules live below.\n",
    "reference/api/beta.md": "# Beta\n",
    "reference/api/alpha.md": "# Alpha\n",
}


def write_project(
    root: Path,
    config: str = SAMPLE_CONFIG,
    files: typ.Mapping[str, str] | None = None,
) -> Path:
    """Write ``config`` as ``myst.yml`` plus content files; return the config path."""
    for relative, content in (SAMPLE_FILES if files is None else files).items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    config_path = root / "myst.yml"
    config_path.write_text(config.lstrip(), encoding="utf-8")
    return config_path


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Return the config path of the sample project written under ``tmp_path``."""
    return write_project(tmp_path)


@pytest.fixture
def built_manager(sample_project: Path) -> PageStructureManager:
    """Return a manager whose structure was built from the sample project."""
    manager = PageStructureManager()
    manager.build_structure(sample_project, sample_project.parent)
    return manager


@pytest.fixture
def project_factory(tmp_path: Path) -> typ.Callable[..., Path]:
    """Return a helper writing a custom project under ``tmp_path``."""

    def _factory(config: str, files: typ.Mapping[str, str] | None = None) -> Path:
        return write_project(tmp_path, config, files or {})

    return _factory
