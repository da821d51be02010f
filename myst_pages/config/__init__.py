"""Configuration loading for MyST projects and publish targets."""

from __future__ import annotations

from .loader import load_project_config
from .models import (
    FileEntry,
    PatternEntry,
    ProjectConfig,
    SectionEntry,
    SiteMetadata,
    TocConfigError,
    TocEntry,
)
from .settings import (
    DEFAULT_SETTINGS_PATH,
    PublishSettings,
    SettingsError,
    load_settings,
    resolve_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "FileEntry",
    "PatternEntry",
    "ProjectConfig",
    "PublishSettings",
    "SectionEntry",
    "SettingsError",
    "SiteMetadata",
    "TocConfigError",
    "TocEntry",
    "load_project_config",
    "load_settings",
    "resolve_settings",
    "save_settings",
]
