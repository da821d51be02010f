"""Tests for loading, saving, and layering publish settings."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from myst_pages.config import (
    PublishSettings,
    SettingsError,
    load_settings,
    resolve_settings,
    save_settings,
)


def test_missing_settings_file_yields_defaults(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / "config.toml")
    assert settings == PublishSettings()
    assert settings.auth_type == "spfx"
    assert settings.doctor_path == "doctor"


def test_settings_round_trip_preserves_other_tables(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.toml"
    path.parent.mkdir()
    path.write_text('[other]\nkeep = "me"\n', encoding="utf-8")

    save_settings(
        PublishSettings(site_url="https://contoso.example/sites/docs", list_id="abc"),
        path=path,
    )
    loaded = load_settings(path)

    assert loaded.site_url == "https://contoso.example/sites/docs"
    assert loaded.list_id == "abc"
    assert loaded.folder_path is None
    assert 'keep = "me"' in path.read_text(encoding="utf-8")
    assert os.stat(path).st_mode & 0o777 == 0o600


def test_unparseable_settings_raise(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[target\nsite_url = ", encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(path)


def test_resolution_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "config.toml"
    save_settings(
        PublishSettings(site_url="stored", list_id="stored", folder_path="stored"),
        path=path,
    )
    monkeypatch.delenv("MYST_PAGES_SITE_URL", raising=False)
    monkeypatch.setenv("MYST_PAGES_LIST_ID", "env")
    monkeypatch.setenv("MYST_PAGES_FOLDER_PATH", "env")

    settings = resolve_settings(path=path, folder_path="cli")

    assert settings.site_url == "stored"
    assert settings.list_id == "env"
    assert settings.folder_path == "cli"


def test_require_site_url() -> None:
    with pytest.raises(SettingsError, match="site URL"):
        PublishSettings().require_site_url()
    assert PublishSettings(site_url="https://x").require_site_url() == "https://x"
