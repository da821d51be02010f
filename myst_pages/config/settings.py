"""Persisted publish-target settings for the ``myst-pages`` command.

Settings live in ``~/.config/myst-pages/config.toml`` (or the path named by
``MYST_PAGES_CONFIG``) under a ``[target]`` table. CLI options override
environment variables, which override the stored values.
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ
from pathlib import Path

import tomlkit

DEFAULT_SETTINGS_PATH = Path(
    os.getenv(
        "MYST_PAGES_CONFIG",
        Path.home() / ".config" / "myst-pages" / "config.toml",
    )
)
DEFAULT_AUTH_TYPE = "spfx"
DEFAULT_DOCTOR_PATH = "doctor"

_SETTINGS_FILE_MODE = 0o600
_ENV_PREFIX = "MYST_PAGES_"


class SettingsError(ValueError):
    """Raised when required publish settings are missing or unreadable."""


@dc.dataclass(slots=True)
class PublishSettings:
    """Where and how rendered pages are published."""

    site_url: str | None = None
    list_id: str | None = None
    folder_path: str | None = None
    auth_type: str = DEFAULT_AUTH_TYPE
    doctor_path: str = DEFAULT_DOCTOR_PATH

    def require_site_url(self) -> str:
        """Return the site URL or raise when none was configured."""
        if not self.site_url:
            msg = (
                "A site URL is required. Provide --site-url, set "
                f"{_ENV_PREFIX}SITE_URL, or store one with 'myst-pages config'."
            )
            raise SettingsError(msg)
        return self.site_url

    def to_mapping(self) -> dict[str, str]:
        """Return the non-empty settings as a plain mapping."""
        return {
            key: value
            for key, value in dc.asdict(self).items()
            if value is not None and value != ""
        }


def load_settings(path: Path = DEFAULT_SETTINGS_PATH) -> PublishSettings:
    """Read stored settings; a missing file yields defaults."""
    if not path.exists():
        return PublishSettings()
    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    except tomlkit.exceptions.ParseError as exc:
        msg = f"Unable to parse settings TOML at {path}"
        raise SettingsError(msg) from exc

    table = doc.get("target")
    data: dict[str, typ.Any] = {k: v for k, v in table.items()} if table else {}
    return PublishSettings(
        site_url=_str_or_none(data.get("site_url")),
        list_id=_str_or_none(data.get("list_id")),
        folder_path=_str_or_none(data.get("folder_path")),
        auth_type=_str_or_none(data.get("auth_type")) or DEFAULT_AUTH_TYPE,
        doctor_path=_str_or_none(data.get("doctor_path")) or DEFAULT_DOCTOR_PATH,
    )


def save_settings(settings: PublishSettings, *, path: Path = DEFAULT_SETTINGS_PATH) -> None:
    """Persist settings into the TOML file, preserving unrelated content."""
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        doc = tomlkit.document()
    except tomlkit.exceptions.ParseError as exc:
        msg = f"Unable to parse settings TOML at {path}"
        raise SettingsError(msg) from exc

    table = doc.get("target")
    if not isinstance(table, tomlkit.items.Table):
        table = tomlkit.table()

    for field in dc.fields(settings):
        value = getattr(settings, field.name)
        if value is None:
            table.pop(field.name, None)
        else:
            table[field.name] = value

    doc["target"] = table
    path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    os.chmod(path, _SETTINGS_FILE_MODE)


def resolve_settings(
    *,
    path: Path = DEFAULT_SETTINGS_PATH,
    site_url: str | None = None,
    list_id: str | None = None,
    folder_path: str | None = None,
    doctor_path: str | None = None,
) -> PublishSettings:
    """Merge CLI values, environment variables, and stored settings."""
    stored = load_settings(path)
    return PublishSettings(
        site_url=site_url or os.getenv(f"{_ENV_PREFIX}SITE_URL") or stored.site_url,
        list_id=list_id or os.getenv(f"{_ENV_PREFIX}LIST_ID") or stored.list_id,
        folder_path=folder_path
        or os.getenv(f"{_ENV_PREFIX}FOLDER_PATH")
        or stored.folder_path,
        auth_type=os.getenv(f"{_ENV_PREFIX}AUTH_TYPE") or stored.auth_type,
        doctor_path=doctor_path
        or os.getenv(f"{_ENV_PREFIX}DOCTOR_PATH")
        or stored.doctor_path,
    )


def _str_or_none(value: object | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "PublishSettings",
    "SettingsError",
    "load_settings",
    "resolve_settings",
    "save_settings",
]
