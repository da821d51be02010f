"""Utility helpers shared by the MyST configuration loader."""

from __future__ import annotations

import datetime as dt
import typing as typ


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_list(value: object | None) -> list[str]:
    """Normalize a scalar or list payload into a list of non-empty strings."""
    if isinstance(value, str):
        text = value.strip()
        return [text] if text else []
    if isinstance(value, list):
        normalized: list[str] = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("name")
            text = _optional_str(item)
            if text:
                normalized.append(text)
        return normalized
    return []


def _as_mapping(value: object | None) -> dict[str, typ.Any]:
    """Return ``value`` as a plain dict, or an empty dict for non-mappings."""
    if isinstance(value, dict):
        return dict(value)
    return {}


def _parse_timestamp(value: dt.datetime | dt.date | str | None) -> dt.datetime | None:
    """Return a timezone-aware UTC datetime parsed from ``value``, or None."""
    match value:
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime(value.year, value.month, value.day)
        case str() as text:
            sanitized = text.strip()
            if not sanitized:
                return None
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(sanitized)
            except ValueError:
                return None
        case _:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


__all__ = [
    "_as_mapping",
    "_optional_str",
    "_parse_timestamp",
    "_string_list",
]
