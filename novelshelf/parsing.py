"""Shared parsing helpers for config values and API payload fields."""

from __future__ import annotations

from typing import Any, Mapping


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_optional_int(value: object) -> int | None:
    """Parse an integer-like payload value, returning `None` when absent or invalid."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    normalized = normalize_optional_string(value)
    if normalized is None:
        return None
    try:
        return int(normalized)
    except ValueError:
        return None


def rendered_field(payload: Mapping[str, Any], key: str) -> str:
    """Read a WordPress-style `{"rendered": ...}` field or a plain string field."""

    value = payload.get(key)
    if isinstance(value, Mapping):
        value = value.get("rendered")
    if value is None:
        return ""
    return str(value)
