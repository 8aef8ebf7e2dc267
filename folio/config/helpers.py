"""Utility helpers shared by the folio configuration loader."""

from __future__ import annotations

import typing as typ

from folio.errors import ConfigError

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _bool(payload: typ.Mapping[str, typ.Any], key: str, default: bool) -> bool:
    """Read a boolean flag, accepting the usual YAML and CLI spellings."""
    value = payload.get(key, default)
    match value:
        case bool():
            return value
        case str() as text if text.strip().lower() in _TRUE_STRINGS:
            return True
        case str() as text if text.strip().lower() in _FALSE_STRINGS:
            return False
        case _:
            msg = f"'{key}' must be a boolean, got {value!r}."
            raise ConfigError(msg)


def _int(payload: typ.Mapping[str, typ.Any], key: str, default: int) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool):
        msg = f"'{key}' must be an integer, got {value!r}."
        raise ConfigError(msg)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        msg = f"'{key}' must be an integer, got {value!r}."
        raise ConfigError(msg) from exc


def _mapping(raw: typ.Mapping[str, typ.Any], key: str) -> typ.Mapping[str, typ.Any]:
    """Return the mapping stored under ``key``; an absent section is empty."""
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        msg = f"Section '{key}' must be a mapping."
        raise ConfigError(msg)
    return value


__all__ = ["_bool", "_int", "_mapping", "_optional_str"]
