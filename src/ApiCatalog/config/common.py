"""Typed accessors for raw YAML config mappings.

Every helper receives the dotted key (`catalog.page_size`) so error messages
point at the offending setting.
"""

from __future__ import annotations

from typing import Any, Collection, Mapping


def get_section(raw: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """Return a top-level section; optional missing sections read as empty.

    Raises:
        ValueError: If a required section is missing.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(key)
    if section is None:
        if not required:
            return {}
        raise ValueError(f"Missing required config: {key}")
    if isinstance(section, Mapping):
        return section
    raise TypeError(f"{key} must be an object")


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    try:
        return section[field]
    except KeyError:
        raise ValueError(f"Missing required config: {config_key}") from None


def expect_str(value: Any, config_key: str) -> str:
    if isinstance(value, str):
        return value
    raise TypeError(f"{config_key} must be a string")


def expect_optional_str(value: Any, config_key: str) -> str | None:
    return None if value is None else expect_str(value, config_key)


def expect_bool(value: Any, config_key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise TypeError(f"{config_key} must be a boolean")


def expect_int(value: Any, config_key: str) -> int:
    # bool is an int subclass; `page_size: true` is a typo, not 1.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise TypeError(f"{config_key} must be an integer")


def expect_float(value: Any, config_key: str) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise TypeError(f"{config_key} must be a number")


def expect_choice(value: Any, config_key: str, choices: Collection[str]) -> str:
    """Validate a case-insensitive enumeration and return the lowercase value."""
    normalized = expect_str(value, config_key).strip().lower()
    if normalized not in choices:
        raise ValueError(f"{config_key} must be one of {sorted(choices)}")
    return normalized
