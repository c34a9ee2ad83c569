"""Output configuration for CLI rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ApiCatalog.config.common import expect_choice, expect_str, get_section

_ALLOWED_FORMATS = {"console", "json"}


@dataclass(frozen=True, slots=True)
class OutputConfig:
    """Output configuration.

    Attributes:
        format: `console` logs a text listing, `json` writes a file.
        base_dir: Directory for JSON files.
    """

    format: str
    base_dir: str


def load_output(raw: Mapping[str, Any]) -> OutputConfig:
    section = get_section(raw, "output", required=False)
    return OutputConfig(
        format=expect_choice(section.get("format", "console"), "output.format", _ALLOWED_FORMATS),
        base_dir=expect_str(section.get("base_dir", "output"), "output.base_dir"),
    )


def check_output(config: OutputConfig) -> None:
    if config.format == "json" and not config.base_dir.strip():
        raise ValueError("output.base_dir must not be empty when output.format=json")
