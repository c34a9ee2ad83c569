"""`log` section: console level and the optional per-command log file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ApiCatalog.config.common import expect_bool, expect_choice, expect_str, get_section

_LEVELS = {"debug", "info", "warning", "error", "critical"}


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Logging settings for one CLI run.

    Attributes:
        level: Console level name, upper case.
        to_file: Mirror every record at DEBUG into `<dir>/<command>/`.
        dir: Base directory for log files.
    """

    level: str
    to_file: bool
    dir: str


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Load the `log` section.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If the section is missing or the level is unknown.
    """
    section = get_section(raw, "log", required=True)
    level = expect_choice(section.get("level", "INFO"), "log.level", _LEVELS)
    return RuntimeConfig(
        level=level.upper(),
        to_file=expect_bool(section.get("to_file", False), "log.to_file"),
        dir=expect_str(section.get("dir", "log"), "log.dir").strip(),
    )


def check_runtime(config: RuntimeConfig) -> None:
    # A file is only written when to_file is on, so an empty dir is fine otherwise.
    if config.to_file and not config.dir:
        raise ValueError("log.dir must not be empty when log.to_file=true")
