"""ApiCatalog logging utilities.

One package logger with a timestamp + abbreviated level prefix; handlers are
installed by `configure_logging` at the CLI boundary.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s [%(levelabbr)s] %(message)s"
LOG_DATEFMT: Final[str] = "%m-%d %H:%M:%S"

_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("ApiCatalog")


def _action_file_handler(action: str, log_dir: str) -> logging.Handler:
    # log/<action>/<action>_<mmddHHMMSS>.log
    action_dir = Path(log_dir or "log") / action
    action_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%m%d%H%M%S")
    handler = logging.FileHandler(action_dir / f"{action}_{stamp}.log", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    return handler


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> None:
    """Install console (and optionally file) handlers on the package logger.

    Lines look like `mm-dd HH:MM:SS [INFO] message`. Calling it again replaces
    the previous handlers.

    Args:
        level: Console logging level (e.g., INFO, DEBUG).
        action: CLI command name used to build the log file path.
        log_to_file: Whether to mirror logs (at DEBUG) to a file.
        log_dir: Base directory for log files.
    """
    console_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    formatter = _AbbrevLevelFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler()
    console.setLevel(console_level)
    handlers: list[logging.Handler] = [console]
    with_file = bool(log_to_file and action)
    if with_file:
        handlers.append(_action_file_handler(action, log_dir))

    log.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        log.addHandler(handler)
    log.setLevel(min(logging.DEBUG, console_level) if with_file else console_level)
    log.propagate = False
