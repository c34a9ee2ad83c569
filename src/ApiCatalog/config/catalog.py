"""Catalog connection configuration."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Any, Mapping

from ApiCatalog.catalog.query import DEFAULT_PAGE_SIZE
from ApiCatalog.config.common import (
    expect_float,
    expect_int,
    expect_optional_str,
    expect_str,
    get_required_value,
    get_section,
)

_RE_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    """Store validated catalog endpoint and request settings.

    Attributes:
        base_url: Data API service URL.
        workspace: Workspace path prefix.
        page_size: `$top` for every list request.
        timeout: Request timeout in seconds.
        max_attempts: HTTP attempts per request.
        token_env: Environment variable holding a bearer token, if any.
    """

    base_url: str
    workspace: str
    page_size: int
    timeout: float
    max_attempts: int
    token_env: str | None

    def resolve_token(self) -> str | None:
        """Read the bearer token from the environment; empty means none."""
        if not self.token_env:
            return None
        return os.environ.get(self.token_env) or None


def load_catalog(raw: Mapping[str, Any]) -> CatalogConfig:
    """Load the `catalog` section.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "catalog", required=True)
    return CatalogConfig(
        base_url=expect_str(get_required_value(section, "base_url", "catalog.base_url"), "catalog.base_url").strip(),
        workspace=expect_str(section.get("workspace", "default"), "catalog.workspace").strip(),
        page_size=expect_int(section.get("page_size", DEFAULT_PAGE_SIZE), "catalog.page_size"),
        timeout=expect_float(section.get("timeout", 30), "catalog.timeout"),
        max_attempts=expect_int(section.get("max_attempts", 4), "catalog.max_attempts"),
        token_env=expect_optional_str(section.get("token_env"), "catalog.token_env"),
    )


def check_catalog(config: CatalogConfig) -> None:
    if not _RE_HTTP_URL.match(config.base_url):
        raise ValueError("catalog.base_url must be an http(s) URL")
    if not config.workspace:
        raise ValueError("catalog.workspace must not be empty")
    if config.page_size <= 0:
        raise ValueError("catalog.page_size must be positive")
    if config.timeout <= 0:
        raise ValueError("catalog.timeout must be positive")
    if config.max_attempts <= 0:
        raise ValueError("catalog.max_attempts must be positive")
