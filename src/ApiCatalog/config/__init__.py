from __future__ import annotations

"""Public configuration API for ApiCatalog."""

from ApiCatalog.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from ApiCatalog.config.catalog import CatalogConfig
from ApiCatalog.config.output import OutputConfig
from ApiCatalog.config.runtime import RuntimeConfig
from ApiCatalog.config.search import SearchConfig, parse_sort_spec

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "RuntimeConfig",
    "CatalogConfig",
    "SearchConfig",
    "OutputConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
    "parse_sort_spec",
]
