from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from ApiCatalog.config.catalog import CatalogConfig, check_catalog, load_catalog
from ApiCatalog.config.output import OutputConfig, check_output, load_output
from ApiCatalog.config.runtime import RuntimeConfig, check_runtime, load_runtime
from ApiCatalog.config.search import SearchConfig, check_search, load_search

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    catalog: CatalogConfig
    search: SearchConfig
    output: OutputConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse normalized mapping into AppConfig."""
    runtime = load_runtime(raw)
    catalog = load_catalog(raw)
    search = load_search(raw)
    output = load_output(raw)

    check_runtime(runtime)
    check_catalog(catalog)
    check_search(search)
    check_output(output)

    return AppConfig(runtime=runtime, catalog=catalog, search=search, output=output)


def load_config(path: Path) -> AppConfig:
    """Load YAML config file without default merge."""
    return parse_config_dict(parse_yaml(path.read_text(encoding="utf-8")))


def load_config_with_defaults(
    config_path: Path | None,
    default_path: Path = DEFAULT_CONFIG_PATH,
    *,
    defaults_text: str | None = None,
) -> AppConfig:
    """Load config by deep-merging an optional override onto the defaults.

    Args:
        config_path: Override file; None or the default path itself loads defaults only.
        default_path: Default config file.
        defaults_text: Default YAML text used instead of reading `default_path`.
    """
    base = parse_yaml(defaults_text if defaults_text is not None else default_path.read_text(encoding="utf-8"))
    if config_path is None or config_path == default_path:
        return parse_config_dict(base)
    override = parse_yaml(config_path.read_text(encoding="utf-8"))
    return parse_config_dict(merge_config_dicts(base, override))


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
