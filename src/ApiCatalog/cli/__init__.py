"""CLI package for ApiCatalog command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from ApiCatalog.cli.runner import CommandRunner
from ApiCatalog.cli.ui import cli


def main() -> None:
    """Run the ApiCatalog CLI.

    Entry point referenced by the console script in pyproject.toml.
    """
    cli()
