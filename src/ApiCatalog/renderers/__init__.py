"""Output renderers for command results.

The module exports the OutputWriter base for new output formats and a factory
that instantiates the writer selected by configuration.
"""

from __future__ import annotations

from ApiCatalog.config import AppConfig
from ApiCatalog.renderers.base import OutputWriter
from ApiCatalog.renderers.console import ConsoleOutputWriter, render_text
from ApiCatalog.renderers.json import JsonFileWriter, render_json


def create_output_writer(config: AppConfig) -> OutputWriter:
    """Create the output writer for the configured format."""
    if config.output.format == "json":
        return JsonFileWriter(config.output.base_dir)
    return ConsoleOutputWriter()


__all__ = [
    "OutputWriter",
    "ConsoleOutputWriter",
    "JsonFileWriter",
    "render_json",
    "render_text",
    "create_output_writer",
]
