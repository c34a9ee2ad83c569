"""Command runner for coordinating CLI execution.

Manages logging configuration, component lifecycle, the event loop and error
handling for command execution.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from ApiCatalog.config import AppConfig
from ApiCatalog.core.session import SessionContext
from ApiCatalog.services import CatalogQueryService, create_catalog_service
from ApiCatalog.utils.log import configure_logging, log

T = TypeVar("T")


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(
        self,
        config: AppConfig,
        *,
        service_factory: Callable[[AppConfig], CatalogQueryService] | None = None,
    ) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
            service_factory: Builds the query service; replaced in tests.
        """
        self.config = config
        self._service_factory = service_factory or create_catalog_service

    def create_session(self) -> SessionContext:
        """Build the session for this run.

        The session counts as authenticated when no token is configured or the
        configured token variable is set.
        """
        catalog = self.config.catalog
        authenticated = catalog.token_env is None or catalog.resolve_token() is not None
        if not authenticated:
            log.warning("Environment variable %s is not set; catalog requests are disabled", catalog.token_env)
        return SessionContext(is_authenticated=authenticated, sort_by=self.config.search.sort)

    def run(self, action: str, command: Callable[[CatalogQueryService], Awaitable[T]]) -> T:
        """Execute one async command with a fresh service.

        Args:
            action: The CLI command name (e.g., 'list').
            command: Coroutine factory receiving the query service.

        Returns:
            Whatever the command returns.

        Raises:
            click.Abort: When the command fails.
        """
        self.configure_logging(action)
        try:
            service = self._service_factory(self.config)
            try:
                return asyncio.run(command(service))
            finally:
                service.close()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action, e)
            raise click.Abort from e

    def configure_logging(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
