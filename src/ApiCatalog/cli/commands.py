"""Command implementations for the ApiCatalog CLI.

Encapsulates what each command does, separated from CLI parameter handling
and output formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from ApiCatalog.catalog.urls import extract_param_names, has_unresolved_params, resolve_operation_url
from ApiCatalog.core.models import ApiDefinitionId, ApiDeployment, ApiMetadata, DeploymentServer
from ApiCatalog.core.query import SearchIntent
from ApiCatalog.core.session import SessionContext
from ApiCatalog.renderers import OutputWriter
from ApiCatalog.renderers.console import log_block, render_definitions, render_deployments, render_versions
from ApiCatalog.services.catalog import CatalogQueryService
from ApiCatalog.services.collection import CollectionState, PaginatedCollectionController
from ApiCatalog.utils.log import log


@dataclass(slots=True)
class ListApisCommand:
    """Drive the collection controller for one intent and write the listing.

    Loads the first page, then follows continuation links until `max_pages`
    pages are fetched or the listing ends.
    """

    service: CatalogQueryService
    session: SessionContext
    output_writer: OutputWriter
    max_pages: int = 1
    autocomplete: bool = False

    async def execute(self, intent: SearchIntent) -> list[ApiMetadata]:
        controller = PaginatedCollectionController(self.service, self.session, autocomplete=self.autocomplete)
        try:
            await controller.set_intent(intent)
            while (
                controller.state is CollectionState.READY
                and controller.has_more
                and len(controller.pages) < self.max_pages
            ):
                await controller.load_more()

            if controller.state is CollectionState.ERROR:
                raise RuntimeError(f"Listing failed: {controller.error}") from controller.error
            if controller.state is CollectionState.IDLE:
                raise RuntimeError("Listing was not fetched: session is not authenticated")

            items = controller.items
            log.info(
                "Listed %d APIs from %d page(s)%s",
                len(items),
                len(controller.pages),
                "; more available" if controller.has_more else "",
            )
            self.output_writer.write_listing(items, intent)
            return items
        finally:
            controller.close()


@dataclass(slots=True)
class ShowVersionsCommand:
    service: CatalogQueryService

    async def execute(self, api_name: str) -> None:
        log_block(render_versions(await self.service.get_versions(api_name)))


@dataclass(slots=True)
class ShowDeploymentsCommand:
    service: CatalogQueryService

    async def execute(self, api_name: str) -> None:
        log_block(render_deployments(await self.service.get_deployments(api_name)))


@dataclass(slots=True)
class ShowDefinitionsCommand:
    service: CatalogQueryService

    async def execute(self, api_name: str, version_name: str) -> None:
        log_block(render_definitions(await self.service.get_definitions(api_name, version_name)))


@dataclass(slots=True)
class ShowSpecificationCommand:
    service: CatalogQueryService

    async def execute(self, definition_id: ApiDefinitionId) -> str:
        return await self.service.get_specification(definition_id)


@dataclass(slots=True)
class OperationUrlCommand:
    """Resolve an operation URL template without any network access."""

    host: Optional[str] = None
    version_name: Optional[str] = None
    params: Mapping[str, str] = field(default_factory=dict)

    def execute(self, url_template: str) -> str:
        deployment = None
        if self.host:
            deployment = ApiDeployment(name="cli", server=DeploymentServer(runtime_uri=(self.host,)))
        url = resolve_operation_url(url_template, deployment, self.version_name, self.params)
        if has_unresolved_params(url):
            missing = [name for name in extract_param_names(url_template) if not self.params.get(name)]
            log.warning("Unresolved URL parameters: %s", ", ".join(dict.fromkeys(missing)))
        return url
