"""Catalog query service.

Stateless request layer over the catalog data API: every operation is one
round trip through the injected transport, except `get_specification`, which
is memoized per definition for the session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol
from urllib.parse import quote

from ApiCatalog.catalog.parser import (
    parse_api,
    parse_auth_scheme,
    parse_auth_scheme_metadata,
    parse_definition,
    parse_deployment,
    parse_environment,
    parse_list,
    parse_metadata_schema,
    parse_page,
    parse_server,
    parse_version,
)
from ApiCatalog.catalog.query import DEFAULT_PAGE_SIZE, build_query
from ApiCatalog.core.models import (
    ApiAuthScheme,
    ApiAuthSchemeMetadata,
    ApiDefinition,
    ApiDefinitionId,
    ApiDeployment,
    ApiEnvironment,
    ApiMetadata,
    ApiVersion,
    MetadataSchema,
    Page,
    Server,
)
from ApiCatalog.core.query import SearchIntent
from ApiCatalog.services.spec_cache import SpecificationCache
from ApiCatalog.utils.log import log


class CatalogTransport(Protocol):
    """Async HTTP collaborator returning decoded JSON bodies."""

    async def get(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        skip_workspace_prefix: bool = False,
    ) -> Any:
        """GET a workspace-relative path."""
        raise NotImplementedError

    async def get_by_url(self, url: str) -> Any:
        """GET an opaque absolute URL as-is."""
        raise NotImplementedError

    async def post(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        """POST to a workspace-relative path."""
        raise NotImplementedError

    async def fetch_text(self, url: str) -> str:
        """Download a text document."""
        raise NotImplementedError


def _segment(value: str) -> str:
    return quote(value, safe="")


def _version_path(definition_id: ApiDefinitionId) -> str:
    return f"/apis/{_segment(definition_id.api_name)}/versions/{_segment(definition_id.version_name)}"


def _definition_path(definition_id: ApiDefinitionId) -> str:
    return f"{_version_path(definition_id)}/definitions/{_segment(definition_id.definition_name)}"


@dataclass(slots=True)
class CatalogQueryService:
    """Application service issuing catalog requests.

    Attributes:
        transport: Async HTTP collaborator.
        page_size: `$top` bound applied to every list request.
        spec_cache: Session cache for specification documents.
    """

    transport: CatalogTransport
    page_size: int = DEFAULT_PAGE_SIZE
    spec_cache: SpecificationCache[ApiDefinitionId] = field(default_factory=SpecificationCache)

    async def search(self, intent: SearchIntent) -> Page[ApiMetadata]:
        """Fetch the first page of APIs matching an intent.

        Semantic mode with empty text returns an empty last page without
        touching the network.

        Args:
            intent: Search text, filters and mode.

        Returns:
            First page of results.
        """
        if intent.is_semantic and not intent.text:
            log.debug("Semantic search without text; returning empty page")
            return Page()

        query = build_query(intent.text, intent.filters, intent.mode, page_size=self.page_size)
        log.debug("Catalog query: %s %s?%s", query.method, query.path, query.query_string)
        if query.is_semantic:
            payload = await self.transport.post(query.path, params=query.params, body=query.body)
        else:
            payload = await self.transport.get(query.path, params=query.params)

        page = parse_page(payload, parse_api)
        log.info("Fetched first page: %d APIs (more=%s)", len(page.items), not page.is_last)
        return page

    async def search_next(self, next_link: str) -> Page[ApiMetadata]:
        """Dereference a continuation link.

        The link already encodes the original search and filters; it is
        fetched verbatim and never rebuilt from the intent.
        """
        payload = await self.transport.get_by_url(next_link)
        page = parse_page(payload, parse_api)
        log.info("Fetched next page: %d APIs (more=%s)", len(page.items), not page.is_last)
        return page

    async def get_api(self, name: str) -> ApiMetadata:
        payload = await self.transport.get(f"/apis/{_segment(name)}")
        return parse_api(payload if isinstance(payload, Mapping) else {})

    async def get_server(self, name: str) -> Server | None:
        payload = await self.transport.get(f"/v0/servers/{_segment(name)}")
        return parse_server(payload)

    async def get_versions(self, api_name: str) -> list[ApiVersion]:
        payload = await self.transport.get(f"/apis/{_segment(api_name)}/versions", params=self._top())
        return list(parse_page(payload, parse_version).items)

    async def get_deployments(self, api_name: str) -> list[ApiDeployment]:
        payload = await self.transport.get(f"/apis/{_segment(api_name)}/deployments", params=self._top())
        return list(parse_page(payload, parse_deployment).items)

    async def get_definitions(self, api_name: str, version_name: str) -> list[ApiDefinition]:
        path = f"/apis/{_segment(api_name)}/versions/{_segment(version_name)}/definitions"
        payload = await self.transport.get(path, params=self._top())
        return list(parse_page(payload, parse_definition).items)

    async def get_definition(self, definition_id: ApiDefinitionId) -> ApiDefinition:
        payload = await self.transport.get(_definition_path(definition_id))
        return parse_definition(payload if isinstance(payload, Mapping) else {})

    async def get_specification_link(self, definition_id: ApiDefinitionId) -> str | None:
        """Trigger a server-side export and return the download link.

        Each call may mint a new link; links are not stable across calls.
        """
        payload = await self.transport.post(f"{_definition_path(definition_id)}:exportSpecification")
        if not isinstance(payload, Mapping):
            return None
        value = payload.get("value")
        return value if isinstance(value, str) and value else None

    async def get_specification(self, definition_id: ApiDefinitionId) -> str:
        """Return the specification document, fetched at most once per session.

        Raises:
            ValueError: If the export did not return a link.
        """
        return await self.spec_cache.get_or_fetch(definition_id, lambda: self._download_specification(definition_id))

    async def get_environment(self, environment_id: str) -> ApiEnvironment:
        payload = await self.transport.get(f"/environments/{_segment(environment_id)}")
        return parse_environment(payload if isinstance(payload, Mapping) else {})

    async def get_security_requirements(self, definition_id: ApiDefinitionId) -> list[ApiAuthSchemeMetadata]:
        payload = await self.transport.get(f"{_version_path(definition_id)}/securityRequirements", params=self._top())
        return list(parse_page(payload, parse_auth_scheme_metadata).items)

    async def get_security_credentials(self, definition_id: ApiDefinitionId, scheme_name: str) -> ApiAuthScheme:
        path = f"{_version_path(definition_id)}/securityRequirements/{_segment(scheme_name)}:getCredentials"
        payload = await self.transport.post(path)
        return parse_auth_scheme(payload if isinstance(payload, Mapping) else {})

    async def get_metadata_schemas(self) -> list[MetadataSchema]:
        """List metadata schemas; this endpoint lives outside the workspace prefix."""
        payload = await self.transport.get("/metadataSchemas", params=self._top(), skip_workspace_prefix=True)
        if isinstance(payload, list):
            return parse_list(payload, parse_metadata_schema)
        return list(parse_page(payload, parse_metadata_schema).items)

    def close(self) -> None:
        """Close the transport if it holds resources."""
        close_func = getattr(self.transport, "close", None)
        if callable(close_func):
            close_func()

    def _top(self) -> dict[str, str]:
        return {"$top": str(self.page_size)}

    async def _download_specification(self, definition_id: ApiDefinitionId) -> str:
        link = await self.get_specification_link(definition_id)
        if not link:
            raise ValueError(f"No specification link returned for {definition_id}")
        text = await self.transport.fetch_text(link)
        log.info(
            "Downloaded specification: api=%s version=%s definition=%s chars=%d",
            definition_id.api_name,
            definition_id.version_name,
            definition_id.definition_name,
            len(text),
        )
        return text
