"""Catalog service layer for ApiCatalog.

Provides the query service, the paginated collection controller and the
factory wiring them to the configured HTTP transport.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ApiCatalog.services.catalog import CatalogQueryService, CatalogTransport
from ApiCatalog.services.collection import CollectionState, PaginatedCollectionController
from ApiCatalog.services.sorting import sort_items
from ApiCatalog.services.spec_cache import SpecificationCache

if TYPE_CHECKING:
    from ApiCatalog.config import AppConfig


def create_catalog_service(config: AppConfig) -> CatalogQueryService:
    """Create a query service talking to the configured catalog.

    Args:
        config: Application configuration containing the catalog settings.

    Returns:
        Configured CatalogQueryService instance.
    """
    from ApiCatalog.catalog.client import CatalogApiClient
    from ApiCatalog.catalog.transport import AsyncCatalogTransport

    client = CatalogApiClient(
        base_url=config.catalog.base_url,
        workspace=config.catalog.workspace,
        access_token=config.catalog.resolve_token(),
        timeout=config.catalog.timeout,
        max_attempts=config.catalog.max_attempts,
    )
    return CatalogQueryService(
        transport=AsyncCatalogTransport(client),
        page_size=config.catalog.page_size,
    )


__all__ = [
    "CatalogQueryService",
    "CatalogTransport",
    "CollectionState",
    "PaginatedCollectionController",
    "SpecificationCache",
    "create_catalog_service",
    "sort_items",
]
