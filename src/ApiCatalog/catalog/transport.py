"""Async adapter over the blocking catalog HTTP client.

`requests` is synchronous; each call is offloaded with `asyncio.to_thread` so
a round trip never blocks the event loop the controller runs on.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

from ApiCatalog.catalog.client import CatalogApiClient


class AsyncCatalogTransport:
    """`CatalogTransport` implementation backed by `CatalogApiClient`.

    Exceptions (`TransportError`) propagate unchanged from the wrapped client.
    """

    def __init__(self, client: CatalogApiClient) -> None:
        self._client = client

    async def get(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        skip_workspace_prefix: bool = False,
    ) -> Any:
        return await asyncio.to_thread(
            self._client.get_json,
            path,
            params=params,
            skip_workspace_prefix=skip_workspace_prefix,
        )

    async def get_by_url(self, url: str) -> Any:
        return await asyncio.to_thread(self._client.get_json_by_url, url)

    async def post(
        self,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        return await asyncio.to_thread(self._client.post_json, path, params=params, body=body)

    async def fetch_text(self, url: str) -> str:
        return await asyncio.to_thread(self._client.get_text, url)

    def close(self) -> None:
        self._client.close()
