"""Session cache for specification documents.

Published specifications are immutable, so an entry lives for the whole
session and is never evicted. Entries hold the fetch task itself: concurrent
requests for the same definition await one shared in-flight fetch.

The cache is injected into `CatalogQueryService`; a bounded policy (LRU, TTL)
can replace it by implementing the same `get_or_fetch` coroutine.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, Hashable, TypeVar

from ApiCatalog.utils.log import log

K = TypeVar("K", bound=Hashable)


class SpecificationCache(Generic[K]):
    """Unbounded, session-lifetime memo of async document fetches."""

    def __init__(self) -> None:
        self._entries: dict[K, asyncio.Task[str]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def get_or_fetch(self, key: K, fetch: Callable[[], Awaitable[str]]) -> str:
        """Return the cached document, starting at most one fetch per key.

        A failed fetch is dropped from the cache so a later call can retry;
        every caller waiting on that fetch receives the same exception.

        Args:
            key: Document identifier.
            fetch: Zero-argument coroutine factory performing the download.

        Returns:
            Document text.
        """
        task = self._entries.get(key)
        if task is None:
            log.debug("Specification cache miss: %s", key)
            task = asyncio.ensure_future(fetch())
            task.add_done_callback(lambda done: self._forget_failed(key, done))
            self._entries[key] = task
        # Shield so one cancelled caller does not cancel the shared fetch.
        return await asyncio.shield(task)

    def clear(self) -> None:
        self._entries.clear()

    def _forget_failed(self, key: K, task: asyncio.Task[str]) -> None:
        if task.cancelled() or task.exception() is not None:
            if self._entries.get(key) is task:
                del self._entries[key]
