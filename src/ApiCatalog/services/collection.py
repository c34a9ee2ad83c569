"""Paginated collection controller.

Owns the pages fetched for the active `SearchIntent` and exposes them as one
flattened, sorted list with load-more semantics.

State machine per intent:

    IDLE -> LOADING -> READY -> LOADING_MORE -> READY ...
    any fetch failure -> ERROR

Pages are only ever appended. Changing the intent bumps a generation counter
and empties the page list; a response that arrives for an older generation is
discarded instead of appended.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Optional, Protocol

from ApiCatalog.core.models import ApiMetadata, Page
from ApiCatalog.core.query import SearchIntent
from ApiCatalog.core.session import SessionContext
from ApiCatalog.services.sorting import sort_items
from ApiCatalog.utils.log import log


class CollectionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    LOADING_MORE = "loading_more"
    ERROR = "error"


class ApiPageSource(Protocol):
    """The subset of `CatalogQueryService` the controller depends on."""

    async def search(self, intent: SearchIntent) -> Page[ApiMetadata]:
        raise NotImplementedError

    async def search_next(self, next_link: str) -> Page[ApiMetadata]:
        raise NotImplementedError


class PaginatedCollectionController:
    """List-with-load-more view over the catalog.

    Fetches are gated on `session.is_authenticated`: an intent set while the
    session is unauthenticated stays IDLE and is fetched as soon as the
    session authenticates.
    """

    def __init__(self, source: ApiPageSource, session: SessionContext, *, autocomplete: bool = False) -> None:
        """Initialize the controller.

        Args:
            source: Page source, normally `CatalogQueryService`.
            session: Session context providing the auth gate and sort selection.
            autocomplete: Never fetch for empty text or semantic mode.
        """
        self._source = source
        self._session = session
        self._autocomplete = autocomplete
        self._intent: Optional[SearchIntent] = None
        self._pages: list[Page[ApiMetadata]] = []
        self._generation = 0
        self._state = CollectionState.IDLE
        self._error: Optional[BaseException] = None
        self._pending: Optional[asyncio.Task[None]] = None
        self._unsubscribe = session.subscribe(self._on_session_change)

    @property
    def intent(self) -> Optional[SearchIntent]:
        return self._intent

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def pages(self) -> tuple[Page[ApiMetadata], ...]:
        return tuple(self._pages)

    @property
    def is_loading(self) -> bool:
        return self._state is CollectionState.LOADING

    @property
    def is_loading_more(self) -> bool:
        return self._state is CollectionState.LOADING_MORE

    @property
    def has_more(self) -> bool:
        return bool(self._pages) and not self._pages[-1].is_last

    @property
    def is_empty(self) -> bool:
        return self._state is CollectionState.READY and not any(page.items for page in self._pages)

    @property
    def items(self) -> list[ApiMetadata]:
        """Fetched items in page order, then sorted by the session's sort selection."""
        flattened = [item for page in self._pages for item in page.items]
        return sort_items(flattened, self._session.sort_by)

    async def set_intent(self, intent: SearchIntent) -> None:
        """Replace the active intent and fetch its first page.

        Re-setting the current intent is a no-op unless the controller is idle
        or failed.
        """
        if intent == self._intent and self._state not in (CollectionState.IDLE, CollectionState.ERROR):
            return

        self._reset(intent)
        if not self._session.is_authenticated:
            log.debug("Not authenticated; deferring first page fetch")
            return
        await self._fetch_first(self._generation, intent)

    async def load_more(self) -> None:
        """Fetch and append the next page.

        No-op while any fetch is in flight, after the last page, or when the
        session is not authenticated.
        """
        if self._state is not CollectionState.READY or not self.has_more:
            return
        if not self._session.is_authenticated:
            return

        generation = self._generation
        next_link = self._pages[-1].next_link
        assert next_link is not None
        self._state = CollectionState.LOADING_MORE
        try:
            page = await self._source.search_next(next_link)
        except Exception as error:  # noqa: BLE001 - surfaced as ERROR state
            self._fail(generation, error)
            return

        if generation != self._generation:
            log.debug("Discarding stale next page (generation %d != %d)", generation, self._generation)
            return
        self._pages.append(page)
        self._state = CollectionState.READY

    async def wait_pending(self) -> None:
        """Await a first-page fetch started by a session change, if any."""
        pending = self._pending
        if pending is not None:
            # asyncio.wait does not raise if the task was cancelled by a reset.
            await asyncio.wait([pending])

    def close(self) -> None:
        """Stop listening to the session and drop any pending fetch result."""
        self._unsubscribe()
        self._generation += 1

    async def _fetch_first(self, generation: int, intent: SearchIntent) -> None:
        if generation != self._generation:
            log.debug("Skipping first page fetch for superseded intent")
            return
        self._state = CollectionState.LOADING
        try:
            if self._autocomplete and (not intent.text or intent.is_semantic):
                page: Page[ApiMetadata] = Page()
            else:
                page = await self._source.search(intent)
        except Exception as error:  # noqa: BLE001 - surfaced as ERROR state
            self._fail(generation, error)
            return

        if generation != self._generation:
            log.debug("Discarding stale first page (generation %d != %d)", generation, self._generation)
            return
        self._pages.append(page)
        self._state = CollectionState.READY

    def _reset(self, intent: Optional[SearchIntent]) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._intent = intent
        self._pages = []
        self._error = None
        self._state = CollectionState.IDLE

    def _fail(self, generation: int, error: Exception) -> None:
        if generation != self._generation:
            log.debug("Ignoring failure of stale fetch: %s", error)
            return
        log.warning("Catalog fetch failed: %s", error)
        self._error = error
        self._state = CollectionState.ERROR

    def _on_session_change(self, session: SessionContext) -> None:
        if not session.is_authenticated:
            if self._state is not CollectionState.IDLE or self._pages or self._pending is not None:
                log.debug("Session lost authentication; resetting collection")
                self._reset(self._intent)
            return

        if self._intent is None or self._state is not CollectionState.IDLE:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.debug("No running event loop; first page fetch waits for the next set_intent")
            return
        self._pending = loop.create_task(self._fetch_first(self._generation, self._intent))
