"""Session-wide state shared between the CLI/UI and the collection controller.

Replaces ambient global state with one explicit object: a single writer
updates it through the setters, any number of readers subscribe to changes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

from ApiCatalog.core.query import SortBy
from ApiCatalog.utils.log import log

SessionListener = Callable[["SessionContext"], None]


class SessionContext:
    """In-memory session state: authentication gate and sort selection."""

    def __init__(self, *, is_authenticated: bool = False, sort_by: Optional[SortBy] = None) -> None:
        self._is_authenticated = is_authenticated
        self._sort_by = sort_by
        self._listeners: list[SessionListener] = []

    @property
    def is_authenticated(self) -> bool:
        return self._is_authenticated

    @property
    def sort_by(self) -> Optional[SortBy]:
        return self._sort_by

    def set_authenticated(self, value: bool) -> None:
        """Flip the authentication gate and notify subscribers on change.

        Args:
            value: New authentication state.
        """
        if value == self._is_authenticated:
            return
        self._is_authenticated = value
        log.debug("Session authentication changed: %s", value)
        self._notify()

    def set_sort(self, sort_by: Optional[SortBy]) -> None:
        if sort_by == self._sort_by:
            return
        self._sort_by = sort_by
        self._notify()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a change listener.

        Args:
            listener: Callable receiving this context after each change.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in tuple(self._listeners):
            listener(self)
