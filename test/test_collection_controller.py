"""Tests for the paginated collection controller state machine."""

from __future__ import annotations

import asyncio
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ApiCatalog.core.models import ApiMetadata, Page
from ApiCatalog.core.query import SearchIntent, SearchMode, SortBy, SortOrder
from ApiCatalog.core.session import SessionContext
from ApiCatalog.services.collection import CollectionState, PaginatedCollectionController


def _page(*titles: str, next_link: str | None = None) -> Page[ApiMetadata]:
    return Page(items=[ApiMetadata(name=t.lower(), title=t) for t in titles], next_link=next_link)


class _ScriptedSource:
    """Answers first pages by search text and next pages by link.

    A key with a gate blocks until the test sets the event; a key in `errors`
    raises instead of answering.
    """

    def __init__(self, pages: dict[str, Page[ApiMetadata]]) -> None:
        self.pages = pages
        self.gates: dict[str, asyncio.Event] = {}
        self.errors: dict[str, Exception] = {}
        self.search_calls: list[SearchIntent] = []
        self.next_calls: list[str] = []

    async def search(self, intent: SearchIntent) -> Page[ApiMetadata]:
        self.search_calls.append(intent)
        return await self._answer(intent.text)

    async def search_next(self, next_link: str) -> Page[ApiMetadata]:
        self.next_calls.append(next_link)
        return await self._answer(next_link)

    async def _answer(self, key: str) -> Page[ApiMetadata]:
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if key in self.errors:
            raise self.errors[key]
        return self.pages[key]


async def _settle() -> None:
    for _ in range(3):
        await asyncio.sleep(0)


class TestPagination(unittest.IsolatedAsyncioTestCase):
    async def test_load_more_until_terminal_page(self) -> None:
        source = _ScriptedSource({"pets": _page("A", "B", next_link="T1"), "T1": _page("C")})
        controller = PaginatedCollectionController(source, SessionContext(is_authenticated=True))

        await controller.set_intent(SearchIntent(text="pets"))
        self.assertEqual(controller.state, CollectionState.READY)
        self.assertTrue(controller.has_more)

        await controller.load_more()
        self.assertFalse(controller.has_more)
        self.assertEqual([api.title for api in controller.items], ["A", "B", "C"])

        await controller.load_more()
        self.assertEqual(source.next_calls, ["T1"])
        self.assertEqual(len(controller.pages), 2)

    async def test_concurrent_load_more_is_ignored_not_queued(self) -> None:
        source = _ScriptedSource({"": _page("A", next_link="T1"), "T1": _page("B", next_link="T2")})
        source.gates["T1"] = asyncio.Event()
        controller = PaginatedCollectionController(source, SessionContext(is_authenticated=True))
        await controller.set_intent(SearchIntent())

        first = asyncio.create_task(controller.load_more())
        await _settle()
        self.assertTrue(controller.is_loading_more)
        await controller.load_more()
        source.gates["T1"].set()
        await first

        self.assertEqual(source.next_calls, ["T1"])
        self.assertEqual([api.title for api in controller.items], ["A", "B"])
        self.assertTrue(controller.has_more)

    async def test_stale_next_page_is_discarded(self) -> None:
        source = _ScriptedSource(
            {
                "old": _page("Old1", next_link="T1"),
                "T1": _page("Old2"),
                "new": _page("New1"),
            }
        )
        source.gates["T1"] = asyncio.Event()
        controller = PaginatedCollectionController(source, SessionContext(is_authenticated=True))
        await controller.set_intent(SearchIntent(text="old"))

        in_flight = asyncio.create_task(controller.load_more())
        await _settle()
        await controller.set_intent(SearchIntent(text="new"))
        source.gates["T1"].set()
        await in_flight

        self.assertEqual([api.title for api in controller.items], ["New1"])
        self.assertEqual(len(controller.pages), 1)
        self.assertEqual(controller.state, CollectionState.READY)

    async def test_stale_first_page_is_discarded(self) -> None:
        source = _ScriptedSource({"slow": _page("Slow"), "fast": _page("Fast")})
        source.gates["slow"] = asyncio.Event()
        controller = PaginatedCollectionController(source, SessionContext(is_authenticated=True))

        slow = asyncio.create_task(controller.set_intent(SearchIntent(text="slow")))
        await _settle()
        await controller.set_intent(SearchIntent(text="fast"))
        source.gates["slow"].set()
        await slow

        self.assertEqual([api.title for api in controller.items], ["Fast"])
        self.assertEqual(controller.intent.text, "fast")

    async def test_same_intent_does_not_refetch(self) -> None:
        source = _ScriptedSource({"pets": _page("A")})
        controller = PaginatedCollectionController(source, SessionContext(is_authenticated=True))

        await controller.set_intent(SearchIntent(text="pets"))
        await controller.set_intent(SearchIntent(text="pets"))

        self.assertEqual(len(source.search_calls), 1)


class TestErrorsAndEmptyState(unittest.IsolatedAsyncioTestCase):
    async def test_first_page_failure_is_error_state(self) -> None:
        source = _ScriptedSource({})
        source.errors["pets"] = RuntimeError("HTTP 500")
        controller = PaginatedCollectionController(source, SessionContext(is_authenticated=True))

        await controller.set_intent(SearchIntent(text="pets"))

        self.assertEqual(controller.state, CollectionState.ERROR)
        self.assertIsInstance(controller.error, RuntimeError)
        self.assertEqual(controller.items, [])

    async def test_next_page_failure_keeps_fetched_pages(self) -> None:
        source = _ScriptedSource({"": _page("A", next_link="T1")})
        source.errors["T1"] = RuntimeError("timeout")
        controller = PaginatedCollectionController(source, SessionContext(is_authenticated=True))
        await controller.set_intent(SearchIntent())

        await controller.load_more()
        await controller.load_more()

        self.assertEqual(controller.state, CollectionState.ERROR)
        self.assertEqual([api.title for api in controller.items], ["A"])
        self.assertEqual(source.next_calls, ["T1"])

    async def test_error_state_allows_retry_of_same_intent(self) -> None:
        source = _ScriptedSource({"pets": _page("A")})
        source.errors["pets"] = RuntimeError("boom")
        controller = PaginatedCollectionController(source, SessionContext(is_authenticated=True))
        await controller.set_intent(SearchIntent(text="pets"))

        del source.errors["pets"]
        await controller.set_intent(SearchIntent(text="pets"))

        self.assertEqual(controller.state, CollectionState.READY)
        self.assertIsNone(controller.error)

    async def test_zero_items_is_empty_state(self) -> None:
        source = _ScriptedSource({"nothing": _page()})
        controller = PaginatedCollectionController(source, SessionContext(is_authenticated=True))

        await controller.set_intent(SearchIntent(text="nothing"))

        self.assertTrue(controller.is_empty)
        self.assertFalse(controller.has_more)


class TestSessionIntegration(unittest.IsolatedAsyncioTestCase):
    async def test_no_fetch_until_authenticated(self) -> None:
        source = _ScriptedSource({"pets": _page("A")})
        session = SessionContext(is_authenticated=False)
        controller = PaginatedCollectionController(source, session)

        await controller.set_intent(SearchIntent(text="pets"))
        self.assertEqual(source.search_calls, [])
        self.assertEqual(controller.state, CollectionState.IDLE)

        session.set_authenticated(True)
        await controller.wait_pending()

        self.assertEqual(len(source.search_calls), 1)
        self.assertEqual([api.title for api in controller.items], ["A"])

    async def test_intent_change_before_resumed_fetch_starts(self) -> None:
        source = _ScriptedSource({"a": _page("A"), "b": _page("B", next_link="T1"), "T1": _page("C")})
        session = SessionContext(is_authenticated=False)
        controller = PaginatedCollectionController(source, session)
        await controller.set_intent(SearchIntent(text="a"))

        session.set_authenticated(True)
        await controller.set_intent(SearchIntent(text="b"))
        await controller.wait_pending()
        await _settle()

        self.assertEqual([intent.text for intent in source.search_calls], ["b"])
        self.assertEqual(controller.state, CollectionState.READY)
        self.assertFalse(controller.is_loading)

        await controller.load_more()
        self.assertEqual([api.title for api in controller.items], ["B", "C"])

    async def test_intent_change_before_resumed_autocomplete_fetch_starts(self) -> None:
        source = _ScriptedSource({})
        session = SessionContext(is_authenticated=False)
        controller = PaginatedCollectionController(source, session, autocomplete=True)
        await controller.set_intent(SearchIntent(text=""))

        session.set_authenticated(True)
        await controller.set_intent(SearchIntent(text="pets", mode=SearchMode.SEMANTIC))
        self.assertEqual(controller.state, CollectionState.READY)

        await controller.wait_pending()
        await _settle()

        self.assertEqual(controller.state, CollectionState.READY)
        self.assertFalse(controller.is_loading)
        self.assertEqual(source.search_calls, [])

    async def test_auth_flicker_drops_resumed_fetch(self) -> None:
        source = _ScriptedSource({"pets": _page("A")})
        session = SessionContext(is_authenticated=False)
        controller = PaginatedCollectionController(source, session)
        await controller.set_intent(SearchIntent(text="pets"))

        session.set_authenticated(True)
        session.set_authenticated(False)
        await controller.wait_pending()
        await _settle()

        self.assertEqual(source.search_calls, [])
        self.assertEqual(controller.state, CollectionState.IDLE)

    async def test_losing_authentication_resets_to_idle(self) -> None:
        source = _ScriptedSource({"pets": _page("A", next_link="T1"), "T1": _page("B")})
        session = SessionContext(is_authenticated=True)
        controller = PaginatedCollectionController(source, session)
        await controller.set_intent(SearchIntent(text="pets"))

        session.set_authenticated(False)
        self.assertEqual(controller.state, CollectionState.IDLE)
        self.assertEqual(controller.items, [])
        await controller.load_more()
        self.assertEqual(source.next_calls, [])

        session.set_authenticated(True)
        await controller.wait_pending()
        self.assertEqual(len(source.search_calls), 2)
        self.assertEqual(controller.state, CollectionState.READY)

    async def test_sort_is_applied_on_read_without_refetch(self) -> None:
        source = _ScriptedSource({"": _page("B", "A", next_link="T1"), "T1": _page("C")})
        session = SessionContext(is_authenticated=True)
        controller = PaginatedCollectionController(source, session)
        await controller.set_intent(SearchIntent())
        await controller.load_more()

        self.assertEqual([api.title for api in controller.items], ["B", "A", "C"])
        session.set_sort(SortBy("title", SortOrder.ASC))
        self.assertEqual([api.title for api in controller.items], ["A", "B", "C"])
        session.set_sort(SortBy("title", SortOrder.DESC))
        self.assertEqual([api.title for api in controller.items], ["C", "B", "A"])
        self.assertEqual(len(source.search_calls), 1)

    async def test_autocomplete_skips_empty_and_semantic_queries(self) -> None:
        source = _ScriptedSource({"pet": _page("Pet")})
        controller = PaginatedCollectionController(
            source,
            SessionContext(is_authenticated=True),
            autocomplete=True,
        )

        await controller.set_intent(SearchIntent(text=""))
        self.assertTrue(controller.is_empty)
        await controller.set_intent(SearchIntent(text="pet", mode=SearchMode.SEMANTIC))
        self.assertTrue(controller.is_empty)
        self.assertEqual(source.search_calls, [])

        await controller.set_intent(SearchIntent(text="pet"))
        self.assertEqual([api.title for api in controller.items], ["Pet"])

    async def test_close_stops_listening(self) -> None:
        source = _ScriptedSource({"pets": _page("A")})
        session = SessionContext(is_authenticated=False)
        controller = PaginatedCollectionController(source, session)
        await controller.set_intent(SearchIntent(text="pets"))

        controller.close()
        session.set_authenticated(True)
        await controller.wait_pending()

        self.assertEqual(source.search_calls, [])


if __name__ == "__main__":
    unittest.main()
