"""Tests for the client-side sort overlay."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ApiCatalog.core.models import ApiMetadata
from ApiCatalog.core.query import SortBy, SortOrder
from ApiCatalog.services.sorting import sort_items


def _api(name: str, title: str) -> ApiMetadata:
    return ApiMetadata(name=name, title=title)


class TestSortItems(unittest.TestCase):
    def test_no_sort_keeps_fetch_order(self) -> None:
        items = [_api("b", "B"), _api("a", "A")]
        self.assertEqual(sort_items(items, None), items)

    def test_ascending_and_descending_are_exact_reverse(self) -> None:
        items = [_api("b", "B"), _api("a", "A")]
        ascending = sort_items(items, SortBy("title", SortOrder.ASC))
        descending = sort_items(items, SortBy("title", SortOrder.DESC))
        self.assertEqual([i.title for i in ascending], ["A", "B"])
        self.assertEqual([i.title for i in descending], ["B", "A"])

    def test_ordinal_not_locale_order(self) -> None:
        items = [_api("1", "b"), _api("2", "B"), _api("3", "a")]
        result = sort_items(items, SortBy("title"))
        self.assertEqual([i.title for i in result], ["B", "a", "b"])

    def test_ties_keep_fetch_order_in_both_directions(self) -> None:
        items = [_api("first", "Same"), _api("second", "Same"), _api("other", "Alpha")]
        ascending = sort_items(items, SortBy("title", SortOrder.ASC))
        descending = sort_items(items, SortBy("title", SortOrder.DESC))
        self.assertEqual([i.name for i in ascending], ["other", "first", "second"])
        self.assertEqual([i.name for i in descending], ["first", "second", "other"])

    def test_missing_field_sorts_as_empty(self) -> None:
        items = [ApiMetadata(name="x", title="T", kind="rest"), ApiMetadata(name="y", title="U")]
        result = sort_items(items, SortBy("kind"))
        self.assertEqual([i.name for i in result], ["y", "x"])

    def test_input_is_not_mutated(self) -> None:
        items = [_api("b", "B"), _api("a", "A")]
        sort_items(items, SortBy("title"))
        self.assertEqual([i.name for i in items], ["b", "a"])


if __name__ == "__main__":
    unittest.main()
