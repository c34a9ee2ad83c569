"""Tests for catalog query compilation ($top/$search/$filter and semantic routing)."""

import sys
import unittest
from pathlib import Path
from urllib.parse import parse_qsl

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ApiCatalog.catalog.query import DEFAULT_PAGE_SIZE, build_query, compile_filter
from ApiCatalog.core.query import FilterClause, SearchMode


class TestCompileFilter(unittest.TestCase):
    def test_same_facet_is_or_group_without_and(self) -> None:
        result = compile_filter([FilterClause("type", "v1"), FilterClause("type", "v2")])
        self.assertEqual(result, "(type eq 'v1' or type eq 'v2')")

    def test_different_facets_are_and_of_groups(self) -> None:
        result = compile_filter([FilterClause("kind", "rest"), FilterClause("lifecycleStage", "production")])
        self.assertEqual(result, "(kind eq 'rest') and (lifecycleStage eq 'production')")

    def test_group_order_is_first_seen_not_alphabetical(self) -> None:
        result = compile_filter(
            [
                FilterClause("zeta", "1"),
                FilterClause("alpha", "2"),
                FilterClause("zeta", "3"),
            ]
        )
        self.assertEqual(result, "(zeta eq '1' or zeta eq '3') and (alpha eq '2')")

    def test_empty_filters_compile_to_none(self) -> None:
        self.assertIsNone(compile_filter([]))

    def test_single_quote_is_doubled(self) -> None:
        self.assertEqual(compile_filter([FilterClause("title", "O'Brien")]), "(title eq 'O''Brien')")


class TestBuildQuery(unittest.TestCase):
    def test_plain_listing_sets_only_top(self) -> None:
        query = build_query("", [], SearchMode.LEXICAL)
        self.assertEqual(query.method, "GET")
        self.assertEqual(query.path, "/apis")
        self.assertEqual(dict(query.params), {"$top": str(DEFAULT_PAGE_SIZE)})
        self.assertIsNone(query.body)

    def test_lexical_search_sets_search_param(self) -> None:
        query = build_query("petstore", [FilterClause("kind", "rest")], SearchMode.LEXICAL, page_size=10)
        self.assertEqual(query.method, "GET")
        self.assertEqual(query.params["$top"], "10")
        self.assertEqual(query.params["$search"], "petstore")
        self.assertEqual(query.params["$filter"], "(kind eq 'rest')")

    def test_no_filter_param_without_filters(self) -> None:
        query = build_query("petstore", [], SearchMode.LEXICAL)
        self.assertNotIn("$filter", query.params)

    def test_semantic_search_posts_vector_body(self) -> None:
        query = build_query("pets that bite", [FilterClause("kind", "rest")], SearchMode.SEMANTIC)
        self.assertEqual(query.method, "POST")
        self.assertEqual(query.path, ":search")
        self.assertEqual(dict(query.body), {"query": "pets that bite", "searchType": "vector"})
        self.assertNotIn("$search", query.params)
        self.assertEqual(query.params["$filter"], "(kind eq 'rest')")
        self.assertEqual(query.params["$top"], str(DEFAULT_PAGE_SIZE))

    def test_semantic_without_text_is_plain_listing(self) -> None:
        query = build_query("", [], SearchMode.SEMANTIC)
        self.assertEqual(query.method, "GET")
        self.assertEqual(query.path, "/apis")
        self.assertNotIn("$search", query.params)

    def test_query_string_is_stable(self) -> None:
        filters = [FilterClause("kind", "rest"), FilterClause("kind", "grpc")]
        first = build_query("a b", filters).query_string
        second = build_query("a b", filters).query_string
        self.assertEqual(first, second)
        self.assertEqual(
            parse_qsl(first),
            [("$top", "50"), ("$search", "a b"), ("$filter", "(kind eq 'rest' or kind eq 'grpc')")],
        )


if __name__ == "__main__":
    unittest.main()
