"""Catalog query compiler.

Compiles a search text, facet filters and a search mode into the request the
catalog data API expects.

Rules
- `$top` is always set to the page size.
- Lexical mode with non-empty text sets `$search` to the raw text and lists
  `/apis`.
- Semantic mode with non-empty text POSTs to `:search` with the body
  `{"query": <text>, "searchType": "vector"}`; `$top`/`$filter` stay on the
  query string.
- Filters are grouped by facet type in first-seen order. Clauses inside a
  group are OR-ed, groups are AND-ed, every group is parenthesised:

      (kind eq 'rest' or kind eq 'graphql') and (lifecycleStage eq 'production')

- No filters means no `$filter` parameter at all.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlencode

from ApiCatalog.core.query import FilterClause, SearchMode

DEFAULT_PAGE_SIZE = 50

LIST_APIS_PATH = "/apis"
SEMANTIC_SEARCH_PATH = ":search"
SEMANTIC_SEARCH_TYPE = "vector"


@dataclass(frozen=True, slots=True)
class BackendQuery:
    """Compiled request for the first page of a listing.

    Attributes:
        method: HTTP method, GET for listing or POST for semantic search.
        path: Workspace-relative endpoint path.
        params: Query string parameters in insertion order.
        body: JSON body for semantic search; None otherwise.
    """

    method: str
    path: str
    params: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Mapping[str, Any]] = None

    @property
    def query_string(self) -> str:
        return urlencode(list(self.params.items()))

    @property
    def is_semantic(self) -> bool:
        return self.method == "POST"


def _quote(value: str) -> str:
    # OData string literals escape a single quote by doubling it.
    return "'" + value.replace("'", "''") + "'"


def compile_filter(filters: Sequence[FilterClause]) -> str | None:
    """Compile facet clauses into an OData `$filter` expression.

    Args:
        filters: Clauses in user selection order.

    Returns:
        Filter expression, or None when there is nothing to filter on.
    """
    groups: dict[str, list[str]] = {}
    for clause in filters:
        groups.setdefault(clause.facet_type, []).append(f"{clause.facet_type} eq {_quote(clause.value)}")

    if not groups:
        return None
    return " and ".join("(" + " or ".join(terms) + ")" for terms in groups.values())


def build_query(
    search: str,
    filters: Sequence[FilterClause] = (),
    mode: SearchMode = SearchMode.LEXICAL,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> BackendQuery:
    """Compile the first-page request for a listing.

    Semantic mode with empty text is not a semantic request: callers must
    short-circuit before reaching here (see `CatalogQueryService.search`).
    If they do not, the plain listing is returned.

    Args:
        search: Free search text.
        filters: Facet clauses.
        mode: Search mode.
        page_size: Value for `$top`.

    Returns:
        Compiled `BackendQuery`.
    """
    params: dict[str, str] = {"$top": str(page_size)}
    if search and mode is SearchMode.LEXICAL:
        params["$search"] = search

    filter_expr = compile_filter(filters)
    if filter_expr is not None:
        params["$filter"] = filter_expr

    if search and mode is SearchMode.SEMANTIC:
        return BackendQuery(
            method="POST",
            path=SEMANTIC_SEARCH_PATH,
            params=params,
            body={"query": search, "searchType": SEMANTIC_SEARCH_TYPE},
        )

    return BackendQuery(method="GET", path=LIST_APIS_PATH, params=params)
