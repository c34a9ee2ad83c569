"""Search defaults: mode, client-side sort and autocomplete guard."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ApiCatalog.config.common import expect_bool, expect_choice, expect_str, get_section
from ApiCatalog.core.query import SearchMode, SortBy, SortOrder

_ALLOWED_MODES = {mode.value for mode in SearchMode}
_ALLOWED_ORDERS = {order.value for order in SortOrder}


@dataclass(frozen=True, slots=True)
class SearchConfig:
    mode: SearchMode
    sort: SortBy | None
    autocomplete: bool


def load_search(raw: Mapping[str, Any]) -> SearchConfig:
    """Load the optional `search` section.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If enumerations have unknown values.
    """
    section = get_section(raw, "search", required=False)
    mode = expect_choice(section.get("mode", SearchMode.LEXICAL.value), "search.mode", _ALLOWED_MODES)
    return SearchConfig(
        mode=SearchMode(mode),
        sort=_parse_sort(section.get("sort")),
        autocomplete=expect_bool(section.get("autocomplete", False), "search.autocomplete"),
    )


def check_search(config: SearchConfig) -> None:
    if config.sort is not None and not config.sort.field.strip():
        raise ValueError("search.sort.field must not be empty")


def parse_sort_spec(text: str) -> SortBy:
    """Parse `field[:asc|desc]` as used on the command line."""
    field, _, order = text.partition(":")
    order_value = expect_choice(order or SortOrder.ASC.value, "sort order", _ALLOWED_ORDERS)
    return SortBy(field=field.strip(), order=SortOrder(order_value))


def _parse_sort(value: Any) -> SortBy | None:
    if value is None:
        return None
    if isinstance(value, str):
        return parse_sort_spec(value)
    if not isinstance(value, Mapping):
        raise TypeError("search.sort must be null, a string or an object")
    field = expect_str(value.get("field", "title"), "search.sort.field").strip()
    order = expect_choice(value.get("order", SortOrder.ASC.value), "search.sort.order", _ALLOWED_ORDERS)
    return SortBy(field=field, order=SortOrder(order))
