"""Client-side sort over already-fetched catalog items.

The sort never reaches the server and does not influence which page is
fetched next: it is only correct across the items fetched so far.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Optional, Sequence, TypeVar

from ApiCatalog.core.query import SortBy, SortOrder

T = TypeVar("T")


def _sort_key(item: Any, field: str) -> str:
    value = getattr(item, field, None)
    return "" if value is None else str(value)


def _compare(left: str, right: str) -> int:
    # Ordinal (code point) comparison; no locale collation.
    if left > right:
        return 1
    if left < right:
        return -1
    return 0


def sort_items(items: Sequence[T], sort_by: Optional[SortBy] = None) -> list[T]:
    """Return items in a total order by one field.

    Descending order negates the ascending comparator result, so ties keep
    their fetch order in both directions.

    Args:
        items: Flattened items in fetch order.
        sort_by: Field and direction; None keeps fetch order.

    Returns:
        A new list.
    """
    if sort_by is None:
        return list(items)

    sign = -1 if sort_by.order is SortOrder.DESC else 1

    def _cmp(a: T, b: T) -> int:
        return sign * _compare(_sort_key(a, sort_by.field), _sort_key(b, sort_by.field))

    return sorted(items, key=cmp_to_key(_cmp))
