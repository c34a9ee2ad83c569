from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class SearchMode(str, Enum):
    """How free text is matched against the catalog."""

    LEXICAL = "lexical"
    SEMANTIC = "semantic"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class FilterClause:
    """One accepted value for a facet.

    Several clauses may share a `facet_type`; they are OR-ed together when the
    backend filter is compiled.
    """

    facet_type: str
    value: str


@dataclass(frozen=True, slots=True)
class SearchIntent:
    """Normalized user intent for one catalog listing.

    Instances are immutable: any change of text, filters or mode produces a new
    intent, which resets the fetched page sequence.

    Attributes:
        text: Free search text; empty means "list everything".
        filters: Facet clauses in the order the user selected them.
        mode: Lexical or semantic matching.
    """

    text: str = ""
    filters: Sequence[FilterClause] = ()
    mode: SearchMode = SearchMode.LEXICAL

    def __post_init__(self) -> None:
        # Normalize to a tuple so equal intents compare and hash equal.
        object.__setattr__(self, "filters", tuple(self.filters))

    @property
    def is_semantic(self) -> bool:
        return self.mode is SearchMode.SEMANTIC


@dataclass(frozen=True, slots=True)
class SortBy:
    """Client-side sort selection over already-fetched items."""

    field: str = "title"
    order: SortOrder = SortOrder.ASC
