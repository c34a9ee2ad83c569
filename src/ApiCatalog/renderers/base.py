"""Base class for output writers.

Separates command control flow from how a listing is presented.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ApiCatalog.core.models import ApiMetadata
from ApiCatalog.core.query import SearchIntent


class OutputWriter(ABC):
    """Abstract base class for command output writers."""

    @abstractmethod
    def write_listing(self, apis: Sequence[ApiMetadata], intent: SearchIntent) -> None:
        """Write one API listing.

        Args:
            apis: APIs in display order.
            intent: The intent that produced the listing.
        """

    @abstractmethod
    def finalize(self, action: str) -> None:
        """Finalize output (e.g., write accumulated results to file).

        Args:
            action: The CLI command name (e.g., 'list').
        """
