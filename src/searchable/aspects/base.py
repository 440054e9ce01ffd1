"""Abstract search aspect interface.

An aspect is any source of search results: a model aspect querying the
database, or a custom aspect wrapping an API, a static list, etc.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional

from searchable.results import SearchResult

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def _snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class SearchAspect(ABC):
    """Abstract interface for a source of search results."""

    # Explicit type label; derived from the class name when unset
    search_type: ClassVar[Optional[str]] = None

    def get_type(self) -> str:
        """Return the label used to group this aspect's results."""
        if self.search_type:
            return self.search_type
        name = type(self).__name__
        if name.endswith("SearchAspect") and name != "SearchAspect":
            name = name[: -len("SearchAspect")]
        label = _snake(name)
        return label if label.endswith("s") else f"{label}s"

    @abstractmethod
    def get_results(self, term: str) -> List[SearchResult]:
        """Return the hits for `term`, in fetch order."""
        raise NotImplementedError
