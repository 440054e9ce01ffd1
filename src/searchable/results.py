"""Normalized search hits and the protocol items implement to produce them."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A single search hit.

    Attributes
    ----------
    searchable: Any
        The underlying item (usually a mapped model instance).
    title: str
        Text shown to the user for this hit.
    url: str | None
        Optional link to the item.
    type: str | None
        Type of the aspect that produced the hit. Filled in by `Search.perform`.
    metadata: dict
        Free-form extra data for display.
    """

    searchable: Any
    title: str
    url: Optional[str] = None
    type: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def with_type(self, type: str) -> "SearchResult":
        return replace(self, type=type)


@runtime_checkable
class Searchable(Protocol):
    """Protocol every item returned by a model aspect must satisfy."""

    def get_search_result(self) -> SearchResult:
        ...
