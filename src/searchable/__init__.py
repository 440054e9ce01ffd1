"""Aggregate search results across models and custom sources."""

from .aspects import ModelSearchAspect, SearchAspect
from .attributes import SearchableAttribute
from .collection import SearchResultCollection
from .exceptions import (
    ConfigError,
    InvalidEagerLoad,
    InvalidScope,
    InvalidSearchable,
    InvalidSearchAspect,
    NoSearchableAttributes,
    SearchableError,
    UnboundAspect,
)
from .results import Searchable, SearchResult
from .search import Search

__all__ = [
    "ConfigError",
    "InvalidEagerLoad",
    "InvalidScope",
    "InvalidSearchAspect",
    "InvalidSearchable",
    "ModelSearchAspect",
    "NoSearchableAttributes",
    "Search",
    "SearchAspect",
    "SearchResult",
    "SearchResultCollection",
    "Searchable",
    "SearchableAttribute",
    "SearchableError",
    "UnboundAspect",
]
