"""Typed container for results collected from several aspects."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Dict, Iterable, Iterator, List, Union, overload

from searchable.results import SearchResult


class SearchResultCollection(Sequence):
    """Ordered, read-only sequence of type-tagged search results.

    Order is aspect registration order, then fetch order within an aspect.
    """

    def __init__(self, results: Iterable[SearchResult] = ()) -> None:
        self._results: List[SearchResult] = list(results)

    @overload
    def __getitem__(self, index: int) -> SearchResult: ...

    @overload
    def __getitem__(self, index: slice) -> "SearchResultCollection": ...

    def __getitem__(
        self, index: Union[int, slice]
    ) -> Union[SearchResult, "SearchResultCollection"]:
        if isinstance(index, slice):
            return SearchResultCollection(self._results[index])
        return self._results[index]

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[SearchResult]:
        return iter(self._results)

    def __repr__(self) -> str:
        return f"SearchResultCollection({self._results!r})"

    def group_by_type(self) -> Dict[str, List[SearchResult]]:
        """Partition results by type, keeping their relative order."""
        groups: Dict[str, List[SearchResult]] = {}
        for result in self._results:
            groups.setdefault(result.type or "", []).append(result)
        return groups

    def aspect(self, type_name: str) -> List[SearchResult]:
        """Return the results produced by aspects of `type_name`."""
        return [r for r in self._results if r.type == type_name]

    def types(self) -> List[str]:
        return list(self.group_by_type())
