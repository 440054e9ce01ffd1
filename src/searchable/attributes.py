from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List


def flatten(values: Iterable[Any]) -> Iterator[Any]:
    """Yield leaf values from arbitrarily nested lists/tuples."""
    for value in values:
        if isinstance(value, (list, tuple)):
            yield from flatten(value)
        else:
            yield value


@dataclass(frozen=True, slots=True)
class SearchableAttribute:
    """A column to match a search term against.

    Partial attributes match a case-insensitive substring; exact attributes
    require case-sensitive equality.
    """

    name: str
    partial: bool = True

    @classmethod
    def create(cls, name: str, partial: bool = True) -> "SearchableAttribute":
        return cls(name, partial)

    @classmethod
    def create_exact(cls, name: str) -> "SearchableAttribute":
        return cls(name, False)

    @classmethod
    def create_many(cls, names: Iterable[Any]) -> List["SearchableAttribute"]:
        return [cls.create(name) for name in flatten(names)]
