"""
Import filters
==============

Three independent filters narrow what an import keeps:

- AreaFilter: case-insensitive "contains" match against an area's code or
  any of its names.
- MeasureFilter: case-insensitive exact match against a measure code.
- YearRange: inclusive [start, end]; (0, 0) means every year.

An empty filter matches everything. Terms are lowercased once, when the
filter is built, not on every row.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Tuple, Union


def _lowered(terms: Optional[Iterable[str]]) -> FrozenSet[str]:
    if not terms:
        return frozenset()
    return frozenset(t.lower() for t in terms)


@dataclass(frozen=True)
class AreaFilter:
    terms: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, terms: Optional[Iterable[str]] = None) -> "AreaFilter":
        return cls(_lowered(terms))

    def is_empty(self) -> bool:
        return not self.terms

    def matches_any(self, *texts: str) -> bool:
        """True if any term is a substring of any of `texts`."""
        if not self.terms:
            return True
        lowered = [t.lower() for t in texts]
        return any(term in text for term in self.terms for text in lowered)


@dataclass(frozen=True)
class MeasureFilter:
    terms: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, terms: Optional[Iterable[str]] = None) -> "MeasureFilter":
        return cls(_lowered(terms))

    def is_empty(self) -> bool:
        return not self.terms

    def matches(self, code: str) -> bool:
        return not self.terms or code.lower() in self.terms


@dataclass(frozen=True)
class YearRange:
    start: int = 0
    end: int = 0

    @classmethod
    def of(cls, years: Union["YearRange", Tuple[int, int], None] = None) -> "YearRange":
        if years is None:
            return cls()
        if isinstance(years, YearRange):
            return years
        start, end = years
        return cls(int(start), int(end))

    def is_unrestricted(self) -> bool:
        return self.start == 0 and self.end == 0

    def contains(self, year: int) -> bool:
        return self.is_unrestricted() or self.start <= year <= self.end


AreaFilterLike = Union[AreaFilter, Iterable[str], None]
MeasureFilterLike = Union[MeasureFilter, Iterable[str], None]


def as_area_filter(value: AreaFilterLike) -> AreaFilter:
    if isinstance(value, AreaFilter):
        return value
    return AreaFilter.of(value)


def as_measure_filter(value: MeasureFilterLike) -> MeasureFilter:
    if isinstance(value, MeasureFilter):
        return value
    return MeasureFilter.of(value)
