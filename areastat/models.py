"""
Data model (Measure, Area)
==========================

A `Measure` is one statistical indicator (e.g. population) tracked over a
number of years. An `Area` is one local authority: its authority code, its
names in one or more languages, and the measures imported for it.

Both are plain mutable dataclasses because imports *merge* into them:
a later file may add years to a measure or a Welsh name to an area that an
earlier file created. Equality is the dataclass field comparison, which for
the underlying dicts ignores insertion order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple
import math
import re

from .errors import InvalidArgumentError, NotFoundError
from .filters import AreaFilter

# ISO 639-3 codes: exactly three letters (checked after lowercasing)
_LANG_RE = re.compile(r"^[a-z]{3}$")


@dataclass
class Measure:
    """One indicator for one area: a lowercase code, a label, year -> value."""
    code: str
    label: str
    values: Dict[int, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.code = self.code.lower()
        self.values = {int(y): float(v) for y, v in self.values.items()}

    # ---------------- Values ----------------
    def set_value(self, year: int, value: float) -> None:
        self.values[int(year)] = float(value)

    def get_value(self, year: int) -> float:
        try:
            return self.values[int(year)]
        except KeyError:
            raise NotFoundError(f"No value found for year {year}") from None

    def years(self) -> List[int]:
        return sorted(self.values)

    def items(self) -> List[Tuple[int, float]]:
        """(year, value) pairs in ascending year order."""
        return [(y, self.values[y]) for y in self.years()]

    def size(self) -> int:
        return len(self.values)

    def __len__(self) -> int:
        return len(self.values)

    # ---------------- Statistics ----------------
    def average(self) -> float:
        if not self.values:
            return 0.0
        return sum(self.values.values()) / len(self.values)

    def _first_last(self) -> Optional[Tuple[float, float]]:
        if len(self.values) < 2:
            return None
        years = self.years()
        return self.values[years[0]], self.values[years[-1]]

    def difference(self) -> float:
        """Value at the last year minus value at the first year."""
        ends = self._first_last()
        if ends is None:
            return 0.0
        first, last = ends
        return last - first

    def difference_percent(self) -> float:
        """`difference()` as a percentage of |first value|.

        A first value of 0 gives IEEE results: +/-inf, or nan for 0/0.
        """
        ends = self._first_last()
        if ends is None:
            return 0.0
        first, last = ends
        diff = last - first
        if first == 0:
            if diff == 0:
                return math.nan
            return math.copysign(math.inf, diff)
        return diff / abs(first) * 100.0

    # ---------------- Merge ----------------
    def merge(self, other: "Measure") -> None:
        """Take code and label from `other`, then upsert all of its years."""
        self.code = other.code
        self.label = other.label
        for year, value in other.values.items():
            self.set_value(year, value)

    def copy(self) -> "Measure":
        return Measure(self.code, self.label, dict(self.values))

    def values_as_dict(self) -> Dict[str, float]:
        return {str(y): v for y, v in self.items()}


@dataclass
class Area:
    """One local authority.

    `code` is fixed at construction; the Catalog only ever merges into an
    existing Area, it never re-keys one.
    """
    code: str
    names: Dict[str, str] = field(default_factory=dict)
    measures: Dict[str, Measure] = field(default_factory=dict)

    # ---------------- Names ----------------
    def set_name(self, lang: str, name: str) -> None:
        lang = lang.lower()
        if not _LANG_RE.match(lang):
            raise InvalidArgumentError(
                "Area.set_name: Language code must be three alphabetical letters only"
            )
        self.names[lang] = name

    def get_name(self, lang: str) -> str:
        try:
            return self.names[lang.lower()]
        except KeyError:
            raise NotFoundError(f"No name found for key {lang}") from None

    # ---------------- Measures ----------------
    def has_measure(self, code: str) -> bool:
        return code.lower() in self.measures

    def get_measure(self, code: str) -> Measure:
        key = code.lower()
        try:
            return self.measures[key]
        except KeyError:
            raise NotFoundError(f"No measure found matching {key}") from None

    def set_measure(self, code: str, measure: Measure) -> bool:
        """Insert `measure` under `code`, or merge it into the one already there.

        Returns True if a new Measure was inserted, False if it was merged.
        """
        key = code.lower()
        existing = self.measures.get(key)
        if existing is None:
            self.measures[key] = measure
            return True
        existing.merge(measure)
        return False

    def iter_measures(self) -> Iterator[Measure]:
        """Measures ordered by code."""
        for key in sorted(self.measures):
            yield self.measures[key]

    def size(self) -> int:
        return len(self.measures)

    def __len__(self) -> int:
        return len(self.measures)

    # ---------------- Merge / filter / view ----------------
    def merge(self, other: "Area") -> None:
        """Fold `other` into this Area; `other` wins on any conflict."""
        self.code = other.code
        for lang, name in other.names.items():
            self.set_name(lang, name)
        for key, measure in other.measures.items():
            self.set_measure(key, measure.copy())

    def matches(self, area_filter: Optional[AreaFilter]) -> bool:
        """True if the code or any name matches the filter (no filter = True)."""
        if area_filter is None:
            return True
        return area_filter.matches_any(self.code, *self.names.values())

    def display_name(self) -> str:
        eng = self.names.get("eng")
        cym = self.names.get("cym")
        if eng is not None:
            return f"{eng} / {cym}" if cym is not None else eng
        if cym is not None:
            return cym
        return "Unnamed"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"names": {k: self.names[k] for k in sorted(self.names)}}
        if self.measures:
            out["measures"] = {k: self.measures[k].values_as_dict() for k in sorted(self.measures)}
        return out
