"""
Catalog (authority code -> Area)
================================

The Catalog is the top of the data hierarchy:

    Catalog -> Area (one per authority code) -> Measure -> year -> value

It owns the top-level upsert rule (a second Area with the same code is
*merged* into the first, never stored beside it), dispatches `populate`
calls to the parser for each source format, and serialises itself to JSON.

Several `populate` calls against one Catalog accumulate. The Catalog is
not synchronised: import into separate Catalogs and `merge` them if work
must be split.
"""

from __future__ import annotations
from typing import IO, Any, Dict, Iterator, Mapping, Optional, Tuple, Union
import json
import logging

from .columns import ColumnMapping, SourceDataType
from .errors import InvalidArgumentError, MalformedInputError, NotFoundError
from .filters import AreaFilterLike, MeasureFilterLike, YearRange, as_area_filter, as_measure_filter
from .loader import PARSERS
from .models import Area, Measure

logger = logging.getLogger(__name__)


class Catalog:
    """All imported Areas, keyed by authority code."""

    def __init__(self) -> None:
        self._areas: Dict[str, Area] = {}

    # ---------------- Areas ----------------
    def set_area(self, code: str, area: Area) -> bool:
        """Insert `area`, or merge it into the Area already stored under `code`.

        Returns True if a new Area was inserted.
        """
        existing = self._areas.get(code)
        if existing is None:
            self._areas[code] = area
            return True
        existing.merge(area)
        return False

    def get_area(self, code: str) -> Area:
        try:
            return self._areas[code]
        except KeyError:
            raise NotFoundError(f"No area found matching {code}") from None

    def has_area(self, code: str) -> bool:
        return code in self._areas

    def codes(self):
        return sorted(self._areas)

    def size(self) -> int:
        return len(self._areas)

    def __len__(self) -> int:
        return len(self._areas)

    def __iter__(self) -> Iterator[Area]:
        """Areas in authority code order."""
        for code in self.codes():
            yield self._areas[code]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Catalog):
            return NotImplemented
        return self._areas == other._areas

    __hash__ = None  # mutable

    def merge(self, other: "Catalog") -> None:
        """Fold every Area of `other` into this Catalog (copies, not shared)."""
        for area in other:
            if area.code not in self._areas:
                self._areas[area.code] = Area(area.code)
            self._areas[area.code].merge(area)

    # ---------------- Import ----------------
    def populate(
        self,
        stream: IO,
        data_type: SourceDataType,
        cols: Union[ColumnMapping, Mapping[Any, str]],
        areas_filter: AreaFilterLike = None,
        measures_filter: MeasureFilterLike = None,
        years_filter: Union[YearRange, Tuple[int, int], None] = None,
    ) -> int:
        """Parse `stream` as `data_type` and upsert what survives the filters.

        Omitted filters match everything. Parser errors propagate unchanged.
        Returns the number of areas (authority file) or values (data files)
        written.
        """
        parser = PARSERS.get(data_type)
        if parser is None:
            raise InvalidArgumentError(f"Catalog.populate: Unexpected data type {data_type!r}")
        logger.debug("Populating from %s", data_type.value)
        return parser.parse(
            self,
            stream,
            ColumnMapping.of(cols),
            as_area_filter(areas_filter),
            as_measure_filter(measures_filter),
            YearRange.of(years_filter),
        )

    # ---------------- Serialisation ----------------
    def to_dict(self) -> Dict[str, Any]:
        return {code: self._areas[code].to_dict() for code in self.codes()}

    def to_json(self, indent: Optional[int] = None) -> str:
        if not self._areas:
            return "{}"
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "Catalog":
        """Rebuild a Catalog from `to_json()` output."""
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedInputError(f"Malformed JSON: {e}") from e
        if not isinstance(doc, dict):
            raise MalformedInputError("Malformed JSON: expected an object of areas")

        catalog = cls()
        for code, body in doc.items():
            body = _json_object(body, f"area {code}")
            names = body.get("names", {})
            measures = body.get("measures", {})
            area = Area(code)
            for lang, name in _json_object(names, f"names of {code}").items():
                area.set_name(lang, str(name))
            for measure_code, values in _json_object(measures, f"measures of {code}").items():
                values = _json_object(values, f"measure {measure_code} of {code}")
                try:
                    parsed = {int(y): float(v) for y, v in values.items()}
                except (TypeError, ValueError) as e:
                    raise MalformedInputError(
                        f"Malformed JSON: bad year/value in measure {measure_code} of {code}"
                    ) from e
                # labels are not serialised; the code stands in for one
                area.set_measure(measure_code, Measure(measure_code, measure_code, parsed))
            catalog.set_area(code, area)
        return catalog


def _json_object(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedInputError(f"Malformed JSON: {what} is not an object")
    return value

