"""
Source parsers (stream -> Catalog)
==================================

One parser per source format. Each reads a caller-owned stream, looks up
header text through a `ColumnMapping`, applies the import filters and
upserts Areas/Measures into a `Catalog`.

Key ideas:
- CSV files are tokenised by pandas with every cell kept as text; the
  conversion helpers (_to_str/_to_int/_to_float) turn cells into values.
- A parser reads and checks the *whole* source before it touches the
  Catalog, so a file that fails half way leaves earlier imports intact.
- Create-or-merge is decided with explicit `has_*` checks.

Formats:
- AuthorityCodeParser: `code,english name,welsh name` per row.
- WideYearParser: `code,<year 1>,...,<year n>` with one measure per file.
- JsonRecordParser: a list of observation records (optionally wrapped in
  an object's "value" field), one value per record.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import IO, TYPE_CHECKING, Any, Dict, List, Optional, Tuple
import io
import json
import logging
import math
import re

import pandas as pd

from .columns import ColumnMapping, SourceColumn, SourceDataType
from .errors import MalformedInputError, MissingColumnError
from .filters import AreaFilter, MeasureFilter, YearRange
from .models import Area, Measure

if TYPE_CHECKING:
    from .catalog import Catalog

logger = logging.getLogger(__name__)

# Key holding the record list when a JSON document is an object
JSON_RECORDS_KEY = "value"

_LEADING_INT_RE = re.compile(r"^\s*(-?\d+)")


# ---------------- Conversion helpers ----------------
def _read_text(stream: IO) -> str:
    """Read a text or byte stream to the end as text (UTF-8, BOM tolerated)."""
    data = stream.read()
    if isinstance(data, (bytes, bytearray)):
        try:
            return bytes(data).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"Source is not valid UTF-8: {e}") from e
    if data.startswith("\ufeff"):
        data = data[1:]
    return data


def _read_csv(stream: IO) -> pd.DataFrame:
    """Tokenise a CSV stream into a frame of text cells (header row included)."""
    text = _read_text(stream)
    try:
        return pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        raise MalformedInputError("Malformed file: no header row") from None
    except pd.errors.ParserError as e:
        raise MalformedInputError(f"Malformed file: {e}") from e


def _to_str(x) -> str:
    if x is None or (isinstance(x, float) and pd.isna(x)):
        return ""
    return str(x).strip()


def _to_int(x, what: str) -> int:
    if isinstance(x, bool):
        raise MalformedInputError(f"Invalid {what}: {x!r}")
    if isinstance(x, int):
        return x
    if isinstance(x, float):
        if x.is_integer():
            return int(x)
        raise MalformedInputError(f"Invalid {what}: {x!r}")
    m = _LEADING_INT_RE.match(_to_str(x))
    if not m:
        raise MalformedInputError(f"Invalid {what}: {x!r}")
    return int(m.group(1))


def _to_float(x, what: str) -> float:
    if isinstance(x, bool):
        raise MalformedInputError(f"Invalid {what}: {x!r}")
    if isinstance(x, (int, float)):
        value = float(x)
    else:
        try:
            value = float(_to_str(x))
        except ValueError:
            raise MalformedInputError(f"Invalid {what}: {x!r}") from None
    # NaN and Infinity have no JSON form
    if not math.isfinite(value):
        raise MalformedInputError(f"Invalid {what}: {x!r}")
    return value


def _upsert_value(area: Area, code: str, label: str, year: int, value: float) -> None:
    if area.has_measure(code):
        area.get_measure(code).set_value(year, value)
    else:
        measure = Measure(code, label)
        measure.set_value(year, value)
        area.set_measure(code, measure)


# ---------------- Authority code CSV ----------------
class AuthorityCodeParser:
    """`code,english name,welsh name` rows -> named Areas."""

    data_type = SourceDataType.AUTHORITY_CODE_CSV
    roles = (SourceColumn.AUTH_CODE, SourceColumn.AUTH_NAME_ENG, SourceColumn.AUTH_NAME_CYM)

    def parse(
        self,
        catalog: "Catalog",
        stream: IO,
        cols: ColumnMapping,
        areas: AreaFilter,
        measures: MeasureFilter,
        years: YearRange,
    ) -> int:
        expected = list(cols.require(*self.roles))
        df = _read_csv(stream)

        header = [_to_str(c) for c in df.iloc[0]]
        if header != expected:
            raise MalformedInputError(
                f"Malformed file: expected header {expected}, found {header}"
            )

        staged: List[Area] = []
        for lineno, row in enumerate(df.iloc[1:].itertuples(index=False), start=2):
            cells = [_to_str(c) for c in row]
            # pandas pads a short row with empty cells
            if len(cells) != 3 or any(c == "" for c in cells):
                raise MalformedInputError(f"Malformed row {lineno}: expected 3 fields")
            area = Area(cells[0])
            area.set_name("eng", cells[1])
            area.set_name("cym", cells[2])
            if not area.matches(areas):
                logger.debug("Skipping area %s (filtered)", area.code)
                continue
            staged.append(area)

        for area in staged:
            catalog.set_area(area.code, area)
        logger.info("Imported %d areas from authority code file", len(staged))
        return len(staged)


# ---------------- Authority x year CSV ----------------
class WideYearParser:
    """One row per area, one column per year, a single measure per file."""

    data_type = SourceDataType.AUTHORITY_BY_YEAR_CSV
    roles = (SourceColumn.AUTH_CODE, SourceColumn.SINGLE_MEASURE_CODE, SourceColumn.SINGLE_MEASURE_NAME)

    def parse(
        self,
        catalog: "Catalog",
        stream: IO,
        cols: ColumnMapping,
        areas: AreaFilter,
        measures: MeasureFilter,
        years: YearRange,
    ) -> int:
        auth_col, measure_code, measure_label = cols.require(*self.roles)
        measure_code = measure_code.lower()

        # Whole-file short-circuit: this file only ever holds one measure
        if not measures.matches(measure_code):
            logger.info("Skipping file for measure %s (filtered)", measure_code)
            return 0

        df = _read_csv(stream)
        header = [_to_str(c) for c in df.iloc[0]]
        if not header or header[0] != auth_col:
            raise MalformedInputError(
                f"Malformed file: first column should be {auth_col!r}, found {header[:1]}"
            )

        # column index -> year, for the years the filter keeps
        kept: List[Tuple[int, int]] = []
        for idx, cell in enumerate(header[1:], start=1):
            if not cell:
                raise MalformedInputError(f"Malformed file: column {idx + 1} has no year header")
            year = _to_int(cell, "year column")
            if years.contains(year):
                kept.append((idx, year))

        staged: List[Tuple[str, List[Tuple[int, float]]]] = []
        for lineno, row in enumerate(df.iloc[1:].itertuples(index=False), start=2):
            cells = [_to_str(c) for c in row]
            code = cells[0]
            if len(cells) != len(header) or any(c == "" for c in cells[: len(header)]):
                raise MalformedInputError(
                    f"Malformed row {lineno}: expected {len(header)} fields"
                )
            values = [_to_float(c, f"value on row {lineno}") for c in cells[1:]]
            staged.append((code, [(year, values[idx - 1]) for idx, year in kept]))

        written = 0
        for code, observations in staged:
            if not catalog.has_area(code):
                logger.debug("Skipping row for unknown area %s", code)
                continue
            area = catalog.get_area(code)
            if not area.matches(areas):
                continue
            for year, value in observations:
                _upsert_value(area, measure_code, measure_label, year, value)
                written += 1

        logger.info("Imported %d values for measure %s", written, measure_code)
        return written


# ---------------- Welsh statistics JSON ----------------
@dataclass(frozen=True)
class _Observation:
    auth_code: str
    name_eng: str
    year: int
    value: float
    measure_code: str
    measure_label: str


class JsonRecordParser:
    """A list of observation records, one (area, measure, year, value) each."""

    data_type = SourceDataType.WELSH_STATS_JSON
    roles = (SourceColumn.AUTH_CODE, SourceColumn.AUTH_NAME_ENG, SourceColumn.YEAR, SourceColumn.VALUE)

    def _records(self, text: str) -> List[Any]:
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedInputError(f"Malformed JSON: {e}") from e
        if isinstance(doc, dict):
            doc = doc.get(JSON_RECORDS_KEY)
        if not isinstance(doc, list):
            raise MalformedInputError(
                f"Malformed JSON: expected a list of records or an object with a {JSON_RECORDS_KEY!r} list"
            )
        return doc

    def parse(
        self,
        catalog: "Catalog",
        stream: IO,
        cols: ColumnMapping,
        areas: AreaFilter,
        measures: MeasureFilter,
        years: YearRange,
    ) -> int:
        auth_key, eng_key, year_key, value_key = cols.require(*self.roles)
        per_record = cols.has_all(SourceColumn.MEASURE_CODE, SourceColumn.MEASURE_NAME)
        if per_record:
            code_key, label_key = cols.require(SourceColumn.MEASURE_CODE, SourceColumn.MEASURE_NAME)
            fixed: Optional[Tuple[str, str]] = None
        else:
            fixed = cols.require(SourceColumn.SINGLE_MEASURE_CODE, SourceColumn.SINGLE_MEASURE_NAME)

        staged: List[_Observation] = []
        for i, record in enumerate(self._records(_read_text(stream))):
            if not isinstance(record, dict):
                raise MalformedInputError(f"Malformed JSON: record {i} is not an object")

            def field(key: str) -> Any:
                if key not in record:
                    raise MissingColumnError(f"Record {i} has no {key!r} field")
                return record[key]

            auth_code = _to_str(field(auth_key))
            name_eng = _to_str(field(eng_key))
            year = _to_int(field(year_key), f"year in record {i}")
            value = _to_float(field(value_key), f"value in record {i}")
            if fixed is None:
                measure_code, measure_label = _to_str(field(code_key)), _to_str(field(label_key))
            else:
                measure_code, measure_label = fixed
            measure_code = measure_code.lower()

            if not years.contains(year):
                continue
            if not measures.matches(measure_code):
                continue
            staged.append(_Observation(auth_code, name_eng, year, value, measure_code, measure_label))

        written = 0
        for obs in staged:
            if catalog.has_area(obs.auth_code):
                area = catalog.get_area(obs.auth_code)
                if area.matches(areas):
                    _upsert_value(area, obs.measure_code, obs.measure_label, obs.year, obs.value)
                    written += 1
                continue

            area = Area(obs.auth_code)
            area.set_name("eng", obs.name_eng)
            if not area.matches(areas):
                continue
            _upsert_value(area, obs.measure_code, obs.measure_label, obs.year, obs.value)
            catalog.set_area(obs.auth_code, area)
            written += 1

        logger.info("Imported %d of %d JSON observations", written, len(staged))
        return written


PARSERS: Dict[SourceDataType, Any] = {
    SourceDataType.AUTHORITY_CODE_CSV: AuthorityCodeParser(),
    SourceDataType.AUTHORITY_BY_YEAR_CSV: WideYearParser(),
    SourceDataType.WELSH_STATS_JSON: JsonRecordParser(),
}
