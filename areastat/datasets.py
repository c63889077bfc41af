"""
Dataset registry
================

Known source files, the parser each one needs, and the column mapping for
its headers/keys. `AREAS` (the authority code file) is always imported
first: it is the only source of Welsh names, and the wide per-year files
only add values to areas it created.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Dict, List, Union

from .columns import ColumnMapping, SourceColumn as C, SourceDataType
from .errors import SourceOpenError


@dataclass(frozen=True)
class InputFileSource:
    name: str
    code: str
    file: str
    parser: SourceDataType
    cols: ColumnMapping = field(default_factory=ColumnMapping)


AREAS = InputFileSource(
    name="Areas",
    code="areas",
    file="areas.csv",
    parser=SourceDataType.AUTHORITY_CODE_CSV,
    cols=ColumnMapping({
        C.AUTH_CODE: "Local authority code",
        C.AUTH_NAME_ENG: "Name (eng)",
        C.AUTH_NAME_CYM: "Name (cym)",
    }),
)

POPDEN = InputFileSource(
    name="Population density",
    code="popden",
    file="popu1009.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols=ColumnMapping({
        C.AUTH_CODE: "Localauthority_Code",
        C.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
        C.MEASURE_CODE: "Measure_Code",
        C.MEASURE_NAME: "Measure_ItemName_ENG",
        C.YEAR: "Year_Code",
        C.VALUE: "Data",
    }),
)

BIZ = InputFileSource(
    name="Active Businesses",
    code="biz",
    file="econ0080.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols=ColumnMapping({
        C.AUTH_CODE: "Area_Code",
        C.AUTH_NAME_ENG: "Area_ItemName_ENG",
        C.MEASURE_CODE: "Variable_Code",
        C.MEASURE_NAME: "Variable_ItemName_ENG",
        C.YEAR: "Year_Code",
        C.VALUE: "Data",
    }),
)

AQI = InputFileSource(
    name="Air Quality Indicators",
    code="aqi",
    file="envi0201.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols=ColumnMapping({
        C.AUTH_CODE: "Area_Code",
        C.AUTH_NAME_ENG: "Area_ItemName_ENG",
        C.MEASURE_CODE: "Pollutant_ItemName_ENG",
        C.MEASURE_NAME: "Pollutant_ItemName_ENG",
        C.YEAR: "Year_Code",
        C.VALUE: "Data",
    }),
)

TRAINS = InputFileSource(
    name="Rail passenger journeys",
    code="trains",
    file="tran0152.json",
    parser=SourceDataType.WELSH_STATS_JSON,
    cols=ColumnMapping({
        C.AUTH_CODE: "LocalAuthority_Code",
        C.AUTH_NAME_ENG: "LocalAuthority_ItemName_ENG",
        C.YEAR: "Year_Code",
        C.VALUE: "Data",
        C.SINGLE_MEASURE_CODE: "rail",
        C.SINGLE_MEASURE_NAME: "Rail passenger journeys",
    }),
)


def _complete_popu(code: str, suffix: str, measure: str, label: str) -> InputFileSource:
    return InputFileSource(
        name=f"{label} (complete)",
        code=code,
        file=f"complete-popu1009-{suffix}.csv",
        parser=SourceDataType.AUTHORITY_BY_YEAR_CSV,
        cols=ColumnMapping({
            C.AUTH_CODE: "AuthorityCode",
            C.SINGLE_MEASURE_CODE: measure,
            C.SINGLE_MEASURE_NAME: label,
        }),
    )


COMPLETE_AREA = _complete_popu("complete-area", "area", "area", "Land area")
COMPLETE_POP = _complete_popu("complete-pop", "pop", "pop", "Population")
COMPLETE_POPDEN = _complete_popu("complete-popden", "popden", "dens", "Population density")

DATASETS: List[InputFileSource] = [
    POPDEN,
    BIZ,
    AQI,
    TRAINS,
    COMPLETE_AREA,
    COMPLETE_POP,
    COMPLETE_POPDEN,
]

DATASETS_BY_CODE: Dict[str, InputFileSource] = {d.code: d for d in DATASETS}


def open_input(path: Union[str, Path]) -> IO[bytes]:
    """Open a dataset file for reading; the caller closes it."""
    try:
        return open(path, "rb")
    except OSError as e:
        raise SourceOpenError(f"Failed to open file {path}: {e.strerror}") from e
