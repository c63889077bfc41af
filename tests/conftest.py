from __future__ import annotations

import io

import pytest

from areastat.catalog import Catalog
from areastat.columns import ColumnMapping, SourceColumn as C, SourceDataType

AREAS_CSV = (
    "Local authority code,Name (eng),Name (cym)\n"
    "W1,Isle of Anglesey,Ynys Mon\n"
    "W2,Gwynedd,Gwynedd\n"
    "W3,Cardiff,Caerdydd\n"
)

AREAS_COLS = ColumnMapping({
    C.AUTH_CODE: "Local authority code",
    C.AUTH_NAME_ENG: "Name (eng)",
    C.AUTH_NAME_CYM: "Name (cym)",
})

WIDE_CSV = (
    "AuthorityCode,1999,2000,2001,2002,2003\n"
    "W1,1.0,2.0,3.0,4.0,5.0\n"
    "W2,10,20,30,40,50\n"
    "W9,7,7,7,7,7\n"
)

WIDE_COLS = ColumnMapping({
    C.AUTH_CODE: "AuthorityCode",
    C.SINGLE_MEASURE_CODE: "Pop",
    C.SINGLE_MEASURE_NAME: "Population",
})

JSON_COLS = ColumnMapping({
    C.AUTH_CODE: "Localauthority_Code",
    C.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
    C.MEASURE_CODE: "Measure_Code",
    C.MEASURE_NAME: "Measure_ItemName_ENG",
    C.YEAR: "Year_Code",
    C.VALUE: "Data",
})


def record(code: str, name: str, measure: str, label: str, year, value) -> dict:
    return {
        "Localauthority_Code": code,
        "Localauthority_ItemName_ENG": name,
        "Measure_Code": measure,
        "Measure_ItemName_ENG": label,
        "Year_Code": year,
        "Data": value,
    }


@pytest.fixture
def catalog() -> Catalog:
    """A Catalog holding W1, W2 and W3 from the authority code file."""
    c = Catalog()
    c.populate(io.StringIO(AREAS_CSV), SourceDataType.AUTHORITY_CODE_CSV, AREAS_COLS)
    return c
