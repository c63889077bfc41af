from __future__ import annotations

import pytest

from areastat.columns import ColumnMapping, SourceColumn as C
from areastat.datasets import AREAS, DATASETS
from areastat.errors import InvalidArgumentError, MissingColumnError


def test_of_accepts_role_names() -> None:
    cols = ColumnMapping.of({"auth_code": "Code", C.VALUE: "Data"})

    assert cols.require(C.AUTH_CODE, C.VALUE) == ("Code", "Data")


def test_of_rejects_unknown_role() -> None:
    with pytest.raises(InvalidArgumentError):
        ColumnMapping.of({"colour": "Code"})


def test_require_names_missing_roles() -> None:
    with pytest.raises(MissingColumnError, match="YEAR"):
        ColumnMapping({C.AUTH_CODE: "Code"}).require(C.AUTH_CODE, C.YEAR)


def test_mapping_is_a_copy_of_the_callers_dict() -> None:
    source = {C.AUTH_CODE: "Code"}
    cols = ColumnMapping(source)
    source[C.YEAR] = "Year"

    assert C.YEAR not in cols
    with pytest.raises(TypeError):
        cols.columns[C.YEAR] = "Year"


def test_mappings_and_dataset_entries_are_hashable() -> None:
    assert hash(ColumnMapping({C.AUTH_CODE: "Code"})) == hash(ColumnMapping({C.AUTH_CODE: "Code"}))
    assert ColumnMapping({C.AUTH_CODE: "Code"}) == ColumnMapping({C.AUTH_CODE: "Code"})
    assert len({source for source in DATASETS} | {AREAS}) == len(DATASETS) + 1
