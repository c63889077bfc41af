from __future__ import annotations

import math

import pytest

from areastat.errors import InvalidArgumentError, NotFoundError
from areastat.filters import AreaFilter
from areastat.models import Area, Measure


def test_set_name_then_get_name_ignores_case() -> None:
    area = Area("W06000001")
    area.set_name("ENG", "Isle of Anglesey")
    area.set_name("cym", "Ynys Mon")

    assert area.get_name("eng") == "Isle of Anglesey"
    assert area.get_name("Eng") == "Isle of Anglesey"
    assert area.get_name("CYM") == "Ynys Mon"
    assert set(area.names) == {"eng", "cym"}


@pytest.mark.parametrize("lang", ["en", "engl", "e1g", "", "en-"])
def test_set_name_rejects_invalid_language_codes(lang: str) -> None:
    area = Area("W1")
    with pytest.raises(InvalidArgumentError):
        area.set_name(lang, "Name")


def test_get_name_missing_raises_not_found() -> None:
    with pytest.raises(NotFoundError):
        Area("W1").get_name("eng")


def test_measure_code_is_lowercased() -> None:
    m = Measure("POP", "Population")
    assert m.code == "pop"


def test_set_measure_merges_disjoint_years() -> None:
    area = Area("W1")
    first = Measure("pop", "Population")
    first.set_value(2000, 1.0)
    second = Measure("pop", "Population")
    second.set_value(2001, 2.0)

    assert area.set_measure("pop", first) is True
    assert area.set_measure("pop", second) is False

    merged = area.get_measure("pop")
    assert merged.years() == [2000, 2001]
    assert merged.get_value(2000) == 1.0
    assert merged.get_value(2001) == 2.0


def test_set_measure_overlapping_years_second_wins() -> None:
    area = Area("W1")
    area.set_measure("pop", Measure("pop", "Population", {2000: 1.0, 2001: 2.0}))
    area.set_measure("pop", Measure("pop", "Population v2", {2001: 20.0, 2002: 30.0}))

    m = area.get_measure("pop")
    assert m.values == {2000: 1.0, 2001: 20.0, 2002: 30.0}
    assert m.label == "Population v2"


def test_measure_lookup_is_case_insensitive() -> None:
    area = Area("W1")
    area.set_measure("Pop", Measure("Pop", "Population", {2000: 5.0}))

    assert area.get_measure("POP") is area.get_measure("pop")
    assert area.has_measure("pOp")
    with pytest.raises(NotFoundError):
        area.get_measure("dens")


def test_get_value_missing_year_raises_not_found() -> None:
    with pytest.raises(NotFoundError):
        Measure("pop", "Population").get_value(1999)


def test_statistics_on_small_measures_are_zero() -> None:
    empty = Measure("pop", "Population")
    single = Measure("pop", "Population", {2000: 42.0})

    assert empty.average() == 0
    assert single.difference() == 0
    assert single.difference_percent() == 0
    assert single.average() == 42.0


def test_statistics_use_first_and_last_year() -> None:
    # inserted out of order: first/last are chronological
    m = Measure("pop", "Population")
    m.set_value(2002, 150.0)
    m.set_value(2000, 100.0)
    m.set_value(2001, 50.0)

    assert m.average() == 100.0
    assert m.difference() == 50.0
    assert m.difference_percent() == 50.0


def test_difference_percent_with_zero_first_value() -> None:
    up = Measure("x", "X", {2000: 0.0, 2001: 5.0})
    down = Measure("x", "X", {2000: 0.0, 2001: -5.0})
    flat = Measure("x", "X", {2000: 0.0, 2001: 0.0})

    assert up.difference_percent() == math.inf
    assert down.difference_percent() == -math.inf
    assert math.isnan(flat.difference_percent())


def test_difference_percent_uses_absolute_first_value() -> None:
    m = Measure("x", "X", {2000: -10.0, 2001: -5.0})
    assert m.difference_percent() == 50.0


def test_measure_equality() -> None:
    a = Measure("pop", "Population", {2000: 1.0, 2001: 2.0})
    b = Measure("POP", "Population", {2001: 2.0, 2000: 1.0})
    c = Measure("pop", "Population", {2000: 1.0})
    d = Measure("pop", "Other", {2000: 1.0, 2001: 2.0})

    assert a == b
    assert a != c
    assert a != d


def test_area_equality_ignores_insertion_order() -> None:
    a = Area("W1")
    a.set_name("eng", "One")
    a.set_measure("pop", Measure("pop", "Population", {2000: 1.0}))
    a.set_measure("dens", Measure("dens", "Density", {2000: 2.0}))

    b = Area("W1")
    b.set_measure("dens", Measure("dens", "Density", {2000: 2.0}))
    b.set_measure("pop", Measure("pop", "Population", {2000: 1.0}))
    b.set_name("eng", "One")

    assert a == b
    b.set_name("cym", "Un")
    assert a != b


def test_area_merge_unions_names_and_measures() -> None:
    a = Area("W1")
    a.set_name("eng", "Old")
    a.set_measure("pop", Measure("pop", "Population", {2000: 1.0}))

    b = Area("W1")
    b.set_name("eng", "New")
    b.set_name("cym", "Newydd")
    b.set_measure("pop", Measure("pop", "Population", {2001: 2.0}))
    b.set_measure("dens", Measure("dens", "Density", {2001: 3.0}))

    a.merge(b)

    assert a.names == {"eng": "New", "cym": "Newydd"}
    assert a.get_measure("pop").values == {2000: 1.0, 2001: 2.0}
    assert a.get_measure("dens").values == {2001: 3.0}
    # merged measures are copies
    assert a.get_measure("dens") is not b.get_measure("dens")


def test_area_matches_filter_by_code_or_name() -> None:
    area = Area("W06000015")
    area.set_name("eng", "Cardiff")
    area.set_name("cym", "Caerdydd")

    assert area.matches(None)
    assert area.matches(AreaFilter.of([]))
    assert area.matches(AreaFilter.of(["w0600001"]))
    assert area.matches(AreaFilter.of(["CAERD"]))
    assert area.matches(AreaFilter.of(["swansea", "diff"]))
    assert not area.matches(AreaFilter.of(["swansea"]))


def test_area_to_dict_omits_empty_measures() -> None:
    area = Area("W1")
    area.set_name("eng", "One")
    assert area.to_dict() == {"names": {"eng": "One"}}

    area.set_measure("pop", Measure("pop", "Population", {2001: 2.0, 2000: 1.0}))
    assert area.to_dict()["measures"] == {"pop": {"2000": 1.0, "2001": 2.0}}
