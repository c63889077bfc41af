from __future__ import annotations

import io

import pytest

from areastat.catalog import Catalog
from areastat.columns import SourceDataType
from areastat.models import Area, Measure
from areastat.report import ReportConfig, generate_docx_report, render_measure, render_text

from conftest import WIDE_COLS, WIDE_CSV


def test_render_measure_columns_line_up() -> None:
    m = Measure("pop", "Population", {1991: 69123.0, 1992: 69379.0})
    lines = render_measure(m).splitlines()

    assert lines[0] == "Population (pop)"
    header, values = lines[1], lines[2]
    assert header.split() == ["1991", "1992", "Average", "Diff.", "%", "Diff."]
    assert values.split()[:4] == ["69123.000000", "69379.000000", "69251.000000", "256.000000"]
    assert len(header) == len(values)


def test_render_text_names_and_empty_areas() -> None:
    catalog = Catalog()
    both = Area("W1")
    both.set_name("eng", "Cardiff")
    both.set_name("cym", "Caerdydd")
    catalog.set_area("W1", both)
    catalog.set_area("W2", Area("W2"))

    text = render_text(catalog)

    assert text.startswith("Cardiff / Caerdydd (W1)\n<no measures>\n")
    assert "Unnamed (W2)\n<no measures>\n" in text


def test_render_text_orders_measures_by_code() -> None:
    area = Area("W1")
    area.set_name("eng", "One")
    area.set_measure("pop", Measure("pop", "Population", {2000: 1.0}))
    area.set_measure("area", Measure("area", "Land area", {2000: 2.0}))
    catalog = Catalog()
    catalog.set_area("W1", area)

    text = render_text(catalog)

    assert text.index("Land area (area)") < text.index("Population (pop)")


def test_docx_report_is_written(catalog: Catalog, tmp_path) -> None:
    pytest.importorskip("docx")
    catalog.populate(io.StringIO(WIDE_CSV), SourceDataType.AUTHORITY_BY_YEAR_CSV, WIDE_COLS)
    out = tmp_path / "reports" / "areas.docx"

    path = generate_docx_report(catalog, str(out), config=ReportConfig(charts=False, datasets=["pop"]))

    assert path == str(out)
    assert out.exists() and out.stat().st_size > 0


def test_docx_report_rejects_empty_catalog(tmp_path) -> None:
    pytest.importorskip("docx")
    with pytest.raises(ValueError):
        generate_docx_report(Catalog(), str(tmp_path / "x.docx"), config=ReportConfig(charts=False))
