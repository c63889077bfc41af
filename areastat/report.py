from __future__ import annotations

"""
areastat reports
----------------
Two renderers for a populated Catalog:

- `render_text`: the plain tables printed by the CLI. Areas in code order,
  measures in code order, one header row of years and one row of values
  (six decimal places) followed by Average, Diff. and % Diff.
- `generate_docx_report`: a DOCX document with a table (and optionally a
  line chart) per measure. python-docx and matplotlib are imported lazily
  so the rest of areastat runs without them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple
import os
import tempfile

from .catalog import Catalog
from .models import Area, Measure


# -----------------------------
# Text tables
# -----------------------------

def _fmt(value: float) -> str:
    return f"{value:.6f}"


def render_measure(measure: Measure) -> str:
    """Label line, right-aligned header row, value row."""
    titles: List[str] = []
    cells: List[str] = []

    def _col(title: str, value: float) -> None:
        text = _fmt(value)
        width = max(len(text), len(title))
        titles.append(title.rjust(width))
        cells.append(text.rjust(width))

    for year, value in measure.items():
        _col(str(year), value)
    _col("Average", measure.average())
    _col("Diff.", measure.difference())
    _col("% Diff.", measure.difference_percent())

    return "\n".join([
        f"{measure.label} ({measure.code})",
        " ".join(titles),
        " ".join(cells),
    ]) + "\n"


def render_area(area: Area) -> str:
    lines = [f"{area.display_name()} ({area.code})"]
    if not area.measures:
        lines.append("<no measures>\n")
    else:
        for measure in area.iter_measures():
            lines.append(render_measure(measure))
    return "\n".join(lines) + "\n"


def render_text(catalog: Catalog) -> str:
    """All areas, ordered by authority code, separated by a blank line."""
    return "\n".join(render_area(area) for area in catalog)


# -----------------------------
# DOCX report
# -----------------------------

@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "areastat Report"
    subtitle: str = "Local authority statistics"
    # Codes of the datasets that were imported, listed in the summary
    datasets: List[str] = field(default_factory=list)
    # One line chart per measure with at least two years
    charts: bool = True
    # Optional: the command line that produced the catalog
    command_line: Optional[str] = None


def generate_docx_report(
    catalog: Catalog,
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """Write a DOCX report for every Area in `catalog` and return the path."""
    config = config or ReportConfig()

    # Lazy imports: only required when a DOCX report is requested.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    plt = None
    if config.charts:
        try:
            import matplotlib
            matplotlib.use("Agg")
            import matplotlib.pyplot as plt
            import numpy as np
        except ImportError as e:
            raise ImportError(
                "Missing dependency: matplotlib (and numpy).\n"
                "Install with: python -m pip install matplotlib numpy"
            ) from e

    if len(catalog) == 0:
        raise ValueError("No areas to report on (catalog is empty).")

    tmpdir = tempfile.mkdtemp(prefix="areastat_report_")

    def _chart(area: Area, measure: Measure) -> Optional[str]:
        if plt is None or measure.size() < 2:
            return None
        pairs = measure.items()
        x = np.asarray([y for y, _ in pairs])
        y = np.asarray([v for _, v in pairs])
        plt.figure()
        plt.plot(x, y, marker="o")
        plt.title(f"{measure.label} ({area.code})")
        plt.xlabel("Year")
        plt.ylabel(measure.label)
        plt.xticks(x, [str(v) for v in x], rotation=45, ha="right")
        path = os.path.join(tmpdir, f"{area.code}_{measure.code}.png")
        plt.tight_layout()
        plt.savefig(path, dpi=150)
        plt.close()
        return path

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Areas", str(len(catalog)))
    _kv("Measures", str(sum(area.size() for area in catalog)))
    if config.datasets:
        _kv("Datasets", ", ".join(config.datasets))
    years = sorted({y for area in catalog for m in area.measures.values() for y in m.values})
    if years:
        _kv("Year range", f"{years[0]} to {years[-1]}")

    for area in catalog:
        doc.add_heading(f"{area.display_name()} ({area.code})", level=1)
        if not area.measures:
            doc.add_paragraph("<no measures>")
            continue
        for measure in area.iter_measures():
            doc.add_heading(f"{measure.label} ({measure.code})", level=2)
            t = doc.add_table(rows=1, cols=2)
            t.rows[0].cells[0].text = "Year"
            t.rows[0].cells[1].text = "Value"
            rows: List[Tuple[str, float]] = [(str(y), v) for y, v in measure.items()]
            rows += [
                ("Average", measure.average()),
                ("Diff.", measure.difference()),
                ("% Diff.", measure.difference_percent()),
            ]
            for label, value in rows:
                r = t.add_row().cells
                r[0].text = label
                r[1].text = _fmt(value)
            path = _chart(area, measure)
            if path:
                doc.add_picture(path, width=Inches(6.0))

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    doc.add_paragraph("")
    doc.add_heading("Reproducibility footer", level=1)
    from . import __version__
    doc.add_paragraph(f"areastat version: {__version__}")
    doc.add_paragraph(f"Report generated at: {datetime.now().isoformat(timespec='seconds')}")
    if config.command_line:
        doc.add_paragraph(f"Command: {config.command_line}")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
