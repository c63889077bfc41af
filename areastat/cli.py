"""
areastat Command Line Interface (CLI)
=====================================

Run it like:

    python -m areastat.cli --dir datasets -d popden,trains -a W06000011 -y 2010-2015

Steps:
1) Parse arguments into a dataset list and three import filters
2) Import the authority code file (areas.csv) - failure here ends the run
3) Import each requested dataset - a failing dataset is reported and skipped
4) Print the catalog as tables, or as JSON with --json
   (and optionally write a DOCX report with --docx)

The CLI never writes to the dataset files.
"""

from __future__ import annotations
import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Set

from .catalog import Catalog
from .datasets import AREAS, DATASETS, DATASETS_BY_CODE, InputFileSource, open_input
from .errors import AreastatError, InvalidArgumentError
from .filters import AreaFilter, MeasureFilter, YearRange
from .report import ReportConfig, generate_docx_report, render_text

logger = logging.getLogger(__name__)

_SINGLE_YEAR_RE = re.compile(r"^([0-9]{4})$")
_YEAR_RANGE_RE = re.compile(r"^([0-9]{4})-([0-9]{4})$")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="areastat",
        description="Import and merge local authority statistics files.",
    )
    ap.add_argument("--dir", default="datasets", help="Directory holding the dataset files")
    ap.add_argument("-d", "--datasets", action="append",
                    help="Dataset code(s) to import, comma-separated (omit or 'all' for every dataset)")
    ap.add_argument("-a", "--areas", action="append",
                    help="Area code(s) or name fragments to keep, comma-separated (omit or 'all' for every area)")
    ap.add_argument("-m", "--measures", action="append",
                    help="Measure code(s) to keep, comma-separated (omit or 'all' for every measure)")
    ap.add_argument("-y", "--years", default="0",
                    help="A year (YYYY) or inclusive range (YYYY-ZZZZ); 0 for every year")
    ap.add_argument("-j", "--json", action="store_true", help="Print JSON instead of tables")
    ap.add_argument("--docx", metavar="PATH", help="Also write a DOCX report to PATH")
    ap.add_argument("-v", "--verbose", action="count", default=0,
                    help="Log progress (-v info, -vv debug)")
    return ap


# ---------------- Argument helpers ----------------
def _split(values: Optional[Iterable[str]]) -> List[str]:
    """Flatten repeated and comma-separated option values."""
    out: List[str] = []
    for v in values or []:
        out.extend(p.strip() for p in v.split(",") if p.strip())
    return out


def _is_all(values: List[str]) -> bool:
    return any(v.lower() == "all" for v in values)


def parse_datasets_arg(values: Optional[Iterable[str]]) -> List[InputFileSource]:
    """Dataset codes -> registry entries; nothing or 'all' selects every dataset."""
    codes = _split(values)
    if not codes or _is_all(codes):
        return list(DATASETS)
    out: List[InputFileSource] = []
    for code in codes:
        source = DATASETS_BY_CODE.get(code)
        if source is None:
            raise InvalidArgumentError(f"No dataset matches key: {code}")
        out.append(source)
    return out


def parse_areas_arg(values: Optional[Iterable[str]]) -> Set[str]:
    """Area filter terms; an empty set means every area."""
    terms = _split(values)
    return set() if _is_all(terms) else set(terms)


def parse_measures_arg(values: Optional[Iterable[str]]) -> Set[str]:
    """Measure filter terms; an empty set means every measure."""
    terms = _split(values)
    return set() if _is_all(terms) else set(terms)


def parse_years_arg(text: Optional[str]) -> YearRange:
    if text is None or text in ("0", "0-0"):
        return YearRange()
    m = _SINGLE_YEAR_RE.match(text)
    if m:
        y = int(m.group(1))
        return YearRange(y, y)
    m = _YEAR_RANGE_RE.match(text)
    if m:
        return YearRange(int(m.group(1)), int(m.group(2)))
    raise InvalidArgumentError("Invalid input for years argument")


# ---------------- Import ----------------
def load_areas(catalog: Catalog, directory: Path, areas_filter: AreaFilter) -> None:
    """Import the authority code file. Errors propagate: the run cannot continue."""
    with open_input(directory / AREAS.file) as f:
        catalog.populate(f, AREAS.parser, AREAS.cols, areas_filter)


def load_datasets(
    catalog: Catalog,
    directory: Path,
    datasets: List[InputFileSource],
    areas_filter: AreaFilter,
    measures_filter: MeasureFilter,
    years_filter: YearRange,
) -> List[str]:
    """Import each dataset, reporting and skipping any that fail.

    Returns the codes of the datasets that imported.
    """
    loaded: List[str] = []
    for source in datasets:
        try:
            with open_input(directory / source.file) as f:
                catalog.populate(f, source.parser, source.cols,
                                 areas_filter, measures_filter, years_filter)
        except AreastatError as e:
            print(f"Error importing dataset:\n{e}", file=sys.stderr)
            continue
        logger.info("Imported dataset %s", source.code)
        loaded.append(source.code)
    return loaded


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the areastat CLI."""
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")

    try:
        datasets = parse_datasets_arg(args.datasets)
        areas_filter = AreaFilter.of(parse_areas_arg(args.areas))
        measures_filter = MeasureFilter.of(parse_measures_arg(args.measures))
        years_filter = parse_years_arg(args.years)
    except InvalidArgumentError as e:
        print(e, file=sys.stderr)
        return 1

    directory = Path(args.dir)
    catalog = Catalog()
    try:
        load_areas(catalog, directory, areas_filter)
    except AreastatError as e:
        print(f"Error importing dataset:\n{e}", file=sys.stderr)
        return 1

    loaded = load_datasets(catalog, directory, datasets,
                           areas_filter, measures_filter, years_filter)

    if args.json:
        print(catalog.to_json())
    else:
        print(render_text(catalog), end="")

    if args.docx:
        if len(catalog) == 0:
            print("Nothing to report: no areas were imported.", file=sys.stderr)
        else:
            cfg = ReportConfig(datasets=loaded, command_line=" ".join(argv if argv is not None else sys.argv[1:]))
            generate_docx_report(catalog, args.docx, config=cfg)
            print(f"Report written to {args.docx}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
