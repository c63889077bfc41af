"""
areastat package
================

Imports local authority statistics from several file formats and merges
them into one Catalog -> Area -> Measure hierarchy.

- The CLI entry point is in `areastat/cli.py`.
- The Catalog (upsert + populate + JSON) is in `areastat/catalog.py`.
- Source parsers are in `areastat/loader.py`.
- Measure/Area are in `areastat/models.py`.
"""

__version__ = '0.1.0'

from .catalog import Catalog
from .columns import ColumnMapping, SourceColumn, SourceDataType
from .errors import (
    AreastatError,
    InvalidArgumentError,
    MalformedInputError,
    MissingColumnError,
    NotFoundError,
)
from .filters import AreaFilter, MeasureFilter, YearRange
from .models import Area, Measure
