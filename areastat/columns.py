"""
Column roles
============

Source files name their columns differently (`Localauthority_Code`,
`AuthorityCode`, ...). Parsers never hardcode header text: they ask a
`ColumnMapping` for the header/key that plays a given *role* in this file.

`SourceDataType` tags which parser understands a file.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from .errors import InvalidArgumentError, MissingColumnError


class SourceColumn(Enum):
    AUTH_CODE = "AUTH_CODE"
    AUTH_NAME_ENG = "AUTH_NAME_ENG"
    AUTH_NAME_CYM = "AUTH_NAME_CYM"
    YEAR = "YEAR"
    VALUE = "VALUE"
    MEASURE_CODE = "MEASURE_CODE"
    MEASURE_NAME = "MEASURE_NAME"
    SINGLE_MEASURE_CODE = "SINGLE_MEASURE_CODE"
    SINGLE_MEASURE_NAME = "SINGLE_MEASURE_NAME"


class SourceDataType(Enum):
    AUTHORITY_CODE_CSV = "authority_code_csv"
    AUTHORITY_BY_YEAR_CSV = "authority_by_year_csv"
    WELSH_STATS_JSON = "welsh_stats_json"


@dataclass(frozen=True)
class ColumnMapping:
    """Read-only role -> header text table for one source file."""
    columns: Mapping[SourceColumn, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only copy: later edits to the caller's dict do not show through
        object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))

    def __hash__(self) -> int:
        return hash(frozenset(self.columns.items()))

    @classmethod
    def of(cls, columns: Union["ColumnMapping", Mapping[Union[SourceColumn, str], str]]) -> "ColumnMapping":
        """Build from a mapping keyed by `SourceColumn` or by role name."""
        if isinstance(columns, ColumnMapping):
            return columns
        out: Dict[SourceColumn, str] = {}
        for role, header in columns.items():
            if isinstance(role, SourceColumn):
                key = role
            else:
                try:
                    key = SourceColumn[str(role).upper()]
                except KeyError:
                    raise InvalidArgumentError(f"Unknown column role: {role!r}") from None
            out[key] = header
        return cls(out)

    def __contains__(self, role: SourceColumn) -> bool:
        return role in self.columns

    def __len__(self) -> int:
        return len(self.columns)

    def get(self, role: SourceColumn) -> Optional[str]:
        return self.columns.get(role)

    def has_all(self, *roles: SourceColumn) -> bool:
        return all(r in self.columns for r in roles)

    def require(self, *roles: SourceColumn) -> Tuple[str, ...]:
        """Return the header text for each role, or raise MissingColumnError."""
        missing = [r.name for r in roles if r not in self.columns]
        if missing:
            raise MissingColumnError(
                f"Not enough entries in column mapping. Expected {len(roles)} "
                f"entries but only found {len(roles) - len(missing)} "
                f"(missing: {', '.join(missing)})"
            )
        return tuple(self.columns[r] for r in roles)
