"""
Error types
===========

Every failure raised by areastat derives from `AreastatError`, so callers
(the CLI in particular) can catch one family and report it.

- MalformedInputError: the source text does not have the expected shape.
- MissingColumnError: a column role (or JSON key) needed for a file is absent.
- NotFoundError: a direct lookup (area, measure, name, year) missed.
- InvalidArgumentError: a caller passed a bad value (e.g. language code).
- SourceOpenError: a dataset file could not be opened.
"""

from __future__ import annotations


class AreastatError(Exception):
    """Base class for all areastat errors."""


class MalformedInputError(AreastatError, ValueError):
    pass


class MissingColumnError(AreastatError, LookupError):
    pass


class NotFoundError(AreastatError, LookupError):
    pass


class InvalidArgumentError(AreastatError, ValueError):
    pass


class SourceOpenError(AreastatError, OSError):
    pass
