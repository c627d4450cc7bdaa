"""Exceptions raised outside the parser.

The parser itself never raises; these cover loading schema files and
rendering parsed schemas.
"""
from __future__ import annotations

from pathlib import Path


class SchemaError(Exception):
    """Base class for oneapp-schema errors."""


class SchemaFileNotFoundError(SchemaError):
    """No candidate schema file could be read."""

    def __init__(self, tried: list[Path]):
        self.tried = list(tried)
        super().__init__("Schema file not found in any expected location")


class UnsupportedDialectError(SchemaError, ValueError):
    """Requested SQL dialect is unknown to sqlglot."""

    def __init__(self, dialect: str):
        self.dialect = dialect
        super().__init__(f"Unsupported SQL dialect: {dialect}")


class UnsupportedFormatError(SchemaError, ValueError):
    """Requested export format is not one of the supported ones."""

    def __init__(self, fmt: str, supported: tuple[str, ...]):
        self.format = fmt
        self.supported = supported
        super().__init__(f"Unsupported export format: {fmt} (expected one of {', '.join(supported)})")
