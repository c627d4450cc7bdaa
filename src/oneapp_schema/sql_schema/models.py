"""Immutable schema model produced by the DDL parser."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator


@dataclass(frozen=True)
class Field:
    """One column of a parsed table."""
    name: str
    type: str  # normalized display label, not the raw SQL token
    required: bool = False
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "required": self.required,
        }
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class Table:
    """Parsed CREATE TABLE statement."""
    name: str
    fields: tuple[Field, ...] = ()

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Field | None:
        return next((f for f in self.fields if f.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass(frozen=True)
class SchemaDocument:
    """Tables in the order they appear in the source text."""
    tables: tuple[Table, ...] = ()

    def __iter__(self) -> Iterator[Table]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    @property
    def is_empty(self) -> bool:
        return not self.tables

    @property
    def table_names(self) -> list[str]:
        return [t.name for t in self.tables]

    def get_table(self, name: str) -> Table | None:
        """Return the first table with the given name."""
        return next((t for t in self.tables if t.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        return {"tables": [t.to_dict() for t in self.tables]}


class DiagnosticKind(str, Enum):
    """Reasons a piece of input contributed nothing to the document."""
    CONSTRAINT = "constraint"
    UNRECOGNIZED_CLAUSE = "unrecognized_clause"
    UNTERMINATED_STATEMENT = "unterminated_statement"
    UNBALANCED_PARENTHESES = "unbalanced_parentheses"
    EMPTY_TABLE = "empty_table"


@dataclass(frozen=True)
class Diagnostic:
    """A skipped statement, clause or table."""
    kind: DiagnosticKind
    message: str
    table: str | None = None
    text: str | None = None
    line: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "table": self.table,
            "text": self.text,
            "line": self.line,
        }


@dataclass(frozen=True)
class ParseResult:
    """Schema document plus the diagnostics collected while parsing it."""
    document: SchemaDocument
    diagnostics: tuple[Diagnostic, ...] = ()

    def diagnostics_of(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

    @property
    def has_problems(self) -> bool:
        """True when something other than a table constraint was skipped."""
        return any(d.kind is not DiagnosticKind.CONSTRAINT for d in self.diagnostics)

    def to_dict(self) -> dict[str, Any]:
        data = self.document.to_dict()
        data["diagnostics"] = [d.to_dict() for d in self.diagnostics]
        return data
