"""PostgreSQL CREATE TABLE parser.

Turns a block of DDL into a SchemaDocument without a database
connection. Parsing is best-effort: statements, clauses or columns that
are not recognized are left out of the result (and reported as
diagnostics) instead of raising.

Pipeline:
    extract_statements -> split_fields -> classify_field -> parse_schema
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import NamedTuple

from .lexer import (
    RegionKind,
    line_number,
    mask_sql,
    scan_regions,
    strip_comments,
    unquote_identifier,
)
from .models import (
    Diagnostic,
    DiagnosticKind,
    Field,
    ParseResult,
    SchemaDocument,
    Table,
)

logger = logging.getLogger(__name__)

PRIMARY_KEY_DESCRIPTION = "Primary key"

_IDENTIFIER = r'(?:"[^"]*"|[^\W\d][\w$]*)'

_CREATE_TABLE_RE = re.compile(
    r'\bCREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?'
    rf'(?:{_IDENTIFIER}\s*\.\s*)?'
    rf'({_IDENTIFIER})\s*\(',
    re.IGNORECASE
)
_TERMINATOR_RE = re.compile(r'\s*;')

_TABLE_CONSTRAINT_RE = re.compile(
    r'(?:PRIMARY\s+KEY|FOREIGN\s+KEY|UNIQUE|CHECK|CONSTRAINT|LIKE)\b|EXCLUDE(?:\s+USING\b|\s*\()',
    re.IGNORECASE
)
_COLUMN_NAME_RE = re.compile(r'("(?:[^"]|"")*"|[^\W\d][\w$]*)\s+')
_TYPE_START_RE = re.compile(r'[^\W\d]|"')
# First keyword after the type that starts a column constraint
_TYPE_END_RE = re.compile(
    r'\b(?:NOT|NULL|DEFAULT|PRIMARY|UNIQUE|CHECK|REFERENCES|CONSTRAINT|'
    r'GENERATED|COLLATE|DEFERRABLE|INITIALLY)\b',
    re.IGNORECASE
)
_NOT_NULL_RE = re.compile(r'\bNOT\s+NULL\b', re.IGNORECASE)
_DEFAULT_RE = re.compile(r'\bDEFAULT\b', re.IGNORECASE)
_PRIMARY_KEY_RE = re.compile(r'\bPRIMARY\s+KEY\b', re.IGNORECASE)
_TYPE_PARAMS_RE = re.compile(r'\s*\([^)]*\)')


# ============================================================================
# Type Normalization
# ============================================================================

# Ordered (matcher, label) rules; the first match wins. A label may use
# groups captured by its matcher.
TYPE_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r'(?:character\s+varying|varchar)\s*\(\s*(\d+)\s*\)', re.IGNORECASE), r'VARCHAR(\1)'),
    (re.compile(r'character\s+varying', re.IGNORECASE), 'VARCHAR'),
    (re.compile(r'\[\s*\d*\s*\]|\bARRAY\b', re.IGNORECASE), 'ARRAY'),
    (re.compile(r'jsonb', re.IGNORECASE), 'JSONB'),
    (re.compile(r'timestamp(?:\s*\(\s*\d+\s*\))?\s+with\s+time\s+zone|timestamptz', re.IGNORECASE),
     'TIMESTAMP WITH TIME ZONE'),
    (re.compile(r'timestamp', re.IGNORECASE), 'TIMESTAMP'),
    (re.compile(r'bigint', re.IGNORECASE), 'BIGINT'),
    (re.compile(r'boolean', re.IGNORECASE), 'BOOLEAN'),
    (re.compile(r'uuid', re.IGNORECASE), 'UUID'),
    (re.compile(r'numeric', re.IGNORECASE), 'NUMERIC'),
    (re.compile(r'text', re.IGNORECASE), 'TEXT'),
)


def normalize_type(raw_type: str) -> str:
    """Map a raw SQL type to its display label.

    Types no rule recognizes are upper-cased with their parameter list
    removed, e.g. "double precision" -> "DOUBLE PRECISION",
    "time(3)" -> "TIME".
    """
    raw_type = " ".join(raw_type.split())
    for matcher, label in TYPE_RULES:
        match = matcher.search(raw_type)
        if match:
            return match.expand(label)
    return " ".join(_TYPE_PARAMS_RE.sub(" ", raw_type).split()).upper()


# ============================================================================
# Statement Extraction
# ============================================================================

class CreateTableStatement(NamedTuple):
    """A CREATE TABLE block found in the source text."""
    name: str
    body: str
    line: int = 1  # line of the opening parenthesis


def extract_statements(
    sql: str,
    diagnostics: list[Diagnostic] | None = None
) -> list[CreateTableStatement]:
    """Find every terminated CREATE TABLE statement in source order.

    The optional schema qualifier is discarded. Statements inside comments
    or string literals are ignored; statements with unbalanced parentheses
    or no terminating semicolon are skipped.

    Args:
        sql: Arbitrary SQL text
        diagnostics: Optional list that receives skipped-statement records

    Returns:
        List of CreateTableStatement
    """
    statements = []
    masked = mask_sql(sql)
    pos = 0

    while True:
        match = _CREATE_TABLE_RE.search(masked, pos)
        if not match:
            break

        name = unquote_identifier(sql[match.start(1):match.end(1)])
        open_idx = match.end() - 1
        line = line_number(sql, match.start())

        close_idx = _find_closing_paren(masked, open_idx)
        if close_idx == -1:
            _record(diagnostics, DiagnosticKind.UNBALANCED_PARENTHESES,
                    f"CREATE TABLE {name} has no closing parenthesis", table=name, line=line)
            pos = match.end()
            continue

        terminator = _TERMINATOR_RE.match(masked, close_idx + 1)
        if not terminator:
            _record(diagnostics, DiagnosticKind.UNTERMINATED_STATEMENT,
                    f"CREATE TABLE {name} is not terminated by ';'", table=name, line=line)
            pos = match.end()
            continue

        statements.append(CreateTableStatement(
            name=name,
            body=sql[open_idx + 1:close_idx],
            line=line_number(sql, open_idx)
        ))
        pos = terminator.end()

    return statements


def extract_create_tables(sql: str) -> list[tuple[str, str]]:
    """Return (table_name, body) pairs for each CREATE TABLE statement."""
    return [(stmt.name, stmt.body) for stmt in extract_statements(sql)]


# ============================================================================
# Field Splitting
# ============================================================================

def split_fields(body: str) -> list[str]:
    """Split a table body into its top-level clauses.

    Commas only separate clauses outside parentheses, so "numeric(10,2)"
    or "CHECK (status IN ('a','b'))" stay whole. Comment-only lines are
    dropped. A "--" comment trailing a clause on the same line is kept at
    the end of that clause as " -- <text>".
    """
    return [clause for clause, _ in _split_clauses(body)]


def _split_clauses(body: str) -> list[tuple[str, int]]:
    """Split a table body, returning (clause, offset in body) pairs."""
    regions = scan_regions(body)
    masked = mask_sql(body, regions)
    plain = strip_comments(body, regions)

    spans = []
    depth = 0
    start = 0
    for i, char in enumerate(masked):
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
        elif char == ',' and depth == 0:
            spans.append((start, i))
            start = i + 1
    spans.append((start, len(body)))

    trailing: dict[int, list[str]] = {}
    for region in regions:
        if region.kind is not RegionKind.LINE_COMMENT:
            continue
        owner = _comment_owner(masked, region.start, spans)
        if owner is None:
            continue
        text = body[region.start + 2:region.end].strip()
        if text:
            trailing.setdefault(owner, []).append(text)

    clauses = []
    for idx, (span_start, span_end) in enumerate(spans):
        code = plain[span_start:span_end]
        stripped = code.strip()
        if not stripped:
            continue
        offset = span_start + (len(code) - len(code.lstrip()))
        if idx in trailing:
            stripped = f"{stripped} -- {' '.join(trailing[idx])}"
        clauses.append((stripped, offset))

    return clauses


def _comment_owner(masked: str, comment_start: int, spans: list[tuple[int, int]]) -> int | None:
    """Index of the clause a line comment trails, or None for own-line comments."""
    line_start = masked.rfind('\n', 0, comment_start) + 1
    before = masked[line_start:comment_start].rstrip()
    if not before:
        return None
    last = line_start + len(before) - 1
    for idx, (start, end) in enumerate(spans):
        # end is the separating comma, which still belongs to its clause
        if start <= last <= end:
            return idx
    return None


# ============================================================================
# Field Classification
# ============================================================================

def classify_field(clause: str) -> Field | None:
    """Parse one clause as a column definition.

    Returns:
        Field, or None for table constraints and unrecognized clauses
    """
    field, _ = _classify(clause)
    return field


def is_table_constraint(clause: str) -> bool:
    """True if the clause is a table-level constraint rather than a column."""
    return bool(_TABLE_CONSTRAINT_RE.match(mask_sql(clause).lstrip()))


def _classify(clause: str) -> tuple[Field | None, tuple[DiagnosticKind, str] | None]:
    regions = scan_regions(clause)
    comment = next((r for r in regions if r.kind is RegionKind.LINE_COMMENT), None)

    description = None
    code_end = len(clause)
    if comment:
        code_end = comment.start
        description = clause[comment.start + 2:comment.end].strip() or None

    masked = mask_sql(clause, regions)[:code_end]
    plain = strip_comments(clause, regions)[:code_end]
    lead = len(masked) - len(masked.lstrip())
    masked = masked[lead:].rstrip()
    plain = plain[lead:lead + len(masked)]

    if not masked:
        return None, (DiagnosticKind.UNRECOGNIZED_CLAUSE, "empty clause")

    if _TABLE_CONSTRAINT_RE.match(masked):
        return None, (DiagnosticKind.CONSTRAINT, "table-level constraint")

    name_match = _COLUMN_NAME_RE.match(plain)
    if not name_match:
        return None, (DiagnosticKind.UNRECOGNIZED_CLAUSE, "no column name and type")

    name = unquote_identifier(name_match.group(1))
    rest_start = name_match.end()
    type_end = _TYPE_END_RE.search(masked, rest_start)
    raw_type = plain[rest_start:type_end.start() if type_end else len(plain)].strip()

    if not name or not raw_type or not _TYPE_START_RE.match(raw_type):
        return None, (DiagnosticKind.UNRECOGNIZED_CLAUSE, "no column type")

    not_null = _NOT_NULL_RE.search(masked)
    required = bool(not_null) and not _DEFAULT_RE.search(masked, 0, not_null.start())

    is_primary_key = name == "id" or bool(_PRIMARY_KEY_RE.search(masked))
    if is_primary_key:
        required = True
        if description is None:
            description = PRIMARY_KEY_DESCRIPTION

    field = Field(
        name=name,
        type=normalize_type(raw_type),
        required=required,
        description=description
    )
    logger.debug(f"Classified column {field.name}: {raw_type!r} -> {field.type} (required={field.required})")
    return field, None


# ============================================================================
# Schema Assembly
# ============================================================================

def parse_schema_with_diagnostics(sql: str) -> ParseResult:
    """Parse CREATE TABLE statements and report everything that was skipped.

    Never raises for string input. Tables whose clauses produce no column
    are dropped from the document.

    Args:
        sql: SQL text containing zero or more CREATE TABLE statements

    Returns:
        ParseResult with the SchemaDocument and its diagnostics
    """
    if not isinstance(sql, str) or not sql.strip():
        return ParseResult(document=SchemaDocument())

    diagnostics: list[Diagnostic] = []
    tables = []

    for stmt in extract_statements(sql, diagnostics):
        fields = []
        try:
            for clause, offset in _split_clauses(stmt.body):
                line = stmt.line + stmt.body.count('\n', 0, offset)
                try:
                    field, skipped = _classify(clause)
                except Exception as e:
                    logger.debug(f"Failed to classify clause in {stmt.name}: {e}")
                    field, skipped = None, (DiagnosticKind.UNRECOGNIZED_CLAUSE, str(e))

                if field:
                    fields.append(field)
                else:
                    kind, reason = skipped
                    _record(diagnostics, kind, reason, table=stmt.name, text=clause, line=line)

        except Exception as e:
            logger.debug(f"Failed to split body of {stmt.name}: {e}")
            _record(diagnostics, DiagnosticKind.UNRECOGNIZED_CLAUSE, str(e), table=stmt.name, line=stmt.line)

        if not fields:
            _record(diagnostics, DiagnosticKind.EMPTY_TABLE,
                    f"CREATE TABLE {stmt.name} has no column definitions", table=stmt.name, line=stmt.line)
            continue

        tables.append(Table(name=stmt.name, fields=tuple(fields)))

    logger.debug(f"Parsed {len(tables)} table(s) with {len(diagnostics)} diagnostic(s)")

    return ParseResult(
        document=SchemaDocument(tables=tuple(tables)),
        diagnostics=tuple(diagnostics)
    )


def parse_schema(sql: str) -> SchemaDocument:
    """Parse CREATE TABLE statements into a SchemaDocument."""
    return parse_schema_with_diagnostics(sql).document


@lru_cache(maxsize=128)
def parse_schema_cached(sql: str) -> SchemaDocument:
    """Memoized parse_schema; results are immutable and safe to share."""
    return parse_schema(sql)


# ============================================================================
# Helper Functions
# ============================================================================

def _find_closing_paren(masked: str, start: int) -> int:
    """Position of the parenthesis closing the one at start, or -1.

    Expects masked text, so quotes and comments need no handling here.
    """
    depth = 0
    for i in range(start, len(masked)):
        char = masked[i]
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return i
    return -1


def _record(
    diagnostics: list[Diagnostic] | None,
    kind: DiagnosticKind,
    message: str,
    table: str | None = None,
    text: str | None = None,
    line: int | None = None
) -> None:
    if diagnostics is None:
        return
    diagnostics.append(Diagnostic(kind=kind, message=message, table=table, text=text, line=line))
