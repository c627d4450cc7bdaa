"""SQL Schema module.

Provides handling for PostgreSQL schema files:
- Parse CREATE TABLE statements into an immutable schema model
- Report skipped statements and clauses as diagnostics
- Re-emit the parsed schema as SQL (optionally transpiled), CSV or JSON
- Locate and read the schema file served by the dashboard
"""
from __future__ import annotations

from .models import (
    Field,
    Table,
    SchemaDocument,
    Diagnostic,
    DiagnosticKind,
    ParseResult,
)

from .parser import (
    CreateTableStatement,
    TYPE_RULES,
    extract_statements,
    extract_create_tables,
    split_fields,
    classify_field,
    is_table_constraint,
    normalize_type,
    parse_schema,
    parse_schema_cached,
    parse_schema_with_diagnostics,
)

from .generator import (
    generate_sql,
    generate_table_sql,
    quote_identifier,
    transpile_sql,
)

from .exporter import (
    EXPORT_FORMATS,
    export_csv,
    export_json,
    export_document,
    export_filename,
)

from .source import (
    candidate_schema_paths,
    load_schema_text,
    read_schema_file,
)

__all__ = [
    # Model types
    "Field",
    "Table",
    "SchemaDocument",
    "Diagnostic",
    "DiagnosticKind",
    "ParseResult",
    # Parser functions
    "CreateTableStatement",
    "TYPE_RULES",
    "extract_statements",
    "extract_create_tables",
    "split_fields",
    "classify_field",
    "is_table_constraint",
    "normalize_type",
    "parse_schema",
    "parse_schema_cached",
    "parse_schema_with_diagnostics",
    # Generator
    "generate_sql",
    "generate_table_sql",
    "quote_identifier",
    "transpile_sql",
    # Exporter
    "EXPORT_FORMATS",
    "export_csv",
    "export_json",
    "export_document",
    "export_filename",
    # Source
    "candidate_schema_paths",
    "load_schema_text",
    "read_schema_file",
]
