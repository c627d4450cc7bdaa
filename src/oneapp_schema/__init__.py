"""oneapp-schema: PostgreSQL DDL schema parser for the OneApp dashboard."""
from oneapp_schema.sql_schema import (
    Field,
    SchemaDocument,
    Table,
    parse_schema,
    parse_schema_with_diagnostics,
)

__version__ = "0.1.0"

__all__ = [
    "Field",
    "SchemaDocument",
    "Table",
    "parse_schema",
    "parse_schema_with_diagnostics",
    "__version__",
]
