"""Export a parsed schema as SQL, CSV or JSON text."""
from __future__ import annotations

import csv
import io
import json

from ..errors import UnsupportedFormatError
from .generator import generate_sql, transpile_sql
from .models import SchemaDocument

EXPORT_FORMATS = ("sql", "csv", "json")

CSV_COLUMNS = ["table", "field", "type", "required", "description"]

MEDIA_TYPES = {
    "sql": "text/plain",
    "csv": "text/csv",
    "json": "application/json",
}


def export_csv(document: SchemaDocument) -> str:
    """One CSV row per field."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for table in document:
        for field in table.fields:
            writer.writerow({
                "table": table.name,
                "field": field.name,
                "type": field.type,
                "required": "true" if field.required else "false",
                "description": field.description or "",
            })
    return buffer.getvalue()


def export_json(document: SchemaDocument, indent: int | None = 2) -> str:
    return json.dumps(document.to_dict(), indent=indent)


def export_document(document: SchemaDocument, fmt: str, dialect: str | None = None) -> str:
    """Render the document in the requested format.

    Args:
        document: Parsed schema
        fmt: One of "sql", "csv", "json"
        dialect: For "sql", an optional sqlglot dialect to transpile to

    Raises:
        UnsupportedFormatError: If fmt is unknown
        UnsupportedDialectError: If dialect is unknown
    """
    fmt = fmt.lower()
    if fmt == "sql":
        if dialect:
            return transpile_sql(document, dialect)
        return generate_sql(document)
    if fmt == "csv":
        return export_csv(document)
    if fmt == "json":
        return export_json(document)
    raise UnsupportedFormatError(fmt, EXPORT_FORMATS)


def export_filename(name: str, fmt: str) -> str:
    """Download file name, e.g. "oneapp-database-schema.txt"."""
    fmt = fmt.lower()
    extension = "txt" if fmt == "sql" else fmt
    return f"{name}-database-schema.{extension}"
