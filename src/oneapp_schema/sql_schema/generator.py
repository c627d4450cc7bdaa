"""Render a parsed schema back to simplified CREATE TABLE statements.

Used by the "copy SQL" and "download schema" features. The output is a
normalized view of the document, not a reproduction of the source DDL.
"""
from __future__ import annotations

import logging
import re

import sqlglot
from sqlglot.dialects.dialect import Dialect
from sqlglot.errors import SqlglotError

from ..errors import UnsupportedDialectError
from .models import SchemaDocument, Table

logger = logging.getLogger(__name__)

DEFAULT_HEADER = "-- Database Schema"
SOURCE_DIALECT = "postgres"

_PLAIN_IDENTIFIER_RE = re.compile(r"[^\W\d][\w$]*")


def quote_identifier(name: str) -> str:
    """Double-quote a name unless it is a plain word, e.g. "Order Items"."""
    if _PLAIN_IDENTIFIER_RE.fullmatch(name):
        return name
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def generate_table_sql(table: Table) -> str:
    """Render one table as a CREATE TABLE statement.

    Example:
        CREATE TABLE tasks (
          id UUID NOT NULL,
          due_date TIMESTAMP WITH TIME ZONE NULL
        );
    """
    lines = [f"CREATE TABLE {quote_identifier(table.name)} ("]
    for index, field in enumerate(table.fields):
        nullable = "NOT NULL" if field.required else "NULL"
        comma = "," if index < len(table.fields) - 1 else ""
        lines.append(f"  {quote_identifier(field.name)} {field.type} {nullable}{comma}")
    lines.append(");")
    return "\n".join(lines)


def generate_sql(document: SchemaDocument, header: str | None = DEFAULT_HEADER) -> str:
    """Render every table, each statement followed by a blank line."""
    sql = f"{header}\n\n" if header else ""
    for table in document:
        sql += generate_table_sql(table) + "\n\n"
    return sql


def transpile_sql(
    document: SchemaDocument,
    dialect: str,
    header: str | None = DEFAULT_HEADER
) -> str:
    """Render the schema for another SQL dialect using sqlglot.

    Statements sqlglot cannot handle are emitted unchanged.

    Args:
        document: Parsed schema
        dialect: sqlglot dialect name (mysql, sqlite, tsql, ...)
        header: Comment line to put first, or None

    Returns:
        SQL text

    Raises:
        UnsupportedDialectError: If sqlglot does not know the dialect
    """
    try:
        Dialect.get_or_raise(dialect)
    except ValueError as e:
        raise UnsupportedDialectError(dialect) from e

    sql = f"{header}\n\n" if header else ""
    for table in document:
        statement = generate_table_sql(table)
        try:
            converted = sqlglot.transpile(
                statement.rstrip(";"),
                read=SOURCE_DIALECT,
                write=dialect,
                pretty=True
            )
            statement = ";\n".join(converted) + ";"
        except SqlglotError as e:
            logger.warning(f"Could not transpile table {table.name} to {dialect}: {e}")
        sql += statement + "\n\n"
    return sql
