"""Schema file API routes."""
from __future__ import annotations

import logging
from fastapi import APIRouter, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel
from typing import Any

from oneapp_schema.config import Settings
from oneapp_schema.sql_schema import (
    export_document,
    export_filename,
    parse_schema_cached,
    parse_schema_with_diagnostics,
    read_schema_file,
)
from oneapp_schema.sql_schema.exporter import MEDIA_TYPES

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================

class ParseRequest(BaseModel):
    """Raw DDL to parse."""
    sql: str


# =============================================================================
# Helpers
# =============================================================================

def _settings(request: Request) -> Settings:
    """Settings the server was started with, or the environment when unset."""
    return getattr(request.app.state, "settings", None) or Settings()


@router.get("/schema")
async def get_schema_sql(request: Request) -> dict[str, Any]:
    """Get database schema SQL."""
    settings = _settings(request)
    _, content = read_schema_file(settings)

    return {
        "success": True,
        "data": {
            "sql": content,
        },
    }


@router.get("/schema/tables")
async def get_schema_tables(request: Request) -> dict[str, Any]:
    """Get the schema file parsed into tables and fields."""
    settings = _settings(request)
    path, content = read_schema_file(settings)
    result = parse_schema_with_diagnostics(content)

    logger.info(f"Parsed {len(result.document)} table(s) from {path}")

    return {
        "success": True,
        "data": {
            "source": str(path),
            **result.to_dict(),
        },
    }


@router.post("/schema/parse")
async def parse_sql(request: ParseRequest) -> dict[str, Any]:
    """Parse DDL supplied in the request body."""
    result = parse_schema_with_diagnostics(request.sql)

    return {
        "success": True,
        "data": result.to_dict(),
    }


@router.get("/schema/export")
async def export_schema(
    request: Request,
    fmt: str = Query("sql", alias="format", description="sql, csv or json"),
    dialect: str | None = Query(None, description="sqlglot dialect for SQL output"),
) -> Response:
    """Download the parsed schema as SQL, CSV or JSON."""
    settings = _settings(request)
    _, content = read_schema_file(settings)
    document = parse_schema_cached(content)

    fmt = fmt.lower()
    body = export_document(document, fmt, dialect)
    filename = export_filename(settings.schema_name, fmt)

    return Response(
        content=body,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
