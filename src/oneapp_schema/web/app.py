"""FastAPI web application serving the OneApp database schema."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from oneapp_schema import __version__
from oneapp_schema.config import Settings
from oneapp_schema.errors import (
    SchemaFileNotFoundError,
    UnsupportedDialectError,
    UnsupportedFormatError,
)

# Import routes
from oneapp_schema.web.routes import schema

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("OneApp schema service starting up...")
    yield
    logger.info("OneApp schema service shutting down...")


app = FastAPI(
    title="OneApp Schema Service",
    description="Parses the OneApp PostgreSQL schema for the dashboard",
    version=__version__,
    lifespan=lifespan,
)

# Set by run_server from the loaded ServiceConfig; routes fall back to Settings()
app.state.settings = None

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure this in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(schema.router, prefix="/api", tags=["schema"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": __version__
    }


@app.exception_handler(SchemaFileNotFoundError)
async def schema_file_not_found_handler(request: Request, exc: SchemaFileNotFoundError):
    """Missing schema file is a server-side problem."""
    logger.error(f"{exc} (tried: {', '.join(str(p) for p in exc.tried)})")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": str(exc),
        }
    )


@app.exception_handler(UnsupportedDialectError)
@app.exception_handler(UnsupportedFormatError)
async def bad_export_request_handler(request: Request, exc: ValueError):
    """Unknown export format or dialect."""
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": str(exc),
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.exception(f"Unhandled error on {request.url}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc),
            "path": str(request.url)
        }
    )


def run_server(host: str = "0.0.0.0", port: int = 9840, settings: Settings | None = None):
    """Run the web server using uvicorn.

    Args:
        host: Bind address
        port: Listen port
        settings: Schema source settings for the routes (default: environment)
    """
    import uvicorn
    app.state.settings = settings
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    settings = Settings()
    run_server(host=settings.web_host, port=settings.web_port)
