"""Locate and read the schema SQL file."""
from __future__ import annotations

import logging
from pathlib import Path

from ..config import Settings
from ..errors import SchemaFileNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_RELATIVE_PATH = Path("database") / "schema.sql"


def candidate_schema_paths(settings: Settings | None = None, base_dir: Path | None = None) -> list[Path]:
    """Ordered, de-duplicated list of places the schema file may live.

    Explicit SCHEMA_FILE first, then SCHEMA_SEARCH_PATHS, then
    database/schema.sql under base_dir (default: cwd) and its parent.
    """
    settings = settings or Settings()
    base_dir = Path(base_dir) if base_dir else Path.cwd()

    candidates = []
    if settings.schema_file:
        candidates.append(Path(settings.schema_file))
    candidates.extend(settings.schema_search_paths)
    candidates.append(base_dir / DEFAULT_RELATIVE_PATH)
    candidates.append(base_dir.parent / DEFAULT_RELATIVE_PATH)

    seen = set()
    paths = []
    for path in candidates:
        key = path.resolve()
        if key in seen:
            continue
        seen.add(key)
        paths.append(path)
    return paths


def load_schema_text(paths: list[Path]) -> tuple[Path, str]:
    """Read the first candidate that exists and decodes as UTF-8.

    Returns:
        (path, content) of the file that was read

    Raises:
        SchemaFileNotFoundError: If no candidate could be read
    """
    for path in paths:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Schema path failed: {path}: {e}")
            continue
        logger.info(f"Found schema file at: {path}")
        return Path(path), content

    logger.warning(f"Schema file not found, tried: {', '.join(str(p) for p in paths)}")
    raise SchemaFileNotFoundError(paths)


def read_schema_file(settings: Settings | None = None, base_dir: Path | None = None) -> tuple[Path, str]:
    """Locate and read the configured schema file."""
    return load_schema_text(candidate_schema_paths(settings, base_dir))
