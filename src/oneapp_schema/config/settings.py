"""Settings loaded from environment variables using python-dotenv."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

# Load .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize settings from environment variables."""
        # Schema source
        self.schema_file = os.getenv("SCHEMA_FILE", "")
        self.schema_search_paths = [
            Path(p) for p in os.getenv("SCHEMA_SEARCH_PATHS", "").split(os.pathsep) if p.strip()
        ]
        self.schema_name = os.getenv("SCHEMA_NAME", "oneapp")

        # Web server
        self.web_host = os.getenv("WEB_HOST", "0.0.0.0")
        self.web_port = int(os.getenv("WEB_PORT", "9840"))

        # Logging
        self.log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = os.getenv(
            "LOG_LEVEL", "INFO"
        ).upper()


# Global settings instance
settings = Settings()
