"""Service configuration loading and validation.

Loads YAML configuration for the schema service, falling back to
environment settings when no file is given.
"""
from __future__ import annotations
import os
import yaml
from pathlib import Path
from typing import Literal
from pydantic import BaseModel, Field, field_validator

from .settings import Settings

DEFAULT_CONFIG_PATH = Path("config/oneapp-schema.yaml")


class ServerConfig(BaseModel):
    """Web server configuration."""
    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(9840, ge=1, le=65535, description="Listen port")


class SchemaSourceConfig(BaseModel):
    """Where the schema SQL file is read from."""
    file: str | None = Field(None, description="Explicit schema file path")
    search_paths: list[str] = Field(default_factory=list, description="Extra candidate paths")
    name: str = Field("oneapp", description="Schema name used for download file names")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Schema name ends up in file names."""
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        if any(c in v for c in "/\\"):
            raise ValueError("name must not contain path separators")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Log level")
    format: str = Field(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="logging format string"
    )

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class ServiceConfig(BaseModel):
    """Complete service configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    schema_source: SchemaSourceConfig = Field(default_factory=SchemaSourceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ServiceConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated ServiceConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)

        if not data:
            raise ValueError(f"Empty configuration file: {config_path}")

        try:
            return cls.model_validate(data)
        except Exception as e:
            raise ValueError(f"Invalid configuration in {config_path}: {e}") from e

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ServiceConfig:
        """Build configuration from environment settings."""
        settings = settings or Settings()
        return cls.model_validate({
            "server": {"host": settings.web_host, "port": settings.web_port},
            "schema_source": {
                "file": settings.schema_file or None,
                "search_paths": [str(p) for p in settings.schema_search_paths],
                "name": settings.schema_name,
            },
            "logging": {"level": settings.log_level},
        })

    @classmethod
    def from_env(cls, env_var: str = "ONEAPP_SCHEMA_CONFIG") -> ServiceConfig:
        """Load configuration from the path in an environment variable.

        Falls back to config/oneapp-schema.yaml, then to plain environment
        settings.
        """
        config_path = os.getenv(env_var)

        if config_path:
            return cls.from_yaml(config_path)

        if DEFAULT_CONFIG_PATH.exists():
            return cls.from_yaml(DEFAULT_CONFIG_PATH)

        return cls.from_settings()

    def to_settings(self) -> Settings:
        """Settings view of this configuration, for code that reads Settings."""
        settings = Settings()
        settings.web_host = self.server.host
        settings.web_port = self.server.port
        settings.schema_file = self.schema_source.file or ""
        settings.schema_search_paths = [Path(p) for p in self.schema_source.search_paths]
        settings.schema_name = self.schema_source.name
        settings.log_level = self.logging.level
        return settings


def load_service_config(config_path: str | Path | None = None) -> ServiceConfig:
    """Load service configuration from file or environment.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Validated ServiceConfig instance

    Raises:
        FileNotFoundError: If an explicit config file is missing
        ValueError: If configuration is invalid
    """
    if config_path:
        return ServiceConfig.from_yaml(config_path)

    return ServiceConfig.from_env()
