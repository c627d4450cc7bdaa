"""Configuration management for oneapp-schema."""
from .settings import Settings, settings
from .service import (
    ServiceConfig,
    ServerConfig,
    SchemaSourceConfig,
    LoggingConfig,
    load_service_config,
)

__all__ = [
    "Settings",
    "settings",
    "ServiceConfig",
    "ServerConfig",
    "SchemaSourceConfig",
    "LoggingConfig",
    "load_service_config",
]
