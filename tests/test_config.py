"""Tests for settings and YAML service configuration."""
import os
from pathlib import Path

import pytest

from oneapp_schema.config import (
    LoggingConfig,
    SchemaSourceConfig,
    ServiceConfig,
    Settings,
    load_service_config,
)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "oneapp-schema.yaml"
    path.write_text(
        "server:\n"
        "  host: 127.0.0.1\n"
        "  port: 8000\n"
        "schema_source:\n"
        "  file: /srv/db/schema.sql\n"
        "  name: dashboard\n"
        "logging:\n"
        "  level: debug\n"
    )
    return path


class TestSettings:
    """Test environment-backed settings."""

    def test_defaults(self, monkeypatch):
        for var in ("SCHEMA_FILE", "SCHEMA_SEARCH_PATHS", "SCHEMA_NAME",
                    "WEB_HOST", "WEB_PORT", "LOG_LEVEL"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings()

        assert settings.schema_file == ""
        assert settings.schema_search_paths == []
        assert settings.schema_name == "oneapp"
        assert settings.web_port == 9840
        assert settings.log_level == "INFO"

    def test_search_paths_split(self, monkeypatch):
        monkeypatch.setenv("SCHEMA_SEARCH_PATHS", f"/a/schema.sql{os.pathsep}/b/schema.sql")

        assert Settings().schema_search_paths == [Path("/a/schema.sql"), Path("/b/schema.sql")]

    def test_log_level_upper_cased(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")

        assert Settings().log_level == "WARNING"


class TestServiceConfig:
    """Test loading and validating ServiceConfig."""

    def test_from_yaml(self, config_file):
        config = ServiceConfig.from_yaml(config_file)

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8000
        assert config.schema_source.file == "/srv/db/schema.sql"
        assert config.schema_source.name == "dashboard"
        assert config.logging.level == "DEBUG"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ServiceConfig.from_yaml(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        with pytest.raises(ValueError, match="Empty configuration"):
            ServiceConfig.from_yaml(path)

    def test_invalid_port(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("server:\n  port: 70000\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            ServiceConfig.from_yaml(path)

    @pytest.mark.parametrize("name", ["", "  ", "a/b", "a\\b"])
    def test_invalid_schema_name(self, name):
        with pytest.raises(ValueError):
            SchemaSourceConfig(name=name)

    def test_unknown_log_level(self):
        with pytest.raises(ValueError):
            LoggingConfig(level="loud")

    def test_from_settings(self, schema_env):
        config = ServiceConfig.from_settings()

        assert config.schema_source.file == str(schema_env)
        assert config.schema_source.search_paths == []
        assert config.schema_source.name == "oneapp"

    def test_from_env_variable(self, monkeypatch, config_file):
        monkeypatch.setenv("ONEAPP_SCHEMA_CONFIG", str(config_file))

        assert ServiceConfig.from_env().server.port == 8000

    def test_from_env_default_path(self, monkeypatch, tmp_path, config_file):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("ONEAPP_SCHEMA_CONFIG", raising=False)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "oneapp-schema.yaml").write_text(config_file.read_text())

        assert ServiceConfig.from_env().schema_source.name == "dashboard"

    def test_from_env_falls_back_to_settings(self, schema_env, monkeypatch):
        monkeypatch.setenv("WEB_PORT", "9001")

        assert ServiceConfig.from_env().server.port == 9001

    def test_load_explicit_path(self, config_file):
        assert load_service_config(config_file).server.host == "127.0.0.1"

    def test_to_settings(self, config_file):
        settings = ServiceConfig.from_yaml(config_file).to_settings()

        assert settings.schema_file == "/srv/db/schema.sql"
        assert settings.schema_name == "dashboard"
        assert settings.web_port == 8000
        assert settings.log_level == "DEBUG"
