"""Tests for locating and reading the schema file."""
import logging

import pytest

from oneapp_schema.config import Settings
from oneapp_schema.errors import SchemaFileNotFoundError
from oneapp_schema.sql_schema.source import (
    DEFAULT_RELATIVE_PATH,
    candidate_schema_paths,
    load_schema_text,
    read_schema_file,
)


@pytest.fixture
def bare_settings(monkeypatch):
    """Settings with no explicit schema file or search paths."""
    monkeypatch.setenv("SCHEMA_FILE", "")
    monkeypatch.setenv("SCHEMA_SEARCH_PATHS", "")
    return Settings()


class TestCandidatePaths:
    """Test candidate ordering."""

    def test_default_locations(self, bare_settings, tmp_path):
        base = tmp_path / "backend"

        assert candidate_schema_paths(bare_settings, base) == [
            base / DEFAULT_RELATIVE_PATH,
            tmp_path / DEFAULT_RELATIVE_PATH,
        ]

    def test_explicit_file_first(self, bare_settings, tmp_path):
        bare_settings.schema_file = str(tmp_path / "custom.sql")
        bare_settings.schema_search_paths = [tmp_path / "other.sql"]

        paths = candidate_schema_paths(bare_settings, tmp_path)

        assert paths[0] == tmp_path / "custom.sql"
        assert paths[1] == tmp_path / "other.sql"

    def test_duplicates_removed(self, bare_settings, tmp_path):
        bare_settings.schema_file = str(tmp_path / DEFAULT_RELATIVE_PATH)

        paths = candidate_schema_paths(bare_settings, tmp_path)

        assert paths.count(tmp_path / DEFAULT_RELATIVE_PATH) == 1
        assert len(paths) == 2


class TestLoadSchemaText:
    """Test reading the first usable candidate."""

    def test_first_existing_file_wins(self, tmp_path):
        second = tmp_path / "second.sql"
        second.write_text("CREATE TABLE b (x int);", encoding="utf-8")

        path, content = load_schema_text([tmp_path / "first.sql", second])

        assert path == second
        assert content.startswith("CREATE TABLE b")

    def test_undecodable_file_skipped(self, tmp_path):
        broken = tmp_path / "broken.sql"
        broken.write_bytes(b"\xff\xfe\xfa")
        good = tmp_path / "good.sql"
        good.write_text("-- ok", encoding="utf-8")

        path, _ = load_schema_text([broken, good])

        assert path == good

    def test_failed_candidates_logged_as_warnings(self, tmp_path, caplog):
        """Each unreadable candidate is reported at WARNING."""
        good = tmp_path / "good.sql"
        good.write_text("-- ok", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="oneapp_schema.sql_schema.source"):
            load_schema_text([tmp_path / "missing.sql", good])

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "missing.sql" in warnings[0].getMessage()

    def test_directory_skipped(self, tmp_path):
        with pytest.raises(SchemaFileNotFoundError):
            load_schema_text([tmp_path])

    def test_not_found_lists_tried_paths(self, tmp_path):
        missing = [tmp_path / "a.sql", tmp_path / "b.sql"]

        with pytest.raises(SchemaFileNotFoundError) as exc_info:
            load_schema_text(missing)

        assert exc_info.value.tried == missing
        assert str(exc_info.value) == "Schema file not found in any expected location"


class TestReadSchemaFile:
    """Test the settings-driven lookup."""

    def test_reads_configured_file(self, schema_env):
        path, content = read_schema_file()

        assert path == schema_env
        assert "CREATE TABLE public.tasks" in content

    def test_reads_parent_database_dir(self, bare_settings, tmp_path):
        target = tmp_path / DEFAULT_RELATIVE_PATH
        target.parent.mkdir()
        target.write_text("-- schema", encoding="utf-8")

        path, content = read_schema_file(bare_settings, tmp_path / "backend")

        assert path == target
        assert content == "-- schema"
