"""Shared pytest fixtures for all tests."""
import pytest

TASKS_SQL = """
CREATE TABLE public.tasks (
  id uuid NOT NULL DEFAULT uuid_generate_v4(),
  title character varying NOT NULL,
  status character varying NOT NULL DEFAULT 'pending'::character varying,
  due_date timestamp with time zone,
  CONSTRAINT tasks_pkey PRIMARY KEY (id)
);
"""

DASHBOARD_SQL = """
-- OneApp dashboard schema
CREATE TABLE IF NOT EXISTS public.ai_agents (
  id uuid NOT NULL DEFAULT gen_random_uuid(),
  name character varying(120) NOT NULL, -- Display name
  model text NOT NULL,
  temperature numeric(3,2) DEFAULT 0.7 NOT NULL,
  tags text[],
  settings jsonb DEFAULT '{}'::jsonb,
  is_active boolean NOT NULL DEFAULT true,
  created_at timestamp with time zone DEFAULT now(),
  CONSTRAINT ai_agents_pkey PRIMARY KEY (id)
);

CREATE TABLE public.backup_versions (
  version_id bigint PRIMARY KEY,
  agent_id uuid NOT NULL,
  label text,
  CONSTRAINT fk_agent FOREIGN KEY (agent_id) REFERENCES ai_agents(id)
);
"""


@pytest.fixture
def tasks_sql():
    """The tasks table example used across the suite."""
    return TASKS_SQL


@pytest.fixture
def dashboard_sql():
    """Two-table schema resembling the dashboard's database dump."""
    return DASHBOARD_SQL


@pytest.fixture
def schema_file(tmp_path):
    """Schema SQL written to a temporary file."""
    path = tmp_path / "schema.sql"
    path.write_text(TASKS_SQL, encoding="utf-8")
    return path


@pytest.fixture
def schema_env(monkeypatch, tmp_path, schema_file):
    """Environment pointing Settings at the temporary schema file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ONEAPP_SCHEMA_CONFIG", raising=False)
    monkeypatch.setenv("SCHEMA_FILE", str(schema_file))
    monkeypatch.setenv("SCHEMA_SEARCH_PATHS", "")
    monkeypatch.setenv("SCHEMA_NAME", "oneapp")
    return schema_file


@pytest.fixture
def missing_schema_env(monkeypatch, tmp_path):
    """Environment in which no schema file can be found."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ONEAPP_SCHEMA_CONFIG", raising=False)
    monkeypatch.setenv("SCHEMA_FILE", str(tmp_path / "nope" / "schema.sql"))
    monkeypatch.setenv("SCHEMA_SEARCH_PATHS", "")
    return tmp_path
