"""
Command line tests: exit codes and output, with the PostgreSQL catalog
replaced by the in-memory one.
"""

import json

import pytest

import bootstrap_extensions
from config import reset_config
from tests.factories.fake_catalog import InMemoryExtensionCatalog


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    """Clean bootstrap environment pointing at a temporary data directory."""
    for var in (
        "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_PASSWORD", "POSTGRES_SSLMODE",
        "POSTGRES_CONNECT_TIMEOUT", "BOOTSTRAP_EXTENSIONS", "BOOTSTRAP_DATABASES",
        "BOOTSTRAP_TEMPLATE_DATABASE", "BOOTSTRAP_RESTART_READY",
        "BOOTSTRAP_ACTION_TIMEOUT_SECONDS", "BOOTSTRAP_SERVER_CONFIG_FILE",
        "BOOTSTRAP_REGISTRY_FILE", "BOOTSTRAP_ACTION_LOG", "LOG_LEVEL", "DEBUG_MODE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("POSTGRES_DB", "app")
    monkeypatch.setenv("PGDATA", str(tmp_path))
    reset_config()
    yield monkeypatch
    reset_config()


@pytest.fixture
def fake_catalog(monkeypatch):
    """Route ExtensionBootstrapper.from_config to an in-memory catalog."""
    catalog = InMemoryExtensionCatalog()
    monkeypatch.setattr(
        "infrastructure.postgresql.PostgreSQLExtensionCatalog", lambda config: catalog
    )
    return catalog


def _write_registry(tmp_path, specs):
    path = tmp_path / "extensions.json"
    path.write_text(json.dumps(specs))
    return str(path)


class TestListExtensions:

    def test_prints_registry(self, cli_env, capsys):
        assert bootstrap_extensions.main(["--list-extensions"]) == 0
        out = capsys.readouterr().out
        assert "pg_cron  [default; restart: preload pg_cron; template_only]" in out
        assert "postgis_tiger_geocoder <- address_standardizer, fuzzystrmatch, postgis" in out


class TestConfigErrors:

    def test_invalid_port(self, cli_env, fake_catalog):
        cli_env.setenv("POSTGRES_PORT", "not-a-port")
        assert bootstrap_extensions.main([]) == 2
        assert fake_catalog.calls == []

    def test_invalid_timeout_override(self, cli_env, fake_catalog):
        assert bootstrap_extensions.main(["--timeout", "0"]) == 2

    def test_unknown_extension(self, cli_env, fake_catalog):
        assert bootstrap_extensions.main(["--extensions", "postgis,nope"]) == 2
        assert fake_catalog.calls == []

    def test_cyclic_registry(self, cli_env, fake_catalog, tmp_path):
        registry = _write_registry(tmp_path, [
            {"name": "a", "depends_on": ["b"]},
            {"name": "b", "depends_on": ["a"]},
        ])
        assert bootstrap_extensions.main(["--registry", registry]) == 2
        assert fake_catalog.calls == []

    def test_malformed_registry_dependencies(self, cli_env, fake_catalog, tmp_path):
        registry = _write_registry(tmp_path, [{"name": "pgrouting", "depends_on": [1]}])
        assert bootstrap_extensions.main(["--registry", registry]) == 2
        assert fake_catalog.calls == []


class TestConfigErrorsAsJson:

    def test_cyclic_registry(self, cli_env, fake_catalog, capsys, tmp_path):
        registry = _write_registry(tmp_path, [
            {"name": "a", "depends_on": ["b"]},
            {"name": "b", "depends_on": ["a"]},
        ])

        assert bootstrap_extensions.main(["--registry", registry, "--json"]) == 2

        data = json.loads(capsys.readouterr().out)
        assert data["success"] is False
        assert data["error"] == "CYCLIC_DEPENDENCY"
        assert data["classification"] == "FATAL"
        assert data["message"].startswith("Cyclic extension dependency:")

    def test_unknown_extension(self, cli_env, fake_catalog, capsys):
        assert bootstrap_extensions.main(["--extensions", "nope", "--json"]) == 2

        data = json.loads(capsys.readouterr().out)
        assert data["error"] == "UNKNOWN_EXTENSION"
        assert "nope" in data["message"]

    def test_invalid_environment(self, cli_env, fake_catalog, capsys):
        cli_env.setenv("POSTGRES_PORT", "not-a-port")

        assert bootstrap_extensions.main(["--json"]) == 2

        data = json.loads(capsys.readouterr().out)
        assert data["error"] == "CONFIG_ERROR"
        assert [v["var_name"] for v in data["variables"]] == ["POSTGRES_PORT"]

    def test_invalid_override(self, cli_env, fake_catalog, capsys):
        assert bootstrap_extensions.main(["--timeout", "0", "--json"]) == 2
        assert json.loads(capsys.readouterr().out)["error"] == "CONFIG_ERROR"

    def test_plain_output_without_json(self, cli_env, fake_catalog, capsys):
        assert bootstrap_extensions.main(["--extensions", "nope"]) == 2
        assert capsys.readouterr().out == ""


class TestRun:

    def test_text_report(self, cli_env, fake_catalog, capsys, tmp_path):
        code = bootstrap_extensions.main(["--extensions", "pg_cron,pg_trgm"])

        assert code == 0
        out = capsys.readouterr().out
        assert "awaiting server restart" in out
        assert "restart the server" in out
        server_config = (tmp_path / "postgresql.conf").read_text()
        assert "shared_preload_libraries = 'pg_cron'" in server_config
        assert "cron.database_name = 'template1'" in server_config
        assert fake_catalog.installed["app"] == {"pg_trgm"}

    def test_custom_template_names_cron_database(self, cli_env, fake_catalog, tmp_path):
        cli_env.setenv("BOOTSTRAP_TEMPLATE_DATABASE", "template_gis")

        assert bootstrap_extensions.main(["--extensions", "pg_cron"]) == 0

        server_config = (tmp_path / "postgresql.conf").read_text()
        assert "cron.database_name = 'template_gis'" in server_config

    def test_json_report_after_restart(self, cli_env, fake_catalog, capsys, tmp_path):
        server_config = str(tmp_path / "custom.conf")
        args = ["--extensions", "pg_cron", "--server-config", server_config, "--json"]
        bootstrap_extensions.main(args)
        capsys.readouterr()

        code = bootstrap_extensions.main(args + ["--restart-ready"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["server_ready_for_restart_gated_extensions"] is True
        assert data["actions"][0]["state"] == "applied"
        assert data["config_write"]["changed"] is False

    def test_failure_exit_code(self, cli_env, monkeypatch, capsys):
        catalog = InMemoryExtensionCatalog(failures={"hstore": "permission denied to create extension"})
        monkeypatch.setattr(
            "infrastructure.postgresql.PostgreSQLExtensionCatalog", lambda config: catalog
        )

        assert bootstrap_extensions.main(["--extensions", "hstore", "--databases", "app"]) == 1
        assert "permission denied" in capsys.readouterr().out

    def test_environment_drives_run(self, cli_env, fake_catalog):
        cli_env.setenv("BOOTSTRAP_EXTENSIONS", "citext")
        cli_env.setenv("BOOTSTRAP_DATABASES", "app,reporting")

        assert bootstrap_extensions.main([]) == 0
        assert fake_catalog.installed["reporting"] == {"citext"}
        assert fake_catalog.installed["template1"] == {"citext"}
