"""
Environment variable validation tests.

Tests regex patterns for connection, bootstrap and logging variables.
"""

import logging

import pytest

from config.env_validation import (
    ENV_VAR_RULES,
    validate_single_var,
    validate_environment,
    log_validation_results,
    EnvVarRule,
    ValidationError,
)


class TestPostgresHostValidation:
    """POSTGRES_HOST is a host name, an IP address or a socket directory."""

    rule = ENV_VAR_RULES["POSTGRES_HOST"]

    @pytest.mark.parametrize("value", ["localhost", "127.0.0.1", "db.internal", "/var/run/postgresql"])
    def test_valid_hosts_accepted(self, monkeypatch, value):
        monkeypatch.setenv("POSTGRES_HOST", value)
        assert validate_single_var("POSTGRES_HOST", self.rule) is None

    def test_unset_accepted(self, clean_env):
        assert validate_single_var("POSTGRES_HOST", self.rule) is None

    def test_spaces_rejected(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_HOST", "  ")
        result = validate_single_var("POSTGRES_HOST", self.rule)
        assert result is not None
        assert result.severity == "error"


class TestPostgresPortValidation:

    rule = ENV_VAR_RULES["POSTGRES_PORT"]

    @pytest.mark.parametrize("value", ["5432", "1", "65535"])
    def test_valid_ports_accepted(self, monkeypatch, value):
        monkeypatch.setenv("POSTGRES_PORT", value)
        assert validate_single_var("POSTGRES_PORT", self.rule) is None

    @pytest.mark.parametrize("value", ["0", "65536", "54x2", "-1"])
    def test_invalid_ports_rejected(self, monkeypatch, value):
        monkeypatch.setenv("POSTGRES_PORT", value)
        result = validate_single_var("POSTGRES_PORT", self.rule)
        assert result is not None
        assert result.message == "Invalid format"


class TestBootstrapListValidation:
    """Extension and database lists are comma-separated names."""

    @pytest.mark.parametrize("value", ["postgis", "postgis,pg_trgm", "postgis, uuid-ossp ,", "pg_cron"])
    def test_valid_extension_lists(self, monkeypatch, value):
        monkeypatch.setenv("BOOTSTRAP_EXTENSIONS", value)
        assert validate_single_var("BOOTSTRAP_EXTENSIONS", ENV_VAR_RULES["BOOTSTRAP_EXTENSIONS"]) is None

    @pytest.mark.parametrize("value", ["postgis;drop", "1abc", "a,,b", "post gis"])
    def test_invalid_extension_lists(self, monkeypatch, value):
        monkeypatch.setenv("BOOTSTRAP_EXTENSIONS", value)
        assert validate_single_var("BOOTSTRAP_EXTENSIONS", ENV_VAR_RULES["BOOTSTRAP_EXTENSIONS"]) is not None

    @pytest.mark.parametrize("value", ["true", "FALSE", "1", "0", "yes", "no"])
    def test_restart_ready_booleans(self, monkeypatch, value):
        monkeypatch.setenv("BOOTSTRAP_RESTART_READY", value)
        assert validate_single_var("BOOTSTRAP_RESTART_READY", ENV_VAR_RULES["BOOTSTRAP_RESTART_READY"]) is None

    def test_restart_ready_rejects_other_words(self, monkeypatch):
        monkeypatch.setenv("BOOTSTRAP_RESTART_READY", "restarted")
        assert validate_single_var("BOOTSTRAP_RESTART_READY", ENV_VAR_RULES["BOOTSTRAP_RESTART_READY"]) is not None

    @pytest.mark.parametrize("value,valid", [("600", True), ("0.5", True), ("-5", False), ("ten", False)])
    def test_action_timeout(self, monkeypatch, value, valid):
        monkeypatch.setenv("BOOTSTRAP_ACTION_TIMEOUT_SECONDS", value)
        result = validate_single_var(
            "BOOTSTRAP_ACTION_TIMEOUT_SECONDS", ENV_VAR_RULES["BOOTSTRAP_ACTION_TIMEOUT_SECONDS"]
        )
        assert (result is None) == valid


class TestRuleBehaviour:

    def test_required_missing(self, monkeypatch):
        import re
        rule = EnvVarRule(
            pattern=re.compile(r"^x$"), pattern_description="x", required=True,
            fix_suggestion="Set it", example="x",
        )
        monkeypatch.delenv("BOOTSTRAP_TEST_VAR", raising=False)
        result = validate_single_var("BOOTSTRAP_TEST_VAR", rule)
        assert result.message == "Required environment variable not set"
        assert "Example: x" in result.fix_suggestion

    def test_warning_on_default(self, monkeypatch):
        import re
        rule = EnvVarRule(
            pattern=re.compile(r"^x$"), pattern_description="x", required=False,
            fix_suggestion="Set it", example="x", default_value="x", warn_on_default=True,
        )
        monkeypatch.delenv("BOOTSTRAP_TEST_VAR", raising=False)
        assert validate_single_var("BOOTSTRAP_TEST_VAR", rule).severity == "warning"
        assert validate_single_var("BOOTSTRAP_TEST_VAR", rule, include_warnings=False) is None

    def test_clean_environment_passes(self, clean_env):
        assert validate_environment() == []

    def test_password_masked(self):
        error = ValidationError(
            var_name="POSTGRES_PASSWORD", message="Invalid format", current_value="hunter2",
            expected_pattern="any", fix_suggestion="none",
        )
        assert error.to_dict()["current_value"] == "***MASKED***"

    def test_long_value_truncated(self):
        error = ValidationError(
            var_name="BOOTSTRAP_EXTENSIONS", message="Invalid format", current_value="x" * 40,
            expected_pattern="any", fix_suggestion="none",
        )
        assert error.to_dict()["current_value"] == "x" * 20 + "...(40 chars)"


class TestLogValidationResults:

    def test_errors_fail(self, clean_env, caplog):
        clean_env.setenv("POSTGRES_PORT", "not-a-port")
        logger = logging.getLogger("test.env_validation")
        with caplog.at_level(logging.ERROR, logger="test.env_validation"):
            assert log_validation_results(logger) is False
        assert "POSTGRES_PORT" in caplog.text

    def test_clean_passes(self, clean_env):
        assert log_validation_results(logging.getLogger("test.env_validation")) is True
