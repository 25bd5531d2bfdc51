"""
Config test fixtures: clean environment via monkeypatch.
"""

import pytest

from config import reset_config


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all env vars that config modules might read, for isolation."""
    env_vars_to_clear = [
        "POSTGRES_HOST", "POSTGRES_PORT", "POSTGRES_USER", "POSTGRES_PASSWORD",
        "POSTGRES_DB", "POSTGRES_SSLMODE", "POSTGRES_CONNECT_TIMEOUT",
        "BOOTSTRAP_EXTENSIONS", "BOOTSTRAP_DATABASES", "BOOTSTRAP_TEMPLATE_DATABASE",
        "BOOTSTRAP_RESTART_READY", "BOOTSTRAP_ACTION_TIMEOUT_SECONDS",
        "BOOTSTRAP_SERVER_CONFIG_FILE", "BOOTSTRAP_REGISTRY_FILE", "BOOTSTRAP_ACTION_LOG",
        "PGDATA", "LOG_LEVEL", "DEBUG_MODE", "ENVIRONMENT",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield monkeypatch
    reset_config()
