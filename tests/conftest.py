"""
Root conftest.py: sys.path, env vars, shared fixtures.

Sets up the test environment so all production code can be imported
without a running PostgreSQL server.
"""

import os
import sys

import pytest

# Add project root to sys.path so 'core', 'config', 'services', etc. are importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture(autouse=True, scope="session")
def set_minimal_env_vars():
    """
    Set minimal environment variables so config loads without surprises.

    Nothing here points at a real server; tests that need a catalog use the
    in-memory one from tests.factories.
    """
    defaults = {
        "POSTGRES_USER": "postgres",
        "POSTGRES_DB": "app",
        "ENVIRONMENT": "test",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


@pytest.fixture
def catalog():
    """Empty in-memory extension catalog."""
    from tests.factories.fake_catalog import InMemoryExtensionCatalog
    return InMemoryExtensionCatalog()


@pytest.fixture
def server_config(tmp_path):
    """Path of a minimal postgresql.conf as written by initdb."""
    path = tmp_path / "postgresql.conf"
    path.write_text(
        "# -----------------------------\n"
        "# PostgreSQL configuration file\n"
        "# -----------------------------\n"
        "listen_addresses = '*'\n"
        "max_connections = 100\t\t\t# (change requires restart)\n"
        "#shared_preload_libraries = ''\t# (change requires restart)\n",
        encoding="utf-8",
    )
    return path
