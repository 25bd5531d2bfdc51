"""
Configuration Defaults - Single source of truth for all default values.

The defaults match the official postgres/postgis container images: the
bootstrap normally runs inside the container during initdb, talking to the
server over the local socket as the superuser.

Organization:
    - DatabaseDefaults: Connection settings
    - BootstrapDefaults: Sequencer settings
    - AppDefaults: Logging and environment

Usage:
    from config.defaults import DatabaseDefaults, BootstrapDefaults

    # In Pydantic Field definitions:
    port: int = Field(default=DatabaseDefaults.PORT, ...)
"""


# =============================================================================
# DATABASE DEFAULTS
# =============================================================================

class DatabaseDefaults:
    """
    Database connection defaults.

    HOST is None on purpose: libpq then uses the local unix socket, which is
    the only listener available while the entrypoint runs init scripts.
    """

    HOST = None
    PORT = 5432
    USER = "postgres"
    DATABASE = "postgres"
    CONNECTION_TIMEOUT_SECONDS = 10
    SSLMODE = None


# =============================================================================
# BOOTSTRAP DEFAULTS
# =============================================================================

class BootstrapDefaults:
    """
    Extension bootstrap defaults.
    """

    # Template that new databases are cloned from
    TEMPLATE_DATABASE = "template1"

    # Per-action timeout. Some extensions (postgis, postgis_raster) do
    # catalog-wide work, so this is minutes, not seconds.
    ACTION_TIMEOUT_SECONDS = 600.0

    # Server data directory and the config file inside it
    PGDATA = "/var/lib/postgresql/data"
    SERVER_CONFIG_FILENAME = "postgresql.conf"

    # Restart gate: false on the first (initdb) run
    RESTART_READY = False


# =============================================================================
# APPLICATION DEFAULTS
# =============================================================================

class AppDefaults:
    """
    Application-wide defaults.
    """

    DEBUG_MODE = False
    ENVIRONMENT = "dev"
    LOG_LEVEL = "INFO"
