"""
PostgreSQL Database Configuration.

Connection settings for the server being bootstrapped. One config serves
every target database: the bootstrap connects to template1, the application
database and any other target by swapping the database name.

Exports:
    DatabaseConfig: Server connection configuration
"""

import os
from typing import Optional
from pydantic import BaseModel, Field
from psycopg.conninfo import make_conninfo

from .defaults import DatabaseDefaults


# ============================================================================
# DATABASE CONFIGURATION
# ============================================================================

class DatabaseConfig(BaseModel):
    """
    PostgreSQL connection configuration.

    Password authentication only; inside the container the local socket
    uses trust authentication and no password is needed.
    """

    host: Optional[str] = Field(
        default=DatabaseDefaults.HOST,
        description="""PostgreSQL host name or unix socket directory.

        Unset means libpq's default unix socket, which is what the container
        entrypoint exposes while init scripts run (TCP listening is off).
        """,
        examples=["localhost", "/var/run/postgresql"]
    )

    port: int = Field(
        default=DatabaseDefaults.PORT,
        description="PostgreSQL server port number"
    )

    user: str = Field(
        default=DatabaseDefaults.USER,
        description="Role used for CREATE EXTENSION (must be superuser for untrusted extensions)"
    )

    password: Optional[str] = Field(
        default=None,
        repr=False,
        description="Password from POSTGRES_PASSWORD (optional for socket/trust auth)"
    )

    database: str = Field(
        default=DatabaseDefaults.DATABASE,
        description="Application database created by the entrypoint (POSTGRES_DB)",
        examples=["app"]
    )

    sslmode: Optional[str] = Field(
        default=DatabaseDefaults.SSLMODE,
        description="libpq sslmode (unset = libpq default)"
    )

    connection_timeout_seconds: int = Field(
        default=DatabaseDefaults.CONNECTION_TIMEOUT_SECONDS,
        ge=1,
        description="Connection timeout in seconds"
    )

    def connection_string_for(self, database: str) -> str:
        """
        Build a libpq connection string for one target database.

        Args:
            database: Database name to connect to

        Returns:
            key=value connection string (values quoted by psycopg)
        """
        params = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "dbname": database,
            "sslmode": self.sslmode,
            "connect_timeout": self.connection_timeout_seconds,
            "application_name": "extension-bootstrap",
        }
        return make_conninfo(**{k: v for k, v in params.items() if v is not None})

    @property
    def connection_string(self) -> str:
        """Connection string for the application database."""
        return self.connection_string_for(self.database)

    def debug_dict(self) -> dict:
        """Debug output with masked password."""
        return {
            "host": self.host or "(local socket)",
            "port": self.port,
            "user": self.user,
            "database": self.database,
            "password": "***MASKED***" if self.password else None,
            "sslmode": self.sslmode,
            "connection_timeout_seconds": self.connection_timeout_seconds,
        }

    @classmethod
    def from_environment(cls):
        """Load from environment variables (official postgres image names)."""
        return cls(
            host=os.environ.get("POSTGRES_HOST") or DatabaseDefaults.HOST,
            port=int(os.environ.get("POSTGRES_PORT", str(DatabaseDefaults.PORT))),
            user=os.environ.get("POSTGRES_USER") or DatabaseDefaults.USER,
            password=os.environ.get("POSTGRES_PASSWORD") or None,
            # The entrypoint defaults POSTGRES_DB to POSTGRES_USER
            database=os.environ.get("POSTGRES_DB")
                or os.environ.get("POSTGRES_USER")
                or DatabaseDefaults.DATABASE,
            sslmode=os.environ.get("POSTGRES_SSLMODE") or DatabaseDefaults.SSLMODE,
            connection_timeout_seconds=int(os.environ.get(
                "POSTGRES_CONNECT_TIMEOUT", str(DatabaseDefaults.CONNECTION_TIMEOUT_SECONDS)
            )),
        )

