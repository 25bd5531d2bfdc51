# ============================================================================
# POSTGRESQL EXTENSION CATALOG
# ============================================================================
# STATUS: Infrastructure - PostgreSQL extension catalog
# PURPOSE: CREATE EXTENSION IF NOT EXISTS against one target database at a time
# EXPORTS: PostgreSQLRepository, PostgreSQLExtensionCatalog
# DEPENDENCIES: psycopg, psycopg.sql, config
# ============================================================================

"""
PostgreSQL Catalog Implementation - Direct Database Access

Architecture:
    IExtensionCatalog (abstract)
        ↓
    PostgreSQLRepository (connection management)
        ↓
    PostgreSQLExtensionCatalog

Key Features:
- Direct PostgreSQL access using psycopg3
- SQL composition for injection safety (extension names such as
  "uuid-ossp" need quoting)
- One connection per operation; each target database needs its own
  connection anyway
- Per-statement timeout through a transaction-local statement_timeout
"""

import psycopg
from psycopg import errors, sql
from psycopg.rows import dict_row
from typing import Optional
from contextlib import contextmanager

from config import DatabaseConfig, get_config
from core.errors import ErrorCode
from exceptions import ExtensionCreateError, ExtensionTimeoutError
from util_logger import LoggerFactory, ComponentType
from .interface_repository import IExtensionCatalog


# ============================================================================
# POSTGRESQL BASE REPOSITORY - Connection and common operations
# ============================================================================

class PostgreSQLRepository:
    """
    PostgreSQL repository base class with connection management.

    Each operation creates its own connection to the database it targets.
    Autocommit is off; callers commit explicitly.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        """
        Args:
            config: Connection settings. If not provided, uses get_config().database.
        """
        self.config = config or get_config().database
        self.logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, self.__class__.__name__)

    @contextmanager
    def _get_connection(self, database: str):
        """
        Context manager for a connection to one database.

        Rolls back on error and always closes the connection.

        Raises:
            psycopg.Error: Connection or statement failure, re-raised for the caller
        """
        conn = None
        try:
            self.logger.debug(f"🔗 Connecting to database '{database}'...")
            conn = psycopg.connect(self.config.connection_string_for(database), row_factory=dict_row)
            yield conn
        except psycopg.Error as e:
            self.logger.debug(f"PostgreSQL error on '{database}': {type(e).__name__}: {e}")
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                conn.close()

    @contextmanager
    def _get_cursor(self, conn):
        """Cursor on an existing connection; caller controls the transaction."""
        with conn.cursor() as cursor:
            yield cursor


# ============================================================================
# EXTENSION CATALOG
# ============================================================================

class PostgreSQLExtensionCatalog(PostgreSQLRepository, IExtensionCatalog):
    """
    Extension catalog backed by a live PostgreSQL server.

    Error translation:
        QueryCanceled            -> ExtensionTimeoutError
        DuplicateObject,
        UniqueViolation          -> no mutation if pg_extension now lists the
                                    extension (a concurrent run won),
                                    otherwise ExtensionCreateError
        connection failure       -> ExtensionCreateError(DATABASE_CONNECTION_FAILED)
        other psycopg.Error      -> ExtensionCreateError(CREATE_FAILED)
    """

    _IS_INSTALLED_QUERY = sql.SQL(
        "SELECT EXISTS (SELECT 1 FROM pg_catalog.pg_extension WHERE extname = %s) AS installed"
    )

    def create_extension(self, database: str, extension: str, timeout_seconds: float) -> bool:
        timeout_ms = max(1, int(timeout_seconds * 1000))
        statement = sql.SQL("CREATE EXTENSION IF NOT EXISTS {}").format(sql.Identifier(extension))

        try:
            with self._get_connection(database) as conn:
                with self._get_cursor(conn) as cursor:
                    # is_local=true: the timeout ends with this transaction
                    cursor.execute(
                        sql.SQL("SELECT set_config('statement_timeout', %s, true)"),
                        (str(timeout_ms),)
                    )
                    cursor.execute(self._IS_INSTALLED_QUERY, (extension,))
                    row = cursor.fetchone()
                    if row and row["installed"]:
                        conn.commit()
                        return False

                    cursor.execute(statement)
                conn.commit()

        except errors.QueryCanceled as e:
            raise ExtensionTimeoutError(timeout_seconds, extension=extension, database=database) from e

        except (errors.DuplicateObject, errors.UniqueViolation) as e:
            # Also raised when the extension script collides with an object
            # that exists outside any extension
            if self._is_installed(database, extension):
                self.logger.info(
                    f"Extension '{extension}' was created concurrently in '{database}'"
                )
                return False
            raise ExtensionCreateError(
                _first_line(e),
                extension=extension,
                database=database,
            ) from e

        except psycopg.Error as e:
            raise _translate_error(e, extension, database) from e

        self.logger.debug(f"Created extension '{extension}' in '{database}'")
        return True

    def _is_installed(self, database: str, extension: str) -> bool:
        """
        Check pg_extension on a fresh connection.

        Raises:
            ExtensionCreateError: The check itself failed
        """
        try:
            with self._get_connection(database) as conn:
                with self._get_cursor(conn) as cursor:
                    cursor.execute(self._IS_INSTALLED_QUERY, (extension,))
                    row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            raise _translate_error(e, extension, database) from e
        return bool(row and row["installed"])


def _is_connection_failure(error: psycopg.Error) -> bool:
    """
    True for failures to reach the database.

    Server errors of class 58 (e.g. UndefinedFile for a missing control
    file) are OperationalError subclasses too; only client-side errors
    without a SQLSTATE and class 08 count as connection failures.
    """
    if not isinstance(error, psycopg.OperationalError):
        return False
    sqlstate = error.sqlstate
    return sqlstate is None or sqlstate.startswith("08")


def _translate_error(error: psycopg.Error, extension: str, database: str) -> ExtensionCreateError:
    if _is_connection_failure(error):
        return ExtensionCreateError(
            f"cannot connect to database '{database}': {_first_line(error)}",
            extension=extension,
            database=database,
            error_code=ErrorCode.DATABASE_CONNECTION_FAILED,
        )
    return ExtensionCreateError(_first_line(error), extension=extension, database=database)


def _first_line(error: Exception) -> str:
    """Server messages can span lines (DETAIL, HINT); reports keep the first."""
    text = str(error).strip()
    return text.splitlines()[0] if text else type(error).__name__
