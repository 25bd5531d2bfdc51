"""
Custom Exception Hierarchy

Distinguishes between:
1. Contract Violations (programming bugs that need fixing)
2. Business Logic Failures (expected runtime issues, recorded per action)
3. Configuration Errors (fatal, abort the run before anything is applied)

Business failures are caught at the action boundary and written into the
bootstrap report. Configuration errors propagate to the entry point.
"""

from typing import Iterable, Optional, Sequence


class ContractViolationError(TypeError):
    """
    Raised when component contracts are violated (programming bugs).

    These indicate:
    - Illegal action state transitions (e.g. APPLIED -> FAILED)
    - Wrong types passed across component boundaries

    These should NEVER be caught and handled - they indicate bugs
    that need to be fixed in the code.
    """
    pass


class BusinessLogicError(Exception):
    """
    Base class for expected runtime failures.

    These are normal failures that occur during a bootstrap run
    and are recorded in the report without crashing the run.
    """
    pass


class DatabaseError(BusinessLogicError):
    """
    Database operation failures.

    Examples:
        - Connection refused while the server is still starting
        - Authentication failure
        - Transaction rollback
    """
    pass


class ExtensionCreateError(DatabaseError):
    """
    CREATE EXTENSION failed for a reason other than "already exists".

    Carries the extension and database names plus an error code from
    core.errors.ErrorCode so the applier can classify the failure.
    """

    def __init__(self, message: str, extension: Optional[str] = None,
                 database: Optional[str] = None, error_code=None):
        super().__init__(message)
        self.extension = extension
        self.database = database
        if error_code is None:
            from core.errors import ErrorCode
            error_code = ErrorCode.CREATE_FAILED
        self.error_code = error_code


class ExtensionTimeoutError(ExtensionCreateError):
    """CREATE EXTENSION exceeded the per-action timeout."""

    def __init__(self, timeout_seconds: float, extension: Optional[str] = None,
                 database: Optional[str] = None):
        from core.errors import ErrorCode
        super().__init__(
            f"timeout after {timeout_seconds:g}s",
            extension=extension,
            database=database,
            error_code=ErrorCode.TIMEOUT,
        )
        self.timeout_seconds = timeout_seconds


class ConfigWriteError(BusinessLogicError):
    """
    The server configuration file could not be read or written.

    Non-fatal for the run, but it silently degrades restart-gated
    extensions on the next start, so it is surfaced prominently.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ConfigurationError(Exception):
    """
    System configuration error.

    These are fatal and indicate misconfiguration that prevents the
    bootstrap from running at all. Nothing is applied when raised.

    Examples:
        - Missing or malformed environment variables
        - Unreadable or invalid registry file
    """

    def __init__(self, message: str, error_code=None):
        super().__init__(message)
        if error_code is None:
            from core.errors import ErrorCode
            error_code = ErrorCode.CONFIG_ERROR
        self.error_code = error_code


class RegistryError(ConfigurationError):
    """The extension registry is malformed."""
    pass


class CyclicDependencyError(RegistryError):
    """The dependency graph over extensions contains a cycle."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = list(cycle)
        path = " -> ".join(self.cycle + self.cycle[:1]) if self.cycle else "?"
        from core.errors import ErrorCode
        super().__init__(f"Cyclic extension dependency: {path}", ErrorCode.CYCLIC_DEPENDENCY)


class UnknownExtensionError(RegistryError):
    """An extension name is not present in the registry."""

    def __init__(self, name: str, referenced_by: Optional[str] = None,
                 known: Optional[Iterable[str]] = None):
        self.name = name
        self.referenced_by = referenced_by
        if referenced_by:
            message = f"Unknown extension '{name}' (dependency of '{referenced_by}')"
        else:
            message = f"Unknown extension '{name}'"
        if known is not None:
            message += f"; known extensions: {', '.join(sorted(known))}"
        from core.errors import ErrorCode
        super().__init__(message, ErrorCode.UNKNOWN_EXTENSION)
