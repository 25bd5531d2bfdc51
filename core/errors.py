"""
Error Code Definitions and Classification.

Centralized error code management for bootstrap runs. Every DEFERRED or
FAILED action carries one of these codes next to its human-readable reason.

Key Features:
    - Explicit error codes for all failure and deferral modes
    - Classification deciding whether a code aborts the run, fails it,
      or is an expected deferral
    - Helper to build a standardized error dict for the JSON report

Exports:
    ErrorCode: Standardized error codes enum
    ErrorClassification: Error category enum
    get_error_classification: Classification lookup
    counts_as_failure: Codes that make the process exit non-zero
    create_error_response: Standardized error dict
"""

from enum import Enum
from typing import Dict, Any


class ErrorCode(str, Enum):
    """
    Standardized error codes for bootstrap errors and deferrals.
    """

    # ========================================================================
    # CONFIGURATION ERRORS (fatal, nothing applied)
    # ========================================================================
    CYCLIC_DEPENDENCY = "CYCLIC_DEPENDENCY"
    UNKNOWN_EXTENSION = "UNKNOWN_EXTENSION"
    CONFIG_ERROR = "CONFIG_ERROR"

    # ========================================================================
    # ACTION FAILURES (non-fatal to the run, fatal to dependents)
    # ========================================================================
    CREATE_FAILED = "CREATE_FAILED"
    TIMEOUT = "TIMEOUT"
    DATABASE_CONNECTION_FAILED = "DATABASE_CONNECTION_FAILED"

    # ========================================================================
    # DEFERRALS (expected, not errors)
    # ========================================================================
    AWAITING_RESTART = "AWAITING_RESTART"
    AWAITING_DEPENDENCY = "AWAITING_DEPENDENCY"
    BLOCKED_BY_DEPENDENCY = "BLOCKED_BY_DEPENDENCY"

    # ========================================================================
    # DEGRADED (reported prominently, run continues)
    # ========================================================================
    CONFIG_WRITE_ERROR = "CONFIG_WRITE_ERROR"


class ErrorClassification(str, Enum):
    """
    Error classification for run control.
    """

    FATAL = "FATAL"  # Abort before any action executes
    ACTION_FAILURE = "ACTION_FAILURE"  # Recorded, run exits non-zero
    EXPECTED_DEFERRAL = "EXPECTED_DEFERRAL"  # Recorded, not a failure
    DEGRADED = "DEGRADED"  # Recorded loudly, not a failure


_ERROR_CLASSIFICATION: Dict[ErrorCode, ErrorClassification] = {
    ErrorCode.CYCLIC_DEPENDENCY: ErrorClassification.FATAL,
    ErrorCode.UNKNOWN_EXTENSION: ErrorClassification.FATAL,
    ErrorCode.CONFIG_ERROR: ErrorClassification.FATAL,

    ErrorCode.CREATE_FAILED: ErrorClassification.ACTION_FAILURE,
    ErrorCode.TIMEOUT: ErrorClassification.ACTION_FAILURE,
    ErrorCode.DATABASE_CONNECTION_FAILED: ErrorClassification.ACTION_FAILURE,

    ErrorCode.AWAITING_RESTART: ErrorClassification.EXPECTED_DEFERRAL,
    ErrorCode.AWAITING_DEPENDENCY: ErrorClassification.EXPECTED_DEFERRAL,
    # The failed dependency already fails the run; its dependents only wait.
    ErrorCode.BLOCKED_BY_DEPENDENCY: ErrorClassification.EXPECTED_DEFERRAL,

    ErrorCode.CONFIG_WRITE_ERROR: ErrorClassification.DEGRADED,
}


def get_error_classification(error_code: ErrorCode) -> ErrorClassification:
    """
    Get the classification for an error code.

    Args:
        error_code: ErrorCode enum value

    Returns:
        ErrorClassification enum value (ACTION_FAILURE if unmapped)

    Example:
        >>> get_error_classification(ErrorCode.AWAITING_RESTART)
        <ErrorClassification.EXPECTED_DEFERRAL: 'EXPECTED_DEFERRAL'>
    """
    return _ERROR_CLASSIFICATION.get(error_code, ErrorClassification.ACTION_FAILURE)


def counts_as_failure(error_code: ErrorCode) -> bool:
    """
    Determine if an error code makes the bootstrap exit non-zero.

    Example:
        >>> counts_as_failure(ErrorCode.TIMEOUT)
        True
        >>> counts_as_failure(ErrorCode.AWAITING_RESTART)
        False
    """
    return get_error_classification(error_code) in {
        ErrorClassification.FATAL,
        ErrorClassification.ACTION_FAILURE,
    }


def create_error_response(
    error_code: ErrorCode,
    message: str,
    **kwargs: Any
) -> Dict[str, Any]:
    """
    Create a standardized error dictionary for reports and CLI output.

    Args:
        error_code: ErrorCode enum value
        message: Human-readable error message
        **kwargs: Additional fields to include

    Example:
        >>> create_error_response(
        ...     ErrorCode.CYCLIC_DEPENDENCY,
        ...     "Cyclic extension dependency: a -> b -> a",
        ...     cycle=["a", "b"]
        ... )
        {
            "success": False,
            "error": "CYCLIC_DEPENDENCY",
            "classification": "FATAL",
            "message": "Cyclic extension dependency: a -> b -> a",
            "cycle": ["a", "b"]
        }
    """
    return {
        "success": False,
        "error": error_code.value,
        "classification": get_error_classification(error_code).value,
        "message": message,
        **kwargs
    }
