# ============================================================================
# ENVIRONMENT VARIABLE VALIDATION
# ============================================================================
# STATUS: Configuration - Startup validation with regex patterns
# PURPOSE: Validate env vars before connecting so bad config exits with code 2
# ============================================================================
"""
Environment Variable Validation Module.

Validates environment variables at startup using regex patterns to catch
configuration errors EARLY with clear, actionable error messages. Runs
before any database connection is opened; a run with an invalid variable
never issues a single CREATE EXTENSION.

Design Philosophy:
    - FAIL FAST: Catch config errors at startup, not halfway through a run
    - CLEAR ERRORS: Show exactly what's wrong and how to fix it
    - REGEX VALIDATION: Format validation, not just presence checks
    - ZERO DEPENDENCIES: Only standard library imports

Usage:
    from config.env_validation import validate_environment

    errors = [e for e in validate_environment() if e.severity == "error"]

Exports:
    ENV_VAR_RULES: Dict of all validation rules
    ValidationError: Dataclass for validation errors
    validate_environment: Main validation function
    validate_single_var: Validate one variable
"""

import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Any


# ============================================================================
# VALIDATION ERROR
# ============================================================================

@dataclass
class ValidationError:
    """Result of a failed environment variable validation."""
    var_name: str
    message: str
    current_value: Optional[str]
    expected_pattern: str
    fix_suggestion: str
    severity: str = "error"  # error, warning

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "var_name": self.var_name,
            "message": self.message,
            "current_value": self._mask_sensitive(self.current_value),
            "expected_pattern": self.expected_pattern,
            "fix_suggestion": self.fix_suggestion,
            "severity": self.severity,
        }

    def _mask_sensitive(self, value: Optional[str]) -> Optional[str]:
        """Mask potentially sensitive values."""
        if value is None:
            return None
        if "password" in self.var_name.lower():
            return "***MASKED***"
        if len(value) > 30:
            return f"{value[:20]}...({len(value)} chars)"
        return value


# ============================================================================
# VALIDATION RULE DEFINITION
# ============================================================================

@dataclass
class EnvVarRule:
    """
    Validation rule for an environment variable.

    Attributes:
        pattern: Compiled regex pattern for validation
        pattern_description: Human-readable description of expected format
        required: Whether this variable must be set
        fix_suggestion: How to fix if validation fails
        example: Example valid value
        default_value: Default value used if not set (for warning messages)
        warn_on_default: Emit warning when using default value
    """
    pattern: Pattern
    pattern_description: str
    required: bool
    fix_suggestion: str
    example: str
    default_value: Optional[str] = None
    warn_on_default: bool = False


# ============================================================================
# VALIDATION RULES - Single source of truth for env var formats
# ============================================================================

# Common regex patterns (reusable)
_HOST = re.compile(r"^(/[^\s]*|[a-zA-Z0-9]([a-zA-Z0-9.-]*[a-zA-Z0-9])?)$")
_PORT = re.compile(r"^([1-9][0-9]{0,3}|[1-5][0-9]{4}|6[0-4][0-9]{3}|65[0-4][0-9]{2}|655[0-2][0-9]|6553[0-5])$")
_POSITIVE_INT = re.compile(r"^[1-9][0-9]*$")
_POSITIVE_NUMBER = re.compile(r"^([0-9]*\.)?[0-9]+$")
_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_$-]{0,62}$")
_IDENTIFIER_LIST = re.compile(r"^\s*[a-zA-Z_][a-zA-Z0-9_$-]*\s*(,\s*[a-zA-Z_][a-zA-Z0-9_$-]*\s*)*,?\s*$")
_BOOLEAN = re.compile(r"^(true|false|1|0|yes|no)$", re.IGNORECASE)
_LOG_LEVEL = re.compile(r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$", re.IGNORECASE)
_SSLMODE = re.compile(r"^(disable|allow|prefer|require|verify-ca|verify-full)$")
_PATH = re.compile(r"^[^\x00]+$")


ENV_VAR_RULES: Dict[str, EnvVarRule] = {
    # ========================================================================
    # SERVER CONNECTION
    # ========================================================================
    "POSTGRES_HOST": EnvVarRule(
        pattern=_HOST,
        pattern_description="Host name, IP address, or absolute socket directory",
        required=False,
        fix_suggestion="Leave unset to use the local unix socket",
        example="localhost",
    ),
    "POSTGRES_PORT": EnvVarRule(
        pattern=_PORT,
        pattern_description="TCP port number 1-65535",
        required=False,
        fix_suggestion="Use the port the server listens on",
        example="5432",
        default_value="5432",
    ),
    "POSTGRES_USER": EnvVarRule(
        pattern=_IDENTIFIER,
        pattern_description="PostgreSQL role name",
        required=False,
        fix_suggestion="Use a superuser role; untrusted extensions need one",
        example="postgres",
        default_value="postgres",
    ),
    "POSTGRES_DB": EnvVarRule(
        pattern=_IDENTIFIER,
        pattern_description="Database name (letters, digits, underscore, max 63 chars)",
        required=False,
        fix_suggestion="Use the application database name the entrypoint created",
        example="app",
        default_value="postgres",
    ),
    "POSTGRES_SSLMODE": EnvVarRule(
        pattern=_SSLMODE,
        pattern_description="libpq sslmode value",
        required=False,
        fix_suggestion="Use one of disable, allow, prefer, require, verify-ca, verify-full",
        example="prefer",
    ),
    "POSTGRES_CONNECT_TIMEOUT": EnvVarRule(
        pattern=_POSITIVE_INT,
        pattern_description="Positive integer (seconds)",
        required=False,
        fix_suggestion="Set a whole number of seconds",
        example="10",
        default_value="10",
    ),

    # ========================================================================
    # BOOTSTRAP
    # ========================================================================
    "BOOTSTRAP_EXTENSIONS": EnvVarRule(
        pattern=_IDENTIFIER_LIST,
        pattern_description="Comma-separated extension names",
        required=False,
        fix_suggestion="List extension names separated by commas, or unset for the default set",
        example="postgis,pg_trgm,uuid-ossp",
    ),
    "BOOTSTRAP_DATABASES": EnvVarRule(
        pattern=_IDENTIFIER_LIST,
        pattern_description="Comma-separated database names",
        required=False,
        fix_suggestion="List database names separated by commas, or unset for POSTGRES_DB",
        example="app,reporting",
    ),
    "BOOTSTRAP_TEMPLATE_DATABASE": EnvVarRule(
        pattern=_IDENTIFIER,
        pattern_description="Database name",
        required=False,
        fix_suggestion="Use the template new databases are created from",
        example="template1",
        default_value="template1",
    ),
    "BOOTSTRAP_RESTART_READY": EnvVarRule(
        pattern=_BOOLEAN,
        pattern_description="Boolean (true/false)",
        required=False,
        fix_suggestion="Set true only after the server restarted with the updated config",
        example="false",
        default_value="false",
    ),
    "BOOTSTRAP_ACTION_TIMEOUT_SECONDS": EnvVarRule(
        pattern=_POSITIVE_NUMBER,
        pattern_description="Positive number (seconds)",
        required=False,
        fix_suggestion="Set the per-extension timeout in seconds",
        example="600",
        default_value="600",
    ),
    "BOOTSTRAP_SERVER_CONFIG_FILE": EnvVarRule(
        pattern=_PATH,
        pattern_description="File path",
        required=False,
        fix_suggestion="Point at the postgresql.conf the server reads",
        example="/var/lib/postgresql/data/postgresql.conf",
    ),
    "BOOTSTRAP_REGISTRY_FILE": EnvVarRule(
        pattern=_PATH,
        pattern_description="File path",
        required=False,
        fix_suggestion="Point at a JSON array of extension definitions",
        example="/etc/bootstrap/extensions.json",
    ),
    "BOOTSTRAP_ACTION_LOG": EnvVarRule(
        pattern=_PATH,
        pattern_description="File path",
        required=False,
        fix_suggestion="Point at a writable JSON Lines file",
        example="/var/lib/postgresql/data/bootstrap_actions.jsonl",
    ),

    # ========================================================================
    # LOGGING
    # ========================================================================
    "LOG_LEVEL": EnvVarRule(
        pattern=_LOG_LEVEL,
        pattern_description="DEBUG, INFO, WARNING, ERROR or CRITICAL",
        required=False,
        fix_suggestion="Use a standard Python log level name",
        example="INFO",
        default_value="INFO",
    ),
    "DEBUG_MODE": EnvVarRule(
        pattern=_BOOLEAN,
        pattern_description="Boolean (true/false)",
        required=False,
        fix_suggestion="Set true to force DEBUG logging",
        example="false",
        default_value="false",
    ),
}


# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

def validate_single_var(
    var_name: str,
    rule: EnvVarRule,
    include_warnings: bool = True
) -> Optional[ValidationError]:
    """
    Validate a single environment variable against its rule.

    Args:
        var_name: Environment variable name
        rule: Validation rule to apply
        include_warnings: Whether to return warnings for vars using defaults

    Returns:
        ValidationError if validation fails or warning if using default, None if passes
    """
    value = os.environ.get(var_name)

    if rule.required and not value:
        return ValidationError(
            var_name=var_name,
            message="Required environment variable not set",
            current_value=value,
            expected_pattern=rule.pattern_description,
            fix_suggestion=f"{rule.fix_suggestion}. Example: {rule.example}",
            severity="error",
        )

    if value is None or value == "":
        if include_warnings and rule.warn_on_default and rule.default_value is not None:
            return ValidationError(
                var_name=var_name,
                message="Not set, using default value",
                current_value=None,
                expected_pattern=f"Default: {rule.default_value}",
                fix_suggestion=f"Set explicitly or accept default. {rule.fix_suggestion}",
                severity="warning",
            )
        return None

    if not rule.pattern.match(value):
        return ValidationError(
            var_name=var_name,
            message="Invalid format",
            current_value=value,
            expected_pattern=rule.pattern_description,
            fix_suggestion=f"{rule.fix_suggestion}. Example: {rule.example}",
            severity="error",
        )

    return None


def validate_environment(
    rules: Optional[Dict[str, EnvVarRule]] = None,
    include_warnings: bool = True
) -> List[ValidationError]:
    """
    Validate all environment variables against their rules.

    Args:
        rules: Optional custom rules dict (defaults to ENV_VAR_RULES)
        include_warnings: Whether to include warnings for vars using defaults

    Returns:
        List of ValidationError objects (errors and optionally warnings)
    """
    if rules is None:
        rules = ENV_VAR_RULES

    results = []
    for var_name, rule in rules.items():
        result = validate_single_var(var_name, rule, include_warnings=include_warnings)
        if result:
            results.append(result)

    return results


def log_validation_results(logger, results: Optional[List[ValidationError]] = None) -> bool:
    """
    Log validation results at appropriate levels.

    Args:
        logger: Logger instance
        results: Precomputed results (validates the environment if None)

    Returns:
        True if no errors, False if there are errors
    """
    if results is None:
        results = validate_environment(include_warnings=True)

    errors = [r for r in results if r.severity == "error"]
    warnings = [r for r in results if r.severity == "warning"]

    for error in errors:
        logger.error(
            f"ENV VAR ERROR: {error.var_name} - {error.message}",
            extra={'custom_dimensions': error.to_dict()}
        )

    for warning in warnings:
        default_val = warning.expected_pattern.replace("Default: ", "")
        logger.warning(f"ENV VAR: {warning.var_name} → {default_val}")

    if errors:
        logger.error(f"❌ STARTUP_FAILED: {len(errors)} environment variable errors")
        return False

    logger.debug("✅ Environment validation passed")
    return True


__all__ = [
    "ENV_VAR_RULES",
    "EnvVarRule",
    "ValidationError",
    "validate_environment",
    "validate_single_var",
    "log_validation_results",
]
