"""
Configuration Package - Domain-Specific Configuration Modules

Structure:
    config/
    ├── __init__.py              # This file - exports and singleton
    ├── app_config.py            # Main config (composes domain configs)
    ├── database_config.py       # Server connection
    ├── bootstrap_config.py      # Extensions, databases, restart gate
    ├── defaults.py              # Default values
    └── env_validation.py        # Startup env var validation

Usage:
    # Singleton pattern (preferred)
    from config import get_config
    config = get_config()
    template = config.bootstrap.template_database

    # Debug output
    from config import debug_config
    info = debug_config(config)  # Passwords masked
"""

from typing import Optional

from .database_config import DatabaseConfig
from .bootstrap_config import BootstrapConfig, parse_name_list
from .app_config import AppConfig


# ============================================================================
# SINGLETON PATTERN
# ============================================================================

_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get global configuration singleton.

    Returns:
        AppConfig instance loaded from environment
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = AppConfig.from_environment()
    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None


def debug_config(config: Optional[AppConfig] = None) -> dict:
    """
    Get sanitized configuration for debugging (masks sensitive values).

    Args:
        config: Configuration to describe. If None, uses get_config().

    Returns:
        Dictionary with configuration values, passwords masked
    """
    try:
        config = config or get_config()
        return {
            'database': config.database.debug_dict(),
            'bootstrap': config.bootstrap.debug_dict(),
            'debug_mode': config.debug_mode,
            'environment': config.environment,
            'log_level': config.log_level,
        }
    except Exception as e:
        return {'error': f'Configuration validation failed: {e}'}


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    # Main config
    'AppConfig',
    'get_config',
    'reset_config',
    'debug_config',

    # Database
    'DatabaseConfig',

    # Bootstrap
    'BootstrapConfig',
    'parse_name_list',
]
