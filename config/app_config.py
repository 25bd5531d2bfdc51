"""
Application Configuration - composition of domain configs.

Exports:
    AppConfig: Top-level configuration
"""

import os
from pydantic import BaseModel, Field, field_validator

from .defaults import AppDefaults
from .database_config import DatabaseConfig
from .bootstrap_config import BootstrapConfig


class AppConfig(BaseModel):
    """
    Application configuration - composition of domain configs.

    Each domain config manages its own validation and defaults.
    """

    # ========================================================================
    # Core Application Settings
    # ========================================================================

    debug_mode: bool = Field(
        default=AppDefaults.DEBUG_MODE,
        description="Enable debug mode (DEBUG level logging, SQL traces)"
    )

    environment: str = Field(
        default=AppDefaults.ENVIRONMENT,
        description="Environment name (dev, test, prod)",
        examples=["dev", "test", "prod"]
    )

    log_level: str = Field(
        default=AppDefaults.LOG_LEVEL,
        description="Logging level for application diagnostics",
        examples=["DEBUG", "INFO", "WARNING", "ERROR"]
    )

    # ========================================================================
    # Domain Configs
    # ========================================================================

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return v

    @property
    def effective_log_level(self) -> str:
        """DEBUG_MODE forces DEBUG regardless of LOG_LEVEL."""
        return "DEBUG" if self.debug_mode else self.log_level

    @classmethod
    def from_environment(cls):
        """Load all configs from environment."""
        database = DatabaseConfig.from_environment()
        return cls(
            debug_mode=os.environ.get("DEBUG_MODE", str(AppDefaults.DEBUG_MODE).lower()).lower() == "true",
            environment=os.environ.get("ENVIRONMENT", AppDefaults.ENVIRONMENT),
            log_level=os.environ.get("LOG_LEVEL", AppDefaults.LOG_LEVEL),

            database=database,
            bootstrap=BootstrapConfig.from_environment(default_database=database.database),
        )
