"""
Extension Bootstrap Configuration.

What to install, where, and under which restart gate. Every field can come
from the environment (for the container init script) and be overridden on
the command line.

Exports:
    BootstrapConfig: Sequencer configuration
    parse_name_list: Comma-separated list parser
"""

import os
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from .defaults import BootstrapDefaults


def parse_name_list(value: Optional[str]) -> Optional[List[str]]:
    """
    Parse a comma-separated list of names.

    Returns None for None, an empty list for a blank string. Duplicates are
    dropped, first occurrence wins.
    """
    if value is None:
        return None
    names: List[str] = []
    for part in value.split(","):
        part = part.strip()
        if part and part not in names:
            names.append(part)
    return names


def _env_bool(name: str, default: bool) -> bool:
    return os.environ.get(name, str(default)).strip().lower() in ("true", "1", "yes")


class BootstrapConfig(BaseModel):
    """
    Extension bootstrap configuration.
    """

    extensions: Optional[List[str]] = Field(
        default=None,
        description="Extensions to install. None = the registry's default set."
    )

    databases: List[str] = Field(
        default_factory=list,
        description="Application databases to bootstrap besides the template"
    )

    template_database: str = Field(
        default=BootstrapDefaults.TEMPLATE_DATABASE,
        min_length=1,
        description="Template database that TEMPLATE_ONLY extensions are installed into"
    )

    restart_ready: bool = Field(
        default=BootstrapDefaults.RESTART_READY,
        description="""True only on a run after the server restarted with the updated
        shared_preload_libraries. False defers restart-gated extensions (pg_cron)."""
    )

    action_timeout_seconds: float = Field(
        default=BootstrapDefaults.ACTION_TIMEOUT_SECONDS,
        gt=0,
        description="Per-action CREATE EXTENSION timeout"
    )

    server_config_file: Optional[str] = Field(
        default=None,
        description="Server configuration file for shared_preload_libraries (None = $PGDATA/postgresql.conf)"
    )

    pgdata: str = Field(
        default=BootstrapDefaults.PGDATA,
        description="Server data directory"
    )

    registry_file: Optional[str] = Field(
        default=None,
        description="JSON registry file replacing the built-in registry"
    )

    action_log_file: Optional[str] = Field(
        default=None,
        description="Append-only JSON Lines action log (disabled when unset)"
    )

    @field_validator('extensions', 'databases', mode='before')
    @classmethod
    def split_names(cls, v):
        if isinstance(v, str):
            return parse_name_list(v)
        return v

    @property
    def effective_server_config_file(self) -> Path:
        """Configuration file the restart writer updates."""
        if self.server_config_file:
            return Path(self.server_config_file)
        return Path(self.pgdata) / BootstrapDefaults.SERVER_CONFIG_FILENAME

    def debug_dict(self) -> dict:
        return {
            "extensions": self.extensions if self.extensions is not None else "(registry defaults)",
            "databases": self.databases,
            "template_database": self.template_database,
            "restart_ready": self.restart_ready,
            "action_timeout_seconds": self.action_timeout_seconds,
            "server_config_file": str(self.effective_server_config_file),
            "registry_file": self.registry_file or "(built-in)",
            "action_log_file": self.action_log_file,
        }

    @classmethod
    def from_environment(cls, default_database: Optional[str] = None) -> "BootstrapConfig":
        """
        Load from environment variables.

        Args:
            default_database: Database used when BOOTSTRAP_DATABASES is unset
                (normally POSTGRES_DB)
        """
        databases = parse_name_list(os.environ.get("BOOTSTRAP_DATABASES"))
        if databases is None:
            databases = [default_database] if default_database else []

        return cls(
            # Blank means "not configured" here; an empty request installs nothing
            extensions=parse_name_list(os.environ.get("BOOTSTRAP_EXTENSIONS") or None),
            databases=databases,
            template_database=os.environ.get(
                "BOOTSTRAP_TEMPLATE_DATABASE", BootstrapDefaults.TEMPLATE_DATABASE
            ),
            restart_ready=_env_bool("BOOTSTRAP_RESTART_READY", BootstrapDefaults.RESTART_READY),
            action_timeout_seconds=float(os.environ.get(
                "BOOTSTRAP_ACTION_TIMEOUT_SECONDS", str(BootstrapDefaults.ACTION_TIMEOUT_SECONDS)
            )),
            server_config_file=os.environ.get("BOOTSTRAP_SERVER_CONFIG_FILE") or None,
            pgdata=os.environ.get("PGDATA", BootstrapDefaults.PGDATA),
            registry_file=os.environ.get("BOOTSTRAP_REGISTRY_FILE") or None,
            action_log_file=os.environ.get("BOOTSTRAP_ACTION_LOG") or None,
        )
