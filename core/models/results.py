"""
Bootstrap Result Data Models.

Represents the outcome of a bootstrap run. The report is the single source
of truth for an operator: which extensions are active, deferred or broken,
and why.

Exports:
    ConfigWriteResult: Outcome of the restart configuration writer
    BootstrapReport: Complete result of one bootstrap run
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from ..errors import ErrorCode, counts_as_failure, create_error_response
from .action import BootstrapAction
from .enums import ActionState


class ConfigWriteResult(BaseModel):
    """Outcome of updating the server configuration for restart-gated extensions."""

    path: Optional[str] = Field(default=None, description="Configuration file that was inspected")
    changed: bool = Field(default=False, description="True when the file was rewritten")
    preload_libraries: List[str] = Field(
        default_factory=list,
        description="Effective shared_preload_libraries after the write"
    )
    keys_written: List[str] = Field(default_factory=list, description="Configuration keys updated")

    @property
    def restart_required(self) -> bool:
        """A changed configuration only takes effect after a server restart."""
        return self.changed


class BootstrapReport(BaseModel):
    """
    Complete result of one bootstrap run.

    Pure data structure - built by ExtensionBootstrapper.
    """

    run_id: str = Field(..., description="Identifier of this run")
    started_at: datetime = Field(..., description="Run start (UTC)")
    finished_at: Optional[datetime] = Field(default=None, description="Run end (UTC)")
    requested: List[str] = Field(default_factory=list, description="Requested extension names")
    databases: List[str] = Field(default_factory=list, description="Active database set, template first")
    template_database: str = Field(..., description="Designated template database")
    server_ready_for_restart_gated_extensions: bool = Field(default=False)
    install_order: List[str] = Field(default_factory=list, description="Resolved extension order")
    actions: List[BootstrapAction] = Field(default_factory=list)
    config_write: Optional[ConfigWriteResult] = Field(default=None)
    config_write_error: Optional[str] = Field(
        default=None,
        description="Set when the restart configuration could not be written"
    )
    config_write_path: Optional[str] = Field(default=None, description="File the failed write targeted")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def actions_in_state(self, state: ActionState) -> List[BootstrapAction]:
        return [a for a in self.actions if a.state == state]

    @property
    def applied(self) -> List[BootstrapAction]:
        return self.actions_in_state(ActionState.APPLIED)

    @property
    def deferred(self) -> List[BootstrapAction]:
        return self.actions_in_state(ActionState.DEFERRED)

    @property
    def failed(self) -> List[BootstrapAction]:
        """Failed actions whose code counts as a failure."""
        return [
            a for a in self.actions_in_state(ActionState.FAILED)
            if a.error_code is None or counts_as_failure(a.error_code)
        ]

    @property
    def mutation_count(self) -> int:
        """Number of actions that changed an extension catalog."""
        return sum(1 for a in self.actions if a.mutated)

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def exit_code(self) -> int:
        """0 when no non-deferred action failed, 1 otherwise."""
        return 0 if self.success else 1

    def get_action(self, database: str, extension: str) -> Optional[BootstrapAction]:
        for action in self.actions:
            if action.database.name == database and action.extension.name == extension:
                return action
        return None

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "total_actions": len(self.actions),
            "applied": len(self.applied),
            "deferred": len(self.deferred),
            "failed": len(self.failed),
            "mutations": self.mutation_count,
        }

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "requested": self.requested,
            "databases": self.databases,
            "template_database": self.template_database,
            "server_ready_for_restart_gated_extensions": self.server_ready_for_restart_gated_extensions,
            "install_order": self.install_order,
            "actions": [a.to_dict() for a in self.actions],
            "config_write": self.config_write.model_dump() if self.config_write else None,
            "config_write_error": (
                create_error_response(
                    ErrorCode.CONFIG_WRITE_ERROR,
                    self.config_write_error,
                    path=self.config_write_path,
                )
                if self.config_write_error else None
            ),
            "success": self.success,
            "exit_code": self.exit_code,
            "summary": self.summary,
        }

    def format_text(self) -> str:
        """Operator-facing plain text table."""
        rows = [("DATABASE", "EXTENSION", "STATE", "REASON")]
        for a in self.actions:
            rows.append((a.database.name, a.extension.name, a.state.value.upper(), a.reason or ""))

        widths = [max(len(r[i]) for r in rows) for i in range(3)]
        lines = [f"Extension bootstrap run {self.run_id}"]
        for row in rows:
            lines.append("  ".join(row[i].ljust(widths[i]) for i in range(3)) + "  " + row[3])

        s = self.summary
        lines.append(
            f"{s['applied']} applied, {s['deferred']} deferred, {s['failed']} failed, "
            f"{s['mutations']} catalog changes"
        )
        if self.config_write_error:
            lines.append(f"WARNING: server configuration not updated: {self.config_write_error}")
        elif self.config_write and self.config_write.restart_required:
            lines.append(
                f"Server configuration updated ({self.config_write.path}); "
                f"restart the server to enable restart-gated extensions"
            )
        return "\n".join(lines)
