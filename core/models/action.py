"""
Bootstrap Action Model.

One attempted installation of one extension into one database. Actions are
created fresh on every run and discarded after the report is emitted.

Exports:
    BootstrapAction: Action with validated state transitions
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from exceptions import ContractViolationError
from ..errors import ErrorCode
from .enums import ActionState
from .extension import DatabaseTarget, ExtensionSpec


class BootstrapAction(BaseModel):
    """
    One (extension, database) install attempt.

    State changes go through transition() so an action can never leave a
    terminal state within a run.
    """

    extension: ExtensionSpec = Field(..., description="Extension to install")
    database: DatabaseTarget = Field(..., description="Database to install into")
    state: ActionState = Field(default=ActionState.PENDING, description="Current action state")
    reason: Optional[str] = Field(default=None, description="Explanation when DEFERRED or FAILED")
    error_code: Optional[ErrorCode] = Field(default=None, description="Classification of reason")
    mutated: bool = Field(default=False, description="True when this action changed the extension catalog")
    duration_ms: Optional[float] = Field(default=None, description="Time spent in the create call")

    @property
    def key(self) -> str:
        """Stable identifier: database/extension."""
        return f"{self.database.name}/{self.extension.name}"

    def transition(
        self,
        target: ActionState,
        reason: Optional[str] = None,
        error_code: Optional[ErrorCode] = None
    ) -> None:
        """
        Move the action to a new state.

        Raises:
            ContractViolationError: If the transition is not allowed
        """
        from ..logic.transitions import can_action_transition

        if not can_action_transition(self.state, target):
            raise ContractViolationError(
                f"Illegal action transition for {self.key}: "
                f"{self.state.value} -> {target.value}"
            )
        self.state = target
        self.reason = reason
        self.error_code = error_code

    def mark_applied(self, mutated: bool) -> None:
        self.transition(ActionState.APPLIED)
        self.mutated = mutated

    def mark_deferred(self, reason: str, error_code: ErrorCode) -> None:
        self.transition(ActionState.DEFERRED, reason, error_code)

    def mark_failed(self, reason: str, error_code: ErrorCode = ErrorCode.CREATE_FAILED) -> None:
        self.transition(ActionState.FAILED, reason, error_code)

    def to_dict(self) -> Dict[str, Any]:
        """Flat dictionary for JSON reports and the action log."""
        return {
            "extension": self.extension.name,
            "database": self.database.name,
            "is_template": self.database.is_template,
            "state": self.state.value,
            "reason": self.reason,
            "error_code": self.error_code.value if self.error_code else None,
            "mutated": self.mutated,
            "duration_ms": self.duration_ms,
        }
