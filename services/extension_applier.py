# ============================================================================
# RESTART-GATED EXTENSION APPLIER
# ============================================================================
# STATUS: Services - Executes bootstrap actions in order
# PURPOSE: Create extensions, defer restart-gated ones, block dependents of failures
# ============================================================================
"""
Restart-Gated Applier.

Walks the actions produced by the scope fan-out, in order, and decides for
each one whether to attempt it:

    1. A dependency failed (or was itself blocked)  -> DEFERRED, blocked
    2. A dependency is deferred for another reason  -> DEFERRED, awaiting dependency
    3. Restart-gated and the server is not ready    -> DEFERRED, awaiting server restart
    4. Otherwise                                    -> create-if-absent

Dependencies are looked up in the same database first, then on the
template (TEMPLATE_ONLY dependencies only have a template action).

A failed action never stops independent siblings. Only ExtensionCreateError
(and its timeout subclass) is recorded per action; anything else is a bug
and propagates.

Exports:
    RestartGatedApplier: Action executor
"""

import time
from typing import Dict, List, Optional, Sequence, Tuple

from config.defaults import BootstrapDefaults
from core.errors import ErrorCode
from core.logic.transitions import is_action_terminal
from core.models import ActionState, BootstrapAction
from exceptions import ContractViolationError, ExtensionCreateError
from infrastructure.interface_repository import IExtensionCatalog
from util_logger import LoggerFactory, ComponentType, LogContext


AWAITING_RESTART_REASON = "awaiting server restart"


class RestartGatedApplier:
    """
    Executes bootstrap actions against an extension catalog.
    """

    def __init__(
        self,
        catalog: IExtensionCatalog,
        server_ready_for_restart_gated_extensions: bool = False,
        timeout_seconds: float = BootstrapDefaults.ACTION_TIMEOUT_SECONDS
    ):
        self.catalog = catalog
        self.server_ready = server_ready_for_restart_gated_extensions
        self.timeout_seconds = timeout_seconds
        self.logger = LoggerFactory.create_logger(ComponentType.SERVICE, "RestartGatedApplier")

    def apply(self, actions: Sequence[BootstrapAction]) -> List[BootstrapAction]:
        """
        Execute actions in order. Every action ends in a terminal state.

        Args:
            actions: PENDING actions in install order

        Returns:
            The same actions, now APPLIED, DEFERRED or FAILED

        Raises:
            ContractViolationError: An action was left PENDING
        """
        by_key: Dict[Tuple[str, str], BootstrapAction] = {}
        template_actions: Dict[str, BootstrapAction] = {}

        for action in actions:
            self._apply_one(action, by_key, template_actions)
            if not is_action_terminal(action.state):
                raise ContractViolationError(f"Action {action.key} left in state {action.state.value}")
            by_key[(action.database.name, action.extension.name)] = action
            if action.database.is_template:
                template_actions[action.extension.name] = action

        return list(actions)

    # ------------------------------------------------------------------
    # Per action
    # ------------------------------------------------------------------

    def _apply_one(
        self,
        action: BootstrapAction,
        by_key: Dict[Tuple[str, str], BootstrapAction],
        template_actions: Dict[str, BootstrapAction]
    ) -> None:
        blocked: List[str] = []
        waiting: List[str] = []

        for dep in sorted(action.extension.depends_on):
            dep_action = by_key.get((action.database.name, dep)) or template_actions.get(dep)
            if dep_action is None:
                continue
            if dep_action.state == ActionState.FAILED:
                blocked.append(dep)
            elif dep_action.state == ActionState.DEFERRED:
                if dep_action.error_code == ErrorCode.BLOCKED_BY_DEPENDENCY:
                    blocked.append(dep)
                else:
                    waiting.append(dep)

        if blocked:
            action.mark_deferred(
                f"blocked by failed dependency ({', '.join(blocked)})",
                ErrorCode.BLOCKED_BY_DEPENDENCY
            )
            self.logger.warning(f"⏭️ {action.key}: {action.reason}")
            return

        if waiting:
            action.mark_deferred(
                f"awaiting deferred dependency ({', '.join(waiting)})",
                ErrorCode.AWAITING_DEPENDENCY
            )
            self.logger.info(f"⏸️ {action.key}: {action.reason}")
            return

        if action.extension.requires_restart and not self.server_ready:
            action.mark_deferred(AWAITING_RESTART_REASON, ErrorCode.AWAITING_RESTART)
            self.logger.info(f"⏸️ {action.key}: {AWAITING_RESTART_REASON}")
            return

        self._create(action)

    def _create(self, action: BootstrapAction) -> None:
        start = time.perf_counter()
        error: Optional[ExtensionCreateError] = None
        mutated = False

        try:
            mutated = self.catalog.create_extension(
                action.database.name,
                action.extension.name,
                self.timeout_seconds
            )
        except ExtensionCreateError as e:
            error = e

        action.duration_ms = round((time.perf_counter() - start) * 1000, 2)

        if error is not None:
            action.mark_failed(str(error), error.error_code)
            self.logger.error(
                f"❌ {action.key}: {action.reason}",
                extra={'custom_dimensions': {
                    **LogContext(database=action.database.name, extension=action.extension.name).to_dict(),
                    'error_code': error.error_code.value,
                }}
            )
            return

        action.mark_applied(mutated)
        self.logger.info(
            f"✅ {action.key}: {'created' if mutated else 'already installed'} "
            f"({action.duration_ms}ms)"
        )
