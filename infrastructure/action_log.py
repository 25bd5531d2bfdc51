# ============================================================================
# JSONL ACTION LOG
# ============================================================================
# STATUS: Infrastructure - append-only audit trail of bootstrap actions
# PURPOSE: One JSON line per action per run, for post-mortems across restarts
# EXPORTS: ActionRecord, JSONLActionLog, NullActionLog
# ============================================================================
"""
JSONL Action Log.

The report of a run is printed once and gone; the action log keeps every run
so an operator can see when an extension was deferred, when it was finally
applied and what failed in between.

JSON Lines Format:
    {"ts":"2026-01-12T14:30:52+00:00","run_id":"3f2a...","database":"template1","extension":"pg_cron","state":"deferred",...}

Write failures are logged and swallowed: a full disk must not turn a
successful bootstrap into a failed one.
"""

import json
import threading
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from core.models import BootstrapAction
from util_logger import LoggerFactory, ComponentType
from .interface_repository import IActionLog


# ============================================================================
# ACTION RECORD
# ============================================================================

@dataclass
class ActionRecord:
    """Single action log line."""
    ts: str
    run_id: str
    database: str
    extension: str
    state: str
    reason: Optional[str] = None
    error_code: Optional[str] = None
    mutated: bool = False
    duration_ms: Optional[float] = None

    @classmethod
    def from_action(cls, run_id: str, action: BootstrapAction) -> "ActionRecord":
        return cls(
            ts=datetime.now(timezone.utc).isoformat(),
            run_id=run_id,
            database=action.database.name,
            extension=action.extension.name,
            state=action.state.value,
            reason=action.reason,
            error_code=action.error_code.value if action.error_code else None,
            mutated=action.mutated,
            duration_ms=action.duration_ms,
        )

    def to_json_line(self) -> str:
        """Compact JSON, no newlines in output."""
        return json.dumps(asdict(self), separators=(',', ':'), default=str)


# ============================================================================
# LOG IMPLEMENTATIONS
# ============================================================================

class JSONLActionLog(IActionLog):
    """
    Append-only JSON Lines file.

    The file and its parent directory are created on first write.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()
        self.records_written = 0
        self.write_errors = 0
        self.logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "JSONLActionLog")

    def record(self, run_id: str, action: BootstrapAction) -> None:
        line = ActionRecord.from_action(run_id, action).to_json_line()
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(line + "\n")
                self.records_written += 1
            except OSError as e:
                self.write_errors += 1
                self.logger.warning(
                    f"⚠️ Could not append to action log {self.path}: {e}",
                    extra={'custom_dimensions': {'action': action.key, 'path': str(self.path)}}
                )


class NullActionLog(IActionLog):
    """Action log that discards everything (no log file configured)."""

    def record(self, run_id: str, action: BootstrapAction) -> None:
        return None
