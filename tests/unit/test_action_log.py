"""
JSONL action log tests.
"""

import json

from core.errors import ErrorCode
from core.models import BootstrapAction, DatabaseTarget
from infrastructure.action_log import ActionRecord, JSONLActionLog, NullActionLog
from tests.factories.model_factories import make_spec


def _deferred_cron():
    action = BootstrapAction(
        extension=make_spec("pg_cron", requires_restart=True),
        database=DatabaseTarget(name="template1", is_template=True),
    )
    action.mark_deferred("awaiting server restart", ErrorCode.AWAITING_RESTART)
    return action


class TestJSONLActionLog:

    def test_appends_across_runs(self, tmp_path):
        path = tmp_path / "nested" / "actions.jsonl"
        log = JSONLActionLog(path)
        log.record("run-1", _deferred_cron())
        JSONLActionLog(path).record("run-2", _deferred_cron())

        lines = [json.loads(line) for line in path.read_text().splitlines()]
        assert [line["run_id"] for line in lines] == ["run-1", "run-2"]
        assert lines[0]["state"] == "deferred"
        assert lines[0]["reason"] == "awaiting server restart"
        assert lines[0]["error_code"] == "AWAITING_RESTART"
        assert lines[0]["database"] == "template1"
        assert log.records_written == 1

    def test_write_failure_is_not_fatal(self, tmp_path):
        directory = tmp_path / "actions.jsonl"
        directory.mkdir()
        log = JSONLActionLog(directory)

        log.record("run-1", _deferred_cron())

        assert log.write_errors == 1
        assert log.records_written == 0


class TestActionRecord:

    def test_json_line_is_single_line(self):
        line = ActionRecord.from_action("run-1", _deferred_cron()).to_json_line()
        assert "\n" not in line
        assert json.loads(line)["extension"] == "pg_cron"


def test_null_log_discards():
    assert NullActionLog().record("run-1", _deferred_cron()) is None
