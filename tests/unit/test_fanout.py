"""
Scope fan-out tests.
"""

import pytest

from core.logic.fanout import build_targets, expand_actions
from core.models import ActionState, DatabaseTarget, TargetScope
from tests.factories.model_factories import make_spec


class TestBuildTargets:

    def test_template_first(self):
        targets = build_targets(["app", "reporting"], "template1")
        assert [t.name for t in targets] == ["template1", "app", "reporting"]
        assert [t.is_template for t in targets] == [True, False, False]

    def test_duplicates_and_blanks_dropped(self):
        targets = build_targets(["app", " app ", "", "reporting", "app"], "template1")
        assert [t.name for t in targets] == ["template1", "app", "reporting"]

    def test_template_listed_as_database_is_not_duplicated(self):
        targets = build_targets(["template1", "app"], "template1")
        assert [t.name for t in targets] == ["template1", "app"]
        assert sum(t.is_template for t in targets) == 1

    def test_template_only(self):
        assert [t.name for t in build_targets([], "template1")] == ["template1"]


class TestExpandActions:

    def test_template_only_gets_one_action(self, targets):
        cron = make_spec("pg_cron", target_scope=TargetScope.TEMPLATE_ONLY)
        actions = expand_actions([cron], targets)
        assert len(actions) == 1
        assert actions[0].database.name == "template1"
        assert actions[0].database.is_template

    def test_all_databases_gets_one_action_per_target(self):
        targets = build_targets(["app", "reporting"], "template1")
        actions = expand_actions([make_spec("hstore")], targets)
        assert [a.database.name for a in actions] == ["template1", "app", "reporting"]

    def test_extension_major_order(self, targets):
        ordered = [make_spec("postgis"), make_spec("pgrouting", ["postgis"])]
        actions = expand_actions(ordered, targets)
        assert [a.key for a in actions] == [
            "template1/postgis", "app/postgis", "template1/pgrouting", "app/pgrouting"
        ]

    def test_actions_start_pending(self, targets):
        actions = expand_actions([make_spec("hstore"), make_spec("citext")], targets)
        assert all(a.state == ActionState.PENDING for a in actions)
        assert all(not a.mutated for a in actions)

    def test_mixed_scopes(self, targets):
        ordered = [
            make_spec("pg_cron", target_scope=TargetScope.TEMPLATE_ONLY),
            make_spec("pg_trgm"),
        ]
        actions = expand_actions(ordered, targets)
        assert [a.key for a in actions] == ["template1/pg_cron", "template1/pg_trgm", "app/pg_trgm"]

    def test_requires_exactly_one_template(self):
        no_template = [DatabaseTarget(name="app")]
        with pytest.raises(ValueError):
            expand_actions([make_spec("hstore")], no_template)

        two_templates = [
            DatabaseTarget(name="template0", is_template=True),
            DatabaseTarget(name="template1", is_template=True),
        ]
        with pytest.raises(ValueError):
            expand_actions([make_spec("hstore")], two_templates)

    def test_empty_order(self, targets):
        assert expand_actions([], targets) == []
