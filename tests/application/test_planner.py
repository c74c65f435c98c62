"""Tests for VersionPlanner."""

import pytest

from uplift.application.planner import REPORT_STEP_ID, VersionPlanner
from uplift.domain.models import HandlerKind, MigrationContext
from uplift.domain.task_graph import TaskGraph
from uplift.infrastructure.knowledge_base import KnowledgeBase


@pytest.fixture
def planner() -> VersionPlanner:
    return VersionPlanner(KnowledgeBase.load())


def _context(current: str | None, target: str | None) -> MigrationContext:
    return MigrationContext(
        project_root=".", current_version=current, target_version=target
    )


class TestUpgradePath:
    def test_one_hop_per_major(self, planner: VersionPlanner) -> None:
        path = planner.upgrade_path("15.2.0", "18")

        assert [v.version for v in path] == ["16.0.0", "17.0.0", "18.0.0"]

    def test_same_major_plans_that_release(self, planner: VersionPlanner) -> None:
        assert [v.version for v in planner.upgrade_path("17.1.0", "17")] == ["17.0.0"]

    def test_unparseable_versions_yield_empty_path(self, planner: VersionPlanner) -> None:
        assert planner.upgrade_path("latest", "18") == []


class TestPlan:
    def test_default_versions(self, planner: VersionPlanner) -> None:
        steps = planner.run(_context(None, None))

        ids = [s.id for s in steps]
        assert ids[0] == "upgrade-to-17-0-0-env"
        assert "upgrade-to-18-0-0-test" in ids
        assert ids[-1] == REPORT_STEP_ID

    def test_hop_with_breaking_changes(self, planner: VersionPlanner) -> None:
        steps = planner.run(_context("16.0.0", "17.0.0"))

        assert [s.handler_name for s in steps] == [
            HandlerKind.ENVIRONMENT.value,
            HandlerKind.DEPENDENCY.value,
            HandlerKind.RUNTIME.value,
            HandlerKind.ROUTER.value,
            HandlerKind.UI.value,
            HandlerKind.BUILD.value,
            HandlerKind.TEST.value,
            HandlerKind.REPORT.value,
        ]
        env = steps[0]
        assert env.payload["node_range"] == "^18.13.0 || ^20.9.0"
        assert env.dependency_ids == ()

    def test_hops_are_chained(self, planner: VersionPlanner) -> None:
        steps = planner.run(_context("16.0.0", "18.0.0"))
        by_id = {s.id: s for s in steps}

        assert by_id["upgrade-to-18-0-0-env"].dependency_ids == (
            "upgrade-to-17-0-0-test",
        )
        assert by_id[REPORT_STEP_ID].dependency_ids == ("upgrade-to-18-0-0-test",)

    def test_runtime_migrations_start_from_previous_hop(
        self, planner: VersionPlanner
    ) -> None:
        steps = planner.run(_context("16.0.0", "18.0.0"))
        by_id = {s.id: s for s in steps}

        assert by_id["upgrade-to-17-0-0-runtime"].payload["from_version"] == "16.0.0"
        assert by_id["upgrade-to-18-0-0-runtime"].payload["from_version"] == "17.0.0"

    def test_every_dependency_is_planned(self, planner: VersionPlanner) -> None:
        steps = planner.run(_context("14.0.0", "19.0.0"))
        graph = TaskGraph(steps)

        for step in steps:
            for dep in step.dependency_ids:
                assert dep in graph

    def test_release_without_breaking_changes_skips_code_fixes(self) -> None:
        kb = KnowledgeBase.from_dict(
            {"versions": [{"version": "2.0.0", "nodeRange": ">=18"}]}
        )

        steps = VersionPlanner(kb).run(_context("1.0.0", "2.0.0"))

        assert [s.id for s in steps] == [
            "upgrade-to-2-0-0-env",
            "upgrade-to-2-0-0-deps",
            "upgrade-to-2-0-0-build",
            "upgrade-to-2-0-0-test",
            REPORT_STEP_ID,
        ]
        assert steps[2].dependency_ids == ("upgrade-to-2-0-0-deps",)

    def test_nothing_to_do_still_reports(self, planner: VersionPlanner) -> None:
        steps = planner.run(_context("18.0.0", "12.0.0"))

        assert [s.id for s in steps] == [REPORT_STEP_ID]
        assert steps[0].dependency_ids == ()
