"""Tests for TaskGraph runnable-step selection."""

import dataclasses

import pytest

from uplift.domain.exceptions import DuplicateIdError
from uplift.domain.models import Step, StepStatus
from uplift.domain.task_graph import TaskGraph


def _step(step_id: str, *deps: str, status: StepStatus = StepStatus.PENDING) -> Step:
    return Step(
        id=step_id,
        kind="BUILD_FIX",
        description=step_id,
        handler_name="BuildAgent",
        dependency_ids=deps,
        status=status,
    )


def _set(graph: TaskGraph, step_id: str, status: StepStatus) -> None:
    step = graph.get(step_id)
    assert step is not None
    graph.replace(dataclasses.replace(step, status=status))


class TestAddTask:
    def test_add_and_get(self) -> None:
        graph = TaskGraph()
        graph.add_task(_step("a"))

        assert graph.get("a") is not None
        assert "a" in graph
        assert len(graph) == 1

    def test_get_unknown_returns_none(self) -> None:
        assert TaskGraph().get("missing") is None

    def test_duplicate_id_raises(self) -> None:
        graph = TaskGraph([_step("a")])

        with pytest.raises(DuplicateIdError) as exc_info:
            graph.add_task(_step("a"))
        assert exc_info.value.step_id == "a"

    def test_replace_unknown_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            TaskGraph().replace(_step("ghost"))


class TestRunnableTasks:
    """runnable_tasks() returns PENDING steps whose deps are all COMPLETED."""

    def test_step_without_dependencies_is_runnable(self) -> None:
        graph = TaskGraph([_step("a")])

        assert [s.id for s in graph.runnable_tasks()] == ["a"]

    def test_dependent_waits_for_completion(self) -> None:
        graph = TaskGraph([_step("a"), _step("b", "a")])

        assert [s.id for s in graph.runnable_tasks()] == ["a"]

        _set(graph, "a", StepStatus.IN_PROGRESS)
        assert graph.runnable_tasks() == []

        _set(graph, "a", StepStatus.COMPLETED)
        assert [s.id for s in graph.runnable_tasks()] == ["b"]

    def test_insertion_order_is_tie_break(self) -> None:
        graph = TaskGraph([_step("z"), _step("m"), _step("a")])

        assert [s.id for s in graph.runnable_tasks()] == ["z", "m", "a"]

    def test_non_pending_steps_never_returned(self) -> None:
        graph = TaskGraph(
            [
                _step("done", status=StepStatus.COMPLETED),
                _step("failed", status=StepStatus.FAILED),
                _step("skipped", status=StepStatus.SKIPPED),
                _step("running", status=StepStatus.IN_PROGRESS),
            ]
        )

        assert graph.runnable_tasks() == []

    def test_failed_dependency_never_satisfies(self) -> None:
        graph = TaskGraph([_step("a", status=StepStatus.FAILED), _step("b", "a")])

        assert graph.runnable_tasks() == []

    def test_unknown_dependency_never_satisfies(self) -> None:
        graph = TaskGraph([_step("b", "not-planned")])

        assert graph.runnable_tasks() == []

    def test_no_returned_step_has_incomplete_dependency(self) -> None:
        graph = TaskGraph(
            [
                _step("a"),
                _step("b", "a"),
                _step("c"),
                _step("d", "b", "c"),
                _step("e", "d"),
            ]
        )
        _set(graph, "a", StepStatus.COMPLETED)
        _set(graph, "c", StepStatus.COMPLETED)

        for step in graph.runnable_tasks():
            for dep in step.dependency_ids:
                dep_step = graph.get(dep)
                assert dep_step is not None
                assert dep_step.status == StepStatus.COMPLETED

    def test_idempotent_without_mutation(self) -> None:
        graph = TaskGraph([_step("a"), _step("b"), _step("c", "a")])

        assert graph.runnable_tasks() == graph.runnable_tasks()


class TestBlockedTasks:
    def test_dependents_of_failed_step_are_blocked_transitively(self) -> None:
        graph = TaskGraph(
            [
                _step("a", status=StepStatus.FAILED),
                _step("b", "a"),
                _step("c", "b"),
                _step("independent"),
            ]
        )

        assert [s.id for s in graph.blocked_tasks()] == ["b", "c"]

    def test_unknown_dependency_is_blocked(self) -> None:
        graph = TaskGraph([_step("b", "nope")])

        assert [s.id for s in graph.blocked_tasks()] == ["b"]

    def test_cycle_is_blocked(self) -> None:
        graph = TaskGraph([_step("a", "b"), _step("b", "a")])

        assert [s.id for s in graph.blocked_tasks()] == ["a", "b"]

    def test_waiting_step_is_not_blocked(self) -> None:
        graph = TaskGraph([_step("a"), _step("b", "a")])

        assert graph.blocked_tasks() == []
