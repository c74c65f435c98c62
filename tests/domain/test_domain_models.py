"""Tests for domain models."""

import pytest

from uplift.domain.exceptions import UnknownHandlerError
from uplift.domain.models import (
    Conflict,
    ConflictSeverity,
    HandlerKind,
    ResolutionNode,
    ResolutionResult,
    RunResult,
    Step,
    StepStatus,
    WorkflowPhase,
    WorkflowState,
)


class TestStep:
    def test_step_is_immutable(self) -> None:
        step = Step(id="a", kind="K", description="", handler_name="BuildAgent")

        with pytest.raises(AttributeError):
            step.status = StepStatus.COMPLETED  # type: ignore[misc]

    def test_dict_round_trip_preserves_status_and_deps(self) -> None:
        step = Step(
            id="b",
            kind="TEST",
            description="run tests",
            handler_name="TestAgent",
            dependency_ids=("a",),
            status=StepStatus.SKIPPED,
            payload={"target_version": "17.0.0"},
        )

        data = step.to_dict()
        assert data["status"] == "SKIPPED"
        assert data["dependency_ids"] == ["a"]
        assert Step.from_dict(data) == step


class TestHandlerKind:
    def test_parse_value(self) -> None:
        assert HandlerKind.parse("EnvironmentAgent") is HandlerKind.ENVIRONMENT

    def test_parse_enum_passthrough(self) -> None:
        assert HandlerKind.parse(HandlerKind.REPORT) is HandlerKind.REPORT

    def test_parse_unknown(self) -> None:
        with pytest.raises(UnknownHandlerError, match="MagicAgent"):
            HandlerKind.parse("MagicAgent")


class TestWorkflowState:
    def test_defaults(self) -> None:
        state = WorkflowState()

        assert state.phase == WorkflowPhase.PLANNING
        assert state.current_step_id is None
        assert state.last_error is None
        assert not state.is_terminal

    def test_get_step(self) -> None:
        step = Step(id="a", kind="K", description="", handler_name="BuildAgent")
        state = WorkflowState(steps=(step,))

        assert state.get_step("a") is step
        assert state.get_step("b") is None


class TestRunResult:
    def _steps(self, *statuses: StepStatus) -> tuple[Step, ...]:
        return tuple(
            Step(id=f"s{i}", kind="K", description="", handler_name="BuildAgent", status=s)
            for i, s in enumerate(statuses)
        )

    def test_partial_when_completed_with_failures(self) -> None:
        result = RunResult(
            phase=WorkflowPhase.COMPLETED,
            steps=self._steps(StepStatus.COMPLETED, StepStatus.FAILED, StepStatus.SKIPPED),
        )

        assert result.partial
        assert [s.id for s in result.steps_with_status(StepStatus.SKIPPED)] == ["s2"]

    def test_not_partial_when_all_completed(self) -> None:
        result = RunResult(
            phase=WorkflowPhase.COMPLETED,
            steps=self._steps(StepStatus.COMPLETED, StepStatus.COMPLETED),
        )

        assert not result.partial


class TestResolutionResult:
    def test_size_counts_nested_nodes(self) -> None:
        leaf = ResolutionNode("c", "^1.0.0", "1.0.0")
        mid = ResolutionNode("b", "^1.0.0", "1.0.0", dependencies={"c": leaf})
        root = ResolutionNode("a", "^1.0.0", "1.0.0", dependencies={"b": mid})
        result = ResolutionResult(tree={"a": root}, conflicts=[], resolutions={})

        assert result.size() == 3
        assert [n.name for n in root.walk()] == ["a", "b", "c"]

    def test_errors_and_warnings_split(self) -> None:
        error = Conflict("x", {"root"}, ["^1.0.0", "^2.0.0"], ConflictSeverity.ERROR)
        warning = Conflict("y", {"a"}, ["^1.0.0"], ConflictSeverity.WARNING)
        result = ResolutionResult(tree={}, conflicts=[error, warning], resolutions={})

        assert result.errors == [error]
        assert result.warnings == [warning]
