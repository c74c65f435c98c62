"""
WorkflowEngine: drives migration steps to a terminal phase.

Owns WorkflowState for the duration of a run. PLANNING asks the planner for
the step list, EXECUTION runs one step per iteration until nothing is left,
and the run ends in COMPLETED or FAILED.
"""

import dataclasses
import logging
from collections.abc import Iterable

from uplift.domain.exceptions import ConfigurationError, classify_error
from uplift.domain.interfaces import (
    HandlerRegistryInterface,
    PlannerInterface,
    StorageInterface,
)
from uplift.domain.models import (
    MigrationContext,
    Step,
    StepStatus,
    WorkflowError,
    WorkflowPhase,
    WorkflowState,
)
from uplift.domain.task_graph import TaskGraph

logger = logging.getLogger(__name__)


class WorkflowEngine:
    """
    Single-threaded state machine over a TaskGraph.

    Steps run one at a time in dependency order; among runnable steps the
    earliest planned wins. A failed step is never retried here and anything
    depending on it ends SKIPPED.
    """

    def __init__(
        self,
        registry: HandlerRegistryInterface,
        planner: PlannerInterface | None = None,
        storage: StorageInterface | None = None,
    ):
        """
        Args:
            registry: Handler lookup by step handler_name
            planner: Produces the initial step list (optional when steps are passed to run)
            storage: Receives every step and status change (optional)
        """
        self._registry = registry
        self._planner = planner
        self._storage = storage
        self._graph = TaskGraph()
        self._state = WorkflowState()
        self._last_exception: BaseException | None = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def last_exception(self) -> BaseException | None:
        """Exception object behind state.last_error, if any."""
        return self._last_exception

    def run(
        self, context: MigrationContext, steps: Iterable[Step] | None = None
    ) -> WorkflowState:
        """
        Execute a full run until COMPLETED or FAILED.

        Args:
            context: Run context passed to planner and handlers
            steps: Pre-planned steps; skips the planner when given

        Returns:
            The final WorkflowState
        """
        self._graph = TaskGraph()
        self._state = WorkflowState()
        self._last_exception = None
        self._enter(WorkflowPhase.PLANNING)

        self._plan(context, steps)
        self._enter(WorkflowPhase.EXECUTION)

        while self._state.phase == WorkflowPhase.EXECUTION:
            self.execute_next(context)

        return self._state

    def _plan(self, context: MigrationContext, steps: Iterable[Step] | None) -> None:
        if steps is None:
            if self._planner is None:
                raise ConfigurationError("No planner configured and no steps given")
            logger.info("Planning upgrade steps")
            steps = self._planner.run(context)

        for step in steps:
            self._graph.add_task(step)
            if self._storage is not None:
                self._storage.save_task(step)
        self._sync_state()
        logger.info("Planned %d step(s)", len(self._graph))

    def execute_next(self, context: MigrationContext) -> WorkflowPhase:
        """Run one EXECUTION iteration and return the resulting phase."""
        if self._state.phase != WorkflowPhase.EXECUTION:
            return self._state.phase

        step = self._find_applicable()
        if step is None:
            self._skip_blocked()
            self._state.current_step_id = None
            self._enter(WorkflowPhase.COMPLETED)
            logger.info("All runnable steps finished")
            return self._state.phase

        self._state.current_step_id = step.id
        logger.info("Executing %s (%s)", step.id, step.handler_name)

        try:
            handler = self._registry.get(step.handler_name)
            self._set_status(step.id, StepStatus.IN_PROGRESS)
            handler.run(context, step.payload)
        except Exception as e:
            self._fail_step(step, e)
            return self._state.phase

        self._set_status(step.id, StepStatus.COMPLETED)
        return self._state.phase

    def _fail_step(self, step: Step, error: Exception) -> None:
        classification, recoverable = classify_error(error)
        attempt = (self._state.last_error.attempt if self._state.last_error else 0) + 1
        logger.error(
            "Step %s failed [%s, %s]: %s",
            step.id,
            classification.value,
            "recoverable" if recoverable else "fatal",
            error,
        )

        self._set_status(step.id, StepStatus.FAILED)
        self._last_exception = error
        self._state.last_error = WorkflowError(
            message=str(error),
            recoverable=recoverable,
            attempt=attempt,
            classification=classification,
            step_id=step.id,
        )
        if not recoverable:
            self._enter(WorkflowPhase.FAILED)

    def _find_applicable(self) -> Step | None:
        """First IN_PROGRESS step, else first runnable PENDING step, in plan order."""
        for step in self._graph.all_tasks():
            if step.status == StepStatus.IN_PROGRESS:
                return step
        runnable = self._graph.runnable_tasks()
        return runnable[0] if runnable else None

    def _skip_blocked(self) -> None:
        for step in self._graph.blocked_tasks():
            logger.warning(
                "Skipping %s: dependencies %s never completed",
                step.id,
                ", ".join(step.dependency_ids),
            )
            self._set_status(step.id, StepStatus.SKIPPED)

    def _set_status(self, step_id: str, status: StepStatus) -> None:
        """The only place a step's status changes."""
        step = self._graph.get(step_id)
        if step is None:
            raise KeyError(f"Step not found: {step_id}")
        self._graph.replace(dataclasses.replace(step, status=status))
        self._sync_state()
        if self._storage is not None:
            self._storage.update_task_status(step_id, status)

    def _sync_state(self) -> None:
        self._state.steps = tuple(self._graph.all_tasks())

    def _enter(self, phase: WorkflowPhase) -> None:
        self._state.phase = phase
        self._state.history.append(phase)
        logger.debug("Phase -> %s", phase.value)
