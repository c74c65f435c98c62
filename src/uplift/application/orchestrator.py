"""
Orchestrator: snapshot, run, roll back on failure.

Its single contract is that a rollback attempt never replaces the error that
caused it: on FAILED the original handler exception is re-raised as is.
"""

import logging
from collections.abc import Iterable

from uplift.application.engine import WorkflowEngine
from uplift.application.snapshot import SnapshotController
from uplift.domain.models import (
    MigrationContext,
    RunResult,
    Step,
    WorkflowPhase,
)

logger = logging.getLogger(__name__)


class WorkflowFailed(RuntimeError):
    """Run ended FAILED without an exception object to re-raise."""


class Orchestrator:
    """Composes snapshot creation, the engine and rollback."""

    def __init__(
        self,
        engine: WorkflowEngine,
        snapshots: SnapshotController | None = None,
    ) -> None:
        self._engine = engine
        self._snapshots = snapshots
        self._last_result: RunResult | None = None

    @property
    def last_result(self) -> RunResult | None:
        """Final RunResult of the most recent run, set on success and failure."""
        return self._last_result

    def run(
        self, context: MigrationContext, steps: Iterable[Step] | None = None
    ) -> RunResult:
        """
        Execute one upgrade run.

        Returns:
            RunResult for a COMPLETED run (possibly with FAILED/SKIPPED steps)

        Raises:
            Exception: The handler error that made the run FAILED, after rollback
        """
        self._last_result = None
        snapshot_id = self._create_snapshot(context)

        logger.info("Starting upgrade workflow for %s", context.project_root)
        try:
            state = self._engine.run(context, steps)
        except Exception:
            logger.exception("Workflow execution error")
            rolled_back = self._rollback(context, snapshot_id)
            self._last_result = RunResult(
                phase=WorkflowPhase.FAILED,
                steps=self._engine.state.steps,
                last_error=self._engine.state.last_error,
                snapshot_id=snapshot_id,
                rolled_back=rolled_back,
            )
            raise

        if state.phase == WorkflowPhase.FAILED:
            message = state.last_error.message if state.last_error else "Unknown error"
            logger.error("Workflow failed: %s", message)
            rolled_back = self._rollback(context, snapshot_id)
            self._last_result = RunResult(
                phase=state.phase,
                steps=state.steps,
                last_error=state.last_error,
                snapshot_id=snapshot_id,
                rolled_back=rolled_back,
            )
            original = self._engine.last_exception
            if original is None:
                raise WorkflowFailed(f"Upgrade failed: {message}")
            raise original

        self._last_result = RunResult(
            phase=state.phase,
            steps=state.steps,
            last_error=state.last_error,
            snapshot_id=snapshot_id,
        )
        if self._last_result.partial:
            logger.warning("Upgrade finished with failed or skipped steps")
        else:
            logger.info("Upgrade orchestration completed successfully")
        return self._last_result

    def _create_snapshot(self, context: MigrationContext) -> str | None:
        if self._snapshots is None or context.dry_run:
            return None
        return self._snapshots.create(context.project_root)

    def _rollback(self, context: MigrationContext, snapshot_id: str | None) -> bool:
        if self._snapshots is None:
            logger.warning("No snapshot controller configured; skipping rollback")
            return False
        return self._snapshots.restore(context.project_root, snapshot_id)
