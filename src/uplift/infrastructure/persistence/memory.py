"""
In-memory implementation of task and snapshot storage.

Useful for testing and single-process runs.
"""

import dataclasses

from uplift.domain.interfaces import StorageInterface
from uplift.domain.models import Step, StepStatus


class InMemoryStorage(StorageInterface):
    """Simple in-memory storage for testing."""

    def __init__(self) -> None:
        self._tasks: dict[str, Step] = {}
        self._snapshots: dict[str, str] = {}

    def save_task(self, step: Step) -> None:
        self._tasks[step.id] = step

    def get_task(self, step_id: str) -> Step | None:
        return self._tasks.get(step_id)

    def get_all_tasks(self) -> list[Step]:
        return list(self._tasks.values())

    def update_task_status(self, step_id: str, status: StepStatus) -> None:
        step = self._tasks.get(step_id)
        if step is not None:
            self._tasks[step_id] = dataclasses.replace(step, status=status)

    def save_snapshot(self, key: str, snapshot_id: str) -> None:
        self._snapshots[key] = snapshot_id

    def get_snapshot(self, key: str) -> str | None:
        return self._snapshots.get(key)
