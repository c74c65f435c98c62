"""
TaskGraph: migration steps and their dependency edges.

Answers "which steps are runnable now". Insertion order is the tie-break
between simultaneously runnable steps. Steps are never removed.
"""

from collections.abc import Iterable

from uplift.domain.exceptions import DuplicateIdError
from uplift.domain.models import Step, StepStatus


class TaskGraph:
    """Ordered mapping of step id to Step."""

    def __init__(self, steps: Iterable[Step] = ()) -> None:
        self._steps: dict[str, Step] = {}
        for step in steps:
            self.add_task(step)

    def add_task(self, step: Step) -> None:
        """
        Append a step.

        Raises:
            DuplicateIdError: If a step with the same id is already present
        """
        if step.id in self._steps:
            raise DuplicateIdError(step.id)
        self._steps[step.id] = step

    def get(self, step_id: str) -> Step | None:
        return self._steps.get(step_id)

    def replace(self, step: Step) -> None:
        """Swap in a new version of an existing step (same id)."""
        if step.id not in self._steps:
            raise KeyError(f"Step not found: {step.id}")
        self._steps[step.id] = step

    def runnable_tasks(self) -> list[Step]:
        """PENDING steps whose dependencies are all COMPLETED, in insertion order."""
        completed = {
            sid for sid, s in self._steps.items() if s.status == StepStatus.COMPLETED
        }
        return [
            step
            for step in self._steps.values()
            if step.status == StepStatus.PENDING
            and all(dep in completed for dep in step.dependency_ids)
        ]

    def blocked_tasks(self) -> list[Step]:
        """PENDING steps that can never run: a dependency is terminal but not COMPLETED, or unknown."""
        return [
            step
            for step in self._steps.values()
            if step.status == StepStatus.PENDING and self._is_blocked(step, set())
        ]

    def _is_blocked(self, step: Step, seen: set[str]) -> bool:
        if step.id in seen:
            return True  # dependency cycle
        seen = seen | {step.id}
        for dep_id in step.dependency_ids:
            dep = self._steps.get(dep_id)
            if dep is None or dep.status in (StepStatus.FAILED, StepStatus.SKIPPED):
                return True
            if dep.status == StepStatus.PENDING and self._is_blocked(dep, seen):
                return True
        return False

    def all_tasks(self) -> list[Step]:
        return list(self._steps.values())

    def __len__(self) -> int:
        return len(self._steps)

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._steps
