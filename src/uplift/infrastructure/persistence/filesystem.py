"""
Filesystem implementation of task and snapshot storage.

Keeps every record in one JSON index under base_dir so the pre-upgrade
snapshot id and final step statuses survive a process restart.
"""

import json
from pathlib import Path
from typing import Any

from uplift.domain.interfaces import StorageInterface
from uplift.domain.models import Step, StepStatus


class FilesystemStorage(StorageInterface):
    """
    Persistent JSON storage.

    Directory structure:
    {base_dir}/
        state.json  # {"version", "tasks": {id: step}, "snapshots": {key: id}}
    """

    def __init__(self, base_dir: str):
        self._base_dir = Path(base_dir)
        self._index_path = self._base_dir / "state.json"
        self._index: dict[str, Any] = self._load_or_create_index()

    def _load_or_create_index(self) -> dict[str, Any]:
        """Load existing index or create new one."""
        self._base_dir.mkdir(parents=True, exist_ok=True)

        if self._index_path.exists():
            with open(self._index_path) as f:
                result: dict[str, Any] = json.load(f)
                result.setdefault("tasks", {})
                result.setdefault("snapshots", {})
                return result

        return {"version": "1.0", "tasks": {}, "snapshots": {}}

    def _update_index_atomic(self) -> None:
        """Atomically update state.json using write-to-temp + rename."""
        temp_path = self._index_path.with_suffix(".tmp")
        with open(temp_path, "w") as f:
            json.dump(self._index, f, indent=2)
        temp_path.replace(self._index_path)

    def save_task(self, step: Step) -> None:
        self._index["tasks"][step.id] = step.to_dict()
        self._update_index_atomic()

    def get_task(self, step_id: str) -> Step | None:
        data = self._index["tasks"].get(step_id)
        return Step.from_dict(data) if data is not None else None

    def get_all_tasks(self) -> list[Step]:
        return [Step.from_dict(data) for data in self._index["tasks"].values()]

    def update_task_status(self, step_id: str, status: StepStatus) -> None:
        data = self._index["tasks"].get(step_id)
        if data is None:
            return
        data["status"] = status.value
        self._update_index_atomic()

    def save_snapshot(self, key: str, snapshot_id: str) -> None:
        self._index["snapshots"][key] = snapshot_id
        self._update_index_atomic()

    def get_snapshot(self, key: str) -> str | None:
        return self._index["snapshots"].get(key)

    def clear_tasks(self) -> None:
        """Drop task records from a previous run; snapshots are kept."""
        self._index["tasks"] = {}
        self._update_index_atomic()
