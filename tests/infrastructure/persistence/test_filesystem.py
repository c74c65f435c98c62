"""Tests for FilesystemStorage."""

import json

from uplift.domain.models import Step, StepStatus
from uplift.infrastructure.persistence.filesystem import FilesystemStorage


def make_step(step_id: str = "a", **kwargs) -> Step:
    return Step(
        id=step_id,
        kind="DEPENDENCY_UPGRADE",
        description="deps",
        handler_name="DependencyAgent",
        **kwargs,
    )


class TestFilesystemStorage:
    """Tests for FilesystemStorage."""

    def test_creates_base_dir(self, tmp_path):
        base = tmp_path / "state" / "nested"

        FilesystemStorage(str(base))

        assert base.is_dir()

    def test_tasks_persist_across_instances(self, tmp_path):
        """A new instance reloads steps and statuses from state.json."""
        step = make_step(dependency_ids=("env",), payload={"target_version": "17.0.0"})
        first = FilesystemStorage(str(tmp_path))
        first.save_task(step)
        first.update_task_status("a", StepStatus.FAILED)

        second = FilesystemStorage(str(tmp_path))

        loaded = second.get_task("a")
        assert loaded is not None
        assert loaded.status == StepStatus.FAILED
        assert loaded.dependency_ids == ("env",)
        assert loaded.payload == {"target_version": "17.0.0"}

    def test_index_layout(self, tmp_path):
        storage = FilesystemStorage(str(tmp_path))
        storage.save_task(make_step())
        storage.save_snapshot("initial", "snapshot/pre-upgrade-1")

        with open(tmp_path / "state.json") as f:
            index = json.load(f)

        assert index["version"] == "1.0"
        assert index["tasks"]["a"]["status"] == "PENDING"
        assert index["snapshots"] == {"initial": "snapshot/pre-upgrade-1"}
        assert not (tmp_path / "state.tmp").exists()

    def test_clear_tasks_keeps_snapshots(self, tmp_path):
        storage = FilesystemStorage(str(tmp_path))
        storage.save_task(make_step())
        storage.save_snapshot("initial", "snap")

        storage.clear_tasks()

        reloaded = FilesystemStorage(str(tmp_path))
        assert reloaded.get_all_tasks() == []
        assert reloaded.get_snapshot("initial") == "snap"

    def test_update_unknown_task_is_ignored(self, tmp_path):
        storage = FilesystemStorage(str(tmp_path))

        storage.update_task_status("ghost", StepStatus.COMPLETED)

        assert storage.get_task("ghost") is None
