"""
In-memory snapshot provider for tests and dry runs.

Records every call; can be told to fail on create or restore.
"""

from uplift.domain.interfaces import SnapshotProviderInterface


class InMemorySnapshotProvider(SnapshotProviderInterface):
    """Hands out sequential snapshot ids and remembers restores."""

    def __init__(self, fail_create: bool = False, fail_restore: bool = False):
        self.fail_create = fail_create
        self.fail_restore = fail_restore
        self.created: list[tuple[str, str, str]] = []  # (path, label, id)
        self.restored: list[tuple[str, str]] = []  # (path, id)

    def create(self, path: str, label: str) -> str:
        if self.fail_create:
            raise RuntimeError("snapshot create failed")
        snapshot_id = f"snapshot/{label}-{len(self.created) + 1}"
        self.created.append((path, label, snapshot_id))
        return snapshot_id

    def restore(self, path: str, snapshot_id: str) -> None:
        self.restored.append((path, snapshot_id))
        if self.fail_restore:
            raise RuntimeError("snapshot restore failed")
