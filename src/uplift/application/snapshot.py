"""
SnapshotController: restore point before mutating work, rollback after.

Snapshot creation failure downgrades the run to "no rollback available";
restore failure is logged and swallowed so it never masks the error that
triggered the rollback.
"""

import logging

from uplift.domain.interfaces import SnapshotProviderInterface, StorageInterface

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "initial"


class SnapshotController:
    """Creates, persists and restores the pre-upgrade snapshot."""

    def __init__(
        self,
        provider: SnapshotProviderInterface,
        storage: StorageInterface | None = None,
        label: str = "pre-upgrade",
    ) -> None:
        self._provider = provider
        self._storage = storage
        self._label = label

    def create(self, target: str) -> str | None:
        """
        Capture target and persist the snapshot id.

        Returns:
            The snapshot id, or None if the snapshot could not be taken
        """
        logger.info("Creating %s snapshot of %s", self._label, target)
        try:
            snapshot_id = self._provider.create(target, self._label)
        except Exception as e:
            logger.warning(
                "Snapshot failed: %s. Proceeding without rollback capability.", e
            )
            return None

        if self._storage is not None:
            try:
                self._storage.save_snapshot(SNAPSHOT_KEY, snapshot_id)
            except Exception as e:
                logger.warning("Could not persist snapshot id %s: %s", snapshot_id, e)
        logger.info("Snapshot: %s", snapshot_id)
        return snapshot_id

    def latest(self) -> str | None:
        """Snapshot id persisted by a previous create(), if any."""
        if self._storage is None:
            return None
        return self._storage.get_snapshot(SNAPSHOT_KEY)

    def restore(self, target: str, snapshot_id: str | None) -> bool:
        """
        Best-effort rollback.

        Returns:
            True if the provider restored the snapshot, False otherwise
        """
        if not snapshot_id:
            logger.warning("No snapshot available for rollback")
            return False

        logger.info("Rolling back %s to snapshot %s", target, snapshot_id)
        try:
            self._provider.restore(target, snapshot_id)
        except Exception as e:
            logger.error("Rollback failed: %s", e)
            return False
        logger.info("Rollback completed")
        return True
