"""
Git-backed workspace snapshots.

A snapshot is a branch pointing at the pre-upgrade commit. Uncommitted work
is committed first so it is part of the restore point.
"""

import logging
import time

from uplift.domain.interfaces import SnapshotProviderInterface
from uplift.infrastructure.process import CommandError, run_command

logger = logging.getLogger(__name__)


class GitSnapshotProvider(SnapshotProviderInterface):
    """Snapshots as git branches named snapshot/<label>-<epoch ms>."""

    def __init__(self, branch_prefix: str = "snapshot") -> None:
        self._prefix = branch_prefix

    def create(self, path: str, label: str) -> str:
        """
        Raises:
            CommandError: If path is not a git work tree or git fails
        """
        run_command(["git", "rev-parse", "--is-inside-work-tree"], path)

        status = run_command(["git", "status", "--porcelain"], path).stdout
        if status.strip():
            logger.info("Committing uncommitted changes before snapshot")
            run_command(["git", "add", "-A"], path)
            run_command(
                ["git", "commit", "-m", f"uplift: {label} snapshot", "--no-verify"],
                path,
            )

        branch = f"{self._prefix}/{label}-{int(time.time() * 1000)}"
        run_command(["git", "branch", branch], path)
        return branch

    def restore(self, path: str, snapshot_id: str) -> None:
        """
        Raises:
            CommandError: If the snapshot branch is missing or git fails
        """
        run_command(["git", "rev-parse", "--verify", snapshot_id], path)
        run_command(["git", "reset", "--hard", snapshot_id], path)
        run_command(["git", "clean", "-fd"], path)

    def is_repository(self, path: str) -> bool:
        try:
            run_command(["git", "rev-parse", "--is-inside-work-tree"], path)
        except CommandError:
            return False
        return True
