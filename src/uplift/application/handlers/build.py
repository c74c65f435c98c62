"""
BuildHandler: builds the project with an internal repair loop.

Between attempts a RepairInterface may patch the workspace from the build
output. Retrying lives here, not in the engine.
"""

import logging
from typing import Any

from uplift.domain.exceptions import BuildError, CommandError
from uplift.domain.interfaces import (
    CommandRunnerInterface,
    HandlerInterface,
    RepairInterface,
)
from uplift.domain.models import MigrationContext

logger = logging.getLogger(__name__)

DEFAULT_BUILD_COMMAND = ("npx", "ng", "build")


class BuildHandler(HandlerInterface):
    """Runs the build command up to rmax times."""

    def __init__(
        self,
        runner: CommandRunnerInterface,
        command: list[str] | tuple[str, ...] = DEFAULT_BUILD_COMMAND,
        rmax: int = 3,
        repairer: RepairInterface | None = None,
    ):
        """
        Args:
            runner: Runs the build command
            command: Build argv
            rmax: Maximum build attempts
            repairer: Fixes the workspace between attempts (optional)
        """
        self._runner = runner
        self._command = list(command)
        self._rmax = max(1, rmax)
        self._repairer = repairer

    def run(
        self, context: MigrationContext, payload: dict[str, Any] | None = None
    ) -> int:
        """
        Returns:
            Number of attempts the build took

        Raises:
            BuildError: If the build still fails
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                self._runner.run(self._command, context.project_root)
            except CommandError as e:
                error_log = e.output
                logger.warning("Build failed (attempt %d/%d)", attempt, self._rmax)
                if attempt >= self._rmax or self._repairer is None:
                    raise BuildError(
                        f"Build failed after {attempt} attempt(s)",
                        {"last_error": error_log[:1000]},
                    ) from e
                _attempt_repair(self._repairer, context, error_log)
                continue

            logger.info("Build successful")
            return attempt


def _attempt_repair(
    repairer: RepairInterface, context: MigrationContext, error_log: str
) -> None:
    logger.info("Attempting automated repair")
    try:
        changed = repairer.repair(context, error_log[:2000])
    except Exception as e:
        logger.warning("Auto-repair failed: %s", e)
        return
    if not changed:
        logger.info("Repair made no changes")
