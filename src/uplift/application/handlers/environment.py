"""
EnvironmentHandler: verifies the toolchain before a version hop.

Missing Node.js, npm or git, or a Node.js version outside the release's
supported range, is fatal for the run.
"""

import logging
from typing import Any

from uplift.domain.exceptions import CommandError, EnvironmentCheckError
from uplift.domain.interfaces import CommandRunnerInterface, HandlerInterface
from uplift.domain.models import MigrationContext
from uplift.domain.versions import satisfies

logger = logging.getLogger(__name__)


class EnvironmentHandler(HandlerInterface):
    """Checks node, npm, git and (optionally) the Angular CLI."""

    def __init__(self, runner: CommandRunnerInterface) -> None:
        self._runner = runner

    def run(
        self, context: MigrationContext, payload: dict[str, Any] | None = None
    ) -> dict[str, str]:
        payload = payload or {}
        logger.info("Checking environment compatibility")

        node_version = self._tool_version(["node", "--version"], "Node.js").lstrip("v")
        npm_version = self._tool_version(["npm", "--version"], "npm")
        logger.info("Node: %s, npm: %s", node_version, npm_version)

        node_range = payload.get("node_range")
        if node_range and not satisfies(node_version, node_range):
            raise EnvironmentCheckError(
                f"Node version {node_version} does not satisfy required range {node_range}",
                {"current": node_version, "required": node_range},
            )

        self._tool_version(["git", "--version"], "Git")

        try:
            self._runner.run(["ng", "version"], context.project_root, timeout=120)
            logger.info("Angular CLI detected")
        except CommandError:
            logger.warning("Angular CLI not found globally. Will use npx.")

        logger.info("Environment check passed")
        return {"node": node_version, "npm": npm_version}

    def _tool_version(self, args: list[str], label: str) -> str:
        try:
            return self._runner.run(args, ".", timeout=60).stdout.strip()
        except CommandError as e:
            raise EnvironmentCheckError(
                f"{label} is not installed or not in PATH", {"error": str(e)}
            ) from e
