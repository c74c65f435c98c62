"""
RuntimeHandler: applies the framework's own code migrations for a hop.

Delegates to `ng update @angular/core --migrate-only`, which runs the
migration schematics shipped between the two versions (removing moduleId,
entryComponents and similar deprecated APIs).
"""

import logging
from typing import Any

from uplift.domain.exceptions import (
    CommandError,
    ConfigurationError,
    ErrorClassification,
    MigrationError,
)
from uplift.domain.interfaces import CommandRunnerInterface, HandlerInterface
from uplift.domain.models import MigrationContext

logger = logging.getLogger(__name__)

MIGRATION_PACKAGE = "@angular/core"


class RuntimeHandler(HandlerInterface):
    """Runs the framework migration schematics between two versions."""

    def __init__(
        self, runner: CommandRunnerInterface, package: str = MIGRATION_PACKAGE
    ) -> None:
        self._runner = runner
        self._package = package

    def command(self, from_version: str, to_version: str) -> list[str]:
        return [
            "npx",
            "ng",
            "update",
            self._package,
            "--migrate-only",
            "--from",
            from_version,
            "--to",
            to_version,
            "--allow-dirty",
        ]

    def run(
        self, context: MigrationContext, payload: dict[str, Any] | None = None
    ) -> list[str] | None:
        """
        Returns:
            The migration argv, or None when nothing ran (dry run)

        Raises:
            ConfigurationError: If the source or target version is unknown
            MigrationError: If the migrations fail
        """
        payload = payload or {}
        from_version = payload.get("from_version") or context.current_version
        to_version = payload.get("target_version") or context.target_version
        if not from_version or not to_version:
            raise ConfigurationError("Runtime migration needs a source and target version")

        for change in payload.get("breaking_changes", ()):
            logger.info("Breaking change in %s: %s", to_version, change)

        args = self.command(from_version, to_version)
        if context.dry_run:
            logger.info("Dry run: would run %s", " ".join(args))
            return None

        logger.info("Applying %s migrations %s -> %s", self._package, from_version, to_version)
        try:
            self._runner.run(args, context.project_root)
        except CommandError as e:
            raise MigrationError(
                f"Migrations {from_version} -> {to_version} failed",
                ErrorClassification.LIBRARY_DEPRECATION,
                {"output": e.output[:1000]},
            ) from e
        return args
