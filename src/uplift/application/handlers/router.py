"""
RouterHandler: rewrites string-based lazy routes to dynamic imports.

    loadChildren: './admin/admin.module#AdminModule'

becomes

    loadChildren: () => import('./admin/admin.module').then(m => m.AdminModule)
"""

import logging
import re
from typing import Any

from uplift.application.handlers.workspace import source_files
from uplift.domain.exceptions import ErrorClassification, MigrationError
from uplift.domain.interfaces import HandlerInterface
from uplift.domain.models import MigrationContext

logger = logging.getLogger(__name__)

_STRING_LOAD_CHILDREN = re.compile(
    r"""(?P<key>loadChildren\s*:\s*)(?P<quote>['"])(?P<path>[^'"#]+)#(?P<module>\w+)(?P=quote)"""
)


def migrate_load_children(source: str) -> tuple[str, int]:
    """
    Rewrite every string loadChildren in a TypeScript source.

    Returns:
        (new source, number of routes rewritten)
    """

    def _replace(match: re.Match[str]) -> str:
        return (
            f"{match['key']}() => import('{match['path']}')"
            f".then(m => m.{match['module']})"
        )

    return _STRING_LOAD_CHILDREN.subn(_replace, source)


class RouterHandler(HandlerInterface):
    """Migrates deprecated router configuration in src/**/*.ts."""

    def run(
        self, context: MigrationContext, payload: dict[str, Any] | None = None
    ) -> int:
        """
        Returns:
            Number of routes rewritten (or that would be, on a dry run)

        Raises:
            MigrationError: If a migrated file cannot be written
        """
        logger.info("Running router migrations")
        total = 0
        for path in source_files(context.project_root, (".ts",)):
            source = path.read_text(encoding="utf-8")
            migrated, count = migrate_load_children(source)
            if not count:
                continue
            total += count
            if context.dry_run:
                logger.info("Would migrate %d loadChildren in %s", count, path)
                continue
            try:
                path.write_text(migrated, encoding="utf-8")
            except OSError as e:
                raise MigrationError(
                    f"Could not write {path}: {e}",
                    ErrorClassification.ROUTING_CONFIG,
                    {"file": str(path)},
                ) from e
            logger.info("Migrated %d loadChildren in %s", count, path)

        if total:
            logger.info("Router migration completed (%d route(s))", total)
        else:
            logger.info("No deprecated router configurations found")
        return total
