"""
ReportHandler: writes UPGRADE_REPORT.md from the stored step records.
"""

import logging
from collections import Counter
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from uplift.domain.interfaces import HandlerInterface, StorageInterface
from uplift.domain.models import MigrationContext, StepStatus

logger = logging.getLogger(__name__)

REPORT_NAME = "UPGRADE_REPORT.md"
TEMPLATE_NAME = "report.md.j2"


class ReportHandler(HandlerInterface):
    """Renders a Markdown summary of every step the storage knows about."""

    def __init__(self, storage: StorageInterface):
        self._storage = storage
        template_dir = Path(__file__).parent / "templates"
        self._env = Environment(
            loader=FileSystemLoader(template_dir), keep_trailing_newline=True
        )

    def render(self, context: MigrationContext) -> str:
        steps = self._storage.get_all_tasks()
        counts = Counter(step.status for step in steps)
        template = self._env.get_template(TEMPLATE_NAME)
        return template.render(
            generated_at=datetime.now(UTC).isoformat(timespec="seconds"),
            project_root=context.project_root,
            current_version=context.current_version,
            target_version=context.target_version,
            dry_run=context.dry_run,
            counts=[(status.value, counts[status]) for status in StepStatus],
            steps=steps,
            failed=[s for s in steps if s.status == StepStatus.FAILED],
        )

    def run(
        self, context: MigrationContext, payload: dict[str, Any] | None = None
    ) -> str:
        content = self.render(context)
        if context.dry_run:
            logger.info("Dry run: report not written")
            return content

        path = Path(context.project_root) / REPORT_NAME
        path.write_text(content)
        logger.info("Report written to %s", path)
        return content
