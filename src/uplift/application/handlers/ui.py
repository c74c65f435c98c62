"""
UIHandler: scans styles and templates for patterns a release deprecates.

Findings are logged and returned; nothing in the workspace is changed and
the step never fails because of them.
"""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any

from uplift.application.handlers.workspace import search_files
from uplift.domain.interfaces import HandlerInterface
from uplift.domain.models import MigrationContext
from uplift.domain.versions import major

logger = logging.getLogger(__name__)

STYLE_SUFFIXES = (".scss", ".css", ".less")
TEMPLATE_SUFFIXES = (".html",)

_DEEP_SELECTOR = re.compile(r"::ng-deep|/deep/")
_FLEX_LAYOUT = re.compile(r"fxLayout|fxFlex")
_STRUCTURAL_DIRECTIVE = re.compile(r"\*ngIf|\*ngFor|\*ngSwitch")

CONTROL_FLOW_MAJOR = 17
CONTROL_FLOW_THRESHOLD = 5  # directive lines before suggesting the migration
PROJECT_WIDE = "PROJECT_WIDE"


class UIIssueKind(Enum):
    STYLE = "style"
    TEMPLATE = "template"
    DEPENDENCY = "dependency"


@dataclass(frozen=True)
class UIIssue:
    file: str
    line: int
    kind: UIIssueKind
    message: str
    severity: str  # "warning" or "suggestion"


class UIHandler(HandlerInterface):
    """Reports deprecated selectors, Flex Layout and legacy control flow."""

    def run(
        self, context: MigrationContext, payload: dict[str, Any] | None = None
    ) -> list[UIIssue]:
        payload = payload or {}
        target = payload.get("target_version") or context.target_version or ""
        logger.info("Running UI analysis")

        issues = self._scan_styles(context.project_root)
        issues += self._scan_templates(context.project_root, major(target))

        if issues:
            logger.warning("Found %d UI suggestion(s)/warning(s)", len(issues))
            _report(issues)
        else:
            logger.info("No UI issues found")
        return issues

    def _scan_styles(self, project_root: str) -> list[UIIssue]:
        return [
            UIIssue(
                file=str(match.path),
                line=match.line,
                kind=UIIssueKind.STYLE,
                message=(
                    "Avoid ::ng-deep and /deep/; they are deprecated and "
                    "will be removed."
                ),
                severity="warning",
            )
            for match in search_files(project_root, _DEEP_SELECTOR, STYLE_SUFFIXES)
        ]

    def _scan_templates(
        self, project_root: str, target_major: int | None
    ) -> list[UIIssue]:
        issues: list[UIIssue] = []

        flex_files = {
            str(match.path)
            for match in search_files(project_root, _FLEX_LAYOUT, TEMPLATE_SUFFIXES)
        }
        for path in sorted(flex_files):
            issues.append(
                UIIssue(
                    file=path,
                    line=1,
                    kind=UIIssueKind.DEPENDENCY,
                    message=(
                        "Angular Flex Layout is deprecated. Consider migrating "
                        "to CSS Flexbox or Tailwind."
                    ),
                    severity="warning",
                )
            )

        if target_major is not None and target_major >= CONTROL_FLOW_MAJOR:
            directives = search_files(
                project_root, _STRUCTURAL_DIRECTIVE, TEMPLATE_SUFFIXES
            )
            if len(directives) > CONTROL_FLOW_THRESHOLD:
                issues.append(
                    UIIssue(
                        file=PROJECT_WIDE,
                        line=0,
                        kind=UIIssueKind.TEMPLATE,
                        message=(
                            f"Target is v{target_major} but templates use "
                            "*ngIf/*ngFor/*ngSwitch. Run "
                            "'ng g @angular/core:control-flow' to migrate to "
                            "@if/@for."
                        ),
                        severity="suggestion",
                    )
                )
        return issues


def _report(issues: list[UIIssue]) -> None:
    grouped: dict[UIIssueKind, list[UIIssue]] = defaultdict(list)
    for issue in issues:
        grouped[issue.kind].append(issue)

    styles = grouped[UIIssueKind.STYLE]
    for issue in styles[:5]:
        logger.warning("Style %s:%d - %s", issue.file, issue.line, issue.message)
    if len(styles) > 5:
        logger.warning("... and %d more style issue(s)", len(styles) - 5)

    for issue in grouped[UIIssueKind.DEPENDENCY][:3]:
        logger.warning("Dependency %s - %s", issue.file, issue.message)

    for issue in grouped[UIIssueKind.TEMPLATE]:
        logger.info("Template: %s", issue.message)
