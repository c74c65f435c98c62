"""
VersionPlanner: turns a version jump into a dependency-ordered step list.

Upgrades one major version at a time. Each hop checks the environment,
upgrades dependencies, applies code migrations when the release has breaking
changes, then builds and tests. A final report step closes the plan.
"""

import logging

from uplift.domain.interfaces import KnowledgeBaseInterface, PlannerInterface
from uplift.domain.models import HandlerKind, MigrationContext, Step, VersionInfo
from uplift.domain.versions import major

logger = logging.getLogger(__name__)

DEFAULT_CURRENT_VERSION = "16.0.0"
DEFAULT_TARGET_VERSION = "18.0.0"
REPORT_STEP_ID = "final-report"


class VersionPlanner(PlannerInterface):
    """Planner backed by the version knowledge base."""

    def __init__(self, knowledge_base: KnowledgeBaseInterface) -> None:
        self._kb = knowledge_base

    def run(self, context: MigrationContext) -> list[Step]:
        current = context.current_version or DEFAULT_CURRENT_VERSION
        target = context.target_version or DEFAULT_TARGET_VERSION
        path = self.upgrade_path(current, target)
        logger.info(
            "Upgrade path %s -> %s: %s",
            current,
            target,
            " -> ".join(v.version for v in path) or "(empty)",
        )

        steps: list[Step] = []
        previous: str | None = None
        from_version = current
        for version in path:
            hop = self._plan_hop(version, previous, from_version)
            steps.extend(hop)
            previous = hop[-1].id
            from_version = version.version

        steps.append(
            Step(
                id=REPORT_STEP_ID,
                kind="REPORT",
                description="Generate upgrade report",
                handler_name=HandlerKind.REPORT.value,
                dependency_ids=(previous,) if previous else (),
            )
        )
        return steps

    def upgrade_path(self, current: str, target: str) -> list[VersionInfo]:
        """Knowledge-base entries to visit, one per major version, ascending."""
        current_major = major(current)
        target_major = major(target)
        if current_major is None or target_major is None:
            return []

        if current_major == target_major:
            info = self._kb.get_version(target)
            return [info] if info is not None else []

        return [
            info
            for info in self._kb.get_version_range(current_major, target_major)
            if current_major < (major(info.version) or 0) <= target_major
        ]

    def _plan_hop(
        self, version: VersionInfo, previous: str | None, from_version: str
    ) -> list[Step]:
        prefix = f"upgrade-to-{version.version.replace('.', '-')}"
        steps = [
            Step(
                id=f"{prefix}-env",
                kind="ENVIRONMENT_CHECK",
                description=f"Verify environment for {version.version}",
                handler_name=HandlerKind.ENVIRONMENT.value,
                dependency_ids=(previous,) if previous else (),
                payload={
                    "target_version": version.version,
                    "node_range": version.node_range,
                    "typescript_range": version.typescript_range,
                },
            ),
            Step(
                id=f"{prefix}-deps",
                kind="DEPENDENCY_UPGRADE",
                description=f"Upgrade dependencies to {version.version}",
                handler_name=HandlerKind.DEPENDENCY.value,
                dependency_ids=(f"{prefix}-env",),
                payload={"target_version": version.version},
            ),
        ]
        build_after = f"{prefix}-deps"

        if version.breaking_changes:
            steps += [
                Step(
                    id=f"{prefix}-runtime",
                    kind="RUNTIME_FIX",
                    description=f"Apply runtime fixes for {version.version}",
                    handler_name=HandlerKind.RUNTIME.value,
                    dependency_ids=(f"{prefix}-deps",),
                    payload={
                        "from_version": from_version,
                        "target_version": version.version,
                        "breaking_changes": list(version.breaking_changes),
                    },
                ),
                Step(
                    id=f"{prefix}-router",
                    kind="ROUTER_FIX",
                    description=f"Update router for {version.version}",
                    handler_name=HandlerKind.ROUTER.value,
                    dependency_ids=(f"{prefix}-runtime",),
                    payload={"target_version": version.version},
                ),
                Step(
                    id=f"{prefix}-ui",
                    kind="UI_MIGRATION",
                    description=f"Migrate UI templates for {version.version}",
                    handler_name=HandlerKind.UI.value,
                    dependency_ids=(f"{prefix}-router",),
                    payload={"target_version": version.version},
                ),
            ]
            build_after = f"{prefix}-ui"

        steps += [
            Step(
                id=f"{prefix}-build",
                kind="BUILD_FIX",
                description=f"Build and fix errors for {version.version}",
                handler_name=HandlerKind.BUILD.value,
                dependency_ids=(build_after,),
            ),
            Step(
                id=f"{prefix}-test",
                kind="TEST",
                description=f"Run tests for {version.version}",
                handler_name=HandlerKind.TEST.value,
                dependency_ids=(f"{prefix}-build",),
            ),
        ]
        return steps
