"""
DependencyResolver: recursive, memoized resolution of a package manifest.

Three passes over one resolution run:

1. Build the tree depth-first. The first resolution recorded for a package
   name wins; later requests it cannot satisfy become conflicts instead of
   re-resolving. Cycles are cut using the explicit recursion path.
2. Validate peer dependencies against the recorded resolutions.
3. Try to settle error conflicts by intersecting the recorded ranges.

This is deliberately not a backtracking solver.
"""

import logging
from dataclasses import dataclass, field

from uplift.domain.exceptions import DependencyResolutionError
from uplift.domain.interfaces import PackageMetadataProviderInterface
from uplift.domain.models import (
    Conflict,
    ConflictSeverity,
    PackageInfo,
    ResolutionNode,
    ResolutionResult,
)
from uplift.domain.versions import find_intersection, satisfies

logger = logging.getLogger(__name__)

ROOT_REQUESTER = "root"


@dataclass
class _ResolutionRun:
    """State private to a single resolve_tree() call."""

    provider: PackageMetadataProviderInterface
    cache: dict[str, PackageInfo | None] = field(default_factory=dict)
    resolutions: dict[str, str] = field(default_factory=dict)
    requested_ranges: dict[str, str] = field(default_factory=dict)
    requesters: dict[str, str] = field(default_factory=dict)
    conflicts: list[Conflict] = field(default_factory=list)
    version_conflicts: dict[str, Conflict] = field(default_factory=dict)

    def fetch(self, name: str, version_range: str) -> PackageInfo | None:
        key = f"{name}@{version_range}"
        if key not in self.cache:
            self.cache[key] = self.provider.fetch(name, version_range)
        return self.cache[key]


class DependencyResolver:
    """
    Resolves {name: range} manifests into a ResolutionResult.

    Conflicts are returned as data. With strict=True an unresolved
    error-severity conflict raises DependencyResolutionError instead.
    """

    def __init__(
        self, provider: PackageMetadataProviderInterface, strict: bool = False
    ):
        """
        Args:
            provider: Package metadata source (registry adapter)
            strict: Raise when error conflicts remain after resolution
        """
        self._provider = provider
        self._strict = strict

    def resolve_tree(self, root_dependencies: dict[str, str]) -> ResolutionResult:
        """
        Resolve the full dependency tree of a manifest.

        Args:
            root_dependencies: Package name -> requested version range

        Returns:
            ResolutionResult with tree, conflicts and resolutions

        Raises:
            DependencyResolutionError: In strict mode, if error conflicts remain
        """
        logger.info(
            "Resolving dependency tree for %d root package(s)", len(root_dependencies)
        )
        run = _ResolutionRun(provider=self._provider)
        tree: dict[str, ResolutionNode] = {}

        for name, version_range in root_dependencies.items():
            self._resolve_package(run, name, version_range, tree, ())

        self._validate_peers(run, tree)
        self._resolve_conflicts(run)

        result = ResolutionResult(
            tree=tree, conflicts=run.conflicts, resolutions=dict(run.resolutions)
        )
        logger.info(
            "Resolution complete: %d package(s), %d conflict(s) (%d error)",
            len(run.resolutions),
            len(result.conflicts),
            len(result.errors),
        )

        if self._strict and result.errors:
            raise DependencyResolutionError(
                f"{len(result.errors)} unresolved dependency conflict(s)",
                conflicts=result.errors,
                recoverable=False,
            )
        return result

    def _resolve_package(
        self,
        run: _ResolutionRun,
        name: str,
        version_range: str,
        siblings: dict[str, ResolutionNode],
        path: tuple[str, ...],
    ) -> None:
        requester = path[-1] if path else ROOT_REQUESTER

        if name in path:
            logger.warning(
                "Circular dependency detected: %s", " -> ".join((*path, name))
            )
            return

        existing = run.resolutions.get(name)
        if existing is not None and satisfies(existing, version_range):
            return

        info = run.fetch(name, version_range)
        if info is None:
            logger.warning("Package not found: %s@%s", name, version_range)
            run.conflicts.append(
                Conflict(
                    package_name=name,
                    requested_by={requester},
                    versions=[version_range],
                    severity=ConflictSeverity.ERROR,
                    resolution="not found",
                )
            )
            return

        if existing is not None:
            # First writer wins; the existing resolution is not overwritten.
            logger.debug(
                "%s@%s (wants %s) conflicts with resolved %s",
                name,
                info.version,
                version_range,
                existing,
            )
            self._record_version_conflict(run, name, requester, version_range)
            return

        run.resolutions[name] = info.version
        run.requested_ranges[name] = version_range
        run.requesters[name] = requester
        node = ResolutionNode(
            name=name,
            requested_range=version_range,
            resolved_version=info.version,
            peer_dependencies=dict(info.peer_dependencies),
        )
        siblings[name] = node

        # Peers are validated later, never installed from here.
        children = {**info.dependencies, **info.optional_dependencies}
        for dep_name, dep_range in children.items():
            self._resolve_package(
                run, dep_name, dep_range, node.dependencies, (*path, name)
            )

    def _record_version_conflict(
        self, run: _ResolutionRun, name: str, requester: str, version_range: str
    ) -> None:
        conflict = run.version_conflicts.get(name)
        if conflict is None:
            conflict = Conflict(
                package_name=name,
                requested_by={run.requesters[name]},
                versions=[run.requested_ranges[name]],
                severity=ConflictSeverity.ERROR,
            )
            run.version_conflicts[name] = conflict
            run.conflicts.append(conflict)
        conflict.requested_by.add(requester)
        if version_range not in conflict.versions:
            conflict.versions.append(version_range)

    def _validate_peers(
        self, run: _ResolutionRun, tree: dict[str, ResolutionNode]
    ) -> None:
        for root in tree.values():
            for node in root.walk():
                for peer_name, peer_range in node.peer_dependencies.items():
                    installed = run.resolutions.get(peer_name)
                    if installed is None:
                        run.conflicts.append(
                            Conflict(
                                package_name=peer_name,
                                requested_by={node.name},
                                versions=[peer_range],
                                severity=ConflictSeverity.WARNING,
                                resolution="missing peer",
                            )
                        )
                    elif not satisfies(installed, peer_range):
                        run.conflicts.append(
                            Conflict(
                                package_name=peer_name,
                                requested_by={node.name},
                                versions=[peer_range, installed],
                                severity=ConflictSeverity.ERROR,
                                resolution=(
                                    f"peer mismatch: {node.name} requires "
                                    f"{peer_range}, installed {installed}"
                                ),
                            )
                        )

    def _resolve_conflicts(self, run: _ResolutionRun) -> None:
        for conflict in run.conflicts:
            if conflict.severity != ConflictSeverity.ERROR:
                continue
            if len(conflict.versions) < 2:
                continue
            version = find_intersection(conflict.versions)
            if version is not None:
                conflict.resolution = f"Use {version}"
                conflict.severity = ConflictSeverity.WARNING
