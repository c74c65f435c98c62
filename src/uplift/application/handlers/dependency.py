"""
DependencyHandler: bumps framework packages in package.json and checks the
resulting tree with the DependencyResolver before installing.
"""

import json
import logging
from pathlib import Path
from typing import Any

from uplift.application.resolver import DependencyResolver
from uplift.domain.exceptions import CommandError, DependencyResolutionError
from uplift.domain.interfaces import (
    CommandRunnerInterface,
    HandlerInterface,
    PackageMetadataProviderInterface,
)
from uplift.domain.models import MigrationContext, ResolutionResult
from uplift.domain.versions import major

logger = logging.getLogger(__name__)

FRAMEWORK_SCOPE = "@angular/"
MANIFEST_NAME = "package.json"


def framework_updates(manifest: dict[str, Any], target_version: str) -> dict[str, str]:
    """
    New ranges for every framework package the manifest declares.

    Returns:
        {package name: "^<major>.0.0"}
    """
    target_major = major(target_version)
    if target_major is None:
        return {}
    new_range = f"^{target_major}.0.0"
    updates: dict[str, str] = {}
    for section in ("dependencies", "devDependencies"):
        for name in manifest.get(section, {}):
            if name.startswith(FRAMEWORK_SCOPE):
                updates[name] = new_range
    return updates


class DependencyHandler(HandlerInterface):
    """Upgrades framework dependencies for one version hop."""

    def __init__(
        self,
        provider: PackageMetadataProviderInterface,
        runner: CommandRunnerInterface,
        strict: bool = False,
        install: bool = True,
    ):
        """
        Args:
            provider: Package metadata source for the resolver
            runner: Runs npm install
            strict: Fail on unresolved conflicts (also enabled per run by
                MigrationContext.strict)
            install: Run npm install after writing the manifest
        """
        self._provider = provider
        self._runner = runner
        self._strict = strict
        self._install = install

    def run(
        self, context: MigrationContext, payload: dict[str, Any] | None = None
    ) -> ResolutionResult:
        """
        Raises:
            DependencyResolutionError: If package.json is unreadable, strict
                resolution fails, or installation fails
        """
        payload = payload or {}
        target = payload.get("target_version") or context.target_version
        if not target:
            raise DependencyResolutionError(
                "No target version for dependency upgrade", recoverable=False
            )

        manifest_path = Path(context.project_root) / MANIFEST_NAME
        manifest = self._read_manifest(manifest_path)

        updates = framework_updates(manifest, target)
        logger.info("Upgrading %d framework package(s) to %s", len(updates), target)

        requested = {
            **manifest.get("dependencies", {}),
            **manifest.get("devDependencies", {}),
            **updates,
        }
        resolver = DependencyResolver(
            self._provider, strict=self._strict or context.strict
        )
        result = resolver.resolve_tree(requested)
        for conflict in result.conflicts:
            log = logger.error if conflict.is_error else logger.warning
            log(
                "Conflict on %s (requested by %s): %s%s",
                conflict.package_name,
                ", ".join(sorted(conflict.requested_by)),
                ", ".join(conflict.versions),
                f" -> {conflict.resolution}" if conflict.resolution else "",
            )

        self._apply(manifest, updates)

        if context.dry_run:
            logger.info("Dry run: package.json left untouched")
            return result

        with open(manifest_path, "w") as f:
            json.dump(manifest, f, indent=2)
            f.write("\n")
        logger.info("Wrote %s", manifest_path)

        if self._install:
            self._npm_install(context.project_root, legacy_peers=bool(result.errors))
        return result

    def _read_manifest(self, path: Path) -> dict[str, Any]:
        try:
            with open(path) as f:
                data: dict[str, Any] = json.load(f)
        except FileNotFoundError as e:
            raise DependencyResolutionError(
                f"{path} not found", recoverable=False
            ) from e
        except json.JSONDecodeError as e:
            raise DependencyResolutionError(
                f"Invalid JSON in {path}: {e}", recoverable=False
            ) from e
        return data

    def _apply(self, manifest: dict[str, Any], updates: dict[str, str]) -> None:
        for section in ("dependencies", "devDependencies"):
            deps = manifest.get(section)
            if not deps:
                continue
            for name, new_range in updates.items():
                if name in deps:
                    deps[name] = new_range

    def _npm_install(self, project_root: str, legacy_peers: bool) -> None:
        args = ["npm", "install"]
        if legacy_peers:
            args.append("--legacy-peer-deps")
        try:
            self._runner.run(args, project_root)
            return
        except CommandError as e:
            logger.warning("npm install failed, retrying with --force: %s", e)

        try:
            self._runner.run(["npm", "install", "--force"], project_root)
        except CommandError as e:
            raise DependencyResolutionError(
                "npm install failed", details={"output": e.output[:1000]}
            ) from e
