"""
npm registry metadata provider.

Runs `npm view <name>@<range> --json`. When a range matches several
published versions npm prints an array, lowest first; the highest entry is
used, matching what npm install would pick.
"""

import json
import logging
from typing import Any

from uplift.domain.interfaces import PackageMetadataProviderInterface
from uplift.domain.models import PackageInfo
from uplift.domain.versions import coerce
from uplift.infrastructure.process import CommandError, run_command

logger = logging.getLogger(__name__)


class NpmMetadataProvider(PackageMetadataProviderInterface):
    """Package metadata from the npm CLI, cached per name@range."""

    def __init__(self, registry: str | None = None, cwd: str = ".") -> None:
        """
        Args:
            registry: Alternate registry URL passed as --registry
            cwd: Directory npm runs in (picks up the project's .npmrc)
        """
        self._registry = registry
        self._cwd = cwd
        self._cache: dict[str, PackageInfo | None] = {}

    def fetch(self, name: str, version_range: str) -> PackageInfo | None:
        key = f"{name}@{version_range}"
        if key in self._cache:
            return self._cache[key]

        args = ["npm", "view", key, "--json"]
        if self._registry:
            args += ["--registry", self._registry]

        try:
            output = run_command(args, self._cwd, timeout=120).stdout
            info = parse_view_output(output)
        except (CommandError, ValueError) as e:
            logger.warning("Failed to fetch %s: %s", key, e)
            info = None

        self._cache[key] = info
        return info


def parse_view_output(output: str) -> PackageInfo | None:
    """
    Parse `npm view --json` output.

    Raises:
        ValueError: If output is not JSON or lacks name/version
    """
    if not output.strip():
        return None
    data: Any = json.loads(output)
    if isinstance(data, list):
        entries = [
            entry
            for entry in data
            if isinstance(entry, dict)
            and coerce(str(entry.get("version", ""))) is not None
        ]
        if not entries:
            return None
        data = max(entries, key=lambda entry: coerce(str(entry["version"])))
    if not isinstance(data, dict) or "name" not in data or "version" not in data:
        raise ValueError("npm view output has no name/version")

    return PackageInfo(
        name=data["name"],
        version=data["version"],
        dependencies=dict(data.get("dependencies") or {}),
        peer_dependencies=dict(data.get("peerDependencies") or {}),
        optional_dependencies=dict(data.get("optionalDependencies") or {}),
    )
