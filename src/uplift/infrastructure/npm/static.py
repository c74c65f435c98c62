"""
In-memory package catalogue for tests and offline runs.
"""

from uplift.domain.interfaces import PackageMetadataProviderInterface
from uplift.domain.models import PackageInfo
from uplift.domain.versions import coerce, satisfies


class StaticMetadataProvider(PackageMetadataProviderInterface):
    """Serves the highest published version matching a range."""

    def __init__(self, packages: dict[str, list[PackageInfo]] | None = None):
        self._packages: dict[str, list[PackageInfo]] = {}
        self.requests: list[tuple[str, str]] = []
        for infos in (packages or {}).values():
            for info in infos:
                self.publish(info)

    def publish(self, info: PackageInfo) -> "StaticMetadataProvider":
        self._packages.setdefault(info.name, []).append(info)
        return self  # Fluent

    def fetch(self, name: str, version_range: str) -> PackageInfo | None:
        self.requests.append((name, version_range))
        matching = [
            info
            for info in self._packages.get(name, [])
            if satisfies(info.version, version_range)
        ]
        if not matching:
            return None
        return max(matching, key=lambda info: coerce(info.version))
