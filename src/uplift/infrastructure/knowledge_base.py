"""
Static knowledge base of framework release metadata.

Loaded from a versions JSON document (the bundled data/versions.json by
default) and validated against versions.schema.json.
"""

import json
import logging
from importlib.resources import files
from pathlib import Path

import jsonschema

from uplift.domain.exceptions import ConfigurationError
from uplift.domain.interfaces import KnowledgeBaseInterface
from uplift.domain.models import VersionInfo
from uplift.domain.versions import major
from uplift.schemas import validate_versions

logger = logging.getLogger(__name__)


def default_versions_text() -> str:
    return files("uplift").joinpath("data", "versions.json").read_text()


class KnowledgeBase(KnowledgeBaseInterface):
    """Read-only lookup of VersionInfo entries, ordered by major version."""

    def __init__(self, versions: list[VersionInfo] | None = None) -> None:
        self._versions = sorted(versions or [], key=lambda v: major(v.version) or 0)

    @classmethod
    def from_dict(cls, data: dict) -> "KnowledgeBase":
        """
        Raises:
            ConfigurationError: If the document does not match the schema
        """
        try:
            validate_versions(data)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(f"Invalid knowledge base: {e.message}") from e

        return cls(
            [
                VersionInfo(
                    version=entry["version"],
                    node_range=entry.get("nodeRange", ""),
                    typescript_range=entry.get("typescriptRange", ""),
                    rxjs_range=entry.get("rxjsRange", ""),
                    release_date=entry.get("releaseDate", ""),
                    breaking_changes=tuple(entry.get("breakingChanges", ())),
                )
                for entry in data["versions"]
            ]
        )

    @classmethod
    def load(cls, path: str | Path | None = None) -> "KnowledgeBase":
        """
        Load from path, or the bundled document when path is None.

        Raises:
            ConfigurationError: If the file is missing or invalid
        """
        if path is None:
            text = default_versions_text()
            source = "bundled versions.json"
        else:
            path = Path(path)
            if not path.exists():
                raise ConfigurationError(f"Knowledge base not found: {path}")
            text = path.read_text()
            source = str(path)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {source}: {e}") from e

        kb = cls.from_dict(data)
        logger.debug("Loaded %d version(s) from %s", len(kb.all_versions()), source)
        return kb

    def get_version(self, version: str) -> VersionInfo | None:
        """Entry whose version string starts with the given prefix."""
        for info in self._versions:
            if info.version.startswith(version):
                return info
        target_major = major(version)
        for info in self._versions:
            if target_major is not None and major(info.version) == target_major:
                return info
        return None

    def get_version_range(self, from_major: int, to_major: int) -> list[VersionInfo]:
        """Entries with from_major <= major <= to_major, ascending."""
        return [
            info
            for info in self._versions
            if from_major <= (major(info.version) or 0) <= to_major
        ]

    def all_versions(self) -> list[VersionInfo]:
        return list(self._versions)
