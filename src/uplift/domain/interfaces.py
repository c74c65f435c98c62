"""
Domain interfaces (Ports) for the upgrade engine.

These abstract base classes are the narrow contracts through which the core
reaches its external collaborators: step handlers and their registry, the
planner and its knowledge base, package metadata, external commands,
snapshots and task storage.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uplift.domain.models import (
        CommandResult,
        MigrationContext,
        PackageInfo,
        Step,
        StepStatus,
        VersionInfo,
    )


class HandlerInterface(ABC):
    """
    Port for a step handler.

    Handlers mutate the project workspace. They run one at a time and may
    raise any exception; UpgradeError subclasses carry their own
    classification, everything else is treated as an unclassified runtime
    change.
    """

    @abstractmethod
    def run(
        self, context: "MigrationContext", payload: dict[str, Any] | None = None
    ) -> Any:
        """
        Execute the step.

        Args:
            context: Run context (project root, versions, flags)
            payload: Step-specific data emitted by the planner

        Returns:
            Handler-defined result, ignored by the engine
        """
        pass


class PlannerInterface(ABC):
    """Port for the planning step, called exactly once per run."""

    @abstractmethod
    def run(self, context: "MigrationContext") -> list["Step"]:
        """
        Produce the initial step list.

        Emitted steps may only depend on ids emitted in the same list.
        """
        pass


class HandlerRegistryInterface(ABC):
    """Port for looking up the handler a step names."""

    @abstractmethod
    def get(self, name: str) -> HandlerInterface:
        """
        Raises:
            UnknownHandlerError: If the name is unknown or nothing is registered
        """
        pass


class KnowledgeBaseInterface(ABC):
    """Port for framework release metadata."""

    @abstractmethod
    def get_version(self, version: str) -> "VersionInfo | None":
        """Entry for a version string, falling back to its major."""
        pass

    @abstractmethod
    def get_version_range(self, from_major: int, to_major: int) -> list["VersionInfo"]:
        """Entries with from_major <= major <= to_major, ascending."""
        pass


class CommandRunnerInterface(ABC):
    """Port for running external tools (node, npm, ng, ...)."""

    @abstractmethod
    def run(
        self,
        args: list[str],
        cwd: str = ".",
        check: bool = True,
        timeout: float | None = None,
    ) -> "CommandResult":
        """
        Run a command and capture its output.

        Args:
            args: argv list
            cwd: Working directory
            check: Raise CommandError on non-zero exit
            timeout: Seconds before the command is killed (None: runner default)

        Raises:
            CommandError: If the executable is missing, times out, or (with
                check) exits non-zero
        """
        pass


class PackageMetadataProviderInterface(ABC):
    """Port for package registry lookups."""

    @abstractmethod
    def fetch(self, name: str, version_range: str) -> "PackageInfo | None":
        """
        Fetch metadata of the version selected for name@version_range.

        Returns:
            PackageInfo, or None when the package or range is not found
        """
        pass


class SnapshotProviderInterface(ABC):
    """Port for workspace restore points."""

    @abstractmethod
    def create(self, path: str, label: str) -> str:
        """Capture the workspace at path and return a snapshot id."""
        pass

    @abstractmethod
    def restore(self, path: str, snapshot_id: str) -> None:
        """Return the workspace at path to the given snapshot."""
        pass


class RepairInterface(ABC):
    """
    Port for automated build repair.

    Implementations typically ask a code-repair service to patch the
    workspace from the failing build output.
    """

    @abstractmethod
    def repair(self, context: "MigrationContext", error_output: str) -> bool:
        """Attempt a fix. Returns True when something was changed."""
        pass


class StorageInterface(ABC):
    """Port for persisting task and snapshot records."""

    @abstractmethod
    def save_task(self, step: "Step") -> None:
        pass

    @abstractmethod
    def get_task(self, step_id: str) -> "Step | None":
        pass

    @abstractmethod
    def get_all_tasks(self) -> list["Step"]:
        """All stored steps, in the order they were first saved."""
        pass

    @abstractmethod
    def update_task_status(self, step_id: str, status: "StepStatus") -> None:
        """Update a stored step's status. Unknown ids are ignored."""
        pass

    @abstractmethod
    def save_snapshot(self, key: str, snapshot_id: str) -> None:
        pass

    @abstractmethod
    def get_snapshot(self, key: str) -> str | None:
        pass
