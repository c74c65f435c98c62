"""
Domain exceptions and the error taxonomy for upgrade runs.

Every error the engine observes is tagged with one ErrorClassification and a
recoverable flag. Errors raised outside the UpgradeError hierarchy are treated
as UNCLASSIFIED_RUNTIME_CHANGE and recoverable.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uplift.domain.models import CommandResult, Conflict


class ErrorClassification(Enum):
    """Classification tags for observed failures."""

    ENVIRONMENT = "Environment"
    DEPENDENCY_RESOLUTION = "DependencyResolution"
    VERSION_SKEW = "VersionSkew"
    TOOLCHAIN_INCOMPATIBILITY = "ToolchainIncompatibility"
    LIBRARY_DEPRECATION = "LibraryDeprecation"
    COMPILER_INCOMPATIBILITY = "CompilerIncompatibility"
    ARCHITECTURE_MISMATCH = "ArchitectureMismatch"
    CONFIGURATION_ERROR = "ConfigurationError"
    ROUTING_CONFIG = "RoutingConfig"
    PRESENTATION_LAYER = "PresentationLayer"
    RUNTIME_HYDRATION = "RuntimeHydration"
    TEST_FAILURE = "TestFailure"
    UNCLASSIFIED_RUNTIME_CHANGE = "UnclassifiedRuntimeChange"


class UpgradeError(Exception):
    """
    Base class for classified failures raised by handlers.

    The engine reads classification and recoverable to decide whether the
    run continues.
    """

    def __init__(
        self,
        message: str,
        classification: ErrorClassification,
        recoverable: bool = True,
        details: dict[str, Any] | None = None,
    ):
        """
        Args:
            message: Human-readable error message
            classification: Taxonomy tag for the failure
            recoverable: Whether later independent steps may still run
            details: Free-form diagnostic data (command output, ranges, ...)
        """
        super().__init__(message)
        self.message = message
        self.classification = classification
        self.recoverable = recoverable
        self.details = details or {}


class EnvironmentCheckError(UpgradeError):
    """Required tooling is missing or outside its supported range."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorClassification.ENVIRONMENT, False, details)


class DependencyResolutionError(UpgradeError):
    """Dependency tree could not be resolved without errors (strict mode)."""

    def __init__(
        self,
        message: str,
        conflicts: list["Conflict"] | None = None,
        recoverable: bool = True,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, ErrorClassification.DEPENDENCY_RESOLUTION, recoverable, details
        )
        self.conflicts = conflicts or []


class BuildError(UpgradeError):
    """Project build still fails after the repair loop."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message, ErrorClassification.COMPILER_INCOMPATIBILITY, True, details
        )


class TestFailureError(UpgradeError):
    """Project test suite reported failures."""

    __test__ = False  # not a pytest test class

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorClassification.TEST_FAILURE, True, details)


class MigrationError(UpgradeError):
    """A code migration could not be applied to the workspace."""

    def __init__(
        self,
        message: str,
        classification: ErrorClassification = (
            ErrorClassification.UNCLASSIFIED_RUNTIME_CHANGE
        ),
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, classification, True, details)


class ConfigurationError(UpgradeError):
    """Invalid or missing configuration. Never recoverable."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message, ErrorClassification.CONFIGURATION_ERROR, False, details
        )


class UnknownHandlerError(ConfigurationError):
    """A step names a handler that is not registered."""

    def __init__(self, name: str, available: list[str] | None = None):
        listed = ", ".join(available or []) or "(none)"
        super().__init__(
            f"Handler '{name}' not found. Available handlers: {listed}",
            {"handler": name},
        )
        self.name = name


class CommandError(Exception):
    """A command was missing, timed out or exited non-zero."""

    def __init__(self, message: str, result: "CommandResult | None" = None):
        super().__init__(message)
        self.result = result

    @property
    def output(self) -> str:
        if self.result is None:
            return str(self)
        return self.result.output or str(self)


class DuplicateIdError(Exception):
    """A step id is already present in the task graph."""

    def __init__(self, step_id: str):
        super().__init__(f"Duplicate step id: {step_id}")
        self.step_id = step_id


def classify_error(error: BaseException) -> tuple[ErrorClassification, bool]:
    """Return (classification, recoverable) for any observed error."""
    if isinstance(error, UpgradeError):
        return error.classification, error.recoverable
    return ErrorClassification.UNCLASSIFIED_RUNTIME_CHANGE, True


def is_recoverable(error: BaseException) -> bool:
    return classify_error(error)[1]
