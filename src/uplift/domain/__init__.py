"""
Domain layer for the upgrade engine.

Contains models, the error taxonomy, ports and the task graph. No I/O.
"""

from uplift.domain.exceptions import (
    BuildError,
    ConfigurationError,
    DependencyResolutionError,
    DuplicateIdError,
    EnvironmentCheckError,
    ErrorClassification,
    TestFailureError,
    UnknownHandlerError,
    UpgradeError,
    classify_error,
    is_recoverable,
)
from uplift.domain.interfaces import (
    HandlerInterface,
    PackageMetadataProviderInterface,
    PlannerInterface,
    RepairInterface,
    SnapshotProviderInterface,
    StorageInterface,
)
from uplift.domain.models import (
    Conflict,
    ConflictSeverity,
    HandlerKind,
    MigrationContext,
    PackageInfo,
    ResolutionNode,
    ResolutionResult,
    RunResult,
    Step,
    StepStatus,
    VersionInfo,
    WorkflowError,
    WorkflowPhase,
    WorkflowState,
)
from uplift.domain.task_graph import TaskGraph

__all__ = [
    # Models
    "Step",
    "StepStatus",
    "HandlerKind",
    "MigrationContext",
    "WorkflowPhase",
    "WorkflowError",
    "WorkflowState",
    "RunResult",
    "PackageInfo",
    "ResolutionNode",
    "Conflict",
    "ConflictSeverity",
    "ResolutionResult",
    "VersionInfo",
    "TaskGraph",
    # Interfaces
    "HandlerInterface",
    "PlannerInterface",
    "PackageMetadataProviderInterface",
    "SnapshotProviderInterface",
    "RepairInterface",
    "StorageInterface",
    # Exceptions
    "ErrorClassification",
    "UpgradeError",
    "EnvironmentCheckError",
    "DependencyResolutionError",
    "BuildError",
    "TestFailureError",
    "ConfigurationError",
    "UnknownHandlerError",
    "DuplicateIdError",
    "classify_error",
    "is_recoverable",
]
