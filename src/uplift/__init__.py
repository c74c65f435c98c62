"""
Uplift: multi-step framework upgrade orchestration.

Plans a version upgrade as a dependency-ordered list of steps, resolves the
npm dependency tree, runs each step through a registered handler and rolls the
workspace back to a snapshot when the run fails.

Example:
    from uplift import (
        HandlerRegistry, InMemorySnapshotProvider, MigrationContext,
        Orchestrator, SnapshotController, WorkflowEngine,
    )

    registry = HandlerRegistry().register("BuildAgent", MyBuildHandler())
    engine = WorkflowEngine(registry)
    orchestrator = Orchestrator(
        engine, SnapshotController(InMemorySnapshotProvider())
    )
    result = orchestrator.run(MigrationContext(project_root="."), steps)
"""

# Application layer (orchestration)
from uplift.application import (
    DependencyResolver,
    Orchestrator,
    SnapshotController,
    VersionPlanner,
    WorkflowEngine,
    WorkflowFailed,
)

# Domain exceptions
from uplift.domain.exceptions import (
    BuildError,
    CommandError,
    ConfigurationError,
    DependencyResolutionError,
    DuplicateIdError,
    EnvironmentCheckError,
    MigrationError,
    ErrorClassification,
    TestFailureError,
    UnknownHandlerError,
    UpgradeError,
)

# Domain interfaces (for custom handlers and adapters)
from uplift.domain.interfaces import (
    CommandRunnerInterface,
    HandlerInterface,
    HandlerRegistryInterface,
    KnowledgeBaseInterface,
    PackageMetadataProviderInterface,
    SnapshotProviderInterface,
    StorageInterface,
)
from uplift.domain.models import (
    CommandResult,
    Conflict,
    ConflictSeverity,
    HandlerKind,
    MigrationContext,
    PackageInfo,
    ResolutionResult,
    RunResult,
    Step,
    StepStatus,
    WorkflowPhase,
    WorkflowState,
)
from uplift.domain.task_graph import TaskGraph

# Infrastructure (commonly used adapters)
from uplift.infrastructure import (
    HandlerRegistry,
    InMemorySnapshotProvider,
    InMemoryStorage,
    SubprocessRunner,
    StaticMetadataProvider,
)

__version__ = "0.1.0"

__all__ = [
    # Application
    "DependencyResolver",
    "Orchestrator",
    "SnapshotController",
    "VersionPlanner",
    "WorkflowEngine",
    "WorkflowFailed",
    # Exceptions
    "BuildError",
    "CommandError",
    "ConfigurationError",
    "DependencyResolutionError",
    "DuplicateIdError",
    "EnvironmentCheckError",
    "MigrationError",
    "ErrorClassification",
    "TestFailureError",
    "UnknownHandlerError",
    "UpgradeError",
    # Interfaces
    "CommandRunnerInterface",
    "HandlerInterface",
    "HandlerRegistryInterface",
    "KnowledgeBaseInterface",
    "PackageMetadataProviderInterface",
    "SnapshotProviderInterface",
    "StorageInterface",
    # Models
    "CommandResult",
    "Conflict",
    "ConflictSeverity",
    "HandlerKind",
    "MigrationContext",
    "PackageInfo",
    "ResolutionResult",
    "RunResult",
    "Step",
    "StepStatus",
    "TaskGraph",
    "WorkflowPhase",
    "WorkflowState",
    # Infrastructure
    "HandlerRegistry",
    "InMemorySnapshotProvider",
    "InMemoryStorage",
    "SubprocessRunner",
    "StaticMetadataProvider",
]
