"""
Domain models for the upgrade orchestration engine.

Steps, workflow state and dependency-resolution records. Steps are frozen
dataclasses; the engine is the only component that produces a step with a
new status (see WorkflowEngine._set_status).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from uplift.domain.exceptions import ErrorClassification, UnknownHandlerError

# =============================================================================
# STEPS
# =============================================================================


class StepStatus(Enum):
    """Lifecycle of a single migration step."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"  # terminal
    FAILED = "FAILED"  # terminal
    SKIPPED = "SKIPPED"  # terminal, never started


class HandlerKind(Enum):
    """Every handler name a step may carry."""

    VERSION_PLANNER = "VersionPlannerAgent"
    ENVIRONMENT = "EnvironmentAgent"
    DEPENDENCY = "DependencyAgent"
    BUILD = "BuildAgent"
    RUNTIME = "RuntimeAgent"
    ROUTER = "RouterAgent"
    UI = "UIAgent"
    TEST = "TestAgent"
    REPORT = "ReportAgent"

    @classmethod
    def parse(cls, name: "str | HandlerKind") -> "HandlerKind":
        """
        Raises:
            UnknownHandlerError: If name is not a known handler kind
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            raise UnknownHandlerError(
                str(name), [kind.value for kind in cls]
            ) from None


@dataclass(frozen=True)
class Step:
    """
    One unit of migration work.

    dependency_ids must name steps present in the same graph; an unknown id
    never becomes COMPLETED, so the step stays blocked.
    """

    id: str
    kind: str
    description: str
    handler_name: str
    dependency_ids: tuple[str, ...] = ()
    status: StepStatus = StepStatus.PENDING
    payload: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "description": self.description,
            "handler_name": self.handler_name,
            "dependency_ids": list(self.dependency_ids),
            "status": self.status.value,
            "payload": self.payload,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Step":
        return cls(
            id=data["id"],
            kind=data["kind"],
            description=data.get("description", ""),
            handler_name=data["handler_name"],
            dependency_ids=tuple(data.get("dependency_ids", ())),
            status=StepStatus(data.get("status", StepStatus.PENDING.value)),
            payload=data.get("payload"),
        )


# =============================================================================
# CONTEXT
# =============================================================================


@dataclass(frozen=True)
class MigrationContext:
    """Read-only run context handed to the planner and every handler."""

    project_root: str
    current_version: str | None = None
    target_version: str | None = None
    dry_run: bool = False
    interactive: bool = True
    strict: bool = False


# =============================================================================
# WORKFLOW STATE
# =============================================================================


class WorkflowPhase(Enum):
    """High-level phase of an upgrade run."""

    PLANNING = "PLANNING"
    EXECUTION = "EXECUTION"
    VERIFICATION = "VERIFICATION"
    ROLLBACK = "ROLLBACK"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class WorkflowError:
    """Last failure observed by the engine."""

    message: str
    recoverable: bool
    attempt: int  # global failure counter across the run
    classification: ErrorClassification = (
        ErrorClassification.UNCLASSIFIED_RUNTIME_CHANGE
    )
    step_id: str | None = None


@dataclass
class WorkflowState:
    """Mutable run state. Owned exclusively by WorkflowEngine."""

    steps: tuple[Step, ...] = ()
    current_step_id: str | None = None
    phase: WorkflowPhase = WorkflowPhase.PLANNING
    last_error: WorkflowError | None = None
    history: list[WorkflowPhase] = field(default_factory=list)

    def get_step(self, step_id: str) -> Step | None:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    @property
    def is_terminal(self) -> bool:
        return self.phase in (WorkflowPhase.COMPLETED, WorkflowPhase.FAILED)


@dataclass(frozen=True)
class RunResult:
    """Outcome of one orchestrated run."""

    phase: WorkflowPhase
    steps: tuple[Step, ...]
    last_error: WorkflowError | None = None
    snapshot_id: str | None = None
    rolled_back: bool = False

    def steps_with_status(self, status: StepStatus) -> list[Step]:
        return [s for s in self.steps if s.status == status]

    @property
    def partial(self) -> bool:
        """COMPLETED run that still has failed or skipped steps."""
        return self.phase == WorkflowPhase.COMPLETED and any(
            s.status in (StepStatus.FAILED, StepStatus.SKIPPED) for s in self.steps
        )


# =============================================================================
# DEPENDENCY RESOLUTION
# =============================================================================


@dataclass(frozen=True)
class PackageInfo:
    """Published metadata for one resolved package version."""

    name: str
    version: str
    dependencies: dict[str, str] = field(default_factory=dict)
    peer_dependencies: dict[str, str] = field(default_factory=dict)
    optional_dependencies: dict[str, str] = field(default_factory=dict)


@dataclass
class ResolutionNode:
    """A resolved package version plus its own resolved subtree."""

    name: str
    requested_range: str
    resolved_version: str
    dependencies: dict[str, "ResolutionNode"] = field(default_factory=dict)
    peer_dependencies: dict[str, str] = field(default_factory=dict)

    def walk(self):
        """Yield this node and every descendant, depth-first."""
        yield self
        for child in self.dependencies.values():
            yield from child.walk()


class ConflictSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Conflict:
    """
    Incompatibility between version requests for one package.

    Only severity and resolution change after creation, and only once: an
    error downgraded to a warning when an intersecting version is found.
    """

    package_name: str
    requested_by: set[str]
    versions: list[str]
    severity: ConflictSeverity
    resolution: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == ConflictSeverity.ERROR


@dataclass(frozen=True)
class ResolutionResult:
    """Tree, conflicts and first-writer-wins resolutions of one run."""

    tree: dict[str, ResolutionNode]
    conflicts: list[Conflict]
    resolutions: dict[str, str]

    @property
    def errors(self) -> list[Conflict]:
        return [c for c in self.conflicts if c.is_error]

    @property
    def warnings(self) -> list[Conflict]:
        return [c for c in self.conflicts if not c.is_error]

    def size(self) -> int:
        """Number of nodes in the tree, nested dependencies included."""
        return sum(1 for root in self.tree.values() for _ in root.walk())


# =============================================================================
# COMMANDS
# =============================================================================


@dataclass(frozen=True)
class CommandResult:
    """Captured output of one external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """stdout, or stderr when stdout is empty."""
        return self.stdout or self.stderr


# =============================================================================
# KNOWLEDGE BASE
# =============================================================================


@dataclass(frozen=True)
class VersionInfo:
    """Knowledge-base entry for one framework release."""

    version: str
    node_range: str = ""
    typescript_range: str = ""
    rxjs_range: str = ""
    release_date: str = ""
    breaking_changes: tuple[str, ...] = ()
