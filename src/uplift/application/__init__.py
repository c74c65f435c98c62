"""
Application layer for the upgrade engine.

Planning, dependency resolution, step execution and the snapshot/rollback
orchestration that coordinates them.
"""

from uplift.application.engine import WorkflowEngine
from uplift.application.orchestrator import Orchestrator, WorkflowFailed
from uplift.application.planner import VersionPlanner
from uplift.application.resolver import DependencyResolver
from uplift.application.snapshot import SnapshotController

__all__ = [
    "DependencyResolver",
    "Orchestrator",
    "SnapshotController",
    "VersionPlanner",
    "WorkflowEngine",
    "WorkflowFailed",
]
