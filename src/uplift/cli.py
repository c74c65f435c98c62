"""Command-line interface for uplift."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from uplift.application.engine import WorkflowEngine
from uplift.application.handlers import (
    BuildHandler,
    DependencyHandler,
    EnvironmentHandler,
    ReportHandler,
    RouterHandler,
    RuntimeHandler,
    TestHandler,
    UIHandler,
)
from uplift.application.orchestrator import Orchestrator
from uplift.application.planner import (
    DEFAULT_CURRENT_VERSION,
    VersionPlanner,
)
from uplift.application.resolver import DependencyResolver
from uplift.application.snapshot import SnapshotController
from uplift.config import UpliftConfig, load_config
from uplift.domain.exceptions import (
    ConfigurationError,
    DependencyResolutionError,
    UpgradeError,
)
from uplift.domain.models import (
    Conflict,
    HandlerKind,
    MigrationContext,
    RunResult,
    Step,
    StepStatus,
)
from uplift.infrastructure.knowledge_base import KnowledgeBase
from uplift.infrastructure.npm import NpmMetadataProvider
from uplift.infrastructure.persistence import FilesystemStorage
from uplift.infrastructure.process import SubprocessRunner
from uplift.infrastructure.registry import HandlerRegistry
from uplift.infrastructure.snapshot import GitSnapshotProvider
from uplift.logging_setup import setup_logging

logger = logging.getLogger("uplift.cli")

console = Console()
error_console = Console(stderr=True)

_STATUS_STYLES = {
    StepStatus.COMPLETED: "green",
    StepStatus.FAILED: "bold red",
    StepStatus.SKIPPED: "yellow",
    StepStatus.IN_PROGRESS: "cyan",
    StepStatus.PENDING: "dim",
}


# =========================================================================
# Wiring
# =========================================================================


def build_registry(
    project_root: str, config: UpliftConfig, storage: FilesystemStorage
) -> HandlerRegistry:
    """
    Handlers contributed through entry points, then a built-in handler for
    every kind still unregistered.
    """
    runner = SubprocessRunner()
    provider = NpmMetadataProvider(registry=config.registry, cwd=project_root)
    builtins = {
        HandlerKind.ENVIRONMENT: lambda: EnvironmentHandler(runner),
        HandlerKind.DEPENDENCY: lambda: DependencyHandler(
            provider, runner, strict=config.strict
        ),
        HandlerKind.RUNTIME: lambda: RuntimeHandler(runner),
        HandlerKind.ROUTER: RouterHandler,
        HandlerKind.UI: UIHandler,
        HandlerKind.BUILD: lambda: BuildHandler(
            runner, config.build_command, rmax=config.rmax
        ),
        HandlerKind.TEST: lambda: TestHandler(runner, config.test_command),
        HandlerKind.REPORT: lambda: ReportHandler(storage),
    }

    registry = HandlerRegistry()
    registry.load_entry_points(config=config)
    for kind, factory in builtins.items():
        if not registry.has(kind):
            registry.register(kind, factory())
    return registry


def build_orchestrator(
    project_root: str, config: UpliftConfig
) -> tuple[Orchestrator, VersionPlanner, HandlerRegistry]:
    """
    Wire the default adapters: filesystem state, git snapshots, npm metadata.

    Returns:
        (orchestrator, planner, registry)
    """
    storage = FilesystemStorage(str(Path(project_root) / config.state_dir))
    storage.clear_tasks()
    planner = VersionPlanner(KnowledgeBase.load(config.knowledge_base))
    registry = build_registry(project_root, config, storage)
    engine = WorkflowEngine(registry, planner=planner, storage=storage)
    snapshots = SnapshotController(GitSnapshotProvider(), storage=storage)
    return Orchestrator(engine, snapshots), planner, registry


# =========================================================================
# Output helpers
# =========================================================================


def print_error(message: str, hint: str | None = None) -> None:
    content = Text(f"ERROR: {message}", style="bold red")
    if hint:
        content.append(f"\n\nHint: {hint}", style="yellow")
    error_console.print(Panel(content, title="Error", border_style="red"))


def print_steps(steps: tuple[Step, ...] | list[Step], title: str) -> None:
    table = Table(title=title)
    table.add_column("Step", style="cyan")
    table.add_column("Handler")
    table.add_column("Depends on", style="dim")
    table.add_column("Status")
    for step in steps:
        table.add_row(
            step.id,
            step.handler_name,
            ", ".join(step.dependency_ids),
            Text(step.status.value, style=_STATUS_STYLES[step.status]),
        )
    console.print(table)


def print_conflicts(conflicts: list[Conflict]) -> None:
    if not conflicts:
        console.print(Text("No dependency conflicts", style="green"))
        return
    table = Table(title="Dependency conflicts")
    table.add_column("Package", style="cyan")
    table.add_column("Requested by")
    table.add_column("Versions")
    table.add_column("Severity")
    table.add_column("Resolution")
    for conflict in conflicts:
        table.add_row(
            conflict.package_name,
            ", ".join(sorted(conflict.requested_by)),
            ", ".join(conflict.versions),
            Text(
                conflict.severity.value,
                style="bold red" if conflict.is_error else "yellow",
            ),
            conflict.resolution or "",
        )
    console.print(table)


def print_result(result: RunResult) -> None:
    print_steps(result.steps, f"Upgrade {result.phase.value}")
    if result.snapshot_id:
        console.print(f"Snapshot: {result.snapshot_id}", style="dim")
    if result.rolled_back:
        console.print("Workspace rolled back to snapshot", style="yellow")


# =========================================================================
# Commands
# =========================================================================


@click.group()
@click.version_option(package_name="uplift")
def cli() -> None:
    """Multi-step framework upgrade orchestrator."""


@cli.command()
@click.argument("project", type=click.Path(exists=True, file_okay=False))
@click.option("--target", required=True, help="Target framework version, e.g. 18")
@click.option(
    "--from",
    "current",
    default=None,
    help=f"Current framework version (default: {DEFAULT_CURRENT_VERSION})",
)
@click.option("--dry-run", is_flag=True, help="Plan and check without writing")
@click.option("--strict", is_flag=True, help="Fail on unresolved dependency conflicts")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(),
    help="Path to uplift.json (default: PROJECT/uplift.json)",
)
@click.option("--log-file", default=None, type=click.Path(), help="Path to log file")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose (DEBUG) logging")
def upgrade(
    project: str,
    target: str,
    current: str | None,
    dry_run: bool,
    strict: bool,
    config_path: str | None,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Upgrade PROJECT to the target framework version."""
    setup_logging("uplift", log_file=log_file, verbose=verbose)

    try:
        config = load_config(config_path or Path(project) / "uplift.json")
        orchestrator, planner, registry = build_orchestrator(project, config)
    except ConfigurationError as e:
        print_error(e.message, hint="Check uplift.json and the knowledge base file")
        sys.exit(2)

    context = MigrationContext(
        project_root=project,
        current_version=current,
        target_version=target,
        dry_run=dry_run,
        interactive=False,
        strict=strict or config.strict,
    )

    steps = planner.run(context)
    missing = registry.missing([step.handler_name for step in steps])
    if missing:
        print_error(
            f"No handler registered for: {', '.join(missing)}",
            hint="Install a package providing them under the "
            "'uplift.handlers' entry-point group",
        )
        sys.exit(2)

    try:
        result = orchestrator.run(context, steps)
    except Exception as e:
        if orchestrator.last_result is not None:
            print_result(orchestrator.last_result)
        message = e.message if isinstance(e, UpgradeError) else str(e)
        print_error(message)
        sys.exit(1)

    print_result(result)
    if result.partial:
        console.print("Completed with failed or skipped steps", style="yellow")


@cli.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.option("--strict", is_flag=True, help="Exit 1 on unresolved conflicts")
@click.option("--registry", default=None, help="npm registry URL")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose (DEBUG) logging")
def resolve(manifest: str, strict: bool, registry: str | None, verbose: bool) -> None:
    """Resolve the dependency tree of a package.json MANIFEST."""
    setup_logging("uplift", verbose=verbose)

    try:
        with open(manifest) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print_error(f"Invalid JSON in {manifest}: {e}")
        sys.exit(2)

    requested = {**data.get("dependencies", {}), **data.get("devDependencies", {})}
    provider = NpmMetadataProvider(
        registry=registry, cwd=str(Path(manifest).resolve().parent)
    )
    try:
        result = DependencyResolver(provider, strict=strict).resolve_tree(requested)
    except DependencyResolutionError as e:
        print_conflicts(e.conflicts)
        print_error(e.message)
        sys.exit(1)

    print_conflicts(result.conflicts)
    console.print(
        f"Resolved {len(result.resolutions)} package(s), {result.size()} node(s)"
    )


@cli.command()
@click.option(
    "--from",
    "current",
    default=DEFAULT_CURRENT_VERSION,
    show_default=True,
    help="Current framework version",
)
@click.option("--target", required=True, help="Target framework version")
@click.option(
    "--knowledge-base",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Versions JSON file (default: bundled)",
)
def plan(current: str, target: str, knowledge_base: str | None) -> None:
    """Print the steps an upgrade would run."""
    try:
        planner = VersionPlanner(KnowledgeBase.load(knowledge_base))
    except ConfigurationError as e:
        print_error(e.message)
        sys.exit(2)

    context = MigrationContext(
        project_root=".", current_version=current, target_version=target
    )
    print_steps(planner.run(context), f"Plan {current} -> {target}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
