"""Shared pytest fixtures for uplift tests."""

import pytest

from uplift.domain.exceptions import CommandError
from uplift.domain.interfaces import CommandRunnerInterface
from uplift.domain.models import CommandResult, MigrationContext, PackageInfo, Step
from uplift.infrastructure.npm import StaticMetadataProvider
from uplift.infrastructure.persistence.memory import InMemoryStorage
from uplift.infrastructure.snapshot.memory import InMemorySnapshotProvider


def _make_step(
    step_id: str,
    deps: tuple[str, ...] = (),
    handler: str = "BuildAgent",
    payload: dict | None = None,
) -> Step:
    return Step(
        id=step_id,
        kind="TEST_KIND",
        description=f"step {step_id}",
        handler_name=handler,
        dependency_ids=deps,
        payload=payload,
    )


class FakeCommands(CommandRunnerInterface):
    """Scripted command runner: outputs and failures keyed by argv[0:2]."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.outputs: dict[tuple[str, ...], str] = {}
        self.failures: dict[tuple[str, ...], list[str]] = {}

    def run(self, args, cwd=".", check=True, timeout=None) -> CommandResult:
        self.calls.append(list(args))
        key = tuple(args[:2])
        pending = self.failures.get(key)
        if pending:
            output = pending.pop(0)
            raise CommandError(
                f"Command failed: {' '.join(args)}",
                CommandResult(tuple(args), 1, output, ""),
            )
        return CommandResult(tuple(args), 0, self.outputs.get(key, ""), "")


@pytest.fixture
def step_factory():
    """Build Steps with sensible defaults."""
    return _make_step


@pytest.fixture
def context(tmp_path) -> MigrationContext:
    """Run context rooted in a temporary project directory."""
    return MigrationContext(
        project_root=str(tmp_path),
        current_version="16.0.0",
        target_version="17.0.0",
        interactive=False,
    )


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def snapshot_provider() -> InMemorySnapshotProvider:
    return InMemorySnapshotProvider()


@pytest.fixture
def catalogue() -> StaticMetadataProvider:
    """A small package catalogue with a diamond and a shared leaf."""
    return StaticMetadataProvider(
        {
            "a": [PackageInfo("a", "1.0.0", dependencies={"c": "^2.0.0"})],
            "b": [PackageInfo("b", "1.2.0", dependencies={"c": "^1.0.0"})],
            "c": [PackageInfo("c", "1.5.0"), PackageInfo("c", "2.1.0")],
            "leaf": [PackageInfo("leaf", "1.0.0"), PackageInfo("leaf", "1.3.0")],
        }
    )


@pytest.fixture
def commands() -> FakeCommands:
    return FakeCommands()
