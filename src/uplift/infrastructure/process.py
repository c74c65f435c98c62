"""
Subprocess execution for package managers, git and build tools.

The only module that shells out. Adapters call run_command directly;
handlers receive a SubprocessRunner through CommandRunnerInterface and
translate CommandError into their own classified errors.
"""

import logging
import subprocess

from uplift.domain.exceptions import CommandError
from uplift.domain.interfaces import CommandRunnerInterface
from uplift.domain.models import CommandResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 900  # seconds

__all__ = [
    "DEFAULT_TIMEOUT",
    "CommandError",
    "CommandResult",
    "SubprocessRunner",
    "run_command",
]


def run_command(
    args: list[str],
    cwd: str = ".",
    check: bool = True,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> CommandResult:
    """
    Run a command and capture its output.

    Args:
        args: argv list, e.g. ["git", "status", "--porcelain"]
        cwd: Working directory
        check: Raise CommandError on non-zero exit
        timeout: Seconds before the command is killed

    Returns:
        CommandResult with decoded stdout/stderr

    Raises:
        CommandError: If the executable is missing, times out, or (with
            check) exits non-zero
    """
    logger.debug("$ %s (cwd=%s)", " ".join(args), cwd)
    try:
        completed = subprocess.run(
            args,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise CommandError(f"Command not found: {args[0]}") from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(f"Command timed out after {timeout}s: {' '.join(args)}") from e

    result = CommandResult(
        args=tuple(args),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    if check and result.returncode != 0:
        raise CommandError(
            f"Command failed with exit code {result.returncode}: {' '.join(args)}",
            result,
        )
    return result


class SubprocessRunner(CommandRunnerInterface):
    """CommandRunnerInterface backed by run_command."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout

    def run(
        self,
        args: list[str],
        cwd: str = ".",
        check: bool = True,
        timeout: float | None = None,
    ) -> CommandResult:
        return run_command(args, cwd, check, timeout or self._timeout)
