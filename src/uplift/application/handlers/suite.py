"""
TestHandler: runs the project's test suite.
"""

import logging
import re
from typing import Any

from uplift.domain.exceptions import CommandError, TestFailureError
from uplift.domain.interfaces import CommandRunnerInterface, HandlerInterface
from uplift.domain.models import MigrationContext

logger = logging.getLogger(__name__)

DEFAULT_TEST_COMMAND = ("npx", "ng", "test", "--watch=false")

_JASMINE_FAILED = re.compile(r"FAILED:\s+(.+)")
_JEST_FAILED = re.compile(r"●\s+(.+)")


def parse_failed_tests(output: str) -> list[str]:
    """Failed test names from Karma/Jasmine or Jest output."""
    failed = [m.group(1).strip() for m in _JASMINE_FAILED.finditer(output)]
    failed += [m.group(1).strip() for m in _JEST_FAILED.finditer(output)]
    return failed


class TestHandler(HandlerInterface):
    """Runs the test command and reports failing tests."""

    __test__ = False

    def __init__(
        self,
        runner: CommandRunnerInterface,
        command: list[str] | tuple[str, ...] = DEFAULT_TEST_COMMAND,
    ):
        self._runner = runner
        self._command = list(command)

    def run(
        self, context: MigrationContext, payload: dict[str, Any] | None = None
    ) -> None:
        logger.info("Running test suite")
        try:
            self._runner.run(self._command, context.project_root)
        except CommandError as e:
            output = e.output
            failed = parse_failed_tests(output)
            if failed:
                for name in failed:
                    logger.error("Test failed: %s", name)
                raise TestFailureError(
                    f"{len(failed)} test(s) failed",
                    {"failed_tests": failed, "output": output[:1000]},
                ) from e
            raise TestFailureError("Test suite failed", {"output": output[:1000]}) from e
        logger.info("All tests passed")
