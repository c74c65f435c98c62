"""
Built-in step handlers, one per HandlerKind the planner emits.

Handlers that shell out receive a CommandRunnerInterface. Callers may replace
any of them (for example with an AST- or LLM-backed RuntimeHandler) through
the registry.
"""

from uplift.application.handlers.build import BuildHandler
from uplift.application.handlers.dependency import DependencyHandler
from uplift.application.handlers.environment import EnvironmentHandler
from uplift.application.handlers.report import ReportHandler
from uplift.application.handlers.router import RouterHandler
from uplift.application.handlers.runtime import RuntimeHandler
from uplift.application.handlers.suite import TestHandler
from uplift.application.handlers.ui import UIHandler

__all__ = [
    "BuildHandler",
    "DependencyHandler",
    "EnvironmentHandler",
    "ReportHandler",
    "RouterHandler",
    "RuntimeHandler",
    "TestHandler",
    "UIHandler",
]
