"""
Handler Registry with Entry Points Discovery.

Maps the handler name stored on a step to a HandlerInterface instance. Names
are a closed set (HandlerKind) and are validated when a handler is
registered, so a typo fails before the run starts.

External packages can contribute handler factories in their pyproject.toml:

    [project.entry-points."uplift.handlers"]
    UIAgent = "mypackage.handlers:make_ui_handler"
"""

import logging
import warnings
from collections.abc import Callable
from importlib.metadata import entry_points

from uplift.domain.exceptions import ConfigurationError, UnknownHandlerError
from uplift.domain.interfaces import HandlerInterface, HandlerRegistryInterface
from uplift.domain.models import HandlerKind

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "uplift.handlers"


class HandlerRegistry(HandlerRegistryInterface):
    """
    Registry of HandlerInterface instances keyed by HandlerKind.

    Example usage:
        registry = HandlerRegistry()
        registry.register(HandlerKind.TEST, TestHandler(SubprocessRunner()))
        handler = registry.get("TestAgent")
    """

    def __init__(self) -> None:
        self._handlers: dict[HandlerKind, HandlerInterface] = {}

    def register(
        self, kind: "str | HandlerKind", handler: HandlerInterface
    ) -> "HandlerRegistry":
        """
        Register a handler for a kind, replacing any previous one.

        Raises:
            UnknownHandlerError: If kind is not a HandlerKind value
            ConfigurationError: If handler has no callable run()
        """
        parsed = HandlerKind.parse(kind)
        if not callable(getattr(handler, "run", None)):
            raise ConfigurationError(
                f"Handler for '{parsed.value}' does not implement run()",
                {"handler": parsed.value},
            )
        self._handlers[parsed] = handler
        return self  # Fluent

    def get(self, name: "str | HandlerKind") -> HandlerInterface:
        """
        Raises:
            UnknownHandlerError: If the name is unknown or nothing is registered
        """
        kind = HandlerKind.parse(name)
        if kind not in self._handlers:
            raise UnknownHandlerError(kind.value, self.available())
        return self._handlers[kind]

    def has(self, name: "str | HandlerKind") -> bool:
        try:
            return HandlerKind.parse(name) in self._handlers
        except UnknownHandlerError:
            return False

    def available(self) -> list[str]:
        return [kind.value for kind in self._handlers]

    def missing(self, names: list[str]) -> list[str]:
        """Names from the list with no registered handler, in order, deduplicated."""
        result: list[str] = []
        for name in names:
            if not self.has(name) and name not in result:
                result.append(name)
        return result

    def load_entry_points(self, **factory_kwargs) -> int:
        """
        Register handlers contributed through the uplift.handlers group.

        Each entry point must resolve to a callable returning a handler; it is
        called with factory_kwargs. Handlers already registered are kept.

        Returns:
            Number of handlers added
        """
        added = 0
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            try:
                kind = HandlerKind.parse(ep.name)
                if kind in self._handlers:
                    continue
                factory: Callable[..., HandlerInterface] = ep.load()
                self.register(kind, factory(**factory_kwargs))
                added += 1
            except Exception as e:
                warnings.warn(
                    f"Failed to load handler '{ep.name}' from entry point: {e}",
                    stacklevel=2,
                )
        logger.debug("Loaded %d handler(s) from entry points", added)
        return added
