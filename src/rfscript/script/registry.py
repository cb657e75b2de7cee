"""
CommandRegistry: map script command names to handlers.

Each pipeline owns its own registry, so two runs never share handler
bindings.
"""

from typing import Callable, Dict, List, Mapping, Optional

from rfscript.exceptions import UnknownCommand
from rfscript.logging_config import logger

# handler(snapshot, args): mutates the snapshot's pending edits and may
# record diagnostics on it.
Handler = Callable[["Snapshot", str], None]


class CommandRegistry:
    """
    Name -> handler lookup used by the pipeline dispatcher.
    """

    def __init__(self, handlers: Optional[Mapping[str, Handler]] = None):
        """
        Initialize registry with optional handlers.

        Args:
            handlers: Initial name -> handler mapping (copied)
        """
        self._handlers: Dict[str, Handler] = {}
        for name, fn in (handlers or {}).items():
            self.register(name, fn)

    def register(self, name: str, fn: Handler) -> None:
        """Bind a command name, replacing any previous binding."""
        if not name or any(c.isspace() for c in name):
            raise ValueError(f"invalid command name {name!r}")
        if name in self._handlers:
            logger.debug(f"Replacing handler for command '{name}'")
        self._handlers[name] = fn

    def command(self, name: str) -> Callable[[Handler], Handler]:
        """Decorator form of register()."""
        def decorator(fn: Handler) -> Handler:
            self.register(name, fn)
            return fn
        return decorator

    def lookup(self, name: str) -> Handler:
        """
        Resolve a command name.

        Raises:
            UnknownCommand: If nothing is registered under name
        """
        fn = self._handlers.get(name)
        if fn is None:
            raise UnknownCommand(name)
        return fn

    def names(self) -> List[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
