"""
Bundled script commands.

Every handler takes (snapshot, args), queues edits on the snapshot and
reports problems through snapshot.error().
"""

from rfscript.script import CommandRegistry
from .add import cmd_add
from .debug import cmd_debug
from .mv import cmd_mv
from .rm import cmd_rm

BUILTIN_COMMANDS = {
    "add": cmd_add,
    "debug": cmd_debug,
    "mv": cmd_mv,
    "rm": cmd_rm,
}


def default_registry() -> CommandRegistry:
    """A fresh registry holding the bundled commands."""
    return CommandRegistry(BUILTIN_COMMANDS)


__all__ = [
    "BUILTIN_COMMANDS",
    "default_registry",
    "cmd_add",
    "cmd_debug",
    "cmd_mv",
    "cmd_rm",
]
