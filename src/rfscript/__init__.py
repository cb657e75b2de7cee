"""
rfscript - Scripted refactoring for Python source trees

Runs a line-oriented script of refactoring commands against a workspace,
checking every step before anything is written or diffed.
"""

__version__ = "0.1.0"

from rfscript.exceptions import RfScriptError
from rfscript.pipeline import RunResult, ScriptRunner, run_script
from rfscript.script import CommandRegistry, tokenize
from rfscript.commands import default_registry
from rfscript.schemas import Command, Diagnostic
from rfscript.workspace import Session, Snapshot, Workspace

__all__ = [
    "__version__",
    "RfScriptError",
    "RunResult",
    "ScriptRunner",
    "run_script",
    "CommandRegistry",
    "tokenize",
    "default_registry",
    "Command",
    "Diagnostic",
    "Session",
    "Snapshot",
    "Workspace",
]
