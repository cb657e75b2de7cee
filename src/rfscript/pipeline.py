"""
ScriptRunner: run a script as a chain of checked snapshots.

Validation is always one step behind mutation: a command's edits are
checked when the next command loads them, and the last command's edits
by a final reload before anything is written.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from rfscript.exceptions import (
    CommandIntroducedErrors,
    FinalValidationFailed,
    HardLoadError,
    PreexistingErrors,
    SynchronousHandlerError,
    WriteError,
)
from rfscript.logging_config import logger
from rfscript.script import CommandRegistry, iter_commands
from rfscript.workspace import Loader, Session, Snapshot


@dataclass
class RunResult:
    """Outcome of a successful run."""
    commands: int = 0
    written: List[str] = field(default_factory=list)
    diff: str = ""


class ScriptRunner:
    """
    Main orchestrator for script execution.

    For every command:
    1. Load the next snapshot from the current base (HardLoadError aborts)
    2. Reject diagnostics: before any command they are preexisting, after
       one they belong to the previous command (persist base as it was
       checked, then abort)
    3. Record the command line for error attribution
    4. Dispatch the command name (UnknownCommand aborts)
    5. Run the handler on the snapshot
    6. Abort if the handler reported diagnostics
    7. Normalize the edited files and make the snapshot the new base

    After the last command: show the diff (diff mode), reload one final
    time, then write (write mode).
    """

    def __init__(
        self,
        loader: Loader,
        registry: Optional[CommandRegistry] = None,
        session: Optional[Session] = None,
    ):
        """
        Initialize runner.

        Args:
            loader: Initial base of the chain, usually a Workspace
            registry: Command handlers (defaults to the bundled commands)
            session: Run session (defaults to the loader's session)
        """
        if registry is None:
            from rfscript.commands import default_registry
            registry = default_registry()
        self.loader = loader
        self.registry = registry
        self.session = session or getattr(loader, "session", None) or Session()

    def run(self, script: str) -> RunResult:
        """
        Execute a script.

        Args:
            script: Literal script text

        Returns:
            RunResult describing what was done

        Raises:
            RfScriptError: Any failure; nothing beyond the last checked base is written
        """
        result = RunResult()
        base: Loader = self.loader
        snap: Optional[Snapshot] = None
        last_cmd = ""

        for command in iter_commands(script):
            snap = base.load()
            if snap.errors() > 0:
                if not last_cmd:
                    raise PreexistingErrors(snap.diagnostics)
                self._finalize_partial(base)
                raise CommandIntroducedErrors(last_cmd, snap.diagnostics)

            last_cmd = command.display
            self.session.trace(command.text)

            handler = self.registry.lookup(command.name)
            logger.debug(f"Running '{command.name}' (script line {command.lineno})")
            handler(snap, command.args)
            if snap.errors() > 0:
                raise SynchronousHandlerError(last_cmd, snap.diagnostics)

            snap.normalize()
            base = snap
            result.commands += 1

        if snap is None:
            logger.debug("Script has no commands, nothing to do")
            return result

        return self._finalize(snap, last_cmd, result)

    def _finalize(self, snap: Snapshot, last_cmd: str, result: RunResult) -> RunResult:
        # Diff first, so a failing final check still leaves something to read
        if self.session.show_diff:
            result.diff = snap.diff()
            self.session.stdout.write(result.diff)

        try:
            checked = snap.load()
        except HardLoadError as e:
            raise FinalValidationFailed(last_cmd, cause=e) from e
        if checked.errors() > 0:
            raise FinalValidationFailed(last_cmd, diagnostics=checked.diagnostics)

        if self.session.show_diff:
            return result

        result.written = snap.write()
        return result

    def _finalize_partial(self, base: Snapshot) -> None:
        """
        Show or persist the last state that passed its check.

        base is the snapshot the failing command ran against. What is
        written (or diffed) is base's text as it was loaded: every command
        before the failing one applied, none of the failing command's
        pending edits. A write failure here is logged, since the
        CommandIntroducedErrors raised next is the error that matters.
        """
        if self.session.show_diff:
            self.session.stdout.write(base.diff(pending=False))
            return
        try:
            base.write(pending=False)
        except WriteError as e:
            logger.warning(f"Could not write partial result: {e}")


def run_script(
    loader: Loader,
    script: str,
    registry: Optional[CommandRegistry] = None,
    session: Optional[Session] = None,
) -> RunResult:
    """Run a script against a loader; see ScriptRunner."""
    return ScriptRunner(loader, registry, session).run(script)
