"""
Session: per-run settings shared by the pipeline and command handlers.
"""

import sys
from typing import Dict, Optional, TextIO


class Session:
    """
    Run-wide configuration.

    Attributes:
        show_diff: Print a diff instead of writing files
        debug: Debug/trace options, set by the `debug` command
        stdout: Sink for diff output
        stderr: Sink for trace output
    """

    def __init__(
        self,
        show_diff: bool = False,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        debug: Optional[Dict[str, str]] = None,
    ):
        self.show_diff = show_diff
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.debug: Dict[str, str] = dict(debug or {})

    def debug_enabled(self, key: str) -> bool:
        return bool(self.debug.get(key))

    def trace(self, line: str) -> None:
        """Echo a command line to stderr when the `trace` option is set."""
        if self.debug_enabled("trace"):
            self.stderr.write("> " + line.replace("\n", "\\\n") + "\n")
