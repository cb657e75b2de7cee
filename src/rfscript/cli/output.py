"""
CLI Output Utilities

Error reporting for the rfscript command line. Human mode prints a
prefixed message and one line per diagnostic; JSON mode prints a single
structured error object. Both go to stderr so stdout only carries diffs.
"""

import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from rfscript.exceptions import RfScriptError

PROG = "rfscript"

_console = Console(stderr=True, highlight=False)


def structured_error(code: str, message: str, diagnostics: Optional[List[str]] = None,
                     command: Optional[str] = None) -> dict:
    """
    Create a structured error object for JSON output.

    Args:
        code: Error code (e.g., "UNKNOWN_COMMAND")
        message: Human-readable error message
        diagnostics: Rendered diagnostics, if any
        command: Script line the error is attributed to

    Returns:
        Structured error dictionary
    """
    error_obj = {
        "status": "error",
        "code": code,
        "message": message
    }
    if command:
        error_obj["command"] = command
    if diagnostics:
        error_obj["diagnostics"] = diagnostics
    return error_obj


def print_error(error: RfScriptError, as_json: bool = False) -> None:
    """
    Report a failed run.

    Args:
        error: The error that ended the run
        as_json: Print a structured JSON object instead of text
    """
    diagnostics = [str(d) for d in error.diagnostics]
    if as_json:
        obj = structured_error(
            code=error.code,
            message=error.message,
            diagnostics=diagnostics,
            command=getattr(error, "command", None),
        )
        typer.echo(json.dumps(obj, separators=(',', ':')), err=True)
        return

    _console.print(f"[bold red]{PROG}:[/bold red] {escape(error.message)}", soft_wrap=True)
    for line in diagnostics:
        _console.print(f"\t{escape(line)}", soft_wrap=True)
