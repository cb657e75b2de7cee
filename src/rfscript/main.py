import typer
from pathlib import Path

from rfscript.logging_config import logger, setup_logging
from rfscript.exceptions import RfScriptError
from rfscript.pipeline import run_script
from rfscript.workspace import Session, Workspace
from rfscript.cli.output import print_error

app = typer.Typer(add_completion=False)


@app.command()
def main(
    script: str = typer.Argument(..., help="Script text to run (the script itself, not a file name)"),
    diff: bool = typer.Option(False, "--diff", help="Show diff instead of writing files"),
    root: Path = typer.Option(
        Path("."),
        "--root",
        "-C",
        help="Workspace directory to refactor. Defaults to the current directory.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Report failures as a JSON object"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Apply a refactoring script to a Python source tree.

    Each line of SCRIPT is a command (add, mv, rm, debug). Every command's
    edits are checked before the next command runs, and the final result
    is checked again before files are written.
    """
    if verbose:
        setup_logging(level="DEBUG", force=True)

    session = Session(show_diff=diff)
    try:
        workspace = Workspace(root, session=session)
        result = run_script(workspace, script)
    except RfScriptError as e:
        logger.debug(f"Run failed: {e.code}")
        print_error(e, as_json=json_output)
        raise typer.Exit(code=1)

    logger.info(f"Ran {result.commands} command(s), wrote {len(result.written)} file(s)")


def run():
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
