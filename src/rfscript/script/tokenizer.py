"""
Script tokenizer: turn raw script text into logical command lines.

A script is line oriented. `#` starts a comment unless it is quoted,
a trailing backslash continues the command on the next line, and
blank lines are ignored.
"""

from typing import Iterator, List, Tuple

from rfscript.schemas import Command

QUOTES = ("'", '"', "`")
CONTINUATION = "\\"


def trim_comments(line: str) -> str:
    """
    Cut a line at its first unquoted `#` and trim surrounding whitespace.

    Inside '...' and "..." a backslash escapes the following character;
    backtick spans are raw and ignore backslashes.
    """
    quote = None
    i = 0
    while i < len(line):
        c = line[i]
        if quote is not None and c == quote:
            quote = None
        elif quote is None and c in QUOTES:
            quote = c
        elif c == "\\" and quote in ("'", '"'):
            i += 1
        elif c == "#" and quote is None:
            line = line[:i]
            break
        i += 1
    return line.strip()


def split_command(line: str) -> Tuple[str, str]:
    """Split a logical line into (name, args) at the first whitespace run."""
    parts = line.split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


def iter_commands(script: str) -> Iterator[Command]:
    """
    Yield the commands of a script in order.

    Args:
        script: Literal script text

    Yields:
        Command for every non-blank logical line
    """
    text = script
    lineno = 0
    while text:
        start = lineno + 1
        line, _, text = text.partition("\n")
        lineno += 1
        line = trim_comments(line)
        # A backslash on the very last line has nothing to join with and stays literal.
        while line.endswith(CONTINUATION) and text:
            more, _, text = text.partition("\n")
            lineno += 1
            line = trim_comments(line[:-len(CONTINUATION)] + "\n" + more)
        line = line.lstrip(" \t\n")
        if not line:
            continue
        name, args = split_command(line)
        yield Command(name=name, args=args, text=line, lineno=start)


def tokenize(script: str) -> List[Command]:
    """Return every command of a script as a list."""
    return list(iter_commands(script))
