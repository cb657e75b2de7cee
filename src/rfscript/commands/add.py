"""
add ADDRESS TEXT

Insert TEXT after the declaration ADDRESS names, reindented to that
declaration's level, or append TEXT to a file (`path.py`), creating the
file when it does not exist. TEXT may be wrapped in backticks and may
span several lines through backslash continuation.
"""

from rfscript.script import split_command
from rfscript.workspace import Snapshot
from .common import SCRIPT, check_file_path, item_span, parse_address, resolve_item, unquote


def cmd_add(snap: Snapshot, args: str) -> None:
    address, text = split_command(args)
    text = unquote(text)
    if not address or not text.strip():
        snap.error(SCRIPT, 0, "usage: add address text")
        return

    addr = parse_address(address)
    if addr.is_file:
        if check_file_path(snap, addr.path):
            append_to_file(snap, addr.path, text)
        return

    item = resolve_item(snap, address)
    if item is None:
        return

    formatter = snap.workspace.formatter
    source = snap.source(item.path)
    indent_unit = formatter.detect_indentation(source.text)
    block = formatter.format_code_block(text.strip("\n"), item.col // len(indent_unit), indent_unit)

    _, end = item_span(snap, item)
    prefix = "" if source.text[:end].endswith("\n") else "\n"
    # Top-level declarations are separated by two blank lines, nested ones by one
    blank = "\n\n" if item.is_top_level else "\n"
    snap.insert(item.path, end, prefix + blank + block + "\n")


def append_to_file(snap: Snapshot, path: str, text: str) -> None:
    """Append text to a file, creating it when missing."""
    block = text.strip("\n") + "\n"
    if not snap.has_file(path):
        snap.create(path, block)
        return

    current = snap.text(path)
    if current and not current.endswith("\n"):
        block = "\n" + block
    if current.strip():
        block = "\n\n" + block
    # Offsets are relative to the loaded text; its end sorts after every queued edit
    snap.insert(path, len(snap.buffer(path).base), block)
