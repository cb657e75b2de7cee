"""
mv ADDRESS NEWNAME
mv ADDRESS dest.py

Rename a declaration, or move a top-level declaration to another file.

Both are rope refactorings. A rename follows rope's scope analysis, so
parameters and locals that only share the old name are left alone.
Moving repoints every import of the name at the destination module and
carries the imports the declaration needs.
"""

import ast
import keyword
from typing import Optional

from rope.base.exceptions import RopeError
from rope.refactor.move import create_move
from rope.refactor.rename import Rename

from rfscript.logging_config import logger
from rfscript.workspace import Item, Snapshot, SourceFile
from .common import SCRIPT, check_file_path, resolve_item
from .refactoring import apply_changes, scratch_project


def cmd_mv(snap: Snapshot, args: str) -> None:
    parts = args.split()
    if len(parts) != 2:
        snap.error(SCRIPT, 0, "usage: mv address newname|file.py")
        return
    address, dest = parts

    item = resolve_item(snap, address)
    if item is None:
        return

    if dest.endswith(".py"):
        if check_file_path(snap, dest):
            move_to_file(snap, item, dest)
    elif dest.isidentifier() and not keyword.iskeyword(dest):
        rename(snap, item, dest)
    else:
        snap.error(SCRIPT, 0, f"invalid destination {dest}")


def rename(snap: Snapshot, item: Item, new: str) -> None:
    """Rename item to new, with its references."""
    if new == item.name:
        return

    siblings = [i for i in snap.items.in_file(item.path) if i.outer == item.outer]
    if any(i.name == new for i in siblings):
        snap.error(item.path, item.start_line, f"{new} already declared")
        return

    offset = _name_offset(snap.source(item.path), item)
    if offset is None:
        snap.error(item.path, item.start_line, f"cannot locate name of {item.qualname}")
        return

    with scratch_project(snap) as project:
        try:
            resource = project.get_resource(item.path)
            changes = Rename(project, resource, offset).get_changes(new)
        except RopeError as e:
            snap.error(item.path, item.start_line, f"cannot rename {item.qualname}: {e}")
            return
        touched = apply_changes(snap, changes)
    logger.debug(f"Renamed {item.qualname} to {new} in {len(touched)} file(s)")


def move_to_file(snap: Snapshot, item: Item, dest: str) -> None:
    """Move a top-level declaration to dest and repoint imports of it."""
    top = snap.items.top_item(item)
    if top is not item:
        snap.error(
            item.path, item.start_line,
            f"can only move top-level declarations, not {item.qualname} (inside {top.qualname})",
        )
        return
    if dest == item.path:
        snap.error(SCRIPT, 0, f"{item.qualname} is already in {dest}")
        return
    if snap.source(dest) is not None and any(i.name == item.name for i in snap.items.top_level(dest)):
        snap.error(dest, 0, f"{item.name} already declared")
        return

    offset = _name_offset(snap.source(item.path), item)
    if offset is None:
        snap.error(item.path, item.start_line, f"cannot locate name of {item.qualname}")
        return

    new_files = [] if snap.source(dest) is not None else [dest]
    with scratch_project(snap, new_files) as project:
        try:
            mover = create_move(project, project.get_resource(item.path), offset)
            changes = mover.get_changes(project.get_resource(dest))
        except RopeError as e:
            snap.error(item.path, item.start_line, f"cannot move {item.qualname}: {e}")
            return
        touched = apply_changes(snap, changes)
    logger.debug(f"Moved {item.qualname} to {dest}, {len(touched)} file(s) changed")


def _name_offset(source: SourceFile, item: Item) -> Optional[int]:
    """Offset of the declared name, where rope looks up what to refactor."""
    if item.kind in ("class", "function"):
        span = source.def_name_span(item.node)
        return span[0] if span else None
    for node in ast.walk(item.node):
        if isinstance(node, ast.Name) and node.id == item.name and isinstance(node.ctx, ast.Store):
            return source.node_span(node)[0]
    return None
