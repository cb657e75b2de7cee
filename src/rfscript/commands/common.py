"""
Shared helpers for command handlers: addresses and spans.

An address names a declaration as `path.py:Qual.Name`, or as `Qual.Name`
when that name is unique across the workspace. A bare `path.py` names a
file.
"""

import posixpath
from dataclasses import dataclass
from typing import Optional, Tuple

from rfscript.workspace import Item, Snapshot

SCRIPT = "<script>"


@dataclass
class Address:
    path: Optional[str]
    qualname: Optional[str]

    @property
    def is_file(self) -> bool:
        return self.qualname is None


def parse_address(text: str) -> Address:
    path, sep, qualname = text.partition(":")
    if sep:
        return Address(path or None, qualname or None)
    if text.endswith(".py"):
        return Address(text, None)
    return Address(None, text)


def check_file_path(snap: Snapshot, path: str) -> bool:
    """A file address must be a relative .py path inside the workspace."""
    norm = posixpath.normpath(path)
    if not path.endswith(".py") or norm.startswith("..") or posixpath.isabs(norm):
        snap.error(SCRIPT, 0, f"invalid file address {path}")
        return False
    return True


def resolve_item(snap: Snapshot, text: str) -> Optional[Item]:
    """
    Find the declaration an address names, reporting failures on the snapshot.
    """
    addr = parse_address(text)
    if addr.is_file:
        snap.error(SCRIPT, 0, f"{text} is a file, expected a declaration")
        return None
    if addr.path is not None:
        if snap.source(addr.path) is None:
            snap.error(SCRIPT, 0, f"cannot find file {addr.path}")
            return None
        item = snap.items.find(addr.path, addr.qualname)
        if item is None:
            snap.error(addr.path, 0, f"cannot find {addr.qualname}")
        return item

    matches = snap.items.find_all(addr.qualname)
    if not matches:
        snap.error(SCRIPT, 0, f"cannot find {addr.qualname}")
        return None
    if len(matches) > 1:
        where = ", ".join(sorted(m.path for m in matches))
        snap.error(SCRIPT, 0, f"ambiguous {addr.qualname}: defined in {where}")
        return None
    return matches[0]


def unquote(text: str) -> str:
    """Strip one pair of surrounding backticks."""
    if len(text) >= 2 and text[0] == "`" and text[-1] == "`":
        return text[1:-1]
    return text


def item_span(snap: Snapshot, item: Item) -> Tuple[int, int]:
    """Whole-line character range of a declaration, decorators included."""
    return snap.source(item.path).line_span(item.start_line, item.end_line)
