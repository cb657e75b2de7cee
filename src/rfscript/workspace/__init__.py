"""
Workspace package: loading, checking, editing and persisting Python sources.

A Workspace loads the tree from disk into a Snapshot; each Snapshot can
load the next one from its own pending edits.
"""

from .session import Session
from .workspace import Workspace, Loader
from .snapshot import Snapshot
from .source import SourceFile, module_name_for
from .items import Item, ItemArena, collect_items
from .checker import WorkspaceChecker
from .editor import CodeEditor, EditBuffer, TextEdit
from .formatter import CodeFormatter, normalize_whitespace

__all__ = [
    "Session",
    "Workspace",
    "Loader",
    "Snapshot",
    "SourceFile",
    "module_name_for",
    "Item",
    "ItemArena",
    "collect_items",
    "WorkspaceChecker",
    "CodeEditor",
    "EditBuffer",
    "TextEdit",
    "CodeFormatter",
    "normalize_whitespace",
]
