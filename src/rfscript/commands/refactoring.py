"""
Run rope refactorings against a snapshot.

rope works on files, so the snapshot's loaded text is written into a
scratch rope project. The refactoring computes its changes there, and
every changed module comes back to the snapshot as one whole-file
replacement.
"""

import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List

from rope.base.change import ChangeContents, ChangeSet
from rope.base.fscommands import FileSystemCommands
from rope.base.project import Project

from rfscript.logging_config import logger
from rfscript.workspace import Snapshot


@contextmanager
def scratch_project(snap: Snapshot, new_files: Iterable[str] = ()) -> Iterator[Project]:
    """
    rope Project over a temporary copy of the snapshot.

    Args:
        snap: Snapshot whose loaded text is copied
        new_files: Paths to create empty (e.g. a move destination)
    """
    with tempfile.TemporaryDirectory(prefix="rfscript_rope_") as td:
        root = Path(td)
        texts = snap.loaded_texts()
        for path in new_files:
            texts.setdefault(path, "")
        for path, text in texts.items():
            target = root / path
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding="utf-8", newline="") as f:
                f.write(text)

        # Plain filesystem ops, no VCS detection and no .ropeproject folder
        project = Project(str(root), fscommands=FileSystemCommands(), ropefolder=None)
        try:
            yield project
        finally:
            project.close()


def iter_changes(changes) -> Iterator:
    if isinstance(changes, ChangeSet):
        for change in changes.changes:
            yield from iter_changes(change)
    else:
        yield changes


def apply_changes(snap: Snapshot, changes) -> List[str]:
    """
    Queue rope's changes on the snapshot.

    Only content changes are expected. A file the snapshot does not have
    yet is created with its new contents.

    Returns:
        Paths that received an edit
    """
    touched = []
    for change in iter_changes(changes):
        if not isinstance(change, ChangeContents):
            snap.error(change.resource.path, 0, f"unsupported change: {change}")
            continue
        path = change.resource.path
        source = snap.source(path)
        if source is None:
            if snap.create(path, change.new_contents):
                touched.append(path)
            continue
        if change.new_contents == source.text:
            continue
        if snap.replace(path, 0, len(source.text), change.new_contents):
            touched.append(path)
    logger.debug(f"Applied rope changes to {len(touched)} file(s)")
    return touched
