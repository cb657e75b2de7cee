"""
Snapshot: a loaded, checked checkpoint of the workspace plus pending edits.

Diagnostics describe the text as it was loaded. Edits queued afterwards
are only checked when the snapshot is loaded again, which produces the
next snapshot of the chain.
"""

from typing import Dict, List, Optional

from rfscript.exceptions import EditConflictError, WriteError
from rfscript.logging_config import logger
from rfscript.schemas import Diagnostic, Target
from .checker import WorkspaceChecker
from .editor import EditBuffer
from .items import ItemArena, collect_items
from .source import SourceFile


class Snapshot:
    """
    One step of the script's snapshot chain.

    Handlers read `sources` and `items`, queue edits through replace/insert/
    delete/create, and report problems with error().
    """

    def __init__(
        self,
        workspace: "Workspace",
        sources: Dict[str, SourceFile],
        diagnostics: List[Diagnostic],
        generation: int = 0,
    ):
        self.workspace = workspace
        self.session = workspace.session
        self.sources = sources
        self.diagnostics: List[Diagnostic] = list(diagnostics)
        self.generation = generation
        self.items = ItemArena()
        for source in sources.values():
            collect_items(self.items, source)
        self._buffers: Dict[str, EditBuffer] = {}

    @classmethod
    def build(cls, workspace: "Workspace", texts: Dict[str, str], generation: int = 0) -> "Snapshot":
        """
        Parse and check texts into a new snapshot.

        Raises:
            HardLoadError: If a text cannot be treated as source at all
        """
        sources = {path: SourceFile.parse(path, texts[path]) for path in sorted(texts)}
        diagnostics = WorkspaceChecker(sources, workspace.config["source_roots"]).check()
        snap = cls(workspace, sources, diagnostics, generation)
        logger.debug(
            f"Loaded snapshot #{generation}: {len(sources)} files, "
            f"{len(snap.items)} items, {len(diagnostics)} diagnostics"
        )
        return snap

    def load(self) -> "Snapshot":
        """Re-parse and re-check this snapshot's text, pending edits included."""
        return Snapshot.build(self.workspace, self.current_texts(), self.generation + 1)

    # Diagnostics

    def errors(self) -> int:
        return len(self.diagnostics)

    def error(self, path: str, line: int, message: str, col: int = 0) -> None:
        """Record a diagnostic on this snapshot (used by handlers)."""
        diagnostic = Diagnostic(path=path, line=line, col=col, message=message)
        logger.debug(f"Diagnostic: {diagnostic}")
        self.diagnostics.append(diagnostic)

    @property
    def target(self) -> Target:
        root = self.workspace.root
        package = root.resolve().name if "__init__.py" in self.sources else None
        return Target(
            root=str(root),
            modules=sorted(s.module_name for s in self.sources.values()),
            files=len(self.sources),
            package=package,
        )

    # Reading

    def source(self, path: str) -> Optional[SourceFile]:
        """The parsed source as loaded (pending edits not applied)."""
        return self.sources.get(path)

    def has_file(self, path: str) -> bool:
        return path in self.sources or path in self._buffers

    def text(self, path: str) -> str:
        """Current text of a file, pending edits applied."""
        if path in self._buffers:
            return self._buffers[path].text()
        return self.sources[path].text

    def current_texts(self) -> Dict[str, str]:
        texts = self.loaded_texts()
        for path, buf in self._buffers.items():
            texts[path] = buf.text()
        return texts

    # Editing

    def buffer(self, path: str) -> EditBuffer:
        """
        Edit buffer for a loaded file.

        Raises:
            KeyError: If path is neither loaded nor created in this snapshot
        """
        if path not in self._buffers:
            self._buffers[path] = EditBuffer(path, self.sources[path].text)
        return self._buffers[path]

    def replace(self, path: str, start: int, end: int, text: str) -> bool:
        """
        Queue a replacement of the loaded text's [start:end].

        Returns:
            False if the edit conflicts (a diagnostic is recorded instead)
        """
        try:
            self.buffer(path).replace(start, end, text)
        except EditConflictError as e:
            self.error(path, 0, e.message)
            return False
        return True

    def insert(self, path: str, pos: int, text: str) -> bool:
        return self.replace(path, pos, pos, text)

    def delete(self, path: str, start: int, end: int) -> bool:
        return self.replace(path, start, end, "")

    def create(self, path: str, text: str = "") -> bool:
        """Add a new file to the workspace."""
        if self.has_file(path):
            self.error(path, 0, "file already exists")
            return False
        buf = EditBuffer(path, "", created=True)
        self._buffers[path] = buf
        if text:
            buf.insert(0, text)
        return True

    def normalize(self) -> None:
        """Fold pending edits into formatted text, file by file."""
        formatter = self.workspace.formatter
        for path, buf in sorted(self._buffers.items()):
            buf.reset(formatter.normalize(buf.text()))

    # Finalizing

    def loaded_texts(self) -> Dict[str, str]:
        """Text of every file as this snapshot loaded and checked it."""
        return {path: source.text for path, source in self.sources.items()}

    def _final_texts(self, pending: bool) -> Dict[str, str]:
        return self.current_texts() if pending else self.loaded_texts()

    def changed_files(self, pending: bool = True) -> List[str]:
        """
        Paths whose text differs from the workspace on disk.

        Args:
            pending: Include queued edits; False compares the text as loaded
        """
        original = self.workspace.original
        return [
            path for path, text in sorted(self._final_texts(pending).items())
            if original.get(path) != text
        ]

    def diff(self, pending: bool = True) -> str:
        """Unified diff of all changes against the original workspace."""
        original = self.workspace.original
        editor = self.workspace.editor
        texts = self._final_texts(pending)
        chunks = []
        for path in self.changed_files(pending):
            chunks.append(editor.generate_unified_diff(path, original.get(path), texts[path]))
        return "".join(chunks)

    def write(self, pending: bool = True) -> List[str]:
        """
        Persist every changed file.

        Args:
            pending: Include queued edits; False writes the checked text as loaded

        Returns:
            Workspace-relative paths written

        Raises:
            WriteError: If a file could not be written
        """
        workspace = self.workspace
        texts = self._final_texts(pending)
        written = []
        for path in self.changed_files(pending):
            line_ending = workspace.line_endings.get(path, "\n")
            if not workspace.editor.write_file(str(workspace.path(path)), texts[path], line_ending):
                raise WriteError(path, "write failed")
            written.append(path)
        for path in written:
            workspace.original[path] = texts[path]
        if written:
            logger.info(f"Wrote {len(written)} file(s): {', '.join(written)}")
        return written
