"""
Workspace: the pristine source tree on disk, and the first Loader of a run.
"""

from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from rfscript.config import get_run_config
from rfscript.exceptions import ConfigError, HardLoadError
from rfscript.logging_config import logger
from .editor import CodeEditor
from .formatter import CodeFormatter
from .session import Session


class Loader(Protocol):
    """Anything that can produce the next Snapshot of the chain."""

    def load(self) -> "Snapshot":
        ...


class Workspace:
    """
    A directory of Python modules.

    Loading reads every module from disk and records that text as the
    original state that diffs and writes are measured against.
    """

    def __init__(
        self,
        root: Union[str, Path] = ".",
        session: Optional[Session] = None,
        config: Optional[dict] = None,
    ):
        """
        Initialize workspace.

        Args:
            root: Directory containing the sources
            session: Run session (a default one is created if omitted)
            config: Optional config overrides (merges with get_run_config(root))

        Raises:
            ConfigError: If an override names an unknown option
        """
        self.root = Path(root)
        self.session = session or Session()
        defaults = get_run_config(self.root)
        unknown = sorted(set(config or {}) - set(defaults))
        if unknown:
            raise ConfigError(f"unknown config option(s): {', '.join(unknown)}")
        self.config = {**defaults, **(config or {})}
        self.original: Dict[str, str] = {}
        self.line_endings: Dict[str, str] = {}
        self.editor = CodeEditor(self.config)
        self.formatter = CodeFormatter(self.config)

    def scan(self) -> List[str]:
        """
        Workspace-relative POSIX paths of all source files, sorted.

        Raises:
            HardLoadError: If the root is not a directory
        """
        if not self.root.is_dir():
            raise HardLoadError(str(self.root), "not a directory")

        excluded = set(self.config["exclude_dirs"])
        paths = []
        for path in self.root.glob(self.config["source_glob"]):
            rel = path.relative_to(self.root)
            if any(part in excluded for part in rel.parts[:-1]):
                continue
            if path.is_file():
                paths.append(rel.as_posix())
        return sorted(paths)

    def read_sources(self) -> Dict[str, str]:
        """
        Read every source file as LF-normalized text.

        Raises:
            HardLoadError: If a file cannot be read or decoded
        """
        encoding = self.config.get("encoding", "utf-8")
        sources = {}
        for rel in self.scan():
            try:
                data = (self.root / rel).read_bytes()
            except OSError as e:
                raise HardLoadError(rel, e.strerror or str(e)) from e
            try:
                text = data.decode(encoding)
            except UnicodeDecodeError as e:
                raise HardLoadError(rel, f"invalid {encoding}: {e.reason}") from e
            self.line_endings[rel] = CodeEditor.detect_line_ending(text)
            sources[rel] = CodeEditor.normalize_line_endings(text, "\n")
        return sources

    def load(self) -> "Snapshot":
        """Read the workspace from disk and check it."""
        from .snapshot import Snapshot

        sources = self.read_sources()
        self.original = dict(sources)
        logger.debug(f"Read {len(sources)} source files from {self.root}")
        return Snapshot.build(self, sources)

    def path(self, rel: str) -> Path:
        """Absolute location of a workspace-relative path."""
        return self.root / rel
