"""
Pending edit buffers and safe file writes.

EditBuffer holds character-range edits against one file's loaded text;
CodeEditor persists finished text with backups and atomic writes and
renders unified diffs.
"""

import difflib
import os
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rfscript.exceptions import EditConflictError
from rfscript.logging_config import logger
from rfscript.config import RUN_CONFIG


@dataclass
class TextEdit:
    """Replace text[start:end] with text. start == end is an insertion."""
    start: int
    end: int
    text: str
    seq: int = 0

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end


class EditBuffer:
    """
    Non-overlapping edits against a file's base text.

    Edits are positioned relative to the base text, so handlers can queue
    several edits computed from the same parse without recomputing offsets.
    """

    def __init__(self, path: str, text: str, created: bool = False):
        self.path = path
        self.base = text
        self.created = created
        self.edits: List[TextEdit] = []
        self._seq = 0

    @property
    def dirty(self) -> bool:
        return bool(self.edits)

    def replace(self, start: int, end: int, text: str) -> None:
        """
        Queue a replacement of base[start:end].

        Raises:
            EditConflictError: If the range overlaps a queued edit or is out of bounds
        """
        if not 0 <= start <= end <= len(self.base):
            raise EditConflictError(self.path, start, end)
        for edit in self.edits:
            if start < edit.end and edit.start < end:
                raise EditConflictError(self.path, start, end)
        self._seq += 1
        self.edits.append(TextEdit(start, end, text, self._seq))

    def insert(self, pos: int, text: str) -> None:
        self.replace(pos, pos, text)

    def delete(self, start: int, end: int) -> None:
        self.replace(start, end, "")

    def text(self) -> str:
        """Base text with all queued edits applied."""
        if not self.edits:
            return self.base
        # Insertions at a point go before a replacement starting there, in queue order
        ordered = sorted(self.edits, key=lambda e: (e.start, 0 if e.is_insertion else 1, e.seq))
        out = []
        pos = 0
        for edit in ordered:
            out.append(self.base[pos:edit.start])
            out.append(edit.text)
            pos = edit.end
        out.append(self.base[pos:])
        return "".join(out)

    def reset(self, text: str) -> None:
        """Make text the new base and drop queued edits."""
        self.base = text
        self.edits = []


class CodeEditor:
    """
    Persist rewritten files safely.

    Features:
    - Optional backups before overwriting
    - Atomic writes (temp file + rename)
    - UTF-8 encoding handling
    - Line ending preservation (LF/CRLF)
    """

    def __init__(self, config: Optional[dict] = None):
        """
        Initialize code editor with optional config.

        Args:
            config: Optional config overrides (merges with RUN_CONFIG)
        """
        self.config = {**RUN_CONFIG, **(config or {})}

    def create_backup(self, file_path: str) -> Optional[str]:
        """
        Create a timestamped backup of a file.

        Args:
            file_path: Path to file to backup

        Returns:
            Path to backup file or None if failed
        """
        path = Path(file_path)
        if not path.exists():
            logger.error(f"Cannot backup non-existent file: {file_path}")
            return None

        backup_dir = Path(self.config["backup_dir"])
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = backup_dir / f"{path.name}.{timestamp}.backup"

        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(str(path), str(backup_path))
            logger.debug(f"Created backup: {backup_path}")
            return str(backup_path)
        except OSError as e:
            logger.error(f"Failed to create backup: {e}")
            return None

    def atomic_write(self, file_path: str, content: str) -> bool:
        """
        Write file atomically using temp file + rename.

        Args:
            file_path: Target file path
            content: Content to write

        Returns:
            True if successful
        """
        path = Path(file_path)
        encoding = self.config.get("encoding", "utf-8")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Temp file in the target directory keeps the rename on one filesystem
            fd, temp_path = tempfile.mkstemp(
                dir=str(path.parent),
                prefix=f".{path.name}.",
                suffix=".tmp"
            )
        except OSError as e:
            logger.error(f"Failed to create temp file: {e}")
            return False

        try:
            with os.fdopen(fd, 'w', encoding=encoding, newline='') as f:
                f.write(content)
            if path.exists():
                shutil.copymode(str(path), temp_path)
            os.replace(temp_path, str(path))
            logger.debug(f"Atomic write completed: {file_path}")
            return True
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                logger.debug(f"Temp file already gone: {temp_path}")
            logger.error(f"Failed during atomic write: {e}")
            return False

    def write_file(self, file_path: str, content: str, line_ending: str = "\n") -> bool:
        """
        Back up (when enabled) and atomically write one file.

        Args:
            file_path: Target file path
            content: LF-normalized content
            line_ending: Line ending to restore on disk

        Returns:
            True if successful
        """
        if self.config.get("backup_enabled") and Path(file_path).exists():
            if not self.create_backup(file_path):
                logger.error("Backup creation failed, aborting write")
                return False
        return self.atomic_write(file_path, self.normalize_line_endings(content, line_ending))

    @staticmethod
    def detect_line_ending(content: str) -> str:
        """
        Detect line ending style (LF vs CRLF).

        Returns:
            '\r\n' for CRLF, '\n' for LF
        """
        if '\r\n' in content:
            return '\r\n'
        return '\n'

    @staticmethod
    def normalize_line_endings(content: str, line_ending: str) -> str:
        """Convert content to the given line ending style."""
        content = content.replace('\r\n', '\n')
        if line_ending == '\r\n':
            content = content.replace('\n', '\r\n')
        return content

    def generate_unified_diff(
        self,
        file_path: str,
        original_content: Optional[str],
        modified_content: Optional[str],
    ) -> str:
        """
        Generate unified diff between original and modified content.

        Args:
            file_path: Workspace-relative path (for diff header)
            original_content: Original file content, None for a new file
            modified_content: Modified file content, None for a removed file

        Returns:
            Unified diff string (empty when the contents match)
        """
        fromfile = f"a/{file_path}" if original_content is not None else "/dev/null"
        tofile = f"b/{file_path}" if modified_content is not None else "/dev/null"

        diff_lines = difflib.unified_diff(
            _diff_lines(original_content or ""),
            _diff_lines(modified_content or ""),
            fromfile=fromfile,
            tofile=tofile,
        )
        return "".join(diff_lines)


def _diff_lines(content: str) -> List[str]:
    lines = content.splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n\\ No newline at end of file\n"
    return lines
