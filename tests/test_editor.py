"""
Tests for EditBuffer and CodeEditor file operations.
"""

import pytest

from rfscript.exceptions import EditConflictError
from rfscript.workspace.editor import CodeEditor, EditBuffer


class TestEditBuffer:
    """Test queued character-range edits."""

    def test_no_edits_returns_base(self):
        buf = EditBuffer("a.py", "x = 1\n")
        assert not buf.dirty
        assert buf.text() == "x = 1\n"

    def test_edits_use_base_offsets(self):
        """Later edits are positioned against the base text, not the edited text."""
        buf = EditBuffer("a.py", "alpha beta gamma")
        buf.replace(0, 5, "A")
        buf.replace(11, 16, "GAMMA")
        buf.delete(5, 6)
        assert buf.text() == "Abeta GAMMA"

    def test_overlap_rejected(self):
        buf = EditBuffer("a.py", "0123456789")
        buf.replace(2, 6, "x")
        with pytest.raises(EditConflictError) as exc_info:
            buf.replace(5, 8, "y")
        assert exc_info.value.path == "a.py"
        assert (exc_info.value.start, exc_info.value.end) == (5, 8)

    def test_adjacent_edits_allowed(self):
        buf = EditBuffer("a.py", "0123456789")
        buf.replace(2, 4, "a")
        buf.replace(4, 6, "b")
        assert buf.text() == "01ab6789"

    def test_out_of_bounds_rejected(self):
        buf = EditBuffer("a.py", "abc")
        with pytest.raises(EditConflictError):
            buf.replace(2, 10, "x")
        with pytest.raises(EditConflictError):
            buf.replace(2, 1, "x")

    def test_insertions_at_same_point_keep_order(self):
        buf = EditBuffer("a.py", "ab")
        buf.insert(1, "1")
        buf.insert(1, "2")
        assert buf.text() == "a12b"

    def test_insertion_before_replacement_at_same_start(self):
        buf = EditBuffer("a.py", "abc")
        buf.replace(1, 2, "X")
        buf.insert(1, "+")
        assert buf.text() == "a+Xc"

    def test_reset(self):
        buf = EditBuffer("a.py", "abc")
        buf.insert(0, "z")
        buf.reset("fresh")
        assert not buf.dirty
        assert buf.text() == "fresh"


class TestAtomicWrite:
    """Test atomic file writes."""

    def test_atomic_write_creates_file(self, temp_dir):
        editor = CodeEditor()
        target = temp_dir / "new" / "mod.py"
        assert editor.atomic_write(str(target), "x = 1\n")
        assert target.read_text() == "x = 1\n"
        assert [p.name for p in target.parent.iterdir()] == ["mod.py"]

    def test_atomic_write_replaces_content(self, temp_dir):
        editor = CodeEditor()
        target = temp_dir / "mod.py"
        target.write_text("old\n")
        assert editor.atomic_write(str(target), "new\n")
        assert target.read_text() == "new\n"

    def test_write_file_restores_crlf(self, temp_dir):
        editor = CodeEditor()
        target = temp_dir / "mod.py"
        assert editor.write_file(str(target), "a = 1\nb = 2\n", "\r\n")
        assert target.read_bytes() == b"a = 1\r\nb = 2\r\n"


class TestBackup:
    """Test backup creation."""

    def test_backup_created(self, temp_dir):
        backups = temp_dir / "backups"
        editor = CodeEditor({"backup_dir": str(backups), "backup_enabled": True})
        target = temp_dir / "mod.py"
        target.write_text("original\n")

        assert editor.write_file(str(target), "changed\n")
        saved = list(backups.iterdir())
        assert len(saved) == 1
        assert saved[0].name.startswith("mod.py.")
        assert saved[0].read_text() == "original\n"
        assert target.read_text() == "changed\n"

    def test_backup_missing_file(self, temp_dir):
        editor = CodeEditor({"backup_dir": str(temp_dir / "backups")})
        assert editor.create_backup(str(temp_dir / "missing.py")) is None


class TestLineEndings:
    """Test line ending detection and conversion."""

    def test_detect(self):
        assert CodeEditor.detect_line_ending("a\r\nb\r\n") == "\r\n"
        assert CodeEditor.detect_line_ending("a\nb\n") == "\n"

    def test_normalize(self):
        assert CodeEditor.normalize_line_endings("a\r\nb\n", "\n") == "a\nb\n"
        assert CodeEditor.normalize_line_endings("a\nb\r\n", "\r\n") == "a\r\nb\r\n"


class TestUnifiedDiff:
    """Test diff rendering."""

    def test_modified_file(self):
        diff = CodeEditor().generate_unified_diff("m.py", "a = 1\n", "a = 2\n")
        assert diff.startswith("--- a/m.py\n+++ b/m.py\n")
        assert "-a = 1\n" in diff
        assert "+a = 2\n" in diff

    def test_new_file(self):
        diff = CodeEditor().generate_unified_diff("new.py", None, "x = 1\n")
        assert diff.startswith("--- /dev/null\n+++ b/new.py\n")
        assert "+x = 1\n" in diff

    def test_no_changes(self):
        assert CodeEditor().generate_unified_diff("m.py", "same\n", "same\n") == ""

    def test_missing_final_newline_marked(self):
        diff = CodeEditor().generate_unified_diff("m.py", "a = 1\n", "a = 1\nb = 2")
        assert "+b = 2\n\\ No newline at end of file\n" in diff
