"""
Tests for CodeFormatter reindentation and whitespace normalization.
"""

from unittest.mock import patch

from rfscript.workspace.formatter import CodeFormatter, normalize_whitespace


class TestFormatCodeBlock:
    """Test block reindentation."""

    def test_reindent_to_level_one(self):
        formatter = CodeFormatter()
        code = "def f():\n    return 1"
        assert formatter.format_code_block(code, 1) == "    def f():\n        return 1"

    def test_strip_existing_indent(self):
        formatter = CodeFormatter()
        code = "        x = 1\n        if x:\n            y = 2"
        assert formatter.format_code_block(code, 0) == "x = 1\nif x:\n    y = 2"

    def test_blank_lines_emptied(self):
        formatter = CodeFormatter()
        assert formatter.format_code_block("a = 1\n   \nb = 2", 1) == "    a = 1\n\n    b = 2"

    def test_tab_unit(self):
        formatter = CodeFormatter()
        assert formatter.format_code_block("x = 1", 2, "\t") == "\t\tx = 1"


class TestDetectIndentation:
    """Test indent unit detection."""

    def test_four_spaces(self):
        assert CodeFormatter().detect_indentation("def f():\n    pass\n") == "    "

    def test_two_spaces(self):
        assert CodeFormatter().detect_indentation("def f():\n  pass\n") == "  "

    def test_tabs(self):
        assert CodeFormatter().detect_indentation("def f():\n\tpass\n\tx = 1\n") == "\t"

    def test_default(self):
        assert CodeFormatter().detect_indentation("x = 1\n") == "    "


class TestNormalizeWhitespace:
    """Test whitespace-only normalization."""

    def test_trailing_whitespace_stripped(self):
        assert normalize_whitespace("x = 1   \ny = 2\t\n") == "x = 1\ny = 2\n"

    def test_blank_runs_collapsed(self):
        assert normalize_whitespace("a = 1\n\n\n\n\nb = 2\n") == "a = 1\n\n\nb = 2\n"

    def test_max_blank_lines_configurable(self):
        assert normalize_whitespace("a = 1\n\n\n\nb = 2\n", max_blank_lines=1) == "a = 1\n\nb = 2\n"

    def test_final_newline(self):
        assert normalize_whitespace("a = 1") == "a = 1\n"
        assert normalize_whitespace("a = 1\n\n\n") == "a = 1\n"

    def test_leading_blank_lines_dropped(self):
        assert normalize_whitespace("\n\n  \ndef f():\n    pass\n") == "def f():\n    pass\n"

    def test_blank_text(self):
        assert normalize_whitespace("  \n\n") == ""

    def test_string_contents_untouched(self):
        text = 's = """line   \n\n\n\n\nend"""\n'
        assert normalize_whitespace(text) == text

    def test_unparseable_text_left_alone(self):
        text = "def broken(:   \n\n\n\n"
        assert normalize_whitespace(text) == text


class TestNormalize:
    """Test the formatter entry point used before each reload."""

    def test_disabled(self):
        formatter = CodeFormatter({"normalize_enabled": False})
        assert formatter.normalize("x = 1   ") == "x = 1   "

    def test_external_formatter_missing(self):
        formatter = CodeFormatter({"external_formatter_enabled": True})
        with patch("rfscript.workspace.formatter.shutil.which", return_value=None):
            assert formatter.normalize("x = 1  \n") == "x = 1\n"

    def test_external_formatter_output_used(self):
        formatter = CodeFormatter({"external_formatter_enabled": True})
        completed = type("Completed", (), {"returncode": 0, "stdout": "x = 1\n", "stderr": ""})()
        with patch("rfscript.workspace.formatter.shutil.which", return_value="/usr/bin/black"), \
                patch("rfscript.workspace.formatter.subprocess.run", return_value=completed) as run:
            assert formatter.normalize("x=1\n") == "x = 1\n"
        assert run.call_args[0][0] == ["black", "--quiet", "-"]

    def test_external_formatter_failure_keeps_text(self):
        formatter = CodeFormatter({"external_formatter_enabled": True})
        completed = type("Completed", (), {"returncode": 123, "stdout": "", "stderr": "cannot parse"})()
        with patch("rfscript.workspace.formatter.shutil.which", return_value="/usr/bin/black"), \
                patch("rfscript.workspace.formatter.subprocess.run", return_value=completed):
            assert formatter.normalize("x=1\n") == "x=1\n"
