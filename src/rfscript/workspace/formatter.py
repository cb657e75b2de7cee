"""
CodeFormatter: source normalization and block reindentation.

Normalization is whitespace-only: trailing whitespace, runs of blank
lines and the final newline. String literal contents are never touched.
"""

import ast
import shutil
import subprocess
from typing import Optional, Set, Tuple

from rfscript.logging_config import logger
from rfscript.config import FORMATTERS, INDENT_DETECTION, RUN_CONFIG


class CodeFormatter:
    """
    Handle code indentation and formatting.

    Features:
    - Detect indent style (spaces vs tabs) of a source text
    - Reindent code blocks to target level
    - Normalize whitespace without changing semantics
    - Optionally shell out to black for full formatting
    """

    def __init__(self, config: Optional[dict] = None):
        """
        Initialize formatter with optional config.

        Args:
            config: Optional config overrides (merges with RUN_CONFIG)
        """
        self.config = {**RUN_CONFIG, **(config or {})}

    def format_code_block(
        self,
        code: str,
        target_indent_level: int,
        indent_unit: Optional[str] = None
    ) -> str:
        """
        Reindent a code block to match target indentation level.

        Args:
            code: Code block to reindent
            target_indent_level: Target indentation level (number of units)
            indent_unit: Indent unit of the destination file (default 4 spaces)

        Returns:
            Reindented code
        """
        indent_unit = indent_unit or INDENT_DETECTION["default_indent"]
        lines = code.split('\n')

        # Find minimum indentation in code block (base level)
        min_indent = None
        for line in lines:
            if line.strip():
                indent = len(self._get_indent(line))
                min_indent = indent if min_indent is None else min(min_indent, indent)
        if min_indent is None:
            min_indent = 0

        reindented_lines = []
        for line in lines:
            if not line.strip():
                reindented_lines.append("")
            else:
                indent = self._get_indent(line)
                relative_indent_level = (len(indent) - min_indent) // len(indent_unit)
                new_indent = indent_unit * (target_indent_level + relative_indent_level)
                reindented_lines.append(new_indent + line.lstrip())

        return '\n'.join(reindented_lines)

    def detect_indentation(self, text: str) -> str:
        """
        Detect indentation style from source text.

        Returns:
            Indent unit string (e.g., "    " or "\t")
        """
        sample_lines = text.split('\n')[:INDENT_DETECTION["max_sample_lines"]]

        tab_count = 0
        space_count = 0
        space_widths = {}

        for line in sample_lines:
            if not line.strip():
                continue
            indent = self._get_indent(line)
            if '\t' in indent:
                tab_count += 1
            elif len(indent) > 0:
                space_count += 1
                width = len(indent)
                space_widths[width] = space_widths.get(width, 0) + 1

        if tab_count > space_count:
            return "\t"
        if space_widths:
            smallest = min(space_widths)
            if smallest >= 4:
                return "    "
            if smallest >= 2:
                return "  "
        return INDENT_DETECTION["default_indent"]

    def normalize(self, text: str) -> str:
        """
        Normalize a module's whitespace, then run the external formatter if enabled.

        Args:
            text: Module source (LF line endings)

        Returns:
            Normalized source
        """
        if not self.config.get("normalize_enabled", True):
            return text
        normalized = normalize_whitespace(text, self.config.get("max_blank_lines", 2))
        if self.config.get("external_formatter_enabled"):
            formatted, error = self.format_text(normalized)
            if error:
                logger.warning(f"External formatter skipped: {error}")
            else:
                normalized = formatted
        return normalized

    def format_text(self, text: str, language: str = "python") -> Tuple[str, Optional[str]]:
        """
        Format source text with the configured external formatter (black).

        Args:
            text: Source text
            language: Formatter key in FORMATTERS

        Returns:
            (formatted_text, error_message)
        """
        formatter_config = FORMATTERS.get(language)
        if not formatter_config:
            return text, None

        command = formatter_config["command"]
        if not shutil.which(command):
            logger.debug(f"Formatter '{command}' not found in PATH, skipping auto-format")
            return text, None

        timeout = self.config.get("external_formatter_timeout", 30)
        try:
            result = subprocess.run(
                [command] + formatter_config["args"],
                input=text,
                capture_output=True,
                text=True,
                timeout=timeout
            )
        except subprocess.TimeoutExpired:
            return text, f"Formatter timeout after {timeout}s"
        except OSError as e:
            return text, f"Formatter error: {e}"

        if result.returncode != 0:
            return text, result.stderr or result.stdout
        return result.stdout, None

    def _get_indent(self, line: str) -> str:
        """Extract indentation from a line."""
        return line[:len(line) - len(line.lstrip())]


def _string_lines(text: str) -> Tuple[Set[int], Set[int]]:
    """
    Lines owned by multi-line string literals.

    Returns:
        (lines whose trailing whitespace is inside a string,
         lines that lie entirely inside a string)
    """
    tree = ast.parse(text)
    keep_trailing: Set[int] = set()
    inside: Set[int] = set()
    for node in ast.walk(tree):
        if isinstance(node, (ast.Constant, ast.JoinedStr)):
            if isinstance(node, ast.Constant) and not isinstance(node.value, (str, bytes)):
                continue
            end = node.end_lineno or node.lineno
            if end > node.lineno:
                keep_trailing.update(range(node.lineno, end))
                inside.update(range(node.lineno + 1, end + 1))
    return keep_trailing, inside


def normalize_whitespace(text: str, max_blank_lines: int = 2) -> str:
    """
    Strip trailing whitespace and leading blank lines, collapse blank-line
    runs and end with one newline.

    Text that does not parse is only given a final newline, since string
    boundaries are unknown.
    """
    if not text.strip():
        return ""
    try:
        keep_trailing, inside = _string_lines(text)
    except (SyntaxError, ValueError):
        return text if text.endswith("\n") else text + "\n"

    out = []
    blank_run = 0
    for lineno, line in enumerate(text.split("\n"), 1):
        if lineno not in keep_trailing:
            line = line.rstrip(" \t")
        if line == "" and lineno not in inside:
            blank_run += 1
            if blank_run > max_blank_lines:
                continue
        else:
            blank_run = 0
        out.append(line)
    return "\n".join(out).strip("\n") + "\n"
