"""
SourceFile: one parsed module plus offset helpers.

ast positions are (1-based line, UTF-8 byte column); edits work on
character offsets into the text, so every position is converted here.
"""

import ast
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from rfscript.exceptions import HardLoadError

_DEF_NAME = re.compile(r"(?:async\s+)?(?:def|class)\s+([A-Za-z_]\w*)")


@dataclass
class SourceFile:
    """A module's text and its parse result."""
    path: str
    text: str
    tree: Optional[ast.Module] = None
    syntax_error: Optional[SyntaxError] = None
    line_starts: List[int] = field(default_factory=list, repr=False)

    @classmethod
    def parse(cls, path: str, text: str) -> "SourceFile":
        """Parse text; a syntax error is recorded rather than raised."""
        if "\x00" in text:
            raise HardLoadError(path, "source contains null bytes")
        source = cls(path=path, text=text)
        source.line_starts = _line_starts(text)
        try:
            source.tree = ast.parse(text, filename=path)
        except SyntaxError as e:
            source.syntax_error = e
        except ValueError as e:
            raise HardLoadError(path, str(e)) from e
        return source

    @property
    def module_name(self) -> str:
        return module_name_for(self.path)

    @property
    def is_package(self) -> bool:
        return self.path.endswith("__init__.py")

    def line(self, lineno: int) -> str:
        """Text of a 1-based line without its newline."""
        start, end = self.line_span(lineno, lineno)
        return self.text[start:end].rstrip("\r\n")

    def offset(self, lineno: int, col_bytes: int = 0) -> int:
        """Character offset of an ast (line, byte column) position."""
        if lineno - 1 >= len(self.line_starts):
            return len(self.text)
        start = self.line_starts[lineno - 1]
        if col_bytes == 0:
            return start
        line_text = self.line(lineno)
        prefix = line_text.encode("utf-8")[:col_bytes].decode("utf-8", errors="ignore")
        return start + len(prefix)

    def line_span(self, first: int, last: int) -> Tuple[int, int]:
        """Character range covering whole lines first..last, newline included."""
        start = self.line_starts[first - 1] if first - 1 < len(self.line_starts) else len(self.text)
        end = self.line_starts[last] if last < len(self.line_starts) else len(self.text)
        return start, end

    def node_span(self, node: ast.AST) -> Tuple[int, int]:
        """Character range of an expression or statement node."""
        start = self.offset(node.lineno, node.col_offset)
        end = self.offset(node.end_lineno or node.lineno, node.end_col_offset or 0)
        return start, end

    def def_name_span(self, node: ast.AST) -> Optional[Tuple[int, int]]:
        """Character range of the name token in a def/class statement."""
        start = self.offset(node.lineno, node.col_offset)
        m = _DEF_NAME.match(self.text, start)
        if not m or m.group(1) != node.name:
            return None
        return m.start(1), m.end(1)


def _line_starts(text: str) -> List[int]:
    starts = [0]
    for i, c in enumerate(text):
        if c == "\n":
            starts.append(i + 1)
    # A final newline does not begin another line
    if len(starts) > 1 and starts[-1] == len(text):
        starts.pop()
    return starts


def module_name_for(path: str) -> str:
    """Dotted module name for a workspace-relative path ("pkg/__init__.py" -> "pkg")."""
    parts = path.replace("\\", "/").split("/")
    if parts[-1] == "__init__.py":
        parts = parts[:-1]
    else:
        parts[-1] = parts[-1][:-3] if parts[-1].endswith(".py") else parts[-1]
    return ".".join(p for p in parts if p)


def decl_first_line(node: ast.AST) -> int:
    """First line of a statement, decorators included."""
    decorators = getattr(node, "decorator_list", None) or []
    return min([node.lineno] + [d.lineno for d in decorators])
