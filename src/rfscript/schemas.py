from pydantic import BaseModel, Field
from typing import List, Optional


class Command(BaseModel):
    """
    One logical script line split into a command name and its argument text.
    A command may span several physical lines joined by backslash continuation.
    """
    name: str
    args: str = ""
    text: str  # Full logical line, continuation lines joined with "\n"
    lineno: int = 1  # Script line the command starts on

    @property
    def display(self) -> str:
        """First physical line, marked when the command continues further."""
        first, sep, _ = self.text.partition("\n")
        if sep:
            return first + " \\ ..."
        return first


class Diagnostic(BaseModel):
    """
    A problem found while checking a loaded snapshot (or reported by a handler).
    """
    path: str
    line: int = 0
    col: int = 0
    message: str

    def __str__(self) -> str:
        if self.line:
            return f"{self.path}:{self.line}:{self.col}: {self.message}"
        return f"{self.path}: {self.message}"


class Target(BaseModel):
    """
    The unit of work a snapshot is focused on: the workspace root and its modules.
    """
    root: str
    modules: List[str] = Field(default_factory=list)
    files: int = 0
    package: Optional[str] = None  # Top-level package name when the root is one
