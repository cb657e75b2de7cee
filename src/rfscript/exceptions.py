# Custom exceptions for rfscript

from typing import Iterable, List, Optional


def _format_diagnostics(diagnostics) -> str:
    return "\n".join(f"\t{d}" for d in diagnostics)


class RfScriptError(Exception):
    """Base exception for all application-specific errors."""
    code = "RFSCRIPT_ERROR"

    def __init__(self, message: str, diagnostics: Optional[Iterable] = None):
        self.message = message
        self.diagnostics: List = list(diagnostics or [])
        super().__init__(message)

    def details(self) -> str:
        """Message followed by one indented line per diagnostic."""
        if not self.diagnostics:
            return self.message
        return f"{self.message}\n{_format_diagnostics(self.diagnostics)}"


class ConfigError(RfScriptError):
    """Raised when workspace configuration overrides are invalid."""
    code = "CONFIG_ERROR"


class HardLoadError(RfScriptError):
    """Raised when the workspace cannot be loaded at all (I/O, decoding)."""
    code = "LOAD_ERROR"

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"loading {path}: {message}")


class PreexistingErrors(RfScriptError):
    """Raised when the workspace has diagnostics before any command ran."""
    code = "PREEXISTING_ERRORS"

    def __init__(self, diagnostics: Iterable):
        super().__init__("errors found before executing script", diagnostics)


class UnknownCommand(RfScriptError):
    """Raised when a script names a command that is not registered."""
    code = "UNKNOWN_COMMAND"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown command {name}")


class CommandIntroducedErrors(RfScriptError):
    """Raised when a reload finds diagnostics caused by the previous command."""
    code = "COMMAND_INTRODUCED_ERRORS"

    def __init__(self, command: str, diagnostics: Iterable):
        self.command = command
        super().__init__(f"errors found after executing: {command}", diagnostics)


class SynchronousHandlerError(RfScriptError):
    """Raised when a handler reports diagnostics while it runs."""
    code = "COMMAND_FAILED"

    def __init__(self, command: str, diagnostics: Iterable):
        self.command = command
        super().__init__(f"errors executing: {command}", diagnostics)


class FinalValidationFailed(RfScriptError):
    """Raised when the reload after the last command fails."""
    code = "FINAL_VALIDATION_FAILED"

    def __init__(self, command: str, cause: Optional[Exception] = None, diagnostics: Optional[Iterable] = None):
        self.command = command
        self.cause = cause
        if cause is not None:
            message = f"checking rewritten files: {cause}"
        else:
            message = f"checking rewritten files: errors found after executing: {command}"
        super().__init__(message, diagnostics)


class EditConflictError(RfScriptError):
    """Raised when a pending edit overlaps one already buffered for the file."""
    code = "EDIT_CONFLICT"

    def __init__(self, path: str, start: int, end: int):
        self.path = path
        self.start = start
        self.end = end
        super().__init__(f"{path}: edit [{start}:{end}] overlaps an earlier edit")


class WriteError(RfScriptError):
    """Raised when rewritten files cannot be persisted."""
    code = "WRITE_ERROR"

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"writing {path}: {message}")
