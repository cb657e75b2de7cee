"""
rfscript Path Configuration

Centralized path management for rfscript data files.
All paths are relative to the workspace root being refactored.

Directory Structure:
.rfscript/
├── backups/             # Pre-write backups (opt-in)
└── logs/                # Log files (opt-in)
"""

from pathlib import Path
from typing import Optional


class RfScriptPaths:
    """
    Centralized path configuration for rfscript.

    All paths are lazily resolved relative to project_root.
    Default project_root is current working directory.
    """

    # Directory name for all rfscript data
    RFSCRIPT_DIR = ".rfscript"

    # Subdirectory names
    BACKUPS_DIR = "backups"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize paths configuration.

        Args:
            project_root: Root directory for the workspace. Defaults to CWD.
        """
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return Path(self._project_root)

    @property
    def rfscript_dir(self) -> Path:
        """Get the .rfscript directory path."""
        return self.project_root / self.RFSCRIPT_DIR

    @property
    def backups_dir(self) -> Path:
        """Get the backups directory path."""
        return self.rfscript_dir / self.BACKUPS_DIR

    @property
    def logs_dir(self) -> Path:
        """Get the logs directory path."""
        return self.rfscript_dir / self.LOGS_DIR

    def ensure_dirs(self) -> None:
        """Create all necessary directories if they don't exist."""
        self.rfscript_dir.mkdir(parents=True, exist_ok=True)
        self.backups_dir.mkdir(exist_ok=True)
        self.logs_dir.mkdir(exist_ok=True)


def get_paths(project_root: Optional[Path] = None) -> RfScriptPaths:
    """
    Get the paths configuration.

    Args:
        project_root: Optional project root override

    Returns:
        RfScriptPaths instance
    """
    return RfScriptPaths(project_root)
