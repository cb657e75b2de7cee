"""
Configuration for script runs.

Contains workspace scanning rules, write safety settings and formatter
configurations.
"""

from pathlib import Path
from typing import Optional

from rfscript.paths import get_paths


def get_run_config(project_root: Optional[Path] = None):
    """
    Get run configuration with dynamic paths.

    Paths are resolved at runtime against the workspace root so backups
    land in that workspace's .rfscript/ directory.
    """
    paths = get_paths(project_root)
    return {
        "source_glob": "**/*.py",
        "source_roots": ["src"],
        "exclude_dirs": [
            ".git", ".hg", ".rfscript", ".tox", ".venv", "venv",
            "__pycache__", "build", "dist", "node_modules",
        ],
        "encoding": "utf-8",
        "backup_enabled": False,
        "backup_dir": str(paths.backups_dir),
        "normalize_enabled": True,
        "max_blank_lines": 2,
        "external_formatter_enabled": False,
        "external_formatter_timeout": 30,
    }


# Defaults resolved against the current working directory
RUN_CONFIG = get_run_config()

FORMATTERS = {
    "python": {
        "command": "black",
        "args": ["--quiet", "-"],
        "extensions": [".py"],
    },
}

INDENT_DETECTION = {
    "default_indent": "    ",  # 4 spaces
    "tab_width": 4,
    "max_sample_lines": 100,   # Lines to sample for indent detection
}
