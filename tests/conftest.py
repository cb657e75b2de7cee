"""
Pytest configuration for the rfscript test suite.

This conftest.py provides:
- Quiet logging (suppresses console output)
- Temporary workspace fixtures with sample modules
- Helpers to build sessions with in-memory output sinks
"""

import io
import os
import shutil
import tempfile
from pathlib import Path

import pytest

from rfscript.logging_config import setup_logging
from rfscript.workspace import Session, Workspace


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Keep console logging quiet for the whole run."""
    os.environ.setdefault("RFSCRIPT_QUIET", "1")


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """Suppress console logs for clean test output."""
    setup_logging(level="DEBUG", suppress_console=True, force=True)


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="rfscript_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


SAMPLE = '''\
"""Sample module."""


def hello():
    """Say hello."""
    return "hello"


def world():
    """Say world."""
    return "world"


class Greeter:
    """A greeting class."""

    def greet(self, name):
        """Greet someone."""
        return f"Hello, {name}!"

    def twice(self, name):
        return self.greet(name) * 2
'''

UTILS = '''\
from sample import hello


def add(a, b):
    """Add two numbers."""
    return a + b


def shout():
    return hello().upper()
'''


@pytest.fixture
def temp_project(temp_dir):
    """
    Create a temporary project directory with sample Python files.

    Returns:
        Path to the temp directory containing sample.py and utils.py.
    """
    (temp_dir / "sample.py").write_text(SAMPLE)
    (temp_dir / "utils.py").write_text(UTILS)
    yield temp_dir


@pytest.fixture
def session():
    """Session with in-memory stdout/stderr."""
    return Session(stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def diff_session():
    """Diff-mode session with in-memory stdout/stderr."""
    return Session(show_diff=True, stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def workspace(temp_project, session):
    """Workspace over temp_project, writing to in-memory sinks."""
    return Workspace(temp_project, session=session)


@pytest.fixture
def read_tree():
    """Return a function mapping every .py file under a root to its text."""
    def _read(root: Path) -> dict:
        return {
            p.relative_to(root).as_posix(): p.read_text()
            for p in sorted(root.rglob("*.py"))
        }
    return _read
