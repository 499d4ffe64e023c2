"""
Pytest configuration and fixtures.
"""

import os
import tempfile
import textwrap
from pathlib import Path
from typing import Any, Callable

import pytest

# Set test environment before hookfile.config builds its settings
os.environ["HOOKFILE_PROJECT_ROOT"] = tempfile.mkdtemp(prefix="hookfile-test-")
os.environ["HOOKFILE_LOG_LEVEL"] = "WARNING"


class CapturingSink:
    """Hook log sink that keeps every record, tagged with its level."""

    def __init__(self):
        self.records: list[tuple[str, dict[str, Any]]] = []

    def debug(self, record: dict[str, Any]) -> None:
        self.records.append(("debug", record))

    def info(self, record: dict[str, Any]) -> None:
        self.records.append(("info", record))

    def warn(self, record: dict[str, Any]) -> None:
        self.records.append(("warn", record))


@pytest.fixture
def sink() -> CapturingSink:
    return CapturingSink()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Create a fresh, empty project directory for each test."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def write_hookfile() -> Callable[[Path, str], Path]:
    """Write dedented hookfile source to ``path``."""

    def _write(path: Path, code: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(code))
        return path

    return _write
