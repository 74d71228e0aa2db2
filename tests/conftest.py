"""
Shared test fixtures and configuration.
"""

import sys
from pathlib import Path

import pytest


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """A temporary working directory the run operates in."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def emit_writing():
    """Build an emit command that writes *content* to each given file."""

    def _build(content: str, *files: str) -> list[str]:
        script = (
            "import sys\n"
            "for name in sys.argv[2:]:\n"
            "    open(name, 'w', newline='').write(sys.argv[1])\n"
        )
        return [sys.executable, "-c", script, content, *files]

    return _build


@pytest.fixture
def emit_exiting():
    """Build an emit command that exits with *code* without writing."""

    def _build(code: int) -> list[str]:
        return [sys.executable, "-c", f"import sys; sys.exit({code})"]

    return _build
