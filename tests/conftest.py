"""
Shared test fixtures for asciidraw tests.

Provides reusable grids, diagram files and editor fixtures for testing the
buffer, drawing engine, session history and CLI.
"""

import pytest
from pathlib import Path

from asciidraw.api.editor import Editor
from asciidraw.api.session import Session
from asciidraw.buffer.grid import Grid
from asciidraw.config import CONFIG_ENV_VAR, EditorConfig


BOX_LINES = [
    "+--+",
    "|  |",
    "+--+",
]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config lookup at a file that doesn't exist, so a user's own
    config never leaks into tests."""
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "no-such-config.yaml"))


@pytest.fixture
def empty_grid() -> Grid:
    """A grid with no rows."""
    return Grid()


@pytest.fixture
def box_grid() -> Grid:
    """A grid holding a committed 4x3 box at the origin."""
    return Grid.from_lines(BOX_LINES)


@pytest.fixture
def wall_grid() -> Grid:
    """A single visible cell at (2, 0) between two route endpoints."""
    return Grid.from_lines(["  #"])


@pytest.fixture
def session() -> Session:
    """A fresh session with default configuration."""
    return Session()


@pytest.fixture
def editor() -> Editor:
    """An editor on an empty, unnamed diagram."""
    return Editor(config=EditorConfig())


@pytest.fixture
def diagram_file(tmp_path) -> Path:
    """A small diagram on disk with CRLF line endings."""
    path = tmp_path / "diagram.txt"
    path.write_bytes(b"+--+\r\n|  |\r\n+--+\r\n")
    return path
