"""
Plain Text Persistence

Diagrams are stored as UTF-8 text, one grid row per line, with no header or
metadata. Saving renders the whole document before touching the target file
and replaces it atomically, so a failed save never leaves a partial file.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .grid import Grid, Rows

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


def read_rows(path: Union[str, Path]) -> Rows:
    """
    Read a text file into grid rows.

    Args:
        path: File to read

    Returns:
        One list of characters per line, line endings removed

    Raises:
        OSError: If the file can't be opened or read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    path = Path(path)
    rows: Rows = []

    with open(path, "r", encoding=ENCODING, newline="") as f:
        for line in f:
            if line.endswith("\n"):
                line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
            rows.append(list(line))

    logger.debug(f"Read {len(rows)} rows from {path}")
    return rows


def format_rows(rows: Rows) -> str:
    """Render rows as text, each row terminated by a newline."""
    return "".join("".join(row) + "\n" for row in rows)


def write_text_atomic(path: Union[str, Path], content: str):
    """
    Write ``content`` to ``path`` through a synced temporary file.

    The temporary file lives next to the target so the final rename stays on
    one filesystem. On failure the target is left as it was.
    """
    path = Path(path)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding=ENCODING, newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(tmp_name, path.stat().st_mode & 0o777)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def load_grid(path: Union[str, Path]) -> Grid:
    """Load a grid from a text file."""
    return Grid(rows=read_rows(path))


def save_grid(grid: Grid, path: Union[str, Path]) -> int:
    """
    Save the committed content of ``grid`` to ``path``.

    Returns:
        Number of rows written
    """
    write_text_atomic(path, format_rows(grid.rows))
    logger.debug(f"Wrote {len(grid.rows)} rows to {path}")
    return len(grid.rows)

