"""
asciidraw Session State Management

Manages diagram state persistence including load/save/undo functionality.
Undo is snapshot based: every committed edit pushes a full copy of the
committed rows, and edits that change nothing are dropped from history.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..buffer.grid import Grid, Rows
from ..buffer.textfile import read_rows, write_text_atomic, format_rows
from ..config import EditorConfig

logger = logging.getLogger(__name__)


@dataclass
class GridSnapshot:
    """Committed rows captured for undo/redo."""
    rows: Rows
    description: str = ""


def _is_blank(row: List[str]) -> bool:
    return all(c.isspace() for c in row)


def _leading_whitespace(row: List[str]) -> int:
    count = 0
    for c in row:
        if not c.isspace():
            break
        count += 1
    return count


def strip_trailing_whitespace(rows: Rows) -> Rows:
    """Copy of ``rows`` with trailing whitespace removed from every row."""
    stripped = []
    for row in rows:
        end = len(row)
        while end > 0 and row[end - 1].isspace():
            end -= 1
        stripped.append(row[:end])
    return stripped


def strip_margins(rows: Rows) -> Rows:
    """Copy of ``rows`` without blank leading/trailing rows and without the
    whitespace columns shared by every non-blank row on the left."""
    start = 0
    while start < len(rows) and _is_blank(rows[start]):
        start += 1
    end = len(rows)
    while end > start and _is_blank(rows[end - 1]):
        end -= 1

    body = rows[start:end]
    margin = min((_leading_whitespace(row) for row in body if not _is_blank(row)), default=0)
    return [row[margin:] for row in body]


class Session:
    """
    Manages the lifecycle of a diagram editing session.

    Provides:
    - Load/save operations
    - Undo/redo stacks
    - Dirty state tracking against the last saved content
    """

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or EditorConfig()
        self.grid = Grid()
        self.source_path: Optional[Path] = None
        self._undo_stack: List[GridSnapshot] = []
        self._redo_stack: List[GridSnapshot] = []
        self._saved: Rows = []
        self._dirty: bool = False

    @property
    def is_dirty(self) -> bool:
        """Check if the diagram has unsaved changes."""
        return self._dirty

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def new(self) -> "Session":
        """Start an empty, unnamed diagram."""
        self.grid = Grid()
        self.source_path = None
        self._reset_history()
        return self

    def load(self, path: Union[str, Path]) -> "Session":
        """
        Load a diagram from a text file.

        The file is read completely before any state changes, so a failed
        load leaves the current diagram untouched.

        Args:
            path: Text file to load

        Returns:
            Self for chaining

        Raises:
            OSError: If the file can't be read
        """
        path = Path(path)
        rows = read_rows(path)

        self.grid = Grid(rows=rows)
        self.source_path = path
        self._reset_history()

        logger.info(f"Loaded {path} ({len(rows)} rows)")
        return self

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save the diagram to a text file.

        Whitespace cleanup configured by ``keep_trailing_ws`` and
        ``strip_margin_ws`` is applied to the written text and, once the
        write succeeded, to the live diagram as an undoable edit.

        Args:
            path: Output path. If None, uses the source path.

        Returns:
            Path where the diagram was saved

        Raises:
            ValueError: If no path is given and the session has no source path
            OSError: If writing fails; the diagram is left unchanged
        """
        if path is None:
            if self.source_path is None:
                raise ValueError("No path specified and no source path")
            path = self.source_path
        path = Path(path)

        rows = self.grid.snapshot()
        if not self.config.keep_trailing_ws:
            rows = strip_trailing_whitespace(rows)
        if self.config.strip_margin_ws:
            rows = strip_margins(rows)

        write_text_atomic(path, format_rows(rows))

        if rows != self.grid.rows:
            self.with_snapshot(lambda grid: grid.restore(rows), "Whitespace cleanup")

        self.source_path = path
        self._saved = self.grid.snapshot()
        self._dirty = False

        logger.info(f"Saved {path} ({len(rows)} rows)")
        return path

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def snapshot(self, description: str = "") -> GridSnapshot:
        """Capture the committed rows of the live grid."""
        return GridSnapshot(rows=self.grid.snapshot(), description=description)

    def with_snapshot(self, mutate: Callable[[Grid], Any], description: str = "") -> bool:
        """
        Run ``mutate`` against the live grid as one undoable edit.

        A snapshot is pushed and the overlay discarded before ``mutate``
        runs. If the committed rows are unchanged afterwards the snapshot is
        popped again, so no-op edits never reach the history.

        Returns:
            True if the grid changed
        """
        snapshot = self.snapshot(description)
        self._undo_stack.append(snapshot)
        self.grid.discard_overlay()

        mutate(self.grid)

        if self.grid.rows == snapshot.rows:
            self._undo_stack.pop()
            logger.debug(f"Dropped no-op edit: {description or 'unnamed'}")
            return False

        self._dirty = True
        self._redo_stack.clear()
        self._enforce_undo_limit()
        logger.debug(f"Committed edit: {description or 'unnamed'}")
        return True

    def undo(self) -> bool:
        """
        Undo last change.

        Returns:
            True if undo was performed, False if nothing to undo
        """
        if not self._undo_stack:
            return False

        snapshot = self._undo_stack.pop()
        self._redo_stack.append(self.snapshot(snapshot.description))
        self._swap_in(snapshot)
        return True

    def redo(self) -> bool:
        """
        Redo last undone change.

        Returns:
            True if redo was performed, False if nothing to redo
        """
        if not self._redo_stack:
            return False

        snapshot = self._redo_stack.pop()
        self._undo_stack.append(self.snapshot(snapshot.description))
        self._swap_in(snapshot)
        return True

    # -------------------------------------------------------------------------
    # Whitespace maintenance
    # -------------------------------------------------------------------------

    def trim_margins(self) -> bool:
        """Strip blank outer rows and the shared left whitespace margin."""
        return self.with_snapshot(
            lambda grid: grid.restore(strip_margins(grid.rows)), "Trim margins"
        )

    def trim_trailing_whitespace(self) -> bool:
        """Strip trailing whitespace from every row."""
        return self.with_snapshot(
            lambda grid: grid.restore(strip_trailing_whitespace(grid.rows)),
            "Trim trailing whitespace",
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get session statistics."""
        bounds = self.grid.bounds()
        return {
            "source": str(self.source_path) if self.source_path else None,
            "dirty": self.is_dirty,
            "undo_available": self.can_undo,
            "redo_available": self.can_redo,
            "undo_depth": len(self._undo_stack),
            "redo_depth": len(self._redo_stack),
            "width": bounds.width,
            "height": bounds.height,
        }

    def _swap_in(self, snapshot: GridSnapshot):
        self.grid.restore(snapshot.rows)
        self._dirty = self.grid.rows != self._saved

    def _reset_history(self):
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._saved = self.grid.snapshot()
        self._dirty = False

    def _enforce_undo_limit(self):
        limit = self.config.undo_limit
        if limit is None:
            return
        while len(self._undo_stack) > max(limit, 0):
            self._undo_stack.pop(0)
