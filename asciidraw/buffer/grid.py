"""
Character Grid

The authoritative diagram state: committed rows of characters plus a
pending-edit overlay and an optional cursor. Drawing operations only ever
stage cells into the overlay; the overlay is either flushed into the rows
(commit) or discarded (preview).
"""

from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from .geometry import Pos, Rect, Size
from .glyphs import SPACE, is_blank, may_replace

Rows = List[List[str]]


class CellKind(Enum):
    """Render tag attached to cells yielded by ``Grid.iter_viewport``."""
    CLEAN = "clean"        # Committed content
    MODIFIED = "modified"  # Pending overlay edit
    CURSOR = "cursor"      # Text-entry cursor


@dataclass(frozen=True)
class Cell:
    """A glyph placed at a grid position."""
    pos: Pos
    glyph: str


@dataclass(frozen=True)
class TaggedCell:
    """A cell as seen by the rendering layer."""
    kind: CellKind
    pos: Pos
    glyph: str


@dataclass
class Grid:
    """Resizable 2-D store of characters with an edit overlay.

    Rows may have different lengths. Any position outside the stored rows
    reads as a space.
    """
    rows: Rows = field(default_factory=list)
    overlay: List[Cell] = field(default_factory=list)
    cursor: Optional[Pos] = None

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Grid":
        """Build a grid with one row per line."""
        return cls(rows=[list(line) for line in lines])

    @classmethod
    def from_text(cls, text: str) -> "Grid":
        """Build a grid from newline separated text."""
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return cls.from_lines(line[:-1] if line.endswith("\r") else line for line in lines)

    def __eq__(self, other):
        # Overlay and cursor are interaction state, not document state
        if not isinstance(other, Grid):
            return NotImplemented
        return self.rows == other.rows

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, pos: Pos) -> Optional[str]:
        """Get the committed glyph at ``pos``, if it exists.

        Does not consider any pending edits.
        """
        if pos.y >= len(self.rows):
            return None
        row = self.rows[pos.y]
        if pos.x >= len(row):
            return None
        return row[pos.x]

    def is_visible(self, pos: Pos) -> bool:
        """Returns True iff the committed cell at ``pos`` exists and is not
        whitespace.

        Does not consider any pending edits.
        """
        glyph = self.get(pos)
        return glyph is not None and not is_blank(glyph)

    def glyphs_at(self, pos: Pos) -> List[str]:
        """All glyphs currently claiming ``pos``: committed first, then staged."""
        glyphs = []
        committed = self.get(pos)
        if committed is not None:
            glyphs.append(committed)
        glyphs.extend(cell.glyph for cell in self.overlay if cell.pos == pos)
        return glyphs

    def peek(self, pos: Pos) -> str:
        """The glyph at ``pos`` as it would read after a flush."""
        for cell in reversed(self.overlay):
            if cell.pos == pos:
                return cell.glyph
        committed = self.get(pos)
        return SPACE if committed is None else committed

    def bounds(self) -> Size:
        """Smallest size that shows every committed cell, staged edit and
        the cursor."""
        width = max((len(row) for row in self.rows), default=0)
        height = len(self.rows)

        for cell in self.overlay:
            width = max(width, cell.pos.x + 1)
            height = max(height, cell.pos.y + 1)

        if self.cursor is not None:
            width = max(width, self.cursor.x + 1)
            height = max(height, self.cursor.y + 1)

        return Size(width, height)

    def iter_viewport(self, offset: Pos, size: Size) -> Iterator[TaggedCell]:
        """Yield the cells inside a viewport rectangle for rendering.

        Committed cells come first, then overlay cells, then the cursor, so
        a renderer painting them in order lets pending edits and the cursor
        dominate committed content.
        """
        if size.width <= 0 or size.height <= 0:
            return
        area = Rect(
            left=offset.x,
            top=offset.y,
            right=offset.x + size.width - 1,
            bottom=offset.y + size.height - 1,
        )

        for y in range(area.top, min(area.bottom + 1, len(self.rows))):
            row = self.rows[y]
            for x in range(area.left, min(area.right + 1, len(row))):
                yield TaggedCell(CellKind.CLEAN, Pos(x, y), row[x])

        for cell in self.overlay:
            if area.contains(cell.pos):
                yield TaggedCell(CellKind.MODIFIED, cell.pos, cell.glyph)

        if self.cursor is not None and area.contains(self.cursor):
            yield TaggedCell(CellKind.CURSOR, self.cursor, self.peek(self.cursor))

    # -------------------------------------------------------------------------
    # Overlay
    # -------------------------------------------------------------------------

    def stage(self, force: bool, pos: Pos, glyph: str):
        """Stage ``glyph`` at ``pos`` in the overlay.

        Unless ``force`` is set, the write is dropped when a glyph already at
        ``pos`` (committed or staged) outranks it.
        """
        if force or all(may_replace(glyph, existing) for existing in self.glyphs_at(pos)):
            self.overlay.append(Cell(pos, glyph))

    def flush(self):
        """Flush pending edits into the rows, allocating as necessary."""
        for cell in self.overlay:
            x, y = cell.pos.x, cell.pos.y
            while len(self.rows) <= y:
                self.rows.append([])
            row = self.rows[y]
            if len(row) <= x:
                row.extend(SPACE * (x + 1 - len(row)))
            row[x] = cell.glyph
        self.overlay.clear()

    def discard_overlay(self):
        """Discard any pending edits."""
        self.overlay.clear()

    def set_cursor(self, pos: Pos):
        self.cursor = pos

    def clear_cursor(self):
        self.cursor = None

    # -------------------------------------------------------------------------
    # Document state
    # -------------------------------------------------------------------------

    def snapshot(self) -> Rows:
        """Deep copy of the committed rows."""
        return deepcopy(self.rows)

    def restore(self, rows: Rows):
        """Replace the committed rows wholesale, dropping pending edits."""
        self.rows = rows
        self.overlay.clear()

    def lines(self) -> List[str]:
        return ["".join(row) for row in self.rows]

    def render(self) -> str:
        """Committed content as text, one line per row."""
        return "".join(line + "\n" for line in self.lines())
