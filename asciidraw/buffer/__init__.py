"""Diagram buffer: grid storage, glyph precedence and text persistence."""

from .geometry import Pos, Size, Rect
from .glyphs import precedence, may_replace
from .grid import Grid, Cell, CellKind, TaggedCell
from .textfile import read_rows, load_grid, save_grid, format_rows

__all__ = [
    "Pos",
    "Size",
    "Rect",
    "precedence",
    "may_replace",
    "Grid",
    "Cell",
    "CellKind",
    "TaggedCell",
    "read_rows",
    "load_grid",
    "save_grid",
    "format_rows",
]
