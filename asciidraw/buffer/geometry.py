"""
Grid Geometry

Integer value types shared by the buffer and the drawing engine. Grid
coordinates are column/row indices and are never negative.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple


@dataclass(frozen=True)
class Pos:
    """A cell address on the character grid.

    Immutable and hashable so it can be used in sets, dict keys and
    priority queues.
    """
    x: int
    y: int

    def __post_init__(self):
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Grid positions must be non-negative, got ({self.x}, {self.y})")

    @classmethod
    def parse(cls, text: str) -> "Pos":
        """Parse an ``"x,y"`` pair, e.g. from the command line."""
        parts = text.split(",")
        if len(parts) != 2:
            raise ValueError(f"Expected X,Y but got {text!r}")
        return cls(int(parts[0].strip()), int(parts[1].strip()))

    def pair(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def offset(self, dx: int, dy: int) -> "Pos":
        """Return this position shifted by ``(dx, dy)``."""
        return Pos(self.x + dx, self.y + dy)

    def with_x(self, x: int) -> "Pos":
        return Pos(x, self.y)

    def with_y(self, y: int) -> "Pos":
        return Pos(self.x, y)


@dataclass(frozen=True)
class Size:
    """Width/height of a grid region, in cells."""
    width: int
    height: int


@dataclass(frozen=True)
class Rect:
    """An inclusive, axis-aligned rectangle of cells."""
    left: int
    top: int
    right: int
    bottom: int

    @classmethod
    def from_corners(cls, a: Pos, b: Pos) -> "Rect":
        """Normalise two arbitrary corners into a rectangle."""
        return cls(
            left=min(a.x, b.x),
            top=min(a.y, b.y),
            right=max(a.x, b.x),
            bottom=max(a.y, b.y),
        )

    @property
    def top_left(self) -> Pos:
        return Pos(self.left, self.top)

    @property
    def top_right(self) -> Pos:
        return Pos(self.right, self.top)

    @property
    def bottom_left(self) -> Pos:
        return Pos(self.left, self.bottom)

    @property
    def bottom_right(self) -> Pos:
        return Pos(self.right, self.bottom)

    @property
    def width(self) -> int:
        return self.right - self.left + 1

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1

    def contains(self, pos: Pos) -> bool:
        """Check if a position lies inside the rectangle (edges included)."""
        return self.left <= pos.x <= self.right and self.top <= pos.y <= self.bottom

    def cells(self) -> Iterator[Pos]:
        """Iterate over every position in row-major order."""
        for y in range(self.top, self.bottom + 1):
            for x in range(self.left, self.right + 1):
                yield Pos(x, y)
