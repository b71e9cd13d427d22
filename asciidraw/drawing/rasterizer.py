"""
Line Rasterizer

Converts two grid points into cell writes using Bresenham's integer line
stepping. Each step picks a connector glyph from the local slope; the first
step and the destination are marked with ``+``.
"""

from typing import List, Tuple

from ..buffer.geometry import Pos, Rect
from ..buffer.glyphs import BACKSLASH, DASH, PIPE, PLUS, SLASH
from ..buffer.grid import Grid

Slope = Tuple[int, int]


def gcd(a: int, b: int) -> int:
    """Returns the greatest common divisor of ``a`` and ``b`` (never negative)."""
    while b != 0:
        a, b = b, a % b
    return abs(a)


def reduce_slope(dx: int, dy: int) -> Slope:
    d = gcd(dx, dy)
    if d == 0:
        return (dx, dy)
    return (dx // d, dy // d)


def line_slope(src: Pos, dst: Pos) -> Slope:
    """Returns the slope between ``src`` and ``dst``, reduced to lowest terms."""
    return reduce_slope(dst.x - src.x, dst.y - src.y)


def connector_glyph(slope: Slope) -> str:
    """Pick the connector glyph for a direction.

    ``(0, n)`` is vertical, ``(n, 0)`` horizontal; diagonals going down-right
    or up-left use a backslash, the other two a forward slash.
    """
    x, y = slope
    if x == 0 and y == 0:
        return PLUS
    if x == 0:
        return PIPE
    if y == 0:
        return DASH
    if (x > 0) == (y > 0):
        return BACKSLASH
    return SLASH


def bresenham(src: Pos, dst: Pos) -> List[Pos]:
    """Integer line stepping from ``src`` to ``dst``, both ends included."""
    x0, y0 = src.x, src.y
    x1, y1 = dst.x, dst.y
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    points = []
    while True:
        points.append(Pos(x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return points


def steps(points: List[Pos]) -> List[Tuple[Pos, Pos]]:
    """Consecutive ``(start, end)`` pairs along a point sequence."""
    return list(zip(points, points[1:]))


def draw_line(grid: Grid, src: Pos, dst: Pos):
    """Stage a straight line from ``src`` to ``dst``.

    Every write respects glyph precedence, including the closing ``+`` at
    ``dst``, so a joint never clobbers a stronger glyph already there.
    """
    for i, (start, end) in enumerate(steps(bresenham(src, dst))):
        glyph = PLUS if i == 0 else connector_glyph(line_slope(start, end))
        grid.stage(False, start, glyph)

    grid.stage(False, dst, PLUS)


def draw_box(grid: Grid, a: Pos, b: Pos):
    """Stage the outline of the rectangle spanned by two opposite corners."""
    r = Rect.from_corners(a, b)

    draw_line(grid, r.top_left, r.top_right)
    draw_line(grid, r.top_right, r.bottom_right)
    draw_line(grid, r.bottom_right, r.bottom_left)
    draw_line(grid, r.bottom_left, r.top_left)
