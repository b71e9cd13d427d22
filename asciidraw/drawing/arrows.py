"""Arrow-tip selection.

The tip glyph follows the direction of the final approach, adjusted by
what is already drawn around the target so arrowheads point at the thing
they connect to.
"""

from typing import Optional

from ..buffer.geometry import Pos
from ..buffer.glyphs import PLUS, TIP_EAST, TIP_NORTH, TIP_SOUTH, TIP_WEST
from ..buffer.grid import Grid
from .rasterizer import draw_line, line_slope

_CARDINAL_TIPS = {
    (0, -1): TIP_NORTH,
    (1, 0): TIP_EAST,
    (0, 1): TIP_SOUTH,
    (-1, 0): TIP_WEST,
}


def _visible(grid: Grid, x: int, y: int) -> bool:
    """Visibility check that treats off-grid (negative) cells as empty."""
    if x < 0 or y < 0:
        return False
    return grid.is_visible(Pos(x, y))


def _side_tip(grid: Grid, dst: Pos, horizontal: bool) -> Optional[str]:
    """Tip pointing at a visible neighbour beside ``dst``, if any.

    ``horizontal`` is the axis of travel; the neighbours checked are on the
    other axis, east/south before west/north.
    """
    if horizontal:
        if _visible(grid, dst.x, dst.y + 1):
            return TIP_SOUTH
        if _visible(grid, dst.x, dst.y - 1):
            return TIP_NORTH
    else:
        if _visible(grid, dst.x + 1, dst.y):
            return TIP_EAST
        if _visible(grid, dst.x - 1, dst.y):
            return TIP_WEST
    return None


def arrow_tip(grid: Grid, src: Pos, dst: Pos) -> str:
    """Choose the arrowhead glyph for a connector arriving at ``dst``."""
    slope = line_slope(src, dst)
    x, y = slope

    if slope in _CARDINAL_TIPS:
        tip = _CARDINAL_TIPS[slope]
        if not _visible(grid, dst.x + x, dst.y + y):
            side = _side_tip(grid, dst, horizontal=(y == 0))
            if side is not None:
                return side
        return tip

    vertical = TIP_SOUTH if y > 0 else TIP_NORTH

    # SE / NE
    if x > 0 and y != 0:
        if _visible(grid, dst.x + 1, dst.y):
            return TIP_EAST
        return vertical

    # SW / NW
    if x < 0 and y != 0:
        if dst.x == 0:
            return vertical
        if _visible(grid, dst.x - 1, dst.y):
            return TIP_WEST
        return vertical

    return PLUS


def stage_tip(grid: Grid, src: Pos, dst: Pos) -> str:
    """Stage the arrowhead at ``dst``; tips always win over precedence."""
    tip = arrow_tip(grid, src, dst)
    grid.stage(True, dst, tip)
    return tip


def draw_arrow(grid: Grid, src: Pos, dst: Pos) -> str:
    """Stage a straight arrow from ``src`` to ``dst``."""
    draw_line(grid, src, dst)
    return stage_tip(grid, src, dst)
