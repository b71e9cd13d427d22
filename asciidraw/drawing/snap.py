"""Bend planning for two-segment connectors.

A snapped connector runs from ``src`` to a single waypoint and from there to
``dst``. In 90 degree mode both legs are axis-aligned; in 45 degree mode the
first leg is straight and the second a true diagonal.
"""

from ..buffer.geometry import Pos
from ..buffer.glyphs import DASH
from ..buffer.grid import Grid
from ..config import ConnectorMode
from .rasterizer import draw_line, line_slope


def bend_90(grid: Grid, src: Pos, dst: Pos) -> Pos:
    """Waypoint for an axis-aligned bend.

    Ending on an existing horizontal run continues that run, otherwise the
    connector leaves ``src`` vertically.
    """
    if grid.get(dst) == DASH:
        return Pos(dst.x, src.y)
    return Pos(src.x, dst.y)


def bend_45(src: Pos, dst: Pos) -> Pos:
    """Waypoint for a 45 degree bend.

    Returns ``src`` itself when no bend is needed (pure horizontal, vertical
    or zero-length connectors).
    """
    delta = min(abs(src.y - dst.y), abs(src.x - dst.x))
    sx, sy = line_slope(src, dst)

    if sx < 0 and sy < 0:
        return dst.offset(delta, delta)
    if sx > 0 and sy < 0:
        return dst.offset(-delta, delta)
    if sx < 0 and sy > 0:
        return dst.offset(delta, -delta)
    if sx > 0 and sy > 0:
        return dst.offset(-delta, -delta)
    return src


def bend_point(grid: Grid, src: Pos, dst: Pos, mode: ConnectorMode) -> Pos:
    """Waypoint for the given snap mode (``SNAP45`` or anything else for 90)."""
    if mode is ConnectorMode.SNAP45:
        return bend_45(src, dst)
    return bend_90(grid, src, dst)


def draw_snapped_line(grid: Grid, src: Pos, dst: Pos, mode: ConnectorMode) -> Pos:
    """Stage a two-leg connector and return the waypoint it bent at."""
    mid = bend_point(grid, src, dst, mode)
    draw_line(grid, src, mid)
    draw_line(grid, mid, dst)
    return mid
