"""Drawing engine for asciidraw.

- rasterizer: Bresenham lines, connector glyph choice, boxes
- snap: single-bend waypoints for 90/45 degree connectors
- router: A* obstacle-aware connectors
- arrows: arrowhead direction inference
"""

from .rasterizer import (
    gcd,
    line_slope,
    connector_glyph,
    bresenham,
    draw_line,
    draw_box,
)
from .snap import bend_90, bend_45, bend_point, draw_snapped_line
from .router import (
    Router,
    RouteResult,
    RouteNotFoundError,
    octile_distance,
    route_glyphs,
    draw_route,
)
from .arrows import arrow_tip, stage_tip, draw_arrow

__all__ = [
    # Rasterizer
    "gcd",
    "line_slope",
    "connector_glyph",
    "bresenham",
    "draw_line",
    "draw_box",
    # Snap planner
    "bend_90",
    "bend_45",
    "bend_point",
    "draw_snapped_line",
    # Router
    "Router",
    "RouteResult",
    "RouteNotFoundError",
    "octile_distance",
    "route_glyphs",
    "draw_route",
    # Arrows
    "arrow_tip",
    "stage_tip",
    "draw_arrow",
]
