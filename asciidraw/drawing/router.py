"""A* connector router.

Finds an obstacle-aware path between two grid cells and stages it as a
connector. The search space is the 8-connected, non-negative grid:

- Cardinal move:  1.0 + penalty if the destination cell is visible
- Diagonal move:  sqrt(2) + penalty if either flanking cell is visible,
  so a route never cuts through a filled corner for free
- Heuristic:      octile distance, scaled by a small tie-break weight
  (f(n) = g(n) + w * h(n) with w slightly above 1) to favour nodes closer
  to the goal on cost plateaus

Occupied cells are expensive rather than forbidden, so a route always
exists on the unbounded grid; a failed search is a programming error.
"""

import heapq
import itertools
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..buffer.geometry import Pos
from ..buffer.glyphs import PLUS
from ..buffer.grid import Grid
from ..config import RouterConfig
from .rasterizer import connector_glyph, line_slope

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2)

# (dx, dy, base_cost)
CARDINAL_OFFSETS = [
    (1, 0, 1.0),     # East
    (-1, 0, 1.0),    # West
    (0, 1, 1.0),     # South
    (0, -1, 1.0),    # North
]
DIAGONAL_OFFSETS = [
    (1, 1, SQRT2),    # South-east
    (1, -1, SQRT2),   # North-east
    (-1, 1, SQRT2),   # South-west
    (-1, -1, SQRT2),  # North-west
]


class RouteNotFoundError(RuntimeError):
    """The router failed to reach its target.

    Cannot happen on the unbounded grid unless the iteration guard trips;
    callers must not try to recover from it.
    """


@dataclass
class RouteResult:
    """Result of routing a single connector."""
    path: List[Pos] = field(default_factory=list)
    cost: float = 0.0
    iterations: int = 0
    explored_count: int = 0

    @property
    def penultimate(self) -> Pos:
        """Second-to-last point, or the only point of a zero-length route."""
        if len(self.path) >= 2:
            return self.path[-2]
        return self.path[-1]


def octile_distance(a: Pos, b: Pos) -> float:
    """Exact shortest distance on an empty 8-connected grid."""
    dx = abs(a.x - b.x)
    dy = abs(a.y - b.y)
    return (dx + dy) + (SQRT2 - 2) * min(dx, dy)


class Router:
    """A* pathfinder over the visible content of a grid.

    Only committed cells count as obstacles; pending overlay edits do not.
    """

    def __init__(self, grid: Grid, config: RouterConfig = None):
        self.grid = grid
        self.config = config or RouterConfig()

    def move_cost(self, node: Pos, dx: int, dy: int, base_cost: float) -> float:
        """Cost of moving from ``node`` by ``(dx, dy)``."""
        if dx != 0 and dy != 0:
            occupied = (
                self.grid.is_visible(Pos(node.x + dx, node.y))
                or self.grid.is_visible(Pos(node.x, node.y + dy))
            )
        else:
            occupied = self.grid.is_visible(Pos(node.x + dx, node.y + dy))

        if occupied:
            return base_cost + self.config.occupied_penalty
        return base_cost

    def neighbors(self, node: Pos) -> List[Tuple[Pos, float]]:
        """Get neighbouring cells with movement costs.

        Moves that would leave the non-negative quadrant are skipped.
        """
        result = []
        for dx, dy, base_cost in CARDINAL_OFFSETS + DIAGONAL_OFFSETS:
            nx = node.x + dx
            ny = node.y + dy
            if nx < 0 or ny < 0:
                continue
            result.append((Pos(nx, ny), self.move_cost(node, dx, dy, base_cost)))
        return result

    def heuristic(self, node: Pos, goal: Pos) -> float:
        return octile_distance(node, goal) * self.config.heuristic_weight

    def find_path(self, start: Pos, goal: Pos) -> RouteResult:
        """Route between two points.

        Iterative A*; the heap is keyed on ``(f, insertion order)`` so equal
        scores pop first-in, first-out.

        Raises:
            RouteNotFoundError: If the search exceeds ``max_iterations`` or
                exhausts the open set
        """
        counter = itertools.count()
        open_set: List[Tuple[float, int, Pos]] = [
            (self.heuristic(start, goal), next(counter), start)
        ]

        g_scores: Dict[Pos, float] = {start: 0.0}
        came_from: Dict[Pos, Pos] = {}
        closed: Set[Pos] = set()

        iterations = 0

        while open_set:
            iterations += 1
            if iterations > self.config.max_iterations:
                raise RouteNotFoundError(
                    f"Max iterations ({self.config.max_iterations}) exceeded "
                    f"routing {start} -> {goal}"
                )

            _, _, current = heapq.heappop(open_set)

            if current in closed:
                continue

            if current == goal:
                path = self._reconstruct_path(came_from, current)
                result = RouteResult(
                    path=path,
                    cost=g_scores[current],
                    iterations=iterations,
                    explored_count=len(closed),
                )
                logger.debug(
                    f"Routed {start} -> {goal}: {len(path)} points, "
                    f"cost {result.cost:.2f}, {iterations} iterations"
                )
                return result

            closed.add(current)
            current_g = g_scores[current]

            for neighbor, move_cost in self.neighbors(current):
                if neighbor in closed:
                    continue

                tentative_g = current_g + move_cost
                if neighbor in g_scores and tentative_g >= g_scores[neighbor]:
                    continue

                g_scores[neighbor] = tentative_g
                came_from[neighbor] = current

                f = tentative_g + self.heuristic(neighbor, goal)
                heapq.heappush(open_set, (f, next(counter), neighbor))

        raise RouteNotFoundError(f"No path found (open set exhausted) routing {start} -> {goal}")

    def path_cost(self, path: List[Pos]) -> float:
        """Total cost of walking ``path`` under this router's cost model."""
        total = 0.0
        for a, b in zip(path, path[1:]):
            dx = b.x - a.x
            dy = b.y - a.y
            if max(abs(dx), abs(dy)) != 1:
                raise ValueError(f"Path step {a} -> {b} is not a single grid move")
            base_cost = SQRT2 if dx != 0 and dy != 0 else 1.0
            total += self.move_cost(a, dx, dy, base_cost)
        return total

    def _reconstruct_path(self, came_from: Dict[Pos, Pos], current: Pos) -> List[Pos]:
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path


def route_glyphs(path: List[Pos]) -> List[str]:
    """Connector glyph for every point of a routed path.

    The first and last points are ``+``. An intermediate point keeps the
    glyph of its outgoing leg unless the incoming leg implies a different
    one, in which case it is a bend and becomes ``+``.
    """
    if not path:
        return []

    legs = [connector_glyph(line_slope(a, b)) for a, b in zip(path, path[1:])]
    glyphs = []
    for i in range(len(path) - 1):
        if i == 0 or legs[i - 1] != legs[i]:
            glyphs.append(PLUS)
        else:
            glyphs.append(legs[i])
    glyphs.append(PLUS)
    return glyphs


def draw_route(grid: Grid, src: Pos, dst: Pos, config: Optional[RouterConfig] = None) -> Pos:
    """
    Route and stage a connector from ``src`` to ``dst``.

    Args:
        grid: Grid to route around and stage into
        src: Start cell
        dst: End cell
        config: Router configuration

    Returns:
        The second-to-last point of the route, used to orient an arrow tip
        against the final approach direction
    """
    result = Router(grid, config).find_path(src, dst)

    for pos, glyph in zip(result.path, route_glyphs(result.path)):
        grid.stage(False, pos, glyph)

    return result.penultimate
