"""
Drawing Tools

Tools are a closed set of plain dataclasses holding gesture state. All
behaviour lives in the module-level functions below, each dispatching over
the tool kinds in one place:

- ``on_press`` / ``on_hold`` / ``on_release``: update state, return True
  when the rendered result should be committed rather than previewed
- ``render``: stage the tool's current result into a grid's overlay
- ``reset``: clear per-gesture state after a release
- ``describe``: human readable label for status lines
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..buffer.geometry import Pos, Rect
from ..buffer.glyphs import SPACE
from ..buffer.grid import Grid
from ..config import ConnectorMode, RouterConfig
from ..drawing.arrows import draw_arrow, stage_tip
from ..drawing.rasterizer import draw_box, draw_line
from ..drawing.router import draw_route
from ..drawing.snap import bend_point, draw_snapped_line


@dataclass
class Drag:
    """Endpoints of a press-drag-release gesture."""
    origin: Optional[Pos] = None
    target: Optional[Pos] = None

    @property
    def complete(self) -> bool:
        return self.origin is not None and self.target is not None

    def clear(self):
        self.origin = None
        self.target = None


@dataclass
class BoxTool:
    drag: Drag = field(default_factory=Drag)


@dataclass
class LineTool:
    mode: ConnectorMode = ConnectorMode.SNAP90
    router: RouterConfig = field(default_factory=RouterConfig)
    drag: Drag = field(default_factory=Drag)


@dataclass
class ArrowTool:
    mode: ConnectorMode = ConnectorMode.SNAP90
    router: RouterConfig = field(default_factory=RouterConfig)
    drag: Drag = field(default_factory=Drag)


@dataclass
class EraseTool:
    drag: Drag = field(default_factory=Drag)


@dataclass
class MoveTool:
    """Select a rectangle with one drag, move its content with the next.

    ``moving`` is set while a drag that started inside the selection is in
    progress.
    """
    selection: Optional[Rect] = None
    moving: bool = False
    drag: Drag = field(default_factory=Drag)


@dataclass
class TextTool:
    """Free text typed from an anchor cell.

    Text is held as a list of characters until it is committed.
    """
    anchor: Optional[Pos] = None
    text: List[str] = field(default_factory=list)

    @property
    def pending(self) -> bool:
        return self.anchor is not None and bool(self.text)


Tool = Union[BoxTool, LineTool, ArrowTool, EraseTool, MoveTool, TextTool]

DRAG_TOOLS = (BoxTool, LineTool, ArrowTool, EraseTool)


# =============================================================================
# Gestures
# =============================================================================

def on_press(tool: Tool, pos: Pos) -> bool:
    """Handle the pointer being pressed at ``pos``."""
    if isinstance(tool, DRAG_TOOLS):
        tool.drag.origin = pos
        tool.drag.target = None
        return False

    if isinstance(tool, MoveTool):
        tool.moving = tool.selection is not None and tool.selection.contains(pos)
        if not tool.moving:
            tool.selection = None
        tool.drag.origin = pos
        tool.drag.target = None
        return False

    if isinstance(tool, TextTool):
        tool.anchor = pos
        tool.text = []
        return False

    raise TypeError(f"Unknown tool: {tool!r}")


def on_hold(tool: Tool, pos: Pos) -> bool:
    """Handle the pointer being dragged to ``pos``."""
    if isinstance(tool, DRAG_TOOLS + (MoveTool,)):
        if tool.drag.origin is not None:
            tool.drag.target = pos
        return False

    if isinstance(tool, TextTool):
        return False

    raise TypeError(f"Unknown tool: {tool!r}")


def on_release(tool: Tool, pos: Pos) -> bool:
    """Handle the pointer being released at ``pos``."""
    if isinstance(tool, DRAG_TOOLS):
        if tool.drag.origin is None:
            return False
        tool.drag.target = pos
        return True

    if isinstance(tool, MoveTool):
        if tool.drag.origin is None:
            return False
        tool.drag.target = pos
        if tool.moving:
            return True
        tool.selection = Rect.from_corners(tool.drag.origin, pos)
        return False

    if isinstance(tool, TextTool):
        return False

    raise TypeError(f"Unknown tool: {tool!r}")


def reset(tool: Tool):
    """Clear per-gesture state once a gesture has finished.

    A move keeps its selection until the selected content has been moved;
    text keeps its anchor and characters until committed.
    """
    if isinstance(tool, DRAG_TOOLS):
        tool.drag.clear()
    elif isinstance(tool, MoveTool):
        if tool.moving:
            tool.selection = None
        tool.moving = False
        tool.drag.clear()
    elif isinstance(tool, TextTool):
        pass
    else:
        raise TypeError(f"Unknown tool: {tool!r}")


# =============================================================================
# Rendering
# =============================================================================

def render(tool: Tool, grid: Grid) -> bool:
    """
    Stage the tool's current result into ``grid``'s overlay.

    Returns:
        False if the tool has nothing to draw yet
    """
    if isinstance(tool, BoxTool):
        if not tool.drag.complete:
            return False
        draw_box(grid, tool.drag.origin, tool.drag.target)
        return True

    if isinstance(tool, LineTool):
        if not tool.drag.complete:
            return False
        origin, target = tool.drag.origin, tool.drag.target
        if tool.mode is ConnectorMode.ROUTED:
            draw_route(grid, origin, target, tool.router)
        else:
            draw_snapped_line(grid, origin, target, tool.mode)
        return True

    if isinstance(tool, ArrowTool):
        if not tool.drag.complete:
            return False
        _render_arrow(tool, grid, tool.drag.origin, tool.drag.target)
        return True

    if isinstance(tool, EraseTool):
        if not tool.drag.complete:
            return False
        for pos in Rect.from_corners(tool.drag.origin, tool.drag.target).cells():
            if grid.get(pos) is not None:
                grid.stage(True, pos, SPACE)
        return True

    if isinstance(tool, MoveTool):
        return _render_move(tool, grid)

    if isinstance(tool, TextTool):
        return _render_text(tool, grid)

    raise TypeError(f"Unknown tool: {tool!r}")


def _render_arrow(tool: ArrowTool, grid: Grid, origin: Pos, target: Pos):
    if tool.mode is ConnectorMode.ROUTED:
        approach = draw_route(grid, origin, target, tool.router)
        stage_tip(grid, approach, target)
        return

    mid = bend_point(grid, origin, target, tool.mode)
    if mid != target:
        draw_line(grid, origin, mid)
        draw_arrow(grid, mid, target)
    else:
        draw_arrow(grid, origin, target)


def _render_move(tool: MoveTool, grid: Grid) -> bool:
    if tool.moving:
        if tool.selection is None or not tool.drag.complete:
            return False
        dx = tool.drag.target.x - tool.drag.origin.x
        dy = tool.drag.target.y - tool.drag.origin.y

        content = [
            (pos, grid.get(pos)) for pos in tool.selection.cells()
            if grid.is_visible(pos)
        ]
        for pos, _ in content:
            grid.stage(True, pos, SPACE)
        for pos, glyph in content:
            x, y = pos.x + dx, pos.y + dy
            if x < 0 or y < 0:
                continue
            grid.stage(True, Pos(x, y), glyph)
        return True

    if tool.drag.complete:
        area = Rect.from_corners(tool.drag.origin, tool.drag.target)
    elif tool.selection is not None:
        area = tool.selection
    else:
        return False

    # Highlight the selection by restaging what is already there
    for pos in area.cells():
        glyph = grid.get(pos)
        if glyph is not None:
            grid.stage(True, pos, glyph)
    return True


def _render_text(tool: TextTool, grid: Grid) -> bool:
    if tool.anchor is None:
        return False

    x, y = tool.anchor.x, tool.anchor.y
    for c in tool.text:
        if c == "\n":
            x = tool.anchor.x
            y += 1
            continue
        grid.stage(True, Pos(x, y), c)
        x += 1

    grid.set_cursor(Pos(x, y))
    return bool(tool.text)


# =============================================================================
# Text entry
# =============================================================================

def insert_char(tool: TextTool, c: str):
    """Append a typed character; ``"\\n"`` starts a line under the anchor."""
    if tool.anchor is None:
        return
    if len(c) != 1:
        raise ValueError(f"Expected a single character, got {c!r}")
    tool.text.append(c)


def delete_char(tool: TextTool) -> bool:
    """Remove the last typed character, if any."""
    if not tool.text:
        return False
    tool.text.pop()
    return True


def describe(tool: Tool) -> str:
    """Human readable label for the active tool."""
    if isinstance(tool, BoxTool):
        return "Box"
    if isinstance(tool, LineTool):
        return f"Line: {tool.mode.label()}"
    if isinstance(tool, ArrowTool):
        return f"Arrow: {tool.mode.label()}"
    if isinstance(tool, EraseTool):
        return "Erase"
    if isinstance(tool, MoveTool):
        return "Move"
    if isinstance(tool, TextTool):
        return "Text"
    raise TypeError(f"Unknown tool: {tool!r}")
