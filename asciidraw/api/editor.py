"""
Gesture Front-End

The editor sits between pointer/keyboard input and the session: it feeds
gestures to the active tool and either previews the tool's result in the
grid overlay or commits it as one undoable edit.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Type, Union

from ..buffer.geometry import Pos
from ..buffer.grid import Grid
from ..config import ConnectorMode, EditorConfig
from . import tools
from .session import Session
from .tools import ArrowTool, BoxTool, EraseTool, LineTool, MoveTool, TextTool, Tool

logger = logging.getLogger(__name__)

TOOL_TYPES: Dict[str, Type] = {
    "box": BoxTool,
    "line": LineTool,
    "arrow": ArrowTool,
    "erase": EraseTool,
    "move": MoveTool,
    "text": TextTool,
}


class Editor:
    """
    Drives drawing tools against a session.

    Every gesture discards the previous preview and re-renders the active
    tool. When the tool asks for its result to be kept, the render is
    flushed inside ``Session.with_snapshot`` so it lands in the undo history
    (or is dropped if it changed nothing).
    """

    def __init__(self, session: Optional[Session] = None, config: Optional[EditorConfig] = None):
        if session is None:
            session = Session(config)
        self.session = session
        self.config = config or session.config
        self.tool: Tool = BoxTool()

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        config: Optional[EditorConfig] = None,
        create: bool = False,
    ) -> "Editor":
        """
        Open an editor on a text file.

        Args:
            path: Diagram file
            config: Editor configuration
            create: Start an empty diagram bound to ``path`` if it doesn't exist

        Raises:
            OSError: If the file exists but can't be read, or doesn't exist
                and ``create`` is False
        """
        session = Session(config)
        path = Path(path)
        if create and not path.exists():
            session.new()
            session.source_path = path
            logger.info(f"New diagram: {path}")
        else:
            session.load(path)
        return cls(session, config)

    @property
    def grid(self) -> Grid:
        return self.session.grid

    # -------------------------------------------------------------------------
    # Tool selection
    # -------------------------------------------------------------------------

    def select_tool(self, name: str) -> Tool:
        """Activate a fresh tool by name (box, line, arrow, erase, move, text)."""
        try:
            tool_type = TOOL_TYPES[name.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown tool {name!r} (expected one of: {', '.join(TOOL_TYPES)})"
            )

        if tool_type in (LineTool, ArrowTool):
            tool = tool_type(mode=self.config.connector_mode, router=self.config.router)
        else:
            tool = tool_type()
        self.set_tool(tool)
        return tool

    def set_tool(self, tool: Tool):
        """Replace the active tool, committing any pending text first."""
        self.finish_text()
        self.grid.discard_overlay()
        self.grid.clear_cursor()
        self.tool = tool
        logger.debug(f"Active tool: {self.active_tool()}")

    def set_connector_mode(self, mode: ConnectorMode):
        """Change the connector mode for line and arrow tools."""
        self.config.connector_mode = mode
        if isinstance(self.tool, (LineTool, ArrowTool)):
            self.tool.mode = mode

    def active_tool(self) -> str:
        """Returns the active tool as a human readable string."""
        return f"{{ {tools.describe(self.tool)} }}"

    # -------------------------------------------------------------------------
    # Pointer gestures
    # -------------------------------------------------------------------------

    def press(self, pos: Pos) -> bool:
        if isinstance(self.tool, TextTool):
            self.finish_text()
        keep_changes = tools.on_press(self.tool, pos)
        self._apply_toolstate(keep_changes)
        return keep_changes

    def hold(self, pos: Pos) -> bool:
        keep_changes = tools.on_hold(self.tool, pos)
        self._apply_toolstate(keep_changes)
        return keep_changes

    def release(self, pos: Pos) -> bool:
        keep_changes = tools.on_release(self.tool, pos)
        self._apply_toolstate(keep_changes)
        tools.reset(self.tool)
        return keep_changes

    def _apply_toolstate(self, keep_changes: bool):
        if keep_changes:
            self.session.with_snapshot(self._render_and_flush, tools.describe(self.tool))
        else:
            self.grid.discard_overlay()
            tools.render(self.tool, self.grid)

    def _render_and_flush(self, grid: Grid):
        tools.render(self.tool, grid)
        grid.flush()

    # -------------------------------------------------------------------------
    # Text entry
    # -------------------------------------------------------------------------

    def type_char(self, c: str) -> bool:
        """Type a character at the text cursor. Returns False without a text
        anchor."""
        if not isinstance(self.tool, TextTool) or self.tool.anchor is None:
            return False
        tools.insert_char(self.tool, c)
        self._apply_toolstate(False)
        return True

    def type_text(self, text: str) -> bool:
        typed = False
        for c in text:
            typed = self.type_char(c) or typed
        return typed

    def backspace(self) -> bool:
        if not isinstance(self.tool, TextTool):
            return False
        removed = tools.delete_char(self.tool)
        self._apply_toolstate(False)
        return removed

    def finish_text(self) -> bool:
        """
        Commit pending text, if any.

        Returns:
            True if the grid changed
        """
        if not isinstance(self.tool, TextTool):
            return False

        changed = False
        if self.tool.pending:
            changed = self.session.with_snapshot(self._render_and_flush, "Text")
        self.tool.anchor = None
        self.tool.text = []
        self.grid.discard_overlay()
        self.grid.clear_cursor()
        return changed

    # -------------------------------------------------------------------------
    # History and maintenance
    # -------------------------------------------------------------------------

    def undo(self) -> bool:
        self._drop_pending()
        return self.session.undo()

    def redo(self) -> bool:
        self._drop_pending()
        return self.session.redo()

    def trim_margins(self) -> bool:
        self._drop_pending()
        return self.session.trim_margins()

    def trim_trailing_whitespace(self) -> bool:
        self._drop_pending()
        return self.session.trim_trailing_whitespace()

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        self.finish_text()
        return self.session.save(path)

    def _drop_pending(self):
        """Forget uncommitted tool output (typed text, move selection)."""
        if isinstance(self.tool, TextTool):
            self.tool.anchor = None
            self.tool.text = []
        elif isinstance(self.tool, MoveTool):
            self.tool.selection = None
            self.tool.moving = False
            self.tool.drag.clear()
        self.grid.discard_overlay()
        self.grid.clear_cursor()
