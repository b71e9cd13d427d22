"""Editing API: session history, drawing tools and the gesture front-end."""

from .session import Session, GridSnapshot, strip_margins, strip_trailing_whitespace
from .tools import (
    Tool,
    BoxTool,
    LineTool,
    ArrowTool,
    EraseTool,
    MoveTool,
    TextTool,
)
from .editor import Editor, TOOL_TYPES

__all__ = [
    "Session",
    "GridSnapshot",
    "strip_margins",
    "strip_trailing_whitespace",
    "Tool",
    "BoxTool",
    "LineTool",
    "ArrowTool",
    "EraseTool",
    "MoveTool",
    "TextTool",
    "Editor",
    "TOOL_TYPES",
]
