"""
asciidraw - ASCII Diagram Editor Engine

Character-grid buffer and drawing engine for an interactive ASCII-art
diagram editor: boxes, snapped and routed connectors, arrows and text drawn
onto a grid that is stored as plain text.
"""

__version__ = "0.1.0"

from .buffer import Grid, Pos, Size, Rect
from .config import ConnectorMode, EditorConfig, RouterConfig, load_config
from .api import Session, Editor

__all__ = [
    "Grid",
    "Pos",
    "Size",
    "Rect",
    "ConnectorMode",
    "EditorConfig",
    "RouterConfig",
    "load_config",
    "Session",
    "Editor",
]
