"""Connector glyphs and their overlap precedence.

When two drawn lines cross a cell, precedence decides which glyph stays:
intersections end up as ``+`` and straight runs are not broken by a weaker
diagonal passing through them.
"""

from typing import Dict

SPACE = " "
PLUS = "+"
DASH = "-"
PIPE = "|"
BACKSLASH = "\\"
SLASH = "/"

# Arrow tips
TIP_NORTH = "^"
TIP_EAST = ">"
TIP_SOUTH = "v"
TIP_WEST = "<"

_PRECEDENCE: Dict[str, int] = {
    PLUS: 5,
    DASH: 4,
    PIPE: 3,
    BACKSLASH: 2,
    SLASH: 1,
}


def precedence(glyph: str) -> int:
    """Returns the overlap precedence for ``glyph`` (0 for non-connectors)."""
    return _PRECEDENCE.get(glyph, 0)


def may_replace(candidate: str, existing: str) -> bool:
    """Check if ``candidate`` may be written over a cell holding ``existing``."""
    return candidate == existing or precedence(candidate) >= precedence(existing)


def is_blank(glyph: str) -> bool:
    return glyph.isspace()
