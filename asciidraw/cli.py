#!/usr/bin/env python3
"""
asciidraw CLI

Command-line interface for scripted diagram editing. Each drawing command
replays one press/release gesture against a diagram file.

Usage:
    asciidraw show <diagram.txt>
    asciidraw draw <diagram.txt> <tool> X,Y X,Y [options]
    asciidraw text <diagram.txt> X,Y <text> [options]
    asciidraw trim <diagram.txt> [--margins] [--trailing]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .api.editor import Editor
from .buffer.geometry import Pos
from .config import ConfigError, ConnectorMode, EditorConfig, load_config

DRAW_TOOLS = ["box", "line", "arrow", "erase"]


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def parse_pos(text: str) -> Pos:
    """argparse type for ``X,Y`` coordinates."""
    try:
        return Pos.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def load_editor_config(args) -> EditorConfig:
    config = load_config(getattr(args, "config", None))
    mode = getattr(args, "mode", None)
    if mode:
        config.connector_mode = ConnectorMode(mode)
    return config


def finish(editor: Editor, args) -> int:
    """Save (unless --dry-run) and print the resulting diagram."""
    output: Optional[Path] = Path(args.output) if getattr(args, "output", None) else None

    if args.dry_run:
        print(editor.grid.render(), end="")
        return 0

    path = editor.save(output)
    print(f"Saved: {path}")
    return 0


def cmd_show(args):
    """Print a diagram."""
    editor = Editor.open(args.diagram, load_editor_config(args))
    print(editor.grid.render(), end="")
    if args.bounds:
        bounds = editor.grid.bounds()
        print(f"Bounds: {bounds.width}x{bounds.height}")
    return 0


def cmd_draw(args):
    """Draw a box, line, arrow or erase a rectangle."""
    editor = Editor.open(args.diagram, load_editor_config(args), create=True)
    editor.select_tool(args.tool)
    print(f"Tool: {editor.active_tool()}")

    editor.press(args.start)
    editor.hold(args.end)
    if not editor.release(args.end):
        print("Nothing to draw.")
        return 1

    return finish(editor, args)


def cmd_text(args):
    """Write text starting at a cell."""
    editor = Editor.open(args.diagram, load_editor_config(args), create=True)
    editor.select_tool("text")

    editor.press(args.at)
    editor.release(args.at)
    editor.type_text(args.text.replace("\\n", "\n"))
    editor.finish_text()

    return finish(editor, args)


def cmd_trim(args):
    """Strip margins and/or trailing whitespace."""
    editor = Editor.open(args.diagram, load_editor_config(args))

    # Default to both when neither is requested
    margins = args.margins or not args.trailing
    trailing = args.trailing or not args.margins

    changed = False
    if trailing:
        changed = editor.trim_trailing_whitespace() or changed
    if margins:
        changed = editor.trim_margins() or changed

    if not changed:
        print("Nothing to trim.")
    return finish(editor, args)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="asciidraw - ASCII diagram editor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  asciidraw draw diagram.txt box 0,0 10,4
  asciidraw draw diagram.txt arrow 10,2 20,8 --mode routed
  asciidraw text diagram.txt 2,2 "hello"
  asciidraw trim diagram.txt --margins
  asciidraw show diagram.txt --bounds
        """,
    )

    parser.add_argument('--version', action='version', version=f'asciidraw {__version__}')
    parser.add_argument('--config', help='Path to YAML config file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Show command
    show_parser = subparsers.add_parser('show', help='Print a diagram')
    show_parser.add_argument('diagram', help='Path to diagram text file')
    show_parser.add_argument('--bounds', action='store_true', help='Also print the diagram size')

    # Draw command
    draw_parser = subparsers.add_parser('draw', help='Draw with a tool between two cells')
    draw_parser.add_argument('diagram', help='Path to diagram text file (created if missing)')
    draw_parser.add_argument('tool', choices=DRAW_TOOLS, help='Drawing tool')
    draw_parser.add_argument('start', type=parse_pos, help='Start cell as X,Y')
    draw_parser.add_argument('end', type=parse_pos, help='End cell as X,Y')
    draw_parser.add_argument('--mode', choices=[m.value for m in ConnectorMode],
                             help='Connector mode for line/arrow')
    draw_parser.add_argument('-o', '--output', help='Output file path')
    draw_parser.add_argument('--dry-run', action='store_true', help="Print instead of saving")

    # Text command
    text_parser = subparsers.add_parser('text', help='Write text at a cell')
    text_parser.add_argument('diagram', help='Path to diagram text file (created if missing)')
    text_parser.add_argument('at', type=parse_pos, help='Anchor cell as X,Y')
    text_parser.add_argument('text', help='Text to write (\\n starts a new line)')
    text_parser.add_argument('-o', '--output', help='Output file path')
    text_parser.add_argument('--dry-run', action='store_true', help="Print instead of saving")

    # Trim command
    trim_parser = subparsers.add_parser('trim', help='Strip surplus whitespace')
    trim_parser.add_argument('diagram', help='Path to diagram text file')
    trim_parser.add_argument('--margins', action='store_true',
                             help='Strip blank outer rows and the left margin')
    trim_parser.add_argument('--trailing', action='store_true',
                             help='Strip trailing whitespace on each row')
    trim_parser.add_argument('-o', '--output', help='Output file path')
    trim_parser.add_argument('--dry-run', action='store_true', help="Print instead of saving")

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 1

    # Dispatch command
    commands = {
        'show': cmd_show,
        'draw': cmd_draw,
        'text': cmd_text,
        'trim': cmd_trim,
    }

    try:
        return commands[args.command](args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
