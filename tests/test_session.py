"""
Tests for the asciidraw Session API.

Tests snapshot history, undo/redo, dirty tracking, whitespace trimming and
load/save behaviour.
"""

import os

import pytest

from asciidraw.api.session import (
    GridSnapshot,
    Session,
    strip_margins,
    strip_trailing_whitespace,
)
from asciidraw.buffer.geometry import Pos
from asciidraw.buffer.grid import Grid
from asciidraw.config import EditorConfig


def write_glyph(pos: Pos, glyph: str):
    """Mutation that commits one glyph."""
    def mutate(grid: Grid):
        grid.stage(True, pos, glyph)
        grid.flush()
    return mutate


def rows_of(*lines):
    return [list(line) for line in lines]


class TestSessionBasics:
    """Test basic session properties."""

    def test_new_session(self, session):
        assert session.grid.rows == []
        assert session.source_path is None
        assert session.is_dirty is False
        assert session.can_undo is False
        assert session.can_redo is False

    def test_stats(self, session):
        session.with_snapshot(write_glyph(Pos(2, 1), "x"), "x")
        stats = session.get_stats()
        assert stats["dirty"] is True
        assert stats["undo_depth"] == 1
        assert stats["redo_depth"] == 0
        assert stats["width"] == 3
        assert stats["height"] == 2
        assert stats["source"] is None


# =============================================================================
# History
# =============================================================================

class TestWithSnapshot:
    """Test with_snapshot() edits."""

    def test_change_is_recorded(self, session):
        changed = session.with_snapshot(write_glyph(Pos(0, 0), "x"), "Write x")
        assert changed is True
        assert session.is_dirty is True
        assert session.can_undo is True
        assert session._undo_stack[-1].description == "Write x"
        assert session._undo_stack[-1].rows == []

    def test_noop_is_dropped(self, session):
        """Edits that don't change the rows never reach the history."""
        changed = session.with_snapshot(lambda grid: None, "Nothing")
        assert changed is False
        assert session.can_undo is False
        assert session.is_dirty is False

    def test_rewriting_same_glyph_is_noop(self, session):
        session.with_snapshot(write_glyph(Pos(0, 0), "x"))
        changed = session.with_snapshot(write_glyph(Pos(0, 0), "x"))
        assert changed is False
        assert len(session._undo_stack) == 1

    def test_overlay_discarded_before_mutate(self, session):
        """Pending preview edits are not committed by an unrelated edit."""
        session.grid.stage(True, Pos(0, 0), "x")
        changed = session.with_snapshot(lambda grid: grid.flush())
        assert changed is False
        assert session.grid.rows == []

    def test_change_clears_redo(self, session):
        session.with_snapshot(write_glyph(Pos(0, 0), "a"))
        session.undo()
        assert session.can_redo is True

        session.with_snapshot(write_glyph(Pos(0, 0), "b"))
        assert session.can_redo is False

    def test_noop_keeps_redo(self, session):
        session.with_snapshot(write_glyph(Pos(0, 0), "a"))
        session.undo()

        session.with_snapshot(lambda grid: None)
        assert session.can_redo is True


class TestUndoRedo:
    """Test undo/redo functionality."""

    def test_undo_empty(self, session):
        assert session.undo() is False

    def test_redo_empty(self, session):
        assert session.redo() is False

    def test_undo_restores_previous_rows(self, session):
        session.with_snapshot(write_glyph(Pos(0, 0), "a"))
        session.with_snapshot(write_glyph(Pos(1, 0), "b"))

        assert session.undo() is True
        assert session.grid.lines() == ["a"]
        assert session.undo() is True
        assert session.grid.lines() == []
        assert session.undo() is False

    def test_undo_redo_inverse(self, session):
        """undo followed by redo gives back exactly the same rows."""
        session.with_snapshot(write_glyph(Pos(0, 0), "a"))
        session.with_snapshot(write_glyph(Pos(3, 2), "b"))
        after = session.grid.snapshot()

        session.undo()
        session.redo()
        assert session.grid.rows == after

        session.undo()
        session.undo()
        session.redo()
        session.redo()
        assert session.grid.rows == after
        assert session.can_redo is False

    def test_undo_clears_overlay(self, session):
        session.with_snapshot(write_glyph(Pos(0, 0), "a"))
        session.grid.stage(True, Pos(5, 5), "z")
        session.undo()
        assert session.grid.overlay == []

    def test_dirty_tracks_saved_state(self, session, tmp_path):
        session.with_snapshot(write_glyph(Pos(0, 0), "a"))
        session.save(tmp_path / "out.txt")
        assert session.is_dirty is False

        session.with_snapshot(write_glyph(Pos(1, 0), "b"))
        assert session.is_dirty is True

        session.undo()
        assert session.is_dirty is False

        session.undo()
        assert session.is_dirty is True

        session.redo()
        assert session.is_dirty is False

    def test_undo_limit_drops_oldest(self):
        session = Session(EditorConfig(undo_limit=2))
        for x, glyph in enumerate("abc"):
            session.with_snapshot(write_glyph(Pos(x, 0), glyph))

        assert len(session._undo_stack) == 2
        session.undo()
        session.undo()
        assert session.grid.lines() == ["a"]
        assert session.undo() is False

    def test_snapshot_type(self, session):
        snap = session.snapshot("label")
        assert isinstance(snap, GridSnapshot)
        assert snap.description == "label"


# =============================================================================
# Whitespace maintenance
# =============================================================================

class TestRowHelpers:
    """Test the pure row transforms."""

    def test_strip_trailing_whitespace(self):
        rows = rows_of("ab  ", "c ", "   ", "")
        assert strip_trailing_whitespace(rows) == rows_of("ab", "c", "", "")

    def test_strip_margins(self):
        rows = rows_of("", "  ab", "   c", "  ", "")
        assert strip_margins(rows) == rows_of("ab", " c")

    def test_strip_margins_keeps_inner_blank_rows(self):
        rows = rows_of("  a", "", "  b")
        assert strip_margins(rows) == rows_of("a", "", "b")

    def test_strip_margins_all_blank(self):
        assert strip_margins(rows_of("  ", "")) == []

    def test_helpers_copy(self):
        rows = rows_of("a ")
        strip_trailing_whitespace(rows)
        assert rows == rows_of("a ")


class TestTrimming:
    """Test trimming through the session history."""

    def test_trim_margins_undoable(self, session):
        session.grid = Grid.from_lines(["", "  ab", "   c"])
        assert session.trim_margins() is True
        assert session.grid.lines() == ["ab", " c"]

        session.undo()
        assert session.grid.lines() == ["", "  ab", "   c"]

    def test_trim_trailing(self, session):
        session.grid = Grid.from_lines(["ab  ", "c "])
        assert session.trim_trailing_whitespace() is True
        assert session.grid.lines() == ["ab", "c"]

    def test_trim_clean_grid_is_noop(self, session):
        session.grid = Grid.from_lines(["ab", "c"])
        assert session.trim_margins() is False
        assert session.trim_trailing_whitespace() is False
        assert session.can_undo is False


# =============================================================================
# Persistence
# =============================================================================

class TestLoadSave:
    """Test loading and saving diagrams."""

    def test_load(self, session, diagram_file):
        session.load(diagram_file)
        assert session.grid.lines() == ["+--+", "|  |", "+--+"]
        assert session.source_path == diagram_file
        assert session.is_dirty is False
        assert session.can_undo is False

    def test_load_resets_history(self, session, diagram_file):
        session.with_snapshot(write_glyph(Pos(0, 0), "a"))
        session.load(diagram_file)
        assert session.can_undo is False

    def test_failed_load_keeps_state(self, session, tmp_path):
        session.with_snapshot(write_glyph(Pos(0, 0), "a"))
        with pytest.raises(FileNotFoundError):
            session.load(tmp_path / "missing.txt")
        assert session.grid.lines() == ["a"]
        assert session.can_undo is True

    def test_save_requires_path(self, session):
        with pytest.raises(ValueError):
            session.save()

    def test_save_to_source_path(self, session, diagram_file):
        session.load(diagram_file)
        session.with_snapshot(write_glyph(Pos(1, 1), "x"))
        assert session.save() == diagram_file
        assert diagram_file.read_text() == "+--+\n|x |\n+--+\n"

    def test_save_strips_trailing_whitespace(self, session, tmp_path):
        path = tmp_path / "out.txt"
        session.grid = Grid.from_lines(["ab  ", " c"])
        session.save(path)

        assert path.read_text() == "ab\n c\n"
        assert session.grid.lines() == ["ab", " c"]
        assert session.is_dirty is False

        # The cleanup itself is undoable
        session.undo()
        assert session.grid.lines() == ["ab  ", " c"]

    def test_save_keep_trailing_whitespace(self, tmp_path):
        session = Session(EditorConfig(keep_trailing_ws=True))
        path = tmp_path / "out.txt"
        session.grid = Grid.from_lines(["ab  "])
        session.save(path)
        assert path.read_text() == "ab  \n"
        assert session.can_undo is False

    def test_save_strip_margins(self, tmp_path):
        session = Session(EditorConfig(strip_margin_ws=True))
        path = tmp_path / "out.txt"
        session.grid = Grid.from_lines(["", "   ab", "    c  "])
        session.save(path)
        assert path.read_text() == "ab\n c\n"

    def test_failed_save_leaves_grid(self, session, tmp_path):
        session.grid = Grid.from_lines(["ab  "])
        with pytest.raises(OSError):
            session.save(tmp_path / "no-such-dir" / "out.txt")
        assert session.grid.lines() == ["ab  "]
        assert session.can_undo is False

    def test_save_leaves_no_temp_files(self, session, tmp_path):
        path = tmp_path / "out.txt"
        session.grid = Grid.from_lines(["ab"])
        session.save(path)
        assert sorted(os.listdir(tmp_path)) == ["out.txt"]
