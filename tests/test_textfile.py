"""
Tests for plain text persistence.
"""

import os
import stat

import pytest

from asciidraw.buffer import textfile
from asciidraw.buffer.grid import Grid
from asciidraw.buffer.textfile import (
    format_rows,
    load_grid,
    read_rows,
    save_grid,
    write_text_atomic,
)


class TestReadRows:
    """Test reading diagrams."""

    def test_lf(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_bytes(b"ab\ncd\n")
        assert read_rows(path) == [["a", "b"], ["c", "d"]]

    def test_crlf(self, diagram_file):
        assert ["".join(row) for row in read_rows(diagram_file)] == ["+--+", "|  |", "+--+"]

    def test_missing_final_newline(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_bytes(b"ab\ncd")
        assert read_rows(path) == [["a", "b"], ["c", "d"]]

    def test_blank_lines_kept(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_bytes(b"\n\nx\n")
        assert read_rows(path) == [[], [], ["x"]]

    def test_utf8(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("a─b\n", encoding="utf-8")
        assert read_rows(path) == [["a", "─", "b"]]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_rows(tmp_path / "missing.txt")


class TestWrite:
    """Test writing diagrams."""

    def test_format_rows(self):
        assert format_rows([["a"], [], ["b", "c"]]) == "a\n\nbc\n"
        assert format_rows([]) == ""

    def test_save_and_load(self, tmp_path, box_grid):
        path = tmp_path / "box.txt"
        assert save_grid(box_grid, path) == 3
        assert load_grid(path) == box_grid

    def test_atomic_write_replaces(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("old\n")
        write_text_atomic(path, "new\n")
        assert path.read_text() == "new\n"
        assert sorted(os.listdir(tmp_path)) == ["a.txt"]

    def test_preserves_mode(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("old\n")
        os.chmod(path, 0o640)
        write_text_atomic(path, "new\n")
        assert stat.S_IMODE(path.stat().st_mode) == 0o640

    def test_failed_replace_keeps_target(self, tmp_path, monkeypatch):
        """A failure before the rename leaves the old file and no temp file."""
        path = tmp_path / "a.txt"
        path.write_text("old\n")

        def fail(src, dst):
            raise PermissionError("replace failed")

        monkeypatch.setattr(textfile.os, "replace", fail)
        with pytest.raises(PermissionError):
            write_text_atomic(path, "new\n")

        assert path.read_text() == "old\n"
        assert sorted(os.listdir(tmp_path)) == ["a.txt"]

    def test_grid_text_round_trip(self, tmp_path):
        grid = Grid.from_text("+-+\n| |\n+-+\n")
        path = tmp_path / "g.txt"
        save_grid(grid, path)
        assert path.read_text() == grid.render()
