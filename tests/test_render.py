"""Tests for screen layout and drawing."""

from __future__ import annotations

import curses
from pathlib import Path
from unittest.mock import patch

from conftest import keys
from millerfm.context import Context
from millerfm.input_mode import ChangeNameMode, CommandMode, SearchMode
from millerfm.layout import DisplaySettings, positions_from_ratio
from millerfm.render import current_path_text, input_prompt, render_manager
from millerfm.render_utils import Bar, entry_row_text


class FakeWindow:
    """Collects what would be drawn, keyed by row."""

    def __init__(self, height: int = 24, width: int = 80) -> None:
        self.height = height
        self.width = width
        self.rows = {}
        self.cursor = None

    def addstr(self, y, x, text, attr=0):
        row = self.rows.setdefault(y, [" "] * self.width)
        for offset, char in enumerate(text):
            if 0 <= x + offset < self.width:
                row[x + offset] = char

    def line(self, y: int) -> str:
        return "".join(self.rows.get(y, [])).rstrip()

    def text(self) -> str:
        return "\n".join(self.line(y) for y in range(self.height))

    def getmaxyx(self):
        return self.height, self.width

    def move(self, y, x):
        self.cursor = (y, x)

    def erase(self):
        self.rows = {}

    def refresh(self):
        pass


def test_positions_from_ratio():
    assert positions_from_ratio([2, 3, 3], 80) == [(0, 20), (21, 51), (52, 78)]
    display = DisplaySettings.generate(24, 80, 4, [2, 3, 3])
    assert display.column_effective_height == 20
    assert display.column_width(2) == 26
    assert not display.is_too_small
    assert DisplaySettings.generate(5, 80, 4, [1, 1, 1]).is_too_small


def test_entry_row_text_right_aligns_size():
    assert entry_row_text("notes", "12 B", 12) == "notes   12 B"
    assert entry_row_text("a_rather_long_name", "1 K", 10) == "a_..._name"
    assert entry_row_text("x", "1 B", 0) == ""


def test_bar_fills_from_both_ends():
    window = FakeWindow(height=1, width=20)
    bar = Bar(0, 20)
    assert bar.draw_left(window, "left") == 0
    assert bar.draw_right(window, "right") == 15
    assert bar.free_space == 20 - 6 - 7
    bar.draw_left(window, "x" * 50)
    assert bar.free_space == 0
    assert window.line(0) == "left  xxxxxxx  right"


def test_current_path_text_in_empty_directory():
    assert current_path_text(Context(parent_path=Path("/"))) == "/<?>"
    assert current_path_text(Context(parent_path=Path("/tmp"))) == "/tmp/<?>"
    context = Context(parent_path=Path("/tmp"), current_path=Path("/tmp/file"))
    assert current_path_text(context) == "/tmp/file"


def test_input_prompts():
    assert input_prompt(SearchMode(query="ab", cursor_index=1)) == ("/", "ab", 1)
    assert input_prompt(ChangeNameMode("new", 3)) == ("change to:", "new", 3)
    assert input_prompt(CommandMode("ls", 2)) == (":> ", "ls", 2)
    assert input_prompt(None) is None


@patch("curses.curs_set")
@patch("curses.has_colors", return_value=False)
def test_render_manager_draws_columns_and_status(mock_has_colors, mock_curs_set, tmp_path, make_manager):
    root = tmp_path.resolve()
    (root / "dir").mkdir()
    (root / "dir" / "inside").write_text("", encoding="utf-8")
    (root / "file.txt").write_text("preview line\n", encoding="utf-8")
    manager = make_manager(root)
    window = FakeWindow()

    render_manager(manager, window)
    screen = window.text()
    assert window.line(0).startswith(str(root / "dir"))
    assert "dir" in window.line(2)
    assert "inside" in window.line(2)
    assert "Siblings = 2" in window.line(23)
    assert window.line(23).startswith("drwx")
    mock_curs_set.assert_called_with(0)

    manager.down()
    render_manager(manager, window)
    assert "preview line" in window.text()
    assert "preview line" not in screen


@patch("curses.curs_set")
@patch("curses.has_colors", return_value=False)
def test_render_manager_prompt_and_cursor(mock_has_colors, mock_curs_set, tmp_path, make_manager):
    (tmp_path / "alpha").write_text("", encoding="utf-8")
    manager = make_manager(tmp_path)
    keys(manager, "/al")
    window = FakeWindow()
    render_manager(manager, window)
    assert window.line(23).startswith("/al")
    assert window.cursor == (23, 3)
    mock_curs_set.assert_called_with(1)


@patch("curses.curs_set")
@patch("curses.has_colors", return_value=False)
def test_render_manager_candidates_and_confirmation(mock_has_colors, mock_curs_set, tmp_path, make_manager):
    (tmp_path / "alpha").write_text("", encoding="utf-8")
    manager = make_manager(tmp_path)
    keys(manager, "s")
    window = FakeWindow()
    render_manager(manager, window)
    screen = window.text()
    assert "Sort entries Lexicographically" in screen
    assert "Sort entries TimeModified" in screen

    manager.resolver.reset()
    keys(manager, "dd")
    render_manager(manager, window)
    assert window.line(23) == "Remove alpha? (y/n)"


@patch("curses.curs_set")
@patch("curses.has_colors", return_value=False)
def test_render_manager_selection_mark_and_tabs(mock_has_colors, mock_curs_set, tmp_path, make_manager):
    (tmp_path / "alpha").write_text("", encoding="utf-8")
    manager = make_manager(tmp_path)
    keys(manager, "vtn")
    window = FakeWindow()
    render_manager(manager, window)
    assert "▒ alpha" in window.line(2)
    assert window.line(0).endswith(f"<0:{tmp_path.name}><1:{tmp_path.name}>")
    assert "Selection not empty" in window.line(23)


def test_render_manager_small_terminal(tmp_path, make_manager):
    manager = make_manager(tmp_path)
    manager.handle_resize(4, 10)
    window = FakeWindow(4, 10)
    render_manager(manager, window)
    assert window.line(0) == "Terminal t"


def test_resize_key_uses_window_size(tmp_path, make_manager):
    manager = make_manager(tmp_path)
    manager._stdscr = FakeWindow(30, 100)
    manager.handle_key(curses.KEY_RESIZE)
    assert manager.display.height == 30
    assert manager.display.width == 100
