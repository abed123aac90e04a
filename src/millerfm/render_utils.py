"""Utility functions for rendering."""

from __future__ import annotations

import curses

from millerfm.formatting import truncate_with_delimiter

# Box drawing characters
BOX_TOP_LEFT = "┌"
BOX_TOP_RIGHT = "┐"
BOX_BOTTOM_LEFT = "└"
BOX_BOTTOM_RIGHT = "┘"
BOX_HORIZONTAL = "─"
BOX_VERTICAL = "│"
BOX_TEE_DOWN = "┬"
BOX_TEE_UP = "┴"
SELECTION_MARK = "▒"


def safe_addstr(
    stdscr: "curses._CursesWindow",  # type: ignore[name-defined]
    y: int,
    x: int,
    text: str,
    attr: int = curses.A_NORMAL,
) -> None:
    """Write ``text`` ignoring the error curses raises at the last cell."""
    if not text:
        return
    try:
        stdscr.addstr(y, x, text, attr)
    except curses.error:
        pass


class Bar:
    """A one-line strip filled with texts from both ends towards the middle."""

    def __init__(self, y: int, width: int) -> None:
        self.y = y
        self.ready_left = 0
        self.ready_right = width

    @property
    def free_space(self) -> int:
        return max(self.ready_right - self.ready_left, 0)

    def draw_left(self, stdscr, text: str, padding: int = 2, attr: int = curses.A_NORMAL) -> int:
        """Draw at the left edge; return the x where the text starts."""
        text = text[: self.free_space]
        x = self.ready_left
        safe_addstr(stdscr, self.y, x, text, attr)
        self.ready_left += len(text) + padding
        return x

    def draw_right(self, stdscr, text: str, padding: int = 2, attr: int = curses.A_NORMAL) -> int:
        text = text[: self.free_space]
        x = self.ready_right - len(text)
        safe_addstr(stdscr, self.y, x, text, attr)
        self.ready_right -= len(text) + padding
        return x


def draw_frame(
    stdscr: "curses._CursesWindow",  # type: ignore[name-defined]
    origin_y: int,
    origin_x: int,
    height: int,
    width: int,
    attr: int = curses.A_NORMAL,
) -> None:
    """Draw a rectangular frame."""
    if height < 2 or width < 2:
        return

    top = origin_y
    bottom = origin_y + height - 1
    left = origin_x
    right = origin_x + width - 1

    safe_addstr(stdscr, top, left, BOX_TOP_LEFT + BOX_HORIZONTAL * (width - 2) + BOX_TOP_RIGHT, attr)
    safe_addstr(stdscr, bottom, left, BOX_BOTTOM_LEFT + BOX_HORIZONTAL * (width - 2) + BOX_BOTTOM_RIGHT, attr)
    for y_axis in range(top + 1, bottom):
        safe_addstr(stdscr, y_axis, left, BOX_VERTICAL, attr)
        safe_addstr(stdscr, y_axis, right, BOX_VERTICAL, attr)


def draw_column_separator(
    stdscr: "curses._CursesWindow",  # type: ignore[name-defined]
    x: int,
    top: int,
    bottom: int,
    attr: int = curses.A_NORMAL,
) -> None:
    """Split a frame vertically at ``x`` between rows ``top`` and ``bottom``."""
    safe_addstr(stdscr, top, x, BOX_TEE_DOWN, attr)
    for y_axis in range(top + 1, bottom):
        safe_addstr(stdscr, y_axis, x, BOX_VERTICAL, attr)
    safe_addstr(stdscr, bottom, x, BOX_TEE_UP, attr)


def entry_row_text(name: str, size_text: str, width: int) -> str:
    """Lay out a listing row of exactly ``width`` cells.

    The size is right-aligned; when name and size do not both fit the size is
    dropped and the name is truncated.
    """
    if width <= 0:
        return ""
    gap = width - len(name) - len(size_text)
    if gap < 1:
        return truncate_with_delimiter(name, width).ljust(width)
    return name + " " * gap + size_text


__all__ = [
    "BOX_HORIZONTAL",
    "BOX_VERTICAL",
    "Bar",
    "SELECTION_MARK",
    "draw_column_separator",
    "draw_frame",
    "entry_row_text",
    "safe_addstr",
]
