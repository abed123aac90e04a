"""Convert the file manager state into characters on the screen.

Every function receives the ``FileManager`` (or one of its parts) and the
curses window, reads the state and draws it.  Nothing here changes the state.

Screen layout, top to bottom: the path bar, the top border, the three columns,
the bottom border and the status bar.  Pending command candidates are drawn
over the lower rows of the columns.
"""

from __future__ import annotations

import curses
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from millerfm.colors import ColorSystem, Paint
from millerfm.commands import MAX_COMBINATION_LEN, Match
from millerfm.context import Context
from millerfm.direntry import DirEntry
from millerfm.formatting import human_size
from millerfm.input_mode import ChangeNameMode, CommandMode, SearchMode
from millerfm.layout import DisplaySettings
from millerfm.right_column import PreviewColumn, SiblingsColumn
from millerfm.render_utils import (
    BOX_HORIZONTAL,
    SELECTION_MARK,
    Bar,
    draw_column_separator,
    draw_frame,
    entry_row_text,
    safe_addstr,
)

if TYPE_CHECKING:
    from millerfm.manager import FileManager

BORDER_PAINT = Paint("white")
PATH_PAINT = Paint("blue", bold=True)
INFO_PAINT = Paint("blue")
SIZE_PAINT = Paint("green")
WARNING_PAINT = Paint("red", bold=True)
EMPTY_PAINT = Paint("black", "red", bold=True)
PROMPT_PAINT = Paint("green", bold=True)
INPUT_PAINT = Paint("magenta")
MATCH_PAINT = Paint("green")
EMPTY_TEXT = "empty"

SEARCH_PREFIX = "/"
CHANGE_NAME_PREFIX = "change to:"
COMMAND_PREFIX = ":> "


def render_manager(manager: "FileManager", stdscr: "curses._CursesWindow") -> None:  # type: ignore[name-defined]
    """Draw the whole screen for the current tab."""
    colors = manager.colors or ColorSystem()
    display = manager.display
    context = manager.context
    stdscr.erase()

    if display.is_too_small:
        safe_addstr(stdscr, 0, 0, "Terminal too small.")
        stdscr.refresh()
        return

    render_borders(stdscr, colors, display)
    render_columns(stdscr, colors, display, context, manager.paint_settings.preview)
    render_top_bar(stdscr, colors, manager)
    cursor = render_bottom_bar(stdscr, colors, manager)
    render_candidates(stdscr, colors, display, manager.resolver.candidates(),
                      manager.resolver.completion_count)

    try:
        curses.curs_set(1 if cursor is not None else 0)
        if cursor is not None:
            stdscr.move(*cursor)
    except curses.error:
        pass
    stdscr.refresh()


def render_borders(stdscr, colors: ColorSystem, display: DisplaySettings) -> None:
    attr = colors.attr(BORDER_PAINT)
    draw_frame(stdscr, 1, 0, display.height - 2, display.width, attr)
    for begin, _ in display.columns_coord[1:]:
        draw_column_separator(stdscr, begin, 1, display.height - 2, attr)


def render_columns(
    stdscr,
    colors: ColorSystem,
    display: DisplaySettings,
    context: Context,
    preview_paint: Paint,
) -> None:
    render_entries(stdscr, colors, display, 0, context.parent_siblings,
                   context.parent_index, context.parent_siblings_shift)
    if context.inside_empty_dir:
        render_empty_sign(stdscr, colors, display, 1)
    else:
        render_entries(stdscr, colors, display, 1, context.current_siblings,
                       context.current_index, context.current_siblings_shift)

    right = context.right_column
    if isinstance(right, SiblingsColumn):
        if right.entries:
            render_entries(stdscr, colors, display, 2, right.entries, None, 0)
        else:
            render_empty_sign(stdscr, colors, display, 2)
    elif isinstance(right, PreviewColumn):
        begin, _ = display.columns_coord[2]
        attr = colors.attr(preview_paint)
        for offset, line in enumerate(right.lines[: display.column_effective_height]):
            safe_addstr(stdscr, display.entries_display_begin + offset, begin + 1, line, attr)


def render_entries(
    stdscr,
    colors: ColorSystem,
    display: DisplaySettings,
    column_index: int,
    entries: Sequence[DirEntry],
    cursor_index: Optional[int],
    shift: int,
) -> None:
    visible = entries[shift: shift + display.column_effective_height]
    for offset, entry in enumerate(visible):
        under_cursor = cursor_index is not None and cursor_index == shift + offset
        render_entry(stdscr, colors, display, column_index, offset, entry, under_cursor)


def render_entry(
    stdscr,
    colors: ColorSystem,
    display: DisplaySettings,
    column_index: int,
    row: int,
    entry: DirEntry,
    under_cursor: bool,
) -> None:
    y = display.entries_display_begin + row
    begin, end = display.columns_coord[column_index]
    if entry.is_selected:
        safe_addstr(stdscr, y, begin + 1, SELECTION_MARK + " ", colors.attr(WARNING_PAINT))
        begin += 2
    paint = entry.paint.reversed() if under_cursor else entry.paint
    text = entry_row_text(entry.name, human_size(entry.size), end - begin)
    safe_addstr(stdscr, y, begin + 1, text, colors.attr(paint))


def render_empty_sign(stdscr, colors: ColorSystem, display: DisplaySettings, column_index: int) -> None:
    begin, _ = display.columns_coord[column_index]
    safe_addstr(stdscr, display.entries_display_begin, begin + 1, EMPTY_TEXT, colors.attr(EMPTY_PAINT))


def current_path_text(context: Context) -> str:
    if context.current_path is None:
        return f"{context.parent_path}/<?>".replace("//", "/")
    return str(context.current_path)


def render_top_bar(stdscr, colors: ColorSystem, manager: "FileManager") -> None:
    bar = Bar(0, manager.display.width)
    tabs = manager.tabs
    if len(tabs) > 1:
        for index in reversed(range(len(tabs))):
            paint = PATH_PAINT if index == tabs.current_index else INFO_PAINT
            bar.draw_right(stdscr, f"<{index}:{tabs.tabs[index].name}>", 0, colors.attr(paint))
    bar.draw_left(stdscr, current_path_text(manager.context), 2, colors.attr(PATH_PAINT))


def input_prompt(mode) -> Optional[Tuple[str, str, Optional[int]]]:
    """Return ``(prefix, text, cursor)`` for the input mode shown in the status bar."""
    if isinstance(mode, SearchMode):
        return SEARCH_PREFIX, mode.query, mode.cursor_index
    if isinstance(mode, ChangeNameMode):
        return CHANGE_NAME_PREFIX, mode.new_name, mode.cursor_index
    if isinstance(mode, CommandMode):
        return COMMAND_PREFIX, mode.text, mode.cursor_index
    return None


def render_bottom_bar(stdscr, colors: ColorSystem, manager: "FileManager") -> Optional[Tuple[int, int]]:
    """Draw the status bar; return where the text cursor goes, if shown."""
    display = manager.display
    context = manager.context
    y = display.height - 1
    bar = Bar(y, display.width)
    cursor: Optional[Tuple[int, int]] = None

    if manager.pending_action is not None:
        bar.draw_left(stdscr, f"{manager.pending_action.message} (y/n)", 2, colors.attr(WARNING_PAINT))
        return None

    if manager.notification is not None and not manager.notification.has_finished():
        bar.draw_right(stdscr, manager.notification.text, 2, colors.attr(SIZE_PAINT))
    for text in manager.transfers.progress_texts():
        bar.draw_right(stdscr, text, 2, colors.attr(SIZE_PAINT))

    prompt = input_prompt(context.input_mode)
    if prompt is not None:
        prefix, text, cursor_index = prompt
        x = bar.draw_left(stdscr, prefix, 0, colors.attr(PROMPT_PAINT))
        bar.draw_left(stdscr, text, 2, colors.attr(INPUT_PAINT))
        if cursor_index is not None:
            cursor = (y, min(x + len(prefix) + cursor_index, display.width - 1))
        if not isinstance(context.input_mode, SearchMode) or cursor is not None:
            return cursor

    if context.current_permissions is not None:
        bar.draw_left(stdscr, context.current_permissions, 2, colors.attr(INFO_PAINT))
    if context.additional_entry_info is not None:
        bar.draw_left(stdscr, context.additional_entry_info, 2, colors.attr(INFO_PAINT))
    bar.draw_left(stdscr, f"Siblings = {len(context.current_siblings)}", 2, colors.attr(INFO_PAINT))
    if context.cumulative_size_text is not None:
        bar.draw_left(stdscr, context.cumulative_size_text, 2, colors.attr(SIZE_PAINT))
    if not manager.selection.is_empty():
        bar.draw_left(stdscr, "Selection not empty", 2, colors.attr(WARNING_PAINT))
    return cursor


def render_candidates(
    stdscr,
    colors: ColorSystem,
    display: DisplaySettings,
    matches: List[Match],
    completion_count: int,
) -> None:
    """List the combinations still reachable from the keys typed so far."""
    if not matches:
        return
    bottom = display.height - 2
    top = max(bottom - len(matches) - 1, 1)
    border = colors.attr(MATCH_PAINT)
    safe_addstr(stdscr, top, 0, BOX_HORIZONTAL * display.width, border)
    safe_addstr(stdscr, bottom, 0, BOX_HORIZONTAL * display.width, border)

    for offset, match in enumerate(matches[: bottom - top - 1]):
        y = top + 1 + offset
        label = match.label
        typed, rest = label[:completion_count], label[completion_count:]
        safe_addstr(stdscr, y, 0, " " * display.width)
        safe_addstr(stdscr, y, 0, typed, colors.attr(MATCH_PAINT.with_bold()))
        safe_addstr(stdscr, y, len(typed), rest, border)
        column = MAX_COMBINATION_LEN + 2
        safe_addstr(stdscr, y, column, match.command.description[: display.width - column - 1], border)


__all__ = [
    "current_path_text",
    "input_prompt",
    "render_manager",
]
