"""Input handling methods for the file manager."""

from __future__ import annotations

import curses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from millerfm.commands import Action, Combination, Command, SpecialKey
from millerfm.direntry import DirEntry, index_of_name
from millerfm.input_mode import (
    ChangeNameMode,
    CommandMode,
    SearchMode,
    insert_at,
    is_editing,
    mode_text,
    move_left,
    move_right,
    remove_before,
    remove_under,
    set_mode_text,
)
from millerfm.spawn import SpawnError, execute_command_from

logger = logging.getLogger(__name__)

KEY_ESCAPE = 27
KEY_TAB = 9
ENTER_KEYS = (curses.KEY_ENTER, ord("\n"), ord("\r"))
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)


@dataclass
class _PendingAction:
    """A y/n question waiting for an answer."""

    message: str
    confirm_action: Callable[[], None]
    cancel_message: str = "Cancelled."


def combination_from_key(key_code: int) -> Optional[Combination]:
    """Translate a curses key code into something the resolver understands."""
    if key_code == KEY_TAB:
        return SpecialKey.TAB
    if key_code == curses.KEY_BTAB:
        return SpecialKey.SHIFT_TAB
    if 0 <= key_code <= 255 and chr(key_code).isprintable():
        return chr(key_code)
    return None


class InputHandlersMixin:
    """Mixin providing all keyboard input handlers."""

    def handle_key(self, key_code: int) -> bool:
        """Route one key press; return False when nothing used it."""
        if key_code == curses.KEY_RESIZE:
            if self._stdscr is not None:
                self.handle_resize(*self._stdscr.getmaxyx())
            return True
        if self.pending_action is not None:
            return self._handle_confirmation_key(key_code)
        if is_editing(self.context.input_mode):
            return self._handle_input_mode_key(key_code)
        if key_code == KEY_ESCAPE:
            self.resolver.reset()
            if self.context.search is not None:
                self.cancel_input()
            return True

        combination = combination_from_key(key_code)
        if combination is None:
            self.resolver.reset()
            return False
        command = self.resolver.feed(combination)
        if command is not None:
            self.execute(command)
        return True

    def execute(self, command: Command) -> None:
        """Run ``command``; filesystem and process errors become notifications."""
        try:
            self._dispatch(command)
        except (OSError, SpawnError) as err:
            logger.error("%s failed: %s", command.action.value, err)
            self._notify(str(err))

    def _dispatch(self, command: Command) -> None:
        action = command.action
        if action is Action.TERMINATE:
            self.terminate()
        elif action is Action.GOTO:
            self.goto(Path(str(command.argument)))
        elif action is Action.UP:
            self.up(int(command.argument or 1))
        elif action is Action.DOWN:
            self.down(int(command.argument or 1))
        elif action is Action.LEFT:
            self.left()
        elif action is Action.RIGHT:
            self.right()
        elif action is Action.SORT:
            self.sort_with(command.argument)
        elif action is Action.REMOVE:
            self.remove_selected()
        elif action is Action.CUT:
            self.cut_selected()
        elif action is Action.YANK:
            self.yank_selected()
        elif action is Action.PASTE:
            self.paste_into_current()
        elif action is Action.UPDATE:
            self.update_current()
        elif action is Action.CUMULATIVE_SIZE:
            self.get_cumulative_size()
        elif action is Action.SELECT_UNDER_CURSOR:
            self.select_under_cursor()
        elif action is Action.INVERT_SELECTION:
            self.invert_selection()
        elif action is Action.CLEAR_SELECTION:
            self.clear_selection()
        elif action is Action.TOGGLE_HIDDEN:
            self.toggle_hidden()
        elif action is Action.NEW_TAB:
            self.new_tab()
        elif action is Action.CLOSE_TAB:
            self.close_tab()
        elif action is Action.NEXT_TAB:
            self.next_tab()
        elif action is Action.PREVIOUS_TAB:
            self.previous_tab()
        elif action is Action.CHANGE_CURRENT_NAME:
            self.start_changing_current_name()
        elif action is Action.ENTER_SEARCH_MODE:
            self.start_search()
        elif action is Action.ENTER_COMMAND_MODE:
            self.start_command()

    def _handle_confirmation_key(self, key_code: int) -> bool:
        """Handle y/n confirmation."""
        if self.pending_action is None:
            return False

        pending = self.pending_action
        if key_code in (ord("y"), ord("Y")):
            self.pending_action = None
            pending.confirm_action()
            return True
        if key_code in (ord("n"), ord("N"), KEY_ESCAPE):
            self.pending_action = None
            self._notify(pending.cancel_message)
            return True
        return False

    def _request_confirmation(
        self,
        message: str,
        action: Callable[[], None],
        cancel_message: str = "Cancelled.",
    ) -> None:
        """Ask a y/n question before running ``action``."""
        self.resolver.reset()
        self.pending_action = _PendingAction(
            message=message,
            confirm_action=action,
            cancel_message=cancel_message,
        )

    def _handle_input_mode_key(self, key_code: int) -> bool:
        """Shared handler for the search, rename and command line buffers."""
        if key_code == KEY_ESCAPE:
            self.cancel_input()
            return True
        if key_code in ENTER_KEYS:
            self.confirm_input()
            return True
        if key_code in BACKSPACE_KEYS:
            self.remove_input_before_cursor()
            return True
        if key_code == curses.KEY_DC:
            self.remove_input_under_cursor()
            return True
        if key_code == curses.KEY_LEFT:
            self.move_input_cursor_left()
            return True
        if key_code == curses.KEY_RIGHT:
            self.move_input_cursor_right()
            return True
        if key_code in (KEY_TAB, curses.KEY_BTAB):
            # tab switching stays available; the input bar waits in its tab
            command = self.resolver.feed(combination_from_key(key_code))
            if command is not None:
                self.execute(command)
            return True
        if 0 <= key_code <= 255 and chr(key_code).isprintable():
            self.insert_input(chr(key_code))
            return True
        return False

    # Input modes

    def start_search(self) -> None:
        """Start filtering the current listing, or resume editing the query."""
        context = self.context
        search = context.search
        if search is not None:
            search.cursor_index = len(search.query)
            return
        context.input_mode = SearchMode(backup=list(context.current_siblings))

    def start_changing_current_name(self) -> None:
        context = self.context
        entry = context.current_entry()
        if entry is None:
            return
        self._drop_search()
        context.input_mode = ChangeNameMode(new_name=entry.name, cursor_index=len(entry.name))

    def start_command(self) -> None:
        self._drop_search()
        self.context.input_mode = CommandMode()

    def insert_input(self, char: str) -> None:
        mode = self.context.input_mode
        if mode is None:
            return
        old_text = mode_text(mode)
        at_edge = mode.cursor_index in (0, len(old_text))
        text, cursor = insert_at(old_text, mode.cursor_index, char)
        set_mode_text(mode, text, cursor)
        if isinstance(mode, SearchMode):
            # A longer query added at either end can only match a subset
            source = self.context.current_siblings if at_edge else mode.backup
            self._apply_search(mode, source)

    def remove_input_before_cursor(self) -> None:
        mode = self.context.input_mode
        if mode is None:
            return
        text, cursor = remove_before(mode_text(mode), mode.cursor_index)
        set_mode_text(mode, text, cursor)
        if isinstance(mode, SearchMode):
            self._apply_search(mode, mode.backup)

    def remove_input_under_cursor(self) -> None:
        mode = self.context.input_mode
        if mode is None:
            return
        text, cursor = remove_under(mode_text(mode), mode.cursor_index)
        set_mode_text(mode, text, cursor)
        if isinstance(mode, SearchMode):
            self._apply_search(mode, mode.backup)

    def move_input_cursor_left(self) -> None:
        mode = self.context.input_mode
        if mode is not None:
            mode.cursor_index = move_left(mode_text(mode), mode.cursor_index)

    def move_input_cursor_right(self) -> None:
        mode = self.context.input_mode
        if mode is not None:
            mode.cursor_index = move_right(mode_text(mode), mode.cursor_index)

    def _apply_search(self, search: SearchMode, source: List[DirEntry]) -> None:
        context = self.context
        entry = context.current_entry()
        context.current_siblings = [item for item in source if search.matches(item.name)]
        index = index_of_name(entry.name, context.current_siblings) if entry is not None else None
        context.current_index = index if index is not None else 0
        context.refresh_current(self._environment, previous_shift=None)

    def _drop_search(self) -> None:
        """Restore the unfiltered listing, keeping the cursor on the same item."""
        context = self.context
        search = context.search
        if search is None:
            return
        entry = context.current_entry()
        context.input_mode = None
        context.current_siblings = search.backup
        index = index_of_name(entry.name, context.current_siblings) if entry is not None else None
        context.current_index = index if index is not None else 0
        context.refresh_current(self._environment, previous_shift=None)

    def confirm_input(self) -> None:
        context = self.context
        mode = context.input_mode
        if isinstance(mode, SearchMode):
            if mode.query:
                mode.cursor_index = None
            else:
                self._drop_search()
        elif isinstance(mode, ChangeNameMode):
            context.input_mode = None
            self.rename_current(mode.new_name)
        elif isinstance(mode, CommandMode):
            context.input_mode = None
            self.run_command(mode.text)

    def cancel_input(self) -> None:
        """Leave the input mode, restoring the listing a search filtered."""
        if self.context.search is not None:
            self._drop_search()
        else:
            self.context.input_mode = None

    def rename_current(self, new_name: str) -> None:
        context = self.context
        path = context.current_path
        if path is None or not new_name or new_name == path.name:
            return
        if "/" in new_name or new_name in (".", ".."):
            self._notify(f"Invalid name: {new_name}")
            return
        target = path.with_name(new_name)
        if os.path.lexists(target):
            self._notify(f"{new_name} already exists")
            return
        try:
            path.rename(target)
        except OSError as err:
            logger.error("Failed to rename %s to %s: %s", path, target, err)
            self._notify(f"Rename failed: {err}")
            return
        logger.info("Renamed %s to %s", path, target)
        if path in self.selection:
            self.selection.remove(path)
            self.selection.add(target)
        self.update_current()
        self._locate(new_name)
        context.refresh_current(self._environment, previous_shift=context.current_siblings_shift)

    def run_command(self, text: str) -> None:
        """Start ``text`` through the shell inside the current directory."""
        command = text.strip()
        if not command:
            return
        try:
            execute_command_from(self.context.parent_path, command)
        except SpawnError as err:
            self._notify(str(err))
            return
        self._notify(f"Started: {command}")


__all__ = ["InputHandlersMixin", "combination_from_key"]
