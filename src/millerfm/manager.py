"""Core file manager logic."""

from __future__ import annotations

import curses
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from millerfm import config as config_module
from millerfm.colors import ColorSystem, PaintSettings, init_colors
from millerfm.commands import CommandResolver, default_bindings
from millerfm.context import Context, ListingEnvironment
from millerfm.file_operations import FileOperationsMixin
from millerfm.input_handlers import InputHandlersMixin, _PendingAction
from millerfm.layout import DEFAULT_HEIGHT, DEFAULT_WIDTH, DisplaySettings
from millerfm.navigation import NavigationMixin
from millerfm.notification import DEFAULT_SHOW_TIME_MS, Notification
from millerfm.render import render_manager
from millerfm.selection import SelectionSet
from millerfm.spawn import SpawnError, generate_spawn_patterns, spawn_and_wait
from millerfm.tabs import Tab, TabManager
from millerfm.transfers import TransferManager

logger = logging.getLogger(__name__)


class FileManagerError(Exception):
    """Raised when the file manager cannot start."""


class FileManager(NavigationMixin, FileOperationsMixin, InputHandlersMixin):
    """Three-column file manager driven by a curses event loop.

    Responsibilities are split between mixins:
    - NavigationMixin: cursor movement, directory changes, sorting, resizing
    - FileOperationsMixin: selection, yank/cut/paste, removal, sizes
    - InputHandlersMixin: key routing, command execution, input modes
    """

    def __init__(self, start_path: Path, config: Optional[Dict[str, Any]] = None) -> None:
        config = config_module.load_config() if config is None else config_module.with_defaults(config)
        general = config["general"]
        layout = config["layout"]
        transfers = config["transfers"]

        self.paint_settings = PaintSettings.from_config(config_module.get_color_names(config))
        self.sorting = config_module.get_sorting(config)
        self.show_hidden = bool(general.get("show_hidden", False))
        self.scrolling_gap = int(layout.get("scrolling_gap", 4))
        self.columns_ratio = config_module.get_columns_ratio(config)
        self.done_notification_ms = int(transfers.get("done_notification_ms", 2000))
        self.active_poll_ms = int(transfers.get("active_poll_ms", 500))
        self.idle_poll_ms = int(transfers.get("idle_poll_ms", 5000))
        self.display = DisplaySettings.generate(
            DEFAULT_HEIGHT, DEFAULT_WIDTH, self.scrolling_gap, self.columns_ratio
        )

        self.selection = SelectionSet()
        self.transfers = TransferManager()
        self.spawn_patterns = generate_spawn_patterns(config_module.get_openers(config))
        self.resolver = CommandResolver(default_bindings(config_module.get_bookmarks(config)))

        self.notification: Optional[Notification] = None
        self.pending_action: Optional[_PendingAction] = None
        self.terminated = False
        self.colors: Optional[ColorSystem] = None
        self._stdscr: Optional["curses._CursesWindow"] = None  # type: ignore[name-defined]

        start = start_path.expanduser().resolve()
        self.tabs = TabManager(
            Tab(Context.generate(start, self._environment)),
            max_tabs=int(general.get("max_tabs", 8)),
        )
        self.last_path = start

    @property
    def context(self) -> Context:
        return self.tabs.current.context

    @property
    def _environment(self) -> ListingEnvironment:
        return ListingEnvironment(
            display=self.display,
            paint_settings=self.paint_settings,
            sorting=self.sorting,
            show_hidden=self.show_hidden,
            selected=self.selection.paths,
        )

    def browse(self) -> Path:
        """Launch the UI and return the directory of the last visible tab."""
        try:
            return curses.wrapper(self._loop)
        except curses.error as err:
            raise FileManagerError("Failed to initialise curses UI.") from err

    def _loop(self, stdscr: "curses._CursesWindow") -> Path:  # type: ignore[name-defined]
        """Main curses event loop."""
        self._stdscr = stdscr
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        stdscr.keypad(True)
        init_colors()
        self.colors = ColorSystem()
        self.handle_resize(*stdscr.getmaxyx())

        try:
            while not self.terminated:
                timeout = self.poll_transfers()
                self._expire_notification()
                render_manager(self, stdscr)
                stdscr.timeout(timeout)
                key = stdscr.getch()
                if key == -1:
                    continue
                if not self.handle_key(key):
                    logger.debug("Unhandled key code %d", key)
        finally:
            self._stdscr = None
        return self.last_path

    def terminate(self) -> None:
        self.last_path = self.context.parent_path
        self.terminated = True

    def _notify(self, text: str, show_time_ms: int = DEFAULT_SHOW_TIME_MS) -> None:
        self.notification = Notification(text, show_time_ms)

    def _expire_notification(self) -> None:
        if self.notification is not None and self.notification.has_finished():
            self.notification = None

    def _run_external(self, command: List[str]) -> None:
        """Temporarily suspend curses to run an external command."""
        if self._stdscr is None:
            self._notify("Cannot run external command.")
            return
        curses.endwin()
        try:
            spawn_and_wait(command[0], command[1:])
        except SpawnError as err:
            self._notify(str(err))
        finally:
            self._stdscr.refresh()

    # Tabs

    def new_tab(self) -> None:
        if not self.tabs.new_tab():
            self._notify(f"At most {self.tabs.max_tabs} tabs")
            return
        # the clone starts unfiltered and outside any input bar
        if self.context.search is not None:
            self._drop_search()
        else:
            self.context.input_mode = None

    def close_tab(self) -> None:
        self.last_path = self.context.parent_path
        if self.tabs.close_tab():
            self.terminated = True
            return
        self.resolver.reset()
        self.update_current()

    def next_tab(self) -> None:
        if len(self.tabs) > 1:
            self.tabs.next_tab()
            self.update_current()

    def previous_tab(self) -> None:
        if len(self.tabs) > 1:
            self.tabs.previous_tab()
            self.update_current()


__all__ = ["FileManager", "FileManagerError"]
