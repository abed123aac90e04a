"""Cursor movement and directory changes for the file manager."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from millerfm.context import Context
from millerfm.direntry import index_of_name
from millerfm.filesystem import is_root, resolve_symlink_recursively
from millerfm.layout import DisplaySettings
from millerfm.modes import SortingType
from millerfm.spawn import SpawnError, rule_for, spawn_async

if TYPE_CHECKING:
    from millerfm.context import ListingEnvironment

logger = logging.getLogger(__name__)


class NavigationMixin:
    """Mixin moving the cursor of the current tab around the filesystem."""

    def up(self, times: int = 1) -> None:
        for _ in range(times):
            if not self._step(-1):
                break

    def down(self, times: int = 1) -> None:
        for _ in range(times):
            if not self._step(1):
                break

    def _step(self, delta: int) -> bool:
        context: Context = self.context
        if context.inside_empty_dir:
            return False
        index = context.current_index + delta
        if index < 0 or index >= len(context.current_siblings):
            return False
        context.current_index = index
        context.refresh_current(self._environment, previous_shift=context.current_siblings_shift)
        return True

    def left(self) -> None:
        """Go to the parent directory with the cursor on the directory just left."""
        context: Context = self.context
        if is_root(context.parent_path):
            return
        env = self._environment
        old_parent = context.parent_path
        old_parent_shift = context.parent_siblings_shift

        context.input_mode = None
        context.parent_path = old_parent.parent
        context.current_siblings = env.list(context.parent_path)
        index = index_of_name(old_parent.name, context.current_siblings)
        context.current_index = index if index is not None else 0
        context.refresh_parent(env)
        context.refresh_current(env, previous_shift=old_parent_shift)

    def right(self) -> None:
        """Enter the directory under the cursor, or open the file under it."""
        context: Context = self.context
        entry = context.current_entry()
        path = context.current_path
        if entry is None or path is None:
            return
        if entry.is_dir or (entry.is_symlink and path.is_dir()):
            self._descend(path)
        else:
            self._open_file(path)

    def _descend(self, path: Path) -> None:
        context: Context = self.context
        env = self._environment
        old_current_shift = context.current_siblings_shift

        context.input_mode = None
        context.parent_path = path
        # The right column is cut to the viewport, so list the full directory
        context.current_siblings = env.list(path)
        context.current_index = 0
        context.refresh_parent(env)
        context.parent_siblings_shift = env.shift(
            context.parent_index, len(context.parent_siblings), old_current_shift
        )
        context.refresh_current(env, previous_shift=None)

    def _open_file(self, path: Path) -> None:
        target = resolve_symlink_recursively(path)
        command = rule_for(target, self.spawn_patterns)
        if command is None:
            self._notify(f"No rule to open {target.name}")
            return
        logger.info("Opening %s with %s", target, command.app)
        try:
            if command.background:
                spawn_async(command.app, command.args)
            else:
                self._run_external(command.argv)
        except SpawnError as err:
            self._notify(str(err))
            return
        self.update_current()

    def goto(self, path: Path) -> None:
        """Open ``path`` in the current tab, keeping sorting, selection and hidden flag."""
        path = path.expanduser()
        if not path.is_dir():
            self._notify(f"Not a directory: {path}")
            return
        self.tabs.current.context = Context.generate(path, self._environment)

    def update_current(self) -> None:
        """Re-read the current tab from the filesystem.

        Without a search the cursor keeps its index (clamped).  With a search
        the filter is re-applied to the fresh listing and the cursor stays on
        the same item when it still exists.
        """
        context: Context = self.context
        if not context.parent_path.is_dir():
            self._recover_missing_parent()
            return
        env = self._environment
        fresh = env.list(context.parent_path)
        search = context.search
        if search is None:
            context.current_siblings = fresh
        else:
            entry = context.current_entry()
            search.backup = fresh
            context.current_siblings = [item for item in fresh if search.matches(item.name)]
            self._locate(entry.name if entry is not None else None)
        context.refresh_parent(env)
        context.refresh_current(env, previous_shift=context.current_siblings_shift)

    def _recover_missing_parent(self) -> None:
        directory = self.context.parent_path
        while not directory.is_dir() and not is_root(directory):
            directory = directory.parent
        logger.warning("%s disappeared, moving to %s", self.context.parent_path, directory)
        self.tabs.current.context = Context.generate(directory, self._environment)

    def _locate(self, name: Optional[str]) -> None:
        """Put the cursor on ``name`` if it is listed, otherwise on top."""
        context: Context = self.context
        index = index_of_name(name, context.current_siblings) if name is not None else None
        context.current_index = index if index is not None else 0

    def _relist_keeping_name(self) -> None:
        context: Context = self.context
        entry = context.current_entry()
        env = self._environment
        fresh = env.list(context.parent_path)
        search = context.search
        if search is None:
            context.current_siblings = fresh
        else:
            search.backup = fresh
            context.current_siblings = [item for item in fresh if search.matches(item.name)]
        self._locate(entry.name if entry is not None else None)
        context.refresh_parent(env)
        context.refresh_current(env, previous_shift=None)

    def sort_with(self, sorting: SortingType) -> None:
        self.sorting = sorting
        self._relist_keeping_name()
        self._notify(f"Sorted {sorting.label}")

    def toggle_hidden(self) -> None:
        self.show_hidden = not self.show_hidden
        self._relist_keeping_name()

    def handle_resize(self, height: int, width: int) -> None:
        """Recompute the geometry and every tab's shifts and right column."""
        self.display = DisplaySettings.generate(
            height, width, self.scrolling_gap, self.columns_ratio
        )
        env: "ListingEnvironment" = self._environment
        for tab in self.tabs.tabs:
            tab.context.refresh_parent(env)
            tab.context.refresh_current(env, previous_shift=tab.context.current_siblings_shift)


__all__ = ["NavigationMixin"]
