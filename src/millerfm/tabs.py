"""Tabs, each holding its own navigation context."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import List

from millerfm.context import Context
from millerfm.filesystem import is_root

DEFAULT_MAX_TABS = 8


def tab_name_from_path(path: Path) -> str:
    if is_root(path):
        return str(path)
    return path.name


@dataclass
class Tab:
    context: Context

    @property
    def name(self) -> str:
        return tab_name_from_path(self.context.parent_path)


class TabManager:
    """An ordered list of tabs and the index of the visible one."""

    def __init__(self, first: Tab, max_tabs: int = DEFAULT_MAX_TABS) -> None:
        self.tabs: List[Tab] = [first]
        self.current_index = 0
        self.max_tabs = max(max_tabs, 1)

    def __len__(self) -> int:
        return len(self.tabs)

    @property
    def current(self) -> Tab:
        return self.tabs[self.current_index]

    def is_empty(self) -> bool:
        return not self.tabs

    def new_tab(self) -> bool:
        """Clone the current tab right after it and switch to the clone.

        Returns False when the maximum number of tabs is already open.  The
        clone keeps the input mode of the original; the caller drops it.
        """
        if len(self.tabs) >= self.max_tabs:
            return False
        clone = copy.deepcopy(self.current)
        self.tabs.insert(self.current_index + 1, clone)
        self.current_index += 1
        return True

    def close_tab(self) -> bool:
        """Close the current tab and return True when none are left."""
        if self.tabs:
            del self.tabs[self.current_index]
        if not self.tabs:
            self.current_index = 0
            return True
        self.current_index = min(self.current_index, len(self.tabs) - 1)
        return False

    def next_tab(self) -> None:
        if self.tabs:
            self.current_index = (self.current_index + 1) % len(self.tabs)

    def previous_tab(self) -> None:
        if self.tabs:
            self.current_index = (self.current_index - 1) % len(self.tabs)


__all__ = ["DEFAULT_MAX_TABS", "Tab", "TabManager", "tab_name_from_path"]
