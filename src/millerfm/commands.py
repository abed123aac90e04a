"""Key combinations, the commands they trigger, and incremental matching."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from millerfm.modes import SortingType

MAX_COMBINATION_LEN = 5
FAST_STEP = 5


class Action(Enum):
    TERMINATE = "terminate"
    GOTO = "goto"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    SORT = "sort"
    REMOVE = "remove"
    CUT = "cut"
    YANK = "yank"
    PASTE = "paste"
    UPDATE = "update"
    CUMULATIVE_SIZE = "cumulative_size"
    SELECT_UNDER_CURSOR = "select_under_cursor"
    INVERT_SELECTION = "invert_selection"
    CLEAR_SELECTION = "clear_selection"
    TOGGLE_HIDDEN = "toggle_hidden"
    NEW_TAB = "new_tab"
    CLOSE_TAB = "close_tab"
    NEXT_TAB = "next_tab"
    PREVIOUS_TAB = "previous_tab"
    CHANGE_CURRENT_NAME = "change_current_name"
    ENTER_SEARCH_MODE = "enter_search_mode"
    ENTER_COMMAND_MODE = "enter_command_mode"


class SpecialKey(Enum):
    TAB = "Tab"
    SHIFT_TAB = "Shift-Tab"


Combination = Union[str, SpecialKey]


@dataclass(frozen=True)
class Command:
    action: Action
    argument: Union[int, str, SortingType, None] = None

    @property
    def description(self) -> str:
        return description_of(self)


@dataclass(frozen=True)
class Match:
    combination: Combination
    command: Command

    @property
    def label(self) -> str:
        if isinstance(self.combination, SpecialKey):
            return self.combination.value
        return self.combination


_DESCRIPTIONS = {
    Action.TERMINATE: "Close the program",
    Action.LEFT: "Navigate to the parent directory",
    Action.RIGHT: "Navigate into the child directory or file",
    Action.REMOVE: "Remove selected entry(ies) from the filesystem",
    Action.UPDATE: "Update the current directory",
    Action.YANK: "Yank selected entries into buffer",
    Action.CUT: "Cut selected entries into buffer",
    Action.PASTE: "Paste the yanked entry into the current directory",
    Action.CUMULATIVE_SIZE: "Calculate the cumulative size of current entry",
    Action.SELECT_UNDER_CURSOR: "Flips the selection for the entry under cursor",
    Action.INVERT_SELECTION: "Inverts the selection in the current directory",
    Action.CLEAR_SELECTION: "Clears the list of selected items",
    Action.TOGGLE_HIDDEN: "Show or hide hidden entries",
    Action.NEW_TAB: "Open a copy of the current tab",
    Action.CLOSE_TAB: "Close the current tab",
    Action.NEXT_TAB: "Switch to the next tab",
    Action.PREVIOUS_TAB: "Switch to the previous tab",
    Action.CHANGE_CURRENT_NAME: "Rename the entry under cursor",
    Action.ENTER_SEARCH_MODE: "Filter the current directory",
    Action.ENTER_COMMAND_MODE: "Run a shell command in the current directory",
}


def description_of(command: Command) -> str:
    action = command.action
    if action is Action.GOTO:
        return f"Go to {command.argument}"
    if action is Action.UP:
        return f"Navigate up one entry in the list {command.argument} times"
    if action is Action.DOWN:
        return f"Navigate down one entry in the list {command.argument} times"
    if action is Action.SORT:
        sorting = command.argument
        label = sorting.label if isinstance(sorting, SortingType) else sorting
        return f"Sort entries {label}"
    return _DESCRIPTIONS[action]


def default_bindings(bookmarks: Mapping[str, str]) -> List[Tuple[Combination, Command]]:
    """Return the key table; every bookmark ``key`` becomes ``g<key>``."""
    bindings: List[Tuple[Combination, Command]] = [
        ("q", Command(Action.CLOSE_TAB)),
        ("Q", Command(Action.TERMINATE)),
        ("h", Command(Action.LEFT)),
        ("j", Command(Action.DOWN, 1)),
        ("k", Command(Action.UP, 1)),
        ("l", Command(Action.RIGHT)),
        ("J", Command(Action.DOWN, FAST_STEP)),
        ("K", Command(Action.UP, FAST_STEP)),
        ("sl", Command(Action.SORT, SortingType.LEXICOGRAPHIC)),
        ("st", Command(Action.SORT, SortingType.TIME_MODIFIED)),
        ("sa", Command(Action.SORT, SortingType.UNSORTED)),
        ("dd", Command(Action.REMOVE)),
        ("dc", Command(Action.CUT)),
        ("yy", Command(Action.YANK)),
        ("pp", Command(Action.PASTE)),
        ("u", Command(Action.UPDATE)),
        ("cs", Command(Action.CUMULATIVE_SIZE)),
        ("cw", Command(Action.CHANGE_CURRENT_NAME)),
        ("v", Command(Action.SELECT_UNDER_CURSOR)),
        ("V", Command(Action.INVERT_SELECTION)),
        ("cc", Command(Action.CLEAR_SELECTION)),
        ("zh", Command(Action.TOGGLE_HIDDEN)),
        ("tn", Command(Action.NEW_TAB)),
        ("/", Command(Action.ENTER_SEARCH_MODE)),
        (":", Command(Action.ENTER_COMMAND_MODE)),
        (SpecialKey.TAB, Command(Action.NEXT_TAB)),
        (SpecialKey.SHIFT_TAB, Command(Action.PREVIOUS_TAB)),
    ]
    for key, directory in sorted(bookmarks.items()):
        combination = f"g{key}"
        if 1 < len(combination) <= MAX_COMBINATION_LEN:
            bindings.append((combination, Command(Action.GOTO, str(Path(directory).expanduser()))))
    return bindings


class CommandResolver:
    """Match key presses against the binding table one key at a time.

    Every prefix of a literal combination is registered as a key of the table,
    so the pending input can be looked up directly.
    """

    def __init__(self, bindings: Sequence[Tuple[Combination, Command]]) -> None:
        self._table: Dict[Combination, List[Match]] = {}
        for combination, command in bindings:
            match = Match(combination, command)
            if isinstance(combination, str):
                for end in range(1, len(combination) + 1):
                    self._table.setdefault(combination[:end], []).append(match)
            else:
                self._table.setdefault(combination, []).append(match)
        self.pending: Optional[Combination] = None

    def lookup(self, combination: Combination) -> List[Match]:
        return list(self._table.get(combination, []))

    def candidates(self) -> List[Match]:
        """Matches still reachable from the pending input."""
        if self.pending is None:
            return []
        return self.lookup(self.pending)

    @property
    def completion_count(self) -> int:
        """How many characters of each candidate are already typed."""
        if isinstance(self.pending, str):
            return len(self.pending)
        return 0

    def reset(self) -> None:
        self.pending = None

    def feed(self, key: Combination) -> Optional[Command]:
        """Add one key press; return the command when it completes one."""
        if isinstance(key, SpecialKey):
            combination: Combination = key
        elif isinstance(self.pending, str):
            combination = self.pending + key
        else:
            combination = key

        matches = self._table.get(combination, [])
        if len(matches) == 1 and matches[0].combination == combination:
            self.pending = None
            return matches[0].command
        if not matches:
            self.pending = None
            return None
        self.pending = combination
        return None


__all__ = [
    "Action",
    "Combination",
    "Command",
    "CommandResolver",
    "MAX_COMBINATION_LEN",
    "Match",
    "SpecialKey",
    "default_bindings",
    "description_of",
]
