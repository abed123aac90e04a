"""Free-text input modes: search, rename and shell command line.

A context holds at most one of these at a time.  Each mode keeps its own text
buffer and cursor; the cursor always stays within ``[0, len(text)]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from millerfm.direntry import DirEntry


def insert_at(text: str, cursor: int, char: str) -> Tuple[str, int]:
    return text[:cursor] + char + text[cursor:], cursor + len(char)


def remove_before(text: str, cursor: int) -> Tuple[str, int]:
    if cursor <= 0:
        return text, 0
    return text[: cursor - 1] + text[cursor:], cursor - 1


def remove_under(text: str, cursor: int) -> Tuple[str, int]:
    if cursor >= len(text):
        return text, len(text)
    return text[:cursor] + text[cursor + 1 :], cursor


def move_left(text: str, cursor: int) -> int:
    return max(cursor - 1, 0)


def move_right(text: str, cursor: int) -> int:
    return min(cursor + 1, len(text))


@dataclass
class SearchMode:
    """Incremental filter of the current listing.

    ``cursor_index`` is None once the query is confirmed: the filter stays
    applied but keys go back to the command resolver.  ``backup`` is the
    unfiltered listing restored on cancel.
    """

    query: str = ""
    cursor_index: Optional[int] = 0
    backup: List[DirEntry] = field(default_factory=list)

    @property
    def is_editing(self) -> bool:
        return self.cursor_index is not None

    def matches(self, name: str) -> bool:
        return self.query in name


@dataclass
class ChangeNameMode:
    new_name: str = ""
    cursor_index: int = 0


@dataclass
class CommandMode:
    text: str = ""
    cursor_index: int = 0


InputMode = Union[SearchMode, ChangeNameMode, CommandMode]


def mode_text(mode: InputMode) -> str:
    """Return the buffer of any input mode."""
    if isinstance(mode, SearchMode):
        return mode.query
    if isinstance(mode, ChangeNameMode):
        return mode.new_name
    return mode.text


def set_mode_text(mode: InputMode, text: str, cursor: int) -> None:
    if isinstance(mode, SearchMode):
        mode.query = text
    elif isinstance(mode, ChangeNameMode):
        mode.new_name = text
    else:
        mode.text = text
    mode.cursor_index = cursor


def is_editing(mode: Optional[InputMode]) -> bool:
    """True while keys should go to the input buffer rather than to commands."""
    if mode is None:
        return False
    if isinstance(mode, SearchMode):
        return mode.is_editing
    return True


__all__ = [
    "ChangeNameMode",
    "CommandMode",
    "InputMode",
    "SearchMode",
    "insert_at",
    "is_editing",
    "mode_text",
    "move_left",
    "move_right",
    "remove_before",
    "remove_under",
    "set_mode_text",
]
