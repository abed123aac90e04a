"""Navigation snapshot of one tab."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from millerfm.colors import PaintSettings
from millerfm.direntry import (
    DirEntry,
    additional_entry_info,
    index_of_entry_inside,
    into_sorted_direntries,
    nth_entry,
    path_of_nth_entry_inside,
    string_permissions_for_entry,
)
from millerfm.filesystem import is_root, list_dir, siblings_of
from millerfm.input_mode import InputMode, SearchMode
from millerfm.layout import DisplaySettings
from millerfm.modes import SortingType
from millerfm.right_column import EmptyColumn, RightColumn, SiblingsColumn, collect_right_column
from millerfm.scrolling import siblings_shift_for

RIGHT_COLUMN_INDEX = 2


@dataclass
class ListingEnvironment:
    """Everything a listing depends on besides the directory itself."""

    display: DisplaySettings
    paint_settings: PaintSettings
    sorting: SortingType
    show_hidden: bool
    selected: Sequence[Path]

    def list(self, directory: Path) -> List[DirEntry]:
        return into_sorted_direntries(
            list_dir(directory, self.show_hidden),
            self.paint_settings,
            self.sorting,
            self.selected,
            directory,
        )

    def list_siblings_of(self, path: Path) -> List[DirEntry]:
        container = None if is_root(path) else path.parent
        return into_sorted_direntries(
            siblings_of(path, self.show_hidden),
            self.paint_settings,
            self.sorting,
            self.selected,
            container,
        )

    def right_column_for(self, path: Optional[Path]) -> RightColumn:
        return collect_right_column(
            path,
            self.paint_settings,
            self.sorting,
            self.show_hidden,
            self.display.column_effective_height,
            self.display.column_width(RIGHT_COLUMN_INDEX),
            self.selected,
        )

    def shift(self, index: int, length: int, previous_shift: Optional[int]) -> int:
        return siblings_shift_for(
            self.display.scrolling_gap,
            self.display.column_effective_height,
            index,
            length,
            previous_shift,
        )


@dataclass
class Context:
    parent_path: Path
    current_path: Optional[Path] = None
    parent_siblings: List[DirEntry] = field(default_factory=list)
    current_siblings: List[DirEntry] = field(default_factory=list)
    right_column: RightColumn = field(default_factory=EmptyColumn)
    parent_index: int = 0
    current_index: int = 0
    parent_siblings_shift: int = 0
    current_siblings_shift: int = 0
    current_permissions: Optional[str] = None
    additional_entry_info: Optional[str] = None
    cumulative_size_text: Optional[str] = None
    input_mode: Optional[InputMode] = None

    @classmethod
    def generate(cls, parent_path: Path, env: ListingEnvironment) -> "Context":
        """Build a fresh context listing ``parent_path`` with the cursor on top."""
        context = cls(parent_path=parent_path)
        context.current_siblings = env.list(parent_path)
        context.refresh_parent(env)
        context.refresh_current(env, previous_shift=None)
        return context

    @property
    def inside_empty_dir(self) -> bool:
        return self.current_path is None

    @property
    def search(self) -> Optional[SearchMode]:
        if isinstance(self.input_mode, SearchMode):
            return self.input_mode
        return None

    def current_entry(self) -> Optional[DirEntry]:
        return nth_entry(self.current_siblings, self.current_index)

    def right_siblings(self) -> Optional[List[DirEntry]]:
        if isinstance(self.right_column, SiblingsColumn):
            return self.right_column.entries
        return None

    def refresh_parent(self, env: ListingEnvironment) -> None:
        """Re-list the parent column and put its cursor on ``parent_path``."""
        self.parent_siblings = env.list_siblings_of(self.parent_path)
        index = index_of_entry_inside(self.parent_path, self.parent_siblings)
        self.parent_index = index if index is not None else 0
        self.parent_siblings_shift = env.shift(
            self.parent_index, len(self.parent_siblings), None
        )

    def refresh_current(self, env: ListingEnvironment, previous_shift: Optional[int]) -> None:
        """Recompute every field that depends on ``current_index``."""
        if self.current_siblings:
            self.current_index = min(max(self.current_index, 0), len(self.current_siblings) - 1)
        else:
            self.current_index = 0
        entry = self.current_entry()
        self.current_path = path_of_nth_entry_inside(
            self.current_index, self.parent_path, self.current_siblings
        )
        self.right_column = env.right_column_for(self.current_path)
        self.current_permissions = string_permissions_for_entry(entry)
        self.additional_entry_info = additional_entry_info(entry, self.current_path)
        self.cumulative_size_text = None
        self.current_siblings_shift = env.shift(
            self.current_index, len(self.current_siblings), previous_shift
        )

    def loaded_listings(self) -> Iterator[Tuple[Optional[Path], List[DirEntry]]]:
        """Yield every loaded listing with the directory its entries live in."""
        yield (None if is_root(self.parent_path) else self.parent_path.parent), self.parent_siblings
        yield self.parent_path, self.current_siblings
        right = self.right_siblings()
        if right is not None and self.current_path is not None:
            yield self.current_path, right
        search = self.search
        if search is not None:
            yield self.parent_path, search.backup


__all__ = ["Context", "ListingEnvironment"]
