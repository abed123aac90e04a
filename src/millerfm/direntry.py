"""Listing entries as shown in the three columns."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from millerfm.colors import Paint, PaintSettings, paint_for
from millerfm.filesystem import Entry, EntryKind, Permissions, is_root, symlink_target
from millerfm.modes import SortingType


@dataclass
class DirEntry:
    kind: EntryKind
    name: str
    size: int
    time_modified: float
    permissions: Permissions
    paint: Paint
    is_selected: bool = False

    @classmethod
    def from_entry(cls, entry: Entry, paint_settings: PaintSettings, is_selected: bool) -> "DirEntry":
        paint = paint_for(
            entry.kind, entry.name, entry.permissions.is_partially_executable, paint_settings
        )
        return cls(
            kind=entry.kind,
            name=entry.name,
            size=entry.size,
            time_modified=entry.time_modified,
            permissions=entry.permissions,
            paint=paint,
            is_selected=is_selected,
        )

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK


def into_sorted_direntries(
    entries: Iterable[Entry],
    paint_settings: PaintSettings,
    sorting: SortingType,
    selected: Sequence[Path],
    parent_path: Optional[Path],
) -> List[DirEntry]:
    """Materialize raw entries into sorted, painted entries.

    ``parent_path`` is the directory the entries live in; it is used to mark
    entries that are part of the selection.
    """
    direntries = [
        DirEntry.from_entry(entry, paint_settings, is_selected(selected, entry.name, parent_path))
        for entry in entries
    ]
    return sort_entries(direntries, sorting)


def sort_entries(entries: List[DirEntry], sorting: SortingType) -> List[DirEntry]:
    """Sort in place according to ``sorting`` and return the list."""
    if sorting is SortingType.LEXICOGRAPHIC:
        entries.sort(key=lambda entry: entry.name)
    elif sorting is SortingType.TIME_MODIFIED:
        entries.sort(key=lambda entry: entry.time_modified)
    return entries


def is_selected(selected: Sequence[Path], name: str, parent_path: Optional[Path]) -> bool:
    if parent_path is None or not selected:
        return False
    return (parent_path / name) in selected


def nth_entry(entries: Sequence[DirEntry], index: int) -> Optional[DirEntry]:
    if 0 <= index < len(entries):
        return entries[index]
    return None


def path_of_nth_entry_inside(index: int, path: Path, entries: Sequence[DirEntry]) -> Optional[Path]:
    entry = nth_entry(entries, index)
    if entry is None:
        return None
    return path / entry.name


def index_of_name(name: str, entries: Sequence[DirEntry]) -> Optional[int]:
    for index, entry in enumerate(entries):
        if entry.name == name:
            return index
    return None


def index_of_entry_inside(path: Path, entries: Sequence[DirEntry]) -> Optional[int]:
    """Find the row of ``path`` within the listing of its parent directory."""
    if is_root(path):
        return 0
    return index_of_name(path.name, entries)


def string_permissions_for_entry(entry: Optional[DirEntry]) -> Optional[str]:
    if entry is None:
        return None
    return entry.permissions.string_representation()


def additional_entry_info(entry: Optional[DirEntry], path: Optional[Path]) -> Optional[str]:
    """Return extra status-bar text for an entry: the target of a symlink."""
    if entry is None or path is None or not entry.is_symlink:
        return None
    target = symlink_target(path)
    if target is None:
        return None
    return f"-> {target}"


__all__ = [
    "DirEntry",
    "additional_entry_info",
    "index_of_entry_inside",
    "index_of_name",
    "into_sorted_direntries",
    "is_selected",
    "nth_entry",
    "path_of_nth_entry_inside",
    "sort_entries",
    "string_permissions_for_entry",
]
