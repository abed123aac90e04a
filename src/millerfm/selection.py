"""The set of selected paths, shared by all tabs."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from millerfm.context import Context
from millerfm.direntry import DirEntry


class SelectionSet:
    """Absolute paths chosen by the user.

    Selections are made by hand and stay small, so a list with membership
    checks is enough.  Every change is mirrored into the ``is_selected`` flag of
    the loaded entries so drawing never has to search the set.
    """

    def __init__(self) -> None:
        self._paths: List[Path] = []

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[Path]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def paths(self) -> Sequence[Path]:
        return self._paths

    def is_empty(self) -> bool:
        return not self._paths

    def add(self, path: Path) -> None:
        if path not in self._paths:
            self._paths.append(path)

    def remove(self, path: Path) -> None:
        if path in self._paths:
            self._paths.remove(path)

    def toggle(self, path: Path, contexts: Iterable[Context] = ()) -> bool:
        """Flip ``path`` in or out of the set and return its new state."""
        selected = path not in self._paths
        if selected:
            self._paths.append(path)
        else:
            self._paths.remove(path)
        for context in contexts:
            mirror_path(context, path, selected)
        return selected

    def drain(self, contexts: Iterable[Context] = ()) -> List[Path]:
        """Empty the set and return what it held."""
        paths, self._paths = self._paths, []
        for context in contexts:
            clear_flags(context)
        return paths

    def clear(self, contexts: Iterable[Context] = ()) -> None:
        self.drain(contexts)

    def invert(self, context: Context) -> None:
        """Flip every entry of the current listing of ``context``.

        Entries outside the current listing keep their state.
        """
        for entry in context.current_siblings:
            path = context.parent_path / entry.name
            entry.is_selected = not entry.is_selected
            if entry.is_selected:
                self.add(path)
            else:
                self.remove(path)
        search = context.search
        if search is not None:
            for entry in search.backup:
                entry.is_selected = (context.parent_path / entry.name) in self._paths

    def sync(self, context: Context) -> None:
        """Re-derive every loaded flag of ``context`` from the set."""
        for directory, entries in context.loaded_listings():
            for entry in entries:
                entry.is_selected = directory is not None and (directory / entry.name) in self._paths


def mirror_path(context: Context, path: Path, selected: bool) -> None:
    """Set the flag of the entry for ``path`` in every listing of ``context``."""
    for directory, entries in context.loaded_listings():
        if directory is None or directory != path.parent:
            continue
        _set_flag(entries, path.name, selected)


def clear_flags(context: Context) -> None:
    for _, entries in context.loaded_listings():
        for entry in entries:
            entry.is_selected = False


def _set_flag(entries: Sequence[DirEntry], name: str, selected: bool) -> None:
    for entry in entries:
        if entry.name == name:
            entry.is_selected = selected


__all__ = ["SelectionSet", "clear_flags", "mirror_path"]
