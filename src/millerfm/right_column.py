"""The rightmost pane: children of the selected directory or a file preview."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from millerfm.colors import PaintSettings
from millerfm.direntry import DirEntry, into_sorted_direntries
from millerfm.filesystem import list_dir, read_lines, resolve_symlink_recursively
from millerfm.formatting import sanitize_preview_line
from millerfm.modes import SortingType
from millerfm.spawn import is_previewable

MAX_PREVIEW_BYTES_PER_LINE = 100


@dataclass
class SiblingsColumn:
    entries: List[DirEntry] = field(default_factory=list)


@dataclass
class PreviewColumn:
    lines: List[str] = field(default_factory=list)


@dataclass
class EmptyColumn:
    pass


RightColumn = Union[SiblingsColumn, PreviewColumn, EmptyColumn]


def collect_right_column(
    path: Optional[Path],
    paint_settings: PaintSettings,
    sorting: SortingType,
    show_hidden: bool,
    max_height: int,
    max_width: int,
    selected: Sequence[Path],
) -> RightColumn:
    """Build the right column for the entry at ``path``."""
    if path is None:
        return EmptyColumn()
    if path.is_dir():
        entries = into_sorted_direntries(
            list_dir(path, show_hidden), paint_settings, sorting, selected, path
        )
        return SiblingsColumn(entries[:max_height])
    resolved = resolve_symlink_recursively(path)
    preview = read_preview_of(resolved, max_height, max_width)
    if preview is None:
        return EmptyColumn()
    return PreviewColumn(preview)


def read_preview_of(path: Path, max_height: int, max_width: int) -> Optional[List[str]]:
    """Return the first lines of a previewable file, or None."""
    if not is_previewable(path.name):
        return None
    lines = read_lines(path, max_height, max_height * MAX_PREVIEW_BYTES_PER_LINE)
    return [sanitize_preview_line(line, max_width) for line in lines]


__all__ = [
    "EmptyColumn",
    "PreviewColumn",
    "RightColumn",
    "SiblingsColumn",
    "collect_right_column",
    "read_preview_of",
]
