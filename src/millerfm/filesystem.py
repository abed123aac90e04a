"""Read-only access to the filesystem.

Every function here degrades to an empty or neutral value instead of raising:
a directory that disappeared between two key presses simply lists as empty.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

ROOT_ENTRY_SIZE = 4096
MAX_SYMLINK_DEPTH = 40


class EntryKind(Enum):
    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Permissions:
    """Permission triplets as octal digits, plus the directory flag."""

    owner: int = 0
    group: int = 0
    world: int = 0
    is_directory: bool = False

    @classmethod
    def from_mode(cls, mode: int) -> "Permissions":
        return cls(
            owner=(mode >> 6) & 0o7,
            group=(mode >> 3) & 0o7,
            world=mode & 0o7,
            is_directory=stat.S_ISDIR(mode),
        )

    @property
    def is_partially_executable(self) -> bool:
        """True when anybody may execute the entry."""
        return any(digit & 1 for digit in (self.owner, self.group, self.world))

    def string_representation(self) -> str:
        """Render as ``drwxr-xr-x``."""
        kind = "d" if self.is_directory else "-"
        return kind + "".join(
            _triplet_to_string(digit) for digit in (self.owner, self.group, self.world)
        )


def _triplet_to_string(digit: int) -> str:
    return "".join(
        flag if digit & bit else "-" for flag, bit in (("r", 4), ("w", 2), ("x", 1))
    )


@dataclass(frozen=True)
class Entry:
    kind: EntryKind
    name: str
    size: int = 0
    time_modified: float = 0.0
    permissions: Permissions = Permissions()

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK


def is_root(path: Path) -> bool:
    """Return True for the filesystem root."""
    return path.parent == path


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def list_dir(path: Path, show_hidden: bool, max_count: Optional[int] = None) -> List[Entry]:
    """List ``path`` in filesystem order, or return ``[]`` when it cannot be read."""
    entries: List[Entry] = []
    try:
        with os.scandir(path) as iterator:
            for dir_entry in iterator:
                if not show_hidden and is_hidden(dir_entry.name):
                    continue
                entries.append(_build_entry(dir_entry))
                if max_count is not None and len(entries) >= max_count:
                    break
    except (NotADirectoryError, FileNotFoundError, PermissionError) as err:
        logger.debug("Cannot list %s: %s", path, err)
        return []
    except OSError as err:
        logger.warning("Cannot list %s: %s", path, err)
        return []
    return entries


def siblings_of(path: Path, show_hidden: bool) -> List[Entry]:
    """List the directory that contains ``path``.

    The root has no parent directory, so it is shown as the only entry of a
    synthetic listing.
    """
    if is_root(path):
        return [
            Entry(
                kind=EntryKind.DIRECTORY,
                name=str(path),
                size=ROOT_ENTRY_SIZE,
                permissions=permissions_of(path),
            )
        ]
    return list_dir(path.parent, show_hidden)


def permissions_of(path: Path) -> Permissions:
    """Return the permissions of ``path`` following symlinks."""
    try:
        return Permissions.from_mode(os.stat(path).st_mode)
    except OSError:
        return Permissions()


def cumulative_size(path: Path) -> int:
    """Return the recursive byte size of ``path``.

    Directory inodes are not counted, only the files (and symlinks) inside, so
    a finished copy measures exactly the same as its source.
    """
    try:
        info = os.lstat(path)
    except OSError:
        return 0
    if not stat.S_ISDIR(info.st_mode):
        return info.st_size
    total = 0
    for root, dirs, files in os.walk(path, followlinks=False):
        for name in files + [d for d in dirs if os.path.islink(os.path.join(root, d))]:
            try:
                total += os.lstat(os.path.join(root, name)).st_size
            except OSError:
                continue
    return total


def resolve_symlink_recursively(path: Path) -> Path:
    """Follow ``path`` through any chain of symlinks."""
    current = path
    for _ in range(MAX_SYMLINK_DEPTH):
        if not current.is_symlink():
            return current
        try:
            target = Path(os.readlink(current))
        except OSError:
            return current
        current = target if target.is_absolute() else current.parent / target
    return current


def symlink_target(path: Path) -> Optional[str]:
    """Return the text a symlink points to, or None."""
    try:
        return os.readlink(path)
    except OSError:
        return None


def read_lines(path: Path, max_lines: int, max_bytes: int) -> List[str]:
    """Read at most ``max_lines`` lines and ``max_bytes`` bytes from a text file."""
    try:
        with open(path, "rb") as handle:
            data = handle.read(max(max_bytes, 0))
    except OSError as err:
        logger.debug("Cannot read %s: %s", path, err)
        return []
    text = data.decode("utf-8", errors="replace")
    return text.splitlines()[: max(max_lines, 0)]


def _build_entry(dir_entry: os.DirEntry) -> Entry:
    """Turn a scandir result into an :class:`Entry`."""
    try:
        info = dir_entry.stat(follow_symlinks=False)
    except OSError:
        return Entry(kind=EntryKind.UNKNOWN, name=dir_entry.name)

    if stat.S_ISLNK(info.st_mode):
        kind = EntryKind.SYMLINK
    elif stat.S_ISDIR(info.st_mode):
        kind = EntryKind.DIRECTORY
    elif stat.S_ISREG(info.st_mode):
        kind = EntryKind.REGULAR
    else:
        kind = EntryKind.UNKNOWN

    if kind is EntryKind.SYMLINK:
        permissions = permissions_of(Path(dir_entry.path))
    else:
        permissions = Permissions.from_mode(info.st_mode)

    return Entry(
        kind=kind,
        name=dir_entry.name,
        size=info.st_size,
        time_modified=info.st_mtime,
        permissions=permissions,
    )


__all__ = [
    "Entry",
    "EntryKind",
    "Permissions",
    "cumulative_size",
    "is_hidden",
    "is_root",
    "list_dir",
    "permissions_of",
    "read_lines",
    "resolve_symlink_recursively",
    "siblings_of",
    "symlink_target",
]
