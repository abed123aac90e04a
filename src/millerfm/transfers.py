"""Yank/cut/paste bookkeeping.

Copies and moves are done by external ``cp``/``mv`` processes that are never
waited on.  Progress is inferred by measuring the destinations once per draw
cycle and comparing them with the source sizes measured at yank/cut time.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from millerfm.filesystem import cumulative_size
from millerfm.formatting import percentage
from millerfm.modes import TransferKind
from millerfm.spawn import SpawnError, spawn_async

logger = logging.getLogger(__name__)

COPY_COMMAND = ["cp", "-a"]
MOVE_COMMAND = ["mv"]
COLLISION_SUFFIX = "_"

SizeFunction = Callable[[Path], int]
SpawnFunction = Callable[[str, Sequence[str]], object]


@dataclass
class PotentialTransfer:
    """A yank or cut waiting for a paste."""

    src_paths: List[Path]
    src_sizes: List[int]
    kind: TransferKind


@dataclass
class Transfer:
    """A paste in flight.

    ``dst_sizes[i]`` becomes the final size once the destination measured
    exactly ``src_sizes[i]``; it is never measured again after that.
    """

    src_sizes: List[int]
    dst_paths: List[Path]
    dst_sizes: List[Optional[int]]
    kind: TransferKind
    last_measured: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.last_measured:
            self.last_measured = [0] * len(self.dst_paths)

    @property
    def is_done(self) -> bool:
        return all(size is not None for size in self.dst_sizes)

    @property
    def percentage(self) -> int:
        done = sum(
            final if final is not None else measured
            for final, measured in zip(self.dst_sizes, self.last_measured)
        )
        value = percentage(done, sum(self.src_sizes))
        return min(value, 100 if self.is_done else 99)

    def poll(self, size_of: SizeFunction) -> bool:
        """Measure unfinished destinations; return True when anything changed."""
        progressed = False
        for index, dst in enumerate(self.dst_paths):
            if self.dst_sizes[index] is not None:
                continue
            size = size_of(dst) if os.path.lexists(dst) else 0
            if size != self.last_measured[index]:
                progressed = True
            self.last_measured[index] = size
            if os.path.lexists(dst) and size == self.src_sizes[index]:
                self.dst_sizes[index] = size
                progressed = True
        return progressed

    @property
    def progress_text(self) -> str:
        return f"{self.kind.verb.capitalize()} {self.percentage}%"

    @property
    def done_text(self) -> str:
        return f"Done {self.kind.verb}!"


@dataclass
class PollResult:
    progressed: bool = False
    finished: List[Transfer] = field(default_factory=list)


class TransferManager:
    def __init__(
        self,
        size_of: SizeFunction = cumulative_size,
        spawn: SpawnFunction = spawn_async,
    ) -> None:
        self._size_of = size_of
        self._spawn = spawn
        self.potential: Optional[PotentialTransfer] = None
        self.active: List[Transfer] = []

    @property
    def is_active(self) -> bool:
        return bool(self.active)

    def stage(self, paths: Sequence[Path], kind: TransferKind) -> PotentialTransfer:
        """Remember ``paths`` for the next paste, measuring them now."""
        sizes = [self._size_of(path) for path in paths]
        self.potential = PotentialTransfer(src_paths=list(paths), src_sizes=sizes, kind=kind)
        logger.debug("Staged %s of %d item(s)", kind.value, len(paths))
        return self.potential

    def cancel_pending(self) -> None:
        self.potential = None

    def paste_into(self, directory: Path) -> Optional[Transfer]:
        """Start one process per staged item; return the registered transfer.

        Returns None when nothing is staged or no process could be started.
        """
        pending = self.potential
        if pending is None:
            return None
        self.potential = None

        src_sizes: List[int] = []
        dst_paths: List[Path] = []
        errors: List[str] = []
        for src, size in zip(pending.src_paths, pending.src_sizes):
            dst = unique_destination(directory, src.name, dst_paths)
            argv = transfer_command(src, dst, pending.kind)
            try:
                self._spawn(argv[0], argv[1:])
            except SpawnError as err:
                errors.append(str(err))
                continue
            src_sizes.append(size)
            dst_paths.append(dst)

        if errors:
            logger.warning("Some transfers did not start: %s", "; ".join(errors))
        if not dst_paths:
            return None
        transfer = Transfer(
            src_sizes=src_sizes,
            dst_paths=dst_paths,
            dst_sizes=[None] * len(dst_paths),
            kind=pending.kind,
        )
        self.active.append(transfer)
        return transfer

    def poll(self) -> PollResult:
        """Measure every active transfer and drop the finished ones."""
        result = PollResult()
        still_active: List[Transfer] = []
        for transfer in self.active:
            if transfer.poll(self._size_of):
                result.progressed = True
            if transfer.is_done:
                result.finished.append(transfer)
                logger.info("Finished %s into %s", transfer.kind.verb, transfer.dst_paths[0].parent)
            else:
                still_active.append(transfer)
        self.active = still_active
        return result

    def progress_texts(self) -> List[str]:
        return [transfer.progress_text for transfer in self.active]


def unique_destination(directory: Path, name: str, taken: Sequence[Path] = ()) -> Path:
    """Append ``_`` to ``name`` until it collides with nothing in ``directory``."""
    candidate = directory / name
    while os.path.lexists(candidate) or candidate in taken:
        name += COLLISION_SUFFIX
        candidate = directory / name
    return candidate


def transfer_command(src: Path, dst: Path, kind: TransferKind) -> List[str]:
    """Return the argv that copies or moves ``src`` to ``dst``.

    A copy of a directory is given the source with a trailing slash so that its
    contents land in ``dst``; a move is given the directory itself.
    """
    if kind is TransferKind.YANK:
        source = str(src)
        if src.is_dir() and not src.is_symlink():
            source = source.rstrip("/") + "/"
        return [*COPY_COMMAND, source, str(dst)]
    return [*MOVE_COMMAND, str(src).rstrip("/") or "/", str(dst)]


__all__ = [
    "PollResult",
    "PotentialTransfer",
    "Transfer",
    "TransferManager",
    "transfer_command",
    "unique_destination",
]
