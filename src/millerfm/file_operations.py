"""Selection, transfers and removal for the file manager."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

from millerfm.context import Context
from millerfm.filesystem import cumulative_size
from millerfm.formatting import human_size
from millerfm.modes import TransferKind

logger = logging.getLogger(__name__)


class FileOperationsMixin:
    """Mixin providing selection, yank/cut/paste, removal and sizes."""

    def _all_contexts(self) -> List[Context]:
        return [tab.context for tab in self.tabs.tabs]

    def _targets(self) -> List[Path]:
        """The selection if any, otherwise the entry under the cursor."""
        if not self.selection.is_empty():
            return list(self.selection)
        path = self.context.current_path
        return [path] if path is not None else []

    def select_under_cursor(self) -> None:
        path = self.context.current_path
        if path is None:
            return
        self.selection.toggle(path, self._all_contexts())

    def invert_selection(self) -> None:
        self.selection.invert(self.context)
        for context in self._all_contexts():
            if context is not self.context:
                self.selection.sync(context)

    def clear_selection(self) -> None:
        """Forget the selection and any yank or cut waiting for a paste."""
        self.selection.clear(self._all_contexts())
        self.transfers.cancel_pending()

    def yank_selected(self) -> None:
        self._stage(TransferKind.YANK)

    def cut_selected(self) -> None:
        self._stage(TransferKind.CUT)

    def _stage(self, kind: TransferKind) -> None:
        if self.selection.is_empty():
            path = self.context.current_path
            if path is None:
                return
            paths = [path]
        else:
            paths = self.selection.drain(self._all_contexts())
        self.transfers.stage(paths, kind)
        noun = "entry" if len(paths) == 1 else "entries"
        action = "Yanked" if kind is TransferKind.YANK else "Cut"
        self._notify(f"{action} {len(paths)} {noun}")

    def paste_into_current(self) -> None:
        if self.transfers.potential is None:
            self._notify("Nothing to paste")
            return
        transfer = self.transfers.paste_into(self.context.parent_path)
        if transfer is None:
            self._notify("Paste failed")
            return
        self.update_current()

    def remove_selected(self) -> None:
        """Ask for confirmation, then delete the selection or the current entry."""
        paths = self._targets()
        if not paths:
            self._notify("Nothing to remove")
            return
        label = paths[0].name if len(paths) == 1 else f"{len(paths)} entries"

        def do_remove() -> None:
            self.selection.drain(self._all_contexts())
            failures = 0
            for path in paths:
                try:
                    remove_path(path)
                except OSError as err:
                    logger.error("Failed to remove %s: %s", path, err)
                    failures += 1
            if failures:
                self._notify(f"Remove failed for {failures} of {len(paths)}")
            else:
                self._notify(f"Removed {label}")
            self.update_current()

        self._request_confirmation(f"Remove {label}?", do_remove)

    def get_cumulative_size(self) -> None:
        context = self.context
        if context.current_path is None:
            return
        context.cumulative_size_text = human_size(cumulative_size(context.current_path))

    def poll_transfers(self) -> int:
        """Measure running transfers and return the next key timeout in ms."""
        result = self.transfers.poll()
        for transfer in result.finished:
            self._notify(transfer.done_text, self.done_notification_ms)
        if result.progressed or result.finished:
            self.update_current()
        return self.active_poll_ms if self.transfers.is_active else self.idle_poll_ms


def remove_path(path: Path) -> None:
    """Delete a file, a symlink or a whole directory tree."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


__all__ = ["FileOperationsMixin", "remove_path"]
