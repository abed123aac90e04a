from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

from millerfm import FileManager


def keys(manager: FileManager, text: str) -> None:
    """Feed every character of ``text`` as a key press."""
    for char in text:
        manager.handle_key(ord(char))


def names(entries: Iterable) -> list:
    return [entry.name for entry in entries]


@pytest.fixture
def make_manager() -> Callable[..., FileManager]:
    def factory(start: Path, **general) -> FileManager:
        config = {"general": general, "bookmarks": {}}
        return FileManager(start, config)

    return factory
