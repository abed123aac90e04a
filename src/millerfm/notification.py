"""Short messages shown in the bottom bar until they expire."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

DEFAULT_SHOW_TIME_MS = 3000


@dataclass
class Notification:
    text: str
    show_time_ms: int = DEFAULT_SHOW_TIME_MS
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)
    created_at: float = field(default=-1.0, compare=False)

    def __post_init__(self) -> None:
        if self.created_at < 0:
            self.created_at = self.clock()

    def has_finished(self) -> bool:
        return (self.clock() - self.created_at) * 1000 >= self.show_time_ms


__all__ = ["DEFAULT_SHOW_TIME_MS", "Notification"]
