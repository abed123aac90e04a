"""Screen geometry shared by the core and the renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from millerfm.scrolling import resize_scrolling_gap_until_fits

# Rows taken by the top bar, two borders and the bottom bar
RESERVED_ROWS = 4
ENTRIES_DISPLAY_BEGIN = 2
MIN_TERMINAL_HEIGHT = 6
MIN_TERMINAL_WIDTH = 20

DEFAULT_HEIGHT = 24
DEFAULT_WIDTH = 80


@dataclass(frozen=True)
class DisplaySettings:
    height: int
    width: int
    columns_coord: Tuple[Tuple[int, int], ...]
    scrolling_gap: int
    column_effective_height: int
    entries_display_begin: int = ENTRIES_DISPLAY_BEGIN

    @classmethod
    def generate(
        cls,
        height: int,
        width: int,
        scrolling_gap: int,
        columns_ratio: Sequence[int],
    ) -> "DisplaySettings":
        column_effective_height = max(height - RESERVED_ROWS, 1)
        return cls(
            height=height,
            width=width,
            columns_coord=tuple(positions_from_ratio(columns_ratio, width)),
            scrolling_gap=resize_scrolling_gap_until_fits(scrolling_gap, column_effective_height),
            column_effective_height=column_effective_height,
        )

    def column_width(self, column_index: int) -> int:
        begin, end = self.columns_coord[column_index]
        return max(end - begin, 0)

    @property
    def is_too_small(self) -> bool:
        return self.height < MIN_TERMINAL_HEIGHT or self.width < MIN_TERMINAL_WIDTH


def positions_from_ratio(ratio: Sequence[int], width: int) -> List[Tuple[int, int]]:
    """Split ``width`` into ``(begin, end)`` column boundaries by ``ratio``."""
    total = sum(ratio) or 1
    position = 0
    positions: List[Tuple[int, int]] = []
    last_index = len(ratio) - 1
    for index, weight_ratio in enumerate(ratio):
        weight = int(weight_ratio / total * width)
        end = width - 2 if index == last_index else position + weight
        positions.append((position, end))
        position += weight + 1
    return positions


__all__ = ["DisplaySettings", "positions_from_ratio"]
