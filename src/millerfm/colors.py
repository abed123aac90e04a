"""Color management for the file manager.

Entries carry a :class:`Paint` (plain data, no curses involved) so listings can
be built and tested without a terminal.  Paints are turned into curses color
pairs lazily by :class:`ColorSystem` while drawing.
"""

from __future__ import annotations

import curses
from dataclasses import dataclass, replace
from typing import Dict, Mapping

from millerfm.filesystem import EntryKind, is_hidden

COLOR_NAME_TO_CURSES = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "purple": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
    "default": -1,
}
# Bright black; only available on 16+ color terminals
GRAY = 8


@dataclass(frozen=True)
class Paint:
    fg: str = "white"
    bg: str = "default"
    bold: bool = False

    def reversed(self) -> "Paint":
        """Swap foreground and background, used for the row under the cursor."""
        fg = self.bg if self.bg != "default" else "black"
        bg = self.fg if self.fg != "default" else "white"
        return Paint(fg=fg, bg=bg, bold=True)

    def with_bold(self) -> "Paint":
        return replace(self, bold=True)


@dataclass(frozen=True)
class PaintSettings:
    directory: Paint = Paint("cyan", bold=True)
    symlink: Paint = Paint("yellow", bold=True)
    regular: Paint = Paint("white")
    executable: Paint = Paint("green", bold=True)
    unknown: Paint = Paint("gray", "white", bold=True)
    preview: Paint = Paint("green")

    @classmethod
    def from_config(cls, names: Mapping[str, str]) -> "PaintSettings":
        """Build paint settings from ``colors`` config entries."""
        defaults = cls()
        values = {}
        for field_name in ("directory", "symlink", "regular", "executable", "unknown", "preview"):
            name = names.get(field_name)
            values[field_name] = parse_paint(name) if name else getattr(defaults, field_name)
        return cls(**values)


def parse_paint(name: str) -> Paint:
    """Parse ``"<fg>[_on_<bg>][_bold]"`` such as ``cyan_bold`` or ``gray_on_white``."""
    parts = name.lower().split("_")
    bold = False
    if parts and parts[-1] == "bold":
        bold = True
        parts = parts[:-1]
    fg = parts[0] if parts and parts[0] else "white"
    bg = "default"
    if len(parts) >= 3 and parts[1] == "on":
        bg = parts[2]
    return Paint(fg=fg, bg=bg, bold=bold)


def paint_for(kind: EntryKind, name: str, executable: bool, settings: PaintSettings) -> Paint:
    """Pick the paint of an entry from its kind, name and executable bit."""
    if kind is EntryKind.DIRECTORY:
        return settings.directory
    if kind is EntryKind.SYMLINK:
        return settings.symlink
    if kind is EntryKind.UNKNOWN:
        return settings.unknown
    if executable and not is_hidden(name):
        return settings.executable
    return settings.regular


class ColorSystem:
    """Allocate curses color pairs for paints on first use."""

    def __init__(self) -> None:
        self._pairs: Dict[Paint, int] = {}
        self._next_pair = 1

    def attr(self, paint: Paint) -> int:
        """Return the curses attribute for ``paint``."""
        attrs = curses.A_BOLD if paint.bold else curses.A_NORMAL
        if not curses.has_colors():
            return attrs
        pair = self._pairs.get(paint)
        if pair is None:
            if self._next_pair >= curses.COLOR_PAIRS:
                return attrs
            pair = self._next_pair
            curses.init_pair(pair, self._color(paint.fg), self._color(paint.bg))
            self._pairs[paint] = pair
            self._next_pair += 1
        return curses.color_pair(pair) | attrs

    @staticmethod
    def _color(name: str) -> int:
        if name in ("gray", "grey"):
            return GRAY if curses.COLORS > GRAY else curses.COLOR_WHITE
        return COLOR_NAME_TO_CURSES.get(name, curses.COLOR_WHITE)


def init_colors() -> None:
    """Initialize curses colors.

    Call this after curses initialization and before rendering.
    """
    if not curses.has_colors():
        return
    curses.start_color()
    curses.use_default_colors()


__all__ = [
    "ColorSystem",
    "Paint",
    "PaintSettings",
    "init_colors",
    "paint_for",
    "parse_paint",
]
