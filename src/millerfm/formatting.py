"""Small helpers that turn raw file metadata into readable text."""

from __future__ import annotations

SIZE_UNITS = ["K", "M", "G"]
TRUNCATION_DELIMITER = "..."
TRUNCATION_KEEP_AT_END = 5
TAB_WIDTH = 4


def human_size(size: int) -> str:
    """Convert a byte count into a short string such as ``12.4 K``.

    Only one decimal digit is shown and it is truncated, never rounded, so a
    partially copied file never looks bigger than it is.
    """
    if size < 1024:
        return f"{size} B"
    for unit in SIZE_UNITS:
        whole, remainder = divmod(size, 1024)
        if whole < 1024:
            text = str(whole)
            if remainder:
                text += f".{remainder * 10 // 1024}"
            return f"{text} {unit}"
        size = whole
    return "<>"


def truncate_with_delimiter(text: str, max_width: int) -> str:
    """Shorten ``text`` by replacing its middle with ``...``.

    The last few characters are kept because they usually hold the extension.
    """
    if max_width <= 0:
        return ""
    if len(text) <= max_width:
        return text
    tail_len = TRUNCATION_KEEP_AT_END + len(TRUNCATION_DELIMITER)
    if max_width <= tail_len:
        return text[:max_width]
    head = text[: max_width - tail_len]
    return f"{head}{TRUNCATION_DELIMITER}{text[-TRUNCATION_KEEP_AT_END:]}"


def sanitize_preview_line(line: str, max_width: int) -> str:
    """Make a file line printable and cut it to ``max_width`` characters."""
    line = line.rstrip()
    line = line.replace("\r", "^M").replace("\t", " " * TAB_WIDTH)
    return line[: max(max_width, 0)]


def percentage(done: int, total: int) -> int:
    """Return ``done / total`` as a truncated percentage."""
    if total <= 0:
        return 100
    return done * 100 // total


__all__ = [
    "human_size",
    "percentage",
    "sanitize_preview_line",
    "truncate_with_delimiter",
]
