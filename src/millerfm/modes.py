"""Enumerations that describe how listings are ordered and transfers behave."""

from __future__ import annotations

from enum import Enum


class SortingType(Enum):
    LEXICOGRAPHIC = "lexicographic"
    TIME_MODIFIED = "time_modified"
    UNSORTED = "unsorted"

    @property
    def label(self) -> str:
        if self is SortingType.LEXICOGRAPHIC:
            return "Lexicographically"
        elif self is SortingType.TIME_MODIFIED:
            return "TimeModified"
        else:
            return "Any"

    @classmethod
    def from_name(cls, name: str) -> "SortingType":
        """Return the sorting named ``name``, defaulting to lexicographic."""
        for candidate in ALL_SORTINGS:
            if candidate.value == name.lower():
                return candidate
        return cls.LEXICOGRAPHIC


class TransferKind(Enum):
    YANK = "yank"
    CUT = "cut"

    @property
    def verb(self) -> str:
        """Progressive verb used in progress and completion messages."""
        return "copying" if self is TransferKind.YANK else "moving"


ALL_SORTINGS = [SortingType.LEXICOGRAPHIC, SortingType.TIME_MODIFIED, SortingType.UNSORTED]


__all__ = ["SortingType", "TransferKind", "ALL_SORTINGS"]
