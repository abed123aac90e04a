"""Tests for sorting and transfer kinds."""

from millerfm.modes import ALL_SORTINGS, SortingType, TransferKind


def test_sorting_values():
    """Test that SortingType has expected values."""
    assert SortingType.LEXICOGRAPHIC.value == "lexicographic"
    assert SortingType.TIME_MODIFIED.value == "time_modified"
    assert SortingType.UNSORTED.value == "unsorted"


def test_sorting_labels():
    assert SortingType.LEXICOGRAPHIC.label == "Lexicographically"
    assert SortingType.TIME_MODIFIED.label == "TimeModified"
    assert SortingType.UNSORTED.label == "Any"


def test_sorting_from_name_defaults_to_lexicographic():
    assert SortingType.from_name("Time_Modified") is SortingType.TIME_MODIFIED
    assert SortingType.from_name("unsorted") is SortingType.UNSORTED
    assert SortingType.from_name("nonsense") is SortingType.LEXICOGRAPHIC


def test_all_sortings_contains_all_sortings():
    assert ALL_SORTINGS == list(SortingType)


def test_transfer_verbs():
    assert TransferKind.YANK.verb == "copying"
    assert TransferKind.CUT.verb == "moving"
