"""Tests for moving around the filesystem."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from conftest import keys, names
from millerfm.modes import SortingType
from millerfm.right_column import PreviewColumn, SiblingsColumn


def _tree(root: Path) -> Path:
    """Build ``root/a`` holding directory ``b`` (with ``inner``) and ``c.txt``."""
    a = root / "a"
    (a / "b").mkdir(parents=True)
    (a / "b" / "inner").write_text("", encoding="utf-8")
    (a / "c.txt").write_text("hello\n", encoding="utf-8")
    return a


def test_start_lists_three_columns(tmp_path: Path, make_manager) -> None:
    a = _tree(tmp_path.resolve())
    manager = make_manager(a)
    context = manager.context

    assert context.parent_path == a
    assert names(context.current_siblings) == ["b", "c.txt"]
    assert context.current_index == 0
    assert context.current_path == a / "b"
    assert names(context.parent_siblings) == ["a"]
    assert context.parent_index == 0
    assert isinstance(context.right_column, SiblingsColumn)
    assert names(context.right_column.entries) == ["inner"]
    assert context.current_permissions.startswith("d")


def test_down_previews_file_then_left_and_right(tmp_path: Path, make_manager) -> None:
    root = tmp_path.resolve()
    a = _tree(root)
    manager = make_manager(a)

    manager.down()
    context = manager.context
    assert context.current_path == a / "c.txt"
    assert context.right_column == PreviewColumn(["hello"])

    manager.left()
    context = manager.context
    assert context.parent_path == root
    assert context.current_path == a
    assert context.parent_siblings[context.parent_index].name == root.name

    manager.right()
    context = manager.context
    assert context.parent_path == a
    assert context.current_index == 0
    assert context.current_path == a / "b"


def test_up_down_are_bounded_and_reversible(tmp_path: Path, make_manager) -> None:
    for index in range(40):
        (tmp_path / f"file{index:02d}").write_text("", encoding="utf-8")
    manager = make_manager(tmp_path)

    manager.up()
    assert manager.context.current_index == 0

    manager.down(15)
    context = manager.context
    assert context.current_index == 15
    start_shift = context.current_siblings_shift
    manager.down()
    manager.up()
    assert context.current_index == 15
    assert context.current_path == tmp_path.resolve() / "file15"
    assert abs(context.current_siblings_shift - start_shift) <= 1

    manager.down(100)
    assert context.current_index == 39
    assert context.current_siblings_shift == 40 - manager.display.column_effective_height


def test_fast_keys_move_five(tmp_path: Path, make_manager) -> None:
    for index in range(12):
        (tmp_path / f"f{index:02d}").write_text("", encoding="utf-8")
    manager = make_manager(tmp_path)
    keys(manager, "J")
    assert manager.context.current_index == 5
    keys(manager, "jK")
    assert manager.context.current_index == 1


def test_left_at_root_is_noop(make_manager) -> None:
    manager = make_manager(Path("/"))
    before = manager.context.parent_path
    manager.left()
    assert manager.context.parent_path == before == Path("/")
    assert names(manager.context.parent_siblings) == ["/"]


def test_empty_directory(tmp_path: Path, make_manager) -> None:
    (tmp_path / "empty").mkdir()
    manager = make_manager(tmp_path / "empty")
    context = manager.context
    assert context.inside_empty_dir
    assert context.current_path is None
    manager.down()
    manager.up()
    manager.right()
    assert context.current_siblings == []


def test_right_on_symlink_to_directory_enters_it(tmp_path: Path, make_manager) -> None:
    root = tmp_path.resolve()
    (root / "real").mkdir()
    (root / "real" / "inside").write_text("", encoding="utf-8")
    (root / "alias").symlink_to(root / "real")
    manager = make_manager(root)

    assert manager.context.current_path == root / "alias"
    manager.right()
    assert manager.context.parent_path == root / "alias"
    assert names(manager.context.current_siblings) == ["inside"]


def test_right_on_file_runs_background_rule(tmp_path: Path, make_manager) -> None:
    (tmp_path / "movie.mkv").write_bytes(b"")
    manager = make_manager(tmp_path)
    with patch("millerfm.navigation.spawn_async") as spawn:
        manager.right()
    spawn.assert_called_once_with("mpv", [str(tmp_path.resolve() / "movie.mkv")])


def test_right_on_file_without_rule_notifies(tmp_path: Path, make_manager) -> None:
    (tmp_path / "blob.bin").write_bytes(b"")
    manager = make_manager(tmp_path)
    manager.right()
    assert manager.notification is not None
    assert "No rule" in manager.notification.text


def test_goto_regenerates_and_keeps_settings(tmp_path: Path, make_manager) -> None:
    (tmp_path / "x").mkdir()
    (tmp_path / "x" / ".secret").write_text("", encoding="utf-8")
    manager = make_manager(tmp_path, show_hidden=True)
    manager.goto(tmp_path / "x")
    assert manager.context.parent_path == tmp_path / "x"
    assert names(manager.context.current_siblings) == [".secret"]

    manager.goto(tmp_path / "missing")
    assert manager.context.parent_path == tmp_path / "x"
    assert "Not a directory" in manager.notification.text


def test_update_current_sees_new_files_and_clamps(tmp_path: Path, make_manager) -> None:
    for name in ("a", "b", "c"):
        (tmp_path / name).write_text("", encoding="utf-8")
    manager = make_manager(tmp_path)
    manager.down(2)
    (tmp_path / "c").unlink()
    (tmp_path / "b").unlink()
    manager.update_current()
    assert names(manager.context.current_siblings) == ["a"]
    assert manager.context.current_index == 0

    (tmp_path / "d").write_text("", encoding="utf-8")
    keys(manager, "u")
    assert names(manager.context.current_siblings) == ["a", "d"]


def test_update_current_recovers_from_deleted_directory(tmp_path: Path, make_manager) -> None:
    (tmp_path / "gone" / "deeper").mkdir(parents=True)
    manager = make_manager(tmp_path / "gone" / "deeper")
    (tmp_path / "gone" / "deeper").rmdir()
    (tmp_path / "gone").rmdir()
    manager.update_current()
    assert manager.context.parent_path == tmp_path.resolve()


def test_sorting_keeps_cursor_on_same_entry(tmp_path: Path, make_manager) -> None:
    for name, mtime in (("a", 300), ("b", 100), ("c", 200)):
        path = tmp_path / name
        path.write_text("", encoding="utf-8")
        os.utime(path, (mtime, mtime))
    manager = make_manager(tmp_path)
    manager.down()
    keys(manager, "st")
    assert manager.sorting is SortingType.TIME_MODIFIED
    assert names(manager.context.current_siblings) == ["b", "c", "a"]
    assert manager.context.current_entry().name == "b"

    keys(manager, "sl")
    assert names(manager.context.current_siblings) == ["a", "b", "c"]


def test_toggle_hidden(tmp_path: Path, make_manager) -> None:
    (tmp_path / ".dot").write_text("", encoding="utf-8")
    (tmp_path / "plain").write_text("", encoding="utf-8")
    manager = make_manager(tmp_path)
    assert names(manager.context.current_siblings) == ["plain"]
    keys(manager, "zh")
    assert names(manager.context.current_siblings) == [".dot", "plain"]
    assert manager.context.current_entry().name == "plain"


def test_resize_recomputes_geometry(tmp_path: Path, make_manager) -> None:
    for index in range(40):
        (tmp_path / f"f{index:02d}").write_text("", encoding="utf-8")
    manager = make_manager(tmp_path)
    manager.down(30)
    manager.handle_resize(10, 60)
    assert manager.display.column_effective_height == 6
    assert manager.display.scrolling_gap == 2
    context = manager.context
    assert context.current_siblings_shift <= 30 < context.current_siblings_shift + 6
