"""Tests for opening files and starting external programs."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from millerfm.spawn import (
    SpawnError,
    execute_command_from,
    generate_spawn_patterns,
    is_previewable,
    rule_for,
    spawn_async,
    spawn_and_wait,
)

OPENERS = {"text": "nvim @", "video": "mpv --fs @", "document": "", "image": "sxiv @"}


def test_rule_for_extensions_and_exact_names():
    patterns = generate_spawn_patterns(OPENERS)

    command = rule_for(Path("/tmp/main.py"), patterns)
    assert command.argv == ["nvim", "/tmp/main.py"]
    assert not command.background

    command = rule_for(Path("/tmp/MOVIE.MKV"), patterns)
    assert command.argv == ["mpv", "--fs", "/tmp/MOVIE.MKV"]
    assert command.background

    assert rule_for(Path("/src/Makefile"), patterns).app == "nvim"
    assert rule_for(Path("/tmp/archive.tar"), patterns) is None


def test_empty_opener_disables_rule():
    patterns = generate_spawn_patterns(OPENERS)
    assert rule_for(Path("/tmp/paper.pdf"), patterns) is None


def test_editor_defaults_to_environment(monkeypatch):
    monkeypatch.setenv("EDITOR", "nano")
    patterns = generate_spawn_patterns({"text": ""})
    assert rule_for(Path("notes.md"), patterns).argv == ["nano", "notes.md"]

    monkeypatch.delenv("EDITOR")
    patterns = generate_spawn_patterns({})
    assert rule_for(Path("notes.md"), patterns).app == "vim"


def test_is_previewable():
    assert is_previewable("README.md")
    assert is_previewable(".gitignore")
    assert not is_previewable("image.png")


@patch("millerfm.spawn.subprocess.Popen", side_effect=FileNotFoundError("missing"))
def test_spawn_async_failure_raises_spawn_error(mock_popen):
    with pytest.raises(SpawnError, match="Failed to start mpv"):
        spawn_async("mpv", ["movie.mkv"])


@patch("millerfm.spawn.subprocess.run", side_effect=FileNotFoundError("missing"))
def test_spawn_and_wait_failure_raises_spawn_error(mock_run):
    with pytest.raises(SpawnError, match="Failed to run vim"):
        spawn_and_wait("vim", ["notes.txt"])


@patch("millerfm.spawn.subprocess.Popen")
def test_execute_command_from_uses_shell_in_directory(mock_popen, tmp_path):
    execute_command_from(tmp_path, "touch x")
    args, kwargs = mock_popen.call_args
    assert args == ("touch x",)
    assert kwargs["shell"] is True
    assert kwargs["cwd"] == tmp_path
    assert kwargs["stdout"] is subprocess.DEVNULL


def test_execute_command_from_really_runs(tmp_path):
    process = execute_command_from(tmp_path, "touch made")
    process.wait(timeout=10)
    assert (tmp_path / "made").exists()
