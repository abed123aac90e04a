"""Tests for configuration management."""

import copy
from pathlib import Path

from millerfm import config
from millerfm.config import (
    DEFAULT_CONFIG,
    _merge_config,
    create_default_config,
    get_bookmarks,
    get_columns_ratio,
    get_openers,
    get_sorting,
    get_start_directory,
    load_config,
    save_config,
    with_defaults,
)
from millerfm.modes import SortingType


def test_default_config_not_mutated(tmp_path):
    """Test that DEFAULT_CONFIG is not mutated by load_config() or _merge_config()."""
    original_default = copy.deepcopy(DEFAULT_CONFIG)
    original_config_file = config.CONFIG_FILE
    try:
        config.CONFIG_FILE = tmp_path / "missing.toml"

        config1 = load_config()
        config1["bookmarks"]["x"] = "/somewhere"
        config1["colors"]["directory"] = "red"

        assert DEFAULT_CONFIG == original_default, "DEFAULT_CONFIG was mutated after load_config()"
        assert "x" not in DEFAULT_CONFIG["bookmarks"]

        config2 = load_config()
        assert "x" not in config2["bookmarks"]
        assert config2["colors"]["directory"] == "cyan_bold"
    finally:
        config.CONFIG_FILE = original_config_file


def test_merge_config_not_mutated():
    """Test that _merge_config doesn't mutate the default config."""
    original_default = copy.deepcopy(DEFAULT_CONFIG)

    merged = _merge_config(DEFAULT_CONFIG, {"bookmarks": {"d": "~/Downloads"}})
    merged["bookmarks"]["e"] = "/etc"
    merged["layout"]["columns_ratio"].append(9)

    assert DEFAULT_CONFIG == original_default, "DEFAULT_CONFIG was mutated after _merge_config()"
    assert merged["bookmarks"]["h"] == "~"
    assert merged["bookmarks"]["d"] == "~/Downloads"


def test_merge_config_preserves_user_values():
    """Test that merge preserves user-specified values."""
    default = {"a": 1, "b": {"c": 2, "d": 3}, "e": 4}
    user = {"b": {"c": 99}, "f": 5}

    merged = _merge_config(default, user)

    assert merged["b"]["c"] == 99
    assert merged["b"]["d"] == 3
    assert merged["a"] == 1
    assert merged["e"] == 4
    assert merged["f"] == 5


def test_with_defaults_fills_partial_config():
    merged = with_defaults({"general": {"show_hidden": True}})
    assert merged["general"]["show_hidden"] is True
    assert merged["general"]["max_tabs"] == 8
    assert merged["transfers"]["active_poll_ms"] == 500


def test_save_and_load_config(tmp_path):
    """Test saving and loading configuration file."""
    original_config_file = config.CONFIG_FILE
    try:
        config.CONFIG_FILE = tmp_path / "test_config.toml"

        custom_config = copy.deepcopy(DEFAULT_CONFIG)
        custom_config["general"]["sorting"] = "time_modified"
        custom_config["bookmarks"]["p"] = "~/projects"

        save_config(custom_config)
        assert config.CONFIG_FILE.exists()

        loaded = load_config()
        assert get_sorting(loaded) is SortingType.TIME_MODIFIED
        assert loaded["bookmarks"]["p"] == "~/projects"
        assert "openers" in loaded
    finally:
        config.CONFIG_FILE = original_config_file


def test_partial_file_is_merged_with_defaults(tmp_path):
    original_config_file = config.CONFIG_FILE
    try:
        config.CONFIG_FILE = tmp_path / "partial.toml"
        config.CONFIG_FILE.write_text('[layout]\ncolumns_ratio = [1, 1, 2]\n', encoding="utf-8")
        loaded = load_config()
        assert get_columns_ratio(loaded) == [1, 1, 2]
        assert loaded["layout"]["scrolling_gap"] == 4
        assert loaded["general"]["sorting"] == "lexicographic"
    finally:
        config.CONFIG_FILE = original_config_file


def test_create_default_config_does_not_overwrite(tmp_path):
    original_config_file = config.CONFIG_FILE
    try:
        config.CONFIG_FILE = tmp_path / "created.toml"
        create_default_config()
        assert load_config() == DEFAULT_CONFIG

        config.CONFIG_FILE.write_text('[general]\nmax_tabs = 3\n', encoding="utf-8")
        create_default_config()
        assert load_config()["general"]["max_tabs"] == 3
    finally:
        config.CONFIG_FILE = original_config_file


def test_config_file_creation_failure_doesnt_crash(capsys):
    """Test that config save failure doesn't crash the application."""
    original_config_file = config.CONFIG_FILE
    try:
        config.CONFIG_FILE = Path("/dev/null/invalid/path.toml")
        save_config(DEFAULT_CONFIG)
    finally:
        config.CONFIG_FILE = original_config_file
    assert "Failed to save configuration" in capsys.readouterr().err


def test_corrupted_config_file_returns_defaults(tmp_path):
    """Test that corrupted config file returns defaults."""
    original_config_file = config.CONFIG_FILE
    try:
        config.CONFIG_FILE = tmp_path / "corrupted.toml"
        config.CONFIG_FILE.write_text("this is not valid TOML {{{")

        loaded = load_config()
        assert loaded == DEFAULT_CONFIG
    finally:
        config.CONFIG_FILE = original_config_file


def test_getters():
    cfg = with_defaults({
        "general": {"start_directory": "~/work", "sorting": "bogus"},
        "layout": {"columns_ratio": [1, 0, 2]},
        "bookmarks": {"w": "~/work"},
        "openers": {"video": "vlc @"},
    })
    assert get_start_directory(cfg) == Path.home() / "work"
    assert get_sorting(cfg) is SortingType.LEXICOGRAPHIC
    assert get_columns_ratio(cfg) == [2, 3, 3]
    assert get_bookmarks(cfg)["w"] == "~/work"
    assert get_bookmarks(cfg)["h"] == "~"
    assert get_openers(cfg)["video"] == "vlc @"
    assert get_openers(cfg)["image"] == "sxiv @"
