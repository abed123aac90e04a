import logging
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from millerfm import FileManagerError, __version__, cli, config

PROJECT_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def config_file(tmp_path):
    path = tmp_path / "millerfm.toml"
    with patch.object(config, "CONFIG_FILE", path):
        yield path


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("millerfm")
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_main_requires_interactive_terminal():
    result = subprocess.run(
        [sys.executable, "-m", "millerfm.cli"],
        cwd=PROJECT_ROOT / "src",
        capture_output=True,
        text=True,
        check=False,
    )
    assert result.returncode == 1
    assert "requires an interactive terminal" in result.stdout
    assert result.stderr == ""


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_args(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_validate_directory_falls_back(tmp_path, capsys):
    (tmp_path / "file").write_text("", encoding="utf-8")
    assert cli.validate_directory(tmp_path, Path("/")) == tmp_path.resolve()
    assert cli.validate_directory(tmp_path / "missing", Path("/")) == Path("/")
    assert cli.validate_directory(tmp_path / "file", Path("/")) == Path("/")
    err = capsys.readouterr().err
    assert "does not exist" in err
    assert "not a directory" in err


def _config(tmp_path):
    return {
        "general": {"start_directory": str(tmp_path)},
        "logging": {"file": str(tmp_path / "logs" / "fm.log"), "level": "INFO"},
    }


@patch("millerfm.cli.FileManager")
@patch("sys.stdout.isatty", return_value=True)
def test_main_runs_manager_and_prints_final_directory(mock_isatty, mock_manager, tmp_path, capsys):
    mock_manager.return_value.browse.return_value = tmp_path
    with patch("millerfm.cli.load_config", return_value=_config(tmp_path)):
        assert cli.main([str(tmp_path)]) == 0

    mock_manager.assert_called_once_with(tmp_path.resolve(), _config(tmp_path))
    assert f"Final directory: {tmp_path}" in capsys.readouterr().out
    assert (tmp_path / "logs" / "fm.log").exists()


@patch("millerfm.cli.FileManager")
@patch("sys.stdout.isatty", return_value=True)
def test_main_reports_startup_failure(mock_isatty, mock_manager, tmp_path, capsys):
    mock_manager.return_value.browse.side_effect = FileManagerError("no curses")
    with patch("millerfm.cli.load_config", return_value=_config(tmp_path)):
        assert cli.main([]) == 1
    assert "no curses" in capsys.readouterr().err


@patch("millerfm.cli.FileManager")
@patch("sys.stdout.isatty", return_value=True)
def test_main_interrupted(mock_isatty, mock_manager, tmp_path):
    mock_manager.return_value.browse.side_effect = KeyboardInterrupt
    with patch("millerfm.cli.load_config", return_value=_config(tmp_path)):
        assert cli.main([]) == 130


@patch("millerfm.cli.FileManager")
@patch("sys.stdout.isatty", return_value=True)
def test_main_writes_crash_log(mock_isatty, mock_manager, tmp_path):
    mock_manager.return_value.browse.side_effect = RuntimeError("boom")
    crash_file = tmp_path / "crash.txt"
    with patch("millerfm.cli.load_config", return_value=_config(tmp_path)), patch.object(
        cli, "CRASH_LOG_FILE", crash_file
    ):
        assert cli.main([]) == 1
    report = crash_file.read_text()
    assert "RuntimeError" in report
    assert "boom" in report


def test_configure_logging_uses_file_handler(tmp_path):
    cli.configure_logging(_config(tmp_path))
    logger = logging.getLogger("millerfm")
    assert logger.level == logging.INFO
    assert not logger.propagate
    assert isinstance(logger.handlers[0], logging.FileHandler)


@patch("millerfm.cli.FileManager")
@patch("sys.stdout.isatty", return_value=True)
def test_main_writes_default_config_on_first_launch(mock_isatty, mock_manager, tmp_path, config_file):
    mock_manager.return_value.browse.return_value = tmp_path
    assert not config_file.exists()
    with patch("millerfm.cli.load_config", return_value=_config(tmp_path)):
        assert cli.main([]) == 0
    assert config.load_config() == config.DEFAULT_CONFIG


def test_package_readme_exists():
    with open(PROJECT_ROOT / "pyproject.toml", "rb") as f:
        project = config.tomllib.load(f)["project"]
    assert project["readme"] == "README.md"
    assert (PROJECT_ROOT / project["readme"]).is_file()
