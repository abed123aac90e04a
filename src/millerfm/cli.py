"""Command-line entry point for millerfm.

1. Read the command line and the configuration file.
2. Check that the starting directory really exists.
3. Point the log file at the configured location.
4. Launch the interactive file manager, or log any crash information.
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from millerfm import FileManager, FileManagerError, __version__
from millerfm.config import create_default_config, get_start_directory, load_config

logger = logging.getLogger(__name__)

# Crash dump file location
CRASH_LOG_FILE = Path.home() / "millerfm.crash.txt"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def validate_directory(path: Path, fallback: Path) -> Path:
    """Return ``path`` resolved, or ``fallback`` with a warning when unusable."""
    try:
        resolved = path.resolve()
        if not resolved.exists():
            print(f"Warning: directory does not exist: {path}", file=sys.stderr)
            return fallback
        if not resolved.is_dir():
            print(f"Warning: path is not a directory: {path}", file=sys.stderr)
            return fallback
        return resolved
    except (OSError, RuntimeError) as e:
        print(f"Warning: cannot access directory: {path} ({e})", file=sys.stderr)
        return fallback


def configure_logging(config: Dict[str, Any]) -> None:
    """Send log records to the configured file; the terminal belongs to curses."""
    settings = config.get("logging", {})
    level = getattr(logging, str(settings.get("level", "WARNING")).upper(), logging.WARNING)
    log_file = Path(str(settings.get("file", "~/.millerfm.log"))).expanduser()
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as err:
        print(f"Warning: cannot open log file {log_file}: {err}", file=sys.stderr)
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("millerfm")
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def write_crash_log(exception: BaseException) -> None:
    """Append a detailed crash report to :data:`CRASH_LOG_FILE`."""
    try:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        crash_info = f"""
================================================================================
millerfm Crash Report
================================================================================
Timestamp: {timestamp}
Version: {__version__}
Python: {sys.version}
Platform: {sys.platform}

Exception Type: {type(exception).__name__}
Exception Message: {str(exception)}

Traceback:
{traceback.format_exc()}
================================================================================
"""
        with open(CRASH_LOG_FILE, "a") as f:
            f.write(crash_info)

        print("\nmillerfm crashed unexpectedly!", file=sys.stderr)
        print(f"   Crash details saved to: {CRASH_LOG_FILE}", file=sys.stderr)
        print("   Please report this issue with the crash log.", file=sys.stderr)
    except OSError:
        # If we can't even write the crash log, just print to stderr
        print("\nmillerfm crashed and could not write crash log!", file=sys.stderr)
        traceback.print_exc()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Browse the filesystem in three columns in the terminal."
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show version number and exit.",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Directory to start in (default: general.start_directory from the config).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Launch the file manager and report how it ended."""
    try:
        args = parse_args(argv)

        # curses needs a real terminal
        if not sys.stdout.isatty():
            print("The file manager requires an interactive terminal.")
            return 1

        create_default_config()
        config = load_config()
        configure_logging(config)

        fallback = get_start_directory(config)
        if not fallback.is_dir():
            fallback = Path.cwd()
        if args.directory is None:
            start = fallback
        else:
            start = validate_directory(Path(args.directory).expanduser(), fallback)

        logger.info("Starting in %s", start)
        manager = FileManager(start, config)
        final = manager.browse()
        print(f"Final directory: {final}")
        return 0

    except FileManagerError as err:
        print(f"Could not start file manager: {err}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        # Ctrl+C is a normal exit, not a crash
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        write_crash_log(e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
