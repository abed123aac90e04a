"""Starting external programs: openers for files, copies, moves, shell commands."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

FILE_PLACEHOLDER = "@"

TEXT_EXTENSIONS = [
    "txt", "cpp", "h", "rs", "lock", "toml", "zsh", "java", "py",
    "sh", "md", "log", "yml", "tex", "nb", "js", "ts", "html", "css", "json",
]
TEXT_EXACT_NAMES = ["Makefile", ".gitignore"]
VIDEO_EXTENSIONS = ["mkv", "avi", "mp4", "mp3", "m4b"]
DOCUMENT_EXTENSIONS = ["pdf", "djvu"]
IMAGE_EXTENSIONS = ["jpg", "jpeg", "png"]


class SpawnError(Exception):
    """Raised when an external program cannot be started."""


@dataclass(frozen=True)
class SpawnRule:
    """A command template such as ``vim @``; ``@`` is replaced by the file."""

    template: str
    background: bool

    def generate(self, file_path: str) -> "SpawnCommand":
        parts = self.template.split()
        args = [file_path if part == FILE_PLACEHOLDER else part for part in parts[1:]]
        return SpawnCommand(app=parts[0], args=args, background=self.background)


@dataclass(frozen=True)
class SpawnCommand:
    app: str
    args: List[str]
    background: bool

    @property
    def argv(self) -> List[str]:
        return [self.app, *self.args]


@dataclass(frozen=True)
class SpawnPattern:
    rule: SpawnRule
    extension: Optional[str] = None
    exact_name: Optional[str] = None

    def matches(self, file_name: str) -> bool:
        if self.exact_name is not None:
            return file_name == self.exact_name
        return file_name.lower().endswith(f".{self.extension}")


def is_previewable(file_name: str) -> bool:
    """Return True for files whose contents are shown in the right column."""
    if file_name in TEXT_EXACT_NAMES:
        return True
    return any(file_name.endswith(f".{ext}") for ext in TEXT_EXTENSIONS)


def generate_spawn_patterns(openers: Mapping[str, str]) -> List[SpawnPattern]:
    """Build the open rules from the ``openers`` config section."""
    editor = openers.get("text") or f"{os.environ.get('EDITOR', 'vim')} {FILE_PLACEHOLDER}"
    table = [
        (editor, TEXT_EXTENSIONS, False),
        (openers.get("video", ""), VIDEO_EXTENSIONS, True),
        (openers.get("document", ""), DOCUMENT_EXTENSIONS, True),
        (openers.get("image", ""), IMAGE_EXTENSIONS, True),
    ]
    patterns: List[SpawnPattern] = []
    for template, extensions, background in table:
        if not template.strip():
            continue
        rule = SpawnRule(template=template, background=background)
        patterns.extend(SpawnPattern(rule=rule, extension=ext) for ext in extensions)
    editor_rule = SpawnRule(template=editor, background=False)
    patterns.extend(SpawnPattern(rule=editor_rule, exact_name=name) for name in TEXT_EXACT_NAMES)
    return patterns


def rule_for(path: Path, patterns: Sequence[SpawnPattern]) -> Optional[SpawnCommand]:
    """Return the command that opens ``path``, or None when nothing matches."""
    for pattern in patterns:
        if pattern.matches(path.name):
            return pattern.rule.generate(str(path))
    return None


def spawn_async(app: str, args: Sequence[str], cwd: Optional[Path] = None) -> subprocess.Popen:
    """Start a program without waiting for it."""
    try:
        return subprocess.Popen(
            [app, *args],
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except (OSError, subprocess.SubprocessError) as err:
        logger.error("Failed to start %s: %s", app, err)
        raise SpawnError(f"Failed to start {app}: {err}") from err


def spawn_and_wait(app: str, args: Sequence[str]) -> int:
    """Run a program attached to the terminal and wait for it to exit."""
    try:
        return subprocess.run([app, *args], check=False).returncode
    except (OSError, subprocess.SubprocessError) as err:
        logger.error("Failed to run %s: %s", app, err)
        raise SpawnError(f"Failed to run {app}: {err}") from err


def execute_command_from(path: Path, command: str) -> subprocess.Popen:
    """Run ``command`` through the shell inside ``path`` without waiting."""
    try:
        return subprocess.Popen(
            command,
            shell=True,
            cwd=path,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            env=os.environ.copy(),
            start_new_session=True,
        )
    except (OSError, subprocess.SubprocessError) as err:
        logger.error("Failed to run command %r in %s: %s", command, path, err)
        raise SpawnError(f"Command failed: {err}") from err


__all__ = [
    "SpawnCommand",
    "SpawnError",
    "SpawnPattern",
    "SpawnRule",
    "execute_command_from",
    "generate_spawn_patterns",
    "is_previewable",
    "rule_for",
    "spawn_and_wait",
    "spawn_async",
]
