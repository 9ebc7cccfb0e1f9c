"""Loader configuration: file roots, audio formats and logging."""

from __future__ import annotations

import enum
import os
import sys
from typing import Any, Callable, List, Optional, Tuple

from .audio_wav import WavFormat

_LOG_BUFFER_SIZE = 256


class LogLevel(enum.Enum):
    INFO = enum.auto()
    WARNING = enum.auto()
    ERROR = enum.auto()


_LEVEL_NAMES = {
    LogLevel.INFO: "info",
    LogLevel.WARNING: "warning",
    LogLevel.ERROR: "error",
}


def log_level_string(level: LogLevel) -> str:
    """Lower-case name of a log level, or ``?`` for an unknown one."""
    return _LEVEL_NAMES.get(level, "?")


def ensure_final_separator(path: str) -> str:
    """Append ``/`` to a non-empty path that does not end with a separator."""
    if not path or path.endswith(("/", os.sep)):
        return path
    return path + "/"


def _path_directory(path: str) -> str:
    directory = os.path.dirname(path)
    return ensure_final_separator(directory) if directory else "./"


def _file_uid(path: str) -> Optional[Tuple[int, int]]:
    try:
        info = os.stat(path)
    except OSError:
        return None
    return info.st_dev, info.st_ino


LogReporter = Callable[[LogLevel, str], Any]


class Config:
    """Settings shared by effects: where imports and data files are found,
    which audio formats can be opened, and where log messages go."""

    def __init__(self) -> None:
        self.import_root = ""
        self.data_root = ""
        self.audio_formats: List[Any] = []
        self.log_reporter: Optional[LogReporter] = None

    def set_import_root(self, root: Optional[str]) -> None:
        self.import_root = ensure_final_separator(root or "")

    def set_data_root(self, root: Optional[str]) -> None:
        self.data_root = ensure_final_separator(root or "")

    def guess_file_roots(self, sourcepath: str) -> None:
        """Fill in unset roots by searching upward from a source file.

        The import root is the ``Effects/`` directory of the first ancestor
        holding both ``Effects/`` and ``Data/``; the data root is the
        ``Data/`` directory beside it.
        """
        if not self.import_root:
            cur_dir = _path_directory(sourcepath) + "../"
            cur_uid = _file_uid(cur_dir)
            while cur_uid is not None:
                if os.path.exists(cur_dir + "Effects/") and os.path.exists(cur_dir + "Data/"):
                    self.import_root = cur_dir + "Effects/"
                    break
                cur_dir += "../"
                old_uid, cur_uid = cur_uid, _file_uid(cur_dir)
                if cur_uid == old_uid:
                    break

        if not self.data_root and self.import_root:
            data_dir = self.import_root + "../Data/"
            if os.path.exists(data_dir):
                self.data_root = data_dir

    def register_audio_format(self, audio_format: Any) -> None:
        """Add a handler with ``can_handle(path)`` and ``open(path)`` methods."""
        self.audio_formats.append(audio_format)

    def register_builtin_audio_formats(self) -> None:
        self.audio_formats.append(WavFormat())

    def set_log_reporter(self, reporter: Optional[LogReporter]) -> None:
        """Send log messages to ``reporter(level, message)``; None for stderr."""
        self.log_reporter = reporter

    def log(self, level: LogLevel, message: str) -> None:
        if self.log_reporter is not None:
            self.log_reporter(level, message)
        else:
            print(f"[jsfxkit] {log_level_string(level)}: {message}", file=sys.stderr)

    def logf(self, level: LogLevel, fmt: str, *args: Any) -> None:
        """Log a %-formatted message, truncated to 255 characters."""
        self.log(level, (fmt % args)[:_LOG_BUFFER_SIZE - 1])