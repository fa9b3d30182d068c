# aiaccess/logsink.py
"""
@file logsink.py
@brief Console/file line sink shared by the action and timing loggers.
"""

from __future__ import annotations

import os
import threading
from typing import Optional

_TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str) -> bool:
    """True when environment variable `name` holds a truthy value."""
    return os.getenv(name, "").strip().lower() in _TRUTHY


class LogSink:
    """
    Writes finished log lines to stdout and/or an append-only file.

    Disabled until enable() is called. File errors are swallowed so that
    logging can never fail the operation being logged.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None

    def configure_output(self, *, console: bool = True, file_path: Optional[str] = None) -> None:
        """Choose console and/or append-file output."""
        with self._lock:
            self._console = bool(console)
            self._file_path = file_path

    def enable(self) -> None:
        """Turn output on."""
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        """Turn output off."""
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        """Whether output is on."""
        return self._enabled

    @property
    def file_path(self) -> Optional[str]:
        """Path of the append file, if any."""
        return self._file_path

    def write_line(self, line: str) -> None:
        """Write one line to every configured target."""
        if self._console:
            print(line, flush=True)

        path = self._file_path
        if not path:
            return
        try:
            os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)
            with self._lock:
                with open(path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except OSError:
            pass
