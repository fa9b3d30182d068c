# aiaccess/timinglogger.py
"""
@file timinglogger.py
@brief Lifecycle lines for element waits: started, then exactly one of
       success, timeout or cancelled.
"""

from __future__ import annotations

import os
import time
from typing import Any, Optional

from .logsink import LogSink, env_flag


class TimingLogger(LogSink):
    """
    One line per wait event, e.g.

        [error] [timing] time=12:00:01 event=wait_timeout description=element 'x' attempts=6
    """

    def configure(self, *, console: bool = True, file_path: Optional[str] = None) -> None:
        """Set output targets."""
        self.configure_output(console=console, file_path=file_path)

    def log(
        self,
        *,
        event: str,
        description: Optional[str] = None,
        status: str = "info",
        **fields: Any,
    ) -> None:
        """Write one timing event."""
        if not self._enabled:
            return

        tokens = [f"[{status.lower()}]", "[timing]", f"time={time.strftime('%H:%M:%S')}", f"event={event}"]
        if description:
            tokens.append(f"description={description}")
        tokens.extend(f"{key}={value}" for key, value in fields.items())
        self.write_line(" ".join(tokens))

    def wait_started(self, description: str, timeout: float, interval: float) -> None:
        """Log the start of a polling wait."""
        self.log(event="wait_start", description=description, timeout_s=timeout, interval_s=interval)

    def wait_finished(self, description: str, status: str, timeout: float, attempts: int, elapsed: float) -> None:
        """status is the poll outcome: success, timeout or cancelled."""
        self.log(
            event=f"wait_{status}",
            description=description,
            status="success" if status == "success" else "error",
            timeout_s=timeout,
            attempts=attempts,
            elapsed_s=round(elapsed, 3),
        )


def configure_from_env(logger: Optional[TimingLogger] = None) -> TimingLogger:
    """Enable timing lines when AIACCESS_TIMING_LOGGING is truthy."""
    logger = logger or TIMING_LOGGER
    if not env_flag("AIACCESS_TIMING_LOGGING"):
        logger.disable()
        return logger
    logger.configure(file_path=os.getenv("AIACCESS_TIMING_LOG_FILE"))
    logger.enable()
    return logger


TIMING_LOGGER = TimingLogger()
