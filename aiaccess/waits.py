# aiaccess/waits.py
"""
@file waits.py
@brief Non-blocking polling utilities for wait-for-element semantics.

poll_until() performs the first check on the caller's thread and schedules
every later check on a timer thread, so the caller is never blocked.
poll_until_async() is the asyncio equivalent.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .timinglogger import TIMING_LOGGER

log = logging.getLogger(__name__)

SUCCESS = "success"
TIMEOUT = "timeout"
CANCELLED = "cancelled"


def _now() -> float:
    """Monotonic time source for deterministic timeout calculations."""
    return time.monotonic()


@dataclass(frozen=True)
class PollOutcome:
    status: str
    value: Any = None
    attempts: int = 0
    elapsed: float = 0.0

    @property
    def succeeded(self) -> bool:
        """True when the condition was met."""
        return self.status == SUCCESS


def _log_outcome(description: str, timeout: float, outcome: PollOutcome) -> None:
    TIMING_LOGGER.wait_finished(description, outcome.status, timeout, outcome.attempts, outcome.elapsed)


def _check(predicate: Callable[[], Any]) -> Any:
    # A predicate that raises counts as "not yet".
    try:
        return predicate()
    except Exception as e:
        log.debug("Poll predicate raised %s: %s", type(e).__name__, e)
        return None


class PollHandle:
    """
    Handle for a scheduled poll.

    Completes exactly once, with a success, timeout or cancelled outcome.
    """

    def __init__(
        self,
        description: str,
        timeout: float,
        on_done: Optional[Callable[[PollOutcome], None]] = None,
    ):
        self.description = description
        self.timeout = timeout
        self._on_done = on_done
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._timer: Optional[threading.Timer] = None
        self._outcome: Optional[PollOutcome] = None
        self._start = _now()
        self.attempts = 0

    @property
    def elapsed(self) -> float:
        """Seconds since polling started."""
        return _now() - self._start

    def done(self) -> bool:
        """True once the poll has finished."""
        return self._event.is_set()

    def cancelled(self) -> bool:
        """True if the poll was cancelled."""
        outcome = self._outcome
        return outcome is not None and outcome.status == CANCELLED

    def wait(self, timeout: Optional[float] = None) -> Optional[PollOutcome]:
        """Block until the poll completes; returns None if timeout expires first."""
        if not self._event.wait(timeout):
            return None
        return self._outcome

    def cancel(self) -> bool:
        """Stop polling. Returns False if the poll already completed."""
        with self._lock:
            timer = self._timer
            self._timer = None
        if timer is not None:
            timer.cancel()
        return self._finish(PollOutcome(CANCELLED, attempts=self.attempts, elapsed=self.elapsed))

    def _schedule(self, delay: float, fn: Callable[[], None]) -> None:
        with self._lock:
            if self._outcome is not None:
                return
            timer = threading.Timer(delay, fn)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _finish(self, outcome: PollOutcome) -> bool:
        with self._lock:
            if self._outcome is not None:
                return False
            self._outcome = outcome
            self._timer = None
        self._event.set()
        _log_outcome(self.description, self.timeout, outcome)
        if self._on_done is not None:
            try:
                self._on_done(outcome)
            except Exception:
                log.exception("Completion callback for %s failed", self.description)
        return True


def poll_until(
    predicate: Callable[[], Any],
    timeout: float,
    interval: float = 0.1,
    on_done: Optional[Callable[[PollOutcome], None]] = None,
    description: str = "condition",
) -> PollHandle:
    """
    Check predicate now, then every interval seconds until it returns a
    truthy value or timeout seconds have elapsed.

    The last wait is shortened so the final check lands on the deadline;
    a timeout outcome therefore arrives after at least timeout seconds and
    less than one interval later.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")

    handle = PollHandle(description, timeout, on_done)

    TIMING_LOGGER.wait_started(description, timeout, interval)

    def check() -> None:
        if handle.done():
            return
        handle.attempts += 1
        result = _check(predicate)
        elapsed = handle.elapsed
        if result:
            handle._finish(PollOutcome(SUCCESS, result, handle.attempts, elapsed))
            return
        if elapsed >= timeout:
            handle._finish(PollOutcome(TIMEOUT, None, handle.attempts, elapsed))
            return
        handle._schedule(min(interval, timeout - elapsed), check)

    check()
    return handle


async def poll_until_async(
    predicate: Callable[[], Any],
    timeout: float,
    interval: float = 0.1,
    description: str = "condition",
) -> PollOutcome:
    """
    Coroutine form of poll_until().

    Task cancellation propagates as asyncio.CancelledError.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")

    start = _now()
    attempts = 0

    TIMING_LOGGER.wait_started(description, timeout, interval)

    while True:
        attempts += 1
        result = _check(predicate)
        elapsed = _now() - start
        if result:
            outcome = PollOutcome(SUCCESS, result, attempts, elapsed)
            break
        if elapsed >= timeout:
            outcome = PollOutcome(TIMEOUT, None, attempts, elapsed)
            break
        await asyncio.sleep(min(interval, timeout - elapsed))

    _log_outcome(description, timeout, outcome)
    return outcome
