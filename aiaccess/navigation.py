# aiaccess/navigation.py
"""
@file navigation.py
@brief High-level automation API: tap, type, swipe and wait-for-element.

Every operation returns a NavigationResult; nothing raises past this
boundary. "Element not found" and "timeout" are ordinary outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .actionlogger import ACTION_LOGGER, ActionLogger
from .config import TrackerConfig
from .exceptions import (ActionError, ElementNotFoundError, PatternError,
                         TimeoutError, WaitCancelledError)
from .geometry import Point, Rect
from .models import TrackedElement
from .query import QueryEngine
from .registry import ElementRegistry
from .waits import CANCELLED, SUCCESS, PollHandle, PollOutcome, poll_until, poll_until_async


class NavigationStatus(str, Enum):
    SUCCESS = "success"
    ELEMENT_NOT_FOUND = "element_not_found"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass(frozen=True)
class NavigationResult:
    """
    Outcome of a navigation operation.

    Attributes:
        status: One of the NavigationStatus values
        identifier: Element the operation targeted, if any
        error: Cause for ELEMENT_NOT_FOUND/TIMEOUT/ERROR outcomes
        value: Operation payload on success (tap point, matched identifiers, element)
    """
    status: NavigationStatus
    identifier: Optional[str] = None
    error: Optional[BaseException] = None
    value: Any = None

    @classmethod
    def success(cls, identifier: Optional[str] = None, value: Any = None) -> NavigationResult:
        """Successful outcome."""
        return cls(NavigationStatus.SUCCESS, identifier=identifier, value=value)

    @classmethod
    def element_not_found(cls, identifier: str) -> NavigationResult:
        """Outcome for an identifier that is not tracked."""
        return cls(
            NavigationStatus.ELEMENT_NOT_FOUND,
            identifier=identifier,
            error=ElementNotFoundError(identifier),
        )

    @classmethod
    def timeout(cls, identifier: Optional[str] = None, error: Optional[BaseException] = None) -> NavigationResult:
        """Outcome for a wait that ran out of time."""
        return cls(NavigationStatus.TIMEOUT, identifier=identifier, error=error)

    @classmethod
    def failure(cls, cause: BaseException, identifier: Optional[str] = None) -> NavigationResult:
        """Outcome for a failed callback or query."""
        return cls(NavigationStatus.ERROR, identifier=identifier, error=cause)

    @property
    def ok(self) -> bool:
        """True for SUCCESS."""
        return self.status is NavigationStatus.SUCCESS

    def to_log_dict(self) -> Dict[str, Any]:
        """Flat dict suitable for structured logging."""
        return {
            "status": self.status.value,
            "identifier": self.identifier,
            "error": f"{type(self.error).__name__}: {self.error}" if self.error else None,
        }


class WaitHandle:
    """Pending wait_for_element() call."""

    def __init__(self, poll: PollHandle, identifier: str):
        self._poll = poll
        self.identifier = identifier

    def done(self) -> bool:
        """True once the wait has resolved."""
        return self._poll.done()

    def cancel(self) -> bool:
        """Stop polling. The registry is not touched."""
        return self._poll.cancel()

    def result(self, timeout: Optional[float] = None) -> Optional[NavigationResult]:
        """Block until resolved; None if timeout (seconds) expires first."""
        outcome = self._poll.wait(timeout)
        if outcome is None:
            return None
        return _wait_result(self.identifier, self._poll.timeout, outcome)


def _wait_result(identifier: str, timeout: float, outcome: PollOutcome) -> NavigationResult:
    if outcome.status == SUCCESS:
        return NavigationResult.success(identifier, value=outcome.value)
    if outcome.status == CANCELLED:
        return NavigationResult.failure(WaitCancelledError(f"element '{identifier}'"), identifier)
    error = TimeoutError(
        f"element '{identifier}'",
        timeout,
        attempt_count=outcome.attempts,
        elapsed_time=outcome.elapsed,
    )
    return NavigationResult.timeout(identifier, error)


class NavigationService:
    """
    Automation-facing API over an ElementRegistry.

    Callbacks are optional hooks for the automation tool that actually
    performs input:
      on_element_tap(identifier, point)
      on_text_input(identifier, text)
      on_swipe(from_point, to_point)

    A successful tap or type means the identifier resolved and the callback
    was invoked, not that the UI confirmed the input.
    """

    def __init__(
        self,
        registry: ElementRegistry,
        logger: Optional[ActionLogger] = None,
        config: Optional[TrackerConfig] = None,
    ):
        self.registry = registry
        self.query = QueryEngine(registry)
        self.logger = logger or ACTION_LOGGER
        self.config = config or registry.config

        self.on_element_tap: Optional[Callable[[str, Point], None]] = None
        self.on_text_input: Optional[Callable[[str, str], None]] = None
        self.on_swipe: Optional[Callable[[Point, Point], None]] = None

    def _log(self, method: str, *args: Any, **kwargs: Any) -> None:
        # Logging must never affect the outcome of an operation.
        try:
            getattr(self.logger, method)(*args, **kwargs)
        except Exception:
            pass

    def _invoke(self, action: str, identifier: Optional[str], callback: Optional[Callable[..., None]], *args: Any) -> Optional[NavigationResult]:
        if callback is None:
            return None
        try:
            callback(*args)
        except Exception as e:
            return NavigationResult.failure(ActionError(action, identifier=identifier, cause=e), identifier)
        return None

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def tap_element(self, identifier: str) -> NavigationResult:
        """Tap the center of a tracked element."""
        element = self.query.find(identifier)
        if element is None:
            self._log("debug", f"Element not found: {identifier}")
            return NavigationResult.element_not_found(identifier)

        center = element.center
        self._log(
            "log_interaction",
            identifier,
            "tap",
            {"x": str(int(center.x)), "y": str(int(center.y))},
        )
        failed = self._invoke("tap", identifier, self.on_element_tap, identifier, center)
        return failed or NavigationResult.success(identifier, value=center)

    def type_text(self, identifier: str, text: str) -> NavigationResult:
        """Send text to an input element. Only the text length is logged."""
        if self.query.find(identifier) is None:
            self._log("debug", f"Input field not found: {identifier}")
            return NavigationResult.element_not_found(identifier)

        self._log("log_interaction", identifier, "type", {"length": str(len(text))})
        failed = self._invoke("type", identifier, self.on_text_input, identifier, text)
        return failed or NavigationResult.success(identifier)

    def swipe(self, from_point: Point, to_point: Point) -> NavigationResult:
        """Coordinate-based swipe; no element lookup is performed."""
        self._log(
            "log_interaction",
            "gesture",
            "swipe",
            {"from": str(from_point), "to": str(to_point)},
        )
        failed = self._invoke("swipe", None, self.on_swipe, from_point, to_point)
        return failed or NavigationResult.success(value=(from_point, to_point))

    def navigate(self, to: str, from_: Optional[str] = None, method: str = "programmatic",
                 metadata: Optional[Mapping[str, str]] = None) -> NavigationResult:
        """Record a screen change and make `to` the current view context."""
        origin = from_ if from_ is not None else self.registry.get_context().name
        self._log("log_navigation", to, origin, method)
        try:
            self.registry.set_context(to, metadata)
        except Exception as e:
            return NavigationResult.failure(e)
        return NavigationResult.success(value=to)

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    def wait_for_element(
        self,
        identifier: str,
        timeout: Optional[float] = None,
        completion: Optional[Callable[[NavigationResult], None]] = None,
    ) -> WaitHandle:
        """
        Poll until identifier is tracked or timeout (seconds) elapses.

        Returns immediately. The first check happens synchronously; later
        checks run every poll_interval on a timer thread. completion, if
        given, is called exactly once with the final NavigationResult.
        """
        timeout = self.config.wait_timeout if timeout is None else timeout

        def on_done(outcome: PollOutcome) -> None:
            if completion is not None:
                completion(_wait_result(identifier, timeout, outcome))

        poll = poll_until(
            lambda: self.query.find(identifier),
            timeout=timeout,
            interval=self.config.poll_interval,
            on_done=on_done,
            description=f"element '{identifier}'",
        )
        return WaitHandle(poll, identifier)

    async def wait_for_element_async(self, identifier: str, timeout: Optional[float] = None) -> NavigationResult:
        timeout = self.config.wait_timeout if timeout is None else timeout
        outcome = await poll_until_async(
            lambda: self.query.find(identifier),
            timeout=timeout,
            interval=self.config.poll_interval,
            description=f"element '{identifier}'",
        )
        return _wait_result(identifier, timeout, outcome)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_elements(self, pattern: str) -> List[str]:
        """Identifiers matching a case-insensitive regex; [] for a bad pattern."""
        return self.query.matching(pattern)

    def find_elements_validated(self, pattern: str) -> NavigationResult:
        """find_elements() as a NavigationResult instead of raising."""
        try:
            return NavigationResult.success(value=self.query.matching_validated(pattern))
        except PatternError as e:
            self._log("debug", f"Regex validation failed: {e}")
            return NavigationResult.failure(e)

    def elements_in_region(self, region: Rect) -> List[TrackedElement]:
        """Elements whose center lies in region."""
        return self.query.in_region(region)

    def get_current_context(self) -> Tuple[Optional[str], Dict[str, str]]:
        """Current view name and a copy of its metadata."""
        ctx = self.registry.get_context()
        return ctx.name, dict(ctx.metadata)

    def get_all_elements(self) -> Dict[str, TrackedElement]:
        """Copy of every tracked element."""
        return self.registry.all()
