# aiaccess/exceptions.py
"""
@file exceptions.py
@brief Exception classes for element tracking and navigation.
"""

from __future__ import annotations

import traceback
from typing import Optional


class AIAccessError(Exception):
    """Base exception for the framework."""

    recovery_suggestion: str = "Check the error details for recovery steps"


class ConfigError(AIAccessError):
    """Raised when YAML/JSON configuration or snapshot data is invalid."""

    recovery_suggestion = "Check your aiaccess configuration and setup"


class InvalidIdentifierError(AIAccessError):
    """Raised when an identifier is empty, too long or has invalid characters."""

    recovery_suggestion = "Use only letters, numbers, underscores, hyphens and periods in identifiers"

    def __init__(self, identifier: str, reason: Optional[str] = None):
        self.identifier = identifier
        self.reason = reason
        msg = f"Invalid identifier '{identifier}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class InvalidFrameError(AIAccessError):
    """Raised when a frame has non-finite, negative or out-of-bounds values."""

    recovery_suggestion = "Provide valid, finite coordinate values for the frame"

    def __init__(self, frame: object, reason: Optional[str] = None):
        self.frame = frame
        self.reason = reason
        msg = f"Invalid frame {frame}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ValidationError(AIAccessError):
    """Raised when context metadata fails validation."""

    recovery_suggestion = "Validate input parameters before calling the API"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Validation error: {reason}")


class ResourceLimitExceededError(AIAccessError):
    """Raised when a new element would exceed the registry capacity."""

    recovery_suggestion = "Remove unused elements or increase max_tracked_elements"

    def __init__(self, limit: int, current: int):
        self.limit = limit
        self.current = current
        super().__init__(f"Resource limit exceeded: {current} items (limit: {limit})")


class ElementNotFoundError(AIAccessError):
    """Raised when an identifier is not present in the registry."""

    recovery_suggestion = "Ensure the element is tracked before interacting with it"

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Element '{identifier}' not found in tracking registry")


class PatternError(AIAccessError):
    """Raised when a regular expression pattern cannot be compiled."""

    recovery_suggestion = "Use a valid regex pattern for element matching"

    def __init__(self, pattern: str, details: Optional[str] = None):
        self.pattern = pattern
        self.details = details
        msg = f"Regex error with pattern '{pattern}'"
        if details:
            msg += f": {details}"
        super().__init__(msg)


class TimeoutError(AIAccessError):
    """
    Carried by a TIMEOUT NavigationResult when a wait gives up.

    Attributes:
        description: What was being waited for, e.g. "element 'login_button'"
        timeout: Configured limit in seconds
        attempt_count: Number of predicate checks made
        elapsed_time: Seconds between the first check and giving up
    """

    recovery_suggestion = "Increase the timeout or check that the element is rendered"

    def __init__(
        self,
        description: str,
        timeout: float,
        attempt_count: Optional[int] = None,
        elapsed_time: Optional[float] = None,
    ):
        self.description = description
        self.timeout = timeout
        self.attempt_count = attempt_count
        self.elapsed_time = elapsed_time
        super().__init__(f"Timed out waiting for {description} after {timeout}s")

    def __str__(self) -> str:
        stats = []
        if self.attempt_count is not None:
            stats.append(f"{self.attempt_count} checks")
        if self.elapsed_time is not None:
            stats.append(f"{self.elapsed_time:.2f}s elapsed")
        message = super().__str__()
        return f"{message} ({', '.join(stats)})" if stats else message


class WaitCancelledError(AIAccessError):
    """A pending wait was cancelled through its handle."""

    recovery_suggestion = "Start a new wait if the element is still needed"

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Wait for {description} was cancelled")


class ActionError(AIAccessError):
    """An automation callback (tap, type, swipe) raised while handling a request."""

    recovery_suggestion = "Check the underlying error for specific recovery steps"

    def __init__(
        self,
        action: str,
        identifier: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.action = action
        self.identifier = identifier
        self.cause = cause

        target = f" on '{identifier}'" if identifier else ""
        reason = f": {type(cause).__name__}: {cause}" if cause is not None else ""
        super().__init__(f"{action} callback failed{target}{reason}")

    def get_cause_traceback(self) -> str:
        """Formatted traceback of the callback failure, or "" without a cause."""
        if self.cause is None:
            return ""
        return "".join(traceback.format_exception(type(self.cause), self.cause, self.cause.__traceback__))
