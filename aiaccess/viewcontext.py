# aiaccess/viewcontext.py
"""
@file viewcontext.py
@brief Store for the single "current screen" name and its metadata.
"""

from __future__ import annotations

import threading
from typing import Mapping, Optional, Tuple

from .actionlogger import ACTION_LOGGER, ActionLogger
from .models import ViewContext
from .validation import ValidationPolicy


class ViewContextStore:
    """
    Holds at most one live ViewContext, replaced wholesale on every set().

    Metadata is only checked against the shared metadata-size bound.
    swap() changes state without logging; announce() emits the state-change
    event and is meant to run after any caller-held lock is released.
    """

    def __init__(
        self,
        policy: Optional[ValidationPolicy] = None,
        logger: Optional[ActionLogger] = None,
    ):
        self._policy = policy or ValidationPolicy()
        self._logger = logger or ACTION_LOGGER
        self._lock = threading.Lock()
        self._current = ViewContext.unset()

    def prepare(self, name: Optional[str], metadata: Optional[Mapping[str, str]] = None) -> ViewContext:
        """Validate metadata and build the replacement context without storing it."""
        meta = dict(metadata or {})
        self._policy.validate_metadata_size(meta)
        return ViewContext(name=name, metadata=meta)

    def swap(self, new_context: ViewContext) -> Tuple[ViewContext, ViewContext]:
        """Store new_context; returns (previous, new_context)."""
        with self._lock:
            previous = self._current
            self._current = new_context
        return previous, new_context

    def announce(self, previous: ViewContext, current: ViewContext) -> None:
        """Log a state change when the view name changed. Never raises."""
        if previous.name == current.name:
            return
        try:
            self._logger.log_state_change("view_context", previous.name or "none", current.name or "none")
        except Exception:
            pass

    def set(self, name: str, metadata: Optional[Mapping[str, str]] = None) -> ViewContext:
        """Validate, store and announce in one call."""
        previous, current = self.swap(self.prepare(name, metadata))
        self.announce(previous, current)
        return current

    def get(self) -> ViewContext:
        """Current context (the unset baseline when nothing was set)."""
        with self._lock:
            return self._current

    def reset(self) -> ViewContext:
        """Return to the unset baseline; returns the previous context."""
        previous, _ = self.swap(ViewContext.unset())
        return previous
