# aiaccess/registry.py
"""
@file registry.py
@brief Thread-safe registry of tracked UI elements and the current view context.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Mapping, Optional

from .actionlogger import ActionLogger
from .config import TrackerConfig
from .exceptions import AIAccessError, ResourceLimitExceededError
from .geometry import Rect
from .models import TrackedElement, TrackingSnapshot, ViewContext
from .validation import ValidationPolicy
from .viewcontext import ViewContextStore

log = logging.getLogger(__name__)


class ElementRegistry:
    """
    In-memory map from identifier to TrackedElement.

    All mutation goes through a single re-entrant lock. Readers receive
    copies (or immutable records) so they never see a half-written entry.
    When two threads write the same identifier, the one that acquires the
    lock last wins.

    The registry is constructed explicitly and handed to the query engine
    and navigation service; there is no process-wide instance.
    """

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        policy: Optional[ValidationPolicy] = None,
        clock: Callable[[], float] = time.time,
        logger: Optional[ActionLogger] = None,
    ):
        self.config = config or TrackerConfig()
        self.policy = policy or ValidationPolicy(self.config)
        self._clock = clock
        self._lock = threading.RLock()
        self._elements: Dict[str, TrackedElement] = {}
        self._view_context = ViewContextStore(self.policy, logger)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert(
        self,
        identifier: str,
        frame: Rect,
        context: Optional[Mapping[str, str]] = None,
    ) -> TrackedElement:
        """
        Validated insert-or-replace.

        @throws InvalidIdentifierError, InvalidFrameError, ValidationError
                on bad input (state is left untouched)
        @throws ResourceLimitExceededError when a new identifier would exceed
                max_tracked_elements; replacing an existing one always succeeds
        """
        context = dict(context or {})
        self.policy.validate_element(identifier, frame, context)
        return self._write(identifier, frame, context, enforce_capacity=True)

    def update(
        self,
        identifier: str,
        frame: Rect,
        context: Optional[Mapping[str, str]] = None,
    ) -> TrackedElement:
        """
        Best-effort insert-or-replace kept for backward compatibility.

        Validation failures are logged and the element is stored anyway.
        This path bypasses every registry invariant (identifier format,
        frame bounds, sensitive-data check and capacity); prefer upsert().
        """
        context = dict(context or {})
        try:
            self.policy.validate_element(identifier, frame, context)
        except AIAccessError as e:
            log.error("Failed to update element '%s': %s", identifier, e)
        return self._write(identifier, frame, context, enforce_capacity=False)

    def _write(
        self,
        identifier: str,
        frame: Rect,
        context: Dict[str, str],
        *,
        enforce_capacity: bool,
    ) -> TrackedElement:
        with self._lock:
            if enforce_capacity and identifier not in self._elements:
                limit = self.config.max_tracked_elements
                if len(self._elements) >= limit:
                    raise ResourceLimitExceededError(limit=limit, current=len(self._elements))
            element = TrackedElement(
                identifier=identifier,
                frame=frame,
                context=context,
                timestamp=self._clock(),
            )
            self._elements[identifier] = element

        center = element.center
        log.debug("Updated element: %s at (%.0f, %.0f)", identifier, center.x, center.y)
        return element

    def remove(self, identifier: str) -> bool:
        """Remove an element. Returns True if it was present; never raises."""
        with self._lock:
            return self._elements.pop(identifier, None) is not None

    def clear(self) -> None:
        """Remove every element and reset the view context in one step."""
        with self._lock:
            self._elements.clear()
            previous = self._view_context.reset()
        self._view_context.announce(previous, ViewContext.unset())

    def restore(self, snapshot: TrackingSnapshot) -> None:
        """
        Replace all state with the contents of a snapshot (replay).

        Every element goes through the same validation policy as upsert()
        and the element count is checked against max_tracked_elements.

        @throws InvalidIdentifierError, InvalidFrameError, ValidationError,
                ResourceLimitExceededError; on any error the registry is
                left unchanged
        """
        elements = dict(snapshot.elements)
        for identifier, element in elements.items():
            self.policy.validate_element(identifier, element.frame, element.context)

        limit = self.config.max_tracked_elements
        if len(elements) > limit:
            raise ResourceLimitExceededError(limit=limit, current=len(elements))

        ctx = snapshot.view_context
        new_context = self._view_context.prepare(ctx.name, ctx.metadata) if ctx.is_set else ViewContext.unset()

        with self._lock:
            previous, current = self._view_context.swap(new_context)
            self._elements = elements
        self._view_context.announce(previous, current)

    # ------------------------------------------------------------------
    # UI layer notifications
    # ------------------------------------------------------------------

    def notify_appeared(
        self,
        identifier: str,
        frame: Rect,
        context: Optional[Mapping[str, str]] = None,
    ) -> TrackedElement:
        """Track a component that entered the layout."""
        return self.update(identifier, frame, context)

    def notify_moved(self, identifier: str, frame: Rect) -> TrackedElement:
        """Move an element, keeping its context. Unknown identifiers are added."""
        with self._lock:
            existing = self._elements.get(identifier)
            context = dict(existing.context) if existing is not None else {}
            return self.update(identifier, frame, context)

    def notify_disappeared(self, identifier: str) -> None:
        """Stop tracking a component that left the layout."""
        self.remove(identifier)

    # ------------------------------------------------------------------
    # View context
    # ------------------------------------------------------------------

    def set_context(self, name: str, metadata: Optional[Mapping[str, str]] = None) -> ViewContext:
        """
        Replace the view context wholesale.

        The swap happens under the registry lock; the state-change log
        event is emitted after the lock is released.

        @throws ValidationError when metadata exceeds max_context_size
        """
        new_context = self._view_context.prepare(name, metadata)
        with self._lock:
            previous, current = self._view_context.swap(new_context)
        self._view_context.announce(previous, current)
        return current

    def get_context(self) -> ViewContext:
        """Current view context; the unset baseline when none was set."""
        return self._view_context.get()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, identifier: str) -> Optional[TrackedElement]:
        """Element by identifier, or None."""
        with self._lock:
            return self._elements.get(identifier)

    def all(self) -> Dict[str, TrackedElement]:
        """Copy of every tracked element keyed by identifier."""
        with self._lock:
            return dict(self._elements)

    def identifiers(self) -> List[str]:
        """Tracked identifiers in insertion order."""
        with self._lock:
            return list(self._elements)

    def snapshot(self) -> TrackingSnapshot:
        """Consistent copy of elements and view context."""
        with self._lock:
            return TrackingSnapshot(
                elements=self._elements,
                view_context=self._view_context.get(),
                timestamp=self._clock(),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._elements)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._elements

    def debug_dump(self) -> str:
        """Human-readable listing of the current state, sorted by identifier."""
        snap = self.snapshot()
        lines = [
            "[aiaccess] Current state:",
            f"  View: {snap.view_context.name or 'unknown'}",
            f"  Elements: {len(snap)}",
        ]
        for identifier in sorted(snap.elements):
            center = snap.elements[identifier].center
            lines.append(f"    {identifier}: ({center.x:.0f}, {center.y:.0f})")
        return "\n".join(lines)
