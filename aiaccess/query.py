# aiaccess/query.py
"""
@file query.py
@brief Read-only lookups over a registry or a snapshot.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Protocol

from .exceptions import PatternError
from .geometry import Point, Rect
from .models import TrackedElement
from .validation import ValidationPolicy

log = logging.getLogger(__name__)


class ElementSource(Protocol):
    def get(self, identifier: str) -> Optional[TrackedElement]: ...

    def all(self) -> Dict[str, TrackedElement]: ...


class QueryEngine:
    """
    Pure reads against an ElementRegistry (live state) or a
    TrackingSnapshot (frozen state).

    Result order of filter/in_region/matching is unspecified; sort
    explicitly when order matters.
    """

    def __init__(self, source: ElementSource):
        self.source = source

    def find(self, identifier: str) -> Optional[TrackedElement]:
        """Element by identifier, or None."""
        return self.source.get(identifier)

    def filter(self, predicate: Callable[[TrackedElement], bool]) -> List[TrackedElement]:
        """Elements for which predicate returns True."""
        return [el for el in self.source.all().values() if predicate(el)]

    def in_region(self, region: Rect) -> List[TrackedElement]:
        """Elements whose frame overlaps region with positive area."""
        return self.filter(lambda el: region.intersects(el.frame))

    def matching(self, pattern: str) -> List[str]:
        """
        Identifiers matched anywhere by a case-insensitive regex.

        An invalid pattern yields [] and is logged instead of raised.
        """
        try:
            return self.matching_validated(pattern)
        except PatternError as e:
            log.debug("Regex validation failed: %s", e)
            return []

    def matching_validated(self, pattern: str) -> List[str]:
        """Same as matching() but raises PatternError on a bad pattern."""
        regex = ValidationPolicy.compile_pattern(pattern)
        return [identifier for identifier in self.source.all() if regex.search(identifier)]

    def nearest(self, point: Point) -> Optional[TrackedElement]:
        """Element whose center is closest to point, or None when empty."""
        best: Optional[TrackedElement] = None
        best_dist = 0.0
        for el in self.source.all().values():
            center = el.center
            dist = (center.x - point.x) ** 2 + (center.y - point.y) ** 2
            if best is None or dist < best_dist:
                best, best_dist = el, dist
        return best
