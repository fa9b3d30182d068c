# aiaccess/models.py
"""
@file models.py
@brief Immutable records held by the element registry.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from .geometry import Point, Rect


def _freeze(mapping: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class TrackedElement:
    """
    A UI element's identifier, screen rectangle and metadata at a point in time.

    Records are never mutated; an update replaces the record under the same
    identifier.
    """
    identifier: str
    frame: Rect
    context: Mapping[str, str] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        object.__setattr__(self, "context", _freeze(self.context))

    @property
    def center(self) -> Point:
        """Midpoint of the frame."""
        return self.frame.center

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form."""
        return {
            "identifier": self.identifier,
            "frame": self.frame.to_dict(),
            "context": dict(self.context),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TrackedElement:
        """Build an element from its to_dict() form."""
        return cls(
            identifier=str(data["identifier"]),
            frame=Rect.from_dict(data["frame"]),
            context={str(k): str(v) for k, v in (data.get("context") or {}).items()},
            timestamp=float(data.get("timestamp", time.time())),
        )


@dataclass(frozen=True)
class ViewContext:
    """Name and metadata of the currently active screen."""
    name: Optional[str] = None
    metadata: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    @classmethod
    def unset(cls) -> ViewContext:
        """Context with no name and empty metadata."""
        return cls()

    @property
    def is_set(self) -> bool:
        """True when a non-empty view name is set."""
        return bool(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "metadata": dict(self.metadata)}


@dataclass(frozen=True)
class TrackingSnapshot:
    """
    Point-in-time copy of all tracked elements and the view context.

    Taken atomically with respect to the registry lock, so a snapshot never
    mixes pre- and post-update state for a single element.
    """
    elements: Mapping[str, TrackedElement]
    view_context: ViewContext = field(default_factory=ViewContext.unset)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", MappingProxyType(dict(self.elements)))

    def __len__(self) -> int:
        return len(self.elements)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.elements

    def __iter__(self) -> Iterator[TrackedElement]:
        return iter(list(self.elements.values()))

    def get(self, identifier: str) -> Optional[TrackedElement]:
        """Element by identifier, or None."""
        return self.elements.get(identifier)

    def all(self) -> Dict[str, TrackedElement]:
        """Copy of the captured elements."""
        return dict(self.elements)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form."""
        return {
            "timestamp": self.timestamp,
            "view_context": self.view_context.to_dict(),
            "elements": [
                self.elements[key].to_dict() for key in sorted(self.elements)
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TrackingSnapshot:
        """Build a snapshot from its to_dict() form."""
        ctx = data.get("view_context") or {}
        elements = [TrackedElement.from_dict(item) for item in data.get("elements") or []]
        return cls(
            elements={el.identifier: el for el in elements},
            view_context=ViewContext(
                name=ctx.get("name"),
                metadata={str(k): str(v) for k, v in (ctx.get("metadata") or {}).items()},
            ),
            timestamp=float(data.get("timestamp", time.time())),
        )
