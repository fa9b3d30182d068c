# aiaccess/geometry.py
"""
@file geometry.py
@brief Screen-space points and rectangles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        """Serializable form."""
        return {"x": self.x, "y": self.y}

    def __str__(self) -> str:
        return f"({int(self.x)}, {int(self.y)})"


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in global screen coordinates.

    The origin is the top-left corner. Width and height are not checked here;
    the registry's validation policy rejects negative sizes.
    """
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def zero(cls) -> Rect:
        """Empty rectangle at the origin."""
        return cls(0.0, 0.0, 0.0, 0.0)

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        """Midpoint of the rectangle, always recomputed from the frame."""
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def intersects(self, other: Rect) -> bool:
        """
        True when the two rectangles overlap with positive area.

        Rectangles that only share an edge or a corner, or where either
        has zero width or height, do not intersect.
        """
        overlap_w = min(self.max_x, other.max_x) - max(self.min_x, other.min_x)
        overlap_h = min(self.max_y, other.max_y) - max(self.min_y, other.min_y)
        return overlap_w > 0 and overlap_h > 0

    def contains_point(self, point: Point) -> bool:
        """True when point lies inside or on the edge."""
        return self.min_x <= point.x <= self.max_x and self.min_y <= point.y <= self.max_y

    def to_dict(self) -> Dict[str, float]:
        """Serializable form."""
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Rect:
        """Build a Rect from its to_dict() form."""
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )
