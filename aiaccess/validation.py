# aiaccess/validation.py
"""
@file validation.py
@brief Input validation rules for identifiers, frames, metadata and patterns.
"""

from __future__ import annotations

import math
import re
from typing import Iterable, Mapping, Optional, Pattern

from .config import TrackerConfig
from .exceptions import (InvalidFrameError, InvalidIdentifierError,
                         PatternError, ValidationError)
from .geometry import Rect

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9_.-]+")


def metadata_size(mapping: Mapping[str, str]) -> int:
    """Total number of characters across all keys and values."""
    return sum(len(k) + len(v) for k, v in mapping.items())


class ValidationPolicy:
    """
    Validation rules applied by the registry's validated write path.

    The sensitive-term check is a plain substring match on lower-cased keys
    and values. Pass sensitive_terms=() (or use permissive()) to disable it.
    """

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        sensitive_terms: Optional[Iterable[str]] = None,
    ):
        self.config = config or TrackerConfig()
        terms = self.config.sensitive_terms if sensitive_terms is None else sensitive_terms
        self.sensitive_terms = tuple(t.lower() for t in terms)

    @classmethod
    def permissive(cls, config: Optional[TrackerConfig] = None) -> ValidationPolicy:
        """Policy that skips the sensitive-term check."""
        return cls(config, sensitive_terms=())

    def validate_identifier(self, identifier: str) -> None:
        """Check identifier length and characters."""
        if not identifier:
            raise InvalidIdentifierError(identifier, "Identifier cannot be empty")

        limit = self.config.max_identifier_length
        if len(identifier) > limit:
            raise InvalidIdentifierError(identifier, f"Identifier too long (max {limit} characters)")

        if not IDENTIFIER_PATTERN.fullmatch(identifier):
            raise InvalidIdentifierError(
                identifier, "Contains invalid characters (use only letters, numbers, _, -, .)"
            )

    def validate_frame(self, frame: Rect) -> None:
        """Check that the frame is finite, non-negative and in bounds."""
        values = (frame.x, frame.y, frame.width, frame.height)
        if not all(math.isfinite(v) for v in values):
            raise InvalidFrameError(frame, "Contains infinite or NaN values")

        if frame.width < 0 or frame.height < 0:
            raise InvalidFrameError(frame, "Width and height must be non-negative")

        bound = self.config.max_coordinate
        if abs(frame.x) > bound or abs(frame.y) > bound or frame.width > bound or frame.height > bound:
            raise InvalidFrameError(frame, "Coordinates exceed reasonable bounds")

    def validate_metadata_size(self, mapping: Mapping[str, str]) -> None:
        """Check the total character count of a mapping."""
        total = metadata_size(mapping)
        limit = self.config.max_context_size
        if total > limit:
            raise ValidationError(f"Context metadata too large: {total} characters (max {limit})")

    def validate_context(self, context: Mapping[str, str]) -> None:
        """Check context keys, size and sensitive terms."""
        self.validate_metadata_size(context)

        for key, value in context.items():
            if not key:
                raise ValidationError("Context keys cannot be empty")

            lowered_key = key.lower()
            lowered_value = value.lower()
            for term in self.sensitive_terms:
                if term in lowered_key or term in lowered_value:
                    raise ValidationError(f"Context appears to contain sensitive data: '{key}'")

    def validate_element(self, identifier: str, frame: Rect, context: Mapping[str, str]) -> None:
        """Run every element check."""
        self.validate_identifier(identifier)
        self.validate_frame(frame)
        self.validate_context(context)

    @staticmethod
    def compile_pattern(pattern: str) -> Pattern[str]:
        """Compile a case-insensitive pattern, raising PatternError on bad syntax."""
        try:
            return re.compile(pattern, re.IGNORECASE)
        except (re.error, TypeError) as e:
            raise PatternError(pattern, str(e)) from e
