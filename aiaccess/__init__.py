# aiaccess/__init__.py
"""
aiaccess - UI element tracking and navigation for automation agents.

This package provides:
- ElementRegistry: thread-safe map of element identifiers to screen frames
- QueryEngine: lookup, region and pattern queries over a registry or snapshot
- NavigationService: tap/type/swipe/wait API returning NavigationResult values
- identifiers: canonical identifier builders
- Accessible / AccessibilityBinding: component metadata and layout hooks
"""

from aiaccess.accessible import AccessibilityBinding, Accessible, InteractionType
from aiaccess.actionlogger import ACTION_LOGGER, ActionLogger
from aiaccess.config import TrackerConfig, from_preset, load_config
from aiaccess.exceptions import (
    AIAccessError,
    ActionError,
    ConfigError,
    ElementNotFoundError,
    InvalidFrameError,
    InvalidIdentifierError,
    PatternError,
    ResourceLimitExceededError,
    TimeoutError,
    ValidationError,
    WaitCancelledError,
)
from aiaccess.geometry import Point, Rect
from aiaccess.models import TrackedElement, TrackingSnapshot, ViewContext
from aiaccess.navigation import NavigationResult, NavigationService, NavigationStatus, WaitHandle
from aiaccess.persistence import dump_snapshot, load_snapshot
from aiaccess.query import QueryEngine
from aiaccess.registry import ElementRegistry
from aiaccess.validation import ValidationPolicy
from aiaccess.viewcontext import ViewContextStore
from aiaccess import identifiers

__all__ = [
    "AccessibilityBinding",
    "Accessible",
    "InteractionType",
    "ACTION_LOGGER",
    "ActionLogger",
    "TrackerConfig",
    "from_preset",
    "load_config",
    "AIAccessError",
    "ActionError",
    "ConfigError",
    "ElementNotFoundError",
    "InvalidFrameError",
    "InvalidIdentifierError",
    "PatternError",
    "ResourceLimitExceededError",
    "TimeoutError",
    "ValidationError",
    "WaitCancelledError",
    "Point",
    "Rect",
    "TrackedElement",
    "TrackingSnapshot",
    "ViewContext",
    "NavigationResult",
    "NavigationService",
    "NavigationStatus",
    "WaitHandle",
    "dump_snapshot",
    "load_snapshot",
    "QueryEngine",
    "ElementRegistry",
    "ValidationPolicy",
    "ViewContextStore",
    "identifiers",
]

__version__ = "1.0.0"
