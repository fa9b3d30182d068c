# aiaccess/accessible.py
"""
@file accessible.py
@brief Accessibility metadata for UI components and the binding that feeds
       their layout events into an ElementRegistry.

UI frameworks implement Accessible for their components and drive an
AccessibilityBinding from their own appear/layout/disappear/tap hooks.
"""

from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional

from .actionlogger import ACTION_LOGGER, ActionLogger
from .geometry import Rect
from .models import TrackedElement
from .registry import ElementRegistry


class InteractionType(str, Enum):
    """How an agent is expected to interact with a component."""
    BUTTON = "button"
    NAVIGATION = "navigation"
    INPUT = "input"
    DISPLAY = "display"
    CONTAINER = "container"
    TOGGLE = "toggle"
    SELECTION = "selection"
    DRAGGABLE = "draggable"

    @property
    def traits(self) -> FrozenSet[str]:
        """Accessibility traits announced for this interaction type."""
        if self in (InteractionType.BUTTON, InteractionType.NAVIGATION, InteractionType.TOGGLE):
            return frozenset({"button"})
        if self is InteractionType.SELECTION:
            return frozenset({"button", "selected"})
        return frozenset()

    @property
    def description(self) -> str:
        """Short human-readable description of the interaction."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    InteractionType.BUTTON: "Button",
    InteractionType.NAVIGATION: "Navigation",
    InteractionType.INPUT: "Input Field",
    InteractionType.DISPLAY: "Display",
    InteractionType.CONTAINER: "Container",
    InteractionType.TOGGLE: "Toggle",
    InteractionType.SELECTION: "Selection",
    InteractionType.DRAGGABLE: "Draggable",
}


class Accessible(ABC):
    """
    Component that exposes identifier, label and hint to automation agents.

    Subclasses provide the defaults; the explicit ai_* overrides win when set.
    """

    ai_identifier: Optional[str] = None
    ai_label: Optional[str] = None
    ai_hint: Optional[str] = None
    ai_context: Mapping[str, str] = MappingProxyType({})

    @abstractmethod
    def default_identifier(self) -> str:
        """Identifier used when ai_identifier is not set."""

    @abstractmethod
    def default_label(self) -> str:
        """Label used when ai_label is not set."""

    def default_hint(self) -> str:
        """Hint used when ai_hint is not set."""
        return f"Activates {self.computed_label}"

    @property
    def computed_identifier(self) -> str:
        """Explicit identifier if set, otherwise the default."""
        return self.ai_identifier or self.default_identifier()

    @property
    def computed_label(self) -> str:
        """Explicit label if set, otherwise the default."""
        return self.ai_label or self.default_label()

    @property
    def computed_hint(self) -> str:
        """Explicit hint if set, otherwise the default."""
        return self.ai_hint or self.default_hint()


class AccessibilityBinding:
    """
    Connects one Accessible component to a registry and an action logger.

    Tracking uses the registry's best-effort update path so that a
    component with a bad identifier is still locatable.
    """

    def __init__(
        self,
        accessible: Accessible,
        registry: ElementRegistry,
        logger: Optional[ActionLogger] = None,
        interaction_type: InteractionType = InteractionType.BUTTON,
        component_type: str = "Component",
        enable_logging: bool = True,
        enable_tracking: bool = True,
    ):
        self.accessible = accessible
        self.registry = registry
        self.logger = logger or ACTION_LOGGER
        self.interaction_type = interaction_type
        self.component_type = component_type
        self.enable_logging = enable_logging
        self.enable_tracking = enable_tracking

    def attributes(self) -> Dict[str, object]:
        """Values to hand to the platform accessibility API."""
        return {
            "identifier": self.accessible.computed_identifier,
            "label": self.accessible.computed_label,
            "hint": self.accessible.computed_hint,
            "value": self.component_type,
            "traits": self.interaction_type.traits,
        }

    def on_layout(self, frame: Rect) -> Optional[TrackedElement]:
        """Call on first appearance and on every frame change."""
        if not self.enable_tracking:
            return None
        return self.registry.notify_appeared(
            self.accessible.computed_identifier,
            frame,
            dict(self.accessible.ai_context),
        )

    def on_disappear(self) -> None:
        """Stop tracking the component."""
        if self.enable_tracking:
            self.registry.notify_disappeared(self.accessible.computed_identifier)

    def on_tap(self) -> None:
        """Log a tap on the component."""
        if not self.enable_logging:
            return
        try:
            self.logger.log_interaction(
                self.accessible.computed_identifier,
                self.interaction_type.value,
                dict(self.accessible.ai_context),
            )
        except Exception:
            pass
