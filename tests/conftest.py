# tests/conftest.py
import pytest

from aiaccess.actionlogger import ActionLogger
from aiaccess.config import TrackerConfig
from aiaccess.navigation import NavigationService
from aiaccess.registry import ElementRegistry


class RecordingLogger(ActionLogger):
    """ActionLogger that keeps events in memory instead of printing."""

    def __init__(self):
        super().__init__()
        self.events = []

    def log_interaction(self, identifier, action, context=None):
        self.events.append(("interaction", identifier, action, dict(context or {})))

    def log_navigation(self, to, from_=None, method="unknown", context=None):
        self.events.append(("navigation", to, from_, method))

    def log_state_change(self, component, from_, to, context=None):
        self.events.append(("state", component, from_, to))

    def debug(self, message, context=None):
        self.events.append(("debug", message))


@pytest.fixture
def config():
    return TrackerConfig(poll_interval=0.05, wait_timeout=0.5)


@pytest.fixture
def registry(config):
    return ElementRegistry(config=config)


@pytest.fixture
def recorder():
    return RecordingLogger()


@pytest.fixture
def nav(registry, recorder):
    return NavigationService(registry, logger=recorder)
