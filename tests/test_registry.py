# tests/test_registry.py
"""
Tests for the element registry and view context.
"""

import threading
import time

import pytest

from aiaccess.actionlogger import ActionLogger
from aiaccess.config import TrackerConfig
from aiaccess.exceptions import (InvalidFrameError, InvalidIdentifierError,
                                 ResourceLimitExceededError, ValidationError)
from aiaccess.geometry import Point, Rect
from aiaccess.models import TrackedElement, TrackingSnapshot, ViewContext
from aiaccess.registry import ElementRegistry
from aiaccess.validation import ValidationPolicy


class TestUpsert:
    """Tests for the validated write path."""

    def test_round_trip(self, registry):
        """get() should return the frame and context passed to upsert()."""
        frame = Rect(10, 20, 100, 50)
        registry.upsert("test_button", frame, {"screen": "home"})

        element = registry.get("test_button")
        assert element is not None
        assert element.identifier == "test_button"
        assert element.frame == frame
        assert element.context == {"screen": "home"}

    def test_center_is_derived_from_frame(self, registry):
        """Center should be the frame midpoint."""
        registry.upsert("button_primary_save_changes", Rect(10, 20, 100, 50))
        assert registry.get("button_primary_save_changes").center == Point(60, 45)

    def test_replacement_keeps_single_record(self, registry):
        """Updating an identifier should replace, not duplicate, the record."""
        registry.upsert("item", Rect(0, 0, 10, 10))
        registry.upsert("item", Rect(5, 5, 20, 20))
        assert len(registry) == 1
        assert registry.get("item").frame == Rect(5, 5, 20, 20)

    def test_context_is_copied(self, registry):
        """Mutating the caller's dict should not change the stored record."""
        ctx = {"section": "a"}
        registry.upsert("item", Rect(0, 0, 1, 1), ctx)
        ctx["section"] = "b"
        assert registry.get("item").context["section"] == "a"

    @pytest.mark.parametrize("identifier", ["", "has space", "slash/id", "x" * 201])
    def test_invalid_identifier_rejected(self, registry, identifier):
        """Invalid identifiers should raise without mutating state."""
        with pytest.raises(InvalidIdentifierError):
            registry.upsert(identifier, Rect(0, 0, 1, 1))
        assert len(registry) == 0

    @pytest.mark.parametrize("frame", [
        Rect(float("nan"), 0, 1, 1),
        Rect(0, 0, float("inf"), 1),
        Rect(0, 0, -1, 1),
        Rect(2_000_000, 0, 1, 1),
    ])
    def test_invalid_frame_rejected(self, registry, frame):
        """Non-finite, negative or huge frames should raise."""
        with pytest.raises(InvalidFrameError):
            registry.upsert("item", frame)
        assert registry.get("item") is None

    def test_sensitive_context_rejected(self, registry):
        """Context that looks like credentials should raise ValidationError."""
        with pytest.raises(ValidationError):
            registry.upsert("login", Rect(0, 0, 1, 1), {"auth_token": "abc"})
        with pytest.raises(ValidationError):
            registry.upsert("login", Rect(0, 0, 1, 1), {"hint": "enter PASSWORD"})

    def test_empty_context_key_rejected(self, registry):
        """Empty context keys should raise ValidationError."""
        with pytest.raises(ValidationError):
            registry.upsert("item", Rect(0, 0, 1, 1), {"": "value"})

    def test_oversized_context_rejected(self):
        """Context over max_context_size characters should raise."""
        reg = ElementRegistry(config=TrackerConfig(max_context_size=10))
        with pytest.raises(ValidationError):
            reg.upsert("item", Rect(0, 0, 1, 1), {"abcde": "fghijk"})

    def test_permissive_policy_allows_sensitive_terms(self):
        """A permissive policy should skip the sensitive-term check."""
        reg = ElementRegistry(policy=ValidationPolicy.permissive())
        reg.upsert("login", Rect(0, 0, 1, 1), {"token_hint": "x"})
        assert "login" in reg


class TestCapacity:
    """Tests for max_tracked_elements enforcement."""

    def test_new_identifier_at_capacity_fails(self):
        """A new identifier beyond capacity should raise ResourceLimitExceededError."""
        reg = ElementRegistry(config=TrackerConfig(max_tracked_elements=2))
        reg.upsert("a", Rect(0, 0, 1, 1))
        reg.upsert("b", Rect(0, 0, 1, 1))

        with pytest.raises(ResourceLimitExceededError) as exc_info:
            reg.upsert("c", Rect(0, 0, 1, 1))

        assert exc_info.value.limit == 2
        assert exc_info.value.current == 2
        assert "c" not in reg

    def test_existing_identifier_at_capacity_succeeds(self):
        """Overwriting an existing identifier should work at capacity."""
        reg = ElementRegistry(config=TrackerConfig(max_tracked_elements=2))
        reg.upsert("a", Rect(0, 0, 1, 1))
        reg.upsert("b", Rect(0, 0, 1, 1))

        reg.upsert("a", Rect(3, 3, 1, 1))
        assert reg.get("a").frame == Rect(3, 3, 1, 1)

    def test_removal_frees_capacity(self):
        """Removing an element should make room for a new one."""
        reg = ElementRegistry(config=TrackerConfig(max_tracked_elements=1))
        reg.upsert("a", Rect(0, 0, 1, 1))
        reg.remove("a")
        reg.upsert("b", Rect(0, 0, 1, 1))
        assert reg.identifiers() == ["b"]


class TestBestEffortUpdate:
    """Tests for the non-validating compatibility path."""

    def test_stores_invalid_element(self, registry, caplog):
        """update() should log the validation failure and store anyway."""
        registry.update("bad id!", Rect(0, 0, 10, 10))
        assert registry.get("bad id!") is not None
        assert "Failed to update element" in caplog.text

    def test_ignores_capacity(self):
        """update() should bypass the capacity limit."""
        reg = ElementRegistry(config=TrackerConfig(max_tracked_elements=1))
        reg.update("a", Rect(0, 0, 1, 1))
        reg.update("b", Rect(0, 0, 1, 1))
        assert len(reg) == 2


class TestRemoveAndClear:
    """Tests for remove() and clear()."""

    def test_remove_is_idempotent(self, registry):
        """Removing twice should not raise."""
        registry.upsert("item", Rect(0, 0, 1, 1))
        assert registry.remove("item") is True
        assert registry.get("item") is None
        assert registry.remove("item") is False

    def test_clear_resets_elements_and_context(self, registry):
        """clear() should empty the registry and unset the view context."""
        registry.upsert("item", Rect(0, 0, 1, 1))
        registry.set_context("ProfileView", {"section": "profile"})

        registry.clear()

        assert len(registry) == 0
        ctx = registry.get_context()
        assert ctx.name is None
        assert dict(ctx.metadata) == {}


class TestLayoutNotifications:
    """Tests for the UI-layer hooks."""

    def test_moved_keeps_context(self, registry):
        """notify_moved() should keep the element's context."""
        registry.notify_appeared("card", Rect(0, 0, 10, 10), {"kind": "card"})
        registry.notify_moved("card", Rect(50, 50, 10, 10))

        element = registry.get("card")
        assert element.frame == Rect(50, 50, 10, 10)
        assert element.context == {"kind": "card"}

    def test_moved_unknown_adds_element(self, registry):
        """notify_moved() for an unknown identifier should add it."""
        registry.notify_moved("late", Rect(1, 1, 1, 1))
        assert registry.get("late").context == {}

    def test_disappeared_removes(self, registry):
        """notify_disappeared() should remove the element."""
        registry.notify_appeared("card", Rect(0, 0, 10, 10))
        registry.notify_disappeared("card")
        registry.notify_disappeared("card")
        assert "card" not in registry


class TestViewContext:
    """Tests for view context handling."""

    def test_set_and_get(self, registry):
        """set_context() should replace name and metadata."""
        metadata = {"user_id": "123", "section": "profile"}
        registry.set_context("ProfileView", metadata)

        ctx = registry.get_context()
        assert ctx.name == "ProfileView"
        assert ctx.metadata == metadata

    def test_replaced_wholesale(self, registry):
        """A second set should drop metadata from the first."""
        registry.set_context("A", {"one": "1"})
        registry.set_context("B")
        ctx = registry.get_context()
        assert ctx.name == "B"
        assert dict(ctx.metadata) == {}

    def test_metadata_size_bound(self):
        """Oversized metadata should raise ValidationError."""
        reg = ElementRegistry(config=TrackerConfig(max_context_size=4))
        with pytest.raises(ValidationError):
            reg.set_context("View", {"long": "value"})
        assert reg.get_context().name is None


class TestSnapshot:
    """Tests for snapshot() and restore()."""

    def test_snapshot_contents(self, registry):
        """Snapshot should hold elements and view context."""
        registry.upsert("test_element", Rect(10, 20, 100, 50))
        registry.set_context("TestView", {"test": "value"})

        snap = registry.snapshot()

        assert snap.view_context.name == "TestView"
        assert snap.view_context.metadata["test"] == "value"
        assert len(snap) == 1
        assert "test_element" in snap

    def test_snapshot_is_isolated(self, registry):
        """Later writes should not show up in an earlier snapshot."""
        registry.upsert("a", Rect(0, 0, 1, 1))
        snap = registry.snapshot()
        registry.upsert("b", Rect(0, 0, 1, 1))
        registry.remove("a")

        assert "a" in snap
        assert "b" not in snap
        with pytest.raises(TypeError):
            snap.elements["c"] = None

    def test_restore(self, registry):
        """restore() should replace state with the snapshot."""
        registry.upsert("a", Rect(0, 0, 1, 1))
        registry.set_context("Home")
        snap = registry.snapshot()

        registry.clear()
        registry.upsert("b", Rect(0, 0, 1, 1))
        registry.restore(snap)

        assert registry.identifiers() == ["a"]
        assert registry.get_context().name == "Home"

    def test_restore_rejects_invalid_elements(self, registry):
        """restore() should apply upsert's validation and leave state untouched on failure."""
        registry.upsert("keep", Rect(0, 0, 1, 1))
        registry.set_context("Home")
        bad = TrackingSnapshot(elements={
            "bad id!": TrackedElement("bad id!", Rect(float("nan"), 0, -5, 1), {"api_key": "hunter2"}),
        })

        with pytest.raises(InvalidIdentifierError):
            registry.restore(bad)

        assert registry.identifiers() == ["keep"]
        assert registry.get_context().name == "Home"

    @pytest.mark.parametrize("element, error", [
        (TrackedElement("ok", Rect(0, 0, -5, 1)), InvalidFrameError),
        (TrackedElement("ok", Rect(0, 0, 1, 1), {"api_key": "x"}), ValidationError),
    ])
    def test_restore_rejects_bad_frame_and_context(self, registry, element, error):
        """Frames and context in a snapshot are validated too."""
        with pytest.raises(error):
            registry.restore(TrackingSnapshot(elements={"ok": element}))
        assert len(registry) == 0

    def test_restore_enforces_capacity(self):
        """A snapshot larger than max_tracked_elements should be refused."""
        reg = ElementRegistry(config=TrackerConfig(max_tracked_elements=1))
        snap = TrackingSnapshot(elements={
            name: TrackedElement(name, Rect(0, 0, 1, 1)) for name in ("a", "b", "c")
        })

        with pytest.raises(ResourceLimitExceededError) as exc_info:
            reg.restore(snap)

        assert exc_info.value.current == 3
        assert len(reg) == 0


class TestViewContextLogging:
    """Tests for the state-change event emitted on context changes."""

    def test_state_change_logged(self, recorder):
        """A new view name should log one state change."""
        reg = ElementRegistry(logger=recorder)
        reg.set_context("Home")
        reg.set_context("Home", {"tab": "feed"})
        reg.set_context("Settings")
        assert [e for e in recorder.events if e[0] == "state"] == [
            ("state", "view_context", "none", "Home"),
            ("state", "view_context", "Home", "Settings"),
        ]

    def test_slow_logger_does_not_block_writers(self):
        """Logging a context change must not hold the registry lock."""
        entered = threading.Event()
        release = threading.Event()

        class SlowLogger(ActionLogger):
            def log_state_change(self, component, from_, to, context=None):
                entered.set()
                release.wait(2.0)

        reg = ElementRegistry(logger=SlowLogger())
        setter = threading.Thread(target=reg.set_context, args=("Home",))
        setter.start()
        try:
            assert entered.wait(2.0)
            start = time.monotonic()
            reg.upsert("a", Rect(0, 0, 1, 1))
            snap = reg.snapshot()
            blocked = time.monotonic() - start
        finally:
            release.set()
            setter.join()

        assert blocked < 0.1
        assert "a" in snap
        assert snap.view_context.name == "Home"

    def test_empty_name_is_unset(self, registry):
        """An empty view name counts as unset."""
        registry.set_context("")
        assert not registry.get_context().is_set
        assert ViewContext("").is_set is False
        assert ViewContext("Home").is_set


class TestConcurrency:
    """Tests for concurrent writers and readers."""

    def test_concurrent_writers(self):
        """Writes from many threads should all land, each as a complete record."""
        reg = ElementRegistry()
        errors = []

        def writer(n):
            try:
                for i in range(200):
                    reg.upsert(f"el_{n}_{i}", Rect(n, i, 10, 10), {"thread": str(n)})
                    reg.upsert("shared", Rect(n, n, n + 1, n + 1), {"thread": str(n)})
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(reg) == 8 * 200 + 1
        shared = reg.get("shared")
        n = int(shared.context["thread"])
        assert shared.frame == Rect(n, n, n + 1, n + 1)

    def test_snapshots_during_writes(self):
        """Snapshots taken during writes should only hold complete records."""
        reg = ElementRegistry()
        stop = threading.Event()

        def writer():
            i = 0
            while not stop.is_set():
                i = i % 1000 + 1
                reg.upsert("moving", Rect(i, i, i, i), {"step": str(i)})

        t = threading.Thread(target=writer)
        t.start()
        try:
            for _ in range(200):
                el = reg.snapshot().get("moving")
                if el is not None:
                    step = float(el.context["step"])
                    assert el.frame == Rect(step, step, step, step)
        finally:
            stop.set()
            t.join()


def test_debug_dump_lists_sorted(registry):
    """debug_dump() should list elements sorted by identifier."""
    registry.upsert("b_item", Rect(0, 0, 10, 10))
    registry.upsert("a_item", Rect(10, 10, 10, 10))
    dump = registry.debug_dump()
    assert dump.index("a_item: (15, 15)") < dump.index("b_item: (5, 5)")
    assert "Elements: 2" in dump


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
