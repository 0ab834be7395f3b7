"""
Unit tests for RelayoutEngine.

Validates the freeze/compute/unfreeze bracket, the reentrancy guard and
the exclusion of the dragged holder from the bracket.
"""
from unittest.mock import Mock, patch

import pytest

from schedulekit.drag import DragController
from schedulekit.proxy import EventViewProxy
from schedulekit.registry import EventViewRegistry
from schedulekit.relayout import FramePolicy, NeedsLayoutPolicy, RelayoutEngine
from schedulekit.types import LayoutErrorKind, RelayoutState


class RecordingPolicy(FramePolicy):
    """Records, for every invalidated proxy, the frozen state of all holders."""

    def __init__(self, holders):
        self.holders = holders
        self.calls = []

    def invalidate_frame(self, proxy, engine):
        self.calls.append((proxy, [h.is_frozen for h in self.holders], engine.state))


class ReentrantPolicy(FramePolicy):
    """Triggers a nested relayout from inside the pass."""

    def __init__(self):
        self.nested_results = []

    def invalidate_frame(self, proxy, engine):
        self.nested_results.append(engine.invalidate_frames([proxy]))


class NestedFullRelayoutPolicy(FramePolicy):
    """Asks for a full relayout from inside the pass."""

    def __init__(self):
        self.nested_results = []

    def invalidate_frame(self, proxy, engine):
        self.nested_results.append(engine.invalidate_frame_for_all_event_views())


class FailingPolicy(FramePolicy):

    def invalidate_frame(self, proxy, engine):
        raise RuntimeError("conflict computation failed")


@pytest.fixture
def registry(make_proxy):
    registry = EventViewRegistry()
    for title in ("a", "b", "c"):
        registry.add(make_proxy(title))
    return registry


class TestInvalidateFrames:
    """Tests for a regular relayout pass."""

    def test_default_policy_marks_targets(self, registry):
        engine = RelayoutEngine(registry)
        a, b, c = registry.current_views()

        result = engine.invalidate_frames([a, c])

        assert result.success
        assert result.data == [a, c]
        assert a.needs_layout and c.needs_layout
        assert not b.needs_layout
        assert isinstance(engine.policy, NeedsLayoutPolicy)

    def test_all_holders_frozen_during_pass(self, registry):
        holders = registry.all_holders()
        policy = RecordingPolicy(holders)
        engine = RelayoutEngine(registry, policy=policy)

        engine.invalidate_frames(registry.current_views())

        assert len(policy.calls) == 3
        for _, frozen, state in policy.calls:
            assert frozen == [True, True, True]
            assert state == RelayoutState.IN_PROGRESS
        assert not any(h.is_frozen for h in holders)
        assert engine.state == RelayoutState.IDLE

    def test_freeze_unfreeze_one_to_one(self):
        registry = EventViewRegistry()
        holder = Mock()
        registry.add(EventViewProxy(holder))
        registry.add(EventViewProxy(holder))
        engine = RelayoutEngine(registry)

        engine.invalidate_frames(registry.current_views())

        assert holder.freeze.call_count == 1
        assert holder.unfreeze.call_count == 1

    def test_accepts_generator(self, registry):
        engine = RelayoutEngine(registry)

        result = engine.invalidate_frames(view for view in registry.current_views())

        assert len(result.data) == 3

    def test_signals(self, registry):
        engine = RelayoutEngine(registry)
        events = []
        engine.relayout_started.connect(lambda: events.append("started"))
        engine.relayout_finished.connect(lambda proxies: events.append(("finished", len(proxies))))

        engine.invalidate_frames(registry.current_views())

        assert events == ["started", ("finished", 3)]


class TestReentrancy:
    """Tests for the IN_PROGRESS guard."""

    def test_nested_request_is_rejected(self, registry):
        policy = ReentrantPolicy()
        engine = RelayoutEngine(registry, policy=policy)

        with patch("schedulekit.relayout.Log") as log:
            result = engine.invalidate_frames(registry.current_views())

        assert result.success
        assert len(policy.nested_results) == 3
        for nested in policy.nested_results:
            assert nested.failed
            assert nested.error_kind == LayoutErrorKind.REENTRANT_RELAYOUT
        assert log.warning.call_count == 3
        assert engine.state == RelayoutState.IDLE
        assert not any(h.is_frozen for h in registry.all_holders())

    def test_nested_request_leaves_targets_alone(self, registry):
        engine = RelayoutEngine(registry)
        a = registry.current_views()[0]
        engine.begin_relayout()

        result = engine.invalidate_frames([a])

        assert result.error_kind == LayoutErrorKind.REENTRANT_RELAYOUT
        assert not a.needs_layout
        assert engine.is_relayout_in_progress

    def test_nested_full_relayout_emits_nothing(self, registry):
        policy = NestedFullRelayoutPolicy()
        engine = RelayoutEngine(registry, policy=policy)
        a = registry.current_views()[0]
        events = []
        engine.animation_batch_started.connect(lambda d: events.append("begin"))
        engine.layout_requested.connect(lambda animated, d: events.append("layout"))
        engine.animation_batch_finished.connect(lambda: events.append("end"))

        result = engine.invalidate_frames([a])

        assert result.success
        assert [nested.error_kind for nested in policy.nested_results] == [LayoutErrorKind.REENTRANT_RELAYOUT]
        assert events == []
        assert engine.state == RelayoutState.IDLE

    def test_bracket_completes_when_policy_raises(self, registry):
        engine = RelayoutEngine(registry, policy=FailingPolicy())

        with pytest.raises(RuntimeError):
            engine.invalidate_frames(registry.current_views())

        assert engine.state == RelayoutState.IDLE
        assert not any(h.is_frozen for h in registry.all_holders())


class TestDragExclusion:
    """Tests for relayout while a drag session is active."""

    def test_dragged_holder_not_in_bracket(self, registry):
        engine = RelayoutEngine(registry)
        drag = DragController(registry, engine)
        a, b, c = registry.current_views()
        drag.begin(a)

        engine.invalidate_frames([b, c])

        # Still frozen by the drag, not released by the pass
        assert a.holder.is_frozen
        assert not b.holder.is_frozen
        assert not c.holder.is_frozen

    def test_dragged_holder_not_refrozen(self):
        registry = EventViewRegistry()
        dragged_holder, other_holder = Mock(), Mock()
        dragged = EventViewProxy(dragged_holder)
        registry.add(dragged)
        registry.add(EventViewProxy(other_holder))
        engine = RelayoutEngine(registry)
        drag = DragController(registry, engine)
        drag.begin(dragged)

        engine.invalidate_frames(registry.current_views())

        assert dragged_holder.freeze.call_count == 1  # from begin() only
        dragged_holder.unfreeze.assert_not_called()
        other_holder.freeze.assert_called_once()
        other_holder.unfreeze.assert_called_once()


class TestInvalidateAll:
    """Tests for invalidate_frame_for_all_event_views()."""

    def test_batch_wraps_animated_layout(self, registry):
        engine = RelayoutEngine(registry, animation_duration=0.5)
        events = []
        engine.animation_batch_started.connect(lambda d: events.append(("begin", d)))
        engine.layout_requested.connect(lambda animated, d: events.append(("layout", animated, d)))
        engine.animation_batch_finished.connect(lambda: events.append(("end",)))

        result = engine.invalidate_frame_for_all_event_views()

        assert result.success
        assert all(view.needs_layout for view in registry.current_views())
        assert events == [("begin", 0.5), ("layout", True, 0.5), ("end",)]

    def test_default_duration(self, registry):
        assert RelayoutEngine(registry).animation_duration == 1.0

    def test_negative_duration_clamped(self, registry):
        engine = RelayoutEngine(registry)
        engine.set_animation_duration(-3)
        assert engine.animation_duration == 0.0

    def test_request_immediate_layout(self, registry):
        engine = RelayoutEngine(registry)
        events = []
        engine.layout_requested.connect(lambda animated, d: events.append((animated, d)))

        engine.request_immediate_layout()

        assert events == [(False, 0.0)]
