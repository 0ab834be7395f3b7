"""
Relayout Engine
===============

Conflict-recomputation state machine for event view frames.

A relayout pass freezes every holder behind the registered proxies (so
the data model cannot change under the computation), lets a FramePolicy
recompute each target proxy, then unfreezes exactly the holders it froze.

State Machine:
    IDLE -> (begin_relayout) -> IN_PROGRESS -> (end_relayout) -> IDLE

A request arriving while IN_PROGRESS (e.g. from inside a policy) is
logged and ignored; the running pass is never disturbed.

While a drag is active the dragged proxy's holder is left out of the
freeze/unfreeze bracket: DragController keeps it frozen for the whole
drag, across many relayout passes.

Signals:
    relayout_started(): Emitted on IDLE -> IN_PROGRESS
    relayout_finished(list): Emitted on IN_PROGRESS -> IDLE with the proxies recomputed
    layout_requested(bool, float): (animated, duration) layout pass for the renderer
    animation_batch_started(float): Opens an animation batch (duration in seconds)
    animation_batch_finished(): Closes the animation batch
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, TYPE_CHECKING

from PyQt6.QtCore import QObject, pyqtSignal

from .constants import DEFAULT_RELAYOUT_ANIMATION_DURATION
from .interfaces import EventHolderInterface
from .message import Log
from .proxy import EventViewProxy
from .registry import EventViewRegistry
from .types import LayoutResult, LayoutErrorKind, RelayoutState

if TYPE_CHECKING:
    from .drag import DragController


class FramePolicy(ABC):
    """
    Strategy for recomputing one proxy's frame during a relayout pass.

    Implementations compute the frame from the holder's data and adjust
    for conflicts with temporally overlapping proxies. Holders are frozen
    while invalidate_frame() runs.
    """

    @abstractmethod
    def invalidate_frame(self, proxy: EventViewProxy, engine: "RelayoutEngine") -> None:
        pass


class NeedsLayoutPolicy(FramePolicy):
    """Default policy: flag the proxy and let the renderer lay it out."""

    def invalidate_frame(self, proxy: EventViewProxy, engine: "RelayoutEngine") -> None:
        proxy.mark_needs_layout()


class RelayoutEngine(QObject):
    """
    Runs relayout passes over proxies of an EventViewRegistry.

    The engine is not reentrant. It reads the active drag (if any) from the
    DragController set with set_drag_controller().
    """

    relayout_started = pyqtSignal()
    relayout_finished = pyqtSignal(list)
    layout_requested = pyqtSignal(bool, float)
    animation_batch_started = pyqtSignal(float)
    animation_batch_finished = pyqtSignal()

    def __init__(
        self,
        registry: EventViewRegistry,
        policy: Optional[FramePolicy] = None,
        animation_duration: float = DEFAULT_RELAYOUT_ANIMATION_DURATION,
        parent=None
    ):
        super().__init__(parent)
        self._registry = registry
        self._policy = policy or NeedsLayoutPolicy()
        self._animation_duration = animation_duration
        self._drag_controller: Optional["DragController"] = None
        self._state = RelayoutState.IDLE

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def registry(self) -> EventViewRegistry:
        return self._registry

    @property
    def policy(self) -> FramePolicy:
        return self._policy

    def set_policy(self, policy: FramePolicy) -> None:
        self._policy = policy

    @property
    def animation_duration(self) -> float:
        return self._animation_duration

    def set_animation_duration(self, seconds: float) -> None:
        self._animation_duration = max(0.0, seconds)

    def set_drag_controller(self, controller: Optional["DragController"]) -> None:
        self._drag_controller = controller

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> RelayoutState:
        return self._state

    @property
    def is_relayout_in_progress(self) -> bool:
        return self._state == RelayoutState.IN_PROGRESS

    def begin_relayout(self) -> None:
        """Hook run before a pass. Overrides must call super()."""
        self._state = RelayoutState.IN_PROGRESS
        self.relayout_started.emit()

    def end_relayout(self, proxies: Optional[List[EventViewProxy]] = None) -> None:
        """Hook run after a pass. Overrides must call super()."""
        self._state = RelayoutState.IDLE
        self.relayout_finished.emit(list(proxies or []))

    # =========================================================================
    # Relayout
    # =========================================================================

    def _reject_nested_request(self) -> LayoutResult[List[EventViewProxy]]:
        message = "RelayoutEngine: invalidation already triggered, ignoring nested request"
        Log.warning(message)
        return LayoutResult.error_result(LayoutErrorKind.REENTRANT_RELAYOUT, message)

    def _holders_to_freeze(self) -> List[EventHolderInterface]:
        holders = self._registry.all_holders()
        controller = self._drag_controller
        if controller is None or not controller.is_dragging:
            return holders
        dragged = controller.dragged_holder
        return [holder for holder in holders if holder is not dragged]

    def invalidate_frame(self, proxy: EventViewProxy) -> None:
        """Recompute a single proxy through the active policy."""
        self._policy.invalidate_frame(proxy, self)

    def invalidate_frames(self, targets: Iterable[EventViewProxy]) -> LayoutResult[List[EventViewProxy]]:
        """
        Relayout a set of proxies.

        Freezes every registered holder (except the dragged one), runs the
        frame policy over targets, then unfreezes the same holders. The
        bracket always completes, even if the policy raises.

        Args:
            targets: Proxies whose frames need recomputing

        Returns:
            Success with the recomputed proxies, or REENTRANT_RELAYOUT when a
            pass is already running (no effect).
        """
        if self._state != RelayoutState.IDLE:
            return self._reject_nested_request()

        targets = list(targets)
        holders = self._holders_to_freeze()

        self.begin_relayout()
        frozen: List[EventHolderInterface] = []
        try:
            for holder in holders:
                holder.freeze()
                frozen.append(holder)

            for proxy in targets:
                self.invalidate_frame(proxy)
        finally:
            for holder in frozen:
                holder.unfreeze()
            self.end_relayout(targets)

        Log.debug(f"RelayoutEngine: invalidated {len(targets)} frames ({len(frozen)} holders frozen)")
        return LayoutResult.success_result(f"Invalidated {len(targets)} frames", data=targets)

    def invalidate_frame_for_all_event_views(self) -> LayoutResult[List[EventViewProxy]]:
        """
        Relayout every registered proxy inside one animation batch.

        The renderer animates the transition; the frames are final when this
        returns. A nested request is rejected before any batch signal is
        emitted.
        """
        if self._state != RelayoutState.IDLE:
            return self._reject_nested_request()

        duration = self._animation_duration
        self.animation_batch_started.emit(duration)
        try:
            result = self.invalidate_frames(self._registry.current_views())
            self.layout_requested.emit(True, duration)
        finally:
            self.animation_batch_finished.emit()
        return result

    def request_immediate_layout(self) -> None:
        """Ask the renderer for a non-animated layout pass."""
        self.layout_requested.emit(False, 0.0)
