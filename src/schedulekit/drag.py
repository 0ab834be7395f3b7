"""
Drag Controller
===============

Manages the interactive move of one event view.

The dragged holder is frozen in begin() and unfrozen in end(). This lock
spans every relayout pass that happens in between, which is why it lives
here and not in RelayoutEngine's per-pass bracket: the engine skips the
dragged holder while a session is active.

State Machine:
    IDLE -> (begin) -> DRAGGING -> (continue_drag)* -> (end) -> IDLE

Signals:
    drag_started(object): Emitted with the dragged proxy after begin()
    drag_moved(object): Emitted after each continue_drag() relayout
    drag_ended(object): Emitted with the released proxy after end()
    display_requested(list): Proxies that need a redraw
"""

import weakref
from dataclasses import dataclass, field
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .interfaces import EventHolderInterface
from .message import Log
from .proxy import EventViewProxy
from .registry import EventViewRegistry
from .relayout import RelayoutEngine
from .types import LayoutResult, LayoutErrorKind


@dataclass
class DragSession:
    """
    State of the proxy being dragged.

    The proxy is held weakly; the holder reference is kept so the freeze
    can always be released even if the proxy is gone.
    """
    proxy_ref: weakref.ref
    holder: EventHolderInterface
    moves: int = field(default=0)

    @property
    def proxy(self) -> Optional[EventViewProxy]:
        return self.proxy_ref()


class DragController(QObject):
    """
    Coordinates drag sessions with the relayout engine.

    At most one session exists at a time.
    """

    drag_started = pyqtSignal(object)
    drag_moved = pyqtSignal(object)
    drag_ended = pyqtSignal(object)
    display_requested = pyqtSignal(list)

    def __init__(self, registry: EventViewRegistry, engine: RelayoutEngine, parent=None):
        super().__init__(parent)
        self._registry = registry
        self._engine = engine
        self._session: Optional[DragSession] = None
        engine.set_drag_controller(self)

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    @property
    def dragged_view(self) -> Optional[EventViewProxy]:
        return self._session.proxy if self._session else None

    @property
    def dragged_holder(self) -> Optional[EventHolderInterface]:
        return self._session.holder if self._session else None

    # =========================================================================
    # Public API
    # =========================================================================

    def begin(self, proxy: EventViewProxy) -> LayoutResult[EventViewProxy]:
        """
        Start dragging proxy and freeze its holder.

        Returns:
            Success, INVALID_STATE if a session is already active or a
            relayout pass is running, or NOT_FOUND if proxy is not registered.
        """
        if self._session is not None:
            message = "DragController: begin called while a drag is already active"
            Log.warning(message)
            return LayoutResult.error_result(LayoutErrorKind.INVALID_STATE, message)
        if self._engine.is_relayout_in_progress:
            message = "DragController: cannot begin a drag during a relayout pass"
            Log.warning(message)
            return LayoutResult.error_result(LayoutErrorKind.INVALID_STATE, message)
        if proxy not in self._registry:
            message = f"DragController: cannot drag unregistered {proxy!r}"
            Log.warning(message)
            return LayoutResult.error_result(LayoutErrorKind.NOT_FOUND, message)

        self._session = DragSession(proxy_ref=weakref.ref(proxy), holder=proxy.holder)
        proxy.holder.freeze()
        Log.debug(f"DragController: begin drag of {proxy!r}")
        self.drag_started.emit(proxy)
        return LayoutResult.success_result("Drag started", data=proxy)

    def continue_drag(self) -> LayoutResult[EventViewProxy]:
        """
        Recompute conflicts of the other proxies against the moving one.

        Requests an immediate (non-animated) layout pass and a redraw.

        Returns:
            Success with the dragged proxy, DRAG_SESSION_MISUSE without an
            active session, or the engine's REENTRANT_RELAYOUT error.
        """
        session = self._session
        if session is None:
            message = "DragController: continue_drag called without an active drag"
            Log.warning(message)
            return LayoutResult.error_result(LayoutErrorKind.DRAG_SESSION_MISUSE, message)

        proxy = session.proxy
        others = self._registry.other_views(proxy)
        result = self._engine.invalidate_frames(others)
        if result.failed:
            return LayoutResult.error_result(result.error_kind, result.message)

        session.moves += 1
        self._engine.request_immediate_layout()
        self._request_display()
        self.drag_moved.emit(proxy)
        return LayoutResult.success_result("Drag continued", data=proxy)

    def end(self) -> LayoutResult[EventViewProxy]:
        """
        Finish the drag: unfreeze the holder and relayout everything.

        Without an active session this does nothing and returns a WARNING
        result. When called during a relayout pass the drag still ends but
        the final relayout is rejected, which is reported as a
        REENTRANT_RELAYOUT warning.
        """
        session = self._session
        if session is None:
            return LayoutResult.warning_result(
                LayoutErrorKind.DRAG_SESSION_MISUSE,
                "DragController: end called without an active drag",
            )

        proxy = session.proxy
        session.holder.unfreeze()
        self._session = None
        Log.debug(f"DragController: end drag of {proxy!r} after {session.moves} moves")
        self.drag_ended.emit(proxy)

        result = self._engine.invalidate_frame_for_all_event_views()
        self._request_display()
        if result.failed:
            return LayoutResult.warning_result(
                LayoutErrorKind.REENTRANT_RELAYOUT,
                "DragController: drag ended but the final relayout was rejected",
                data=proxy,
            )
        return LayoutResult.success_result("Drag ended", data=proxy)

    def _request_display(self) -> None:
        views = list(self._registry.current_views())
        for view in views:
            view.mark_needs_display()
        self.display_requested.emit(views)
