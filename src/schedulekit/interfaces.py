"""
ScheduleKit Interfaces

Protocol definitions for the collaborators the coordinator talks to but
does not own: event holders, the host delegate and the renderer.

Note: redraw and layout requests reach the renderer via Qt signals
(display_requested, layout_requested, ...) rather than direct calls,
following Qt conventions. RenderingCollaborator documents the slots a
renderer exposes so ScheduleView.attach_renderer can wire them up.
"""

import weakref
from datetime import datetime
from typing import Any, List, Optional, Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from PyQt6.QtGui import QColor
    from .proxy import EventViewProxy


@runtime_checkable
class EventHolderInterface(Protocol):
    """
    Protocol for the data object backing one event view.

    While frozen, the holder must reject or queue external mutation so
    geometry computed during a relayout always matches the data it read.
    Both freeze() and unfreeze() must tolerate repeated calls.
    """

    @property
    def represented_object(self) -> Any:
        """The host payload this holder stands for."""
        ...

    @property
    def event_kind(self) -> Any:
        """Kind value used for color lookups."""
        ...

    def freeze(self) -> None:
        ...

    def unfreeze(self) -> None:
        ...


class ScheduleViewDelegate(Protocol):
    """
    Outward notifications from a schedule view.

    Every method is optional: a delegate only implements the callbacks it
    cares about. Missing callbacks are skipped.
    """

    def on_selection_cleared(self) -> None:
        ...

    def on_select(self, payload: Any) -> None:
        ...

    def on_double_click_blank_date(self, date: datetime) -> None:
        ...

    def color_for(self, event_kind: Any) -> Optional["QColor"]:
        ...


@runtime_checkable
class RenderingCollaborator(Protocol):
    """
    Protocol for the object that paints event views.

    The renderer reads proxy frames; the core never paints.
    """

    def set_needs_display(self, proxies: List["EventViewProxy"]) -> None:
        ...

    def layout_if_needed(self, animated: bool, duration: float) -> None:
        ...

    def begin_batch(self, duration: float) -> None:
        ...

    def end_batch(self) -> None:
        ...


class DelegateRef:
    """
    Non-owning handle to a ScheduleViewDelegate.

    The delegate's lifetime is controlled by the host; once it is garbage
    collected every notification becomes a no-op.
    """

    def __init__(self, delegate: Optional[ScheduleViewDelegate] = None):
        self._ref: Optional[weakref.ref] = None
        self.set(delegate)

    def set(self, delegate: Optional[ScheduleViewDelegate]) -> None:
        self._ref = weakref.ref(delegate) if delegate is not None else None

    def get(self) -> Optional[ScheduleViewDelegate]:
        return self._ref() if self._ref is not None else None

    def notify(self, name: str, *args) -> Any:
        """
        Call an optional delegate method.

        Returns:
            The callback's return value, or None when there is no delegate
            or it does not implement the method.
        """
        delegate = self.get()
        if delegate is None:
            return None
        callback = getattr(delegate, name, None)
        if not callable(callback):
            return None
        return callback(*args)
