"""
Event Holders and Event View Proxies
====================================

EventViewProxy is the on-screen stand-in for one schedule item: it pairs
a holder (the backing data object) with a computed frame in layout space.

EventHolder is a ready-made holder implementation. Hosts with their own
data model only need to satisfy EventHolderInterface.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from PyQt6.QtCore import QRectF
from PyQt6.QtGui import QColor

from .interfaces import EventHolderInterface
from .message import Log


class EventHolder:
    """
    Backing data for one schedule item, with a freeze gate.

    Mutations requested through update() while the holder is frozen are
    queued and applied, in order, when it is unfrozen. freeze() and
    unfreeze() are idempotent.
    """

    def __init__(
        self,
        represented_object: Any = None,
        scheduled_date: Optional[datetime] = None,
        duration: float = 0.0,
        event_kind: Any = None,
        title: str = ""
    ):
        self.represented_object = represented_object
        self.scheduled_date = scheduled_date
        self.duration = duration
        self.event_kind = event_kind
        self.title = title
        self._frozen = False
        self._pending: List[Dict[str, Any]] = []

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def pending_changes(self) -> List[Dict[str, Any]]:
        return [dict(changes) for changes in self._pending]

    def freeze(self) -> None:
        self._frozen = True

    def unfreeze(self) -> None:
        if not self._frozen:
            return
        self._frozen = False
        pending, self._pending = self._pending, []
        for changes in pending:
            self._apply(changes)

    def update(self, **changes) -> bool:
        """
        Change holder attributes.

        Returns:
            True if applied immediately, False if queued because the holder
            is frozen.
        """
        unknown = [name for name in changes if not hasattr(self, name) or name.startswith("_")]
        if unknown:
            raise AttributeError(f"EventHolder has no attribute(s) {', '.join(unknown)}")
        if self._frozen:
            self._pending.append(changes)
            Log.debug(f"EventHolder: queued change {sorted(changes)} while frozen")
            return False
        self._apply(changes)
        return True

    def _apply(self, changes: Dict[str, Any]) -> None:
        for name, value in changes.items():
            setattr(self, name, value)

    def __repr__(self) -> str:
        return f"EventHolder(title={self.title!r}, scheduled_date={self.scheduled_date!r})"


class EventViewProxy:
    """
    Displayed representation of one event.

    Identity matters: two proxies over the same holder are still distinct
    registry entries. needs_layout and needs_display are dirty flags read
    and cleared by the renderer.
    """

    def __init__(self, holder: EventHolderInterface, frame: Optional[QRectF] = None):
        self.proxy_id = str(uuid.uuid4())
        self._holder = holder
        self._frame = QRectF(frame) if frame is not None else QRectF()
        self.needs_layout = False
        self.needs_display = False
        self.background_color: Optional[QColor] = None

    @property
    def holder(self) -> EventHolderInterface:
        return self._holder

    @property
    def frame(self) -> QRectF:
        return QRectF(self._frame)

    def set_frame(self, frame: QRectF) -> None:
        if frame == self._frame:
            return
        self._frame = QRectF(frame)
        self.needs_display = True

    def contains(self, point) -> bool:
        return self._frame.contains(point)

    def mark_needs_layout(self) -> None:
        self.needs_layout = True

    def mark_needs_display(self) -> None:
        self.needs_display = True

    def __repr__(self) -> str:
        return f"EventViewProxy(id={self.proxy_id[:8]}, holder={self._holder!r})"
