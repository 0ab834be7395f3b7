"""
Selection Controller
====================

Tracks at most one selected event view and tells the delegate about it.

Notification order on a change from A to B:
    1. on_selection_cleared()        - while A is still selected
    2. selection state becomes B
    3. display_requested(all views)  - highlight depends on global state
    4. on_select(B.holder.represented_object)

Signals:
    selection_changed(object): New selected proxy (None when cleared)
    display_requested(list): Proxies that need a redraw
"""

import weakref
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .interfaces import DelegateRef
from .proxy import EventViewProxy
from .registry import EventViewRegistry
from .types import LayoutResult, LayoutErrorKind
from .message import Log


class SelectionController(QObject):

    selection_changed = pyqtSignal(object)
    display_requested = pyqtSignal(list)

    def __init__(self, registry: EventViewRegistry, delegate: Optional[DelegateRef] = None, parent=None):
        super().__init__(parent)
        self._registry = registry
        self._delegate = delegate or DelegateRef()
        self._selected_ref: Optional[weakref.ref] = None

    @property
    def delegate(self) -> DelegateRef:
        return self._delegate

    @property
    def selected(self) -> Optional[EventViewProxy]:
        """The selected proxy, or None."""
        return self._selected_ref() if self._selected_ref is not None else None

    def select(self, proxy: Optional[EventViewProxy]) -> LayoutResult[EventViewProxy]:
        """
        Make proxy the single selection (None clears it).

        Selecting the current selection again changes nothing and sends no
        notifications.

        Returns:
            Success, or NOT_FOUND if proxy is not registered.
        """
        if proxy is not None and proxy not in self._registry:
            message = f"SelectionController: cannot select unregistered {proxy!r}"
            Log.warning(message)
            return LayoutResult.error_result(LayoutErrorKind.NOT_FOUND, message)

        previous = self.selected
        if previous is proxy:
            return LayoutResult.success_result("Selection unchanged", data=proxy)

        if previous is not None:
            self._delegate.notify("on_selection_cleared")

        self._selected_ref = weakref.ref(proxy) if proxy is not None else None

        views = list(self._registry.current_views())
        for view in views:
            view.mark_needs_display()
        self.display_requested.emit(views)
        self.selection_changed.emit(proxy)

        if proxy is not None:
            self._delegate.notify("on_select", proxy.holder.represented_object)
            return LayoutResult.success_result("Event view selected", data=proxy)
        return LayoutResult.success_result("Selection cleared")

    def clear(self) -> LayoutResult[EventViewProxy]:
        return self.select(None)
