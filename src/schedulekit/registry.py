"""
Event View Registry
===================

Owns the live collection of displayed event view proxies.

Proxies are matched by identity. add() and remove() report duplicates and
misses through LayoutResult instead of raising, so a stale reference from
the host never takes the view down.
"""

from typing import List, Optional, Tuple

from PyQt6.QtCore import QPointF

from .interfaces import EventHolderInterface
from .message import Log
from .proxy import EventViewProxy
from .types import LayoutResult, LayoutErrorKind


class EventViewRegistry:
    """
    Ordered collection of EventViewProxy objects.

    Insertion order is preserved but carries no meaning beyond hit-testing,
    where the most recently added proxy is considered on top.
    """

    def __init__(self):
        self._views: List[EventViewProxy] = []

    def __len__(self) -> int:
        return len(self._views)

    def __contains__(self, proxy: object) -> bool:
        return self._index_of(proxy) is not None

    def _index_of(self, proxy: object) -> Optional[int]:
        for index, view in enumerate(self._views):
            if view is proxy:
                return index
        return None

    # =========================================================================
    # Mutation
    # =========================================================================

    def add(self, proxy: EventViewProxy) -> LayoutResult[EventViewProxy]:
        """
        Register a proxy.

        Returns:
            Success with the proxy, or DUPLICATE_REGISTRATION if it is
            already registered.
        """
        if proxy in self:
            message = f"EventViewRegistry: {proxy!r} is already registered"
            Log.warning(message)
            return LayoutResult.error_result(LayoutErrorKind.DUPLICATE_REGISTRATION, message)
        self._views.append(proxy)
        return LayoutResult.success_result("Event view added", data=proxy)

    def remove(self, proxy: EventViewProxy) -> LayoutResult[EventViewProxy]:
        """
        Unregister the first entry matching proxy.

        Returns:
            Success with the proxy, or NOT_FOUND if it was not registered.
        """
        index = self._index_of(proxy)
        if index is None:
            message = f"EventViewRegistry: {proxy!r} is not registered"
            Log.warning(message)
            return LayoutResult.error_result(LayoutErrorKind.NOT_FOUND, message)
        del self._views[index]
        return LayoutResult.success_result("Event view removed", data=proxy)

    def clear(self) -> List[EventViewProxy]:
        """Remove every proxy and return them in insertion order."""
        removed, self._views = self._views, []
        return removed

    # =========================================================================
    # Queries
    # =========================================================================

    def current_views(self) -> Tuple[EventViewProxy, ...]:
        """
        Snapshot of the registered proxies.

        The tuple can be iterated any number of times and is unaffected by
        later add()/remove() calls.
        """
        return tuple(self._views)

    def other_views(self, excluded: Optional[EventViewProxy]) -> Tuple[EventViewProxy, ...]:
        """Snapshot of every proxy except excluded."""
        return tuple(view for view in self._views if view is not excluded)

    def all_holders(self) -> List[EventHolderInterface]:
        """Distinct holders behind the registered proxies, first-seen order."""
        holders: List[EventHolderInterface] = []
        seen = set()
        for view in self._views:
            holder = view.holder
            if id(holder) in seen:
                continue
            seen.add(id(holder))
            holders.append(holder)
        return holders

    def view_at_point(self, point: QPointF) -> Optional[EventViewProxy]:
        """Topmost proxy whose frame contains point."""
        for view in reversed(self._views):
            if view.contains(point):
                return view
        return None
