"""
Schedule View
=============

Coordinator that ties the time mapping, the event view registry, the
relayout engine, drag sessions and selection together.

The host feeds pointer input and data changes in; the renderer listens to
the signals below and reads proxy frames. Nothing here paints.

Signals:
    display_requested(list): Proxies that need a redraw
    layout_requested(bool, float): (animated, duration) layout pass
    animation_batch_started(float): Opens an animation batch
    animation_batch_finished(): Closes the animation batch
    date_bounds_changed(object, object): New (start, end); offsets are stale
    selection_changed(object): Selected proxy or None
    color_mode_changed(object): New EventColorMode
"""

from datetime import datetime
from typing import Iterable, List, Optional

from PyQt6.QtCore import QObject, QPointF, QRectF, pyqtSignal
from PyQt6.QtGui import QColor

from .drag import DragController
from .interfaces import (
    DelegateRef, EventHolderInterface, RenderingCollaborator, ScheduleViewDelegate
)
from .mapper import TimeCoordinateMapper
from .message import Log
from .proxy import EventViewProxy
from .registry import EventViewRegistry
from .relayout import FramePolicy, RelayoutEngine
from .selection import SelectionController
from .settings import ScheduleSettings
from .types import EventColorMode, LayoutResult, TimeWindow


class ScheduleView(QObject):
    """
    Layout and interaction coordinator for one schedule view.

    Example:
        view = ScheduleView(mapper=ContentRectMapper(QRectF(0, 0, 700, 400)))
        view.set_date_bounds(monday, next_monday)
        proxy = view.create_event_view(EventHolder(meeting, meeting.start))
        view.invalidate_frame_for_all_event_views()
    """

    display_requested = pyqtSignal(list)
    layout_requested = pyqtSignal(bool, float)
    animation_batch_started = pyqtSignal(float)
    animation_batch_finished = pyqtSignal()
    date_bounds_changed = pyqtSignal(object, object)
    selection_changed = pyqtSignal(object)
    color_mode_changed = pyqtSignal(object)

    def __init__(
        self,
        mapper: Optional[TimeCoordinateMapper] = None,
        settings: Optional[ScheduleSettings] = None,
        policy: Optional[FramePolicy] = None,
        delegate: Optional[ScheduleViewDelegate] = None,
        parent=None
    ):
        super().__init__(parent)

        self._settings = settings or ScheduleSettings()
        self._mapper = mapper or TimeCoordinateMapper()
        self._delegate = DelegateRef(delegate)
        self._color_mode = self._settings.event_color_mode

        self._registry = EventViewRegistry()
        self._engine = RelayoutEngine(
            self._registry,
            policy=policy,
            animation_duration=self._settings.relayout_animation_duration,
            parent=self,
        )
        self._drag = DragController(self._registry, self._engine, parent=self)
        self._selection = SelectionController(self._registry, self._delegate, parent=self)

        self._engine.layout_requested.connect(self.layout_requested)
        self._engine.animation_batch_started.connect(self.animation_batch_started)
        self._engine.animation_batch_finished.connect(self.animation_batch_finished)
        self._drag.display_requested.connect(self.display_requested)
        self._selection.display_requested.connect(self.display_requested)
        self._selection.selection_changed.connect(self.selection_changed)

    # =========================================================================
    # Components
    # =========================================================================

    @property
    def mapper(self) -> TimeCoordinateMapper:
        return self._mapper

    @property
    def registry(self) -> EventViewRegistry:
        return self._registry

    @property
    def relayout_engine(self) -> RelayoutEngine:
        return self._engine

    @property
    def drag_controller(self) -> DragController:
        return self._drag

    @property
    def selection_controller(self) -> SelectionController:
        return self._selection

    @property
    def settings(self) -> ScheduleSettings:
        return self._settings

    def apply_settings(self, settings: ScheduleSettings) -> None:
        """Adopt new settings (animation duration and color mode)."""
        self._settings = settings
        self._engine.set_animation_duration(settings.relayout_animation_duration)
        self.color_mode = settings.event_color_mode

    @property
    def delegate(self) -> Optional[ScheduleViewDelegate]:
        return self._delegate.get()

    @delegate.setter
    def delegate(self, delegate: Optional[ScheduleViewDelegate]) -> None:
        self._delegate.set(delegate)

    def attach_renderer(self, renderer: RenderingCollaborator) -> None:
        """Connect the coordinator's requests to a renderer's slots."""
        self.display_requested.connect(renderer.set_needs_display)
        self.layout_requested.connect(renderer.layout_if_needed)
        self.animation_batch_started.connect(renderer.begin_batch)
        self.animation_batch_finished.connect(renderer.end_batch)

    # =========================================================================
    # Date Handling
    # =========================================================================

    @property
    def time_window(self) -> Optional[TimeWindow]:
        return self._mapper.window

    @property
    def start_date(self) -> Optional[datetime]:
        return self._mapper.start_date

    @property
    def end_date(self) -> Optional[datetime]:
        return self._mapper.end_date

    def set_date_bounds(self, lower: datetime, upper: datetime) -> LayoutResult[TimeWindow]:
        """
        Change the visible date range.

        Frames are not recomputed: the host must reload its events or call
        invalidate_frame_for_all_event_views() afterwards.
        """
        result = self._mapper.set_bounds(lower, upper)
        if result.failed:
            return result
        self.date_bounds_changed.emit(lower, upper)
        self._request_display(self._registry.current_views())
        return result

    def date_for_offset(self, offset: float) -> Optional[datetime]:
        return self._mapper.date_for_offset(offset)

    def offset_for_date(self, date: datetime) -> Optional[float]:
        return self._mapper.offset_for_date(date)

    def offset_for_point(self, point: QPointF) -> Optional[float]:
        return self._mapper.offset_for_point(point)

    # =========================================================================
    # Event View Management
    # =========================================================================

    @property
    def event_views(self) -> tuple:
        return self._registry.current_views()

    def create_event_view(
        self,
        holder: EventHolderInterface,
        frame: Optional[QRectF] = None
    ) -> LayoutResult[EventViewProxy]:
        return self.add_event_view(EventViewProxy(holder, frame))

    def add_event_view(self, proxy: EventViewProxy) -> LayoutResult[EventViewProxy]:
        result = self._registry.add(proxy)
        if result.success:
            self._request_display([proxy])
        return result

    def remove_event_view(self, proxy: EventViewProxy) -> LayoutResult[EventViewProxy]:
        """
        Unregister proxy.

        A drag of the proxy is ended and a selection of it is cleared, so the
        holder is never left frozen and the delegate hears about the change.
        """
        result = self._registry.remove(proxy)
        if result.failed:
            return result
        if self._drag.dragged_view is proxy:
            self._drag.end()
        if self._selection.selected is proxy:
            self._selection.clear()
        return result

    def remove_all_event_views(self) -> List[EventViewProxy]:
        if self._drag.is_dragging:
            self._drag.end()
        self._selection.clear()
        return self._registry.clear()

    # =========================================================================
    # Relayout
    # =========================================================================

    @property
    def is_relayout_in_progress(self) -> bool:
        return self._engine.is_relayout_in_progress

    def invalidate_frames(self, proxies: Iterable[EventViewProxy]) -> LayoutResult[List[EventViewProxy]]:
        return self._engine.invalidate_frames(proxies)

    def invalidate_frame_for_all_event_views(self) -> LayoutResult[List[EventViewProxy]]:
        return self._engine.invalidate_frame_for_all_event_views()

    # =========================================================================
    # Drag & Drop
    # =========================================================================

    @property
    def event_view_being_dragged(self) -> Optional[EventViewProxy]:
        return self._drag.dragged_view

    def begin_dragging(self, proxy: EventViewProxy) -> LayoutResult[EventViewProxy]:
        return self._drag.begin(proxy)

    def continue_dragging(self) -> LayoutResult[EventViewProxy]:
        return self._drag.continue_drag()

    def end_dragging(self) -> LayoutResult[EventViewProxy]:
        return self._drag.end()

    # =========================================================================
    # Selection & Pointer Input
    # =========================================================================

    @property
    def selected_event_view(self) -> Optional[EventViewProxy]:
        return self._selection.selected

    def select_event_view(self, proxy: Optional[EventViewProxy]) -> LayoutResult[EventViewProxy]:
        return self._selection.select(proxy)

    def clear_selection(self) -> LayoutResult[EventViewProxy]:
        return self._selection.clear()

    def mouse_down(self, point: QPointF, click_count: int = 1) -> LayoutResult:
        """
        Handle a click at point (view coordinates).

        A click on an event view selects it. A click on empty space clears
        the selection; a double click there also reports the date under the
        pointer to the delegate.

        Returns:
            Success carrying the selected proxy, the blank date reported, or
            nothing.
        """
        hit = self._registry.view_at_point(point)
        if hit is not None:
            return self._selection.select(hit)

        self._selection.clear()
        if click_count != 2:
            return LayoutResult.success_result("Selection cleared")

        offset = self._mapper.offset_for_point(point)
        if offset is None:
            return LayoutResult.success_result("Double click outside the time window")
        blank_date = self._mapper.date_for_offset(offset)
        if blank_date is None:
            return LayoutResult.success_result("Double click outside the time window")

        Log.debug(f"ScheduleView: double click on blank date {blank_date}")
        self._delegate.notify("on_double_click_blank_date", blank_date)
        return LayoutResult.success_result("Blank date double clicked", data=blank_date)

    # =========================================================================
    # Coloring
    # =========================================================================

    @property
    def color_mode(self) -> EventColorMode:
        return self._color_mode

    @color_mode.setter
    def color_mode(self, mode: EventColorMode) -> None:
        if mode == self._color_mode:
            return
        self._color_mode = mode
        views = self._registry.current_views()
        for view in views:
            view.background_color = None
        self.color_mode_changed.emit(mode)
        self._request_display(views)

    def color_for(self, proxy: EventViewProxy) -> QColor:
        """
        Background color for proxy.

        Uses the cached color, then (in BY_EVENT_KIND mode) the delegate's
        color_for(event_kind), then the configured default color.
        """
        if proxy.background_color is not None:
            return proxy.background_color

        color = None
        if self._color_mode == EventColorMode.BY_EVENT_KIND:
            color = self._delegate.notify("color_for", proxy.holder.event_kind)
        if not isinstance(color, QColor) or not color.isValid():
            color = QColor(self._settings.default_event_color)
        proxy.background_color = color
        return color

    # =========================================================================
    # Internal
    # =========================================================================

    def _request_display(self, views: Iterable[EventViewProxy]) -> None:
        views = list(views)
        for view in views:
            view.mark_needs_display()
        self.display_requested.emit(views)
