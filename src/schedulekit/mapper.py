"""
Time Coordinate Mapper
======================

Converts between dates and normalized [0, 1] offsets inside the visible
time window.

An offset of 0.0 is the window start, 1.0 the window end. Lookups that
fall outside the window return None ("not found" / "invalid") instead of
raising.

Geometry-aware subclasses map view coordinates to offsets by overriding
offset_for_point(); ContentRectMapper does this for one axis of a
content rectangle.
"""

import math
from datetime import datetime, timedelta
from typing import Optional

from PyQt6.QtCore import QPointF, QRectF, Qt

from .constants import SECONDS_PER_MINUTE, REFERENCE_DATE, REFERENCE_DATE_UTC
from .message import Log
from .types import TimeWindow, LayoutResult, LayoutErrorKind


def _reference_for(date: datetime) -> datetime:
    return REFERENCE_DATE if date.tzinfo is None else REFERENCE_DATE_UTC


def absolute_seconds(date: datetime) -> float:
    """Seconds elapsed between the reference date and date."""
    return (date - _reference_for(date)).total_seconds()


class TimeCoordinateMapper:
    """
    Bidirectional date <-> offset conversion for a TimeWindow.

    Absolute start/end references are cached when the bounds change.
    set_bounds() never triggers layout; the caller must force a relayout
    afterwards because previously computed offsets are stale.
    """

    def __init__(self, window: Optional[TimeWindow] = None):
        self._window: Optional[TimeWindow] = None
        self._absolute_start: float = 0.0
        self._absolute_end: float = 0.0
        if window is not None:
            self.set_bounds(window.start, window.end)

    # =========================================================================
    # Bounds
    # =========================================================================

    @property
    def window(self) -> Optional[TimeWindow]:
        return self._window

    @property
    def start_date(self) -> Optional[datetime]:
        """The lowest displayed date."""
        return self._window.start if self._window else None

    @property
    def end_date(self) -> Optional[datetime]:
        """The highest displayed date."""
        return self._window.end if self._window else None

    @property
    def absolute_start(self) -> float:
        return self._absolute_start

    @property
    def absolute_end(self) -> float:
        return self._absolute_end

    @property
    def absolute_time_interval(self) -> float:
        """The total number of seconds displayed."""
        return self._absolute_end - self._absolute_start

    def set_bounds(self, lower: datetime, upper: datetime) -> LayoutResult[TimeWindow]:
        """
        Set the visible date range.

        Args:
            lower: Lowest displayed date
            upper: Highest displayed date

        Returns:
            LayoutResult carrying the new TimeWindow, or an INVALID_DATE_RANGE
            error (window left unchanged) when upper < lower.
        """
        if (lower.tzinfo is None) != (upper.tzinfo is None):
            message = "TimeCoordinateMapper: cannot mix naive and aware bounds"
            Log.warning(message)
            return LayoutResult.error_result(LayoutErrorKind.INVALID_DATE_RANGE, message)
        if upper < lower:
            message = f"TimeCoordinateMapper: upper bound {upper} is before lower bound {lower}"
            Log.warning(message)
            return LayoutResult.error_result(LayoutErrorKind.INVALID_DATE_RANGE, message)

        self._window = TimeWindow(start=lower, end=upper)
        self._absolute_start = absolute_seconds(lower)
        self._absolute_end = absolute_seconds(upper)
        if self._window.is_empty:
            Log.warning("TimeCoordinateMapper: zero-length window, offsets are undefined")
        Log.debug(f"TimeCoordinateMapper: bounds set to {lower} - {upper}")
        return LayoutResult.success_result("Bounds updated", data=self._window)

    # =========================================================================
    # Conversions
    # =========================================================================

    def date_for_offset(self, offset: float) -> Optional[datetime]:
        """
        Calculate the date at a relative position of the window.

        Seconds are truncated and the result is rounded up to the next whole
        minute, so the returned date always has zero seconds. This also
        applies at offset 0.0: a window starting at 10:00:30 maps offset 0.0
        to 10:01:00.

        Args:
            offset: Relative time location, 0.0 to 1.0 inclusive

        Returns:
            The calculated date, or None if offset is outside [0, 1] or no
            bounds are set.
        """
        if self._window is None or not (0.0 <= offset <= 1.0):
            return None

        seconds = math.trunc(self._absolute_start + offset * self.absolute_time_interval)
        remainder = seconds % SECONDS_PER_MINUTE
        if remainder:
            seconds += SECONDS_PER_MINUTE - remainder

        reference = _reference_for(self._window.start)
        date = reference + timedelta(seconds=seconds)
        if self._window.start.tzinfo is not None:
            date = date.astimezone(self._window.start.tzinfo)
        return date

    def offset_for_date(self, date: datetime) -> Optional[float]:
        """
        Calculate the relative position of a date inside the window.

        Returns:
            A value between 0.0 and 1.0, or None if date is before the start,
            after the end, or the window has no extent.
        """
        if self._window is None:
            return None
        if (date.tzinfo is None) != (self._window.start.tzinfo is None):
            return None

        time_ref = absolute_seconds(date)
        if time_ref < self._absolute_start or time_ref > self._absolute_end:
            return None
        interval = self.absolute_time_interval
        if interval <= 0:
            return None
        return (time_ref - self._absolute_start) / interval

    def offset_for_point(self, point: QPointF) -> Optional[float]:
        """
        Calculate the relative time location for a point in view coordinates.

        The base mapper knows nothing about geometry and always returns None.
        Subclasses override this with their own coordinate system.
        """
        return None


class ContentRectMapper(TimeCoordinateMapper):
    """
    Maps one axis of a content rectangle onto the time window.

    With a horizontal orientation the left edge is the window start and the
    right edge the window end; vertical orientation uses top and bottom.
    """

    def __init__(
        self,
        content_rect: Optional[QRectF] = None,
        orientation: Qt.Orientation = Qt.Orientation.Horizontal,
        window: Optional[TimeWindow] = None
    ):
        super().__init__(window)
        self._content_rect = QRectF(content_rect) if content_rect is not None else QRectF()
        self._orientation = orientation

    @property
    def content_rect(self) -> QRectF:
        return QRectF(self._content_rect)

    def set_content_rect(self, rect: QRectF) -> None:
        self._content_rect = QRectF(rect)

    @property
    def orientation(self) -> Qt.Orientation:
        return self._orientation

    def _axis_span(self) -> tuple:
        rect = self._content_rect
        if self._orientation == Qt.Orientation.Horizontal:
            return rect.left(), rect.width()
        return rect.top(), rect.height()

    def offset_for_point(self, point: QPointF) -> Optional[float]:
        """
        Relative time location of a point inside the content rect.

        Returns:
            0.0 to 1.0 along the mapped axis, or None if the point is outside
            the content rect (edges count as inside).
        """
        rect = self._content_rect
        if rect.isEmpty():
            return None
        if not (rect.left() <= point.x() <= rect.right()
                and rect.top() <= point.y() <= rect.bottom()):
            return None

        origin, length = self._axis_span()
        coordinate = point.x() if self._orientation == Qt.Orientation.Horizontal else point.y()
        return (coordinate - origin) / length

    def position_for_offset(self, offset: float) -> Optional[float]:
        """Axis coordinate for an offset, or None outside [0, 1]."""
        if self._content_rect.isEmpty() or not (0.0 <= offset <= 1.0):
            return None
        origin, length = self._axis_span()
        return origin + offset * length

    def position_for_date(self, date: datetime) -> Optional[float]:
        offset = self.offset_for_date(date)
        if offset is None:
            return None
        return self.position_for_offset(offset)
