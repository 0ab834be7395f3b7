"""
Unit tests for TimeCoordinateMapper and ContentRectMapper.

Covers the offset <-> date conversions, minute snapping and the
out-of-window sentinels.
"""
from datetime import datetime, timedelta, timezone

import pytest
from PyQt6.QtCore import QPointF, QRectF, Qt

from schedulekit.mapper import TimeCoordinateMapper, ContentRectMapper
from schedulekit.types import LayoutErrorKind, TimeWindow


@pytest.fixture
def mapper(day_window):
    mapper = TimeCoordinateMapper()
    mapper.set_bounds(*day_window)
    return mapper


class TestSetBounds:
    """Tests for set_bounds()."""

    def test_caches_absolute_interval(self, mapper, t0):
        assert mapper.start_date == t0
        assert mapper.end_date == t0 + timedelta(days=1)
        assert mapper.absolute_time_interval == 86400

    def test_returns_window(self, t0):
        mapper = TimeCoordinateMapper()
        result = mapper.set_bounds(t0, t0 + timedelta(hours=1))

        assert result.success
        assert result.data == TimeWindow(t0, t0 + timedelta(hours=1))

    def test_rejects_inverted_bounds(self, mapper, t0):
        result = mapper.set_bounds(t0, t0 - timedelta(seconds=1))

        assert result.failed
        assert result.error_kind == LayoutErrorKind.INVALID_DATE_RANGE
        # Previous window untouched
        assert mapper.end_date == t0 + timedelta(days=1)

    def test_rejects_mixed_naive_and_aware(self, t0):
        mapper = TimeCoordinateMapper()
        result = mapper.set_bounds(t0, datetime(2024, 3, 5, tzinfo=timezone.utc))

        assert result.failed
        assert mapper.window is None

    def test_constructor_window(self, t0):
        mapper = TimeCoordinateMapper(TimeWindow(t0, t0 + timedelta(hours=2)))
        assert mapper.absolute_time_interval == 7200


class TestDateForOffset:
    """Tests for date_for_offset()."""

    def test_midpoint_of_day(self, mapper, t0):
        assert mapper.date_for_offset(0.5) == t0 + timedelta(seconds=43200)

    def test_bounds_are_defined(self, mapper, t0):
        assert mapper.date_for_offset(0.0) == t0
        assert mapper.date_for_offset(1.0) == t0 + timedelta(days=1)

    @pytest.mark.parametrize("offset", [-0.1, -1e-9, 1.0000001, 2.0, float("nan")])
    def test_outside_unit_interval_is_not_found(self, mapper, offset):
        assert mapper.date_for_offset(offset) is None

    def test_rounds_up_to_next_minute(self, mapper, t0):
        offset = (6 * 3600 + 30) / 86400
        assert mapper.date_for_offset(offset) == t0 + timedelta(hours=6, minutes=1)

    def test_result_has_zero_seconds(self, mapper):
        for offset in (0.1, 0.123, 0.333, 0.777):
            date = mapper.date_for_offset(offset)
            assert date.second == 0
            assert date.microsecond == 0

    def test_lower_bound_is_rounded_up_too(self, t0):
        mapper = TimeCoordinateMapper()
        mapper.set_bounds(t0 + timedelta(seconds=30), t0 + timedelta(hours=1))

        assert mapper.date_for_offset(0.0) == t0 + timedelta(minutes=1)

    def test_without_bounds(self):
        assert TimeCoordinateMapper().date_for_offset(0.5) is None

    def test_aware_window_keeps_timezone(self):
        tz = timezone(timedelta(hours=2))
        start = datetime(2024, 3, 4, 8, 0, tzinfo=tz)
        mapper = TimeCoordinateMapper()
        mapper.set_bounds(start, start + timedelta(hours=10))

        date = mapper.date_for_offset(0.5)

        assert date == start + timedelta(hours=5)
        assert date.utcoffset() == timedelta(hours=2)


class TestOffsetForDate:
    """Tests for offset_for_date()."""

    def test_bounds_inclusive(self, mapper, t0):
        assert mapper.offset_for_date(t0) == 0.0
        assert mapper.offset_for_date(t0 + timedelta(days=1)) == 1.0

    def test_before_start_is_invalid(self, mapper, t0):
        assert mapper.offset_for_date(t0 - timedelta(seconds=1)) is None

    def test_after_end_is_invalid(self, mapper, t0):
        assert mapper.offset_for_date(t0 + timedelta(days=1, seconds=1)) is None

    def test_linear_and_monotonic(self, mapper, t0):
        offsets = [mapper.offset_for_date(t0 + timedelta(hours=h)) for h in range(0, 25, 3)]

        assert offsets == sorted(offsets)
        assert len(set(offsets)) == len(offsets)
        for previous, current in zip(offsets, offsets[1:]):
            assert current - previous == pytest.approx(3 / 24)

    def test_zero_length_window_is_invalid(self, t0):
        mapper = TimeCoordinateMapper()
        mapper.set_bounds(t0, t0)

        assert mapper.offset_for_date(t0) is None

    def test_round_trip_within_one_minute(self, mapper):
        tolerance = 60 / mapper.absolute_time_interval
        for offset in (0.0, 0.1, 0.25, 0.333, 0.5, 0.9, 0.99, 1.0):
            date = mapper.date_for_offset(offset)
            assert mapper.offset_for_date(date) == pytest.approx(offset, abs=tolerance)


class TestOffsetForPoint:
    """Tests for the geometry extension point."""

    def test_base_mapper_always_invalid(self, mapper):
        assert mapper.offset_for_point(QPointF(10, 10)) is None

    def test_horizontal_content_rect(self, day_window):
        mapper = ContentRectMapper(QRectF(100, 0, 400, 200))
        mapper.set_bounds(*day_window)

        assert mapper.offset_for_point(QPointF(300, 50)) == pytest.approx(0.5)
        assert mapper.offset_for_point(QPointF(100, 0)) == pytest.approx(0.0)
        assert mapper.offset_for_point(QPointF(500, 200)) == pytest.approx(1.0)

    def test_outside_content_rect(self):
        mapper = ContentRectMapper(QRectF(100, 0, 400, 200))

        assert mapper.offset_for_point(QPointF(50, 50)) is None
        assert mapper.offset_for_point(QPointF(300, 250)) is None

    def test_vertical_content_rect(self):
        mapper = ContentRectMapper(QRectF(0, 0, 100, 200), orientation=Qt.Orientation.Vertical)

        assert mapper.offset_for_point(QPointF(50, 50)) == pytest.approx(0.25)

    def test_empty_content_rect(self):
        assert ContentRectMapper().offset_for_point(QPointF(0, 0)) is None

    def test_position_for_date(self, day_window, t0):
        mapper = ContentRectMapper(QRectF(100, 0, 400, 200))
        mapper.set_bounds(*day_window)

        assert mapper.position_for_offset(0.5) == pytest.approx(300)
        assert mapper.position_for_date(t0 + timedelta(hours=6)) == pytest.approx(200)
        assert mapper.position_for_offset(1.5) is None
        assert mapper.position_for_date(t0 - timedelta(hours=1)) is None
