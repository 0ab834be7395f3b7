"""
Shared fixtures for ScheduleKit tests.
"""
from datetime import datetime, timedelta

import pytest
from PyQt6.QtCore import QRectF

from schedulekit.proxy import EventHolder, EventViewProxy


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Ensure a QCoreApplication exists for PyQt signals."""
    from PyQt6.QtCore import QCoreApplication
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def t0():
    return datetime(2024, 3, 4, 0, 0, 0)


@pytest.fixture
def day_window(t0):
    return t0, t0 + timedelta(days=1)


@pytest.fixture
def make_proxy():
    """Factory for proxies backed by fresh EventHolders."""
    def _make(title="event", frame=None, event_kind=None, holder=None):
        if holder is None:
            holder = EventHolder(represented_object={"title": title}, title=title, event_kind=event_kind)
        return EventViewProxy(holder, frame or QRectF())
    return _make
