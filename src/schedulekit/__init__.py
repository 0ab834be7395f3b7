"""
ScheduleKit Package
===================

Layout and interaction coordinator for schedule views built on PyQt6.

Keeps the on-screen geometry of time-bounded events consistent with their
temporal position inside a visible date window. Painting, pointer capture
and animation playback stay with the host; this package only produces
frames and asks for redraws through Qt signals.

Directory Structure
-------------------
- types.py      - Public data contracts (TimeWindow, LayoutResult, enums)
- interfaces.py - Protocols for holders, delegates and renderers
- mapper.py     - Date <-> offset conversion (TimeCoordinateMapper)
- proxy.py      - EventHolder and EventViewProxy
- registry.py   - EventViewRegistry
- relayout.py   - RelayoutEngine and frame policies
- drag.py       - DragController / DragSession
- selection.py  - SelectionController
- view.py       - ScheduleView coordinator
- settings.py   - ScheduleSettings (dataclass + JSON persistence)
- message.py    - Log facade

Import Examples
---------------
    from schedulekit.view import ScheduleView
    from schedulekit.proxy import EventHolder, EventViewProxy
    from schedulekit.mapper import TimeCoordinateMapper, ContentRectMapper
    from schedulekit.types import LayoutResult, LayoutErrorKind
"""

__version__ = "0.1.0"
