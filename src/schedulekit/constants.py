"""
ScheduleKit Constants

Central location for time and layout constants.
"""

from datetime import datetime, timezone

# =============================================================================
# Time
# =============================================================================

SECONDS_PER_MINUTE = 60

# Absolute times are measured from this instant. Any minute-aligned
# reference gives the same minute rounding.
REFERENCE_DATE = datetime(2001, 1, 1)
REFERENCE_DATE_UTC = datetime(2001, 1, 1, tzinfo=timezone.utc)

# =============================================================================
# Layout
# =============================================================================

# Duration of the animated full relayout (seconds)
DEFAULT_RELAYOUT_ANIMATION_DURATION = 1.0

DEFAULT_EVENT_COLOR = "#A0A0A0"
