"""
ScheduleKit Data Types
======================

Public data contracts shared by the coordinator components.

- TimeWindow: the visible date range
- LayoutResult: structured return value of every fallible operation
- Enums for result status, error kinds, relayout state and color mode
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, List, TypeVar, Generic


# =============================================================================
# Time Window
# =============================================================================

@dataclass(frozen=True)
class TimeWindow:
    """
    The visible date range of a schedule view.

    Attributes:
        start: Lowest displayed date
        end: Highest displayed date (must be >= start)

    Mapping is only meaningful when duration > 0. Replacing the window
    invalidates every offset computed against the previous one.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"TimeWindow end ({self.end}) is before start ({self.start})")

    @property
    def duration(self) -> float:
        """Total number of seconds displayed."""
        return (self.end - self.start).total_seconds()

    @property
    def is_empty(self) -> bool:
        return self.duration <= 0

    def contains(self, date: datetime) -> bool:
        """Whether date lies inside the window (bounds inclusive)."""
        return self.start <= date <= self.end


# =============================================================================
# Results
# =============================================================================

class ResultStatus(Enum):
    """Status of a coordinator operation"""
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


class LayoutErrorKind(Enum):
    """Typed failure reasons reported by the coordinator components."""
    INVALID_OFFSET = "invalid_offset"
    INVALID_DATE_RANGE = "invalid_date_range"
    DUPLICATE_REGISTRATION = "duplicate_registration"
    NOT_FOUND = "not_found"
    REENTRANT_RELAYOUT = "reentrant_relayout"
    DRAG_SESSION_MISUSE = "drag_session_misuse"
    INVALID_STATE = "invalid_state"


T = TypeVar('T')


@dataclass
class LayoutResult(Generic[T]):
    """
    Structured result from coordinator operations.

    No operation in the package raises for a recoverable condition; it
    returns one of these instead.

    Attributes:
        status: Success, error, or warning
        message: Human-readable result message
        data: Optional payload (a proxy, a list of proxies, ...)
        error_kind: Failure reason for ERROR and WARNING results
        warnings: Additional warning messages
    """
    status: ResultStatus
    message: str
    data: Optional[T] = None
    error_kind: Optional[LayoutErrorKind] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == ResultStatus.ERROR

    def __bool__(self) -> bool:
        return self.status != ResultStatus.ERROR

    @classmethod
    def success_result(cls, message: str, data: T = None) -> 'LayoutResult[T]':
        return cls(status=ResultStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error_result(cls, kind: LayoutErrorKind, message: str) -> 'LayoutResult[T]':
        return cls(status=ResultStatus.ERROR, message=message, error_kind=kind)

    @classmethod
    def warning_result(
        cls,
        kind: LayoutErrorKind,
        message: str,
        data: T = None,
        warnings: Optional[List[str]] = None
    ) -> 'LayoutResult[T]':
        return cls(
            status=ResultStatus.WARNING,
            message=message,
            data=data,
            error_kind=kind,
            warnings=warnings or [],
        )


# =============================================================================
# State Enums
# =============================================================================

class RelayoutState(Enum):
    """
    Relayout state machine:

        IDLE -> (begin_relayout) -> IN_PROGRESS -> (end_relayout) -> IDLE
    """
    IDLE = auto()
    IN_PROGRESS = auto()


class EventColorMode(Enum):
    """How event views pick their background color."""
    BY_EVENT_KIND = "by_event_kind"
    BY_EVENT_OWNER = "by_event_owner"
