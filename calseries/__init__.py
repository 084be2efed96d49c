import logging

from .calendar import Calendar, EditMode
from .copier import CopyResult, EventCopier, copier
from .errors import (
    CalendarError,
    CalendarNotFoundError,
    DuplicateCalendarError,
    DuplicateError,
    DuplicateEventError,
    EventNotFoundError,
    InvalidTimezoneError,
    NoActiveCalendarError,
    NotFoundError,
    StateError,
    ValidationError,
)
from .event import Event, EventBuilder, EventKey, EventStatus
from .manager import CalendarManager
from .recurrence import RecurrenceRule
from .storage import EventStorage, ListEventStorage, SortedEventStorage

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Event",
    "EventBuilder",
    "EventKey",
    "EventStatus",
    "RecurrenceRule",
    "EventStorage",
    "SortedEventStorage",
    "ListEventStorage",
    "Calendar",
    "EditMode",
    "CalendarManager",
    "EventCopier",
    "CopyResult",
    "copier",
    "CalendarError",
    "ValidationError",
    "NotFoundError",
    "EventNotFoundError",
    "CalendarNotFoundError",
    "DuplicateError",
    "DuplicateEventError",
    "DuplicateCalendarError",
    "StateError",
    "NoActiveCalendarError",
    "InvalidTimezoneError",
]
