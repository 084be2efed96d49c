"""Exceptions raised by calseries.

Every error derives from `CalendarError` so callers can catch the whole
family at once. Validation and lookup errors also subclass the matching
builtin (`ValueError`, `LookupError`).
"""


class CalendarError(Exception):
    """Base class for all calseries errors."""


class ValidationError(CalendarError, ValueError):
    """Malformed subject, time range, property name or blank required field."""


class NotFoundError(CalendarError, LookupError):
    """No event or calendar matches the given key or name."""


class EventNotFoundError(NotFoundError):
    pass


class CalendarNotFoundError(NotFoundError):
    pass


class DuplicateError(CalendarError):
    """Insert collided with an existing key or name."""


class DuplicateEventError(DuplicateError):
    pass


class DuplicateCalendarError(DuplicateError):
    pass


class StateError(CalendarError):
    """Operation is not possible in the current state."""


class NoActiveCalendarError(StateError):
    pass


class InvalidTimezoneError(StateError):
    pass


__all__ = [
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
