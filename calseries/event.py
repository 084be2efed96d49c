"""Immutable calendar events and their identity keys."""

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any

from typing_extensions import override

from calseries.errors import ValidationError
from calseries.util import ALL_DAY_END, ALL_DAY_START, instant_delta, require_aware


class EventStatus(Enum):
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: "EventStatus | str") -> "EventStatus":
        """Accept an EventStatus or its name in any case ("public", "PRIVATE")."""
        if isinstance(value, EventStatus):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        valid = ", ".join(s.name for s in cls)
        raise ValidationError(f"Invalid status: {value!r}\nValid statuses: {valid}")


def _check_subject(subject: Any) -> str:
    if not isinstance(subject, str) or not subject.strip():
        raise ValidationError("Event subject cannot be None or blank")
    return subject


@dataclass(frozen=True, eq=False)
class EventKey:
    """Identity of an event: subject (case-insensitive), start and end instants.

    A key with ``end=None`` can only be used to look events up; it matches
    any end.
    """

    subject: str
    start: datetime
    end: datetime | None = None

    def __post_init__(self) -> None:
        _check_subject(self.subject)
        require_aware(self.start, "EventKey start")
        if self.end is not None:
            require_aware(self.end, "EventKey end")

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EventKey):
            return NotImplemented
        return (
            self.subject.casefold() == other.subject.casefold()
            and self.start == other.start
            and self.end == other.end
        )

    @override
    def __hash__(self) -> int:
        return hash((self.subject.casefold(), self.start, self.end))

    @override
    def __str__(self) -> str:
        return f"EventKey('{self.subject}', {self.start.isoformat()}→{_iso(self.end)})"


def _iso(dt: datetime | None) -> str:
    return dt.isoformat() if dt is not None else "*"


def _on_day_at(dt: datetime, at: time) -> datetime:
    return dt.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)


@dataclass(frozen=True, kw_only=True, eq=False)
class Event:
    """A single calendar occurrence.

    Attributes:
        subject: Event title; compared case-insensitively
        start: Timezone-aware start
        end: Timezone-aware end, strictly after start
        description: Free-text notes (optional)
        location: Where the event happens (optional)
        status: PUBLIC or PRIVATE
        all_day: True for all-day events; start and end are then pinned to
            08:00-17:00 on the start date
        series_id: Shared by all events of a generated series, None otherwise

    Equality, hashing and ordering only look at the identity fields
    (subject, start, end); see `EventKey`.
    """

    subject: str
    start: datetime
    end: datetime
    description: str | None = None
    location: str | None = None
    status: EventStatus = EventStatus.PRIVATE
    all_day: bool = False
    series_id: str | None = None

    def __post_init__(self) -> None:
        _check_subject(self.subject)
        if self.start is None:
            raise ValidationError("Event start time cannot be None")
        if self.end is None:
            raise ValidationError("Event end time cannot be None")
        require_aware(self.start, "Event start")
        require_aware(self.end, "Event end")
        if self.all_day:
            # All-day events always span the fixed window on their start date
            start = self.start
            object.__setattr__(self, "start", _on_day_at(start, ALL_DAY_START))
            object.__setattr__(self, "end", _on_day_at(start, ALL_DAY_END))
        if self.end <= self.start:
            raise ValidationError(
                f"Event end ({self.end.isoformat()}) must be after "
                f"start ({self.start.isoformat()})"
            )
        if not isinstance(self.status, EventStatus):
            object.__setattr__(self, "status", EventStatus.parse(self.status))
        if self.series_id is not None and not self.series_id.strip():
            object.__setattr__(self, "series_id", None)

    @property
    def key(self) -> EventKey:
        return EventKey(self.subject, self.start, self.end)

    @property
    def sort_key(self) -> tuple[datetime, datetime, str]:
        return (self.start, self.end, self.subject.casefold())

    @property
    def duration(self) -> timedelta:
        return instant_delta(self.start, self.end)

    def matches(self, key: EventKey) -> bool:
        """True if this event is the one identified by key (end optional)."""
        return (
            self.subject.casefold() == key.subject.casefold()
            and self.start == key.start
            and (key.end is None or self.end == key.end)
        )

    def in_series(self, series_id: str | None) -> bool:
        return self.series_id is not None and self.series_id == series_id

    def occurs_on(self, day: date) -> bool:
        """True if day falls within [start.date(), end.date()] (event's own zone)."""
        return self.start.date() <= day <= self.end.date()

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Inclusive overlap test; touching endpoints count."""
        return not (self.end < start or self.start > end)

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end

    def copy_with(self, property: str, value: Any) -> "Event":
        """Return a new event with one named property replaced.

        Args:
            property: subject, start, end, description, location, status or
                seriesId (case-insensitive)
            value: New value for that property

        Raises:
            ValidationError: Unknown property, wrong value type, or a result
                that breaks the event invariants
        """
        name = property.strip().casefold() if isinstance(property, str) else ""

        if name == "subject":
            return replace(self, subject=value)
        if name in ("start", "end"):
            if not isinstance(value, datetime):
                raise ValidationError(
                    f"{name} must be a datetime, got {type(value).__name__!r}"
                )
            return replace(self, **{name: value})
        if name in ("description", "location"):
            if value is not None and not isinstance(value, str):
                raise ValidationError(
                    f"{name} must be a string, got {type(value).__name__!r}"
                )
            return replace(self, **{name: value})
        if name == "status":
            return replace(self, status=EventStatus.parse(value))
        if name in ("seriesid", "series_id"):
            if value is not None and not isinstance(value, str):
                raise ValidationError(
                    f"seriesId must be a string, got {type(value).__name__!r}"
                )
            return replace(self, series_id=value)

        raise ValidationError(
            f"Unknown property: {property!r}\n"
            f"Valid properties: subject, start, end, description, location, "
            f"status, seriesId"
        )

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.key == other.key

    @override
    def __hash__(self) -> int:
        return hash(self.key)

    def __lt__(self, other: "Event") -> bool:
        return self.sort_key < other.sort_key

    @override
    def __str__(self) -> str:
        fmt = "%Y-%m-%d %H:%M"
        return f"{self.subject} ({self.start:{fmt}} - {self.end:{fmt}})"


class EventBuilder:
    """Fluent builder for `Event`.

    Example:
        >>> meeting = (
        ...     EventBuilder("Team Sync", start, end)
        ...     .description("Sprint review")
        ...     .location("Room A")
        ...     .status(EventStatus.PUBLIC)
        ...     .build()
        ... )

    Marking the event all-day moves it to the fixed 08:00-17:00 window on the
    start date when `build()` is called.
    """

    def __init__(self, subject: str, start: datetime, end: datetime) -> None:
        # Validate early so a bad builder fails where it is created
        Event(subject=subject, start=start, end=end)
        self._fields: dict[str, Any] = {
            "subject": subject,
            "start": start,
            "end": end,
        }

    def description(self, description: str | None) -> "EventBuilder":
        self._fields["description"] = description
        return self

    def location(self, location: str | None) -> "EventBuilder":
        self._fields["location"] = location
        return self

    def status(self, status: EventStatus | str) -> "EventBuilder":
        self._fields["status"] = EventStatus.parse(status)
        return self

    def all_day(self, all_day: bool = True) -> "EventBuilder":
        self._fields["all_day"] = all_day
        return self

    def series_id(self, series_id: str | None) -> "EventBuilder":
        self._fields["series_id"] = series_id
        return self

    def build(self) -> Event:
        return Event(**self._fields)


__all__ = ["Event", "EventBuilder", "EventKey", "EventStatus"]
