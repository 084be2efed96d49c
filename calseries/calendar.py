"""A timezone-aware calendar: event creation, series edits and queries."""

import logging
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Any

from typing_extensions import override

from calseries.errors import DuplicateEventError, EventNotFoundError, ValidationError
from calseries.event import Event, EventKey
from calseries.recurrence import RecurrenceRule
from calseries.storage import EventStorage, SortedEventStorage
from calseries.util import DEFAULT_TIMEZONE, instant_delta, new_series_id, resolve_zone, shift

logger = logging.getLogger(__name__)

_TIME_PROPERTIES = ("start", "end")


class EditMode(Enum):
    """Scope of an edit applied to an event that may belong to a series."""

    SINGLE = "single"
    FROM_THIS_ONWARD = "from_this_onward"
    ENTIRE_SERIES = "entire_series"

    @classmethod
    def parse(cls, value: "EditMode | str") -> "EditMode":
        if isinstance(value, EditMode):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        valid = ", ".join(m.name for m in cls)
        raise ValidationError(f"Unknown edit mode: {value!r}\nValid modes: {valid}")


class Calendar:
    """Events in one timezone, stored through an `EventStorage`.

    The zone is used to interpret new dates and naive times; changing it does
    not touch the instants of events already stored.
    """

    def __init__(
        self,
        zone: tzinfo | str | None = DEFAULT_TIMEZONE,
        *,
        storage: EventStorage | None = None,
        name: str = "",
    ) -> None:
        """
        Args:
            zone: IANA timezone name or tzinfo
            storage: Backing store (default: a new SortedEventStorage)
            name: Display name, kept up to date by CalendarManager
        """
        self._zone: tzinfo = resolve_zone(zone)
        self.storage: EventStorage = storage if storage is not None else SortedEventStorage()
        self.name: str = name

    @override
    def __str__(self) -> str:
        return f"Calendar(name='{self.name}', zone='{self._zone}', events={len(self)})"

    def __len__(self) -> int:
        return len(self.storage)

    @property
    def zone(self) -> tzinfo:
        return self._zone

    @zone.setter
    def zone(self, zone: tzinfo | str) -> None:
        self._zone = resolve_zone(zone)

    def get_zone(self) -> tzinfo:
        return self._zone

    def set_zone(self, zone: tzinfo | str) -> None:
        self.zone = zone

    def localize(self, dt: datetime) -> datetime:
        """Attach this calendar's zone to a naive datetime; aware ones pass through."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=self._zone)
        return dt

    # -- creation -----------------------------------------------------------

    def create_event(self, event: Event) -> Event:
        """Store a single event.

        Raises:
            DuplicateEventError: If an event with the same key exists
        """
        if not self.storage.add_event(event):
            raise DuplicateEventError(f"Duplicate event: {event}")
        logger.debug("created %s in %s", event, self.name or "calendar")
        return event

    def create_series(self, seed: Event, rule: RecurrenceRule) -> list[Event]:
        """Expand seed with rule and store every occurrence.

        Occurrences are inserted in date order. The first duplicate stops the
        operation with DuplicateEventError; occurrences inserted before it stay.
        """
        created: list[Event] = []
        for event in rule.generate_series(seed):
            if not self.storage.add_event(event):
                raise DuplicateEventError(
                    f"Duplicate found in recurring series: {event}\n"
                    f"{len(created)} earlier occurrence(s) were already added."
                )
            created.append(event)
        logger.debug(
            "created series %s (%d events) for %r",
            created[0].series_id if created else None,
            len(created),
            seed.subject,
        )
        return created

    # -- editing ------------------------------------------------------------

    def edit_event(self, key: EventKey, property: str, value: Any) -> Event:
        """Replace the event with exactly this key by a copy with one property changed.

        Raises:
            EventNotFoundError: If no event has this key
            ValidationError: If the property or value is invalid
            DuplicateEventError: If the edited event collides with another one
        """
        for event in self.storage.get_all_events():
            if event.key == key:
                return self._replace(event, event.copy_with(property, value))
        raise EventNotFoundError(f"Event not found for editing: {key}")

    def edit_series(
        self,
        key: EventKey,
        property: str,
        value: Any,
        mode: EditMode | str = EditMode.SINGLE,
    ) -> list[Event]:
        """Edit the anchor event identified by key and, depending on mode, its series.

        Modes:
            SINGLE: only the anchor
            FROM_THIS_ONWARD: the anchor and every later event of its series.
                Changing start or end splits the series: the anchor and later
                events are shifted by the anchor's delta and get a new series id.
            ENTIRE_SERIES: every event of the series (events without a series
                id match on the exact subject instead)

        Returns:
            The replacement events in (start, end, subject) order

        Raises:
            EventNotFoundError: If no event matches key
        """
        mode = EditMode.parse(mode)
        events = self.storage.get_all_events()
        anchor = next((e for e in events if e.matches(key)), None)
        if anchor is None:
            raise EventNotFoundError(f"No matching event found for {key}")

        if mode is EditMode.SINGLE:
            return [self._replace(anchor, anchor.copy_with(property, value))]
        if mode is EditMode.FROM_THIS_ONWARD:
            return self._edit_from_this_onward(events, anchor, property, value)
        return self._edit_entire_series(events, anchor, property, value)

    def _edit_from_this_onward(
        self, events: list[Event], anchor: Event, property: str, value: Any
    ) -> list[Event]:
        if anchor.series_id is None:
            return [self._replace(anchor, anchor.copy_with(property, value))]

        targets = [
            e for e in events if e.in_series(anchor.series_id) and e.start >= anchor.start
        ]
        field = property.strip().casefold() if isinstance(property, str) else ""
        if field not in _TIME_PROPERTIES:
            return [self._replace(e, e.copy_with(property, value)) for e in targets]

        if not isinstance(value, datetime):
            raise ValidationError(
                f"{field} must be a datetime, got {type(value).__name__!r}"
            )
        delta = instant_delta(getattr(anchor, field), value)
        split_id = new_series_id()
        logger.debug(
            "splitting series %s at %s: %d event(s) shifted by %s into %s",
            anchor.series_id,
            anchor.start.isoformat(),
            len(targets),
            delta,
            split_id,
        )

        # Move the far end first so a shifted event never lands on an unmoved sibling
        updated: list[Event] = []
        for e in sorted(targets, key=lambda e: e.sort_key, reverse=delta > timedelta(0)):
            shifted = e.copy_with(field, shift(getattr(e, field), delta))
            updated.append(self._replace(e, shifted.copy_with("seriesId", split_id)))
        return sorted(updated, key=lambda e: e.sort_key)

    def _edit_entire_series(
        self, events: list[Event], anchor: Event, property: str, value: Any
    ) -> list[Event]:
        if anchor.series_id is not None:
            targets = [e for e in events if e.in_series(anchor.series_id)]
        else:
            targets = [
                e for e in events if e.series_id is None and e.subject == anchor.subject
            ]
        return [self._replace(e, e.copy_with(property, value)) for e in targets]

    def _replace(self, old: Event, new: Event) -> Event:
        """Swap old for new; on collision old is put back and the error raised."""
        self.storage.remove_event(old.key)
        if not self.storage.add_event(new):
            self.storage.add_event(old)
            raise DuplicateEventError(
                f"Editing {old} would duplicate an existing event: {new}"
            )
        logger.debug("replaced %s with %s", old, new)
        return new

    # -- queries ------------------------------------------------------------

    def find_event(self, subject: str, start: datetime) -> Event | None:
        """First event with this subject (case-insensitive) starting at this instant."""
        folded = subject.casefold()
        for event in self.storage.get_all_events():
            if event.subject.casefold() == folded and event.start == start:
                return event
        return None

    def query_events_on(self, day: date) -> list[Event]:
        return self.storage.get_events_on(day)

    def query_events_between(self, start: datetime, end: datetime) -> list[Event]:
        """Events overlapping [start, end]; naive bounds are read in this calendar's zone."""
        return self.storage.get_events_between(self.localize(start), self.localize(end))

    def get_all_events(self) -> list[Event]:
        return self.storage.get_all_events()

    def is_busy(self, instant: datetime) -> bool:
        """True if any event's [start, end] contains instant."""
        instant = self.localize(instant)
        return any(e.contains(instant) for e in self.storage.get_all_events())


__all__ = ["Calendar", "EditMode"]
