"""Event storage backends.

`EventStorage` is the contract a `Calendar` writes through. Two in-memory
implementations are provided: `SortedEventStorage` keeps events ordered for
fast range queries, `ListEventStorage` is a plain list.
"""

import bisect
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from datetime import date, datetime

from typing_extensions import override

from calseries.event import Event, EventKey


class EventStorage(ABC):
    """Abstract base class for event stores.

    A store holds at most one event per `EventKey`. Every list it returns is a
    fresh copy in canonical order (start, end, subject).
    """

    @abstractmethod
    def add_event(self, event: Event) -> bool:
        """Insert event unless its key is taken. Returns True if inserted."""
        pass

    @abstractmethod
    def remove_event(self, key: EventKey) -> bool:
        """Remove the event with this key. Returns True if one was removed."""
        pass

    @abstractmethod
    def get_all_events(self) -> list[Event]:
        pass

    def get_events_on(self, day: date) -> list[Event]:
        """Events whose [start date, end date] span covers day."""
        return [e for e in self.get_all_events() if e.occurs_on(day)]

    def get_events_between(self, start: datetime, end: datetime) -> list[Event]:
        """Events intersecting [start, end]; touching endpoints count."""
        return [e for e in self.get_all_events() if e.overlaps(start, end)]

    def __contains__(self, key: object) -> bool:
        if isinstance(key, Event):
            key = key.key
        return any(e.key == key for e in self.get_all_events())

    def __iter__(self) -> Iterator[Event]:
        return iter(self.get_all_events())

    @abstractmethod
    def __len__(self) -> int:
        pass


class SortedEventStorage(EventStorage):
    """Store backed by a list kept sorted by (start, end, subject).

    A dict indexed by key makes duplicate detection and removal lookups
    constant time; the sorted list lets range queries stop at the first event
    that starts after the range.
    """

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self._events: list[Event] = []
        self._by_key: dict[EventKey, Event] = {}
        for event in events:
            self.add_event(event)

    @override
    def add_event(self, event: Event) -> bool:
        key = event.key
        if key in self._by_key:
            return False
        self._by_key[key] = event
        bisect.insort(self._events, event, key=lambda e: e.sort_key)
        return True

    @override
    def remove_event(self, key: EventKey) -> bool:
        event = self._by_key.pop(key, None)
        if event is None:
            return False
        idx = bisect.bisect_left(self._events, event.sort_key, key=lambda e: e.sort_key)
        del self._events[idx]
        return True

    @override
    def get_all_events(self) -> list[Event]:
        return list(self._events)

    @override
    def get_events_between(self, start: datetime, end: datetime) -> list[Event]:
        # Nothing starting after `end` can overlap
        stop = bisect.bisect_right(self._events, end, key=lambda e: e.start)
        return [e for e in self._events[:stop] if not e.end < start]

    @override
    def __contains__(self, key: object) -> bool:
        if isinstance(key, Event):
            key = key.key
        return key in self._by_key

    @override
    def __len__(self) -> int:
        return len(self._events)


class ListEventStorage(EventStorage):
    """Unordered list store; every operation is a linear scan."""

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self._events: list[Event] = []
        for event in events:
            self.add_event(event)

    @override
    def add_event(self, event: Event) -> bool:
        if any(existing == event for existing in self._events):
            return False
        self._events.append(event)
        return True

    @override
    def remove_event(self, key: EventKey) -> bool:
        for i, existing in enumerate(self._events):
            if existing.key == key:
                del self._events[i]
                return True
        return False

    @override
    def get_all_events(self) -> list[Event]:
        return sorted(self._events, key=lambda e: e.sort_key)

    @override
    def __len__(self) -> int:
        return len(self._events)


__all__ = ["EventStorage", "SortedEventStorage", "ListEventStorage"]
