"""Copy events from one calendar into another, converting timezones.

Copies keep the instant-level meaning of a shift: an event copied to a target
calendar in another zone is re-expressed in that zone, so its wall-clock times
may change while its duration stays the same.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta, tzinfo

from calseries.calendar import Calendar
from calseries.errors import CalendarError, EventNotFoundError, ValidationError
from calseries.event import Event
from calseries.util import instant_delta, new_series_id, require_aware, shift

logger = logging.getLogger(__name__)

# Sentinel: keep the source event's series id
_KEEP = object()


@dataclass(frozen=True)
class CopyResult:
    """Result of copying one event.

    Attributes:
        success: True if the copy was stored in the target calendar
        source: The event that was copied
        event: The stored copy if successful, None if failed
        error: The error that stopped the copy, None if successful
    """

    success: bool
    source: Event
    event: Event | None
    error: CalendarError | None


def _day_shifted(event: Event, days: int, zone: tzinfo, series_id: object) -> Event:
    """Move event by whole days on its own wall clock, then re-express in zone."""
    start = (event.start + timedelta(days=days)).astimezone(zone)
    changes: dict[str, object] = {"start": start, "end": shift(start, event.duration)}
    if series_id is not _KEEP:
        changes["series_id"] = series_id
    return replace(event, **changes)


class EventCopier:
    """Copies events out of one fixed source calendar.

    Example:
        >>> copier = EventCopier(work)
        >>> copier.copy_event("Standup", monday_9am, home, tuesday_9am)
        >>> results = copier.copy_events_between(jan_1, jan_31, home, feb_1)
        >>> failed = [r for r in results if not r.success]
    """

    def __init__(self, source: Calendar) -> None:
        if source is None:
            raise ValidationError("Source calendar cannot be None.")
        self.source: Calendar = source

    def copy_event(
        self,
        name: str,
        source_start: datetime,
        target: Calendar,
        target_start: datetime,
    ) -> Event:
        """Copy the event called name starting at source_start so it starts at target_start.

        Description, location, status, all-day flag and series id are kept.

        Raises:
            ValidationError: If name is blank or a time is naive
            EventNotFoundError: If the source has no such event
            DuplicateEventError: If the copy collides in the target
        """
        if target is None:
            raise ValidationError("Target calendar cannot be None.")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Event name cannot be None or blank.")
        require_aware(source_start, "source_start")
        require_aware(target_start, "target_start")

        original = self.source.find_event(name, source_start)
        if original is None:
            raise EventNotFoundError(
                f"Event '{name}' not found at {source_start.isoformat()}"
            )

        offset = instant_delta(original.start, target_start)
        copied = replace(
            original,
            start=shift(original.start, offset).astimezone(target.zone),
            end=shift(original.end, offset).astimezone(target.zone),
        )
        target.create_event(copied)
        logger.debug("copied %s to %s as %s", original, target.name or "target", copied)
        return copied

    def copy_events_on_date(
        self, source_date: date, target: Calendar, target_date: date
    ) -> list[CopyResult]:
        """Copy every event occurring on source_date so it occurs on target_date.

        Failures for individual events are logged as warnings and reported in
        the returned results; they do not stop the other copies.
        """
        if target is None:
            raise ValidationError("Target calendar cannot be None.")
        if source_date is None or target_date is None:
            raise ValidationError("Dates cannot be None.")

        days = (target_date - source_date).days
        return [
            self._copy_shifted(event, target, days, _KEEP)
            for event in self.source.query_events_on(source_date)
        ]

    def copy_events_between(
        self,
        start_date: date,
        end_date: date,
        target: Calendar,
        target_start_date: date,
    ) -> list[CopyResult]:
        """Copy events starting between start_date and end_date (inclusive).

        Standalone events are copied without a series id. Each source series
        becomes a new series in the target with one freshly generated id, so
        the copies are independent of the source series.

        Raises:
            ValidationError: If end_date is before start_date
        """
        if target is None:
            raise ValidationError("Target calendar cannot be None.")
        if start_date is None or end_date is None or target_start_date is None:
            raise ValidationError("Dates cannot be None.")
        if end_date < start_date:
            raise ValidationError(
                f"End date ({end_date}) must be on or after start date ({start_date})."
            )

        zone = self.source.zone
        range_start = datetime.combine(start_date, time.min, tzinfo=zone)
        range_end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=zone)
        in_range = [
            e
            for e in self.source.query_events_between(range_start, range_end)
            if start_date <= e.start.date() <= end_date
        ]

        standalone: list[Event] = []
        series: dict[str, list[Event]] = {}
        for event in in_range:
            if event.series_id is None:
                standalone.append(event)
            else:
                series.setdefault(event.series_id, []).append(event)

        days = (target_start_date - start_date).days
        results = [self._copy_shifted(e, target, days, None) for e in standalone]
        for members in series.values():
            copy_id = new_series_id()
            for e in sorted(members, key=lambda e: e.start):
                results.append(self._copy_shifted(e, target, days, copy_id))

        logger.debug(
            "copied %d/%d event(s) (%d series) from %s..%s",
            sum(r.success for r in results),
            len(results),
            len(series),
            start_date,
            end_date,
        )
        return results

    def _copy_shifted(
        self, source: Event, target: Calendar, days: int, series_id: object
    ) -> CopyResult:
        try:
            copy = _day_shifted(source, days, target.zone, series_id)
            target.create_event(copy)
        except CalendarError as e:
            logger.warning("Failed to copy event '%s': %s", source.subject, e)
            return CopyResult(success=False, source=source, event=None, error=e)
        return CopyResult(success=True, source=source, event=copy, error=None)


def copier(source: Calendar) -> EventCopier:
    """Create an EventCopier reading from source."""
    return EventCopier(source)


__all__ = ["CopyResult", "EventCopier", "copier"]
