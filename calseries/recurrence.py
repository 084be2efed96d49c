"""Weekday recurrence rules for expanding one seed event into a series.

Occurrence dates come from python-dateutil's rrule; this module only decides
the stop condition and turns each date into an `Event`.
"""

from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime, time
from typing import Literal, TypeAlias

from dateutil.rrule import DAILY, FR, MO, SA, SU, TH, TU, WE, rrule, weekday

from calseries.errors import ValidationError
from calseries.event import Event
from calseries.util import new_series_id

Day: TypeAlias = Literal[
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"
]

# Mapping from day names to dateutil weekday constants
_DAY_MAP: dict[str, weekday] = {
    "monday": MO,
    "tuesday": TU,
    "wednesday": WE,
    "thursday": TH,
    "friday": FR,
    "saturday": SA,
    "sunday": SU,
}
_BY_INDEX: tuple[weekday, ...] = (MO, TU, WE, TH, FR, SA, SU)


def _to_weekday(day: "Day | str | int | weekday") -> weekday:
    if isinstance(day, weekday):
        return _BY_INDEX[day.weekday]
    if isinstance(day, int) and not isinstance(day, bool):
        if 0 <= day <= 6:
            return _BY_INDEX[day]
        raise ValidationError(
            f"Invalid weekday index: {day}\nUse 0 (Monday) through 6 (Sunday)."
        )
    if isinstance(day, str) and day.strip().lower() in _DAY_MAP:
        return _DAY_MAP[day.strip().lower()]
    valid = ", ".join(_DAY_MAP)
    raise ValidationError(f"Invalid day name: {day!r}\nValid days: {valid}\n")


class RecurrenceRule:
    """Repeat an event on a set of weekdays for N occurrences or until a date.

    Exactly one of ``occurrences`` and ``until`` must be given.

    Example:
        >>> rule = RecurrenceRule(["monday", "wednesday"], occurrences=4)
        >>> series = rule.generate_series(seed)
    """

    def __init__(
        self,
        days: Iterable["Day | str | int | weekday"] | None,
        *,
        occurrences: int | None = None,
        until: date | None = None,
    ) -> None:
        """
        Args:
            days: Weekdays to repeat on (names, 0-6 indexes or dateutil weekdays)
            occurrences: Number of events to generate
            until: Last date (inclusive) on which an event may occur

        Raises:
            ValidationError: If both or neither stop condition is given, or a
                day/occurrence count is invalid
        """
        if (occurrences is None) == (until is None):
            raise ValidationError(
                "Specify either occurrences or until date, not both.\n"
                "Examples:\n"
                "  RecurrenceRule(['monday'], occurrences=5)\n"
                "  RecurrenceRule(['monday'], until=date(2025, 3, 31))"
            )
        if occurrences is not None and (
            isinstance(occurrences, bool)
            or not isinstance(occurrences, int)
            or occurrences < 1
        ):
            raise ValidationError(
                f"occurrences must be a positive integer, got {occurrences!r}"
            )
        if until is not None and (
            not isinstance(until, date) or isinstance(until, datetime)
        ):
            raise ValidationError(f"until must be a date, got {until!r}")

        self.weekdays: frozenset[weekday] = frozenset(
            _to_weekday(d) for d in (days or ())
        )
        self.occurrences: int | None = occurrences
        self.until: date | None = until

    def dates(self, start_date: date) -> list[date]:
        """Occurrence dates for a series anchored at start_date."""
        if not self.weekdays:
            return []

        dtstart = datetime.combine(start_date, time.min)
        if self.occurrences is not None:
            rule = rrule(
                DAILY,
                dtstart=dtstart,
                byweekday=sorted(self.weekdays, key=lambda w: w.weekday),
                count=self.occurrences,
            )
        else:
            assert self.until is not None
            # The anchor date is always examined, even when until precedes it
            last = max(self.until, start_date)
            rule = rrule(
                DAILY,
                dtstart=dtstart,
                byweekday=sorted(self.weekdays, key=lambda w: w.weekday),
                until=datetime.combine(last, time.min),
            )
        return [occurrence.date() for occurrence in rule]

    def generate_series(self, seed: Event) -> list[Event]:
        """Expand seed into one event per occurrence date.

        Every occurrence keeps the seed's time of day, day span, description,
        location, status and all-day flag. All of them share the seed's
        series id, or a freshly generated one if the seed has none.
        """
        series_id = seed.series_id or new_series_id()
        span = seed.end.date() - seed.start.date()

        events: list[Event] = []
        for day in self.dates(seed.start.date()):
            end_day = day + span
            events.append(
                replace(
                    seed,
                    start=seed.start.replace(
                        year=day.year, month=day.month, day=day.day
                    ),
                    end=seed.end.replace(
                        year=end_day.year, month=end_day.month, day=end_day.day
                    ),
                    series_id=series_id,
                )
            )
        return events

    def __repr__(self) -> str:
        days = ",".join(str(w) for w in sorted(self.weekdays, key=lambda w: w.weekday))
        if self.occurrences is not None:
            return f"RecurrenceRule(days=[{days}], occurrences={self.occurrences})"
        return f"RecurrenceRule(days=[{days}], until={self.until})"


__all__ = ["Day", "RecurrenceRule"]
