"""Tests for EventCopier."""

import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from calseries import (
    Calendar,
    DuplicateEventError,
    Event,
    EventBuilder,
    EventCopier,
    EventNotFoundError,
    EventStatus,
    RecurrenceRule,
    ValidationError,
    copier,
)

NY = ZoneInfo("America/New_York")
LA = ZoneInfo("America/Los_Angeles")


def at(*args: int, tz=NY) -> datetime:
    return datetime(*args, tzinfo=tz)


@pytest.fixture
def work():
    return Calendar(NY, name="Work")


@pytest.fixture
def home():
    return Calendar(LA, name="Home")


@pytest.fixture
def review(work):
    event = Event(
        subject="Review",
        start=at(2025, 1, 6, 9),
        end=at(2025, 1, 6, 10, 30),
        description="Quarterly numbers",
        location="Room A",
        status=EventStatus.PUBLIC,
    )
    return work.create_event(event)


class TestCopyEvent:
    def test_converts_to_target_zone(self, work, home, review):
        """Copying NY -> LA keeps the instant and duration, re-expressed 3 hours earlier."""
        copied = EventCopier(work).copy_event("Review", review.start, home, at(2025, 1, 7, 9))

        assert copied.start == at(2025, 1, 7, 9)
        assert copied.start.tzinfo is LA
        assert (copied.start.hour, copied.end.hour, copied.end.minute) == (6, 7, 30)
        assert copied.duration == timedelta(hours=1, minutes=30)
        assert copied.description == "Quarterly numbers"
        assert copied.location == "Room A"
        assert copied.status is EventStatus.PUBLIC
        assert home.get_all_events() == [copied]
        assert work.get_all_events() == [review]

    def test_target_start_in_target_zone(self, work, home, review):
        copied = EventCopier(work).copy_event(
            "review", review.start, home, at(2025, 1, 7, 9, tz=LA)
        )

        assert copied.start == at(2025, 1, 7, 12)
        assert copied.start.hour == 9

    def test_keeps_series_and_all_day(self, work, home):
        seed = (
            EventBuilder("Offsite", at(2025, 1, 6), at(2025, 1, 7))
            .all_day()
            .series_id("s-1")
            .build()
        )
        work.create_event(seed)

        copied = copier(work).copy_event("Offsite", seed.start, home, at(2025, 2, 3, 8))

        assert copied.all_day is True
        assert copied.series_id == "s-1"

    def test_all_day_pinned_in_target_zone(self, work, home):
        """An all-day copy lands on 08:00-17:00 of its new date in the target zone."""
        seed = EventBuilder("Offsite", at(2025, 1, 6), at(2025, 1, 7)).all_day().build()
        work.create_event(seed)

        copied = EventCopier(work).copy_event("Offsite", seed.start, home, at(2025, 2, 3, 8))

        assert copied.all_day is True
        assert copied.start.tzinfo is LA
        assert (copied.start.hour, copied.end.hour) == (8, 17)
        assert copied.start.date() == date(2025, 2, 3)

    def test_missing_event(self, work, home, review):
        with pytest.raises(EventNotFoundError):
            EventCopier(work).copy_event("Review", at(2025, 1, 6, 10), home, at(2025, 1, 7, 9))

    def test_blank_name(self, work, home):
        with pytest.raises(ValidationError):
            EventCopier(work).copy_event(" ", at(2025, 1, 6, 9), home, at(2025, 1, 7, 9))

    def test_duplicate_in_target(self, work, home, review):
        c = EventCopier(work)
        c.copy_event("Review", review.start, home, at(2025, 1, 7, 9))

        with pytest.raises(DuplicateEventError):
            c.copy_event("Review", review.start, home, at(2025, 1, 7, 9))


class TestCopyEventsOnDate:
    def test_copies_every_event_on_date(self, work, home, review):
        lunch = work.create_event(
            Event(subject="Lunch", start=at(2025, 1, 6, 12), end=at(2025, 1, 6, 13))
        )
        work.create_event(
            Event(subject="Other day", start=at(2025, 1, 7, 12), end=at(2025, 1, 7, 13))
        )

        results = EventCopier(work).copy_events_on_date(date(2025, 1, 6), home, date(2025, 1, 10))

        assert all(r.success for r in results)
        assert [r.source for r in results] == [review, lunch]
        copied = home.get_all_events()
        assert [e.start for e in copied] == [at(2025, 1, 10, 9), at(2025, 1, 10, 12)]
        assert [e.start.hour for e in copied] == [6, 9]
        assert copied[0].duration == review.duration

    def test_series_id_kept(self, work, home):
        work.create_series(
            Event(subject="Standup", start=at(2025, 1, 6, 9), end=at(2025, 1, 6, 10)),
            RecurrenceRule(["monday"], occurrences=2),
        )

        results = EventCopier(work).copy_events_on_date(date(2025, 1, 6), home, date(2025, 1, 8))

        assert results[0].event.series_id == work.get_all_events()[0].series_id

    def test_failures_are_warnings(self, work, home, review, caplog):
        lunch = work.create_event(
            Event(subject="Lunch", start=at(2025, 1, 6, 12), end=at(2025, 1, 6, 13))
        )
        home.create_event(
            Event(subject="review", start=at(2025, 1, 10, 9), end=at(2025, 1, 10, 10, 30))
        )

        with caplog.at_level(logging.WARNING, logger="calseries"):
            results = EventCopier(work).copy_events_on_date(
                date(2025, 1, 6), home, date(2025, 1, 10)
            )

        assert [r.success for r in results] == [False, True]
        assert isinstance(results[0].error, DuplicateEventError)
        assert results[1].event.subject == lunch.subject
        assert "Failed to copy event 'Review'" in caplog.text
        assert len(home) == 2


class TestCopyEventsBetween:
    def test_end_before_start(self, work, home):
        with pytest.raises(ValidationError):
            EventCopier(work).copy_events_between(
                date(2025, 1, 10), date(2025, 1, 6), home, date(2025, 2, 1)
            )

    def test_series_get_independent_ids(self, work, home):
        """Each copied series gets one new id, distinct from the source and each other."""
        standups = work.create_series(
            Event(subject="Standup", start=at(2025, 1, 6, 9), end=at(2025, 1, 6, 10)),
            RecurrenceRule(["monday", "wednesday"], occurrences=4),
        )
        syncs = work.create_series(
            Event(subject="Sync", start=at(2025, 1, 7, 15), end=at(2025, 1, 7, 16)),
            RecurrenceRule(["tuesday"], occurrences=3),
        )
        lone = work.create_event(
            Event(subject="Dentist", start=at(2025, 1, 8, 8), end=at(2025, 1, 8, 9), series_id=None)
        )

        results = EventCopier(work).copy_events_between(
            date(2025, 1, 6), date(2025, 1, 12), home, date(2025, 2, 3)
        )

        # Standups Jan 6, 8; Sync Jan 7; Dentist Jan 8. Later occurrences are out of range.
        assert len(results) == 4
        assert all(r.success for r in results)
        assert results[0].source == lone

        copied = home.get_all_events()
        ids = {e.subject: e.series_id for e in copied}
        assert ids["Dentist"] is None
        assert ids["Standup"] is not None and ids["Sync"] is not None
        assert ids["Standup"] != ids["Sync"]
        assert ids["Standup"] != standups[0].series_id
        assert ids["Sync"] != syncs[0].series_id
        assert len({e.series_id for e in copied if e.subject == "Standup"}) == 1

    def test_day_offset_and_zone(self, work, home):
        work.create_series(
            Event(subject="Standup", start=at(2025, 1, 6, 9), end=at(2025, 1, 6, 10)),
            RecurrenceRule(["monday", "wednesday"], occurrences=2),
        )

        EventCopier(work).copy_events_between(
            date(2025, 1, 6), date(2025, 1, 8), home, date(2025, 2, 3)
        )

        copied = home.get_all_events()
        assert [e.start for e in copied] == [at(2025, 2, 3, 9), at(2025, 2, 5, 9)]
        assert all(e.start.tzinfo is LA and e.start.hour == 6 for e in copied)

    def test_copy_into_same_calendar_reports_duplicates(self, work, review, caplog):
        with caplog.at_level(logging.WARNING, logger="calseries"):
            results = EventCopier(work).copy_events_between(
                date(2025, 1, 6), date(2025, 1, 6), work, date(2025, 1, 6)
            )

        assert len(results) == 1
        assert not results[0].success
        assert results[0].event is None
        assert len(work) == 1
        assert "Failed to copy" in caplog.text


def test_source_required():
    with pytest.raises(ValidationError):
        EventCopier(None)  # type: ignore[arg-type]


def test_all_day_day_copies_pinned_in_target_zone(work, home):
    work.create_event(
        EventBuilder("Offsite", at(2025, 1, 6), at(2025, 1, 7)).all_day().build()
    )

    [result] = EventCopier(work).copy_events_on_date(date(2025, 1, 6), home, date(2025, 1, 9))

    assert result.success
    assert result.event.start == at(2025, 1, 9, 8, tz=LA)
    assert result.event.end == at(2025, 1, 9, 17, tz=LA)
