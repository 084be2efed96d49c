"""Registry of named calendars with one active selection."""

import logging
from collections.abc import Callable
from datetime import tzinfo

from calseries.calendar import Calendar
from calseries.errors import (
    CalendarNotFoundError,
    DuplicateCalendarError,
    InvalidTimezoneError,
    NoActiveCalendarError,
    ValidationError,
)
from calseries.storage import EventStorage, SortedEventStorage
from calseries.util import resolve_zone

logger = logging.getLogger(__name__)


class CalendarManager:
    """Owns calendars by unique (case-sensitive) name and tracks the active one.

    The first calendar created becomes active automatically.
    """

    def __init__(
        self, storage_factory: Callable[[], EventStorage] = SortedEventStorage
    ) -> None:
        """
        Args:
            storage_factory: Called once per new calendar to build its store
        """
        self._storage_factory = storage_factory
        self._calendars: dict[str, Calendar] = {}
        self._active: Calendar | None = None

    def __contains__(self, name: object) -> bool:
        return name in self._calendars

    def __len__(self) -> int:
        return len(self._calendars)

    def create_calendar(self, name: str, zone: tzinfo | str | None) -> Calendar:
        """Create and register a calendar.

        Raises:
            ValidationError: If name is blank or zone is None
            InvalidTimezoneError: If zone is not a known IANA id
            DuplicateCalendarError: If name is already registered
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Calendar name cannot be None or blank.")
        if zone is None:
            raise ValidationError("Timezone cannot be None.")
        if name in self._calendars:
            raise DuplicateCalendarError(f"Calendar with name '{name}' already exists.")

        calendar = Calendar(resolve_zone(zone), storage=self._storage_factory(), name=name)
        self._calendars[name] = calendar
        if self._active is None:
            self._active = calendar
        logger.debug("created %s", calendar)
        return calendar

    def edit_calendar(self, name: str, property: str, value: str) -> Calendar:
        """Rename a calendar or change its timezone.

        Args:
            name: Calendar to edit
            property: "name" or "timezone" (case-insensitive)
            value: New name or IANA timezone id

        Raises:
            CalendarNotFoundError: If no calendar has this name
            ValidationError: If property is unknown or the new name is blank
            DuplicateCalendarError: If the new name is taken
            InvalidTimezoneError: If value is not a known IANA id
        """
        calendar = self.get_calendar(name)
        field = property.strip().lower() if isinstance(property, str) else ""

        if field == "name":
            if not isinstance(value, str) or not value.strip():
                raise ValidationError("New name cannot be None or blank.")
            if value in self._calendars:
                raise DuplicateCalendarError(
                    f"A calendar with the name '{value}' already exists."
                )
            # Rebuild to keep creation order for list_calendars()
            self._calendars = {
                (value if k == name else k): v for k, v in self._calendars.items()
            }
            calendar.name = value
            logger.debug("renamed calendar %r to %r", name, value)
        elif field == "timezone":
            if value is None or (isinstance(value, str) and not value.strip()):
                raise InvalidTimezoneError(f"Invalid timezone: {value!r}")
            calendar.zone = value
            logger.debug("calendar %r now uses %s", name, calendar.zone)
        else:
            raise ValidationError(
                f"Unsupported property: {property!r}\nValid properties: name, timezone"
            )
        return calendar

    def use_calendar(self, name: str) -> Calendar:
        self._active = self.get_calendar(name)
        return self._active

    def get_calendar(self, name: str) -> Calendar:
        try:
            return self._calendars[name]
        except KeyError:
            raise CalendarNotFoundError(f"Calendar '{name}' not found.") from None

    def get_active_calendar(self) -> Calendar:
        if self._active is None:
            raise NoActiveCalendarError(
                "No active calendar selected.\n"
                "Create one first: manager.create_calendar('Work', 'America/New_York')"
            )
        return self._active

    @property
    def active_name(self) -> str | None:
        return self._active.name if self._active is not None else None

    def list_calendars(self) -> list[str]:
        """Calendar names in creation order."""
        return list(self._calendars)


__all__ = ["CalendarManager"]
