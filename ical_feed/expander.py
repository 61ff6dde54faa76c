"""Boundary around :mod:`icalendar` and :mod:`recurring_ical_events`.

The expander owns the parsed calendar. ``between`` returns the raw material the
converter turns into host events: definite single events and the concrete
instances of recurring series, each paired with the source entry whose
non-date properties describe it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from icalendar import Calendar
from icalendar.cal import Component
import recurring_ical_events

from .errors import FeedParseError

_RECURRENCE_PROPS = ("RRULE", "RDATE", "RECURRENCE-ID")

ENTRY_MARKER_PROP = "X-ICAL-FEED-ENTRY"


@dataclass
class Occurrence:
    """One concrete instance: decoded start/end plus its template entry."""

    start: date | datetime
    end: date | datetime | None
    item: Component


@dataclass
class ExpansionResult:
    events: list[Occurrence] = field(default_factory=list)
    occurrences: list[Occurrence] = field(default_factory=list)


def _uid(component: Component) -> str:
    return str(component.get("UID") or "").strip()


def _decoded(component: Component, key: str) -> Any:
    try:
        return component.decoded(key)
    except KeyError:
        return None


def _instance_end(component: Component, start: date | datetime) -> date | datetime | None:
    end = _decoded(component, "DTEND")
    if end is not None:
        return end
    duration = _decoded(component, "DURATION")
    if isinstance(duration, timedelta):
        return start + duration
    return None


class IcalExpander:
    """Parsed feed that can list the occurrences overlapping a window."""

    def __init__(self, ics: str | bytes, *, skip_invalid_dates: bool = False) -> None:
        try:
            self.calendar = Calendar.from_ical(ics)
            # Expanded copies carry the marker back to their source entry;
            # ``self.calendar`` stays untouched.
            self._tagged_calendar = Calendar.from_ical(ics)
        except Exception as exc:
            raise FeedParseError("ICS payload could not be parsed") from exc
        self.skip_invalid_dates = skip_invalid_dates
        self._entries: list[Component] = list(self.calendar.walk("VEVENT"))
        for index, tagged in enumerate(self._tagged_calendar.walk("VEVENT")):
            tagged.add(ENTRY_MARKER_PROP, str(index))
        self._recurring_uids: set[str] = set()
        for component in self._entries:
            uid = _uid(component)
            if uid and any(component.get(prop) is not None for prop in _RECURRENCE_PROPS):
                self._recurring_uids.add(uid)

    @property
    def timezone(self) -> ZoneInfo | None:
        """Zone named by the calendar's ``X-WR-TIMEZONE``, if it is a known one."""
        name = str(self.calendar.get("X-WR-TIMEZONE") or "").strip()
        if not name:
            return None
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            return None

    def is_recurring(self, entry: Component) -> bool:
        if any(entry.get(key) is not None for key in _RECURRENCE_PROPS):
            return True
        uid = _uid(entry)
        return bool(uid) and uid in self._recurring_uids

    def entry_for(self, component: Component) -> Component:
        """Source entry (series master, override or single event) of an expanded copy."""
        marker = component.get(ENTRY_MARKER_PROP)
        try:
            return self._entries[int(str(marker))]
        except (TypeError, ValueError, IndexError):
            raise FeedParseError("Expanded event lost its source entry") from None

    def between(self, start: date | datetime, end: date | datetime) -> ExpansionResult:
        """Occurrences overlapping ``[start, end]``; may over-return at the edges."""

        try:
            components = recurring_ical_events.of(
                self._tagged_calendar,
                skip_bad_series=self.skip_invalid_dates,
            ).between(start, end)
        except Exception as exc:
            raise FeedParseError("ICS recurrence expansion failed") from exc

        result = ExpansionResult()
        for component in components:
            if str(getattr(component, "name", "")).upper() != "VEVENT":
                continue
            instance_start = _decoded(component, "DTSTART")
            if instance_start is None:
                continue
            entry = self.entry_for(component)
            occurrence = Occurrence(
                start=instance_start,
                end=_instance_end(component, instance_start),
                item=entry,
            )
            if self.is_recurring(entry):
                result.occurrences.append(occurrence)
            else:
                result.events.append(occurrence)
        return result


__all__ = ["ENTRY_MARKER_PROP", "ExpansionResult", "IcalExpander", "Occurrence"]
