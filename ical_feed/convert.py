from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

from icalendar.cal import Component
from icalendar.prop import vBoolean, vCategory, vDDDLists, vRecur

from .constants import COMMON_PROPS
from .expander import IcalExpander, Occurrence
from .models import DateRange, EventInput


def _coerce_utc_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def padded_window(date_range: DateRange, *, padding_days: int) -> tuple[datetime, datetime]:
    """Widen the host's UTC range so feed-local wall clock times are not cut off."""
    padding = timedelta(days=max(0, int(padding_days)))
    return (
        _coerce_utc_datetime(date_range.start) - padding,
        _coerce_utc_datetime(date_range.end) + padding,
    )


def reconstruct_instant(value: date | datetime, *, zone: tzinfo) -> tuple[datetime, bool]:
    """Return ``(instant, all_day)`` for a decoded DTSTART/DTEND value.

    Zone-qualified values are already absolute. Floating values and all-day
    dates keep their wall clock and are moved into ``zone``, never converted.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value, False
        return value.replace(tzinfo=zone), False
    return datetime.combine(value, time.min, tzinfo=zone), True


def specifies_end(item: Component) -> bool:
    return item.get("DTEND") is not None or item.get("DURATION") is not None


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _property_text(component: Component, key: str) -> str | None:
    value = _first(component.get(key))
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def extract_event_url(item: Component) -> str:
    return _property_text(item, "URL") or ""


def _plain_value(value: Any) -> Any:
    if isinstance(value, list):
        return [_plain_value(entry) for entry in value]
    if isinstance(value, vRecur):
        return value.to_ical().decode("utf-8")
    if isinstance(value, vBoolean):
        return bool(value)
    if isinstance(value, str):
        return str(value)
    if isinstance(value, vDDDLists):
        return [entry.dt for entry in value.dts]
    if isinstance(value, vCategory):
        return [str(entry) for entry in value.cats]
    if hasattr(value, "dt"):
        return value.dt
    if hasattr(value, "td"):
        return value.td
    if hasattr(value, "latitude") and hasattr(value, "longitude"):
        return (value.latitude, value.longitude)
    if isinstance(value, (int, float)):
        return value
    return str(value)


def build_non_date_props(item: Component) -> dict[str, Any]:
    extended_props: dict[str, Any] = {
        "location": _property_text(item, "LOCATION"),
        "organizer": _property_text(item, "ORGANIZER"),
        "description": _property_text(item, "DESCRIPTION"),
    }
    for name, value in item.items():
        key = str(name).lower()
        if key in COMMON_PROPS:
            continue
        extended_props[key] = _plain_value(value)
    return {
        "id": _property_text(item, "UID"),
        "title": _property_text(item, "SUMMARY"),
        "url": extract_event_url(item),
        "extended_props": extended_props,
    }


def to_event_input(occurrence: Occurrence, *, zone: tzinfo) -> EventInput:
    start, all_day = reconstruct_instant(occurrence.start, zone=zone)
    end: datetime | None = None
    if specifies_end(occurrence.item) and occurrence.end is not None:
        end, _ = reconstruct_instant(occurrence.end, zone=zone)
    return EventInput(
        **build_non_date_props(occurrence.item),
        start=start,
        end=end,
        all_day=all_day,
    )


def expand_ical_events(
    expander: IcalExpander,
    date_range: DateRange,
    *,
    padding_days: int,
    default_zone: tzinfo,
) -> list[EventInput]:
    """Convert every entry overlapping the padded range, singles before recurrences."""

    range_start, range_end = padded_window(date_range, padding_days=padding_days)
    expansion = expander.between(range_start, range_end)
    zone = expander.timezone or default_zone
    expanded = [to_event_input(event, zone=zone) for event in expansion.events]
    expanded.extend(
        to_event_input(occurrence, zone=zone) for occurrence in expansion.occurrences
    )
    return expanded


__all__ = [
    "build_non_date_props",
    "expand_ical_events",
    "extract_event_url",
    "padded_window",
    "reconstruct_instant",
    "specifies_end",
    "to_event_input",
]
