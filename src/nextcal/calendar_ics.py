from __future__ import annotations
from datetime import date, datetime, time, timedelta, timezone
import logging
from typing import List, Optional

from icalendar import Calendar

from .models import (
    NO_TITLE,
    DateValue,
    Event,
    LocalDateTimeValue,
    SourceInstant,
    UtcDateTimeValue,
)

logger = logging.getLogger(__name__)


class CalendarParseError(ValueError):
    """The calendar document as a whole could not be parsed."""


def _first(prop):
    # Repeated properties come back as a list.
    if isinstance(prop, list):
        return prop[0] if prop else None
    return prop


def _decoded(prop):
    """The parsed value of a date/time property, or None if it did not parse."""
    prop = _first(prop)
    if prop is None:
        return None
    try:
        return prop.dt
    except Exception:
        # icalendar 7 keeps unparsable values and raises on access;
        # older releases drop the property instead.
        return None


def _source_instant(prop) -> Optional[SourceInstant]:
    prop = _first(prop)
    if prop is None:
        return None
    value = _decoded(prop)

    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        params = getattr(prop, "params", None) or {}
        tzid = params.get("TZID")
        if tzid:
            return LocalDateTimeValue(value=value.replace(tzinfo=None), tzid=str(tzid))
        if value.tzinfo is not None:
            return UtcDateTimeValue(value=value.astimezone(timezone.utc).replace(tzinfo=None))
        return LocalDateTimeValue(value=value)
    if isinstance(value, date):
        return DateValue(value=value)
    return None


def to_local(instant: SourceInstant, utc_offset_minutes: int) -> datetime:
    if isinstance(instant, DateValue):
        return datetime.combine(instant.value, time.min)
    if isinstance(instant, UtcDateTimeValue):
        return instant.value + timedelta(minutes=utc_offset_minutes)
    # Floating and zone-annotated values are both taken as wall-clock time.
    return instant.value


def _text(prop) -> Optional[str]:
    prop = _first(prop)
    if prop is None:
        return None
    text = str(prop)
    return text or None


def _event_from_component(component, utc_offset_minutes: int) -> Optional[Event]:
    start_instant = _source_instant(component.get("DTSTART"))
    if start_instant is None:
        return None
    start = to_local(start_instant, utc_offset_minutes)

    end: Optional[datetime] = None
    end_instant = _source_instant(component.get("DTEND"))
    if end_instant is not None:
        end = to_local(end_instant, utc_offset_minutes)
    else:
        duration = _decoded(component.get("DURATION"))
        if isinstance(duration, timedelta):
            end = start + duration

    return Event(
        summary=_text(component.get("SUMMARY")) or NO_TITLE,
        start=start,
        end=end,
        location=_text(component.get("LOCATION")),
        is_all_day=isinstance(start_instant, DateValue),
    )


def parse_ics(data: bytes, utc_offset_minutes: int = 0) -> List[Event]:
    """Decode raw calendar bytes into events in local time.

    UTC instants are shifted by ``utc_offset_minutes``. Events with no usable
    DTSTART are dropped; a document that is not a calendar at all raises
    CalendarParseError.
    """
    content = data.decode("utf-8", errors="replace")

    try:
        calendar = Calendar.from_ical(content)
    except ValueError as e:
        raise CalendarParseError(f"Parse error: {e}") from e

    if getattr(calendar, "name", None) != "VCALENDAR":
        raise CalendarParseError("Parse error: expected a VCALENDAR object")

    events: List[Event] = []
    for component in calendar.walk("VEVENT"):
        event = _event_from_component(component, utc_offset_minutes)
        if event is None:
            logger.debug("Skipping event without a start: %s", component.get("UID", "(no uid)"))
            continue
        events.append(event)

    logger.debug("Decoded %d events (utc offset %+d min)", len(events), utc_offset_minutes)
    return events
