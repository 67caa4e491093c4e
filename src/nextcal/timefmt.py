from __future__ import annotations
from datetime import date, datetime, time, timedelta
from typing import Optional

from .models import Event

MONTHS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

MINUTES_PER_DAY = 24 * 60


def fmt_time(hour: int, minute: int, use_12h: bool) -> str:
    if not use_12h:
        return f"{hour:02d}:{minute:02d}"

    if hour == 0:
        hour_12, period = 12, "am"
    elif hour < 12:
        hour_12, period = hour, "am"
    elif hour == 12:
        hour_12, period = 12, "pm"
    else:
        hour_12, period = hour - 12, "pm"
    return f"{hour_12}:{minute:02d} {period}"


def fmt_datetime(instant: datetime, use_12h: bool) -> str:
    # e.g. "jan 17 10:00 am", or just "jan 17" at midnight
    label = f"{MONTHS[instant.month - 1]} {instant.day}"
    if instant.time() == time.min:
        return label
    return f"{label} {fmt_time(instant.hour, instant.minute, use_12h)}"


def fmt_day_header(day: date, today: date) -> str:
    if day == today:
        return "today"
    if day == today + timedelta(days=1):
        return "tomorrow"
    return f"{WEEKDAYS[day.weekday()]}, {MONTHS[day.month - 1]} {day.day}"


def _fmt_hours(minutes: int) -> str:
    whole_hours, remainder = divmod(minutes, 60)
    # Within 10 minutes of the half hour reads as ".5"
    if 20 <= remainder <= 40:
        return f"{whole_hours}.5 hrs"
    if remainder > 40:
        whole_hours += 1
    return "1 hr" if whole_hours == 1 else f"{whole_hours} hrs"


def fmt_relative_time(event_instant: datetime, now_instant: datetime, use_12h: bool) -> str:
    """Short label for when a timed event starts, as seen from ``now_instant``.

    Past events and events more than a day out get an absolute label.
    """
    # int() truncates toward zero, so 30 seconds ago still counts as "now"
    minutes = int((event_instant - now_instant).total_seconds() / 60)

    if minutes < 0 or minutes > MINUTES_PER_DAY:
        return fmt_datetime(event_instant, use_12h)

    clock = fmt_time(event_instant.hour, event_instant.minute, use_12h)
    if minutes == 0:
        return "now"
    if minutes <= 9:
        return f"in {minutes} min"
    if minutes <= 55:
        return f"in {((minutes + 2) // 5) * 5} min"
    if minutes <= 299:
        return f"{clock} ({_fmt_hours(minutes)})"
    if event_instant.date() != now_instant.date():
        return f"tmrw {clock}"
    return f"today {clock}"


def fmt_time_in_group(
    event: Event,
    now: datetime,
    is_today: bool,
    use_12h: bool,
    is_all_day: Optional[bool] = None,
) -> str:
    if is_all_day is None:
        is_all_day = event.is_all_day
    if is_all_day:
        return "all day"
    if is_today:
        return fmt_relative_time(event.start, now, use_12h)
    return fmt_time(event.start.hour, event.start.minute, use_12h)
