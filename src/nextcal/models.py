from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Union

NO_TITLE = "(no title)"

# Substrings of a location that mark an event as a video call.
VIDEO_CALL_MARKERS = ("zoom", "meet.google", "teams")


@dataclass(frozen=True)
class Event:
    summary: str
    start: datetime             # local, naive
    end: Optional[datetime] = None
    location: Optional[str] = None
    is_all_day: bool = False    # start was a bare date, normalized to midnight

    def is_video_call(self) -> bool:
        if not self.location:
            return False
        return any(marker in self.location for marker in VIDEO_CALL_MARKERS)

    def is_in_progress(self, now: datetime) -> bool:
        if self.end is None:
            return False
        return self.start <= now < self.end

    def is_active_on(self, day: date) -> bool:
        """Whether the event belongs under ``day`` in a day-grouped view.

        All-day spans treat their end date as exclusive. Timed events that run
        past midnight also show up on the following day(s).
        """
        start_day = self.start.date()
        if self.end is None:
            return day == start_day

        if self.is_all_day:
            end_day = self.end.date()
            if end_day <= start_day:
                return day == start_day
            return start_day <= day < end_day

        return start_day <= day and self.end > datetime.combine(day, time.min)


# Source instant shapes as they come out of a calendar file.

@dataclass(frozen=True)
class DateValue:
    value: date


@dataclass(frozen=True)
class LocalDateTimeValue:
    value: datetime                 # naive wall-clock time
    tzid: Optional[str] = None      # zone annotation, kept but not applied


@dataclass(frozen=True)
class UtcDateTimeValue:
    value: datetime                 # naive, in UTC


SourceInstant = Union[DateValue, LocalDateTimeValue, UtcDateTimeValue]
