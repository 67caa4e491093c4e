from __future__ import annotations

import subprocess
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .timeparse import parse_datetime, parse_utc_offset

DATE_COMMAND = ["date", "+%Y-%m-%d %H:%M %z"]


@dataclass(frozen=True)
class ClockReading:
    now: Optional[datetime]
    utc_offset_minutes: Optional[int]


def parse_clock_output(output: str) -> ClockReading:
    """Split ``"YYYY-MM-DD HH:MM +HHMM"`` into its parsed halves.

    Either half is None when it does not parse, so callers can keep their
    previous value for it.
    """
    output = output.strip()
    time_token, sep, offset_token = output.rpartition(" ")
    if not sep:
        return ClockReading(now=None, utc_offset_minutes=None)
    return ClockReading(
        now=parse_datetime(time_token),
        utc_offset_minutes=parse_utc_offset(offset_token),
    )


def read_local_clock(timeout: float = 5.0) -> ClockReading:
    """Ask the system for local wall-clock time and UTC offset."""
    proc = subprocess.run(DATE_COMMAND, capture_output=True, text=True, timeout=timeout, check=True)
    return parse_clock_output(proc.stdout)
