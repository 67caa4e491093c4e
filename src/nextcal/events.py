from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from .models import Event

DEFAULT_EVENT_LIMIT = 20


def filter_future(
    events: Iterable[Event],
    now: Optional[datetime] = None,
    limit: int = DEFAULT_EVENT_LIMIT,
) -> List[Event]:
    """Sort by start, drop events that are over, and keep at most ``limit``.

    Events that started before ``now`` but have not ended yet are kept. With
    no ``now`` nothing is dropped.
    """
    upcoming = sorted(events, key=lambda e: e.start)
    if now is not None:
        upcoming = [
            e for e in upcoming
            if e.start >= now or (e.end is not None and e.end > now)
        ]
    return upcoming[:max(limit, 0)]


def group_by_day(events: Iterable[Event], today: date, days: int) -> List[Tuple[date, List[Event]]]:
    events = list(events)
    groups: List[Tuple[date, List[Event]]] = []
    for offset in range(days):
        day = today + timedelta(days=offset)
        active = [e for e in events if e.is_active_on(day)]
        if active:
            groups.append((day, active))
    return groups
