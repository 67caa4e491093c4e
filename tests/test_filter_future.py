from datetime import date, datetime

from nextcal.events import filter_future, group_by_day
from nextcal.models import Event


def _event(title: str, start: datetime, end: datetime | None = None, all_day: bool = False) -> Event:
    return Event(summary=title, start=start, end=end, is_all_day=all_day)


def _at(hour: int, minute: int = 0, day: int = 15) -> datetime:
    return datetime(2025, 1, day, hour, minute)


def test_filter_keeps_in_progress_and_future_events():
    in_progress = _event("In progress", _at(10), _at(11))
    ended = _event("Ended", _at(8), _at(9))
    future = _event("Future", _at(14), _at(15))
    no_end = _event("No end", _at(8))

    result = filter_future([future, ended, no_end, in_progress], now=_at(10, 30), limit=20)

    assert result == [in_progress, future]


def test_filter_without_now_only_sorts_and_truncates():
    late = _event("Late", _at(14))
    early = _event("Early", _at(8), _at(9))
    middle = _event("Middle", _at(10))

    assert filter_future([late, early, middle], now=None, limit=2) == [early, middle]


def test_filter_keeps_event_starting_exactly_now():
    starting = _event("Starting", _at(10, 30))

    assert filter_future([starting], now=_at(10, 30), limit=5) == [starting]


def test_filter_sort_is_stable_for_equal_starts():
    first = _event("First", _at(9))
    second = _event("Second", _at(9))

    assert filter_future([first, second], limit=5) == [first, second]
    assert filter_future([second, first], limit=5) == [second, first]


def test_filter_truncates_after_filtering():
    ended = [_event(f"Ended {i}", _at(7, i), _at(8, i)) for i in range(3)]
    upcoming = [_event(f"Upcoming {i}", _at(12, i)) for i in range(3)]

    result = filter_future(ended + upcoming, now=_at(10), limit=2)

    assert [e.summary for e in result] == ["Upcoming 0", "Upcoming 1"]


def test_filter_empty_input():
    assert filter_future([], now=_at(10), limit=5) == []


def test_filter_returns_new_list():
    events = [_event("One", _at(12))]

    result = filter_future(events, now=_at(10), limit=5)

    assert result == events
    assert result is not events


def test_group_by_day_places_spanning_events_on_each_day():
    offsite = _event("Offsite", datetime(2025, 1, 15), datetime(2025, 1, 17), all_day=True)
    overnight = _event("Deploy", _at(23), _at(1, day=16))
    lunch = _event("Lunch", _at(12, day=16), _at(13, day=16))

    groups = group_by_day([offsite, overnight, lunch], today=date(2025, 1, 15), days=3)

    assert [(d, [e.summary for e in es]) for d, es in groups] == [
        (date(2025, 1, 15), ["Offsite", "Deploy"]),
        (date(2025, 1, 16), ["Offsite", "Deploy", "Lunch"]),
    ]


def test_group_by_day_skips_empty_days():
    later = _event("Later", _at(9, day=18))

    groups = group_by_day([later], today=date(2025, 1, 15), days=7)

    assert groups == [(date(2025, 1, 18), [later])]
