from datetime import datetime

from nextcal.models import Event
from nextcal.state import State, load_state, save_state


def test_missing_state_file_gives_empty_state(tmp_path):
    state = load_state(str(tmp_path / "state.json"))

    assert state == State()


def test_state_round_trips_events_and_clock(tmp_path):
    path = tmp_path / "nested" / "state.json"
    state = State(
        events=[
            Event(summary="Sync", start=datetime(2025, 1, 15, 9, 0), end=datetime(2025, 1, 15, 9, 30), location="zoom"),
            Event(summary="Holiday", start=datetime(2025, 1, 16), end=None, is_all_day=True),
        ],
        current_time=datetime(2025, 1, 15, 8, 45),
        utc_offset_minutes=-300,
        last_error="Fetch failed: 503",
        last_fetch_iso="2025-01-15T08:45:00",
    )

    save_state(str(path), state)
    loaded = load_state(str(path))

    assert loaded == state
    assert '"current_time": "2025-01-15 08:45"' in path.read_text(encoding="utf-8")
