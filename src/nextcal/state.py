from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List
import json

from .models import Event
from .timeparse import format_datetime, parse_datetime

@dataclass
class State:
    events: List[Event] = field(default_factory=list)
    current_time: Optional[datetime] = None
    utc_offset_minutes: int = 0
    last_error: str = ""
    last_fetch_iso: str = ""    # local time of the last successful calendar fetch

def _event_to_dict(e: Event) -> Dict[str, Any]:
    return {
        "summary": e.summary,
        "start": e.start.isoformat(),
        "end": e.end.isoformat() if e.end else None,
        "location": e.location,
        "is_all_day": e.is_all_day,
    }

def _event_from_dict(data: Dict[str, Any]) -> Event:
    end = data.get("end")
    return Event(
        summary=str(data.get("summary", "")),
        start=datetime.fromisoformat(data["start"]),
        end=datetime.fromisoformat(end) if end else None,
        location=data.get("location"),
        is_all_day=bool(data.get("is_all_day", False)),
    )

def load_state(path: str) -> State:
    p = Path(path)
    if not p.exists():
        return State()
    data: Dict[str, Any] = json.loads(p.read_text(encoding="utf-8"))
    current_time = data.get("current_time")
    return State(
        events=[_event_from_dict(e) for e in data.get("events", [])],
        current_time=parse_datetime(current_time) if current_time else None,
        utc_offset_minutes=int(data.get("utc_offset_minutes", 0)),
        last_error=str(data.get("last_error", "")),
        last_fetch_iso=str(data.get("last_fetch_iso", "")),
    )

def save_state(path: str, state: State) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "events": [_event_to_dict(e) for e in state.events],
        "current_time": format_datetime(state.current_time) if state.current_time else None,
        "utc_offset_minutes": state.utc_offset_minutes,
        "last_error": state.last_error,
        "last_fetch_iso": state.last_fetch_iso,
    }
    p.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
