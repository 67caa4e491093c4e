from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
import yaml

from .events import DEFAULT_EVENT_LIMIT

DEFAULT_REFRESH_INTERVAL_SECS = 300.0
DEFAULT_FETCH_TIMEOUT_SECS = 10.0

@dataclass
class DisplayConfig:
    width: int
    max_rows: int
    group_by_day: bool
    days: int

@dataclass
class AppConfig:
    ics_url: str
    refresh_interval_secs: float
    use_12h_time: bool
    event_limit: int
    fetch_timeout_secs: float
    display: DisplayConfig

def _use_12h(value: Any) -> bool:
    # Only an explicit "24" switches to 24-hour clock.
    if value is None:
        return True
    return str(value).strip() != "24"

def load_config(path: str) -> AppConfig:
    p = Path(path)
    data: Dict[str, Any] = {}
    if p.exists():
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    display = data.get("display", {}) or {}

    return AppConfig(
        ics_url=str(data.get("ics_url", "") or ""),
        refresh_interval_secs=float(data.get("refresh_interval", DEFAULT_REFRESH_INTERVAL_SECS)),
        use_12h_time=_use_12h(data.get("time_format")),
        event_limit=int(data.get("event_limit", DEFAULT_EVENT_LIMIT)),
        fetch_timeout_secs=float(data.get("fetch_timeout", DEFAULT_FETCH_TIMEOUT_SECS)),
        display=DisplayConfig(
            width=int(display.get("width", 50)),
            max_rows=int(display.get("max_rows", 20)),
            group_by_day=bool(display.get("group_by_day", False)),
            days=int(display.get("days", 7)),
        ),
    )
