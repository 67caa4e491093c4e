from __future__ import annotations

import logging
import os
import subprocess
from datetime import datetime, timedelta
from typing import List, Optional

from dotenv import load_dotenv

from .agenda import build_day_groups, build_rows, render_day_groups, render_lines, truncate
from .calendar_ics import CalendarParseError, parse_ics
from .clock import ClockReading, read_local_clock
from .config import AppConfig, load_config
from .events import filter_future
from .fetch import CalendarFetchError, CalendarFetcher, install_redaction_filter, redact, save_debug_copy
from .state import State, load_state, save_state
from .timefmt import fmt_time

CONFIG_PATH_DEFAULT = "~/.config/nextcal/config.yaml"
STATE_PATH_DEFAULT = "~/.cache/nextcal/state.json"
ICS_URL_ENV = "NEXTCAL_ICS_URL"

logger = logging.getLogger(__name__)


def _should_refresh(state: State, now: datetime | None, interval: timedelta) -> bool:
    if not state.last_fetch_iso or now is None:
        return True
    try:
        last_fetch = datetime.fromisoformat(state.last_fetch_iso)
    except ValueError:
        return True
    # A clock that went backwards also counts as stale.
    return now < last_fetch or (now - last_fetch) >= interval


def _apply_clock(state: State) -> None:
    try:
        reading = read_local_clock()
    except (OSError, subprocess.SubprocessError) as e:
        print(f"Failed to get time: {e}")
        reading = ClockReading(now=None, utc_offset_minutes=None)

    # Unparsable halves keep whatever the previous run saw.
    if reading.now is not None:
        state.current_time = reading.now
    if reading.utc_offset_minutes is not None:
        state.utc_offset_minutes = reading.utc_offset_minutes
    logger.debug("Current time: %s, UTC offset: %d min", state.current_time, state.utc_offset_minutes)


def _refresh_calendar(cfg: AppConfig, ics_url: str, state: State, save_ics_dir: Optional[str] = None) -> None:
    try:
        with CalendarFetcher(timeout=cfg.fetch_timeout_secs) as fetcher:
            data = fetcher.fetch(ics_url)
        if save_ics_dir:
            try:
                save_debug_copy(data, os.path.expanduser(save_ics_dir), state.current_time)
            except OSError as e:
                print(f"Could not save ICS copy: {e}")
        events = parse_ics(data, state.utc_offset_minutes)
    except (CalendarFetchError, CalendarParseError) as e:
        print(f"Calendar refresh failed; keeping {len(state.events)} cached events. Error: {e}")
        state.last_error = str(e)
        return

    state.events = filter_future(events, state.current_time, cfg.event_limit)
    state.last_error = ""
    if state.current_time is not None:
        state.last_fetch_iso = state.current_time.isoformat()
    print(f"Fetched {len(events)} events; keeping {len(state.events)} upcoming")


def render_agenda(cfg: AppConfig, state: State, ics_url: str) -> List[str]:
    width = cfg.display.width
    if not ics_url:
        return [
            "⚠ No ICS URL configured",
            "",
            "Add to your config:",
            '  ics_url: "https://..."',
        ]

    header = "📅 Calendar"
    now = state.current_time
    if now is not None:
        header += " " + fmt_time(now.hour, now.minute, cfg.use_12h_time)
    lines = [header, "─" * width]

    if state.last_error:
        lines.append(truncate(state.last_error, width))

    if cfg.display.group_by_day and now is not None:
        groups = build_day_groups(state.events, now, cfg.use_12h_time, cfg.display.days)
        lines.extend(render_day_groups(groups, width, cfg.display.max_rows))
    else:
        rows = build_rows(state.events, now, cfg.use_12h_time)
        lines.extend(render_lines(rows, width, cfg.display.max_rows))
    return lines


def run_once(
    config_path: str = CONFIG_PATH_DEFAULT,
    state_path: str = STATE_PATH_DEFAULT,
    force: bool = False,
    save_ics_dir: Optional[str] = None,
) -> List[str]:
    load_dotenv()
    cfg = load_config(os.path.expanduser(config_path))
    state_path = os.path.expanduser(state_path)
    ics_url = os.environ.get(ICS_URL_ENV, "") or cfg.ics_url
    install_redaction_filter(ics_url)
    logger.debug(
        "run_once() ics_url=%s, refresh_interval=%ss", redact(ics_url), cfg.refresh_interval_secs
    )

    state = load_state(state_path)
    _apply_clock(state)

    if ics_url and (force or _should_refresh(state, state.current_time, timedelta(seconds=cfg.refresh_interval_secs))):
        _refresh_calendar(cfg, ics_url, state, save_ics_dir)
    else:
        # Cached events still age out between fetches.
        state.events = filter_future(state.events, state.current_time, cfg.event_limit)

    lines = render_agenda(cfg, state, ics_url)
    for line in lines:
        print(line)

    save_state(state_path, state)
    return lines


def main():
    import argparse

    ap = argparse.ArgumentParser(description="Show upcoming calendar events with relative times.")
    ap.add_argument("--config", default=CONFIG_PATH_DEFAULT)
    ap.add_argument("--state", default=STATE_PATH_DEFAULT)
    ap.add_argument("--force", action="store_true", help="refetch the calendar even if the cache is fresh")
    ap.add_argument("--save-ics", metavar="DIR", help="keep a timestamped copy of each fetched calendar in DIR")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="[nextcal] %(levelname)s %(name)s: %(message)s")

    run_once(config_path=args.config, state_path=args.state, force=args.force, save_ics_dir=args.save_ics)


if __name__ == "__main__":
    main()
