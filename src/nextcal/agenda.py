from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .events import group_by_day
from .models import Event
from .timefmt import fmt_datetime, fmt_day_header, fmt_relative_time, fmt_time_in_group

VIDEO_ICON = "📹"
BULLET_ICON = "•"


@dataclass(frozen=True)
class AgendaRow:
    time_label: str
    summary: str
    is_video_call: bool = False
    in_progress: bool = False


@dataclass(frozen=True)
class DayGroup:
    header: str
    rows: List[AgendaRow]


def _row(event: Event, time_label: str, in_progress: bool) -> AgendaRow:
    return AgendaRow(
        time_label=time_label,
        summary=event.summary,
        is_video_call=event.is_video_call(),
        in_progress=in_progress,
    )


def build_rows(events: List[Event], now: Optional[datetime], use_12h: bool) -> List[AgendaRow]:
    rows: List[AgendaRow] = []
    for e in events:
        in_progress = now is not None and e.is_in_progress(now)
        if e.is_all_day:
            label = "all day"
        elif in_progress:
            label = "now"
        elif now is None:
            label = fmt_datetime(e.start, use_12h)
        else:
            label = fmt_relative_time(e.start, now, use_12h)
        rows.append(_row(e, label, in_progress))
    return rows


def build_day_groups(events: List[Event], now: datetime, use_12h: bool, days: int) -> List[DayGroup]:
    today = now.date()
    groups: List[DayGroup] = []
    for day, day_events in group_by_day(events, today, days):
        is_today = day == today
        rows = []
        for e in day_events:
            in_progress = is_today and e.is_in_progress(now)
            label = "now" if in_progress and not e.is_all_day else fmt_time_in_group(e, now, is_today, use_12h)
            rows.append(_row(e, label, in_progress))
        groups.append(DayGroup(header=fmt_day_header(day, today), rows=rows))
    return groups


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    if max_len < 3:
        return text[: max(max_len, 0)]
    return text[: max_len - 3] + "..."


def _format_row(row: AgendaRow, width: int) -> str:
    icon = VIDEO_ICON if row.is_video_call else BULLET_ICON
    summary = truncate(row.summary, max(width - len(row.time_label) - 3, 0))
    return f"{row.time_label} {icon} {summary}"


def render_lines(rows: List[AgendaRow], width: int, max_rows: int) -> List[str]:
    if not rows:
        return ["No upcoming events"]

    lines = [_format_row(row, width) for row in rows[:max_rows]]
    if len(rows) > max_rows:
        lines.append(f"  +{len(rows) - max_rows} more")
    return lines


def render_day_groups(groups: List[DayGroup], width: int, max_rows: int) -> List[str]:
    if not groups:
        return ["No upcoming events"]

    lines: List[str] = []
    shown = 0
    total = sum(len(g.rows) for g in groups)
    for group in groups:
        if shown >= max_rows:
            break
        lines.append(group.header)
        for row in group.rows[: max_rows - shown]:
            lines.append("  " + _format_row(row, width - 2))
            shown += 1
    if total > shown:
        lines.append(f"  +{total - shown} more")
    return lines
