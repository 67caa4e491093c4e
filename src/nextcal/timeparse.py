from __future__ import annotations
from datetime import datetime
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def parse_utc_offset(token: str) -> Optional[int]:
    """Parse a ``+HHMM`` / ``-HHMM`` offset into signed minutes."""
    token = token.strip()
    if len(token) != 5:
        return None

    sign_char, hh, mm = token[0], token[1:3], token[3:5]
    if sign_char == "+":
        sign = 1
    elif sign_char == "-":
        sign = -1
    else:
        return None

    # str.isdigit() accepts things like superscripts; only plain ASCII digits count.
    if not (hh.isascii() and hh.isdigit() and mm.isascii() and mm.isdigit()):
        return None

    return sign * (int(hh) * 60 + int(mm))


def parse_datetime(token: str) -> Optional[datetime]:
    """Parse an exact ``YYYY-MM-DD HH:MM`` token into a naive local datetime.

    Surrounding whitespace is a deviation too; callers strip raw command output.
    """
    # strptime tolerates single-digit fields, so pin the shape first.
    if len(token) != 16 or token[4] != "-" or token[7] != "-" or token[10] != " " or token[13] != ":":
        return None
    digits = token[0:4] + token[5:7] + token[8:10] + token[11:13] + token[14:16]
    if not (digits.isascii() and digits.isdigit()):
        return None
    try:
        return datetime.strptime(token, TIMESTAMP_FORMAT)
    except ValueError:
        return None


def format_datetime(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)
