"""Access log line formatting.

One line per finished request, in a fixed common-log style::

    127.0.0.1 - [19/Oct/2026:14:03:07 +0200] "GET /hello?x=1 HTTP/1.1" 200 12
"""

import logging
from datetime import datetime

access_logger = logging.getLogger("wren.access")

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_offset(now: datetime) -> str:
    """Format the UTC offset of *now* as ``+HHMM`` (minute precision)."""
    offset = now.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    sign = "-" if minutes < 0 else "+"
    minutes = abs(minutes)
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def format_timestamp(now: datetime) -> str:
    """``DD/Mon/YYYY:HH:MM:SS +HHMM``, locale independent."""
    return (
        f"{now.day:02d}/{MONTHS[now.month - 1]}/{now.year:04d}:"
        f"{now.hour:02d}:{now.minute:02d}:{now.second:02d} {format_offset(now)}"
    )


def format_access_line(
    client: str,
    method: str,
    target: str,
    http_version: str,
    status: int,
    length: int,
    now: datetime | None = None,
) -> str:
    """Build one access log line. *now* defaults to local time."""
    stamp = format_timestamp(now or datetime.now().astimezone())
    return f'{client} - [{stamp}] "{method} {target} HTTP/{http_version}" {status} {length}'
