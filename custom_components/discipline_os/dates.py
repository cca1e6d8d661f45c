"""Calendar helpers.

Entries are keyed by local calendar day as ``YYYY-MM-DD``. Everything in the
core works on those strings; ``date`` objects only appear at the edges.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterator
from datetime import date, timedelta
from typing import Any

from homeassistant.util import dt as dt_util

_DAY_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def day_key(day_value: date) -> str:
    return f"{day_value.year:04d}-{day_value.month:02d}-{day_value.day:02d}"


def parse_day_key(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` key (raises ValueError otherwise)."""
    raw = str(value or "")
    if not _DAY_KEY_RE.match(raw):
        raise ValueError(f"Invalid day key: {value!r}")
    return date.fromisoformat(raw)


def is_day_key(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parse_day_key(value)
    except ValueError:
        return False
    return True


def shift_day(key: str, days: int) -> str:
    return day_key(parse_day_key(key) + timedelta(days=int(days)))


def iter_days(start: str, end: str) -> Iterator[str]:
    """Yield every day key from start to end, inclusive."""
    cursor = parse_day_key(start)
    last = parse_day_key(end)
    while cursor <= last:
        yield day_key(cursor)
        cursor += timedelta(days=1)


def start_of_week(key: str) -> str:
    d = parse_day_key(key)
    return day_key(d - timedelta(days=d.weekday()))


def week_days(key: str) -> list[str]:
    """Seven day keys, Monday first, for the week containing key."""
    monday = parse_day_key(start_of_week(key))
    return [day_key(monday + timedelta(days=i)) for i in range(7)]


def today_key() -> str:
    return day_key(dt_util.as_local(dt_util.utcnow()).date())


def month_days(today: date, month_offset: int) -> list[str]:
    """All day keys of the month ``month_offset`` months away from today's month."""
    index = today.year * 12 + (today.month - 1) + int(month_offset)
    year, month0 = divmod(index, 12)
    last = calendar.monthrange(year, month0 + 1)[1]
    return [day_key(date(year, month0 + 1, d)) for d in range(1, last + 1)]
