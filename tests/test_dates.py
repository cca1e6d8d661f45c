from __future__ import annotations

from datetime import date

import pytest

from custom_components.discipline_os.const import MONTH_OFFSET_LIMIT
from custom_components.discipline_os.dates import (
    day_key,
    is_day_key,
    iter_days,
    month_days,
    parse_day_key,
    shift_day,
    start_of_week,
    week_days,
)


def test_day_key_is_zero_padded_and_round_trips() -> None:
    d = date(2026, 3, 7)
    assert day_key(d) == "2026-03-07"
    assert parse_day_key(day_key(d)) == d
    assert day_key(parse_day_key("2026-12-31")) == "2026-12-31"


@pytest.mark.parametrize("raw", ["2026-3-7", "20260307", "2026-02-30", "", "2026-03-07T00:00", None])
def test_parse_day_key_rejects_non_canonical(raw) -> None:
    with pytest.raises(ValueError):
        parse_day_key(raw)
    assert not is_day_key(raw)


def test_shift_day_crosses_month_and_year() -> None:
    assert shift_day("2026-03-01", -1) == "2026-02-28"
    assert shift_day("2025-12-31", 1) == "2026-01-01"
    assert shift_day("2024-02-28", 1) == "2024-02-29"


def test_iter_days_inclusive() -> None:
    assert list(iter_days("2026-01-30", "2026-02-02")) == [
        "2026-01-30",
        "2026-01-31",
        "2026-02-01",
        "2026-02-02",
    ]
    assert list(iter_days("2026-01-02", "2026-01-01")) == []


def test_week_starts_monday() -> None:
    # 2026-02-19 is a Thursday.
    assert start_of_week("2026-02-19") == "2026-02-16"
    assert start_of_week("2026-02-16") == "2026-02-16"
    days = week_days("2026-02-22")
    assert days[0] == "2026-02-16"
    assert days[-1] == "2026-02-22"
    assert len(days) == 7


def test_month_days_with_offset() -> None:
    today = date(2026, 1, 15)
    assert month_days(today, 0)[0] == "2026-01-01"
    assert len(month_days(today, 0)) == 31
    feb = month_days(today, 1)
    assert feb[0] == "2026-02-01" and feb[-1] == "2026-02-28"
    assert month_days(today, -1)[0] == "2025-12-01"


def test_month_days_at_offset_limit() -> None:
    today = date(2026, 1, 15)
    assert month_days(today, MONTH_OFFSET_LIMIT)[0] == "2126-01-01"
    assert month_days(today, -MONTH_OFFSET_LIMIT)[0] == "1926-01-01"
