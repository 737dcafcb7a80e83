from __future__ import annotations

from datetime import date, datetime

import pytest

from policy import HALF_HOUR_POLICY, HOURLY_POLICY
from timeslots import (
    InvalidTimeError,
    add_minutes,
    combine,
    format_time,
    is_on_grid,
    parse_time_of_day,
    snap_to_slot,
    suggest_end_time,
)
from validator import validate_booking


def test_combine_puts_time_on_date():
    assert combine("13:30", date(2025, 12, 25)) == datetime(2025, 12, 25, 13, 30, 0, 0)


@pytest.mark.parametrize("value", ["", "13", "ab:cd", "13:xx", "24:00", "12:60", "1:2:3", "-1:00"])
def test_parse_time_of_day_rejects_garbage(value):
    with pytest.raises(InvalidTimeError):
        parse_time_of_day(value)


def test_invalid_time_is_a_value_error():
    with pytest.raises(ValueError):
        combine("nope", date(2025, 1, 1))


@pytest.mark.parametrize(
    "typed, expected",
    [
        ("09:00", "09:00"),
        ("09:29", "09:00"),
        ("09:30", "09:30"),
        ("09:59", "09:30"),
        ("9:5", "09:00"),
        ("9", "09:00"),
        ("", ""),
        ("x:45", "00:30"),
    ],
)
def test_snap_to_half_hour_grid(typed, expected):
    assert snap_to_slot(typed, 30) == expected


def test_snap_to_hour_grid():
    assert snap_to_slot("09:45", 60) == "09:00"
    assert snap_to_slot("09:00", 60) == "09:00"


@pytest.mark.parametrize("grid", [30, 60])
def test_snap_is_idempotent(grid):
    for hour in range(24):
        for minute in range(60):
            once = snap_to_slot(f"{hour}:{minute}", grid)
            assert snap_to_slot(once, grid) == once


def test_suggest_end_time_uses_default_duration():
    assert suggest_end_time("9:40", HOURLY_POLICY) == "10:00"
    assert suggest_end_time("9:40", HALF_HOUR_POLICY) == "10:30"
    assert suggest_end_time("", HOURLY_POLICY) == ""


def test_add_minutes_stays_within_the_day():
    assert add_minutes("10:30", 90) == "12:00"
    assert add_minutes("22:30", 89) == "23:59"
    with pytest.raises(InvalidTimeError):
        add_minutes("23:00", 60)


def test_late_starts_get_last_boundary_or_nothing():
    assert suggest_end_time("22:45", HOURLY_POLICY) == "23:00"
    assert suggest_end_time("23:10", HOURLY_POLICY) == ""
    assert suggest_end_time("22:40", HALF_HOUR_POLICY) == "23:30"
    assert suggest_end_time("23:40", HALF_HOUR_POLICY) == ""


@pytest.mark.parametrize("policy", [HALF_HOUR_POLICY, HOURLY_POLICY])
def test_every_suggested_end_time_is_bookable(policy):
    day = date(2025, 12, 25)
    now = datetime(2025, 12, 25, 0, 0)
    for hour in range(24):
        for minute in range(0, 60, 5):
            typed = f"{hour}:{minute:02d}"
            end = suggest_end_time(typed, policy)
            if not end:
                continue
            start = snap_to_slot(typed, policy.slot_minutes)
            result = validate_booking("R1", day, start, end, [], now, policy)
            assert result.accepted, (typed, start, end, result)


def test_is_on_grid():
    assert is_on_grid(datetime(2025, 1, 1, 9, 30), 30)
    assert not is_on_grid(datetime(2025, 1, 1, 9, 30), 60)
    assert not is_on_grid(datetime(2025, 1, 1, 9, 0, 5), 30)


def test_format_time():
    assert format_time(datetime(2025, 1, 1, 7, 5)) == "07:05"
