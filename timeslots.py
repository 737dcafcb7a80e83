"""
Time-of-day helpers.

Booking forms send times as "HH:MM" strings and a separate calendar date.
Everything here works on naive local wall-clock values.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Tuple

from policy import BookingPolicy

MINUTES_PER_DAY = 24 * 60


class InvalidTimeError(ValueError):
    pass


def parse_time_of_day(text: str) -> Tuple[int, int]:
    """
    Parse a strict 'HH:MM' value into (hour, minute).
    Raises InvalidTimeError for anything else.
    """
    parts = str(text).strip().split(":")
    if len(parts) != 2:
        raise InvalidTimeError(f"Invalid time format: {text!r}")
    try:
        hour = int(parts[0])
        minute = int(parts[1])
    except ValueError:
        raise InvalidTimeError(f"Invalid time format: {text!r}") from None
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise InvalidTimeError(f"Invalid time value: {text!r}")
    return hour, minute


def combine(time_of_day: str, day: date) -> datetime:
    hour, minute = parse_time_of_day(time_of_day)
    return datetime.combine(day, time(hour, minute))


def _lenient_int(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        return 0


def snap_to_slot(time_of_day: str, slot_minutes: int = 30) -> str:
    """
    Coerce a typed time onto the booking grid.

    Parsing is forgiving ("9" -> 09:00, "9:5" -> 09:00, "9:45" -> 09:30 on the
    half-hour grid) since this runs on every keystroke/blur of a time field.
    The minute component moves down to its slot boundary, so the result is
    always a fixed point.
    """
    if not time_of_day or not str(time_of_day).strip():
        return ""
    raw_hours, _, raw_minutes = str(time_of_day).partition(":")
    hours = min(max(_lenient_int(raw_hours), 0), 23)
    minutes = min(max(_lenient_int(raw_minutes or "0"), 0), 59)
    minutes -= minutes % slot_minutes
    return f"{hours:02d}:{minutes:02d}"


def add_minutes(time_of_day: str, minutes: int) -> str:
    """Raises InvalidTimeError when the result would fall on or after midnight."""
    hour, minute = parse_time_of_day(time_of_day)
    total = hour * 60 + minute + minutes
    if not 0 <= total < MINUTES_PER_DAY:
        raise InvalidTimeError(f"{time_of_day!r} + {minutes} min leaves the day")
    return f"{total // 60:02d}:{total % 60:02d}"


def suggest_end_time(start_time: str, policy: BookingPolicy) -> str:
    """
    Snapped start plus the policy's default duration.

    Bookings never cross midnight, so a late start gets the last grid boundary
    of the day instead. Returns '' for an empty start or when no boundary is
    left after the start.
    """
    start = snap_to_slot(start_time, policy.slot_minutes)
    if not start:
        return ""
    hour, minute = parse_time_of_day(start)
    start_total = hour * 60 + minute
    last_boundary = MINUTES_PER_DAY - policy.slot_minutes
    if start_total >= last_boundary:
        return ""
    duration = min(policy.default_duration_minutes, last_boundary - start_total)
    return add_minutes(start, duration)


def is_on_grid(moment: datetime, slot_minutes: int) -> bool:
    return moment.minute % slot_minutes == 0 and moment.second == 0 and moment.microsecond == 0


def format_time(moment: datetime) -> str:
    return moment.strftime("%H:%M")
