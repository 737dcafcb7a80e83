"""
Booking validation.

Decides whether a proposed booking (new or edited) may be stored. Rules are
checked in a fixed order and the first violated one is reported, so the same
input always yields the same reason.

    1. MissingDate        6. EndBeforeStart
    2. MissingStartTime   7. OffGrid
    3. MissingEndTime     8. DurationExceeded
    4. MissingRoom        9. InPast
    5. InvalidTime       10. RoomConflict

Rule violations are returned, never raised. Only caller mistakes (no booking
list, wrong policy type) raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterable, Optional, Union

from overlap import TimeRange, has_conflict
from policy import BookingPolicy
from timeslots import InvalidTimeError, combine, is_on_grid


class RejectionReason(str, Enum):
    MISSING_DATE = "MissingDate"
    MISSING_START_TIME = "MissingStartTime"
    MISSING_END_TIME = "MissingEndTime"
    MISSING_ROOM = "MissingRoom"
    INVALID_TIME = "InvalidTime"
    END_BEFORE_START = "EndBeforeStart"
    OFF_GRID = "OffGrid"
    DURATION_EXCEEDED = "DurationExceeded"
    IN_PAST = "InPast"
    ROOM_CONFLICT = "RoomConflict"


@dataclass(frozen=True)
class BookingDraft:
    """Normalized booking that passed validation; `booking_id` is set for edits."""
    room_id: str
    start: datetime
    end: datetime
    booking_id: Optional[Any] = None


@dataclass(frozen=True)
class Accepted:
    booking: BookingDraft

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason

    @property
    def accepted(self) -> bool:
        return False


ValidationResult = Union[Accepted, Rejected]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check_required_fields(
    room_id: Optional[str],
    day: Optional[date],
    start_time: Optional[str],
    end_time: Optional[str],
) -> Optional[RejectionReason]:
    """First missing field in rule order, or None when all four are present."""
    if day is None:
        return RejectionReason.MISSING_DATE
    if _blank(start_time):
        return RejectionReason.MISSING_START_TIME
    if _blank(end_time):
        return RejectionReason.MISSING_END_TIME
    if _blank(room_id):
        return RejectionReason.MISSING_ROOM
    return None


def validate_booking(
    room_id: Optional[str],
    day: Optional[date],
    start_time: Optional[str],
    end_time: Optional[str],
    existing: Iterable[Any],
    now: datetime,
    policy: BookingPolicy,
    exclude_id: Optional[Any] = None,
) -> ValidationResult:
    if existing is None:
        raise TypeError("existing bookings must be a list (use [] for a room without bookings)")
    if not isinstance(policy, BookingPolicy):
        raise TypeError(f"policy must be a BookingPolicy, got {type(policy).__name__}")

    missing = check_required_fields(room_id, day, start_time, end_time)
    if missing is not None:
        return Rejected(missing)
    if isinstance(day, datetime):
        day = day.date()

    try:
        start = combine(start_time, day)
        end = combine(end_time, day)
    except InvalidTimeError:
        return Rejected(RejectionReason.INVALID_TIME)

    if end <= start:
        return Rejected(RejectionReason.END_BEFORE_START)

    if not (is_on_grid(start, policy.slot_minutes) and is_on_grid(end, policy.slot_minutes)):
        return Rejected(RejectionReason.OFF_GRID)

    if end - start > timedelta(minutes=policy.max_duration_minutes):
        return Rejected(RejectionReason.DURATION_EXCEEDED)

    # Same-day check uses calendar equality, not a rolling 24h window.
    today = now.date()
    if day < today:
        return Rejected(RejectionReason.IN_PAST)
    if day == today and start < now and not policy.allow_past_booking_today:
        return Rejected(RejectionReason.IN_PAST)

    if has_conflict(TimeRange(start, end), existing, exclude_id):
        return Rejected(RejectionReason.ROOM_CONFLICT)

    return Accepted(BookingDraft(room_id=room_id, start=start, end=end, booking_id=exclude_id))
