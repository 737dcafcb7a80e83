from __future__ import annotations

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from availability import RoomStatus, StatusKind, compute_status, compute_statuses, minutes_between
from models import Booking, Room
from policy import HALF_HOUR_POLICY, BookingPolicy

ROOM = Room(id="R1", name="3.10", type="Klasselokale")


def at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2025, 12, 25, hour, minute, second)


def booking(start: datetime, end: datetime) -> Booking:
    return Booking(id=uuid4(), room_id=ROOM.id, start=start, end=end)


def status(now, bookings, policy=HALF_HOUR_POLICY) -> RoomStatus:
    return compute_status(now, ROOM, bookings, policy)


def test_no_bookings_is_free():
    result = status(at(12), [])
    assert result == RoomStatus(StatusKind.FREE, "No upcoming bookings")
    assert result.color == "green"


def test_only_past_bookings_is_free():
    assert status(at(12), [booking(at(9), at(10))]).info == "No upcoming bookings"


def test_soon_free():
    result = status(at(13, 45), [booking(at(13), at(14))])
    assert result == RoomStatus(StatusKind.SOON_FREE, "Free in 15 min")
    assert result.color == "yellow"


def test_occupied():
    result = status(at(13, 10), [booking(at(13), at(14, 30))])
    assert result == RoomStatus(StatusKind.OCCUPIED, "Occupied until 14:30")
    assert result.color == "red"


def test_soon_free_threshold_is_inclusive():
    assert status(at(13, 40), [booking(at(13), at(14))]).kind is StatusKind.SOON_FREE
    assert status(at(13, 39), [booking(at(13), at(14))]).kind is StatusKind.OCCUPIED


def test_partial_minutes_round_up():
    # 14:00 - 13:39:30 is 20.5 minutes -> 21 -> still occupied
    assert status(at(13, 39, 30), [booking(at(13), at(14))]).kind is StatusKind.OCCUPIED
    assert status(at(13, 59, 30), [booking(at(13), at(14))]).info == "Free in 1 min"


def test_free_until_next_booking():
    result = status(at(12, 25), [booking(at(13), at(14))])
    assert result == RoomStatus(StatusKind.FREE, "Free for next 35 min (until 13:00)")


def test_booking_starting_now_is_occupied():
    assert status(at(13), [booking(at(13), at(15))]).kind is StatusKind.OCCUPIED


def test_booking_ending_now_hits_fallback():
    assert status(at(14), [booking(at(13), at(14))]) == RoomStatus(StatusKind.FREE, "No current bookings")


def test_back_to_back_boundary_is_occupied_by_next_booking():
    bookings = [booking(at(13), at(14)), booking(at(14), at(15))]
    assert status(at(14), bookings) == RoomStatus(StatusKind.OCCUPIED, "Occupied until 15:00")


def test_booking_ending_now_with_later_booking_is_free_until_it():
    bookings = [booking(at(13), at(14)), booking(at(14, 30), at(15))]
    assert status(at(14), bookings) == RoomStatus(StatusKind.FREE, "Free for next 30 min (until 14:30)")


def test_unsorted_input_uses_earliest_booking():
    later = booking(at(15), at(16))
    current = booking(at(13), at(14, 30))
    assert status(at(13, 10), [later, current]).info == "Occupied until 14:30"


def test_threshold_and_rounding_are_configurable():
    policy = BookingPolicy(soon_free_threshold_minutes=5, minute_rounding="floor")
    assert status(at(13, 45), [booking(at(13), at(14))], policy).kind is StatusKind.OCCUPIED
    assert status(at(13, 56, 30), [booking(at(13), at(14))], policy).info == "Free in 3 min"


@pytest.mark.parametrize("rounding, expected", [("ceil", 3), ("round", 2), ("floor", 2)])
def test_minutes_between(rounding, expected):
    assert minutes_between(at(13), at(13, 2, 20), rounding) == expected


def test_round_goes_half_up():
    assert minutes_between(at(13), at(13, 2, 30), "round") == 3
    assert minutes_between(at(13), at(13, 0, 30), "round") == 1
    assert status(at(13, 42, 30), [booking(at(13), at(14))], BookingPolicy(minute_rounding="round")).info == (
        "Free in 18 min"
    )


def test_minutes_between_never_negative():
    assert minutes_between(at(14), at(13)) == 0


def test_every_moment_of_the_day_gets_one_status():
    bookings = [booking(at(9), at(10)), booking(at(10), at(11, 30)), booking(at(14), at(16))]
    moment = at(0)
    while moment < at(23, 59):
        result = status(moment, bookings)
        assert result.kind in (StatusKind.FREE, StatusKind.OCCUPIED, StatusKind.SOON_FREE)
        assert result.info
        moment += timedelta(minutes=7)


def test_compute_statuses_covers_every_room():
    other = Room(id="R2", name="2.04")
    results = compute_statuses(at(13, 10), [ROOM, other], {ROOM.id: [booking(at(13), at(14, 30))]}, HALF_HOUR_POLICY)
    assert [(room.id, s.kind) for room, s in results] == [("R1", StatusKind.OCCUPIED), ("R2", StatusKind.FREE)]
