"""
Live room status for room cards.

Status is a pure function of (now, room, bookings) and is recomputed on every
read; nothing here is cached or stored.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Mapping, Tuple

from models import Room
from policy import BookingPolicy
from timeslots import format_time


class StatusKind(str, Enum):
    FREE = "Free"
    OCCUPIED = "Occupied"
    SOON_FREE = "SoonFree"


STATUS_COLORS = {
    StatusKind.FREE: "green",
    StatusKind.OCCUPIED: "red",
    StatusKind.SOON_FREE: "yellow",
}

_ROUNDING = {
    "ceil": math.ceil,
    "round": lambda x: math.floor(x + 0.5),
    "floor": math.floor,
}


@dataclass(frozen=True)
class RoomStatus:
    kind: StatusKind
    info: str

    @property
    def color(self) -> str:
        return STATUS_COLORS[self.kind]


def minutes_between(earlier: datetime, later: datetime, rounding: str = "ceil") -> int:
    seconds = (later - earlier).total_seconds()
    return max(0, int(_ROUNDING[rounding](seconds / 60)))


def compute_status(now: datetime, room: Room, bookings: Iterable[Any], policy: BookingPolicy) -> RoomStatus:
    upcoming = sorted((b for b in bookings if b.end >= now), key=lambda b: b.start)
    if not upcoming:
        return RoomStatus(StatusKind.FREE, "No upcoming bookings")

    # A booking ending exactly now is over (half-open), so it never decides the status.
    live = [b for b in upcoming if b.end > now]
    if not live:
        return RoomStatus(StatusKind.FREE, "No current bookings")
    nxt = live[0]

    if nxt.start <= now < nxt.end:
        minutes_until_end = minutes_between(now, nxt.end, policy.minute_rounding)
        if minutes_until_end <= policy.soon_free_threshold_minutes:
            return RoomStatus(StatusKind.SOON_FREE, f"Free in {minutes_until_end} min")
        return RoomStatus(StatusKind.OCCUPIED, f"Occupied until {format_time(nxt.end)}")

    if nxt.start > now:
        minutes_until_next = minutes_between(now, nxt.start, policy.minute_rounding)
        return RoomStatus(
            StatusKind.FREE,
            f"Free for next {minutes_until_next} min (until {format_time(nxt.start)})",
        )

    return RoomStatus(StatusKind.FREE, "No current bookings")


def compute_statuses(
    now: datetime,
    rooms: Iterable[Room],
    bookings_by_room: Mapping[str, List[Any]],
    policy: BookingPolicy,
) -> List[Tuple[Room, RoomStatus]]:
    return [(room, compute_status(now, room, bookings_by_room.get(room.id, []), policy)) for room in rooms]
