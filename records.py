"""
Conversion between storage rows and domain records, plus the "my bookings"
row format.

Storage rows use the column names of the bookings/rooms tables
(`start_time`, `end_time`, ...). Timestamps may arrive as ISO strings or
datetimes; timezone-aware values are converted to local wall-clock time.
"""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional
from uuid import UUID

from models import Booking, Room
from timeslots import format_time

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_DATE_LABEL = re.compile(r"(\d+)\.\s*(\w+),\s*(\d+)")


def _to_local_naive(value: Any) -> datetime:
    moment = value if isinstance(value, datetime) else datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def booking_from_record(row: Mapping[str, Any]) -> Booking:
    booking_id = row["id"]
    created_at = row.get("created_at")
    return Booking(
        id=booking_id if isinstance(booking_id, UUID) else UUID(str(booking_id)),
        room_id=str(row["room_id"]),
        start=_to_local_naive(row["start_time"]),
        end=_to_local_naive(row["end_time"]),
        user_id=row.get("user_id") or None,
        created_at=_to_local_naive(created_at) if created_at else None,
    )


def booking_to_record(booking: Booking) -> Dict[str, Any]:
    return {
        "id": str(booking.id),
        "room_id": booking.room_id,
        "start_time": booking.start.isoformat(),
        "end_time": booking.end.isoformat(),
        "user_id": booking.user_id,
        "created_at": booking.created_at.isoformat() if booking.created_at else None,
    }


def room_from_record(row: Mapping[str, Any]) -> Room:
    capacity = row.get("capacity")
    return Room(
        id=str(row["id"]),
        name=row["name"],
        type=row.get("type"),
        capacity=int(capacity) if capacity is not None else None,
        features=row.get("features"),
        description=row.get("description"),
        image_url=row.get("image_url"),
    )


def group_bookings_by_room(bookings: Iterable[Booking], now: datetime) -> Dict[str, List[Booking]]:
    """Bookings that have not ended yet, per room, earliest first."""
    grouped: Dict[str, List[Booking]] = defaultdict(list)
    for b in bookings:
        if b.end >= now:
            grouped[b.room_id].append(b)
    for room_bookings in grouped.values():
        room_bookings.sort(key=lambda b: b.start)
    return dict(grouped)


def split_features(features: Optional[str]) -> List[str]:
    """'Skærm, Vindue' -> ['Skærm', 'Vindue']"""
    if not features:
        return []
    return [item.strip() for item in features.split(",") if item.strip()]


def date_label(day: date) -> str:
    return f"{day.day}. {MONTHS[day.month - 1]}, {day.year}"


def parse_booking_date(label: str) -> Optional[date]:
    """Inverse of date_label; None when the label cannot be read."""
    match = _DATE_LABEL.search(label or "")
    if not match:
        return None
    month_name = match.group(2).lower()
    months = [m.lower() for m in MONTHS]
    if month_name not in months:
        return None
    try:
        return date(int(match.group(3)), months.index(month_name) + 1, int(match.group(1)))
    except ValueError:
        return None


@dataclass(frozen=True)
class BookingView:
    id: UUID
    room: str
    room_type: Optional[str]
    date: str
    time: str
    features: List[str]

    @property
    def room_info(self) -> str:
        if self.room_type:
            return f"Room {self.room}, {self.room_type}"
        return f"Room {self.room}"

    @property
    def short_date(self) -> str:
        """'25. December, 2025' -> '25/12-2025'; the label itself if unreadable."""
        day = parse_booking_date(self.date)
        if day is None:
            return self.date
        return f"{day.day:02d}/{day.month:02d}-{day.year}"


def matches_search(view: BookingView, query: Optional[str]) -> bool:
    """Case-insensitive substring match on room name, room type and feature tags."""
    needle = (query or "").strip().casefold()
    if not needle:
        return True
    haystack = [view.room, view.room_type or "", *view.features]
    return any(needle in text.casefold() for text in haystack)


def booking_view(booking: Booking, room: Optional[Room]) -> BookingView:
    return BookingView(
        id=booking.id,
        room=room.name if room else booking.room_id,
        room_type=room.type if room else None,
        date=date_label(booking.start.date()),
        time=f"{format_time(booking.start)}-{format_time(booking.end)}",
        features=split_features(room.features if room else None),
    )
