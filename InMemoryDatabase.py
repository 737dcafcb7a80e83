import logging
from datetime import date, datetime
from threading import Lock
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from models import Booking, Room
from overlap import TimeRange, find_conflicts

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for persistence errors."""


class BookingConflictError(StoreError):
    def __init__(self, room_id: str, conflicting: List[Booking]) -> None:
        super().__init__(f"booking_overlaps room={room_id}")
        self.room_id = room_id
        self.conflicting = conflicting


class BookingNotFoundError(StoreError, KeyError):
    pass


# ----------------------------
# In-memory "database"
# ----------------------------

class InMemoryBookingStore():
    """
    Rooms and bookings kept in dicts behind one lock.

    Inserts and time updates re-check overlaps while holding the lock, acting
    as the exclusion constraint a real database table would carry. A request
    that passed validation can still lose a race here.
    """

    def __init__(self, rooms: Iterable[Room]) -> None:
        self._lock = Lock()
        self._rooms: Dict[str, Room] = {room.id: room for room in rooms}
        self._by_room: Dict[str, List[Booking]] = {}
        self._by_id: Dict[UUID, Booking] = {}

    # Rooms

    def list_rooms(self) -> List[Room]:
        return sorted(self._rooms.values(), key=lambda r: r.name)

    def get_room(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    # Bookings

    def get_booking(self, booking_id: UUID) -> Optional[Booking]:
        with self._lock:
            return self._by_id.get(booking_id)

    def list_bookings(self, user_id: Optional[str] = None) -> List[Booking]:
        with self._lock:
            bookings = [b for b in self._by_id.values() if user_id is None or b.user_id == user_id]
        return sorted(bookings, key=lambda b: b.start)

    def list_bookings_for_room(self, room_id: str, day: Optional[date] = None) -> List[Booking]:
        with self._lock:
            bookings = list(self._by_room.get(room_id, []))
        if day is not None:
            bookings = [b for b in bookings if b.start.date() == day]
        return bookings

    def _check_free(self, room_id: str, start: datetime, end: datetime, exclude_id: Optional[UUID]) -> None:
        conflicting = find_conflicts(TimeRange(start, end), self._by_room.get(room_id, []), exclude_id)
        if conflicting:
            logger.warning(
                "Write-time conflict in room %s for %s-%s (existing: %s)",
                room_id, start, end, ", ".join(str(b.id) for b in conflicting),
            )
            raise BookingConflictError(room_id, conflicting)

    def _put(self, booking: Booking) -> None:
        others = [b for b in self._by_room.get(booking.room_id, []) if b.id != booking.id]
        updated = others + [booking]
        updated.sort(key=lambda x: x.start)
        self._by_room[booking.room_id] = updated
        self._by_id[booking.id] = booking

    def insert_booking(self, booking: Booking) -> Booking:
        with self._lock:
            self._check_free(booking.room_id, booking.start, booking.end, None)
            self._put(booking)
            return booking

    def update_booking_times(self, booking_id: UUID, start: datetime, end: datetime) -> Booking:
        with self._lock:
            current = self._by_id.get(booking_id)
            if current is None:
                raise BookingNotFoundError(booking_id)
            self._check_free(current.room_id, start, end, booking_id)
            updated = Booking(
                id=current.id,
                room_id=current.room_id,
                start=start,
                end=end,
                user_id=current.user_id,
                created_at=current.created_at,
            )
            self._put(updated)
            return updated

    def delete_booking(self, booking_id: UUID) -> Booking:
        with self._lock:
            booking = self._by_id.get(booking_id)
            if booking is None:
                raise BookingNotFoundError(booking_id)

            room_list = self._by_room.get(booking.room_id, [])
            self._by_room[booking.room_id] = [b for b in room_list if b.id != booking_id]
            del self._by_id[booking_id]
            return booking
