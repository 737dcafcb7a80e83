from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from availability import RoomStatus, compute_status, compute_statuses
from clock import Clock
from InMemoryDatabase import BookingConflictError, BookingNotFoundError, InMemoryBookingStore
from models import Booking, Room
from policy import BookingPolicy
from records import BookingView, booking_view, group_bookings_by_room, matches_search
from timeslots import snap_to_slot, suggest_end_time
from validator import Rejected, RejectionReason, check_required_fields, validate_booking

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """Base class for service errors."""


class BookingRejected(BookingError):
    def __init__(self, reason: RejectionReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


class RoomNotFoundError(BookingError):
    pass


class BookingService:
    """
    Wires the validator to the store.

    Storage-time overlaps (a concurrent request got there first) are reported
    as RoomConflict, the same reason the validator would have given.
    """

    def __init__(self, store: InMemoryBookingStore, clock: Clock, policy: BookingPolicy) -> None:
        self._store = store
        self._clock = clock
        self._policy = policy

    @property
    def policy(self) -> BookingPolicy:
        return self._policy

    def _require_room(self, room_id: str) -> Room:
        room = self._store.get_room(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def _require_booking(self, booking_id: UUID) -> Booking:
        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    # Rooms

    def list_rooms(self) -> List[Room]:
        return self._store.list_rooms()

    def room_status(self, room_id: str) -> Tuple[Room, RoomStatus]:
        room = self._require_room(room_id)
        return room, compute_status(self._clock.now(), room, self._store.list_bookings_for_room(room_id), self._policy)

    def room_statuses(self) -> List[Tuple[Room, RoomStatus]]:
        now = self._clock.now()
        grouped = group_bookings_by_room(self._store.list_bookings(), now)
        return compute_statuses(now, self._store.list_rooms(), grouped, self._policy)

    # Bookings

    def bookings_for_room(self, room_id: str, day: Optional[date] = None) -> List[Booking]:
        self._require_room(room_id)
        return self._store.list_bookings_for_room(room_id, day)

    def upcoming_bookings(
        self,
        user_id: str,
        day: Optional[date] = None,
        search: Optional[str] = None,
    ) -> List[BookingView]:
        """Not-yet-ended bookings of a user, optionally on one day and matching a search text."""
        now = self._clock.now()
        views = [
            booking_view(b, self._store.get_room(b.room_id))
            for b in self._store.list_bookings(user_id=user_id)
            if b.end >= now and (day is None or b.start.date() == day)
        ]
        return [view for view in views if matches_search(view, search)]

    def create_booking(
        self,
        room_id: Optional[str],
        day: Optional[date],
        start_time: Optional[str],
        end_time: Optional[str],
        user_id: Optional[str] = None,
    ) -> Booking:
        room_id = room_id.strip() if room_id else room_id
        # Missing fields outrank an unknown room.
        missing = check_required_fields(room_id, day, start_time, end_time)
        if missing is not None:
            logger.info("Rejected booking for room %r: %s", room_id, missing.value)
            raise BookingRejected(missing)
        self._require_room(room_id)

        now = self._clock.now()
        existing = self._store.list_bookings_for_room(room_id)
        result = validate_booking(room_id, day, start_time, end_time, existing, now, self._policy)
        if isinstance(result, Rejected):
            logger.info("Rejected booking for room %s on %s %s-%s: %s", room_id, day, start_time, end_time, result.reason.value)
            raise BookingRejected(result.reason)

        draft = result.booking
        booking = Booking(
            id=uuid4(),
            room_id=draft.room_id,
            start=draft.start,
            end=draft.end,
            user_id=user_id,
            created_at=now,
        )
        try:
            self._store.insert_booking(booking)
        except BookingConflictError:
            raise BookingRejected(RejectionReason.ROOM_CONFLICT) from None

        logger.info("Created booking %s for room %s %s-%s", booking.id, booking.room_id, booking.start, booking.end)
        return booking

    def edit_booking(self, booking_id: UUID, start_time: Optional[str], end_time: Optional[str]) -> Booking:
        current = self._require_booking(booking_id)
        existing = self._store.list_bookings_for_room(current.room_id)
        result = validate_booking(
            current.room_id,
            current.start.date(),
            start_time,
            end_time,
            existing,
            self._clock.now(),
            self._policy,
            exclude_id=current.id,
        )
        if isinstance(result, Rejected):
            logger.info("Rejected edit of booking %s to %s-%s: %s", booking_id, start_time, end_time, result.reason.value)
            raise BookingRejected(result.reason)

        try:
            updated = self._store.update_booking_times(current.id, result.booking.start, result.booking.end)
        except BookingConflictError:
            raise BookingRejected(RejectionReason.ROOM_CONFLICT) from None

        logger.info("Moved booking %s to %s-%s", updated.id, updated.start, updated.end)
        return updated

    def cancel_booking(self, booking_id: UUID) -> Booking:
        booking = self._store.delete_booking(booking_id)
        logger.info("Cancelled booking %s in room %s", booking.id, booking.room_id)
        return booking

    # Time input

    def snap(self, time_of_day: str) -> Tuple[str, str]:
        """Snapped time and the end time a form would pre-fill for it."""
        return snap_to_slot(time_of_day, self._policy.slot_minutes), suggest_end_time(time_of_day, self._policy)
