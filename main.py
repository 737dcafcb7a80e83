from __future__ import annotations

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import Depends, FastAPI, Path, Query, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clock import Clock, SystemClock
from config import settings
from errors import (
    BOOKING_NOT_FOUND,
    ROOM_NOT_FOUND,
    ROUTE_NOT_FOUND,
    error_for_rejection,
    raise_api_error,
)
from InMemoryDatabase import BookingNotFoundError, InMemoryBookingStore
from models import (
    BookingCreateRequest,
    BookingResponse,
    BookingUpdateRequest,
    BookingViewResponse,
    RoomResponse,
    RoomStatusResponse,
    SnapResponse,
)
from policy import BookingPolicy
from service import BookingRejected, BookingService, RoomNotFoundError
from validator import RejectionReason

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ----------------------------
# Collaborators
# ----------------------------

POLICY = settings.policy
store = InMemoryBookingStore(settings.ROOMS)
ALLOWED_ROOMS = [room.id for room in store.list_rooms()]
logger.info("Booking policy %s: %s", settings.BOOKING_POLICY, POLICY)


def get_store() -> InMemoryBookingStore:
    return store


def get_clock() -> Clock:
    return SystemClock()


def get_policy() -> BookingPolicy:
    return POLICY


def get_service(
    store: InMemoryBookingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    policy: BookingPolicy = Depends(get_policy),
) -> BookingService:
    return BookingService(store, clock, policy)


def _room_not_found(room_id: str) -> None:
    raise_api_error(ROOM_NOT_FOUND, extra={"room_id": room_id, "allowed_rooms": ALLOWED_ROOMS})


def _rejected(exc: BookingRejected, policy: BookingPolicy) -> None:
    extra = {"reason": exc.reason.value}
    if exc.reason == RejectionReason.DURATION_EXCEEDED:
        extra["max_duration_minutes"] = policy.max_duration_minutes
    if exc.reason == RejectionReason.OFF_GRID:
        extra["slot_minutes"] = policy.slot_minutes
    raise_api_error(error_for_rejection(exc.reason), extra=extra)


app = FastAPI(
    title="Room Booking API",
    version="1.0.0",
    description=(
        "Room overview with live status, and booking of rooms in fixed time slots.\n\n"
        "## Booking rules\n"
        "- **Grid**: start and end lie on the slot grid (`:00`/`:30` by default, `:00` for the hourly policy).\n"
        "- **Duration**: at most 2 hours by default (3 hours for the hourly policy).\n"
        "- **No past bookings**: a booking today cannot start before the current time.\n"
        "- **No overlaps per room**: bookings use half-open intervals **[start, end)**.\n\n"
        "Rules are checked in a fixed order and only the first violation is reported.\n\n"
        "## Room status\n"
        "- `Free`, `Occupied`, or `SoonFree` (occupied, but free within 20 minutes).\n"
        "- Recomputed on every request.\n\n"
        "## Timezones\n"
        "- All times are local wall-clock times without offset.\n\n"
        "## Storage\n"
        "- In-memory only: restarting the server clears all bookings."
    ),
)


@app.exception_handler(StarletteHTTPException)
async def route_not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND and not isinstance(exc.detail, dict):
        return JSONResponse(status_code=exc.status_code, content={"detail": ROUTE_NOT_FOUND.to_detail()})
    return await http_exception_handler(request, exc)


# ----------------------------
# Rooms
# ----------------------------

@app.get(
    "/rooms",
    response_model=list[RoomResponse],
    summary="List rooms",
)
def list_rooms(service: BookingService = Depends(get_service)):
    return [RoomResponse(**room.__dict__) for room in service.list_rooms()]


@app.get(
    "/rooms/status",
    response_model=list[RoomStatusResponse],
    summary="Live status for all rooms",
)
def list_room_statuses(service: BookingService = Depends(get_service)):
    return [
        RoomStatusResponse(
            room=RoomResponse(**room.__dict__),
            status=room_status.kind.value,
            info=room_status.info,
            color=room_status.color,
        )
        for room, room_status in service.room_statuses()
    ]


@app.get(
    "/rooms/{room_id}/status",
    response_model=RoomStatusResponse,
    summary="Live status for one room",
)
def get_room_status(
    room_id: str = Path(..., description="Room id.", examples=["3.10"]),
    service: BookingService = Depends(get_service),
):
    try:
        room, room_status = service.room_status(room_id)
    except RoomNotFoundError:
        _room_not_found(room_id)

    return RoomStatusResponse(
        room=RoomResponse(**room.__dict__),
        status=room_status.kind.value,
        info=room_status.info,
        color=room_status.color,
    )


@app.get(
    "/rooms/{room_id}/bookings",
    response_model=list[BookingResponse],
    summary="List bookings for a room",
)
def list_room_bookings(
    room_id: str = Path(..., description="Room id.", examples=["3.10"]),
    day: Optional[date] = Query(None, alias="date", description="Only bookings starting on this date."),
    service: BookingService = Depends(get_service),
):
    try:
        bookings = service.bookings_for_room(room_id, day)
    except RoomNotFoundError:
        _room_not_found(room_id)

    return [BookingResponse(**b.__dict__) for b in bookings]


# ----------------------------
# Bookings
# ----------------------------

@app.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a booking",
)
def create_booking(
    payload: BookingCreateRequest,
    service: BookingService = Depends(get_service),
):
    try:
        booking = service.create_booking(
            room_id=payload.room_id,
            day=payload.date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            user_id=payload.user_id,
        )
    except RoomNotFoundError:
        _room_not_found(payload.room_id)
    except BookingRejected as e:
        _rejected(e, service.policy)

    return BookingResponse(**booking.__dict__)


@app.patch(
    "/bookings/{booking_id}",
    response_model=BookingResponse,
    summary="Change the start and end time of a booking",
)
def edit_booking(
    booking_id: UUID,
    payload: BookingUpdateRequest,
    service: BookingService = Depends(get_service),
):
    try:
        booking = service.edit_booking(booking_id, payload.start_time, payload.end_time)
    except BookingNotFoundError:
        raise_api_error(BOOKING_NOT_FOUND)
    except BookingRejected as e:
        _rejected(e, service.policy)

    return BookingResponse(**booking.__dict__)


@app.delete(
    "/bookings/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel a booking by ID",
)
def delete_booking(booking_id: UUID, service: BookingService = Depends(get_service)):
    try:
        service.cancel_booking(booking_id)
    except BookingNotFoundError:
        raise_api_error(BOOKING_NOT_FOUND)
    return None


@app.get(
    "/users/{user_id}/bookings",
    response_model=list[BookingViewResponse],
    summary="Upcoming bookings of a user",
)
def list_user_bookings(
    user_id: str,
    day: Optional[date] = Query(None, alias="date", description="Only bookings starting on this day."),
    q: Optional[str] = Query(None, description="Matches room name, room type or a feature, ignoring case."),
    service: BookingService = Depends(get_service),
):
    views = service.upcoming_bookings(user_id, day=day, search=q)
    return [BookingViewResponse(**view.__dict__) for view in views]


# ----------------------------
# Time input
# ----------------------------

@app.get(
    "/time/snap",
    response_model=SnapResponse,
    summary="Snap a typed time onto the booking grid",
)
def snap_time(
    value: str = Query(..., description="Time as typed, e.g. `9:45`.", examples=["9:45"]),
    service: BookingService = Depends(get_service),
):
    snapped, suggested_end = service.snap(value)
    return SnapResponse(value=snapped, suggested_end=suggested_end)
