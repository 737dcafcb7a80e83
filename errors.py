from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
from fastapi import HTTPException, status

from validator import RejectionReason


@dataclass(frozen=True)
class ApiError:
    code: str
    message: str
    http_status: int

    def to_http_exception(self, *, extra: Optional[Dict[str, Any]] = None) -> HTTPException:
        """
        Convert this error to FastAPI's HTTPException.
        If extra is provided, it will be included in the detail payload.
        """
        detail: Any

        detail = {"code": self.code, "message": self.message}
        if extra:
            detail.update(extra)

        return HTTPException(status_code=self.http_status, detail=detail)

    def to_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


def raise_api_error(err: ApiError, *, extra: Optional[Dict[str, Any]] = None) -> None:
    raise err.to_http_exception(extra=extra)


# ----------------------------
# Routing / room errors (404)
# ----------------------------

ROUTE_NOT_FOUND = ApiError(
    code="ROUTE_NOT_FOUND",
    message="Route not found.",
    http_status=status.HTTP_404_NOT_FOUND,
)

ROOM_NOT_FOUND = ApiError(
    code="ROOM_NOT_FOUND",
    message="Room not found.",
    http_status=status.HTTP_404_NOT_FOUND,
)

# ----------------------------
# Booking validation errors (400)
# ----------------------------

BOOKING_MISSING_DATE = ApiError(
    code="BOOKING_MISSING_DATE",
    message="Please choose a date for the booking.",
    http_status=status.HTTP_400_BAD_REQUEST,
)

BOOKING_MISSING_START_TIME = ApiError(
    code="BOOKING_MISSING_START_TIME",
    message="Please choose a start time for the booking.",
    http_status=status.HTTP_400_BAD_REQUEST,
)

BOOKING_MISSING_END_TIME = ApiError(
    code="BOOKING_MISSING_END_TIME",
    message="Please choose an end time for the booking.",
    http_status=status.HTTP_400_BAD_REQUEST,
)

BOOKING_MISSING_ROOM = ApiError(
    code="BOOKING_MISSING_ROOM",
    message="Please choose a room to book.",
    http_status=status.HTTP_400_BAD_REQUEST,
)

BOOKING_INVALID_TIME = ApiError(
    code="BOOKING_INVALID_TIME",
    message="The chosen time is not valid. Use HH:MM.",
    http_status=status.HTTP_400_BAD_REQUEST,
)

BOOKING_START_AFTER_END = ApiError(
    code="BOOKING_START_AFTER_END",
    message="Start time must be before end time.",
    http_status=status.HTTP_400_BAD_REQUEST,
)

BOOKING_OFF_GRID = ApiError(
    code="BOOKING_OFF_GRID",
    message="Bookings must start and end on the booking grid (e.g. 09:00, 09:30, 10:00).",
    http_status=status.HTTP_400_BAD_REQUEST,
)

BOOKING_TOO_LONG = ApiError(
    code="BOOKING_TOO_LONG",
    message="The booking is longer than the maximum allowed duration.",
    http_status=status.HTTP_400_BAD_REQUEST,
)

BOOKING_IN_PAST = ApiError(
    code="BOOKING_IN_PAST",
    message="You can't book a room in the past.",
    http_status=status.HTTP_400_BAD_REQUEST,
)

# ----------------------------
# Booking conflict errors (409)
# ----------------------------

BOOKING_OVERLAPS = ApiError(
    code="BOOKING_OVERLAPS",
    message="The room is already booked in this time range.",
    http_status=status.HTTP_409_CONFLICT,
)

# ----------------------------
# Booking not found (404)
# ----------------------------

BOOKING_NOT_FOUND = ApiError(
    code="BOOKING_NOT_FOUND",
    message="Booking not found.",
    http_status=status.HTTP_404_NOT_FOUND,
)


REJECTION_ERRORS: Dict[RejectionReason, ApiError] = {
    RejectionReason.MISSING_DATE: BOOKING_MISSING_DATE,
    RejectionReason.MISSING_START_TIME: BOOKING_MISSING_START_TIME,
    RejectionReason.MISSING_END_TIME: BOOKING_MISSING_END_TIME,
    RejectionReason.MISSING_ROOM: BOOKING_MISSING_ROOM,
    RejectionReason.INVALID_TIME: BOOKING_INVALID_TIME,
    RejectionReason.END_BEFORE_START: BOOKING_START_AFTER_END,
    RejectionReason.OFF_GRID: BOOKING_OFF_GRID,
    RejectionReason.DURATION_EXCEEDED: BOOKING_TOO_LONG,
    RejectionReason.IN_PAST: BOOKING_IN_PAST,
    RejectionReason.ROOM_CONFLICT: BOOKING_OVERLAPS,
}


def error_for_rejection(reason: RejectionReason) -> ApiError:
    return REJECTION_ERRORS[reason]
