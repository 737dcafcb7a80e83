from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as Date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


# ----------------------------
# Domain records
# ----------------------------

@dataclass(frozen=True)
class Room:
    id: str
    name: str
    type: Optional[str] = None
    capacity: Optional[int] = None
    features: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class Booking:
    id: UUID
    room_id: str
    start: datetime
    end: datetime
    user_id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None, compare=False)


# ----------------------------
# Models (API)
# ----------------------------

class RoomResponse(BaseModel):
    id: str
    name: str
    type: Optional[str] = None
    capacity: Optional[int] = None
    features: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class RoomStatusResponse(BaseModel):
    room: RoomResponse
    status: str = Field(..., description="One of `Free`, `Occupied`, `SoonFree`.", examples=["SoonFree"])
    info: str = Field(..., examples=["Free in 15 min"])
    color: str = Field(..., description="Card colour: green, red or yellow.", examples=["yellow"])


class BookingCreateRequest(BaseModel):
    """
    All fields are optional at the schema level: a missing value is reported
    with its own booking error code (e.g. `BOOKING_MISSING_DATE`) instead of a
    generic 422.
    """
    room_id: Optional[str] = Field(
        None,
        description="Room to book.",
        examples=["3.10"],
    )
    date: Optional[Date] = Field(
        None,
        description="Calendar date of the booking (local time).",
        examples=["2025-12-25"],
    )
    start_time: Optional[str] = Field(
        None,
        description=(
            "Start time as `HH:MM` in local wall-clock time.\n\n"
            "Must lie on the booking grid (`:00`/`:30` by default)."
        ),
        examples=["13:00"],
    )
    end_time: Optional[str] = Field(
        None,
        description=(
            "End time as `HH:MM`, after the start time.\n\n"
            "Adjacent bookings are allowed: `10:00–11:00` and `11:00–12:00` do **not** overlap."
        ),
        examples=["14:30"],
    )
    user_id: Optional[str] = Field(
        None,
        max_length=100,
        description="Optional id of the user who owns the booking.",
        examples=["user-42"],
    )


class BookingUpdateRequest(BaseModel):
    start_time: Optional[str] = Field(None, description="New start time as `HH:MM`.", examples=["10:00"])
    end_time: Optional[str] = Field(None, description="New end time as `HH:MM`.", examples=["11:30"])


class BookingResponse(BaseModel):
    id: UUID
    room_id: str
    start: datetime
    end: datetime
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None


class BookingViewResponse(BaseModel):
    id: UUID
    room: str
    room_type: Optional[str] = None
    date: str = Field(..., examples=["25. December, 2025"])
    time: str = Field(..., examples=["13:00-15:00"])
    features: list[str] = []


class SnapResponse(BaseModel):
    value: str = Field(..., examples=["09:30"])
    suggested_end: str = Field(..., examples=["10:30"])
