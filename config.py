"""
Application settings, read from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from models import Room
from policy import BookingPolicy, get_preset


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str) -> Optional[bool]:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return None
    return raw in ("1", "true", "yes", "on")


def default_rooms() -> List[Room]:
    return [
        Room(id="3.10", name="3.10", type="Klasselokale", capacity=30, features="Skærm, Whiteboard, Vindue",
             description="Classroom on the third floor."),
        Room(id="3.12", name="3.12", type="Klasselokale", capacity=28, features="Projektor, Whiteboard",
             description="Classroom with projector."),
        Room(id="2.04", name="2.04", type="Mødelokale", capacity=8, features="Skærm",
             description="Small meeting room."),
        Room(id="2.06", name="2.06", type="Mødelokale", capacity=12, features="Skærm, Videokonference",
             description="Meeting room with video conferencing."),
        Room(id="1.01", name="1.01", type="Grupperum", capacity=4, features="Whiteboard",
             description="Group room next to the library."),
    ]


@dataclass
class Settings:
    """Settings for the booking service"""
    BOOKING_POLICY: str = field(default_factory=lambda: os.getenv("BOOKING_POLICY", "half-hour"))
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    # Overrides on top of the preset
    SLOT_MINUTES: Optional[int] = field(default_factory=lambda: _env_int("SLOT_MINUTES"))
    MAX_DURATION_MINUTES: Optional[int] = field(default_factory=lambda: _env_int("MAX_DURATION_MINUTES"))
    SOON_FREE_THRESHOLD_MINUTES: Optional[int] = field(default_factory=lambda: _env_int("SOON_FREE_THRESHOLD_MINUTES"))
    ALLOW_PAST_BOOKING_TODAY: Optional[bool] = field(default_factory=lambda: _env_bool("ALLOW_PAST_BOOKING_TODAY"))

    ROOMS: List[Room] = field(default_factory=default_rooms)

    @property
    def policy(self) -> BookingPolicy:
        """Preset with any overrides applied; invalid combinations raise pydantic.ValidationError."""
        overrides = {
            "slot_minutes": self.SLOT_MINUTES,
            "max_duration_minutes": self.MAX_DURATION_MINUTES,
            "soon_free_threshold_minutes": self.SOON_FREE_THRESHOLD_MINUTES,
            "allow_past_booking_today": self.ALLOW_PAST_BOOKING_TODAY,
        }
        base = get_preset(self.BOOKING_POLICY)
        data = base.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return BookingPolicy.model_validate(data)


settings = Settings()
