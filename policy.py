from __future__ import annotations

from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ----------------------------
# Booking policy
# ----------------------------

class BookingPolicy(BaseModel):
    """
    Rule set shared by the validator and the availability calculator.

    The two presets below cover the grids seen in practice:
      - half-hour: bookings on :00/:30, at most 2 hours
      - hourly: bookings on :00 only, at most 3 hours, end auto-filled one hour later
    """

    model_config = ConfigDict(frozen=True)

    slot_minutes: Literal[30, 60] = Field(
        30,
        description="Booking boundaries must lie on this minute grid.",
    )
    max_duration_minutes: int = Field(
        120,
        gt=0,
        description="Longest allowed booking.",
    )
    soon_free_threshold_minutes: int = Field(
        20,
        ge=0,
        description="An occupied room ending within this many minutes is reported as soon free.",
    )
    allow_past_booking_today: bool = Field(
        False,
        description="Accept same-day bookings whose start already lies behind the clock.",
    )
    minute_rounding: Literal["ceil", "round", "floor"] = Field(
        "ceil",
        description="How partial minutes are counted in status info texts.",
    )
    default_duration_minutes: int = Field(
        60,
        gt=0,
        description="Length used when an end time is suggested from a start time.",
    )

    @model_validator(mode="after")
    def check_durations_fit_grid(self) -> "BookingPolicy":
        if self.max_duration_minutes < self.slot_minutes:
            raise ValueError("max_duration_minutes must be at least one slot long.")
        if self.default_duration_minutes > self.max_duration_minutes:
            raise ValueError("default_duration_minutes cannot exceed max_duration_minutes.")
        if self.default_duration_minutes % self.slot_minutes:
            raise ValueError("default_duration_minutes must be a whole number of slots.")
        return self


HALF_HOUR_POLICY = BookingPolicy(slot_minutes=30, max_duration_minutes=120)
HOURLY_POLICY = BookingPolicy(slot_minutes=60, max_duration_minutes=180)

PRESETS: Dict[str, BookingPolicy] = {
    "half-hour": HALF_HOUR_POLICY,
    "hourly": HOURLY_POLICY,
}


def get_preset(name: str) -> BookingPolicy:
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown booking policy preset: {name!r}. Known: {', '.join(PRESETS)}") from None
