from __future__ import annotations

import pytest
from pydantic import ValidationError

from config import Settings
from policy import HALF_HOUR_POLICY, HOURLY_POLICY, BookingPolicy, get_preset


def test_presets():
    assert get_preset("half-hour") == HALF_HOUR_POLICY
    assert (HOURLY_POLICY.slot_minutes, HOURLY_POLICY.max_duration_minutes) == (60, 180)
    assert (HALF_HOUR_POLICY.slot_minutes, HALF_HOUR_POLICY.max_duration_minutes) == (30, 120)
    assert HALF_HOUR_POLICY.soon_free_threshold_minutes == 20


def test_unknown_preset():
    with pytest.raises(ValueError):
        get_preset("weekly")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"slot_minutes": 15},
        {"max_duration_minutes": 0},
        {"slot_minutes": 60, "max_duration_minutes": 30, "default_duration_minutes": 30},
        {"soon_free_threshold_minutes": -1},
        {"minute_rounding": "truncate"},
        {"default_duration_minutes": 240},
        {"default_duration_minutes": 45},
    ],
)
def test_malformed_policy_is_a_hard_failure(kwargs):
    with pytest.raises(ValidationError):
        BookingPolicy(**kwargs)


def test_policy_is_frozen():
    with pytest.raises(ValidationError):
        HALF_HOUR_POLICY.slot_minutes = 60


def test_settings_defaults(monkeypatch):
    for name in ("BOOKING_POLICY", "SLOT_MINUTES", "MAX_DURATION_MINUTES",
                 "SOON_FREE_THRESHOLD_MINUTES", "ALLOW_PAST_BOOKING_TODAY"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()
    assert settings.policy == HALF_HOUR_POLICY
    assert len(settings.ROOMS) == 5


def test_settings_overrides(monkeypatch):
    monkeypatch.setenv("BOOKING_POLICY", "hourly")
    monkeypatch.setenv("MAX_DURATION_MINUTES", "120")
    monkeypatch.setenv("ALLOW_PAST_BOOKING_TODAY", "true")

    policy = Settings().policy
    assert policy.slot_minutes == 60
    assert policy.max_duration_minutes == 120
    assert policy.allow_past_booking_today is True


def test_settings_reject_non_numeric(monkeypatch):
    monkeypatch.setenv("SLOT_MINUTES", "thirty")
    with pytest.raises(ValueError):
        Settings()
