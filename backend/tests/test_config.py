"""Settings parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bistro.core.config import Settings
from bistro.services.availability_service import BookingRules


def test_booking_rules_follow_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENING_HOUR", "12")
    monkeypatch.setenv("CLOSING_HOUR", "15")
    monkeypatch.setenv("TIME_SLOT_MINUTES", "60")
    monkeypatch.setenv("OCCUPANCY_MODE", "table_match")
    monkeypatch.setenv("SERIALIZE_BOOKINGS", "true")
    monkeypatch.setenv("CORS_ALLOWLIST", "https://bistro.example.com, http://localhost:5173")

    settings = Settings()  # type: ignore[call-arg]
    rules = BookingRules.from_settings(settings)

    assert settings.cors_allowlist == [
        "https://bistro.example.com",
        "http://localhost:5173",
    ]
    assert rules.occupancy_mode == "table_match"
    assert rules.serialize_bookings is True
    assert [slot.hour for slot in rules.slot_times()] == [12, 13, 14]


def test_unknown_occupancy_mode_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OCCUPANCY_MODE", "first_come")

    with pytest.raises(ValidationError):
        Settings()  # type: ignore[call-arg]
