"""
Tests for the slot grid, the date rules and the spacing rule between appointments.
"""

from __future__ import annotations

from datetime import date

import pytest

from spa_manager.application.exceptions import (
    BeyondHorizon,
    ClosedOnSunday,
    InsufficientGap,
    InvalidDateFormat,
    PastDate,
    TimeOutOfWindow,
    TimeSlotTaken,
)
from spa_manager.application.use_cases.slot_availability import SlotAvailabilityEngine

TODAY = date(2025, 8, 11)  # Monday
TUESDAY = "2025-08-19"

GRID = [
    "2:00 PM", "2:30 PM", "3:00 PM", "3:30 PM", "4:00 PM", "4:30 PM",
    "5:00 PM", "5:30 PM", "6:00 PM", "6:30 PM", "7:00 PM", "7:30 PM",
]


def _engine(**overrides) -> SlotAvailabilityEngine:
    return SlotAvailabilityEngine(**overrides)


def test_empty_day_offers_the_whole_grid():
    result = _engine().compute(TUESDAY, [], TODAY)
    assert result.available is True
    assert result.reason is None
    assert result.all_slots == GRID
    assert result.available_times == GRID
    assert result.booked_times == []


def test_booking_blocks_neighbouring_slots():
    result = _engine().compute(TUESDAY, ["2:00 PM"], TODAY)
    assert "2:00 PM" not in result.available_times
    assert "2:30 PM" not in result.available_times
    assert "3:00 PM" not in result.available_times
    assert "3:30 PM" in result.available_times


def test_mid_afternoon_booking():
    result = _engine().compute(TUESDAY, ["4:00 PM"], TODAY)
    assert result.available_times == [
        "2:00 PM", "2:30 PM", "5:30 PM", "6:00 PM", "6:30 PM", "7:00 PM", "7:30 PM",
    ]
    assert result.booked_times == ["4:00 PM"]


def test_booked_times_in_other_spellings_are_normalized():
    result = _engine().compute(TUESDAY, ["4 pm"], TODAY)
    assert result.booked_times == ["4:00 PM"]
    assert "4:00 PM" not in result.available_times


def test_available_slots_keep_the_minimum_gap():
    engine = _engine()
    booked = ["3:00 PM", "6:30 PM"]
    result = engine.compute(TUESDAY, booked, TODAY)
    for slot in result.available_times:
        assert slot in GRID
        assert slot not in booked
        assert all(not engine.conflicts(slot, b) for b in booked)


def test_fully_booked_day():
    result = _engine().compute(TUESDAY, ["2:00 PM", "3:30 PM", "5:00 PM", "6:30 PM"], TODAY)
    assert result.available is False
    assert result.available_times == []
    assert result.reason == "No available time slots with 30-minute intervals"


@pytest.mark.parametrize(
    "date_text, reason",
    [
        ("2025-08-17", "Closed on Sundays"),
        ("2025-08-09", "Cannot book in the past"),
        ("2025-09-26", "Cannot book more than 45 days in advance"),
        ("08/19/2025", "Invalid date format"),
        ("2025-02-30", "Invalid date format"),
    ],
)
def test_unbookable_dates(date_text, reason):
    result = _engine().compute(date_text, [], TODAY)
    assert result.available is False
    assert result.reason == reason
    assert result.available_times == []


def test_sunday_wins_over_past():
    assert _engine().compute("2025-08-10", [], TODAY).reason == "Closed on Sundays"


def test_today_and_last_horizon_day_are_bookable():
    engine = _engine()
    assert engine.compute("2025-08-11", [], TODAY).available is True
    assert engine.compute("2025-09-25", [], TODAY).available is True


def test_grid_end_is_configurable():
    engine = _engine(grid_end="8:00 PM")
    assert len(engine.slots) == 13
    assert engine.slots[-1] == "8:00 PM"


def test_invalid_grid_is_refused():
    with pytest.raises(ValueError):
        _engine(grid_start="7:30 PM", grid_end="2:00 PM")
    with pytest.raises(ValueError):
        _engine(interval_minutes=0)


def test_validate_request_returns_canonical_time():
    assert _engine().validate_request(TUESDAY, "3:30 p.m.", ["2:00 PM"], TODAY) == "3:30 PM"
    assert _engine().validate_request(TUESDAY, "1900 hours", [], TODAY) == "7:00 PM"


@pytest.mark.parametrize(
    "date_text, time_text, booked, error, code",
    [
        ("2025-08-17", "2:00 PM", [], ClosedOnSunday, "closed_on_sunday"),
        ("2025-08-09", "2:00 PM", [], PastDate, "past_date"),
        ("2025-09-26", "2:00 PM", [], BeyondHorizon, "beyond_horizon"),
        ("19 Aug", "2:00 PM", [], InvalidDateFormat, "invalid_date_format"),
        (TUESDAY, "1:30 PM", [], TimeOutOfWindow, "time_out_of_window"),
        (TUESDAY, "8:00 PM", [], TimeOutOfWindow, "time_out_of_window"),
        (TUESDAY, "2:00 PM", ["2:00 PM"], TimeSlotTaken, "time_slot_taken"),
        (TUESDAY, "3:00 PM", ["2:00 PM"], InsufficientGap, "insufficient_gap"),
    ],
)
def test_validate_request_rejections(date_text, time_text, booked, error, code):
    with pytest.raises(error) as exc:
        _engine().validate_request(date_text, time_text, booked, TODAY)
    assert exc.value.code == code
    assert exc.value.reason


def test_window_message_names_the_grid_bounds():
    with pytest.raises(TimeOutOfWindow) as exc:
        _engine().validate_request(TUESDAY, "9:00 AM", [], TODAY)
    assert exc.value.reason == "Appointments can only be booked between 2:00 PM and 7:30 PM"
