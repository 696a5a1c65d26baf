from __future__ import annotations

from datetime import date, timedelta

from spa_manager.application.exceptions import (
    BeyondHorizon,
    BookingRejected,
    ClosedOnSunday,
    InsufficientGap,
    InvalidDateFormat,
    PastDate,
    TimeOutOfWindow,
    TimeSlotTaken,
)
from spa_manager.application.utils.date_parser import parse_canonical_date
from spa_manager.application.utils.time_format import format_minutes, normalize_time, to_minutes
from spa_manager.domain.entities.availability import AvailabilityResult

REASON_INVALID_DATE = "Invalid date format"
REASON_SUNDAY = "Closed on Sundays"
REASON_PAST = "Cannot book in the past"
REASON_NO_SLOTS = "No available time slots with 30-minute intervals"

SUNDAY = 6


class SlotAvailabilityEngine:
    """
    Pure slot computation over a fixed grid. No store access.

    Every appointment occupies `duration_minutes` from its start, and two
    appointments must be at least `min_gap_minutes` apart once the first ends.
    """

    def __init__(
        self,
        grid_start: str = "2:00 PM",
        grid_end: str = "7:30 PM",
        interval_minutes: int = 30,
        duration_minutes: int = 60,
        min_gap_minutes: int = 30,
        horizon_days: int = 45,
    ) -> None:
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self._start = to_minutes(grid_start)
        self._end = to_minutes(grid_end)
        if self._end < self._start:
            raise ValueError("grid_end must not be before grid_start")
        self._interval = interval_minutes
        self._duration = duration_minutes
        self._min_gap = min_gap_minutes
        self._horizon_days = horizon_days

    @property
    def slots(self) -> list[str]:
        return [format_minutes(m) for m in range(self._start, self._end + 1, self._interval)]

    @property
    def horizon_reason(self) -> str:
        return f"Cannot book more than {self._horizon_days} days in advance"

    def date_rejection(self, date_text: str, today: date) -> BookingRejected | None:
        """First failing date rule, in order: format, Sunday, past, horizon."""
        target = parse_canonical_date(date_text)
        if target is None:
            return InvalidDateFormat(REASON_INVALID_DATE)
        if target.weekday() == SUNDAY:
            return ClosedOnSunday(REASON_SUNDAY)
        if target < today:
            return PastDate(REASON_PAST)
        if target > today + timedelta(days=self._horizon_days):
            return BeyondHorizon(self.horizon_reason)
        return None

    def conflicts(self, candidate: str, booked: str) -> bool:
        new_start = to_minutes(candidate)
        new_end = new_start + self._duration
        booked_start = to_minutes(booked)
        booked_end = booked_start + self._duration

        if new_start < booked_end and new_end > booked_start:
            return True
        gap_after_booked = abs(new_start - booked_end)
        gap_before_booked = abs(booked_start - new_end)
        return gap_after_booked < self._min_gap or gap_before_booked < self._min_gap

    def is_slot_free(self, candidate: str, booked_times: list[str]) -> bool:
        canonical = normalize_time(candidate)
        booked = [normalize_time(t) for t in booked_times]
        if canonical in booked:
            return False
        return not any(self.conflicts(canonical, b) for b in booked)

    def compute(self, date_text: str, booked_times: list[str], today: date) -> AvailabilityResult:
        rejection = self.date_rejection(date_text, today)
        if rejection is not None:
            return AvailabilityResult(date=date_text, available=False, reason=rejection.reason)

        all_slots = self.slots
        booked = [normalize_time(t) for t in booked_times]
        available_times = [slot for slot in all_slots if self.is_slot_free(slot, booked)]
        return AvailabilityResult(
            date=date_text,
            available=bool(available_times),
            reason=None if available_times else REASON_NO_SLOTS,
            available_times=available_times,
            booked_times=booked,
            all_slots=all_slots,
        )

    def validate_request(self, date_text: str, time_text: str, booked_times: list[str], today: date) -> str:
        """Check a booking request; returns the canonical time or raises a BookingRejected subclass."""
        rejection = self.date_rejection(date_text, today)
        if rejection is not None:
            raise rejection

        canonical = normalize_time(time_text)
        minutes = to_minutes(canonical)
        if minutes < self._start or minutes > self._end:
            raise TimeOutOfWindow(
                f"Appointments can only be booked between {format_minutes(self._start)} "
                f"and {format_minutes(self._end)}"
            )

        booked = [normalize_time(t) for t in booked_times]
        if canonical in booked:
            raise TimeSlotTaken("Time slot is already booked")
        if any(self.conflicts(canonical, b) for b in booked):
            raise InsufficientGap(f"Appointments must have at least {self._min_gap} minutes between them")
        return canonical
