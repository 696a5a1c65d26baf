from __future__ import annotations


class ValidationFailed(ValueError):
    """Raised when caller input is malformed (bad category, negative amount, missing reason)."""
    pass


class BookingRejected(ValueError):
    """Raised when a booking request breaks a business rule."""

    code = "booking_rejected"

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidDateFormat(BookingRejected):
    code = "invalid_date_format"


class ClosedOnSunday(BookingRejected):
    code = "closed_on_sunday"


class PastDate(BookingRejected):
    code = "past_date"


class BeyondHorizon(BookingRejected):
    code = "beyond_horizon"


class TimeOutOfWindow(BookingRejected):
    code = "time_out_of_window"


class TimeSlotTaken(BookingRejected):
    code = "time_slot_taken"


class InsufficientGap(BookingRejected):
    code = "insufficient_gap"


class ParseError(ValueError):
    """Raised when free text cannot be turned into a date or time. Carries the offending input."""

    def __init__(self, message: str, original_input: str) -> None:
        super().__init__(message)
        self.original_input = original_input


class DateParseError(ParseError):
    pass


class UnrecognizedMonth(DateParseError):
    pass


class TimeParseError(ParseError):
    pass


class AppointmentNotFound(LookupError):
    def __init__(self, appointment_id: int) -> None:
        super().__init__(f"Appointment {appointment_id} not found")
        self.appointment_id = appointment_id


class AppointmentStateError(ValueError):
    """Raised when a status transition is not allowed (e.g. cancelling a completed appointment)."""
    pass


class StoreError(RuntimeError):
    """Raised when the appointment store fails (I/O, corrupt data)."""
    pass
