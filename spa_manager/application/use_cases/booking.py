from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from zoneinfo import ZoneInfo

from spa_manager.application.exceptions import (
    AppointmentNotFound,
    AppointmentStateError,
    ValidationFailed,
)
from spa_manager.application.ports.appointment_store import AppointmentStorePort
from spa_manager.application.use_cases.slot_availability import SlotAvailabilityEngine
from spa_manager.application.utils.date_parser import parse_canonical_date, parse_date_phrase
from spa_manager.application.utils.time_format import normalize_time
from spa_manager.domain.entities.appointment import (
    Appointment,
    AppointmentStatus,
    NewAppointment,
    ServiceCategory,
)
from spa_manager.domain.entities.availability import AvailabilityResult

CENTS = Decimal("0.01")
MAX_TIP = Decimal("1000")
NO_TIP_REPLIES = frozenset({"none", "zero", "nada", "no tip", "no", "0"})


def parse_category(value: ServiceCategory | str) -> ServiceCategory:
    try:
        return ServiceCategory(value)
    except ValueError as e:
        choices = ", ".join(c.value for c in ServiceCategory)
        raise ValidationFailed(f"Valid category required ({choices})") from e


def parse_amount(value: Any, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value)).quantize(CENTS)
    except (InvalidOperation, ValueError) as e:
        raise ValidationFailed(f"{field_name} must be a number") from e
    if not amount.is_finite() or amount < 0:
        raise ValidationFailed(f"{field_name} must be a non-negative amount")
    return amount


def parse_tip_reply(text: str) -> Decimal:
    """Read a chat tip answer: "none", "0", "25", "$25.50", "1,000"."""
    reply = (text or "").strip().lower()
    if not reply:
        raise ValidationFailed("Tip amount is required")
    if reply in NO_TIP_REPLIES:
        return Decimal("0.00")
    invalid = 'Please enter a valid tip amount (e.g., $25, 25, or "none")'
    try:
        amount = Decimal(reply.replace("$", "").replace(",", "")).quantize(CENTS)
    except InvalidOperation as e:
        raise ValidationFailed(invalid) from e
    if not amount.is_finite():
        raise ValidationFailed(invalid)
    if amount < 0:
        raise ValidationFailed("Tip cannot be negative")
    if amount > MAX_TIP:
        raise ValidationFailed(f"Tip cannot exceed ${MAX_TIP}")
    return amount


class BookingUseCase:
    def __init__(
        self,
        store: AppointmentStorePort,
        engine: SlotAvailabilityEngine,
        timezone: ZoneInfo,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._engine = engine
        self._timezone = timezone
        self._clock = clock or (lambda: datetime.now(self._timezone))
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, date_text: str) -> threading.Lock:
        """Get or create the lock serializing bookings on one date."""
        with self._lock_lock:
            if date_text not in self._locks:
                self._locks[date_text] = threading.Lock()
            return self._locks[date_text]

    def today(self) -> date:
        return self._clock().date()

    def get_availability(self, date_text: str) -> AvailabilityResult:
        today = self.today()
        if self._engine.date_rejection(date_text, today) is not None:
            return self._engine.compute(date_text, [], today)

        booked_times = self._store.fetch_booked_times(date_text)
        result = self._engine.compute(date_text, booked_times, today)
        self._logger.info(
            "Availability computed",
            extra={"date": date_text, "reason": result.reason, "available_count": len(result.available_times)},
        )
        return result

    def create_appointment(
        self,
        date_text: str,
        time_text: str,
        client: str,
        category: ServiceCategory | str,
    ) -> Appointment:
        client_name = (client or "").strip()
        if not client_name:
            raise ValidationFailed("Client name required")
        service = parse_category(category)

        rejection = self._engine.date_rejection(date_text, self.today())
        if rejection is not None:
            raise rejection

        with self._get_lock(date_text):
            today = self.today()
            booked_times = self._store.fetch_booked_times(date_text)
            canonical_time = self._engine.validate_request(date_text, time_text, booked_times, today)
            appointment = self._store.insert(
                NewAppointment(
                    date=date_text,
                    time=canonical_time,
                    client=client_name,
                    category=service,
                    payment=service.price,
                )
            )

        self._logger.info(
            "Appointment created",
            extra={"appointment_id": appointment.id, "date": appointment.date, "time": appointment.time},
        )
        return appointment

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self._store.get(appointment_id)
        if appointment is None:
            raise AppointmentNotFound(appointment_id)
        return appointment

    def update_appointment(
        self,
        appointment_id: int,
        category: ServiceCategory | str | None = None,
        payment: Any = None,
        tip: Any = None,
        update_reason: str | None = None,
    ) -> Appointment:
        """
        Update category / payment / tip.
        A category change resets payment to the category price unless payment is also given.
        """
        changes: dict[str, Any] = {}
        if category is not None:
            service = parse_category(category)
            changes["category"] = service
            changes["payment"] = service.price
        if payment is not None:
            changes["payment"] = parse_amount(payment, "payment")
        if tip is not None:
            changes["tip"] = parse_amount(tip, "tip")
        if not changes:
            raise ValidationFailed("No fields to update")
        if update_reason:
            changes["update_reason"] = update_reason.strip()

        self._apply(appointment_id, changes)
        return self.get_appointment(appointment_id)

    def complete_appointment(self, appointment_id: int, tip: Any = None) -> Appointment:
        current = self.get_appointment(appointment_id)
        if current.status == AppointmentStatus.CANCELLED:
            raise AppointmentStateError("Cannot complete a cancelled appointment")

        changes: dict[str, Any] = {"status": AppointmentStatus.COMPLETED}
        if tip is not None:
            changes["tip"] = parse_amount(tip, "tip")
        self._apply(appointment_id, changes)
        self._logger.info("Appointment completed", extra={"appointment_id": appointment_id, "tip": tip})
        return self.get_appointment(appointment_id)

    def cancel_appointment(self, appointment_id: int, update_reason: str) -> Appointment:
        """Soft delete: the row stays, with status cancelled and the reason recorded."""
        reason = (update_reason or "").strip()
        if not reason:
            raise ValidationFailed("A reason is required to cancel an appointment")

        current = self.get_appointment(appointment_id)
        if current.status == AppointmentStatus.COMPLETED:
            raise AppointmentStateError("Cannot cancel completed appointments")
        if current.status == AppointmentStatus.CANCELLED:
            raise AppointmentStateError("Appointment is already cancelled")

        self._apply(appointment_id, {"status": AppointmentStatus.CANCELLED, "update_reason": reason})
        self._logger.info("Appointment cancelled", extra={"appointment_id": appointment_id, "reason": reason})
        return self.get_appointment(appointment_id)

    def search_open_appointments(
        self,
        client_name: str,
        time_text: str,
        date_text: str,
        year: str | None = None,
    ) -> list[Appointment]:
        """
        Find pending appointments for a client at a time on a date.
        `date_text` may be canonical (2025-08-19) or a phrase ("August 19th").
        Raises DateParseError / TimeParseError on unparseable input.
        """
        canonical_time = normalize_time(time_text)
        if parse_canonical_date(date_text) is not None:
            canonical_date = date_text
        else:
            canonical_date = parse_date_phrase(
                date_text, year, reference_date=self.today()
            ).formatted_date
        return self._store.search(client_name.strip(), canonical_time, canonical_date, AppointmentStatus.PENDING)

    def list_appointments(self, date_text: str | None = None) -> list[Appointment]:
        return self._store.list_appointments(date_text)

    def _apply(self, appointment_id: int, changes: dict[str, Any]) -> None:
        if self._store.update(appointment_id, changes) == 0:
            raise AppointmentNotFound(appointment_id)
