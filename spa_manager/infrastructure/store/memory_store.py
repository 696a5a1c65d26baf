from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from spa_manager.application.ports.appointment_store import AppointmentStorePort
from spa_manager.application.utils.time_format import to_minutes
from spa_manager.domain.entities.appointment import Appointment, AppointmentStatus, NewAppointment

UPDATABLE_FIELDS = frozenset(
    {"date", "time", "client", "category", "payment", "tip", "status", "update_reason"}
)


def sort_for_listing(appointments: list[Appointment]) -> list[Appointment]:
    """Newest date first, earliest time first within a date."""
    by_time = sorted(appointments, key=lambda a: to_minutes(a.time))
    return sorted(by_time, key=lambda a: a.date, reverse=True)


def matches_search(appointment: Appointment, client_name: str, time: str, date: str, status: AppointmentStatus) -> bool:
    return (
        client_name.lower() in appointment.client.lower()
        and appointment.time == time
        and appointment.date == date
        and appointment.status == status
    )


def check_changes(changes: dict[str, Any]) -> None:
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown appointment fields: {sorted(unknown)}")


class MemoryAppointmentStore(AppointmentStorePort):
    def __init__(self) -> None:
        self._appointments: dict[int, Appointment] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def fetch_booked_times(self, date: str) -> list[str]:
        with self._lock:
            rows = [a for a in self._appointments.values() if a.date == date and a.is_active]
        return [a.time for a in sorted(rows, key=lambda a: to_minutes(a.time))]

    def insert(self, appointment: NewAppointment) -> Appointment:
        now = datetime.now(timezone.utc)
        with self._lock:
            stored = Appointment(
                id=self._next_id,
                date=appointment.date,
                time=appointment.time,
                client=appointment.client,
                category=appointment.category,
                payment=appointment.payment,
                tip=appointment.tip,
                status=AppointmentStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            self._appointments[stored.id] = stored
            self._next_id += 1
        return stored

    def get(self, appointment_id: int) -> Appointment | None:
        with self._lock:
            return self._appointments.get(appointment_id)

    def update(self, appointment_id: int, changes: dict[str, Any]) -> int:
        check_changes(changes)
        with self._lock:
            current = self._appointments.get(appointment_id)
            if current is None:
                return 0
            self._appointments[appointment_id] = replace(
                current, **changes, updated_at=datetime.now(timezone.utc)
            )
            return 1

    def search(
        self,
        client_name: str,
        time: str,
        date: str,
        status: AppointmentStatus = AppointmentStatus.PENDING,
    ) -> list[Appointment]:
        with self._lock:
            rows = list(self._appointments.values())
        return [a for a in rows if matches_search(a, client_name, time, date, status)]

    def list_appointments(self, date: str | None = None) -> list[Appointment]:
        with self._lock:
            rows = list(self._appointments.values())
        if date is not None:
            rows = [a for a in rows if a.date == date]
        return sort_for_listing(rows)
