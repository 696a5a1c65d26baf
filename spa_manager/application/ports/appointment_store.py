from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from spa_manager.domain.entities.appointment import Appointment, AppointmentStatus, NewAppointment


class AppointmentStorePort(ABC):
    @abstractmethod
    def fetch_booked_times(self, date: str) -> list[str]:
        """Start times of all non-cancelled appointments on `date`, in time order."""
        raise NotImplementedError

    @abstractmethod
    def insert(self, appointment: NewAppointment) -> Appointment:
        """Persist a new pending appointment. Returns it with its assigned id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, appointment_id: int) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    def update(self, appointment_id: int, changes: dict[str, Any]) -> int:
        """Apply field changes. Returns the number of affected rows (0 means not found)."""
        raise NotImplementedError

    @abstractmethod
    def search(
        self,
        client_name: str,
        time: str,
        date: str,
        status: AppointmentStatus = AppointmentStatus.PENDING,
    ) -> list[Appointment]:
        """Appointments whose client contains `client_name` (case-insensitive) at an exact time and date."""
        raise NotImplementedError

    @abstractmethod
    def list_appointments(self, date: str | None = None) -> list[Appointment]:
        """All appointments, newest date first and by time within a date."""
        raise NotImplementedError
