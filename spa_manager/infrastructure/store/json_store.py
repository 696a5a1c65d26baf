from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from spa_manager.application.exceptions import StoreError
from spa_manager.application.ports.appointment_store import AppointmentStorePort
from spa_manager.application.utils.time_format import to_minutes
from spa_manager.domain.entities.appointment import (
    Appointment,
    AppointmentStatus,
    NewAppointment,
    ServiceCategory,
)
from spa_manager.infrastructure.store.memory_store import check_changes, matches_search, sort_for_listing


class JsonAppointmentStore(AppointmentStorePort):
    def __init__(self, data_dir: str = "./data", filename: str = "appointments.json") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / filename
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _load(self) -> dict[str, Any]:
        """Load the store file, return an empty store if it does not exist yet."""
        if not self._file_path.exists():
            return {"next_id": 1, "appointments": [], "version": 1}
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.error("Failed to read appointment store", extra={"path": str(self._file_path)})
            raise StoreError(f"Cannot read {self._file_path}: {e}") from e
        data.setdefault("next_id", 1)
        data.setdefault("appointments", [])
        data.setdefault("version", 1)
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Save the store file atomically."""
        temp_path = self._file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise StoreError(f"Cannot write {self._file_path}: {e}") from e

    def _serialize(self, appointment: Appointment) -> dict[str, Any]:
        return {
            "id": appointment.id,
            "date": appointment.date,
            "time": appointment.time,
            "client": appointment.client,
            "category": appointment.category.value,
            "payment": str(appointment.payment),
            "tip": str(appointment.tip),
            "status": appointment.status.value,
            "update_reason": appointment.update_reason,
            "created_at": appointment.created_at.isoformat() if appointment.created_at else None,
            "updated_at": appointment.updated_at.isoformat() if appointment.updated_at else None,
        }

    def _deserialize(self, data: dict[str, Any]) -> Appointment:
        try:
            return Appointment(
                id=int(data["id"]),
                date=data["date"],
                time=data["time"],
                client=data["client"],
                category=ServiceCategory(data["category"]),
                payment=Decimal(data["payment"]),
                tip=Decimal(data.get("tip") or "0.00"),
                status=AppointmentStatus(data.get("status", "pending")),
                update_reason=data.get("update_reason"),
                created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else None,
                updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else None,
            )
        except (KeyError, ValueError) as e:
            raise StoreError(f"Corrupt appointment record: {data!r}") from e

    def _all(self) -> list[Appointment]:
        return [self._deserialize(row) for row in self._load()["appointments"]]

    def fetch_booked_times(self, date: str) -> list[str]:
        with self._lock:
            rows = [a for a in self._all() if a.date == date and a.is_active]
        return [a.time for a in sorted(rows, key=lambda a: to_minutes(a.time))]

    def insert(self, appointment: NewAppointment) -> Appointment:
        now = datetime.now(timezone.utc)
        with self._lock:
            data = self._load()
            stored = Appointment(
                id=int(data["next_id"]),
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
            data["appointments"].append(self._serialize(stored))
            data["next_id"] = stored.id + 1
            self._save(data)
        return stored

    def get(self, appointment_id: int) -> Appointment | None:
        with self._lock:
            for appointment in self._all():
                if appointment.id == appointment_id:
                    return appointment
        return None

    def update(self, appointment_id: int, changes: dict[str, Any]) -> int:
        check_changes(changes)
        with self._lock:
            data = self._load()
            for index, row in enumerate(data["appointments"]):
                if int(row["id"]) != appointment_id:
                    continue
                current = self._serialize(self._deserialize(row))
                for key, value in changes.items():
                    if isinstance(value, (ServiceCategory, AppointmentStatus)):
                        value = value.value
                    elif isinstance(value, Decimal):
                        value = str(value)
                    current[key] = value
                current["updated_at"] = datetime.now(timezone.utc).isoformat()
                data["appointments"][index] = current
                self._save(data)
                return 1
        return 0

    def search(
        self,
        client_name: str,
        time: str,
        date: str,
        status: AppointmentStatus = AppointmentStatus.PENDING,
    ) -> list[Appointment]:
        with self._lock:
            rows = self._all()
        return [a for a in rows if matches_search(a, client_name, time, date, status)]

    def list_appointments(self, date: str | None = None) -> list[Appointment]:
        with self._lock:
            rows = self._all()
        if date is not None:
            rows = [a for a in rows if a.date == date]
        return sort_for_listing(rows)
