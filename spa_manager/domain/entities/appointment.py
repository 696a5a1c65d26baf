from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ServiceCategory(str, Enum):
    FACIAL = "Facial"
    MASSAGE = "Massage"
    FACIAL_MASSAGE = "Facial + Massage"

    @property
    def price(self) -> Decimal:
        return CATEGORY_PRICES[self]


CATEGORY_PRICES: dict[ServiceCategory, Decimal] = {
    ServiceCategory.FACIAL: Decimal("100.00"),
    ServiceCategory.MASSAGE: Decimal("120.00"),
    ServiceCategory.FACIAL_MASSAGE: Decimal("200.00"),
}


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class NewAppointment:
    date: str  # YYYY-MM-DD
    time: str  # h:mm AM/PM
    client: str
    category: ServiceCategory
    payment: Decimal
    tip: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class Appointment:
    id: int
    date: str  # YYYY-MM-DD
    time: str  # h:mm AM/PM
    client: str
    category: ServiceCategory
    payment: Decimal
    tip: Decimal = Decimal("0.00")
    status: AppointmentStatus = AppointmentStatus.PENDING
    update_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        """Active appointments take part in conflict checks."""
        return self.status != AppointmentStatus.CANCELLED
