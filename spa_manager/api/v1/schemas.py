from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from spa_manager.domain.entities.appointment import Appointment, AppointmentStatus, ServiceCategory
from spa_manager.domain.entities.availability import AvailabilityResult


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AvailabilitySchema(CamelModel):
    date: str
    available: bool
    reason: str | None = None
    available_times: list[str] = Field(default_factory=list, alias="availableTimes")
    booked_times: list[str] = Field(default_factory=list, alias="bookedTimes")
    all_slots: list[str] = Field(default_factory=list, alias="allSlots")

    @classmethod
    def from_result(cls, result: AvailabilityResult) -> "AvailabilitySchema":
        return cls(
            date=result.date,
            available=result.available,
            reason=result.reason,
            available_times=result.available_times,
            booked_times=result.booked_times,
            all_slots=result.all_slots,
        )


class CreateAppointmentSchema(BaseModel):
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)
    client: str = Field(min_length=1)
    category: ServiceCategory


class UpdateAppointmentSchema(BaseModel):
    category: ServiceCategory | None = None
    payment: Decimal | None = Field(default=None, ge=0)
    tip: Decimal | None = Field(default=None, ge=0)
    update_reason: str | None = None


class CompleteAppointmentSchema(BaseModel):
    tip: Decimal | None = Field(default=None, ge=0)


class CancelAppointmentSchema(BaseModel):
    update_reason: str | None = None


class AppointmentSchema(BaseModel):
    id: int
    date: str
    time: str
    client: str
    category: ServiceCategory
    payment: float
    tip: float
    status: AppointmentStatus
    update_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentSchema":
        return cls(
            id=appointment.id,
            date=appointment.date,
            time=appointment.time,
            client=appointment.client,
            category=appointment.category,
            payment=float(appointment.payment),
            tip=float(appointment.tip),
            status=appointment.status,
            update_reason=appointment.update_reason,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )


class InterpretRequestSchema(CamelModel):
    text: str
    year_hint: str | None = Field(default=None, alias="yearHint", pattern=r"^\d{4}$")


class CommandIntentSchema(CamelModel):
    type: str
    confidence: float
    client_name: str | None = Field(default=None, alias="clientName")
    time: str | None = None
    date: str | None = None
    year: str | None = None


class ChatMessageRequestSchema(CamelModel):
    text: str
    session_id: str | None = Field(default=None, alias="sessionId")
    year_hint: str | None = Field(default=None, alias="yearHint", pattern=r"^\d{4}$")


class ChatReplySchema(CamelModel):
    session_id: str = Field(alias="sessionId")
    action: str
    text: str
    intent: CommandIntentSchema
    meta: dict[str, Any] = Field(default_factory=dict)
