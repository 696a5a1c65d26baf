from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from spa_manager.api.v1.schemas import (
    AppointmentSchema,
    AvailabilitySchema,
    CancelAppointmentSchema,
    CompleteAppointmentSchema,
    CreateAppointmentSchema,
    UpdateAppointmentSchema,
)
from spa_manager.application.exceptions import (
    AppointmentNotFound,
    AppointmentStateError,
    BookingRejected,
    ParseError,
    StoreError,
    ValidationFailed,
)
from spa_manager.application.use_cases.booking import BookingUseCase
from spa_manager.wiring.dependencies import get_booking_use_case

router = APIRouter(prefix="/api/appointments")
logger = logging.getLogger(__name__)

PARSE_FAILED_MESSAGE = (
    "There is something wrong with your request. Can you double-check and make the request again?"
)


def _store_failure(action: str, error: StoreError) -> HTTPException:
    logger.error("Store failure", extra={"reason": f"{action}: {error}"})
    return HTTPException(status_code=500, detail={"error": f"Failed to {action}"})


@router.get("", response_model=list[AppointmentSchema])
def list_appointments(
    date: str | None = Query(None),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        return [AppointmentSchema.from_entity(a) for a in uc.list_appointments(date)]
    except StoreError as e:
        raise _store_failure("fetch appointments", e)


@router.get("/available-times/{date}", response_model=AvailabilitySchema)
def available_times(date: str, uc: BookingUseCase = Depends(get_booking_use_case)):
    try:
        result = uc.get_availability(date)
    except StoreError as e:
        raise _store_failure("fetch available times", e)
    return AvailabilitySchema.from_result(result)


@router.get("/search", response_model=list[AppointmentSchema])
def search_appointments(
    client_name: str = Query(..., alias="clientName", min_length=1),
    time: str = Query(..., min_length=1),
    date: str = Query(..., min_length=1),
    year: str | None = Query(None, pattern=r"^\d{4}$"),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        rows = uc.search_open_appointments(client_name, time, date, year)
    except ParseError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "parsing_failed",
                "message": PARSE_FAILED_MESSAGE,
                "originalInput": e.original_input,
            },
        )
    except StoreError as e:
        raise _store_failure("search appointments", e)
    return [AppointmentSchema.from_entity(a) for a in rows]


@router.post("", response_model=AppointmentSchema, status_code=201)
def create_appointment(
    req: CreateAppointmentSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        appointment = uc.create_appointment(req.date, req.time, req.client, req.category)
    except BookingRejected as e:
        raise HTTPException(status_code=400, detail={"error": e.code, "reason": e.reason})
    except ParseError as e:
        raise HTTPException(
            status_code=400,
            detail={"error": "invalid_time", "reason": str(e), "originalInput": e.original_input},
        )
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail={"error": "validation_failed", "reason": str(e)})
    except StoreError as e:
        raise _store_failure("create appointment", e)
    return AppointmentSchema.from_entity(appointment)


@router.put("/{appointment_id}", response_model=AppointmentSchema)
def update_appointment(
    appointment_id: int,
    req: UpdateAppointmentSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        appointment = uc.update_appointment(
            appointment_id,
            category=req.category,
            payment=req.payment,
            tip=req.tip,
            update_reason=req.update_reason,
        )
    except AppointmentNotFound as e:
        raise HTTPException(status_code=404, detail={"error": "not_found", "reason": str(e)})
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail={"error": "validation_failed", "reason": str(e)})
    except StoreError as e:
        raise _store_failure("update appointment", e)
    return AppointmentSchema.from_entity(appointment)


@router.patch("/{appointment_id}/complete", response_model=AppointmentSchema)
def complete_appointment(
    appointment_id: int,
    req: CompleteAppointmentSchema | None = None,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        appointment = uc.complete_appointment(appointment_id, tip=req.tip if req else None)
    except AppointmentNotFound as e:
        raise HTTPException(status_code=404, detail={"error": "not_found", "reason": str(e)})
    except (AppointmentStateError, ValidationFailed) as e:
        raise HTTPException(status_code=400, detail={"error": "invalid_state", "reason": str(e)})
    except StoreError as e:
        raise _store_failure("complete appointment", e)
    return AppointmentSchema.from_entity(appointment)


@router.delete("/{appointment_id}", response_model=AppointmentSchema)
def cancel_appointment(
    appointment_id: int,
    req: CancelAppointmentSchema | None = None,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    reason = (req.update_reason if req else None) or "Cancelled by user"
    try:
        appointment = uc.cancel_appointment(appointment_id, reason)
    except AppointmentNotFound as e:
        raise HTTPException(status_code=404, detail={"error": "not_found", "reason": str(e)})
    except (AppointmentStateError, ValidationFailed) as e:
        raise HTTPException(status_code=400, detail={"error": "invalid_state", "reason": str(e)})
    except StoreError as e:
        raise _store_failure("cancel appointment", e)
    return AppointmentSchema.from_entity(appointment)
