# src/modules/appointments/appointments_controller.py
"""Appointments controller with API routes."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.database import get_db_session
from src.common.schemas import ApiResponse, PaginatedResponse
from src.common.utils.global_messages import GlobalMessages
from src.models.models import AppointmentState
from src.modules.procedures.schemas import ConvertToProcedureRequest

from . import appointments_service as service
from .schemas import (
    AppointmentCreateRequest, AppointmentResponse, AppointmentUpdateRequest, ConversionResponse
)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("/date/{day}", response_model=ApiResponse[List[AppointmentResponse]])
async def get_appointments_by_date(day: date, db: AsyncSession = Depends(get_db_session)):
    """Get the appointments of one calendar day."""
    return ApiResponse(data=await service.get_appointments_by_date(db, day))


@router.get("", response_model=PaginatedResponse[AppointmentResponse])
async def get_appointments(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    state: Optional[AppointmentState] = Query(None),
    patient_id: Optional[int] = Query(None, alias="patientId"),
    is_orthodontics: Optional[bool] = Query(None, alias="isOrthodontics"),
    db: AsyncSession = Depends(get_db_session)
):
    """Get appointments with optional date, state, patient and orthodontics filters."""
    return await service.list_appointments(
        db, page, limit, start_date, end_date, state, patient_id, is_orthodontics
    )


@router.get("/{appointment_id}", response_model=ApiResponse[AppointmentResponse])
async def get_appointment(appointment_id: int, db: AsyncSession = Depends(get_db_session)):
    """Get a single appointment by ID."""
    return ApiResponse(data=await service.get_appointment(db, appointment_id))


@router.post("", response_model=ApiResponse[AppointmentResponse], status_code=201)
async def create_appointment(request: AppointmentCreateRequest, db: AsyncSession = Depends(get_db_session)):
    """Schedule a new appointment."""
    appointment = await service.create_appointment(db, request)
    return ApiResponse(message=GlobalMessages.APPOINTMENT_CREATED, data=appointment)


@router.put("/{appointment_id}", response_model=ApiResponse[AppointmentResponse])
async def update_appointment(
    appointment_id: int,
    request: AppointmentUpdateRequest,
    db: AsyncSession = Depends(get_db_session)
):
    """Update appointment details or state."""
    appointment = await service.update_appointment(db, appointment_id, request)
    return ApiResponse(message=GlobalMessages.APPOINTMENT_UPDATED, data=appointment)


@router.delete("/{appointment_id}", response_model=ApiResponse[AppointmentResponse])
async def delete_appointment(appointment_id: int, db: AsyncSession = Depends(get_db_session)):
    """Delete an appointment."""
    appointment = await service.delete_appointment(db, appointment_id)
    return ApiResponse(message=GlobalMessages.APPOINTMENT_DELETED, data=appointment)


@router.post("/{appointment_id}/convert-to-procedure", response_model=ApiResponse[ConversionResponse])
async def convert_to_procedure(
    appointment_id: int,
    request: ConvertToProcedureRequest,
    db: AsyncSession = Depends(get_db_session)
):
    """Register the procedure performed in a completed appointment."""
    result = await service.convert_to_procedure(db, appointment_id, request)
    message = (
        GlobalMessages.ORTHODONTICS_REGISTERED
        if result.appointment.is_orthodontics
        else GlobalMessages.PROCEDURE_REGISTERED
    )
    return ApiResponse(message=message, data=result)
