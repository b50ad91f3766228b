# src/modules/appointments/appointments_service.py
"""Appointments service for business logic."""

import logging
import math
from datetime import date, datetime, time
from typing import List, Optional

from sqlalchemy import select, asc
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.gateway import TableGateway
from src.common.schemas import PaginatedResponse
from src.common.utils.exceptions import (
    ConflictError, InvalidStateError, NotFoundError, ValidationError
)
from src.common.utils.global_messages import GlobalMessages
from src.models.models import MAX_MONEY, Appointment, AppointmentState, Patient, Procedure
from src.modules.patients.patients_service import get_patient_row
from src.modules.procedures.procedures_service import build_procedure_response, is_converted
from src.modules.procedures.schemas import ConvertToProcedureRequest

from .schemas import (
    AppointmentCreateRequest, AppointmentResponse, AppointmentUpdateRequest, ConversionResponse
)

log = logging.getLogger(__name__)

# Forward-only moves; completed, cancelled and no_show are terminal
ALLOWED_TRANSITIONS = {
    AppointmentState.SCHEDULED: {
        AppointmentState.CONFIRMED, AppointmentState.COMPLETED,
        AppointmentState.CANCELLED, AppointmentState.NO_SHOW,
    },
    AppointmentState.CONFIRMED: {
        AppointmentState.COMPLETED, AppointmentState.CANCELLED, AppointmentState.NO_SHOW,
    },
    AppointmentState.COMPLETED: set(),
    AppointmentState.CANCELLED: set(),
    AppointmentState.NO_SHOW: set(),
}


def can_transition(current: AppointmentState, target: AppointmentState) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


def _build_appointment_response(
    appointment: Appointment,
    patient: Optional[Patient] = None,
    include_email: bool = False
) -> AppointmentResponse:
    """Build appointment response with the patient's flattened fields."""
    return AppointmentResponse(
        id=appointment.id,
        patient_id=appointment.patient_id,
        appointment_date=appointment.appointment_date,
        query_type=appointment.query_type,
        is_orthodontics=appointment.is_orthodontics,
        observations=appointment.observations,
        state=appointment.state,
        patient_name=patient.full_name if patient else None,
        patient_identification=patient.identification if patient else None,
        patient_phone=patient.number_phone if patient else None,
        patient_email=patient.email if patient and include_email else None,
    )


def _with_patient():
    return select(Appointment, Patient).join(Patient, Appointment.patient_id == Patient.id)


async def list_appointments(
    session: AsyncSession,
    page: int = 1,
    limit: int = 20,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    state: Optional[AppointmentState] = None,
    patient_id: Optional[int] = None,
    is_orthodontics: Optional[bool] = None
) -> PaginatedResponse[AppointmentResponse]:
    """List appointments in calendar order with optional filters."""
    conditions = []
    if start_date:
        conditions.append(Appointment.appointment_date >= datetime.combine(start_date, time.min))
    if end_date:
        conditions.append(Appointment.appointment_date <= datetime.combine(end_date, time.max))
    if state is not None:
        conditions.append(Appointment.state == state)
    if patient_id is not None:
        conditions.append(Appointment.patient_id == patient_id)
    if is_orthodontics is not None:
        conditions.append(Appointment.is_orthodontics == is_orthodontics)

    query = _with_patient().order_by(asc(Appointment.appointment_date), asc(Appointment.id))
    result = await TableGateway(session, Appointment).paginate(query, conditions, page, limit)

    return PaginatedResponse[AppointmentResponse].from_page(
        result, [_build_appointment_response(apt, patient) for apt, patient in result.items]
    )


async def get_appointments_by_date(session: AsyncSession, day: date) -> List[AppointmentResponse]:
    """Appointments of one calendar day."""
    rows = await TableGateway(session, Appointment).fetch_all(
        _with_patient()
        .where(
            Appointment.appointment_date >= datetime.combine(day, time.min),
            Appointment.appointment_date <= datetime.combine(day, time.max),
        )
        .order_by(asc(Appointment.appointment_date), asc(Appointment.id))
    )
    return [_build_appointment_response(apt, patient) for apt, patient in rows]


async def get_appointment_row(session: AsyncSession, appointment_id: int) -> Appointment:
    appointment = await TableGateway(session, Appointment).get(appointment_id)
    if not appointment:
        raise NotFoundError(GlobalMessages.APPOINTMENT_NOT_FOUND)
    return appointment


async def get_appointment(session: AsyncSession, appointment_id: int) -> AppointmentResponse:
    """Get a single appointment by ID."""
    row = await TableGateway(session, Appointment).fetch_one(
        _with_patient().where(Appointment.id == appointment_id)
    )
    if not row:
        raise NotFoundError(GlobalMessages.APPOINTMENT_NOT_FOUND)
    appointment, patient = row
    return _build_appointment_response(appointment, patient, include_email=True)


async def create_appointment(session: AsyncSession, request: AppointmentCreateRequest) -> AppointmentResponse:
    """Schedule a new appointment for an existing patient."""
    patient = await get_patient_row(session, request.patient_id)

    gateway = TableGateway(session, Appointment)
    appointment = await gateway.insert({**request.model_dump(), "state": AppointmentState.SCHEDULED})
    await gateway.commit()

    log.info("Appointment %s scheduled for patient %s", appointment.id, patient.id)
    return _build_appointment_response(appointment, patient)


async def update_appointment(
    session: AsyncSession,
    appointment_id: int,
    request: AppointmentUpdateRequest
) -> AppointmentResponse:
    """Update appointment details; state changes must follow the allowed transitions."""
    appointment = await get_appointment_row(session, appointment_id)
    values = request.model_dump(exclude_unset=True)

    target = values.get("state")
    if target is not None and not can_transition(appointment.state, target):
        raise InvalidStateError(GlobalMessages.APPOINTMENT_INVALID_TRANSITION.format(
            current=appointment.state.value, target=target.value
        ))

    if "patient_id" in values:
        await get_patient_row(session, values["patient_id"])

    gateway = TableGateway(session, Appointment)
    await gateway.update(appointment, values)
    await gateway.commit()
    return await get_appointment(session, appointment_id)


async def delete_appointment(session: AsyncSession, appointment_id: int) -> AppointmentResponse:
    """Delete an appointment and return it as it was."""
    deleted = await get_appointment(session, appointment_id)
    appointment = await get_appointment_row(session, appointment_id)

    gateway = TableGateway(session, Appointment)
    await gateway.delete(appointment)
    await gateway.commit()
    return deleted


def _missing_conversion_fields(request: ConvertToProcedureRequest) -> List[dict]:
    errors = []
    if not request.procedure_description:
        errors.append({"field": "procedure_description", "message": "Campo requerido"})
    if request.total_cost is None:
        errors.append({"field": "total_cost", "message": "Campo requerido"})
    elif not math.isfinite(request.total_cost) or request.total_cost <= 0:
        errors.append({"field": "total_cost", "message": "El costo debe ser mayor a cero"})
    elif request.total_cost >= MAX_MONEY:
        errors.append({"field": "total_cost", "message": "El costo excede el máximo permitido"})
    if request.payment_method is None:
        errors.append({"field": "payment_method", "message": "Campo requerido"})
    return errors


async def convert_to_procedure(
    session: AsyncSession,
    appointment_id: int,
    request: ConvertToProcedureRequest
) -> ConversionResponse:
    """Turn a completed appointment into a billable procedure.

    The procedure insert and the appointment update share one transaction:
    either both are committed or neither is.
    """
    appointment = await get_appointment_row(session, appointment_id)

    if appointment.state != AppointmentState.COMPLETED:
        raise InvalidStateError(GlobalMessages.APPOINTMENT_NOT_COMPLETED)

    errors = _missing_conversion_fields(request)
    if errors:
        raise ValidationError(GlobalMessages.CONVERSION_FIELDS_REQUIRED, details=errors)

    if await is_converted(session, appointment.id):
        raise ConflictError(GlobalMessages.APPOINTMENT_ALREADY_CONVERTED)

    patient = await get_patient_row(session, appointment.patient_id)

    procedures = TableGateway(session, Procedure)
    procedure = await procedures.insert({
        "appointment_id": appointment.id,
        "patient_id": appointment.patient_id,
        "procedure_date": appointment.appointment_date.date(),
        "procedure_description": request.procedure_description,
        "total_cost": request.total_cost,
        "payment_method": request.payment_method,
        "is_orthodontics": appointment.is_orthodontics,
        "observations": request.observations or appointment.observations,
    })
    await TableGateway(session, Appointment).update(appointment, {"state": AppointmentState.COMPLETED})
    await procedures.commit()

    log.info(
        "Appointment %s converted into procedure %s (orthodontics=%s)",
        appointment.id, procedure.id, appointment.is_orthodontics,
    )
    return ConversionResponse(
        appointment=_build_appointment_response(appointment, patient),
        procedure=build_procedure_response(procedure, patient, appointment),
    )
