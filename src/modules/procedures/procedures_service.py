# src/modules/procedures/procedures_service.py
"""Procedures service: CRUD, income split and income statistics."""

import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.gateway import TableGateway
from src.common.schemas import PaginatedResponse
from src.common.utils.exceptions import ConflictError, NotFoundError, ValidationError
from src.common.utils.global_functions import require_date_range, round_money
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Appointment, Patient, PaymentMethod, Procedure
from src.modules.patients.patients_service import get_patient_row

from .schemas import (
    IncomeStatsResponse, ProcedureCreateRequest, ProcedureResponse, ProcedureUpdateRequest
)

log = logging.getLogger(__name__)

# Orthodontic treatments are shared between the clinic and the orthodontist
CLINIC_SHARE = 0.4
DOCTOR_SHARE = 0.6


def compute_income_split(total_cost: float, is_orthodontics: bool) -> Tuple[float, float]:
    """Return ``(clinic_income, doctor_income)`` for one procedure."""
    total_cost = float(total_cost or 0)
    if is_orthodontics:
        return round_money(total_cost * CLINIC_SHARE), round_money(total_cost * DOCTOR_SHARE)
    return round_money(total_cost), 0.0


def _enriched_query():
    return (
        select(Procedure, Patient, Appointment)
        .join(Patient, Procedure.patient_id == Patient.id)
        .outerjoin(Appointment, Procedure.appointment_id == Appointment.id)
    )


def build_procedure_response(
    procedure: Procedure,
    patient: Optional[Patient] = None,
    appointment: Optional[Appointment] = None,
    include_email: bool = False
) -> ProcedureResponse:
    """Build procedure response with patient, originating appointment and income split."""
    clinic_income, doctor_income = compute_income_split(procedure.total_cost, procedure.is_orthodontics)

    return ProcedureResponse(
        id=procedure.id,
        appointment_id=procedure.appointment_id,
        patient_id=procedure.patient_id,
        procedure_date=procedure.procedure_date,
        procedure_description=procedure.procedure_description,
        total_cost=procedure.total_cost,
        payment_method=procedure.payment_method,
        is_orthodontics=procedure.is_orthodontics,
        observations=procedure.observations,
        creation_date=procedure.creation_date,
        clinic_income=clinic_income,
        doctor_income=doctor_income,
        patient_name=patient.full_name if patient else None,
        patient_identification=patient.identification if patient else None,
        patient_phone=patient.number_phone if patient else None,
        patient_email=patient.email if patient and include_email else None,
        original_query_type=appointment.query_type if appointment else None,
        original_appointment_date=appointment.appointment_date if appointment else None,
    )


async def list_procedures(
    session: AsyncSession,
    page: int = 1,
    limit: int = 20,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    patient_id: Optional[int] = None,
    is_orthodontics: Optional[bool] = None,
    payment_method: Optional[PaymentMethod] = None
) -> PaginatedResponse[ProcedureResponse]:
    """List procedures, newest first, with optional filters."""
    conditions = []
    if start_date:
        conditions.append(Procedure.procedure_date >= start_date)
    if end_date:
        conditions.append(Procedure.procedure_date <= end_date)
    if patient_id is not None:
        conditions.append(Procedure.patient_id == patient_id)
    if is_orthodontics is not None:
        conditions.append(Procedure.is_orthodontics == is_orthodontics)
    if payment_method is not None:
        conditions.append(Procedure.payment_method == payment_method)

    query = _enriched_query().order_by(desc(Procedure.procedure_date), desc(Procedure.id))
    result = await TableGateway(session, Procedure).paginate(query, conditions, page, limit)

    return PaginatedResponse[ProcedureResponse].from_page(
        result, [build_procedure_response(*row) for row in result.items]
    )


async def get_procedure_row(session: AsyncSession, procedure_id: int) -> Procedure:
    procedure = await TableGateway(session, Procedure).get(procedure_id)
    if not procedure:
        raise NotFoundError(GlobalMessages.PROCEDURE_NOT_FOUND)
    return procedure


async def get_procedure(session: AsyncSession, procedure_id: int) -> ProcedureResponse:
    """Get a single procedure by ID."""
    row = await TableGateway(session, Procedure).fetch_one(
        _enriched_query().where(Procedure.id == procedure_id)
    )
    if not row:
        raise NotFoundError(GlobalMessages.PROCEDURE_NOT_FOUND)
    return build_procedure_response(*row, include_email=True)


async def get_patient_procedures(session: AsyncSession, patient_id: int) -> List[ProcedureResponse]:
    """Every procedure of a patient, newest first."""
    rows = await TableGateway(session, Procedure).fetch_all(
        _enriched_query()
        .where(Procedure.patient_id == patient_id)
        .order_by(desc(Procedure.procedure_date), desc(Procedure.id))
    )
    return [build_procedure_response(*row) for row in rows]


async def is_converted(session: AsyncSession, appointment_id: int) -> bool:
    """Whether a procedure already originates from this appointment."""
    return await TableGateway(session, Procedure).exists(Procedure.appointment_id == appointment_id)


async def create_procedure(session: AsyncSession, request: ProcedureCreateRequest) -> ProcedureResponse:
    """Register a procedure; a referenced appointment supplies the orthodontics flag."""
    patient = await get_patient_row(session, request.patient_id)

    values = request.model_dump()
    values["procedure_date"] = request.procedure_date or date.today()

    appointment = None
    if request.appointment_id is not None:
        appointment = await TableGateway(session, Appointment).get(request.appointment_id)
        if not appointment:
            raise NotFoundError(GlobalMessages.APPOINTMENT_NOT_FOUND)
        if appointment.patient_id != patient.id:
            raise ValidationError(GlobalMessages.PROCEDURE_APPOINTMENT_OTHER_PATIENT)
        if await is_converted(session, appointment.id):
            raise ConflictError(GlobalMessages.APPOINTMENT_ALREADY_CONVERTED)
        values["is_orthodontics"] = appointment.is_orthodontics

    gateway = TableGateway(session, Procedure)
    procedure = await gateway.insert(values)
    await gateway.commit()

    log.info("Procedure %s registered for patient %s", procedure.id, patient.id)
    return build_procedure_response(procedure, patient, appointment)


async def update_procedure(
    session: AsyncSession,
    procedure_id: int,
    request: ProcedureUpdateRequest
) -> ProcedureResponse:
    """Update procedure details."""
    procedure = await get_procedure_row(session, procedure_id)
    values = request.model_dump(exclude_unset=True)

    # A converted appointment fixes the orthodontics flag
    flag = values.get("is_orthodontics")
    if procedure.appointment_id is not None and flag is not None and flag != procedure.is_orthodontics:
        raise ValidationError(GlobalMessages.PROCEDURE_FLAG_FROM_APPOINTMENT)

    gateway = TableGateway(session, Procedure)
    await gateway.update(procedure, values)
    await gateway.commit()
    return await get_procedure(session, procedure_id)


async def delete_procedure(session: AsyncSession, procedure_id: int) -> ProcedureResponse:
    """Delete a procedure and return it as it was."""
    deleted = await get_procedure(session, procedure_id)
    procedure = await get_procedure_row(session, procedure_id)

    gateway = TableGateway(session, Procedure)
    await gateway.delete(procedure)
    await gateway.commit()
    return deleted


async def count_procedures(session: AsyncSession) -> int:
    return await TableGateway(session, Procedure).count()


async def get_income_stats(
    session: AsyncSession,
    start_date: Optional[date],
    end_date: Optional[date]
) -> IncomeStatsResponse:
    """Aggregate procedure income for ``[start_date, end_date]`` inclusive."""
    start_date, end_date = require_date_range(start_date, end_date)

    query = (
        select(Procedure.is_orthodontics, func.coalesce(func.sum(Procedure.total_cost), 0), func.count())
        .where(Procedure.procedure_date >= start_date, Procedure.procedure_date <= end_date)
        .group_by(Procedure.is_orthodontics)
    )
    rows = await TableGateway(session, Procedure).fetch_all(query)

    totals = {True: (0.0, 0), False: (0.0, 0)}
    for is_orthodontics, amount, count in rows:
        totals[bool(is_orthodontics)] = (float(amount or 0), count)

    total_ortho, ortho_count = totals[True]
    total_general, general_count = totals[False]

    return IncomeStatsResponse(
        total_income=round_money(total_general + total_ortho),
        general_income=round_money(total_general),
        orthodontics_income=round_money(total_ortho),
        clinic_income=round_money(total_general + total_ortho * CLINIC_SHARE),
        doctor_income=round_money(total_ortho * DOCTOR_SHARE),
        total_procedures=ortho_count + general_count,
        orthodontics_count=ortho_count,
        general_count=general_count,
    )
