# src/modules/patients/patients_service.py
"""Patients service for business logic."""

from typing import Optional

from sqlalchemy import select, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.gateway import TableGateway
from src.common.schemas import PaginatedResponse
from src.common.utils.exceptions import ConflictError, NotFoundError
from src.common.utils.global_messages import GlobalMessages
from src.models.models import Appointment, Patient

from .schemas import PatientCreateRequest, PatientResponse, PatientUpdateRequest


async def list_patients(
    session: AsyncSession,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None
) -> PaginatedResponse[PatientResponse]:
    """List patients, newest first, optionally matching name or identification."""
    gateway = TableGateway(session, Patient)

    conditions = []
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        conditions.append(or_(
            Patient.first_name.ilike(pattern),
            Patient.first_last_name.ilike(pattern),
            Patient.identification.ilike(pattern),
        ))

    query = select(Patient).order_by(desc(Patient.creation_date), desc(Patient.id))
    result = await gateway.paginate(query, conditions, page, limit)

    return PaginatedResponse[PatientResponse].from_page(
        result, [PatientResponse.model_validate(p) for p in result.items]
    )


async def get_patient_row(session: AsyncSession, patient_id: int) -> Patient:
    patient = await TableGateway(session, Patient).get(patient_id)
    if not patient:
        raise NotFoundError(GlobalMessages.PATIENT_NOT_FOUND)
    return patient


async def get_patient(session: AsyncSession, patient_id: int) -> PatientResponse:
    """Get a single patient by ID."""
    return PatientResponse.model_validate(await get_patient_row(session, patient_id))


async def find_by_identification(session: AsyncSession, identification: str) -> Optional[Patient]:
    gateway = TableGateway(session, Patient)
    return await gateway.fetch_one(select(Patient).where(Patient.identification == identification))


async def create_patient(session: AsyncSession, request: PatientCreateRequest) -> PatientResponse:
    """Register a patient; identification must be unique."""
    if await find_by_identification(session, request.identification):
        raise ConflictError(GlobalMessages.PATIENT_DUPLICATE_IDENTIFICATION)

    gateway = TableGateway(session, Patient)
    patient = await gateway.insert(request.model_dump())
    await gateway.commit()
    return PatientResponse.model_validate(patient)


async def update_patient(
    session: AsyncSession,
    patient_id: int,
    request: PatientUpdateRequest
) -> PatientResponse:
    """Update the fields present in the request."""
    patient = await get_patient_row(session, patient_id)
    values = request.model_dump(exclude_unset=True)

    identification = values.get("identification")
    if identification and identification != patient.identification:
        owner = await find_by_identification(session, identification)
        if owner and owner.id != patient.id:
            raise ConflictError(GlobalMessages.PATIENT_DUPLICATE_IDENTIFICATION)

    gateway = TableGateway(session, Patient)
    patient = await gateway.update(patient, values)
    await gateway.commit()
    return PatientResponse.model_validate(patient)


async def delete_patient(session: AsyncSession, patient_id: int) -> PatientResponse:
    """Delete a patient that has no appointments."""
    patient = await get_patient_row(session, patient_id)

    if await TableGateway(session, Appointment).exists(Appointment.patient_id == patient.id):
        raise ConflictError(GlobalMessages.PATIENT_HAS_APPOINTMENTS)

    deleted = PatientResponse.model_validate(patient)
    gateway = TableGateway(session, Patient)
    await gateway.delete(patient)
    await gateway.commit()
    return deleted
